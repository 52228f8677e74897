# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
exifgraft - Pure Python EXIF reader and transplanter for JPEG files

Decodes the common EXIF fields (camera, exposure, orientation, GPS) by
reading the JPEG marker framing and TIFF directories directly, and copies
EXIF segments between JPEG files without touching image data.

Copyright 2025 DNAi inc.
"""

__version__ = "0.1.0"
__author__ = "DNAi inc."

from exifgraft.byte_decoder import ByteAlignment, read_rational, read_u16, read_u32
from exifgraft.config import ExifOptions
from exifgraft.exceptions import (
    CorruptExifError,
    ExifGraftError,
    FileAccessError,
    NoExifError,
    NoJpegError,
    ParseStatus,
    UnknownByteAlignmentError,
)
from exifgraft.exif_info import ExifInfo, GeoCoordinate, GeoLocation, Orientation
from exifgraft.exif_parser import ExifParser, parse_exif_data, read_orientation
from exifgraft.ifd_parser import DirectoryEntry, IFDParser, TiffFormat
from exifgraft.jpeg_markers import MARKERS, MarkerDescriptor
from exifgraft.jpeg_modifier import (
    JPEGModifier,
    copy_exif,
    extract_exif_segment,
    graft_exif_segment,
    transplant_exif,
)
from exifgraft.jpeg_scanner import ScanResult, SegmentDescriptor, locate_exif_segment, scan_markers

__all__ = [
    "ByteAlignment",
    "read_u16",
    "read_u32",
    "read_rational",
    "ExifOptions",
    "ExifGraftError",
    "NoJpegError",
    "NoExifError",
    "UnknownByteAlignmentError",
    "CorruptExifError",
    "FileAccessError",
    "ParseStatus",
    "ExifInfo",
    "GeoCoordinate",
    "GeoLocation",
    "Orientation",
    "ExifParser",
    "parse_exif_data",
    "read_orientation",
    "DirectoryEntry",
    "IFDParser",
    "TiffFormat",
    "MARKERS",
    "MarkerDescriptor",
    "JPEGModifier",
    "copy_exif",
    "extract_exif_segment",
    "graft_exif_segment",
    "transplant_exif",
    "ScanResult",
    "SegmentDescriptor",
    "locate_exif_segment",
    "scan_markers",
]
