# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
JPEG file modifier

This module transplants the EXIF segment of one JPEG file into another.
The segment bytes are copied verbatim and the destination's compressed
image data is left untouched; nothing is decoded or re-encoded.

Copyright 2025 DNAi inc.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from exifgraft.config import ExifOptions, resolve_options
from exifgraft.exceptions import ExifGraftError, NoExifError
from exifgraft.file_io import read_file, write_file
from exifgraft.jpeg_markers import EXIF, EXIF_SIGNATURE, SOI_BYTES
from exifgraft.jpeg_scanner import SegmentDescriptor, locate_exif_segment, scan_markers

logger = logging.getLogger(__name__)


def extract_exif_segment(file_data: bytes) -> bytes:
    """
    Return the first EXIF APP1 segment, marker and length included.

    Raises:
        NoJpegError: If the data is not a JPEG stream
        NoExifError: If there is no APP1 segment with an Exif header
        CorruptExifError: If the segment length is invalid
    """
    start, length = locate_exif_segment(file_data)
    segment = bytes(file_data[start:start + length])
    if segment[4:10] != EXIF_SIGNATURE:
        raise NoExifError(f"APP1 segment at offset {start} does not carry an Exif header")
    return segment


class JPEGModifier:
    """
    Rewrites the metadata framing of a JPEG file.

    The file is scanned once on construction; the modification methods
    return new file data and never alter the original.
    """

    def __init__(self, file_data: bytes, require_eoi: bool = False):
        """
        Initialize JPEG modifier.

        Args:
            file_data: Original JPEG file data
            require_eoi: Refuse data that does not end with EOI

        Raises:
            NoJpegError: If the data is not a JPEG stream
            CorruptExifError: If a segment length runs past the data
        """
        self.file_data = file_data
        self.segments = scan_markers(file_data, require_eoi=require_eoi).segments

    def find_exif_segment(self) -> Optional[SegmentDescriptor]:
        """Return the first APP1 segment carrying an Exif header, if any."""
        for segment in self.segments:
            if segment.marker != EXIF:
                continue
            header = self.file_data[segment.offset + 4:segment.offset + 10]
            if header == EXIF_SIGNATURE:
                return segment
        return None

    def replace_exif_segment(self, new_exif_segment: bytes) -> bytes:
        """
        Put an EXIF segment directly after SOI.

        An existing EXIF segment is removed; XMP and other APP1 segments
        are kept in place.

        Args:
            new_exif_segment: Complete APP1 segment, marker and length included

        Returns:
            Modified JPEG file data
        """
        old_segment = self.find_exif_segment()

        new_data = bytearray(SOI_BYTES)
        new_data.extend(new_exif_segment)
        if old_segment is None:
            new_data.extend(self.file_data[2:])
        else:
            logger.debug(
                "Replacing EXIF segment at offset %d (%d bytes)",
                old_segment.offset, old_segment.size,
            )
            new_data.extend(self.file_data[2:old_segment.offset])
            new_data.extend(self.file_data[old_segment.end:])
        return bytes(new_data)


def graft_exif_segment(
    source_data: bytes, dest_data: bytes, options: Optional[ExifOptions] = None
) -> bytes:
    """
    Build a copy of dest_data carrying the EXIF segment of source_data.

    Returns:
        SOI + source EXIF segment + destination after its SOI, with the
        destination's own EXIF segment removed

    Raises:
        ExifGraftError: If either buffer is unusable
    """
    options = resolve_options(options)
    segment = extract_exif_segment(source_data)
    return JPEGModifier(dest_data, require_eoi=options.require_eoi).replace_exif_segment(segment)


def transplant_exif(
    source_path: Union[str, Path],
    dest_path: Union[str, Path],
    options: Optional[ExifOptions] = None,
) -> None:
    """
    Copy the EXIF segment of one JPEG file into another.

    The destination is only written once both files have been read and
    the new contents are complete.

    Raises:
        ExifGraftError: One of its subclasses describing the failure
    """
    options = resolve_options(options)
    source_data = read_file(source_path, options.max_file_size)
    segment = extract_exif_segment(source_data)
    dest_data = read_file(dest_path, options.max_file_size)

    new_data = JPEGModifier(dest_data, require_eoi=options.require_eoi).replace_exif_segment(segment)
    write_file(dest_path, new_data, atomic=options.atomic_write)
    logger.info("Copied %d-byte EXIF segment from %s to %s", len(segment), source_path, dest_path)


def copy_exif(
    source_path: Union[str, Path],
    dest_path: Union[str, Path],
    options: Optional[ExifOptions] = None,
) -> bool:
    """
    Copy the EXIF segment of one JPEG file into another.

    Returns:
        True on success, False if nothing was written

    Example:
        >>> if copy_exif('original.jpg', 'resized.jpg'):
        ...     print("EXIF restored")
    """
    try:
        transplant_exif(source_path, dest_path, options)
    except ExifGraftError as e:
        logger.warning("EXIF copy from %s to %s failed: %s", source_path, dest_path, e)
        return False
    return True
