# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
JPEG marker scanner

This module walks a JPEG byte stream to find its marker segments and
locates the APP1 segment that carries EXIF data. Pixel data is never
decoded; only the marker framing is examined.

Copyright 2025 DNAi inc.
"""

import logging
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Tuple

from exifgraft import jpeg_markers as markers
from exifgraft.byte_decoder import ByteAlignment, read_u16
from exifgraft.exceptions import CorruptExifError, NoExifError, NoJpegError

logger = logging.getLogger(__name__)

# Smallest APP1 length that can hold the length field, "Exif\0\0" and an
# 8-byte TIFF header
MIN_EXIF_SEGMENT_LENGTH = 16


class SegmentDescriptor(NamedTuple):
    """One marker segment found by the scanner"""
    signature: int
    marker: int
    offset: int
    size: int

    @property
    def name(self) -> str:
        return markers.describe_marker(self.marker).name

    @property
    def end(self) -> int:
        return self.offset + self.size


@dataclass
class ScanResult:
    """Segments found in one buffer, in file order."""
    segments: List[SegmentDescriptor] = field(default_factory=list)
    exif_offset: Optional[int] = None
    exif_data: bytes = b''

    @property
    def has_exif(self) -> bool:
        return self.exif_offset is not None

    def find_segments(self, marker: int) -> List[SegmentDescriptor]:
        return [segment for segment in self.segments if segment.marker == marker]


def check_jpeg_framing(data: bytes, require_eoi: bool) -> None:
    if len(data) < 4:
        raise NoJpegError(f"Buffer too short for a JPEG stream ({len(data)} bytes)")
    if data[:2] != markers.SOI_BYTES:
        raise NoJpegError("Invalid JPEG file: missing SOI marker")
    if require_eoi and data[-2:] != markers.EOI_BYTES:
        raise NoJpegError("Invalid JPEG file: missing EOI marker")


def scan_markers(data: bytes, require_eoi: bool = True) -> ScanResult:
    """
    Find all marker segments in a JPEG buffer.

    The buffer is walked byte by byte looking for 0xFF followed by a
    segment marker. Every marker other than SOI, EOI, TEM and RST0-RST7
    carries a length, whether or not it is in the registry, and its
    segment is stepped over as a whole so that marker-like bytes in the
    payload (an EXIF thumbnail, an ICC profile) are not reported.
    Scanning stops at EOI.

    Args:
        data: Complete JPEG file contents
        require_eoi: Reject buffers that do not end with an EOI marker

    Returns:
        ScanResult with the segment list and the first EXIF segment

    Raises:
        NoJpegError: If the SOI (or required EOI) framing is missing
        CorruptExifError: If a segment length runs past the buffer
    """
    check_jpeg_framing(data, require_eoi)

    result = ScanResult()
    size = len(data)
    offset = 0

    while offset < size - 1:
        if not markers.is_marker_pair(data, offset):
            offset += 1
            continue

        descriptor = markers.describe_marker(data[offset + 1])
        if descriptor.has_length:
            # Length is always big-endian and covers itself, not the marker
            segment_size = read_u16(data, offset + 2, ByteAlignment.MOTOROLA) + 2
            if offset + segment_size > size:
                raise CorruptExifError(
                    f"{descriptor.name} segment at offset {offset} declares "
                    f"{segment_size} bytes but only {size - offset} remain"
                )
        else:
            segment_size = 2

        result.segments.append(
            SegmentDescriptor(data[offset], descriptor.marker, offset, segment_size)
        )

        if descriptor.marker == markers.EXIF and result.exif_offset is None:
            result.exif_offset = offset
            result.exif_data = bytes(data[offset:offset + segment_size])
            logger.debug("EXIF segment at offset %d (%d bytes)", offset, segment_size)

        if descriptor.marker == markers.EOI:
            break
        offset += segment_size

    logger.debug("Scanned %d marker segments", len(result.segments))
    return result


def locate_exif_segment(data: bytes) -> Tuple[int, int]:
    """
    Find the first APP1 (0xFFE1) segment and validate its length.

    The EOI marker is not required here; only the start of the file and
    the segment itself are checked.

    Args:
        data: Complete JPEG file contents

    Returns:
        Tuple of (segment start, segment length including the marker)

    Raises:
        NoJpegError: If the buffer is too short or lacks SOI
        NoExifError: If no APP1 marker is present
        CorruptExifError: If the declared length is too small or overruns
    """
    check_jpeg_framing(data, require_eoi=False)

    start = data.find(markers.EXIF_BYTES)
    if start < 0:
        raise NoExifError("No EXIF (APP1) marker found")

    size = len(data)
    if start + 4 > size:
        raise CorruptExifError(f"APP1 marker at offset {start} has no length field")

    declared_length = read_u16(data, start + 2, ByteAlignment.MOTOROLA)
    if declared_length < MIN_EXIF_SEGMENT_LENGTH:
        raise CorruptExifError(
            f"APP1 length {declared_length} is too small to hold a TIFF header"
        )
    if start + 4 + declared_length > size:
        raise CorruptExifError(
            f"APP1 length {declared_length} at offset {start} exceeds buffer of {size} bytes"
        )

    logger.debug("Located APP1 at offset %d, length %d", start, declared_length)
    return start, declared_length + 2
