# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TIFF Image File Directory parser

An IFD is a 16-bit entry count followed by that many 12-byte entries:

    2 bytes: tag number
    2 bytes: data format
    4 bytes: number of components
    4 bytes: data value, or offset to the data value

and a trailing 4-byte offset to the next IFD. Offsets stored in entries
are relative to the start of the TIFF header.

Copyright 2025 DNAi inc.
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, List, Optional

from exifgraft.byte_decoder import ByteAlignment, read_rational, read_u16, read_u32
from exifgraft.exceptions import CorruptExifError

logger = logging.getLogger(__name__)


class TiffFormat(IntEnum):
    """TIFF field formats understood by the parser"""
    BYTE = 1
    STRING = 2  # ASCII
    SHORT = 3
    LONG = 4
    RATIONAL = 5
    SRATIONAL = 10
    IFD = 13  # sub-IFD pointer, decoded like LONG


# Tag value assigned to entries whose format code is not understood
INVALID_TAG = 0xFF

ENTRY_SIZE = 12


@dataclass
class DirectoryEntry:
    """One decoded IFD entry"""
    tag: int
    format: int
    component_count: int
    value_or_offset: int
    offset: int
    value: Any = None

    @property
    def is_valid(self) -> bool:
        return self.tag != INVALID_TAG

    def has_format(self, *formats: TiffFormat) -> bool:
        return self.format in formats


def _decode_text(raw: bytes) -> str:
    try:
        return raw.decode('utf-8')
    except UnicodeDecodeError:
        return raw.decode('latin-1')


class IFDParser:
    """
    Walks IFDs inside one EXIF payload.

    The parser holds the buffer, the byte alignment declared by the TIFF
    header and the absolute offset of that header. It is created once
    per parse and never shared.
    """

    def __init__(self, file_data: bytes, alignment: ByteAlignment, base_offset: int):
        """
        Args:
            file_data: Buffer containing the TIFF structure
            alignment: Byte order taken from the TIFF header
            base_offset: Absolute offset of the TIFF header in file_data
        """
        self.file_data = file_data
        self.alignment = alignment
        self.base_offset = base_offset

    def parse_ifd(self, ifd_offset: int) -> List[DirectoryEntry]:
        """
        Decode every entry of the IFD at an absolute offset.

        Args:
            ifd_offset: Absolute offset of the IFD's entry count

        Returns:
            Entries in directory order. Entries with an unknown format
            have tag INVALID_TAG.

        Raises:
            CorruptExifError: If the directory (count, entries and
                next-IFD pointer) does not fit in the buffer
        """
        length = len(self.file_data)
        if ifd_offset < 0 or ifd_offset + 2 > length:
            raise CorruptExifError(f"IFD offset {ifd_offset} is outside the buffer")

        num_entries = read_u16(self.file_data, ifd_offset, self.alignment)
        if ifd_offset + 6 + ENTRY_SIZE * num_entries > length:
            raise CorruptExifError(
                f"IFD at offset {ifd_offset} with {num_entries} entries overruns buffer of {length} bytes"
            )

        logger.debug("IFD at offset %d: %d entries", ifd_offset, num_entries)
        entry_offset = ifd_offset + 2
        entries = []
        for _ in range(num_entries):
            entries.append(self.parse_entry(entry_offset))
            entry_offset += ENTRY_SIZE
        return entries

    def parse_entry(self, entry_offset: int) -> DirectoryEntry:
        """Decode the 12-byte entry at an absolute offset."""
        data = self.file_data
        entry = DirectoryEntry(
            tag=read_u16(data, entry_offset, self.alignment),
            format=read_u16(data, entry_offset + 2, self.alignment),
            component_count=read_u32(data, entry_offset + 4, self.alignment),
            value_or_offset=read_u32(data, entry_offset + 8, self.alignment),
            offset=entry_offset,
        )
        inline_offset = entry_offset + 8

        if entry.format == TiffFormat.BYTE:
            entry.value = data[inline_offset]
        elif entry.format == TiffFormat.STRING:
            entry.value = self._read_string(entry, inline_offset)
        elif entry.format == TiffFormat.SHORT:
            entry.value = read_u16(data, inline_offset, self.alignment)
        elif entry.format in (TiffFormat.LONG, TiffFormat.IFD):
            entry.value = entry.value_or_offset
        elif entry.format in (TiffFormat.RATIONAL, TiffFormat.SRATIONAL):
            values = self.read_rationals(entry, 1)
            if values is not None:
                entry.value = values[0]
        else:
            entry.tag = INVALID_TAG
        return entry

    def read_rationals(self, entry: DirectoryEntry, count: int) -> Optional[List[float]]:
        """
        Read `count` consecutive rationals referenced by an entry.

        Returns:
            List of floats, or None if the values lie outside the buffer
        """
        start = self.base_offset + entry.value_or_offset
        if start + 8 * count > len(self.file_data):
            logger.debug("Rational data for tag 0x%04X at %d is out of range", entry.tag, start)
            return None
        signed = entry.format == TiffFormat.SRATIONAL
        return [
            read_rational(self.file_data, start + 8 * i, self.alignment, signed=signed)
            for i in range(count)
        ]

    def _read_string(self, entry: DirectoryEntry, inline_offset: int) -> str:
        count = entry.component_count
        if count <= 4:
            raw = self.file_data[inline_offset:inline_offset + count]
        else:
            start = self.base_offset + entry.value_or_offset
            if start + count > len(self.file_data):
                logger.debug("String data for tag 0x%04X at %d is out of range", entry.tag, start)
                return ''
            raw = self.file_data[start:start + count]

        # One NUL terminator, and one leading NUL, are dropped
        if len(raw) > 1 and raw[-1] == 0:
            raw = raw[:-1]
        if len(raw) > 0 and raw[0] == 0:
            raw = raw[1:]
        return _decode_text(bytes(raw))
