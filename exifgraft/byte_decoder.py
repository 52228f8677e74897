# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Endian-aware integer and rational decoding

Every multi-byte read performed while walking a JPEG or TIFF structure
goes through these helpers so that the bounds check is never skipped.

Copyright 2025 DNAi inc.
"""

import struct
from enum import IntEnum

from exifgraft.exceptions import CorruptExifError


class ByteAlignment(IntEnum):
    """TIFF byte order, as declared by the II/MM mark"""
    MOTOROLA = 0  # big-endian, "MM"
    INTEL = 1  # little-endian, "II"

    @property
    def struct_prefix(self) -> str:
        return '<' if self is ByteAlignment.INTEL else '>'

    @property
    def label(self) -> str:
        if self is ByteAlignment.INTEL:
            return 'Little-endian (Intel, II)'
        return 'Big-endian (Motorola, MM)'


# Denominators smaller than this are treated as zero
RATIONAL_EPSILON = 1e-20


def _check_bounds(buf: bytes, offset: int, width: int) -> None:
    if offset < 0 or offset + width > len(buf):
        raise CorruptExifError(
            f"Read of {width} bytes at offset {offset} exceeds buffer of {len(buf)} bytes"
        )


def read_u8(buf: bytes, offset: int) -> int:
    _check_bounds(buf, offset, 1)
    return buf[offset]


def read_u16(buf: bytes, offset: int, alignment: ByteAlignment) -> int:
    """
    Read an unsigned 16-bit integer.

    Args:
        buf: Source buffer
        offset: Absolute offset of the first byte
        alignment: Byte order to apply

    Returns:
        Decoded value

    Raises:
        CorruptExifError: If the read would run past the end of the buffer
    """
    _check_bounds(buf, offset, 2)
    return struct.unpack_from(f'{alignment.struct_prefix}H', buf, offset)[0]


def read_u32(buf: bytes, offset: int, alignment: ByteAlignment) -> int:
    """
    Read an unsigned 32-bit integer.

    Raises:
        CorruptExifError: If the read would run past the end of the buffer
    """
    _check_bounds(buf, offset, 4)
    return struct.unpack_from(f'{alignment.struct_prefix}I', buf, offset)[0]


def read_rational(buf: bytes, offset: int, alignment: ByteAlignment, signed: bool = False) -> float:
    """
    Read a numerator/denominator pair of 32-bit integers as a float.

    A zero denominator yields 0.0 instead of a division error.

    Args:
        buf: Source buffer
        offset: Absolute offset of the numerator
        alignment: Byte order to apply
        signed: Decode as SRATIONAL (two signed 32-bit integers)

    Raises:
        CorruptExifError: If the 8 bytes are not all inside the buffer
    """
    _check_bounds(buf, offset, 8)
    fmt = f'{alignment.struct_prefix}ii' if signed else f'{alignment.struct_prefix}II'
    numerator, denominator = struct.unpack_from(fmt, buf, offset)
    if abs(denominator) < RATIONAL_EPSILON:
        return 0.0
    return numerator / denominator
