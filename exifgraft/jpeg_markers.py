# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
JPEG marker registry

Read-only table of the JPEG markers the scanner names. A marker is the
second byte of a 0xFF-prefixed pair; all of them except SOI, EOI, TEM
and the restart markers are followed by a big-endian length field.

Copyright 2025 DNAi inc.
"""

from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional


class MarkerDescriptor(NamedTuple):
    """A recognised JPEG marker"""
    marker: int
    name: str
    has_length: bool


# Marker prefix byte
MAGIC = 0xFF

# Start Of Frame N; N indicates which compression process
SOF0 = 0xC0
SOF1 = 0xC1
SOF2 = 0xC2
SOF3 = 0xC3
DHT = 0xC4  # Define Huffman Table (C4 and CC are not SOF markers)
SOF5 = 0xC5
SOF6 = 0xC6
SOF7 = 0xC7
SOF9 = 0xC9
SOF10 = 0xCA
SOF11 = 0xCB
SOF13 = 0xCD
SOF14 = 0xCE
SOF15 = 0xCF
SOI = 0xD8  # Start Of Image
EOI = 0xD9  # End Of Image
SOS = 0xDA  # Start Of Scan, compressed data follows
DQT = 0xDB  # Define Quantization Table
DRI = 0xDD  # Define Restart Interval
JFIF = 0xE0  # APP0
EXIF = 0xE1  # APP1, also used for XMP
IPTC = 0xED  # APP13
COM = 0xFE  # Comment

SOI_BYTES = bytes((MAGIC, SOI))
EOI_BYTES = bytes((MAGIC, EOI))
EXIF_BYTES = bytes((MAGIC, EXIF))

# Payload prefix identifying an EXIF APP1 segment
EXIF_SIGNATURE = b'Exif\x00\x00'


def _build_table() -> Mapping[int, MarkerDescriptor]:
    entries = [
        (SOF0, 'SOF0', True),
        (SOF1, 'SOF1', True),
        (SOF2, 'SOF2', True),
        (SOF3, 'SOF3', True),
        (SOF5, 'SOF5', True),
        (SOF6, 'SOF6', True),
        (SOF7, 'SOF7', True),
        (SOF9, 'SOF9', True),
        (SOF10, 'SOF10', True),
        (SOF11, 'SOF11', True),
        (SOF13, 'SOF13', True),
        (SOF14, 'SOF14', True),
        (SOF15, 'SOF15', True),
        (SOI, 'SOI', False),
        (EOI, 'EOI', False),
        (SOS, 'SOS', True),
        (JFIF, 'JFIF', True),
        (EXIF, 'EXIF', True),
        (COM, 'COM', True),
        (DQT, 'DQT', True),
        (DHT, 'DHT', True),
        (DRI, 'DRI', True),
        (IPTC, 'IPTC', True),
    ]
    return MappingProxyType({
        marker: MarkerDescriptor(marker, name, has_length)
        for marker, name, has_length in entries
    })


MARKERS: Mapping[int, MarkerDescriptor] = _build_table()

# Markers that stand alone: TEM and RST0-RST7. 0x00 is byte stuffing and
# 0xFF a fill byte; neither starts a marker.
STANDALONE_MARKERS = frozenset([0x01] + list(range(0xD0, 0xD8)))
NOT_A_MARKER = frozenset([0x00, MAGIC])


def lookup_marker(marker: int) -> Optional[MarkerDescriptor]:
    """Return the descriptor for a marker byte, or None if unrecognised."""
    return MARKERS.get(marker)


def describe_marker(marker: int) -> MarkerDescriptor:
    """
    Return the descriptor for any segment marker.

    Markers missing from the registry (APP2 ICC profiles, APP14 Adobe and
    so on) still carry a length field and are named generically.
    """
    descriptor = MARKERS.get(marker)
    if descriptor is not None:
        return descriptor
    if 0xE0 <= marker <= 0xEF:
        name = f'APP{marker - 0xE0}'
    else:
        name = f'0x{marker:02X}'
    return MarkerDescriptor(marker, name, marker not in STANDALONE_MARKERS)


def is_marker_pair(buf: bytes, offset: int) -> bool:
    """True if buf[offset:offset + 2] is 0xFF followed by a segment marker."""
    if offset + 2 > len(buf):
        return False
    code = buf[offset + 1]
    return buf[offset] == MAGIC and code not in NOT_A_MARKER and code not in STANDALONE_MARKERS
