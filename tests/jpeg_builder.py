"""
Helpers that assemble small JPEG and TIFF byte streams for the tests.
"""

import struct
from typing import List, Optional, Tuple

from exifgraft.ifd_parser import TiffFormat

# Entry: (tag, format, count, payload bytes, explicit 4-byte value or None)
Entry = Tuple[int, int, int, bytes, Optional[bytes]]

SOI = b'\xff\xd8'
EOI = b'\xff\xd9'

JFIF_SEGMENT = b'\xff\xe0' + struct.pack('>H', 16) + b'JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
DQT_SEGMENT = b'\xff\xdb' + struct.pack('>H', 67) + b'\x00' + bytes(range(1, 65))
SOF0_SEGMENT = b'\xff\xc0' + struct.pack('>HBHHB', 11, 8, 8, 8, 1) + b'\x01\x11\x00'
DHT_SEGMENT = b'\xff\xc4' + struct.pack('>H', 20) + b'\x00' + b'\x01' + b'\x00' * 15 + b'\x00'
SOS_SEGMENT = b'\xff\xda' + struct.pack('>HB', 8, 1) + b'\x01\x00\x00\x3f\x00'
# Entropy-coded bytes with a stuffed 0xFF00 and a restart marker
SCAN_DATA = b'\x12\x34\xff\x00\x56\xff\xd0\x78\x9a'

IMAGE_BODY = DQT_SEGMENT + SOF0_SEGMENT + DHT_SEGMENT + SOS_SEGMENT + SCAN_DATA


class TiffBuilder:
    """Builds a TIFF structure with IFD0 and optional EXIF and GPS sub-IFDs."""

    def __init__(self, byte_order: str = 'II'):
        self.byte_order = byte_order
        self.prefix = '<' if byte_order == 'II' else '>'
        self.ifd0: List[Entry] = []
        self.exif: List[Entry] = []
        self.gps: List[Entry] = []
        self.magic = 42

    # value encoders
    def short(self, value: int) -> bytes:
        return struct.pack(f'{self.prefix}H', value)

    def long(self, value: int) -> bytes:
        return struct.pack(f'{self.prefix}I', value)

    def rationals(self, *pairs: Tuple[int, int]) -> bytes:
        return b''.join(struct.pack(f'{self.prefix}II', n, d) for n, d in pairs)

    def srationals(self, *pairs: Tuple[int, int]) -> bytes:
        return b''.join(struct.pack(f'{self.prefix}ii', n, d) for n, d in pairs)

    # entry helpers
    def add(self, ifd: List[Entry], tag: int, fmt: int, count: int, payload: bytes,
            raw_value: Optional[bytes] = None) -> 'TiffBuilder':
        ifd.append((tag, fmt, count, payload, raw_value))
        return self

    def add_ascii(self, ifd: List[Entry], tag: int, text: str) -> 'TiffBuilder':
        payload = text.encode('utf-8') + b'\x00'
        return self.add(ifd, tag, TiffFormat.STRING, len(payload), payload)

    def add_byte(self, ifd: List[Entry], tag: int, value: int) -> 'TiffBuilder':
        return self.add(ifd, tag, TiffFormat.BYTE, 1, bytes([value]))

    def add_short(self, ifd: List[Entry], tag: int, value: int) -> 'TiffBuilder':
        return self.add(ifd, tag, TiffFormat.SHORT, 1, self.short(value))

    def add_long(self, ifd: List[Entry], tag: int, value: int) -> 'TiffBuilder':
        return self.add(ifd, tag, TiffFormat.LONG, 1, self.long(value))

    def add_rational(self, ifd: List[Entry], tag: int, *pairs: Tuple[int, int]) -> 'TiffBuilder':
        return self.add(ifd, tag, TiffFormat.RATIONAL, len(pairs), self.rationals(*pairs))

    def add_srational(self, ifd: List[Entry], tag: int, *pairs: Tuple[int, int]) -> 'TiffBuilder':
        return self.add(ifd, tag, TiffFormat.SRATIONAL, len(pairs), self.srationals(*pairs))

    @staticmethod
    def _ifd_size(entry_count: int) -> int:
        return 2 + 12 * entry_count + 4

    def build(self) -> bytes:
        ifd0 = list(self.ifd0)
        pointer_count = (1 if self.exif else 0) + (1 if self.gps else 0)

        ifd0_offset = 8
        next_offset = ifd0_offset + self._ifd_size(len(ifd0) + pointer_count)
        exif_offset = gps_offset = None
        if self.exif:
            exif_offset = next_offset
            next_offset += self._ifd_size(len(self.exif))
        if self.gps:
            gps_offset = next_offset
            next_offset += self._ifd_size(len(self.gps))

        if exif_offset is not None:
            ifd0.append((0x8769, TiffFormat.LONG, 1, self.long(exif_offset), None))
        if gps_offset is not None:
            ifd0.append((0x8825, TiffFormat.LONG, 1, self.long(gps_offset), None))

        data_area = bytearray()
        data_start = next_offset

        def encode_ifd(entries: List[Entry]) -> bytes:
            out = bytearray(self.short(len(entries)))
            for tag, fmt, count, payload, raw_value in entries:
                if raw_value is not None:
                    value = raw_value
                elif len(payload) <= 4:
                    value = payload.ljust(4, b'\x00')
                else:
                    value = self.long(data_start + len(data_area))
                    data_area.extend(payload)
                    if len(data_area) % 2:
                        data_area.append(0)
                out += struct.pack(f'{self.prefix}HHI', tag, fmt, count) + value
            out += self.long(0)
            return bytes(out)

        body = encode_ifd(ifd0)
        if self.exif:
            body += encode_ifd(self.exif)
        if self.gps:
            body += encode_ifd(self.gps)

        header = self.byte_order.encode('ascii') + self.short(self.magic) + self.long(ifd0_offset)
        return header + body + bytes(data_area)


def exif_segment(tiff: bytes, signature: bytes = b'Exif\x00\x00') -> bytes:
    """Wrap a TIFF structure into a complete APP1 segment."""
    payload = signature + tiff
    return b'\xff\xe1' + struct.pack('>H', len(payload) + 2) + payload


def app1_segment(payload: bytes) -> bytes:
    return b'\xff\xe1' + struct.pack('>H', len(payload) + 2) + payload


def icc_segment(profile: bytes) -> bytes:
    """APP2 segment, which the marker registry does not list."""
    return b'\xff\xe2' + struct.pack('>H', len(profile) + 16) + b'ICC_PROFILE\x00\x01\x01' + profile


def xmp_segment(packet: bytes = b'<x:xmpmeta/>') -> bytes:
    return app1_segment(b'http://ns.adobe.com/xap/1.0/\x00' + packet)


def build_jpeg(*segments: bytes, body: bytes = IMAGE_BODY, eoi: bool = True) -> bytes:
    """SOI, the given segments, a tiny image body and EOI."""
    return SOI + b''.join(segments) + body + (EOI if eoi else b'')


def sample_tiff(byte_order: str = 'II') -> TiffBuilder:
    """A TIFF with typical camera fields in IFD0 and the EXIF sub-IFD."""
    tiff = TiffBuilder(byte_order)
    tiff.add_ascii(tiff.ifd0, 0x010F, 'Canon')
    tiff.add_ascii(tiff.ifd0, 0x0110, 'Canon EOS 5D Mark IV')
    tiff.add_ascii(tiff.ifd0, 0x010E, 'Harbour at dusk')
    tiff.add_short(tiff.ifd0, 0x0112, 6)
    tiff.add_short(tiff.ifd0, 0x0102, 8)
    tiff.add_ascii(tiff.ifd0, 0x0131, 'Firmware 1.2')
    tiff.add_ascii(tiff.ifd0, 0x0132, '2021:06:01 12:00:00')
    tiff.add_ascii(tiff.ifd0, 0x8298, 'Jane Doe')

    tiff.add_rational(tiff.exif, 0x829A, (1, 250))
    tiff.add_rational(tiff.exif, 0x829D, (28, 10))
    tiff.add_short(tiff.exif, 0x8827, 400)
    tiff.add_ascii(tiff.exif, 0x9003, '2021:05:31 18:45:10')
    tiff.add_ascii(tiff.exif, 0x9004, '2021:05:31 18:45:11')
    tiff.add_ascii(tiff.exif, 0x9291, '42')
    tiff.add_srational(tiff.exif, 0x9201, (8, 1))
    tiff.add_srational(tiff.exif, 0x9204, (-2, 3))
    tiff.add_rational(tiff.exif, 0x9206, (35, 10))
    tiff.add_short(tiff.exif, 0x9207, 5)
    tiff.add_short(tiff.exif, 0x9209, 0x10)
    tiff.add_rational(tiff.exif, 0x920A, (50, 1))
    tiff.add_long(tiff.exif, 0xA002, 6720)
    tiff.add_short(tiff.exif, 0xA003, 4480)
    tiff.add_short(tiff.exif, 0xA405, 50)
    return tiff


def add_gps(tiff: TiffBuilder, lat_ref: str = 'N', lon_ref: str = 'E',
            altitude_ref: int = 0, refs_first: bool = True) -> TiffBuilder:
    """Add a GPS sub-IFD for 40 deg 26' 46" / 79 deg 58' 56", 120.5 m."""
    refs = [
        (0x0001, TiffFormat.STRING, 2, lat_ref.encode('ascii') + b'\x00', None),
        (0x0003, TiffFormat.STRING, 2, lon_ref.encode('ascii') + b'\x00', None),
        (0x0005, TiffFormat.BYTE, 1, bytes([altitude_ref]), None),
    ]
    values = [
        (0x0002, TiffFormat.RATIONAL, 3, tiff.rationals((40, 1), (26, 1), (46, 1)), None),
        (0x0004, TiffFormat.RATIONAL, 3, tiff.rationals((79, 1), (58, 1), (56, 1)), None),
        (0x0006, TiffFormat.RATIONAL, 1, tiff.rationals((241, 2)), None),
    ]
    tiff.gps.extend(refs + values if refs_first else values + refs)
    return tiff
