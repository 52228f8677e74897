# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF metadata parser

This module reads the EXIF segment of a JPEG file and decodes the
commonly used fields of IFD0, the EXIF sub-IFD and the GPS sub-IFD into
an ExifInfo record.

Copyright 2025 DNAi inc.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

from exifgraft import exif_tags as tags
from exifgraft.byte_decoder import ByteAlignment, read_u16, read_u32
from exifgraft.config import ExifOptions, resolve_options
from exifgraft.exceptions import (
    CorruptExifError,
    ExifGraftError,
    NoExifError,
    UnknownByteAlignmentError,
)
from exifgraft.exif_info import ExifInfo, GeoCoordinate, Orientation
from exifgraft.file_io import read_file
from exifgraft.ifd_parser import DirectoryEntry, IFDParser, TiffFormat
from exifgraft.jpeg_markers import EXIF_SIGNATURE, MAGIC
from exifgraft.jpeg_scanner import check_jpeg_framing, locate_exif_segment

logger = logging.getLogger(__name__)

ExifSource = Union[str, Path, bytes, bytearray, memoryview]

TIFF_MAGIC = 0x2A

# tag -> (ExifInfo attribute, accepted formats, optional converter)
FieldSpec = Tuple[str, Tuple[TiffFormat, ...], Optional[Callable]]

_STRING = (TiffFormat.STRING,)
_SHORT = (TiffFormat.SHORT,)
_RATIONAL = (TiffFormat.RATIONAL,)
_ANY_RATIONAL = (TiffFormat.RATIONAL, TiffFormat.SRATIONAL)
_DIMENSION = (TiffFormat.LONG, TiffFormat.SHORT)
_POINTER = (TiffFormat.LONG, TiffFormat.IFD)

IFD0_FIELDS: Dict[int, FieldSpec] = {
    tags.TAG_BITS_PER_SAMPLE: ('bits_per_sample', _SHORT, None),
    tags.TAG_IMAGE_DESCRIPTION: ('image_description', _STRING, None),
    tags.TAG_MAKE: ('make', _STRING, None),
    tags.TAG_MODEL: ('model', _STRING, None),
    tags.TAG_ORIENTATION: ('orientation', _SHORT, Orientation.from_code),
    tags.TAG_SOFTWARE: ('software', _STRING, None),
    tags.TAG_DATE_TIME: ('date_time', _STRING, None),
    tags.TAG_COPYRIGHT: ('copyright', _STRING, None),
}

EXIF_FIELDS: Dict[int, FieldSpec] = {
    tags.TAG_EXPOSURE_TIME: ('exposure_time', _RATIONAL, None),
    tags.TAG_F_NUMBER: ('f_number', _RATIONAL, None),
    tags.TAG_ISO_SPEED_RATINGS: ('iso_speed_ratings', _SHORT, None),
    tags.TAG_DATE_TIME_ORIGINAL: ('date_time_original', _STRING, None),
    tags.TAG_DATE_TIME_DIGITIZED: ('date_time_digitized', _STRING, None),
    tags.TAG_SHUTTER_SPEED_VALUE: ('shutter_speed_value', _ANY_RATIONAL, None),
    tags.TAG_EXPOSURE_BIAS_VALUE: ('exposure_bias_value', _ANY_RATIONAL, None),
    tags.TAG_SUBJECT_DISTANCE: ('subject_distance', _RATIONAL, None),
    tags.TAG_FLASH: ('flash', _SHORT, bool),
    tags.TAG_FOCAL_LENGTH: ('focal_length', _RATIONAL, None),
    tags.TAG_METERING_MODE: ('metering_mode', _SHORT, None),
    tags.TAG_SUB_SEC_TIME_ORIGINAL: ('sub_sec_time_original', _STRING, None),
    tags.TAG_PIXEL_X_DIMENSION: ('image_width', _DIMENSION, None),
    tags.TAG_PIXEL_Y_DIMENSION: ('image_height', _DIMENSION, None),
    tags.TAG_FOCAL_LENGTH_IN_35MM: ('focal_length_in_35mm', _SHORT, None),
}


class ExifParser:
    """
    Parser for the EXIF segment of a JPEG file.

    One instance performs one parse. The ExifInfo it fills is created
    fresh in read() and is not reused afterwards.
    """

    def __init__(
        self,
        file_path: Optional[Union[str, Path]] = None,
        file_data: Optional[Union[bytes, bytearray, memoryview]] = None,
        options: Optional[ExifOptions] = None,
    ):
        """
        Initialize the EXIF parser.

        Args:
            file_path: Path to the JPEG file
            file_data: Raw file data (alternative to file_path)
            options: Size limit and framing options
        """
        self.file_path = file_path
        self.file_data = bytes(file_data) if file_data is not None else None
        self.options = resolve_options(options)
        self.info = ExifInfo()

    def read(self) -> ExifInfo:
        """
        Read EXIF metadata from the file.

        Returns:
            The decoded record

        Raises:
            NoJpegError: If the data is not a JPEG stream
            NoExifError: If there is no EXIF segment
            UnknownByteAlignmentError: If the TIFF byte order is not II/MM
            CorruptExifError: If a structure overruns the buffer or the
                segment is not followed by another marker. The fields
                decoded so far are attached as partial_info.
            FileAccessError: If the file cannot be read
        """
        if self.file_path is not None:
            self.file_data = read_file(self.file_path, self.options.max_file_size)
        elif self.file_data is None:
            raise ValueError("No file path or file data provided")

        data = self.file_data
        self.info = ExifInfo()

        check_jpeg_framing(data, self.options.require_eoi)
        segment_start, segment_length = locate_exif_segment(data)

        try:
            # Skip the marker and the length field
            self._parse_exif_segment(segment_start + 4)
        except ExifGraftError as e:
            e.partial_info = self.info
            raise

        # The segment must be followed by the next marker
        next_offset = segment_start + segment_length
        if next_offset >= len(data) or data[next_offset] != MAGIC:
            raise CorruptExifError(
                f"EXIF segment ending at {next_offset} is not followed by a marker",
                partial_info=self.info,
            )
        return self.info

    def _parse_exif_segment(self, offset: int) -> None:
        data = self.file_data
        length = len(data)

        if offset + 6 > length or data[offset:offset + 6] != EXIF_SIGNATURE:
            raise NoExifError("APP1 segment does not carry an Exif header")

        # TIFF header: byte order (2), magic 0x2a (2), offset to IFD0 (4)
        tiff_start = offset + 6
        if tiff_start + 8 > length:
            raise CorruptExifError("EXIF segment too short for TIFF header")

        byte_order = bytes(data[tiff_start:tiff_start + 2])
        if byte_order == b'II':
            alignment = ByteAlignment.INTEL
        elif byte_order == b'MM':
            alignment = ByteAlignment.MOTOROLA
        else:
            raise UnknownByteAlignmentError(f"Unknown TIFF byte order {byte_order!r}")
        self.info.byte_align = alignment

        if read_u16(data, tiff_start + 2, alignment) != TIFF_MAGIC:
            raise CorruptExifError("Invalid TIFF magic number")

        ifd0_offset = tiff_start + read_u32(data, tiff_start + 4, alignment)
        if ifd0_offset >= length:
            raise CorruptExifError(f"IFD0 offset {ifd0_offset} is outside the buffer")

        parser = IFDParser(data, alignment, tiff_start)
        exif_ifd_offset, gps_ifd_offset = self._apply_ifd0(parser, parser.parse_ifd(ifd0_offset))

        # Either sub-IFD may be absent
        if exif_ifd_offset is not None and exif_ifd_offset + 4 <= length:
            self._apply_fields(parser.parse_ifd(exif_ifd_offset), EXIF_FIELDS, 'EXIF')
        if gps_ifd_offset is not None and gps_ifd_offset + 4 <= length:
            self._apply_gps(parser, parser.parse_ifd(gps_ifd_offset))

    def _apply_ifd0(
        self, parser: IFDParser, entries: List[DirectoryEntry]
    ) -> Tuple[Optional[int], Optional[int]]:
        """Assign IFD0 fields and return absolute (EXIF, GPS) sub-IFD offsets."""
        self._apply_fields(entries, IFD0_FIELDS, 'IFD0')

        exif_ifd_offset = None
        gps_ifd_offset = None
        for entry in entries:
            if not entry.is_valid or not entry.has_format(*_POINTER):
                continue
            if entry.tag == tags.TAG_EXIF_IFD_POINTER:
                exif_ifd_offset = parser.base_offset + entry.value_or_offset
            elif entry.tag == tags.TAG_GPS_IFD_POINTER:
                gps_ifd_offset = parser.base_offset + entry.value_or_offset
        return exif_ifd_offset, gps_ifd_offset

    def _apply_fields(self, entries: List[DirectoryEntry], fields: Dict[int, FieldSpec], group: str) -> None:
        for entry in entries:
            if not entry.is_valid:
                continue
            spec = fields.get(entry.tag)
            if spec is None:
                continue
            attribute, formats, convert = spec
            if not entry.has_format(*formats) or entry.value is None:
                logger.debug(
                    "Skipping %s:%s with format %d",
                    group, tags.tag_name(entry.tag, group), entry.format,
                )
                continue
            value = convert(entry.value) if convert else entry.value
            setattr(self.info, attribute, value)

    def _apply_gps(self, parser: IFDParser, entries: List[DirectoryEntry]) -> None:
        """
        Assign the GPS fields.

        Reference tags (N/S, E/W, above/below sea level) may come before or
        after their values, so signs are applied once after the whole
        directory has been read.
        """
        geo = self.info.geo_location
        latitude_seen = False
        longitude_seen = False
        altitude = None

        for entry in entries:
            if not entry.is_valid:
                continue
            # Reference values are the first byte of the inline field
            inline_byte = self.file_data[entry.offset + 8]

            if entry.tag == tags.TAG_GPS_LATITUDE_REF:
                geo.lat_components.direction = chr(inline_byte) if inline_byte else ''
            elif entry.tag == tags.TAG_GPS_LONGITUDE_REF:
                geo.lon_components.direction = chr(inline_byte) if inline_byte else ''
            elif entry.tag == tags.TAG_GPS_ALTITUDE_REF:
                geo.altitude_ref = inline_byte
            elif entry.tag == tags.TAG_GPS_LATITUDE:
                if self._read_coordinate(parser, entry, geo.lat_components):
                    latitude_seen = True
            elif entry.tag == tags.TAG_GPS_LONGITUDE:
                if self._read_coordinate(parser, entry, geo.lon_components):
                    longitude_seen = True
            elif entry.tag == tags.TAG_GPS_ALTITUDE and entry.has_format(TiffFormat.RATIONAL):
                values = parser.read_rationals(entry, 1)
                if values is not None:
                    altitude = values[0]

        if latitude_seen:
            geo.latitude = geo.lat_components.to_decimal()
            geo.valid = True
        if longitude_seen:
            geo.longitude = geo.lon_components.to_decimal()
        if altitude is not None:
            geo.altitude = -altitude if geo.is_below_sea_level else altitude

    @staticmethod
    def _read_coordinate(parser: IFDParser, entry: DirectoryEntry, coordinate: GeoCoordinate) -> bool:
        if not entry.has_format(TiffFormat.RATIONAL) or entry.component_count != 3:
            return False
        values = parser.read_rationals(entry, 3)
        if values is None:
            return False
        coordinate.degrees, coordinate.minutes, coordinate.seconds = values
        return True


def _is_buffer(source: ExifSource) -> bool:
    return isinstance(source, (bytes, bytearray, memoryview))


def parse_exif_data(source: ExifSource, options: Optional[ExifOptions] = None) -> ExifInfo:
    """
    Decode the EXIF segment of a JPEG file or in-memory buffer.

    Args:
        source: Path to a JPEG file, or the file's bytes
        options: Size limit and framing options

    Returns:
        The decoded ExifInfo

    Raises:
        ExifGraftError: One of its subclasses, see ExifParser.read()

    Example:
        >>> info = parse_exif_data('photo.jpg')
        >>> print(info.make, info.orientation.name)
    """
    if _is_buffer(source):
        parser = ExifParser(file_data=source, options=options)
    else:
        parser = ExifParser(file_path=source, options=options)
    return parser.read()


def read_orientation(source: ExifSource, options: Optional[ExifOptions] = None) -> Orientation:
    """
    Return the orientation recorded in a JPEG file.

    Never raises for bad input: a missing or unreadable EXIF segment
    yields Orientation.UNKNOWN.
    """
    try:
        return parse_exif_data(source, options).orientation
    except ExifGraftError as e:
        logger.debug("No orientation for %r: %s", source if not _is_buffer(source) else '<buffer>', e)
        return Orientation.UNKNOWN
