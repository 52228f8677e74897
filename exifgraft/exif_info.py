# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Decoded EXIF record types

ExifInfo is the result of one parse. It starts out empty and is filled
field by field while the directories are walked.

Copyright 2025 DNAi inc.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Optional

from exifgraft.byte_decoder import ByteAlignment


class Orientation(IntEnum):
    """
    Position of the first stored pixel row/column.

    Only the four rotations are distinguished; mirrored and undefined
    codes are reported as UNKNOWN.
    """
    UNKNOWN = 0
    UPPER_LEFT = 1
    LOWER_RIGHT = 3
    UPPER_RIGHT = 6
    LOWER_LEFT = 8

    @classmethod
    def from_code(cls, code: Optional[int]) -> 'Orientation':
        try:
            return cls(code)
        except ValueError:
            return cls.UNKNOWN


# Direction references that make a coordinate negative
NEGATIVE_DIRECTIONS = ('S', 'W')


@dataclass
class GeoCoordinate:
    """A latitude or longitude in degrees/minutes/seconds"""
    degrees: float = 0.0
    minutes: float = 0.0
    seconds: float = 0.0
    direction: str = ''

    def to_decimal(self) -> float:
        """Degrees + minutes/60 + seconds/3600, negative for S and W."""
        value = self.degrees + self.minutes / 60.0 + self.seconds / 3600.0
        if self.direction in NEGATIVE_DIRECTIONS:
            value = -value
        return value


@dataclass
class GeoLocation:
    """GPS position embedded in the file"""
    latitude: float = 0.0
    longitude: float = 0.0
    altitude: float = 0.0  # metres relative to sea level
    altitude_ref: int = 0  # 0 = above sea level, 1 = below
    lat_components: GeoCoordinate = field(default_factory=GeoCoordinate)
    lon_components: GeoCoordinate = field(default_factory=GeoCoordinate)
    valid: bool = False

    @property
    def is_below_sea_level(self) -> bool:
        return self.altitude_ref == 1


@dataclass
class ExifInfo:
    """Fields decoded from IFD0, the EXIF sub-IFD and the GPS sub-IFD"""
    byte_align: Optional[ByteAlignment] = None
    image_description: str = ''
    make: str = ''
    model: str = ''
    orientation: Orientation = Orientation.UNKNOWN
    bits_per_sample: int = 0
    software: str = ''
    date_time: str = ''
    date_time_original: str = ''
    date_time_digitized: str = ''
    sub_sec_time_original: str = ''
    copyright: str = ''
    exposure_time: float = 0.0
    f_number: float = 0.0
    iso_speed_ratings: int = 0
    shutter_speed_value: float = 0.0
    exposure_bias_value: float = 0.0
    subject_distance: float = 0.0
    focal_length: float = 0.0
    focal_length_in_35mm: int = 0
    flash: bool = False
    metering_mode: int = 0
    image_width: int = 0
    image_height: int = 0
    geo_location: GeoLocation = field(default_factory=GeoLocation)

    def to_dict(self) -> Dict[str, Any]:
        """
        Flatten the record into plain values for display.

        Returns:
            Dictionary keyed by EXIF-style tag names
        """
        geo = self.geo_location
        result: Dict[str, Any] = {
            'ByteOrder': self.byte_align.label if self.byte_align is not None else '',
            'ImageDescription': self.image_description,
            'Make': self.make,
            'Model': self.model,
            'Orientation': self.orientation.name,
            'BitsPerSample': self.bits_per_sample,
            'Software': self.software,
            'DateTime': self.date_time,
            'DateTimeOriginal': self.date_time_original,
            'DateTimeDigitized': self.date_time_digitized,
            'SubSecTimeOriginal': self.sub_sec_time_original,
            'Copyright': self.copyright,
            'ExposureTime': self.exposure_time,
            'FNumber': self.f_number,
            'ISOSpeedRatings': self.iso_speed_ratings,
            'ShutterSpeedValue': self.shutter_speed_value,
            'ExposureBiasValue': self.exposure_bias_value,
            'SubjectDistance': self.subject_distance,
            'FocalLength': self.focal_length,
            'FocalLengthIn35mmFormat': self.focal_length_in_35mm,
            'Flash': int(self.flash),
            'MeteringMode': self.metering_mode,
            'ImageWidth': self.image_width,
            'ImageHeight': self.image_height,
        }
        if geo.valid:
            result['GPSLatitude'] = geo.latitude
            result['GPSLongitude'] = geo.longitude
            result['GPSAltitude'] = geo.altitude
        return result
