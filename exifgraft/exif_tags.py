# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF tag definitions

Numeric tag IDs decoded into ExifInfo, grouped by the directory they
live in. Based on the EXIF 2.3 specification.

Copyright 2025 DNAi inc.
"""

# ============================================================
# IFD0 (Image) Tags
# ============================================================
TAG_BITS_PER_SAMPLE = 0x0102
TAG_IMAGE_DESCRIPTION = 0x010E
TAG_MAKE = 0x010F
TAG_MODEL = 0x0110
TAG_ORIENTATION = 0x0112
TAG_SOFTWARE = 0x0131
TAG_DATE_TIME = 0x0132
TAG_COPYRIGHT = 0x8298
TAG_EXIF_IFD_POINTER = 0x8769
TAG_GPS_IFD_POINTER = 0x8825

# ============================================================
# EXIF sub-IFD Tags
# ============================================================
TAG_EXPOSURE_TIME = 0x829A
TAG_F_NUMBER = 0x829D
TAG_ISO_SPEED_RATINGS = 0x8827
TAG_DATE_TIME_ORIGINAL = 0x9003
TAG_DATE_TIME_DIGITIZED = 0x9004
TAG_SHUTTER_SPEED_VALUE = 0x9201
TAG_EXPOSURE_BIAS_VALUE = 0x9204
TAG_SUBJECT_DISTANCE = 0x9206
TAG_METERING_MODE = 0x9207
TAG_FLASH = 0x9209
TAG_FOCAL_LENGTH = 0x920A
TAG_SUB_SEC_TIME_ORIGINAL = 0x9291
TAG_PIXEL_X_DIMENSION = 0xA002
TAG_PIXEL_Y_DIMENSION = 0xA003
TAG_FOCAL_LENGTH_IN_35MM = 0xA405

# ============================================================
# GPS sub-IFD Tags
# ============================================================
TAG_GPS_LATITUDE_REF = 0x0001
TAG_GPS_LATITUDE = 0x0002
TAG_GPS_LONGITUDE_REF = 0x0003
TAG_GPS_LONGITUDE = 0x0004
TAG_GPS_ALTITUDE_REF = 0x0005
TAG_GPS_ALTITUDE = 0x0006

IFD0_TAG_NAMES = {
    TAG_BITS_PER_SAMPLE: "BitsPerSample",
    TAG_IMAGE_DESCRIPTION: "ImageDescription",
    TAG_MAKE: "Make",
    TAG_MODEL: "Model",
    TAG_ORIENTATION: "Orientation",
    TAG_SOFTWARE: "Software",
    TAG_DATE_TIME: "DateTime",
    TAG_COPYRIGHT: "Copyright",
    TAG_EXIF_IFD_POINTER: "ExifOffset",
    TAG_GPS_IFD_POINTER: "GPSInfo",
}

EXIF_TAG_NAMES = {
    TAG_EXPOSURE_TIME: "ExposureTime",
    TAG_F_NUMBER: "FNumber",
    TAG_ISO_SPEED_RATINGS: "ISOSpeedRatings",
    TAG_DATE_TIME_ORIGINAL: "DateTimeOriginal",
    TAG_DATE_TIME_DIGITIZED: "DateTimeDigitized",
    TAG_SHUTTER_SPEED_VALUE: "ShutterSpeedValue",
    TAG_EXPOSURE_BIAS_VALUE: "ExposureBiasValue",
    TAG_SUBJECT_DISTANCE: "SubjectDistance",
    TAG_METERING_MODE: "MeteringMode",
    TAG_FLASH: "Flash",
    TAG_FOCAL_LENGTH: "FocalLength",
    TAG_SUB_SEC_TIME_ORIGINAL: "SubSecTimeOriginal",
    TAG_PIXEL_X_DIMENSION: "ExifImageWidth",
    TAG_PIXEL_Y_DIMENSION: "ExifImageHeight",
    TAG_FOCAL_LENGTH_IN_35MM: "FocalLengthIn35mmFormat",
}

GPS_TAG_NAMES = {
    TAG_GPS_LATITUDE_REF: "GPSLatitudeRef",
    TAG_GPS_LATITUDE: "GPSLatitude",
    TAG_GPS_LONGITUDE_REF: "GPSLongitudeRef",
    TAG_GPS_LONGITUDE: "GPSLongitude",
    TAG_GPS_ALTITUDE_REF: "GPSAltitudeRef",
    TAG_GPS_ALTITUDE: "GPSAltitude",
}


def tag_name(tag_id: int, group: str = 'IFD0') -> str:
    """Return the name of a tag in the given directory group."""
    table = {'IFD0': IFD0_TAG_NAMES, 'EXIF': EXIF_TAG_NAMES, 'GPS': GPS_TAG_NAMES}.get(group, {})
    return table.get(tag_id, f"Unknown_{tag_id:04X}")
