# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Exception classes for exifgraft

This module defines the error taxonomy used when locating, parsing and
transplanting EXIF segments. Every error maps onto exactly one
ParseStatus code so callers that want a flat outcome can still get one.

Copyright 2025 DNAi inc.
"""

from enum import IntEnum
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from exifgraft.exif_info import ExifInfo


class ParseStatus(IntEnum):
    """Outcome of one parse or copy operation."""
    SUCCESS = 0
    NO_JPEG = 1
    NO_EXIF = 2
    UNKNOWN_BYTE_ALIGNMENT = 3
    CORRUPT = 4
    IO_ERROR = 5


class ExifGraftError(Exception):
    """
    Base exception for all exifgraft errors.
    
    All exifgraft exceptions inherit from this class, allowing
    catch-all error handling for any EXIF-related errors.
    """
    status = ParseStatus.CORRUPT

    def __init__(self, message: str = "", partial_info: Optional["ExifInfo"] = None):
        """
        Initialize the exception with an optional error message.
        
        Args:
            message: Descriptive error message explaining what went wrong
            partial_info: Fields decoded before the failure, if any
        """
        self.message = message
        self.partial_info = partial_info
        super().__init__(message)


class NoJpegError(ExifGraftError):
    """
    Raised when a buffer is not a JPEG stream.
    
    This exception is raised when:
    - The buffer is shorter than 4 bytes
    - The Start-Of-Image marker is missing
    - An End-Of-Image marker is required but missing
    """
    status = ParseStatus.NO_JPEG


class NoExifError(ExifGraftError):
    """
    Raised when a JPEG stream carries no EXIF segment.
    
    This exception is raised when:
    - No APP1 marker is present
    - The APP1 payload does not start with the Exif signature
    """
    status = ParseStatus.NO_EXIF


class UnknownByteAlignmentError(ExifGraftError):
    """Raised when the TIFF byte-order mark is neither II nor MM."""
    status = ParseStatus.UNKNOWN_BYTE_ALIGNMENT


class CorruptExifError(ExifGraftError):
    """
    Raised when a bounds check fails during parsing.
    
    This exception is raised when:
    - A segment length runs past the end of the buffer
    - A directory's entries overrun the buffer
    - The TIFF magic number is wrong
    - The EXIF segment is not followed by another marker
    """
    status = ParseStatus.CORRUPT


class FileAccessError(ExifGraftError):
    """
    Raised when a file cannot be read or written.
    
    This exception is raised when:
    - The file does not exist or permissions prevent access
    - The file is larger than the configured size bound
    - The destination cannot be replaced
    """
    status = ParseStatus.IO_ERROR
