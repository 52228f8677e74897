# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Options shared by the parse and copy operations.

Copyright 2025 DNAi inc.
"""

from typing import Optional

# Files this large or larger are rejected before being read
DEFAULT_MAX_FILE_SIZE = 20000000


class ExifOptions:
    """
    Configuration for reading and transplanting EXIF segments.

    Attributes:
        max_file_size: Files of this many bytes or more are refused
        require_eoi: Refuse JPEG buffers that do not end with EOI
        atomic_write: Replace the destination via a temporary file
            instead of overwriting it in place
    """

    def __init__(
        self,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        require_eoi: bool = False,
        atomic_write: bool = True,
    ):
        if max_file_size <= 0:
            raise ValueError(f"Invalid max_file_size: {max_file_size}")
        self.max_file_size = max_file_size
        self.require_eoi = require_eoi
        self.atomic_write = atomic_write

    def __repr__(self) -> str:
        return (
            f"ExifOptions(max_file_size={self.max_file_size}, "
            f"require_eoi={self.require_eoi}, atomic_write={self.atomic_write})"
        )


def resolve_options(options: Optional[ExifOptions]) -> ExifOptions:
    """Return the given options, or the defaults if None."""
    return options if options is not None else ExifOptions()
