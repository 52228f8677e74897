# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Bounded file reads and safe file replacement

Copyright 2025 DNAi inc.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from exifgraft.config import DEFAULT_MAX_FILE_SIZE
from exifgraft.exceptions import FileAccessError

logger = logging.getLogger(__name__)


def read_file(file_path: Union[str, Path], max_file_size: int = DEFAULT_MAX_FILE_SIZE) -> bytes:
    """
    Read a whole file into memory.

    The size is checked before anything is allocated.

    Args:
        file_path: File to read
        max_file_size: Files of this size or larger are refused

    Returns:
        File contents

    Raises:
        FileAccessError: If the file cannot be read or is too large
    """
    path = Path(file_path)
    try:
        file_size = path.stat().st_size
        if file_size >= max_file_size:
            raise FileAccessError(
                f"File '{path}' is {file_size} bytes, limit is {max_file_size}"
            )
        with open(path, 'rb') as f:
            data = f.read()
    except (OSError, ValueError) as e:
        raise FileAccessError(f"Cannot read '{path}': {e}") from e

    if len(data) != file_size:
        raise FileAccessError(f"Short read on '{path}': {len(data)} of {file_size} bytes")
    return data


def write_file(file_path: Union[str, Path], data: bytes, atomic: bool = True) -> None:
    """
    Replace a file's contents.

    With atomic=True the data goes to a temporary file in the same
    directory which is then renamed over the target, so readers never
    see a half-written file. The temporary file is removed on failure.

    Raises:
        FileAccessError: If the file cannot be written
    """
    path = Path(file_path)
    if not atomic:
        try:
            with open(path, 'wb') as f:
                f.write(data)
        except (OSError, ValueError) as e:
            raise FileAccessError(f"Cannot write '{path}': {e}") from e
        return

    temp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            delete=False, dir=path.parent, prefix=f'.{path.name}.', suffix='.tmp'
        ) as temp_file:
            temp_name = temp_file.name
            temp_file.write(data)
            temp_file.flush()
            os.fsync(temp_file.fileno())
        if path.exists():
            os.chmod(temp_name, path.stat().st_mode & 0o7777)
        os.replace(temp_name, path)
        temp_name = None
    except (OSError, ValueError) as e:
        raise FileAccessError(f"Cannot write '{path}': {e}") from e
    finally:
        if temp_name is not None:
            try:
                os.unlink(temp_name)
            except OSError:
                logger.warning("Could not remove temporary file %s", temp_name)
