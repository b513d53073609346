"""Utility functions for temporary file lists and local output paths."""

import tempfile
import uuid
from pathlib import Path
from typing import Iterable, Optional

from common.constants import FILE_LIST_SUFFIX
from common.logging_config import get_logger
from common.types import File
from horizon.schemas import encode_file_list

logger = get_logger(__name__)


def encode_as_json_in_temporary_file(files: Iterable[File]) -> Optional[Path]:
    """
    Encode a file list as JSON into a fresh temporary file.

    Args:
        files: Files to encode

    Returns:
        Path of the temporary file, or None if encoding or writing failed
    """
    try:
        data = encode_file_list(files)
        temp_dir = Path(tempfile.mkdtemp(prefix="horizon-"))
        temporary_file = temp_dir / f"{uuid.uuid4()}{FILE_LIST_SUFFIX}"
        temporary_file.write_bytes(data)
    except (ValueError, OSError) as e:
        logger.error(f"Failed to encode file list to temporary file: {e}")
        return None

    return temporary_file


def remove_temporary_file(path: Path) -> None:
    """Delete a temporary file and its directory, ignoring files already gone."""
    path.unlink(missing_ok=True)
    try:
        path.parent.rmdir()
    except OSError:
        logger.debug(f"Temporary directory {path.parent} not removed")


def finder_style_safe_path(file: File, proposed_path: Path) -> Path:
    """
    Choose an output path that never overwrites an existing file.

    If `proposed_path` is a directory the file is placed inside it under
    its own name. If the target already exists a " (2)", " (3)", ... suffix
    is inserted before the extension.

    Args:
        file: File about to be written
        proposed_path: Requested file or directory path

    Returns:
        Path that does not yet exist
    """
    target = Path(proposed_path).expanduser()

    if not target.exists():
        return target

    if target.is_dir():
        directory, stem, suffix = target, Path(file.name).stem, Path(file.name).suffix
        candidate = directory / file.name
    else:
        directory, stem, suffix = target.parent, target.stem, target.suffix
        candidate = target

    counter = 2
    while candidate.exists():
        candidate = directory / f"{stem} ({counter}){suffix}"
        counter += 1

    return candidate
