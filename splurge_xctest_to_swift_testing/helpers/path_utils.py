"""Cross-platform path utilities for the file and folder surfaces.

This module validates user-supplied paths, discovers Swift source files
in a folder, and reads and writes source text without touching line
endings, so a migrated file differs from its original only where the
migration changed it.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import platform
import shutil
from pathlib import Path

from ..exceptions import FileReadError, FileWriteError

BACKUP_SUFFIX = ".backup"
WINDOWS_PATH_LIMIT = 260
INVALID_NAME_CHARS = '<>:"|?*'


def validate_source_path(source_path: str | Path) -> Path:
    """Validate and normalize a source file or folder path.

    Args:
        source_path: Path to validate (string or Path object)

    Returns:
        Normalized Path object

    Raises:
        FileReadError: If the path is empty, malformed, or does not exist
    """
    path_str = str(source_path)
    if not path_str.strip():
        raise FileReadError(path_str, "path cannot be empty")

    path = Path(source_path)

    # Windows has a 260 character limit unless long paths are enabled
    if len(path_str) > WINDOWS_PATH_LIMIT and platform.system() == "Windows":
        raise FileReadError(path_str, f"path length exceeds Windows limit of {WINDOWS_PATH_LIMIT} characters")

    if any(char in path.name for char in INVALID_NAME_CHARS):
        raise FileReadError(path_str, f"path contains invalid characters: {INVALID_NAME_CHARS}")

    if not path.exists():
        raise FileReadError(path_str, "path does not exist")

    return path


def validate_target_path(target_path: str | Path) -> Path:
    """Validate a target file path without performing side-effects.

    Raises:
        FileWriteError: If the path is empty or names a directory
    """
    path_str = str(target_path)
    if not path_str.strip():
        raise FileWriteError(path_str, "target path cannot be empty")
    path = Path(target_path)
    if any(char in path.name for char in INVALID_NAME_CHARS):
        raise FileWriteError(path_str, f"path contains invalid characters: {INVALID_NAME_CHARS}")
    if path.is_dir():
        raise FileWriteError(path_str, "target path is a directory")
    return path


def ensure_parent_dir(target_path: str | Path) -> None:
    """Side-effect: ensure the parent directory of ``target_path`` exists."""
    path = Path(target_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileWriteError(str(path), f"cannot create parent directory: {e}") from e


def find_source_files(root: str | Path, extensions: list[str], recurse: bool = True) -> list[Path]:
    """Return the files under ``root`` whose suffix is in ``extensions``, sorted."""
    root_path = Path(root)
    candidates = root_path.rglob("*") if recurse else root_path.glob("*")
    wanted = {extension.lower() for extension in extensions}
    return sorted(path for path in candidates if path.is_file() and path.suffix.lower() in wanted)


def read_source(path: str | Path) -> str:
    """Read UTF-8 source text with line endings untouched.

    Raises:
        FileReadError: When the file cannot be read or decoded
    """
    try:
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(str(path), str(e)) from e


def write_source(path: str | Path, content: str) -> None:
    """Write source text exactly as given (no newline translation).

    Raises:
        FileWriteError: When the file cannot be written
    """
    ensure_parent_dir(path)
    try:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
    except OSError as e:
        raise FileWriteError(str(path), str(e)) from e


def backup_path_for(path: str | Path) -> Path:
    """``Tests.swift`` -> ``Tests.swift.backup``."""
    source = Path(path)
    return source.with_name(source.name + BACKUP_SUFFIX)


def create_backup(path: str | Path) -> Path:
    """Copy ``path`` next to itself with the ``.backup`` suffix.

    Raises:
        FileWriteError: When the copy fails
    """
    backup = backup_path_for(path)
    try:
        shutil.copy2(path, backup)
    except OSError as e:
        raise FileWriteError(str(backup), str(e)) from e
    return backup


def normalize_path_for_display(path: str | Path, force_posix: bool = False) -> str:
    """Normalize a path for consistent display across platforms."""
    path_obj = Path(path)
    if force_posix or platform.system() != "Windows":
        return path_obj.as_posix()
    return str(path_obj)
