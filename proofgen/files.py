# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import json

from pathlib import Path
from typing import Any, Iterable

from proofgen.errors import FilesystemError


def ensure_directory(path: str | Path) -> Path:
    """
    Create a directory (and any missing parents) if it does not exist.

    Args:
        path: Directory path (string or `Path`).

    Returns:
        The directory as an absolute `Path`.

    Raises:
        FilesystemError: If the path exists as a non-directory or cannot be
            created due to permissions, invalid paths, etc.
    """
    path = Path(path).resolve()
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"cannot create directory {path}: {e}") from e
    return path


def truncate_file(path: str | Path) -> Path:
    """
    Create `path` as an empty file, discarding any previous content.

    Used for documents a tool is expected to fill in, so a stale copy from an
    earlier run can never be mistaken for fresh output.

    Raises:
        FilesystemError: If the file cannot be created or written.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"")
    except OSError as e:
        raise FilesystemError(f"cannot prepare {path}: {e}") from e
    return path


def remove_files(paths: Iterable[str | Path]) -> None:
    """
    Delete every file in `paths`; files that do not exist are skipped.

    Raises:
        FilesystemError: If an existing file cannot be removed (for example,
            the path is a directory or permissions forbid it).
    """
    for p in paths:
        p = Path(p)
        try:
            p.unlink(missing_ok=True)
        except OSError as e:
            raise FilesystemError(f"cannot remove stale artifact {p}: {e}") from e


def load_json(path: str | Path) -> Any:
    """
    Load and parse a JSON file.

    Args:
        path: Path to the JSON file (string or `Path`).

    Returns:
        The parsed JSON value (commonly a dict or list), typed as `Any`.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
        UnicodeDecodeError: If the file is not UTF-8.
        OSError: If the file cannot be opened/read.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)
