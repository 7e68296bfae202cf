"""
File-backed persistence for sealed records and raw inputs.

This is the only module in the package that touches the filesystem.
Everything it returns is a plain structured value handed to the pure core.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Union

from .errors import ParseError, StorageError
from .seal import SealedRecord, record_from_dict

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def read_json(path: PathLike) -> Any:
    """
    Read and decode a JSON document.

    Raises:
        ParseError: If the file is unreadable or not valid JSON
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ParseError(f"cannot read {path}: {e.strerror or e}") from e

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"JSON error in {path}: {e}") from e


def write_json(data: Any, path: PathLike) -> Path:
    """
    Write pretty-printed JSON with a trailing newline.

    Raises:
        StorageError: If the file cannot be written
    """
    path = Path(path)
    text = json.dumps(data, indent=2, ensure_ascii=False, allow_nan=False)
    try:
        path.write_text(text + "\n", encoding="utf-8")
    except OSError as e:
        raise StorageError(f"cannot write {path}: {e.strerror or e}") from e
    return path


def ensure_dir(path: PathLike) -> Path:
    """
    Create a directory (and parents) if it does not exist.

    Raises:
        StorageError: If the path exists as a file or cannot be created
    """
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError(f"cannot create directory {path}: {e.strerror or e}") from e
    return path


def save_sealed_record(record: SealedRecord, path: PathLike) -> Path:
    """Persist a sealed record in its documented layout."""
    written = write_json(record.to_dict(), path)
    logger.info("Persisted sealed record %s to %s", record.seal_hash, written)
    return written


def load_sealed_record(path: PathLike) -> SealedRecord:
    """
    Load a sealed record from disk.

    Raises:
        ParseError: If the file is missing, malformed, or has the wrong layout
    """
    record = record_from_dict(read_json(path))
    logger.info("Loaded sealed record %s from %s", record.seal_hash, path)
    return record
