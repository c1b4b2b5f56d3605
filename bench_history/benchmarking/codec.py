# -*- coding: utf-8 -*-
"""
Record Codec — CBOR encoding of pointer records and measurement snapshots.

Each history file holds a single CBOR map produced from the model's
``to_dict()``, plus a ``format_version`` key.  Decoding is tolerant:
files written before ``format_version`` existed decode as version 0 with
the same rules, unknown keys are ignored, and optional keys fall back to
their defaults.  Files already on disk must stay readable by every later
release, so the schema only ever grows.

Storage layout::

    <data_dir>/<directory_name>/
        benchmark.cbor                      pointer record (rewritten)
        measurement_<yymmddHHMMSS>.cbor     snapshots (never deleted)

Dependencies
------------
cbor2

Author
------
Ava Courtney

License
-------
MIT License
See LICENSE file for full text.

Created
-------
2026-02-13

Modified
--------
2026-10-19
"""

# Standard library
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Optional, TypeVar

# Third-party
import cbor2

# Internal
from bench_history.benchmarking.models import BenchmarkRecord, SavedStatistics

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1
RECORD_FILE_NAME = "benchmark.cbor"
MEASUREMENT_NAME_FORMAT = "measurement_%y%m%d%H%M%S"
MEASUREMENT_SUFFIX = ".cbor"

T = TypeVar("T")


class RecordDecodeError(ValueError):
    """Raised when a history file cannot be decoded."""


class PersistError(OSError):
    """Raised when a history file cannot be written."""


def _decode(
    path: Path, payload: bytes, from_dict: Callable[[Dict[str, Any]], T]
) -> T:
    try:
        data = cbor2.loads(payload)
    except (cbor2.CBORError, ValueError, EOFError) as exc:
        raise RecordDecodeError(f"Failed to read file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise RecordDecodeError(
            f"Failed to read file {path}: expected a map, "
            f"got {type(data).__name__}"
        )

    version = data.get("format_version", 0)
    if isinstance(version, int) and version > FORMAT_VERSION:
        logger.debug(
            "%s uses format version %d (newer than %d); decoding known fields",
            path, version, FORMAT_VERSION,
        )

    try:
        return from_dict(data)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise RecordDecodeError(
            f"Failed to read file {path}: malformed or missing field {exc}"
        ) from exc


def _encode(value: Any) -> bytes:
    data = {"format_version": FORMAT_VERSION}
    data.update(value.to_dict())
    return cbor2.dumps(data)


def read_record(path: Path) -> BenchmarkRecord:
    """Read a pointer record.

    Parameters
    ----------
    path : Path

    Returns
    -------
    BenchmarkRecord

    Raises
    ------
    OSError
        If the file cannot be read.
    RecordDecodeError
        If the file contents cannot be decoded.
    """
    return _decode(path, Path(path).read_bytes(), BenchmarkRecord.from_dict)


def read_statistics(path: Path) -> SavedStatistics:
    """Read a measurement snapshot.

    Parameters
    ----------
    path : Path

    Returns
    -------
    SavedStatistics

    Raises
    ------
    OSError
        If the file cannot be read.
    RecordDecodeError
        If the file contents cannot be decoded.
    """
    return _decode(path, Path(path).read_bytes(), SavedStatistics.from_dict)


def write_record(path: Path, record: BenchmarkRecord) -> None:
    """Write a pointer record, replacing any existing one.

    Writes to a temporary sibling first, then renames over *path* so a
    crash never leaves a truncated pointer behind.

    Parameters
    ----------
    path : Path
    record : BenchmarkRecord

    Raises
    ------
    PersistError
    """
    path = Path(path)
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        tmp_path.write_bytes(_encode(record))
        tmp_path.replace(path)
    except (OSError, cbor2.CBOREncodeError) as exc:
        raise PersistError(f"Failed to save benchmark file {path}: {exc}") from exc


def measurement_path(directory: Path, when: Optional[datetime] = None) -> Path:
    """Choose a fresh measurement file name in *directory*.

    Names sort in wall-clock order at one-second resolution.  When a file
    for the same second already exists, a zero-padded counter (``_0002``,
    ``_0003``, ...) is appended to the stem, so names within one second
    also sort in creation order.

    Parameters
    ----------
    directory : Path
    when : datetime, optional
        Defaults to the current local time.

    Returns
    -------
    Path
    """
    directory = Path(directory)
    stem = (when or datetime.now()).strftime(MEASUREMENT_NAME_FORMAT)
    candidate = directory / f"{stem}{MEASUREMENT_SUFFIX}"
    counter = 2
    while candidate.exists():
        candidate = directory / f"{stem}_{counter:04d}{MEASUREMENT_SUFFIX}"
        counter += 1
    return candidate


def write_statistics(path: Path, stats: SavedStatistics) -> None:
    """Write a new measurement snapshot.

    The file must not already exist; snapshots are never overwritten.

    Parameters
    ----------
    path : Path
    stats : SavedStatistics

    Raises
    ------
    PersistError
    """
    path = Path(path)
    try:
        payload = _encode(stats)
        with path.open("xb") as handle:
            handle.write(payload)
    except (OSError, cbor2.CBOREncodeError) as exc:
        raise PersistError(
            f"Failed to save measurements to file {path}: {exc}"
        ) from exc
