# -*- coding: utf-8 -*-
"""
Benchmark History Store — filesystem-backed index of benchmark results.

Keeps one directory per benchmark under ``<criterion_home>/data/<timeline>``.
Each directory holds a ``benchmark.cbor`` pointer record naming the most
recent ``measurement_*.cbor`` snapshot.  Snapshots are append-only; only
the pointer is rewritten, and only after the new snapshot is on disk, so
an interrupted write leaves the previous snapshot current.

The in-memory index is rebuilt on every ``Model.load`` by walking the data
directory for pointer records.

Storage layout::

    <criterion_home>/data/<timeline>/
        <group>/<function>/<value>/
            benchmark.cbor
            measurement_<yymmddHHMMSS>.cbor

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
import os
from collections import OrderedDict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Mapping, Optional, Set, Tuple, Union

# Internal
from bench_history.benchmarking.base import ResultStore
from bench_history.benchmarking.codec import (
    RECORD_FILE_NAME,
    PersistError,
    measurement_path,
    read_record,
    read_statistics,
    write_record,
    write_statistics,
)
from bench_history.benchmarking.models import (
    BenchmarkId,
    BenchmarkRecord,
    MeasurementData,
    SavedBenchmarkId,
    SavedStatistics,
    SnapshotComparison,
)

logger = logging.getLogger(__name__)


@dataclass
class Benchmark:
    """History of one benchmark.

    Attributes
    ----------
    latest_stats : SavedStatistics, optional
    previous_stats : SavedStatistics, optional
        What ``latest_stats`` held before the most recent write.
    target : str, optional
        Build target that first registered this benchmark.
    """

    latest_stats: Optional[SavedStatistics] = None
    previous_stats: Optional[SavedStatistics] = None
    target: Optional[str] = None

    def add_stats(self, stats: SavedStatistics) -> None:
        self.previous_stats = self.latest_stats
        self.latest_stats = stats


@dataclass
class BenchmarkGroup:
    """Benchmarks sharing a ``group_id``, in registration order."""

    benchmarks: "OrderedDict[BenchmarkId, Benchmark]" = field(
        default_factory=OrderedDict
    )
    target: Optional[str] = None


class Model(ResultStore):
    """Benchmark history rooted at one timeline's data directory.

    Parameters
    ----------
    data_directory : Path or str
        ``<criterion_home>/data/<timeline>``.  Created lazily on the
        first write.

    Examples
    --------
    >>> model = Model.load(Path("target/criterion"), "main")
    >>> bench_id = model.register("my_bench", BenchmarkId("parsing", "json"))
    >>> previous = model.last_snapshot(bench_id)
    >>> model.record_completion(bench_id, measurement)
    """

    def __init__(self, data_directory: Union[Path, str]) -> None:
        self._data_directory = Path(data_directory)
        # Titles and directory names handed out so far, for uniquifying.
        self._all_titles: Set[str] = set()
        self._all_directories: Set[str] = set()
        self._groups: "OrderedDict[str, BenchmarkGroup]" = OrderedDict()

    @classmethod
    def load(cls, criterion_home: Union[Path, str], timeline: str) -> 'Model':
        """Build the index from the history files on disk.

        Pointer records that cannot be read are logged and skipped; this
        method never fails because of an individual bad file.

        Parameters
        ----------
        criterion_home : Path or str
            Root output directory.
        timeline : str
            Name of the history timeline.

        Returns
        -------
        Model
        """
        model = cls(Path(criterion_home) / "data" / timeline)
        for record_path in model._find_record_files():
            try:
                model._load_stored_benchmark(record_path)
            except (OSError, ValueError) as exc:
                logger.error(
                    "Encountered error while loading stored data: %s", exc
                )
        return model

    @property
    def data_directory(self) -> Path:
        return self._data_directory

    @property
    def groups(self) -> Mapping[str, BenchmarkGroup]:
        """Benchmark groups in registration order."""
        return self._groups

    def _find_record_files(self) -> Iterator[Path]:
        # os.walk skips unreadable directories and yields nothing for a
        # missing root.
        for dirpath, dirnames, filenames in os.walk(self._data_directory):
            dirnames.sort()
            if RECORD_FILE_NAME in filenames:
                yield Path(dirpath) / RECORD_FILE_NAME

    def _load_stored_benchmark(self, record_path: Path) -> None:
        if not record_path.is_file():
            return
        record = read_record(record_path)

        stats_path = record_path.with_name(record.latest_record)
        if not stats_path.is_file():
            logger.debug(
                "Pointer %s names missing measurement file %s; skipping",
                record_path, stats_path,
            )
            return
        stats = read_statistics(stats_path)

        self._entry(record.id.to_benchmark_id()).latest_stats = stats

    def _entry(self, identity: BenchmarkId) -> Benchmark:
        group = self._groups.setdefault(identity.group_id, BenchmarkGroup())
        return group.benchmarks.setdefault(identity, Benchmark())

    def _lookup(self, identity: BenchmarkId) -> Optional[Benchmark]:
        group = self._groups.get(identity.group_id)
        if group is None:
            return None
        return group.benchmarks.get(identity)

    def register(self, target: str, identity: BenchmarkId) -> BenchmarkId:
        """Register *identity*, resolving title and directory collisions.

        The benchmark moves to the end of its group.  If it was already
        registered by another build target, a warning is logged and the
        original target attribution is kept.

        Parameters
        ----------
        target : str
        identity : BenchmarkId

        Returns
        -------
        BenchmarkId
            The identity to use for ``record_completion``; its title or
            directory name may carry a disambiguating suffix.
        """
        identity = identity.unique_directory_name(self._all_directories)
        self._all_directories.add(identity.directory_name)

        identity = identity.unique_title(self._all_titles)
        self._all_titles.add(identity.title)

        group = self._groups.setdefault(identity.group_id, BenchmarkGroup())

        # Pop and re-insert so the benchmark moves to the end.
        benchmark = group.benchmarks.pop(identity, None)
        if benchmark is None:
            benchmark = Benchmark()

        if benchmark.target is None:
            benchmark.target = target
        elif benchmark.target != target:
            logger.warning(
                "Benchmark ID %s encountered multiple times. Benchmark IDs "
                "must be unique. First seen in the benchmark target '%s'",
                identity.title, benchmark.target,
            )

        group.benchmarks[identity] = benchmark
        return identity

    def check_group(self, target: str, group_id: str) -> None:
        group = self._groups.get(group_id)
        if group is None or group.target is None:
            return
        if group.target != target:
            logger.warning(
                "Benchmark group %s encountered again. Benchmark group IDs "
                "must be unique. First seen in the benchmark target '%s'",
                group_id, group.target,
            )

    def register_group(self, target: str, group_id: str) -> None:
        group = self._groups.pop(group_id, None)
        if group is None:
            group = BenchmarkGroup()
        group.target = target
        self._groups[group_id] = group

    def record_completion(
        self, identity: BenchmarkId, measurement: MeasurementData
    ) -> SavedStatistics:
        """Write a new snapshot and point the benchmark's record at it.

        Parameters
        ----------
        identity : BenchmarkId
        measurement : MeasurementData

        Returns
        -------
        SavedStatistics

        Raises
        ------
        PersistError
            If the directory, snapshot, or pointer cannot be written.  The
            in-memory entry is left unchanged.
        """
        directory = self._data_directory / identity.directory_name
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistError(
                f"Failed to create directory {directory}: {exc}"
            ) from exc

        stats = SavedStatistics.from_measurement(measurement)
        stats_path = measurement_path(directory)
        write_statistics(stats_path, stats)

        record = BenchmarkRecord(
            id=SavedBenchmarkId.from_benchmark_id(identity),
            latest_record=stats_path.name,
        )
        write_record(directory / RECORD_FILE_NAME, record)

        self._entry(identity).add_stats(stats)
        return stats

    def last_snapshot(self, identity: BenchmarkId) -> Optional[SavedStatistics]:
        benchmark = self._lookup(identity)
        return benchmark.latest_stats if benchmark is not None else None

    def previous_snapshot(
        self, identity: BenchmarkId
    ) -> Optional[SavedStatistics]:
        """Return the snapshot replaced by the most recent write, if any."""
        benchmark = self._lookup(identity)
        return benchmark.previous_stats if benchmark is not None else None

    def compare(self, identity: BenchmarkId) -> Optional[SnapshotComparison]:
        """Compare the previous and latest snapshots of *identity*.

        Returns
        -------
        SnapshotComparison or None
            ``None`` unless both snapshots are present.
        """
        benchmark = self._lookup(identity)
        if benchmark is None:
            return None
        if benchmark.previous_stats is None or benchmark.latest_stats is None:
            return None
        return SnapshotComparison.between(
            benchmark.previous_stats, benchmark.latest_stats
        )

    def iter_benchmarks(self) -> Iterator[Tuple[str, BenchmarkId, Benchmark]]:
        """Yield ``(group_id, identity, benchmark)`` in index order."""
        for group_id, group in self._groups.items():
            for identity, benchmark in group.benchmarks.items():
                yield group_id, identity, benchmark
