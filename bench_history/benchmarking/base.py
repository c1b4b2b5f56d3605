# -*- coding: utf-8 -*-
"""
Result Store ABC — contract for benchmark history backends.

Defines ``ResultStore``, the interface the benchmark driver uses to
register benchmark identities, persist completed measurements, and look
up the previous run's snapshot.  ``Model`` in ``store`` is the
filesystem-backed implementation.

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
from abc import ABC, abstractmethod
from typing import Optional

# Internal
from bench_history.benchmarking.models import (
    BenchmarkId,
    MeasurementData,
    SavedStatistics,
)


class ResultStore(ABC):
    """Abstract base class for benchmark history persistence.

    Benchmarks are keyed by ``BenchmarkId``.  Implementations must keep
    every registered identity's title and directory name unique for the
    lifetime of the store.
    """

    @abstractmethod
    def register(self, target: str, identity: BenchmarkId) -> BenchmarkId:
        """Register a benchmark identity seen in *target*.

        Parameters
        ----------
        target : str
            Name of the build target that produced the benchmark.
        identity : BenchmarkId
            The identity reported by the benchmark executable.

        Returns
        -------
        BenchmarkId
            *identity*, possibly with a disambiguated title and directory
            name.  Callers must use the returned value from here on.
        """
        ...

    @abstractmethod
    def check_group(self, target: str, group_id: str) -> None:
        """Warn if *group_id* already belongs to a different target.

        Parameters
        ----------
        target : str
        group_id : str
        """
        ...

    @abstractmethod
    def register_group(self, target: str, group_id: str) -> None:
        """Attribute *group_id* to *target*.

        Parameters
        ----------
        target : str
        group_id : str
        """
        ...

    @abstractmethod
    def record_completion(
        self, identity: BenchmarkId, measurement: MeasurementData
    ) -> SavedStatistics:
        """Persist a completed measurement and make it the latest snapshot.

        Parameters
        ----------
        identity : BenchmarkId
            A value previously returned by ``register``.
        measurement : MeasurementData

        Returns
        -------
        SavedStatistics
            The snapshot that was written.
        """
        ...

    @abstractmethod
    def last_snapshot(self, identity: BenchmarkId) -> Optional[SavedStatistics]:
        """Return the latest known snapshot for *identity*, if any.

        Parameters
        ----------
        identity : BenchmarkId

        Returns
        -------
        SavedStatistics or None
        """
        ...
