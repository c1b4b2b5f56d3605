# -*- coding: utf-8 -*-
"""
Benchmarking subpackage — build orchestration and result history.

Provides data models for benchmark identities and snapshots, the cargo
build step that discovers benchmark executables, and the filesystem
store that keeps each benchmark's measurement history.

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

from bench_history.benchmarking.models import (
    BenchmarkId,
    BenchmarkRecord,
    BenchTarget,
    ConfidenceInterval,
    Estimate,
    Estimates,
    MeasurementData,
    SavedBenchmarkId,
    SavedStatistics,
    SnapshotComparison,
    Throughput,
)
from bench_history.benchmarking.base import ResultStore
from bench_history.benchmarking.codec import PersistError, RecordDecodeError
from bench_history.benchmarking.messages import MessageDecodeError
from bench_history.benchmarking.compile import CompileFailed, compile_benchmarks
from bench_history.benchmarking.store import Benchmark, BenchmarkGroup, Model

__all__ = [
    "Benchmark",
    "BenchmarkGroup",
    "BenchmarkId",
    "BenchmarkRecord",
    "BenchTarget",
    "CompileFailed",
    "ConfidenceInterval",
    "Estimate",
    "Estimates",
    "MeasurementData",
    "MessageDecodeError",
    "Model",
    "PersistError",
    "RecordDecodeError",
    "ResultStore",
    "SavedBenchmarkId",
    "SavedStatistics",
    "SnapshotComparison",
    "Throughput",
    "compile_benchmarks",
]
