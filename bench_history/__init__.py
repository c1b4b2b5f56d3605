# -*- coding: utf-8 -*-
"""
Bench History — benchmark build orchestration and result history.

Compiles cargo benchmarks to discover their executables and keeps a
durable per-benchmark history of measurements, so each run can be
compared with the one before it.

Dependencies
------------
numpy
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

from bench_history.benchmarking import (
    BenchmarkId,
    BenchTarget,
    CompileFailed,
    Estimates,
    MeasurementData,
    Model,
    ResultStore,
    SavedStatistics,
    Throughput,
    compile_benchmarks,
)
from bench_history.config import HarnessConfig

__all__ = [
    "BenchmarkId",
    "BenchTarget",
    "CompileFailed",
    "Estimates",
    "HarnessConfig",
    "MeasurementData",
    "Model",
    "ResultStore",
    "SavedStatistics",
    "Throughput",
    "compile_benchmarks",
]
