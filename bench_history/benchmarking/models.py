# -*- coding: utf-8 -*-
"""
Benchmark Data Models — identity, measurement, and history types.

Provides dataclasses for the values the harness passes between the build
step, the benchmark executables, and the result store.  ``BenchTarget``
names one compiled benchmark executable, ``BenchmarkId`` is the
hierarchical identity of a measured quantity, ``MeasurementData`` carries
one completed run's raw samples and estimates, and ``SavedStatistics`` /
``BenchmarkRecord`` are the two units written to disk.

All persisted models support round-tripping via ``to_dict()`` /
``from_dict()``.  These dictionaries are the on-disk schema, so fields may
only ever be added (with a default) and never renamed or removed.

Dependencies
------------
numpy

Author
------
Steven Siebert

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
import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import AbstractSet, Any, Dict, List, Optional, Sequence

# Third-party
import numpy as np

MAX_DIRECTORY_NAME_LEN = 64
_UNSAFE_CHARS = frozenset('?"/\\*<>:|^')
_RESERVED_NAMES = frozenset({"", ".", ".."})
# Fractional seconds directly after HH:MM:SS.
_FRACTION = re.compile(r"(?<=\d\d:\d\d:\d\d)\.(\d+)")

THROUGHPUT_KINDS = ("Bytes", "BytesDecimal", "Elements")


def make_filename_safe(text: str) -> str:
    """Replace characters that are unsafe in file names and truncate.

    Parameters
    ----------
    text : str

    Returns
    -------
    str
        At most ``MAX_DIRECTORY_NAME_LEN`` characters.  Never empty, and
        never ``"."`` or ``".."``, so it is always a real path component.
    """
    safe = "".join("_" if ch in _UNSAFE_CHARS else ch for ch in text)
    safe = safe[:MAX_DIRECTORY_NAME_LEN]
    if safe in _RESERVED_NAMES:
        return "_" * max(len(safe), 1)
    return safe


def _parse_timestamp(text: str) -> datetime:
    # Older writers emit a trailing 'Z' rather than an explicit offset.
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # fromisoformat only takes 3 or 6 fraction digits before Python 3.11.
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text)
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class BenchTarget:
    """A compiled benchmark executable.

    Attributes
    ----------
    name : str
        Build target name (e.g. the bench file stem).
    executable : Path
        Path of the produced executable.
    """

    name: str
    executable: Path


@dataclass(frozen=True)
class Throughput:
    """Unit-tagged rate value attached to a benchmark.

    Attributes
    ----------
    kind : str
        One of ``"Bytes"``, ``"BytesDecimal"``, ``"Elements"``.
    value : int
        Amount processed per iteration.
    """

    kind: str
    value: int

    def __post_init__(self) -> None:
        if self.kind not in THROUGHPUT_KINDS:
            raise ValueError(
                f"Unknown throughput kind {self.kind!r}; "
                f"expected one of {', '.join(THROUGHPUT_KINDS)}"
            )

    def to_dict(self) -> Dict[str, int]:
        """Serialize to a single-key dictionary ``{kind: value}``."""
        return {self.kind: self.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Throughput':
        """Deserialize from a single-key dictionary.

        Raises
        ------
        ValueError
            If *data* is not a single-key mapping.
        """
        if not isinstance(data, dict) or len(data) != 1:
            raise ValueError(f"Malformed throughput value: {data!r}")
        (kind, value), = data.items()
        return cls(kind=kind, value=int(value))


@dataclass(frozen=True)
class ConfidenceInterval:
    """Confidence interval around a point estimate."""

    confidence_level: float
    lower_bound: float
    upper_bound: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "confidence_level": self.confidence_level,
            "lower_bound": self.lower_bound,
            "upper_bound": self.upper_bound,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ConfidenceInterval':
        return cls(
            confidence_level=float(data["confidence_level"]),
            lower_bound=float(data["lower_bound"]),
            upper_bound=float(data["upper_bound"]),
        )


@dataclass(frozen=True)
class Estimate:
    """A single statistical estimate."""

    confidence_interval: ConfidenceInterval
    point_estimate: float
    standard_error: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "confidence_interval": self.confidence_interval.to_dict(),
            "point_estimate": self.point_estimate,
            "standard_error": self.standard_error,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Estimate':
        return cls(
            confidence_interval=ConfidenceInterval.from_dict(
                data["confidence_interval"]
            ),
            point_estimate=float(data["point_estimate"]),
            standard_error=float(data["standard_error"]),
        )


@dataclass(frozen=True)
class Estimates:
    """Bundle of estimates produced by the analysis step.

    The harness stores and forwards this value without interpreting it,
    apart from reading ``mean.point_estimate`` when comparing snapshots.

    Attributes
    ----------
    mean : Estimate
    median : Estimate
    median_abs_dev : Estimate
    std_dev : Estimate
    slope : Estimate, optional
        Only present when the samples were collected linearly.
    """

    mean: Estimate
    median: Estimate
    median_abs_dev: Estimate
    std_dev: Estimate
    slope: Optional[Estimate] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary.

        Returns
        -------
        Dict[str, Any]
        """
        d: Dict[str, Any] = {
            "mean": self.mean.to_dict(),
            "median": self.median.to_dict(),
            "median_abs_dev": self.median_abs_dev.to_dict(),
            "std_dev": self.std_dev.to_dict(),
        }
        if self.slope is not None:
            d["slope"] = self.slope.to_dict()
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Estimates':
        """Deserialize from dictionary.

        Parameters
        ----------
        data : Dict[str, Any]

        Returns
        -------
        Estimates
        """
        slope = data.get("slope")
        return cls(
            mean=Estimate.from_dict(data["mean"]),
            median=Estimate.from_dict(data["median"]),
            median_abs_dev=Estimate.from_dict(data["median_abs_dev"]),
            std_dev=Estimate.from_dict(data["std_dev"]),
            slope=Estimate.from_dict(slope) if slope is not None else None,
        )


@dataclass
class MeasurementData:
    """Raw samples and derived estimates from one completed benchmark run.

    Attributes
    ----------
    iter_counts : np.ndarray
        Iteration count of each sample.
    sample_times : np.ndarray
        Total measured time of each sample.
    avg_times : np.ndarray
        Per-iteration average of each sample.
    absolute_estimates : Estimates
        Estimates computed from the samples.
    throughput : Throughput, optional
    """

    iter_counts: np.ndarray
    sample_times: np.ndarray
    avg_times: np.ndarray
    absolute_estimates: Estimates
    throughput: Optional[Throughput] = None

    @classmethod
    def from_samples(
        cls,
        iter_counts: Sequence[float],
        sample_times: Sequence[float],
        absolute_estimates: Estimates,
        throughput: Optional[Throughput] = None,
    ) -> 'MeasurementData':
        """Build from raw samples, deriving the per-iteration averages.

        Parameters
        ----------
        iter_counts : Sequence[float]
            Iteration count of each sample.  All must be positive.
        sample_times : Sequence[float]
            Measured time of each sample, same length as *iter_counts*.
        absolute_estimates : Estimates
        throughput : Throughput, optional

        Returns
        -------
        MeasurementData

        Raises
        ------
        ValueError
            If the inputs are empty, of different lengths, or contain a
            non-positive iteration count.
        """
        iters = np.asarray(iter_counts, dtype=np.float64)
        times = np.asarray(sample_times, dtype=np.float64)

        if iters.size == 0:
            raise ValueError("Cannot build measurement data from empty samples.")
        if iters.shape != times.shape:
            raise ValueError(
                f"iter_counts and sample_times differ in length "
                f"({iters.size} != {times.size})"
            )
        if np.any(iters <= 0):
            raise ValueError("iter_counts must all be positive.")

        return cls(
            iter_counts=iters,
            sample_times=times,
            avg_times=times / iters,
            absolute_estimates=absolute_estimates,
            throughput=throughput,
        )


@dataclass(frozen=True)
class BenchmarkId:
    """Hierarchical identity of one measured quantity.

    Equality and hashing consider only ``group_id``, ``function_id``,
    ``value_str`` and ``throughput``.  ``title`` and ``directory_name`` are
    derived on construction and may later be replaced by disambiguated
    variants (see ``unique_title`` and ``unique_directory_name``).

    Attributes
    ----------
    group_id : str
    function_id : str, optional
    value_str : str, optional
    throughput : Throughput, optional
    title : str
        Human-readable label, e.g. ``"parsing/json/1024"``.
    directory_name : str
        Relative directory (``/``-separated) holding this benchmark's
        history files.
    """

    group_id: str
    function_id: Optional[str] = None
    value_str: Optional[str] = None
    throughput: Optional[Throughput] = None
    title: str = field(default="", compare=False)
    directory_name: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        parts = self._parts()
        if not self.title:
            object.__setattr__(self, "title", "/".join(parts))
        if not self.directory_name:
            object.__setattr__(
                self,
                "directory_name",
                "/".join(make_filename_safe(p) for p in parts),
            )

    def _parts(self) -> List[str]:
        return [
            p for p in (self.group_id, self.function_id, self.value_str)
            if p is not None
        ]

    def unique_directory_name(
        self, existing: AbstractSet[str]
    ) -> 'BenchmarkId':
        """Return an identity whose directory name is not in *existing*.

        Appends ``_2``, ``_3``, ... until a free name is found.  Returns
        ``self`` unchanged when there is no collision.
        """
        if self.directory_name not in existing:
            return self
        counter = 2
        while True:
            candidate = f"{self.directory_name}_{counter}"
            if candidate not in existing:
                return replace(self, directory_name=candidate)
            counter += 1

    def unique_title(self, existing: AbstractSet[str]) -> 'BenchmarkId':
        """Return an identity whose title is not in *existing*.

        Appends `` #2``, `` #3``, ... until a free title is found.
        """
        if self.title not in existing:
            return self
        counter = 2
        while True:
            candidate = f"{self.title} #{counter}"
            if candidate not in existing:
                return replace(self, title=candidate)
            counter += 1


@dataclass(frozen=True)
class SavedBenchmarkId:
    """Durable projection of ``BenchmarkId``.

    Holds only the four logical fields; derived strings are recomputed
    on load and never persisted.
    """

    group_id: str
    function_id: Optional[str] = None
    value_str: Optional[str] = None
    throughput: Optional[Throughput] = None

    @classmethod
    def from_benchmark_id(cls, identity: BenchmarkId) -> 'SavedBenchmarkId':
        return cls(
            group_id=identity.group_id,
            function_id=identity.function_id,
            value_str=identity.value_str,
            throughput=identity.throughput,
        )

    def to_benchmark_id(self) -> BenchmarkId:
        return BenchmarkId(
            group_id=self.group_id,
            function_id=self.function_id,
            value_str=self.value_str,
            throughput=self.throughput,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary.

        Returns
        -------
        Dict[str, Any]
        """
        return {
            "group_id": self.group_id,
            "function_id": self.function_id,
            "value_str": self.value_str,
            "throughput": (
                self.throughput.to_dict() if self.throughput is not None else None
            ),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SavedBenchmarkId':
        """Deserialize from dictionary.

        Only ``group_id`` is required.

        Parameters
        ----------
        data : Dict[str, Any]

        Returns
        -------
        SavedBenchmarkId
        """
        throughput = data.get("throughput")
        return cls(
            group_id=str(data["group_id"]),
            function_id=data.get("function_id"),
            value_str=data.get("value_str"),
            throughput=(
                Throughput.from_dict(throughput) if throughput is not None else None
            ),
        )


@dataclass
class SavedStatistics:
    """One persisted measurement snapshot.

    Attributes
    ----------
    datetime : datetime
        UTC time the snapshot was taken.
    iterations : List[float]
        Iteration count of each sample.
    values : List[float]
        Measured time of each sample.
    avg_values : List[float]
        Per-iteration average of each sample.
    estimates : Estimates
    throughput : Throughput, optional
    """

    datetime: datetime
    iterations: List[float]
    values: List[float]
    avg_values: List[float]
    estimates: Estimates
    throughput: Optional[Throughput] = None

    @classmethod
    def from_measurement(
        cls,
        measurement: MeasurementData,
        now: Optional[datetime] = None,
    ) -> 'SavedStatistics':
        """Snapshot a completed measurement.

        Parameters
        ----------
        measurement : MeasurementData
        now : datetime, optional
            Snapshot time.  Defaults to the current UTC time.

        Returns
        -------
        SavedStatistics
        """
        return cls(
            datetime=now or datetime.now(timezone.utc),
            iterations=[float(v) for v in measurement.iter_counts],
            values=[float(v) for v in measurement.sample_times],
            avg_values=[float(v) for v in measurement.avg_times],
            estimates=measurement.absolute_estimates,
            throughput=measurement.throughput,
        )

    @property
    def mean(self) -> float:
        """Point estimate of the mean per-iteration time."""
        return self.estimates.mean.point_estimate

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary.

        Returns
        -------
        Dict[str, Any]
        """
        return {
            "datetime": self.datetime.isoformat(),
            "iterations": list(self.iterations),
            "values": list(self.values),
            "avg_values": list(self.avg_values),
            "estimates": self.estimates.to_dict(),
            "throughput": (
                self.throughput.to_dict() if self.throughput is not None else None
            ),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SavedStatistics':
        """Deserialize from dictionary.

        ``avg_values`` and ``throughput`` are optional.

        Parameters
        ----------
        data : Dict[str, Any]

        Returns
        -------
        SavedStatistics
        """
        throughput = data.get("throughput")
        return cls(
            datetime=_parse_timestamp(data["datetime"]),
            iterations=[float(v) for v in data["iterations"]],
            values=[float(v) for v in data["values"]],
            avg_values=[float(v) for v in data.get("avg_values", [])],
            estimates=Estimates.from_dict(data["estimates"]),
            throughput=(
                Throughput.from_dict(throughput) if throughput is not None else None
            ),
        )


@dataclass(frozen=True)
class BenchmarkRecord:
    """Pointer record naming the latest snapshot of one benchmark.

    Attributes
    ----------
    id : SavedBenchmarkId
    latest_record : str
        File name of the newest measurement file, relative to the
        directory holding this record.
    """

    id: SavedBenchmarkId
    latest_record: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id.to_dict(),
            "latest_record": self.latest_record,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BenchmarkRecord':
        return cls(
            id=SavedBenchmarkId.from_dict(data["id"]),
            latest_record=str(data["latest_record"]),
        )


@dataclass(frozen=True)
class SnapshotComparison:
    """Change in mean time between two consecutive snapshots.

    Attributes
    ----------
    previous_mean : float
    latest_mean : float
    relative_change : float, optional
        ``(latest - previous) / previous``; ``None`` when the previous
        mean is zero.
    """

    previous_mean: float
    latest_mean: float
    relative_change: Optional[float]

    @classmethod
    def between(
        cls, previous: SavedStatistics, latest: SavedStatistics
    ) -> 'SnapshotComparison':
        prev_mean = previous.mean
        latest_mean = latest.mean
        change = None
        if prev_mean != 0.0:
            change = (latest_mean - prev_mean) / prev_mean
        return cls(
            previous_mean=prev_mean,
            latest_mean=latest_mean,
            relative_change=change,
        )
