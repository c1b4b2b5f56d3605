# -*- coding: utf-8 -*-
"""
Shared pytest fixtures for the bench-history test suite.

Provides builders for estimates and measurements, and a stand-in for
cargo that replays canned JSON messages and records each invocation.

Author
------
Steven Siebert

License
-------
MIT License
See LICENSE file for full text.

Created
-------
2026-02-11

Modified
--------
2026-10-19
"""

# Standard library
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Third-party
import pytest

# Internal
from bench_history.benchmarking.models import (
    ConfidenceInterval,
    Estimate,
    Estimates,
    MeasurementData,
    Throughput,
)


def make_estimate(point: float) -> Estimate:
    """Estimate with a symmetric 95% interval around *point*."""
    return Estimate(
        confidence_interval=ConfidenceInterval(
            confidence_level=0.95,
            lower_bound=point * 0.9,
            upper_bound=point * 1.1,
        ),
        point_estimate=point,
        standard_error=point * 0.01,
    )


def make_estimates(mean: float = 100.0) -> Estimates:
    """Estimates bundle centred on *mean*."""
    return Estimates(
        mean=make_estimate(mean),
        median=make_estimate(mean * 0.98),
        median_abs_dev=make_estimate(mean * 0.05),
        std_dev=make_estimate(mean * 0.07),
        slope=make_estimate(mean * 1.01),
    )


def make_measurement(
    mean: float = 100.0, throughput: Optional[Throughput] = None
) -> MeasurementData:
    """Linear-sampled measurement whose per-iteration time is ~*mean*."""
    iters = [1.0, 2.0, 3.0, 4.0]
    times = [mean * n for n in iters]
    return MeasurementData.from_samples(
        iters, times, make_estimates(mean), throughput
    )


_STUB_SOURCE = '''\
import os
import sys

with open(os.environ["CARGO_STUB_CALLS"], "a", encoding="utf-8") as fh:
    fh.write(" ".join(sys.argv[1:]) + "\\n")

if "--message-format" in sys.argv:
    with open(os.environ["CARGO_STUB_MESSAGES"], "rb") as fh:
        sys.stdout.buffer.write(fh.read())
    sys.stdout.buffer.flush()

sys.exit(int(os.environ.get("CARGO_STUB_EXIT", "0")))
'''


class CargoStub:
    """Fake cargo executable driven by environment variables."""

    def __init__(self, directory: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        self.script = directory / "cargo_stub.py"
        self.script.write_text(
            f"#!{sys.executable}\n" + _STUB_SOURCE, encoding="utf-8"
        )
        self.script.chmod(0o755)
        self.calls_path = directory / "calls.txt"
        self.messages_path = directory / "messages.jsonl"
        self.messages_path.write_text("", encoding="utf-8")
        self._monkeypatch = monkeypatch
        monkeypatch.setenv("CARGO_STUB_CALLS", str(self.calls_path))
        monkeypatch.setenv("CARGO_STUB_MESSAGES", str(self.messages_path))
        monkeypatch.setenv("CARGO_STUB_EXIT", "0")

    @property
    def command(self) -> List[str]:
        return [sys.executable, str(self.script)]

    def emit(self, *messages: Any) -> None:
        """Set the lines written in JSON mode; dicts are JSON-encoded."""
        lines = [
            m if isinstance(m, str) else json.dumps(m) for m in messages
        ]
        self.messages_path.write_text(
            "".join(line + "\n" for line in lines), encoding="utf-8"
        )

    def emit_raw(self, data: bytes) -> None:
        """Set the exact bytes written in JSON mode."""
        self.messages_path.write_bytes(data)

    def exit_with(self, code: int) -> None:
        self._monkeypatch.setenv("CARGO_STUB_EXIT", str(code))

    def calls(self) -> List[str]:
        if not self.calls_path.exists():
            return []
        return self.calls_path.read_text(encoding="utf-8").splitlines()


def artifact(
    name: str, kind: List[str], executable: Optional[str]
) -> Dict[str, Any]:
    """A ``compiler-artifact`` message as cargo writes it."""
    return {
        "reason": "compiler-artifact",
        "package_id": f"{name} 0.1.0 (path+file:///work/{name})",
        "target": {"name": name, "kind": kind, "src_path": f"/work/{name}.rs"},
        "profile": {"opt_level": "3", "debuginfo": 0},
        "features": [],
        "filenames": [],
        "executable": executable,
        "fresh": False,
    }


@pytest.fixture
def cargo_stub(tmp_path, monkeypatch):
    """A ``CargoStub`` living in its own temporary directory."""
    stub_dir = tmp_path / "stub"
    stub_dir.mkdir()
    return CargoStub(stub_dir, monkeypatch)


@pytest.fixture
def measurement():
    """A measurement with a mean of 100."""
    return make_measurement(100.0)
