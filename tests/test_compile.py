# -*- coding: utf-8 -*-
"""
Tests for compile_benchmarks.

Replaces cargo with a small Python script (see ``conftest.CargoStub``)
that replays canned JSON messages, exits with a chosen status, and
records each invocation's arguments.

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
import json
from pathlib import Path

# Third-party
import pytest

# Internal
from bench_history.benchmarking.compile import CompileFailed, compile_benchmarks
from bench_history.benchmarking.messages import MessageDecodeError
from bench_history.benchmarking.models import BenchTarget
from conftest import artifact


class TestCompileBenchmarks:
    """Tests for compile_benchmarks."""

    def test_collects_benchmark_artifacts_in_order(self, cargo_stub):
        """Only bench/test/lib artifacts with executables are returned."""
        cargo_stub.emit(
            {"reason": "build-script-executed", "package_id": "dep"},
            artifact("throughput", ["bench"], "/t/release/deps/throughput-aa"),
            {"reason": "compiler-message", "message": {"rendered": "warning"}},
            artifact("integration", ["test"], "/t/release/deps/integration-bb"),
            artifact("mylib", ["lib"], "/t/release/deps/mylib-cc"),
            artifact("tool", ["bin"], "/t/release/tool"),
            artifact("deplib", ["lib"], None),
            "",
            {"reason": "build-finished", "success": True},
        )

        targets = compile_benchmarks(cargo=cargo_stub.command)

        assert targets == [
            BenchTarget("throughput", Path("/t/release/deps/throughput-aa")),
            BenchTarget("integration", Path("/t/release/deps/integration-bb")),
            BenchTarget("mylib", Path("/t/release/deps/mylib-cc")),
        ]
        assert len(cargo_stub.calls()) == 1

    def test_passes_extra_args(self, cargo_stub):
        """Extra args come before the JSON-mode flags."""
        compile_benchmarks(["--features", "simd"], cargo=cargo_stub.command)

        assert cargo_stub.calls() == [
            "bench --features simd --no-run --message-format json"
        ]

    def test_empty_stream(self, cargo_stub):
        """No artifacts means no targets."""
        assert compile_benchmarks(cargo=cargo_stub.command) == []

    def test_failure_reruns_once_for_diagnostics(self, cargo_stub, caplog):
        """A failed build is re-run once without JSON and then raises."""
        cargo_stub.emit(artifact("throughput", ["bench"], "/t/throughput"))
        cargo_stub.exit_with(101)

        with pytest.raises(CompileFailed) as excinfo:
            compile_benchmarks(["--quiet"], cargo=cargo_stub.command)

        assert excinfo.value.returncode == 101
        assert "101" in str(excinfo.value)
        assert cargo_stub.calls() == [
            "bench --quiet --no-run --message-format json",
            "bench --quiet --no-run",
        ]
        assert any("Compile failed" in r.getMessage() for r in caplog.records)

    def test_malformed_message_raises(self, cargo_stub):
        """An undecodable line aborts without a diagnostic re-run."""
        cargo_stub.emit(
            artifact("throughput", ["bench"], "/t/throughput"),
            "{not json",
        )

        with pytest.raises(MessageDecodeError):
            compile_benchmarks(cargo=cargo_stub.command)
        assert len(cargo_stub.calls()) == 1

    def test_spawn_failure_raises_os_error(self, tmp_path):
        """A missing cargo executable surfaces as OSError."""
        with pytest.raises(OSError):
            compile_benchmarks(cargo=str(tmp_path / "no-such-cargo"))

    def test_invalid_utf8_raises_decode_error(self, cargo_stub):
        """Bytes that are not UTF-8 are a decode error, not a crash."""
        valid = artifact("throughput", ["bench"], "/t/throughput")
        cargo_stub.emit_raw(
            (json.dumps(valid) + "\n").encode("utf-8") + b"\xff\xfe not utf-8\n"
        )

        with pytest.raises(MessageDecodeError, match="UTF-8"):
            compile_benchmarks(cargo=cargo_stub.command)
        assert len(cargo_stub.calls()) == 1
