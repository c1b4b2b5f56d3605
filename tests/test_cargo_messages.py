# -*- coding: utf-8 -*-
"""
Tests for cargo message decoding and benchmark target discovery.

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
import json
from pathlib import Path

# Third-party
import pytest

# Internal
from bench_history.benchmarking.messages import (
    CompilerArtifact,
    MessageDecodeError,
    decode_message,
    discover_target,
)
from bench_history.benchmarking.models import BenchTarget
from conftest import artifact


class TestDecodeMessage:
    """Tests for decode_message."""

    def test_compiler_artifact(self):
        """Artifacts decode to name, kinds and executable."""
        line = json.dumps(artifact("parse", ["bench"], "/work/target/release/parse-1"))
        decoded = decode_message(line)

        assert decoded == CompilerArtifact(
            name="parse",
            kind=("bench",),
            executable=Path("/work/target/release/parse-1"),
        )

    @pytest.mark.parametrize(
        "reason",
        ["compiler-message", "build-script-executed", "build-finished", "future-thing"],
    )
    def test_other_reasons_ignored(self, reason):
        """Non-artifact messages decode to None."""
        assert decode_message(json.dumps({"reason": reason, "success": True})) is None

    def test_null_or_empty_executable(self):
        """Null and empty executables both mean 'none'."""
        for exe in (None, ""):
            decoded = decode_message(json.dumps(artifact("lib", ["lib"], exe)))
            assert decoded.executable is None

    @pytest.mark.parametrize(
        "line",
        [
            "not json",
            "[1, 2]",
            json.dumps({"no_reason": True}),
            json.dumps({"reason": "compiler-artifact"}),
            json.dumps({"reason": "compiler-artifact", "target": {"kind": ["bench"]}}),
            json.dumps({"reason": "compiler-artifact", "target": {"name": "x", "kind": "bench"}}),
            json.dumps({
                "reason": "compiler-artifact",
                "target": {"name": "x", "kind": ["bench"]},
                "executable": 5,
            }),
        ],
    )
    def test_malformed_raises(self, line):
        """Malformed messages raise MessageDecodeError."""
        with pytest.raises(MessageDecodeError):
            decode_message(line)

    def test_bytes_line(self):
        """UTF-8 bytes decode the same as text."""
        line = json.dumps(artifact("parse", ["bench"], "/t/parse")).encode("utf-8")
        assert decode_message(line).name == "parse"

    def test_invalid_utf8_raises(self):
        """Undecodable bytes raise MessageDecodeError."""
        with pytest.raises(MessageDecodeError):
            decode_message(b"\xff\xfe not utf-8")


class TestDiscoverTarget:
    """Tests for discover_target."""

    @pytest.mark.parametrize("kind", [["bench"], ["test"], ["lib"], ["rlib", "lib"]])
    def test_benchmark_kinds(self, kind):
        """bench, test and lib artifacts with executables are targets."""
        found = discover_target(CompilerArtifact("t", tuple(kind), Path("/x/t")))
        assert found == BenchTarget(name="t", executable=Path("/x/t"))

    def test_bin_excluded(self):
        """Binaries are not benchmark targets."""
        assert discover_target(CompilerArtifact("app", ("bin",), Path("/x/app"))) is None

    def test_no_executable_excluded(self):
        """Artifacts without executables are skipped."""
        assert discover_target(CompilerArtifact("core", ("lib",), None)) is None
