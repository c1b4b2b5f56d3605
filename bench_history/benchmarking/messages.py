# -*- coding: utf-8 -*-
"""
Cargo Messages — decode ``--message-format json`` lines and find benchmarks.

Cargo writes one JSON object per line, tagged by a ``reason`` field.  Only
``compiler-artifact`` messages matter here; ``compiler-message``,
``build-script-executed`` and ``build-finished`` are accepted and ignored,
as is any reason added by a newer cargo.

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
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

# Internal
from bench_history.benchmarking.models import BenchTarget

logger = logging.getLogger(__name__)

ARTIFACT_REASON = "compiler-artifact"
IGNORED_REASONS = frozenset({
    "compiler-message",
    "build-script-executed",
    "build-finished",
})

# Benches and tests have executables.  Libraries might, if they expose tests.
BENCHMARK_KINDS = frozenset({"bench", "test", "lib"})


class MessageDecodeError(ValueError):
    """Raised when a cargo message line cannot be decoded."""


@dataclass(frozen=True)
class CompilerArtifact:
    """The parts of a ``compiler-artifact`` message the harness uses.

    Attributes
    ----------
    name : str
        Target name.
    kind : Tuple[str, ...]
        Target kinds (``"bench"``, ``"lib"``, ``"bin"``, ...).
    executable : Path, optional
        Produced executable, if the artifact has one.
    """

    name: str
    kind: Tuple[str, ...]
    executable: Optional[Path] = None


def decode_message(line: Union[str, bytes]) -> Optional[CompilerArtifact]:
    """Decode one message line.

    Parameters
    ----------
    line : str or bytes
        A single JSON object as written by cargo.  Bytes must be UTF-8.

    Returns
    -------
    CompilerArtifact or None
        ``None`` for messages other than ``compiler-artifact``.

    Raises
    ------
    MessageDecodeError
        If the line is not a JSON object with a string ``reason``, or is a
        ``compiler-artifact`` without a usable ``target``.
    """
    if isinstance(line, bytes):
        try:
            line = line.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MessageDecodeError(
                f"Failed to parse message from cargo: invalid UTF-8 ({exc})"
            ) from exc

    try:
        payload = json.loads(line)
    except json.JSONDecodeError as exc:
        raise MessageDecodeError(
            f"Failed to parse message from cargo: {exc}"
        ) from exc

    if not isinstance(payload, dict):
        raise MessageDecodeError(
            f"Failed to parse message from cargo: expected an object, "
            f"got {type(payload).__name__}"
        )

    reason = payload.get("reason")
    if not isinstance(reason, str):
        raise MessageDecodeError(
            "Failed to parse message from cargo: missing 'reason'"
        )

    if reason != ARTIFACT_REASON:
        if reason not in IGNORED_REASONS:
            logger.debug("Ignoring cargo message with reason '%s'", reason)
        return None

    target = payload.get("target")
    if not isinstance(target, dict):
        raise MessageDecodeError(
            "Failed to parse message from cargo: artifact without 'target'"
        )
    name = target.get("name")
    kind = target.get("kind")
    if not isinstance(name, str):
        raise MessageDecodeError(
            "Failed to parse message from cargo: artifact target without 'name'"
        )
    if not isinstance(kind, list) or not all(isinstance(k, str) for k in kind):
        raise MessageDecodeError(
            f"Failed to parse message from cargo: artifact '{name}' has "
            f"malformed 'kind'"
        )

    executable = payload.get("executable")
    if executable is not None and not isinstance(executable, str):
        raise MessageDecodeError(
            f"Failed to parse message from cargo: artifact '{name}' has "
            f"malformed 'executable'"
        )

    return CompilerArtifact(
        name=name,
        kind=tuple(kind),
        executable=Path(executable) if executable else None,
    )


def discover_target(artifact: CompilerArtifact) -> Optional[BenchTarget]:
    """Return a ``BenchTarget`` if *artifact* is a runnable benchmark.

    Parameters
    ----------
    artifact : CompilerArtifact

    Returns
    -------
    BenchTarget or None
        ``None`` when the artifact is not a bench/test/lib target or has
        no executable.
    """
    if not BENCHMARK_KINDS.intersection(artifact.kind):
        return None
    if artifact.executable is None:
        return None
    return BenchTarget(name=artifact.name, executable=artifact.executable)
