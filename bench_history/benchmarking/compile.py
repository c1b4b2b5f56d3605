# -*- coding: utf-8 -*-
"""
Benchmark Compilation — build benchmarks with ``cargo bench --no-run``.

Runs cargo with ``--message-format json``, reads its message stream line
by line as it is produced, and collects the benchmark executables it
reports.  Cargo's human-readable progress goes straight to our stderr.

When the build fails, the JSON run has swallowed the compiler errors, so
cargo is run once more without ``--message-format`` and with the terminal
attached, purely so the user can see them.

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
import logging
import subprocess
from typing import List, Sequence, Union

# Internal
from bench_history.benchmarking.messages import (
    MessageDecodeError,
    decode_message,
    discover_target,
)
from bench_history.benchmarking.models import BenchTarget

logger = logging.getLogger(__name__)

CargoCommand = Union[str, Sequence[str]]


class CompileFailed(RuntimeError):
    """Raised when ``cargo bench --no-run`` exits unsuccessfully.

    Attributes
    ----------
    returncode : int
        Exit status of the JSON-mode cargo run.
    """

    def __init__(self, returncode: int) -> None:
        self.returncode = returncode
        super().__init__(
            f"'cargo bench' returned an error (exit status {returncode}); "
            f"unable to continue."
        )


def _base_command(cargo: CargoCommand) -> List[str]:
    if isinstance(cargo, str):
        return [cargo]
    return list(cargo)


def compile_benchmarks(
    extra_args: Sequence[str] = (),
    cargo: CargoCommand = "cargo",
) -> List[BenchTarget]:
    """Compile the benchmarks without running them.

    Parameters
    ----------
    extra_args : Sequence[str]
        Passed to ``cargo bench`` unchanged.
    cargo : str or Sequence[str]
        Cargo executable, or a full command prefix to run in its place.

    Returns
    -------
    List[BenchTarget]
        Benchmark executables in the order cargo reported them.

    Raises
    ------
    OSError
        If cargo cannot be started.
    MessageDecodeError
        If cargo emits a message that cannot be decoded.
    CompileFailed
        If the build fails.  Raised after the diagnostic re-run.
    """
    base = _base_command(cargo)
    command = [
        *base, "bench", *extra_args, "--no-run", "--message-format", "json",
    ]
    logger.debug("Running %s", " ".join(command))

    process = subprocess.Popen(
        command,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
    )

    targets: List[BenchTarget] = []
    assert process.stdout is not None
    try:
        for line in process.stdout:
            line = line.strip()
            if not line:
                continue
            artifact = decode_message(line)
            if artifact is None:
                continue
            target = discover_target(artifact)
            if target is not None:
                targets.append(target)
    except BaseException:
        process.kill()
        process.wait()
        raise
    finally:
        process.stdout.close()

    returncode = process.wait()
    if returncode != 0:
        logger.error("Compile failed; running compile again to show error messages")
        subprocess.run([*base, "bench", *extra_args, "--no-run"], check=False)
        raise CompileFailed(returncode)

    return targets
