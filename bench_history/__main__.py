# -*- coding: utf-8 -*-
"""
CLI entry point for bench-history.

Run with::

    python -m bench_history targets                    # list bench executables
    python -m bench_history targets -- --features foo  # extra cargo args
    python -m bench_history history                    # show stored history
    python -m bench_history --timeline nightly history

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
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from bench_history.benchmarking.compile import CompileFailed, compile_benchmarks
from bench_history.benchmarking.messages import MessageDecodeError
from bench_history.benchmarking.store import Model
from bench_history.config import DEFAULT_TIMELINE, HarnessConfig

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="python -m bench_history",
        description="Benchmark build orchestration and result history",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  CRITERION_HOME           history root (default: $CARGO_TARGET_DIR/criterion)
  CRITERION_TIMELINE       timeline name
  CARGO                    cargo executable
  BENCH_HISTORY_LOG_LEVEL  logging level (default: INFO)

Examples:
  python -m bench_history targets
  python -m bench_history targets -- --features simd
  python -m bench_history --criterion-home ./out history
""",
    )
    parser.add_argument(
        "--criterion-home", type=Path, default=None,
        help="History root directory (default: target/criterion)",
    )
    parser.add_argument(
        "--timeline", default=None,
        help=f"History timeline (default: {DEFAULT_TIMELINE})",
    )
    parser.add_argument(
        "--cargo", default=None,
        help="Cargo executable (default: $CARGO or cargo)",
    )

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser(
        "targets",
        help="Compile benchmarks and list their executables "
             "(arguments after '--' go to 'cargo bench')",
    )
    sub.add_parser("history", help="Show the latest stored snapshot per benchmark")
    return parser


def _split_cargo_args(argv: List[str]) -> Tuple[List[str], List[str]]:
    """Split *argv* at the first ``--`` into our args and cargo's."""
    if "--" not in argv:
        return argv, []
    idx = argv.index("--")
    return argv[:idx], argv[idx + 1:]


def _run_targets(config: HarnessConfig, cargo_args: List[str]) -> int:
    try:
        targets = compile_benchmarks(cargo_args, cargo=config.cargo)
    except CompileFailed as exc:
        logger.error("%s", exc)
        return 1
    except MessageDecodeError as exc:
        logger.error("Unreadable output from '%s bench': %s", config.cargo, exc)
        return 1
    except OSError as exc:
        logger.error("Could not run '%s bench': %s", config.cargo, exc)
        return 1
    for target in targets:
        print(f"{target.name}\t{target.executable}")
    return 0


def _run_history(config: HarnessConfig) -> int:
    model = Model.load(config.criterion_home, config.timeline)
    current_group = None
    for group_id, identity, benchmark in model.iter_benchmarks():
        if group_id != current_group:
            print(group_id)
            current_group = group_id
        stats = benchmark.latest_stats
        when = stats.datetime.isoformat() if stats is not None else "-"
        print(f"  {identity.title:<55s}  {when}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments and run the selected command."""
    log_level_str = os.getenv("BENCH_HISTORY_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, log_level_str, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )

    own_args, cargo_args = _split_cargo_args(
        sys.argv[1:] if argv is None else list(argv)
    )
    args = _build_parser().parse_args(own_args)
    config = HarnessConfig.from_env(
        criterion_home=args.criterion_home,
        timeline=args.timeline,
        cargo=args.cargo,
    )

    if args.command == "targets":
        return _run_targets(config, cargo_args)
    return _run_history(config)


if __name__ == "__main__":
    sys.exit(main())
