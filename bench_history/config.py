# -*- coding: utf-8 -*-
"""
Harness Configuration — where history lives and which cargo to run.

Values come from explicit arguments first, then environment variables,
then defaults:

==================  ===========================================  ===================
Setting             Environment                                  Default
==================  ===========================================  ===================
criterion_home      ``CRITERION_HOME``, ``CARGO_TARGET_DIR``     ``target/criterion``
timeline            ``CRITERION_TIMELINE``                       ``main``
cargo               ``CARGO``                                    ``cargo``
==================  ===========================================  ===================

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
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

DEFAULT_TARGET_DIR = "target"
DEFAULT_TIMELINE = "main"
DEFAULT_CARGO = "cargo"


@dataclass(frozen=True)
class HarnessConfig:
    """Resolved harness settings.

    Attributes
    ----------
    criterion_home : Path
        Root output directory.
    timeline : str
        History timeline name.
    cargo : str
        Cargo executable.
    """

    criterion_home: Path
    timeline: str = DEFAULT_TIMELINE
    cargo: str = DEFAULT_CARGO

    @property
    def data_directory(self) -> Path:
        """``criterion_home/data/timeline``."""
        return self.criterion_home / "data" / self.timeline

    @classmethod
    def from_env(
        cls,
        criterion_home: Optional[Union[Path, str]] = None,
        timeline: Optional[str] = None,
        cargo: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> 'HarnessConfig':
        """Resolve settings from arguments, the environment, and defaults.

        Parameters
        ----------
        criterion_home : Path or str, optional
        timeline : str, optional
        cargo : str, optional
        environ : Mapping[str, str], optional
            Defaults to ``os.environ``.

        Returns
        -------
        HarnessConfig
        """
        env = os.environ if environ is None else environ

        if criterion_home is None:
            if env.get("CRITERION_HOME"):
                criterion_home = env["CRITERION_HOME"]
            else:
                target_dir = env.get("CARGO_TARGET_DIR") or DEFAULT_TARGET_DIR
                criterion_home = Path(target_dir) / "criterion"

        return cls(
            criterion_home=Path(criterion_home),
            timeline=timeline or env.get("CRITERION_TIMELINE") or DEFAULT_TIMELINE,
            cargo=cargo or env.get("CARGO") or DEFAULT_CARGO,
        )
