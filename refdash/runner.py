"""Run the extracted examples through compiletest."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from refdash.logging import get_logger

logger = get_logger(__name__)

# Cargo exports build settings that make x.py rebuild rustc; drop them
_FILTERED_ENV_MARKERS = ("CARGO", "LD_LIBRARY_PATH", "RUST")


def filtered_env(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Return a copy of ``environ`` without Cargo and Rust build variables."""
    env = os.environ if environ is None else environ
    return {
        key: value
        for key, value in env.items()
        if not any(marker in key for marker in _FILTERED_ENV_MARKERS)
    }


def build_command(suite: str, log_path: Path, x_py: str = "./x.py") -> List[str]:
    """Return the x.py invocation testing ``suite`` with a log at ``log_path``."""
    return [
        x_py,
        "test",
        suite,
        "-i",
        "--stage",
        "1",
        "--test-args",
        "--logfile",
        "--test-args",
        str(log_path),
    ]


def run_examples(
    suite: str,
    log_path: Path,
    x_py: str = "./x.py",
    environ: Optional[Mapping[str, str]] = None,
) -> int:
    """Run compiletest on ``suite`` and log the results to ``log_path``.

    The exit status is returned but not checked: failing examples make the
    test suite fail, and their outcomes are read from the log instead.
    """
    log_path.parent.mkdir(parents=True, exist_ok=True)
    cmd = build_command(suite, log_path, x_py)
    logger.info(f"Running test suite '{suite}'")
    logger.debug(f"Running: {' '.join(cmd)}")
    result = subprocess.run(
        cmd, env=filtered_env(environ), stdout=subprocess.DEVNULL, check=False
    )
    if result.returncode != 0:
        logger.warning(f"Test suite '{suite}' exited with status {result.returncode}")
    return result.returncode
