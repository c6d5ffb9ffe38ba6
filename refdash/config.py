"""Configuration for the reference dashboard pipeline.

Defaults reproduce the layout of a Rust compiler checkout with The Rust
Reference vendored under ``src/doc/reference``. Build locations come from the
``BUILD_DIR`` and ``TRIPLE`` environment variables; everything else may be
overridden from a YAML file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

_PATH_FIELDS = ("build_dir", "summary_path", "test_root", "test_builder")


@dataclass
class DashboardConfig:
    """Locations and conventions used by every pipeline stage."""

    build_dir: Path
    triple: str

    # Table of contents of the manual and the title it must start with
    summary_path: Path = Path("src/doc/reference/src/SUMMARY.md")
    summary_title: str = "The Rust Reference"

    # Extracted examples land under test_root/<root_name>/<segments...>/<line>.rs
    test_root: Path = Path("src/test")
    root_name: str = "ref"
    suite: str = "ref"

    # Doctest builder handed to rustdoc; it only prints, never compiles
    test_builder: Path = Path("src/tools/dashboard/print.sh")
    x_py: str = "./x.py"

    # Separator between status and test path in the compiletest log
    log_separator: str = " [rmc] "

    # Paths relative to test_root that need a bounded unwind, on top of the
    # built-in list in refdash.annotate
    extra_unwind_fixups: Tuple[Tuple[str, ...], ...] = field(default_factory=tuple)

    @property
    def dashboard_dir(self) -> Path:
        """Directory holding build artifacts of the dashboard."""
        return self.build_dir / self.triple / "dashboard"

    @property
    def scratch_dir(self) -> Path:
        """Ephemeral directory rustdoc persists doctests into."""
        return self.dashboard_dir / self.root_name

    @property
    def log_path(self) -> Path:
        """Log file written by the test runner."""
        return self.dashboard_dir / f"{self.root_name}.log"

    @property
    def root_segments(self) -> Tuple[str, ...]:
        """Prefix prepended to every hierarchy path."""
        return (self.root_name,)

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any
    ) -> DashboardConfig:
        """Build a configuration from environment variables plus overrides.

        Args:
            environ: Environment mapping; defaults to ``os.environ``.
            **overrides: Field values taking precedence over the environment.

        Raises:
            ValueError: If ``BUILD_DIR`` or ``TRIPLE`` is neither set nor
                overridden, or an override names an unknown field.
        """
        env = os.environ if environ is None else environ
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")

        values: Dict[str, Any] = dict(overrides)
        for key, var in (("build_dir", "BUILD_DIR"), ("triple", "TRIPLE")):
            if key in values:
                continue
            if not env.get(var):
                raise ValueError(f"Environment variable {var} must be set")
            values[key] = env[var]

        for key in _PATH_FIELDS:
            if key in values:
                values[key] = Path(values[key])
        if "extra_unwind_fixups" in values:
            fixups = _parse_fixups(values["extra_unwind_fixups"])
            values["extra_unwind_fixups"] = fixups
        return cls(**values)


def _parse_fixups(raw: Any) -> Tuple[Tuple[str, ...], ...]:
    """Convert a list of ``a/b/c.rs`` strings or segment lists to tuples."""
    if not isinstance(raw, (list, tuple)):
        raise ValueError("'extra_unwind_fixups' must be a list")
    fixups = []
    for entry in raw:
        if isinstance(entry, str):
            fixups.append(tuple(Path(entry).parts))
        elif isinstance(entry, (list, tuple)):
            fixups.append(tuple(str(part) for part in entry))
        else:
            raise ValueError(f"Invalid unwind fixup entry: {entry!r}")
    return tuple(fixups)


def load_config(
    path: Path, environ: Optional[Mapping[str, str]] = None
) -> DashboardConfig:
    """Load a YAML configuration file and merge it with the environment.

    The file holds a mapping whose keys are ``DashboardConfig`` field names.
    An empty file yields the environment-only configuration.
    """
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("The provided YAML must map to a dictionary at top-level.")
    bad_keys = [key for key in data if not isinstance(key, str)]
    if bad_keys:
        # YAML 1.1 turns bare yes/no/on/off keys into booleans
        raise ValueError(f"Configuration keys must be strings, got: {bad_keys!r}")
    return DashboardConfig.from_env(environ, **data)
