"""Centralized path management for ecoreceipt.

Runtime files (rule overrides) are resolved relative to a home directory:
ECORECEIPT_HOME when set, else the current working directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

HOME_ENV_VAR = "ECORECEIPT_HOME"


def _get_project_root() -> Path:
    """Determine the runtime home directory."""
    configured = os.environ.get(HOME_ENV_VAR, "").strip()
    if configured:
        return Path(configured).expanduser()
    return Path.cwd()


@dataclass
class ProjectPaths:
    """Container for all runtime paths, computed relative to the home directory."""

    root: Path = field(default_factory=_get_project_root)

    def __post_init__(self) -> None:
        self.root = self.root.resolve()

    @property
    def config(self) -> Path:
        """Configuration directory (config/)."""
        return self.root / "config"

    @property
    def receipt_rules(self) -> Path:
        """Project-level category/retailer rules layered over the packaged defaults."""
        return self.config / "receipt_rules.toml"


_paths: ProjectPaths | None = None


def get_paths() -> ProjectPaths:
    """Get the singleton ProjectPaths instance."""
    global _paths
    if _paths is None:
        _paths = ProjectPaths()
    return _paths


def reset_paths() -> None:
    """Forget the cached paths so the next get_paths() re-reads ECORECEIPT_HOME."""
    global _paths
    _paths = None
