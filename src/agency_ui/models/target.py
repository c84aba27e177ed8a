"""Project target model: where scaffolding happens and with which tooling."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel


class PackageManager(str, Enum):
    """Package managers whose command syntax the scaffolder speaks."""

    npm = "npm"
    yarn = "yarn"
    pnpm = "pnpm"


class ProjectTarget(BaseModel):
    """Destination of scaffolding.

    The path is absolute and never changes once chosen; the directory's
    contents are mutated by every step. The package manager is fixed for
    the remainder of a pipeline run once the target is built.
    """

    model_config = {"extra": "forbid", "frozen": True}

    path: Path
    package_manager: PackageManager = PackageManager.npm

    @property
    def exists(self) -> bool:
        """Whether the target directory currently exists on disk."""
        return self.path.is_dir()

    @classmethod
    def detect(cls, path: Path) -> ProjectTarget:
        """Build a target for path, deriving the package manager from lockfiles."""
        from agency_ui.scaffold.package_manager import detect_package_manager

        resolved = path.resolve()
        return cls(path=resolved, package_manager=detect_package_manager(resolved))
