"""Scaffolder configuration model for Agency UI.

Captures agency-ui.yaml fields that seed prompt defaults and toggle
optional behaviour such as running database migrations.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

CONFIG_FILENAME = "agency-ui.yaml"

FontName = Literal["poppins", "montserrat", "inter", "roboto"]


class ScaffoldConfig(BaseModel):
    """Scaffolder configuration loaded from agency-ui.yaml."""

    model_config = {"extra": "forbid"}

    default_project_name: str = "my-agency-app"
    default_package_manager: Literal["npm", "yarn", "pnpm"] = "yarn"
    default_auth: Literal["better-auth", "nextauth", "none"] = "better-auth"
    auth_components: list[str] = Field(
        default_factory=lambda: ["button", "input", "card", "form", "label"]
    )
    default_database: str = "postgresql"
    default_fonts: list[FontName] = Field(default_factory=lambda: ["poppins", "montserrat"])
    run_migrations: bool = True


def find_config_file(start: Path | None = None) -> Path | None:
    """Walk up from start (default: cwd) looking for agency-ui.yaml.

    The start directory does not need to exist yet; lookup begins at its
    nearest existing ancestor.

    Args:
        start: Starting path (file or directory). Defaults to cwd.

    Returns:
        Path to the config file, or None if none is found.
    """
    current = (start or Path.cwd()).resolve()
    while not current.exists() and current != current.parent:
        current = current.parent
    if current.is_file():
        current = current.parent
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current == current.parent:
            return None
        current = current.parent


def load_scaffold_config(start: Path | None = None) -> ScaffoldConfig:
    """Load ScaffoldConfig from agency-ui.yaml. Returns defaults if not found.

    Args:
        start: Directory to start the upward search from. If None,
            uses the current working directory.

    Returns:
        Validated ScaffoldConfig instance.
    """
    config_path = find_config_file(start)
    if config_path is None:
        return ScaffoldConfig()
    import yaml

    raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if raw is None:
        return ScaffoldConfig()
    return ScaffoldConfig.model_validate(raw)
