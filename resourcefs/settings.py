"""Settings management for resourcefs.

Scope-aware YAML settings declaring which resolvers and loaders a registry
is built with. Scopes are read in order global -> project -> local and deep
merged, so the most specific scope wins. Lists (resolvers, loaders) are
replaced, not concatenated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from typing import Literal

import yaml
from pydantic import BaseModel
from pydantic import Field
from pydantic import ValidationError

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

Scope = Literal["local", "project", "global"]


class ResolverSettings(BaseModel):
    """One path resolver entry."""

    type: Literal["directory", "zip", "jar"] = Field(description="Storage backend")
    root: Path = Field(description="Root directory of the backend")


class LoaderSettings(BaseModel):
    """One loader entry."""

    type: Literal["text", "bytes", "json", "yaml"] = Field(description="Built-in loader type")
    scheme: str | None = Field(default=None, description="Scheme (defaults to the type)")
    fallback: str | None = Field(default=None, description="Fallback resource identifier")
    encoding: str | None = Field(default=None, description="Text encoding (text loaders only)")


@dataclass
class SettingsPaths:
    """Standard paths for settings files."""

    global_settings: Path
    project_settings: Path
    local_settings: Path

    @classmethod
    def default(cls) -> SettingsPaths:
        """Create default paths: ~/.resourcefs and ./.resourcefs."""
        return cls(
            global_settings=Path.home() / ".resourcefs" / "settings.yaml",
            project_settings=Path.cwd() / ".resourcefs" / "settings.yaml",
            local_settings=Path.cwd() / ".resourcefs" / "settings.local.yaml",
        )

    def in_order(self) -> list[tuple[Scope, Path]]:
        """Scopes from least to most specific."""
        return [
            ("global", self.global_settings),
            ("project", self.project_settings),
            ("local", self.local_settings),
        ]


class ResourceSettings:
    """Scope-aware settings manager.

    Scope priority (most specific wins):
    1. local (.resourcefs/settings.local.yaml) - machine-specific
    2. project (.resourcefs/settings.yaml) - committed with the project
    3. global (~/.resourcefs/settings.yaml) - user defaults

    Usage:
        settings = ResourceSettings()
        for entry in settings.get_resolvers():
            ...
        settings.add_resolver(ResolverSettings(type="zip", root=Path("packs")), scope="project")
    """

    def __init__(self, paths: SettingsPaths | None = None) -> None:
        self.paths = paths or SettingsPaths.default()

    def get_merged_settings(self) -> dict[str, Any]:
        """Load and merge settings from all scopes.

        Raises:
            ConfigurationError: A settings file is not valid YAML or not a mapping
        """
        result: dict[str, Any] = {}
        for scope, _path in self.paths.in_order():
            result = self._deep_merge(result, self._read_scope(scope))
        return result

    # ----- Resolver settings -----

    def get_resolvers(self) -> list[ResolverSettings]:
        """Return configured resolvers in precedence order."""
        entries = self.get_merged_settings().get("resolvers") or []
        return [self._validate(ResolverSettings, entry, "resolvers") for entry in entries]

    def add_resolver(self, resolver: ResolverSettings, scope: Scope = "project") -> None:
        """Append a resolver entry at the given scope."""
        settings = self._read_scope(scope)
        entries = settings.get("resolvers") or []
        entries.append({"type": resolver.type, "root": str(resolver.root)})
        settings["resolvers"] = entries
        self._write_scope(scope, settings)

    # ----- Loader settings -----

    def get_loaders(self) -> list[LoaderSettings]:
        """Return configured loaders in registration order."""
        entries = self.get_merged_settings().get("loaders") or []
        return [self._validate(LoaderSettings, entry, "loaders") for entry in entries]

    # ----- Scope utilities -----

    def _get_scope_path(self, scope: Scope) -> Path:
        """Get settings file path for scope."""
        return {
            "local": self.paths.local_settings,
            "project": self.paths.project_settings,
            "global": self.paths.global_settings,
        }[scope]

    def _read_scope(self, scope: Scope) -> dict[str, Any]:
        """Read settings from a specific scope ({} if the file does not exist)."""
        path = self._get_scope_path(scope)
        if not path.exists():
            return {}
        try:
            with open(path, encoding="utf-8") as f:
                content = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Settings file {path} is not valid YAML: {e}") from e
        if not isinstance(content, dict):
            raise ConfigurationError(f"Settings file {path} must contain a mapping")
        logger.debug(f"Read {scope} settings from {path}")
        return content

    def _write_scope(self, scope: Scope, settings: dict[str, Any]) -> None:
        """Write settings to a specific scope."""
        path = self._get_scope_path(scope)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(settings, f, default_flow_style=False)

    @staticmethod
    def _validate(model: type[BaseModel], entry: Any, section: str) -> Any:
        try:
            return model.model_validate(entry)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid entry in '{section}' settings: {entry!r}\n{e}") from e

    def _deep_merge(self, base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dicts, overlay wins."""
        result = base.copy()
        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result


def get_settings() -> ResourceSettings:
    """Get a settings instance with default paths."""
    return ResourceSettings()
