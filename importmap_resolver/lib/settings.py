"""Settings management for importmap-resolver.

Philosophy: Simple, scope-aware YAML settings. Only the import map
coordinates live here; everything else is passed on the command line.

settings.yaml layout:
    import_map:
      path: importmap.json
      map_url: https://site.com/app/
      root_url: https://site.com/
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from typing import Literal

import yaml

logger = logging.getLogger(__name__)

Scope = Literal["local", "project", "global"]

SECTION = "import_map"

# Keys recognized in the import_map section
MAP_SETTING_KEYS = ("path", "map_url", "root_url")


@dataclass
class SettingsPaths:
    """Standard paths for settings files."""

    global_settings: Path
    project_settings: Path
    local_settings: Path

    @classmethod
    def default(cls) -> SettingsPaths:
        """Create default paths for the standard .importmap layout."""
        return cls(
            global_settings=Path.home() / ".importmap" / "settings.yaml",
            project_settings=Path.cwd() / ".importmap" / "settings.yaml",
            local_settings=Path.cwd() / ".importmap" / "settings.local.yaml",
        )


class AppSettings:
    """Settings manager with scope-aware merging.

    Scope priority (most specific wins):
    1. local (.importmap/settings.local.yaml) - gitignored, machine-specific
    2. project (.importmap/settings.yaml) - committed, team-shared
    3. global (~/.importmap/settings.yaml) - user defaults

    Usage:
        settings = AppSettings()
        path = settings.get_map_path()  # Returns Path or None
        settings.set_map_setting("map_url", "https://site.com/", scope="project")
    """

    def __init__(self, paths: SettingsPaths | None = None) -> None:
        self.paths = paths or SettingsPaths.default()

    def get_merged_settings(self) -> dict[str, Any]:
        """Load and merge settings from all scopes."""
        result: dict[str, Any] = {}
        for path in [self.paths.global_settings, self.paths.project_settings, self.paths.local_settings]:
            if path.exists():
                try:
                    with open(path) as f:
                        content = yaml.safe_load(f) or {}
                    result = self._deep_merge(result, content)
                except (OSError, yaml.YAMLError) as e:
                    logger.warning(f"Skipping malformed settings file {path}: {e}")
        return result

    # ----- Import map settings -----

    def get_map_settings(self) -> dict[str, Any]:
        """Get the merged import_map section."""
        section = self.get_merged_settings().get(SECTION)
        return section if isinstance(section, dict) else {}

    def get_map_path(self) -> Path | None:
        """Get the configured import map document path."""
        path = self.get_map_settings().get("path")
        return Path(path) if path else None

    def get_map_url(self) -> str | None:
        """Get the configured declaring location."""
        return self.get_map_settings().get("map_url")

    def get_root_url(self) -> str | None:
        """Get the configured root location."""
        return self.get_map_settings().get("root_url")

    def set_map_setting(self, key: str, value: str, scope: Scope = "project") -> None:
        """Set one import_map setting at specified scope."""
        settings = self._read_scope(scope)
        section = settings.get(SECTION)
        if not isinstance(section, dict):
            section = {}
        section[key] = value
        settings[SECTION] = section
        self._write_scope(scope, settings)

    def clear_map_setting(self, key: str, scope: Scope = "project") -> bool:
        """Remove one import_map setting from specified scope.

        Returns:
            True if the key was set at that scope
        """
        settings = self._read_scope(scope)
        section = settings.get(SECTION)
        if isinstance(section, dict) and key in section:
            del section[key]
            if not section:
                del settings[SECTION]
            self._write_scope(scope, settings)
            return True
        return False

    # ----- Scope utilities -----

    def _get_scope_path(self, scope: Scope) -> Path:
        """Get settings file path for scope."""
        return {
            "local": self.paths.local_settings,
            "project": self.paths.project_settings,
            "global": self.paths.global_settings,
        }[scope]

    def _read_scope(self, scope: Scope) -> dict[str, Any]:
        """Read settings from a specific scope."""
        path = self._get_scope_path(scope)
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                return yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Ignoring unreadable settings file {path}: {e}")
            return {}

    def _write_scope(self, scope: Scope, settings: dict[str, Any]) -> None:
        """Write settings to a specific scope."""
        path = self._get_scope_path(scope)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(settings, f, default_flow_style=False)

    def _deep_merge(self, base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dicts, overlay wins."""
        result = base.copy()
        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result
