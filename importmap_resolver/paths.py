"""CLI-specific path policy and factory helpers.

This module centralizes the call-site defaults the engine deliberately
does not own: the default declaring location (the current working
directory) and where the import map document is found.
"""

import logging
from pathlib import Path

from .import_map import ImportMap
from .import_map import load_from_file
from .lib.settings import AppSettings

logger = logging.getLogger(__name__)

DEFAULT_MAP_FILENAME = "importmap.json"


def default_map_url(cwd: Path | None = None) -> str:
    """Current working directory as a file: URL ending in "/"."""
    directory = (cwd or Path.cwd()).resolve()
    return directory.as_uri().rstrip("/") + "/"


def find_map_path(explicit: Path | None = None, settings: AppSettings | None = None) -> Path:
    """Locate the import map document.

    Precedence: explicit path, then settings (import_map.path), then
    ./importmap.json.
    """
    if explicit is not None:
        return explicit

    settings = settings or AppSettings()
    if configured := settings.get_map_path():
        logger.debug(f"Using import map from settings: {configured}")
        return configured

    return Path.cwd() / DEFAULT_MAP_FILENAME


def create_import_map(
    map_path: Path | None = None,
    map_url: str | None = None,
    root_url: str | None = None,
    settings: AppSettings | None = None,
) -> ImportMap:
    """Load the import map the CLI operates on.

    Command-line values override settings; the declaring location falls
    back to the current working directory.
    """
    settings = settings or AppSettings()
    path = find_map_path(map_path, settings)
    return load_from_file(
        path,
        map_url=map_url or settings.get_map_url(),
        root_url=root_url or settings.get_root_url(),
        default_map_url=default_map_url(),
    )
