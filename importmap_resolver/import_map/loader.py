"""Load and save import map documents.

The only persisted format is the JSON import map document:
{"imports": {...}, "scopes": {...}, "integrity": {...}} with every key optional.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from .errors import ImportMapLoadError
from .import_map import ImportMap
from .models import ImportMapData

logger = logging.getLogger(__name__)


def load_import_map_data(path: str | Path) -> ImportMapData:
    """Read and validate an import map document.

    Raises:
        FileNotFoundError: path does not exist
        ImportMapLoadError: Content is not valid JSON or not an import map
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Import map not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        return ImportMapData.model_validate_json(text)
    except ValidationError as e:
        raise ImportMapLoadError(f"Invalid import map {path}: {e}") from e


def load_from_file(
    path: str | Path,
    map_url: str | None = None,
    root_url: str | None = None,
    default_map_url: str | None = None,
) -> ImportMap:
    """Load an import map document and construct an ImportMap from it.

    Args:
        path: Path to the JSON document
        map_url: Declaring location (falls back to default_map_url)
        root_url: Root location
        default_map_url: Caller-chosen default declaring location

    Returns:
        ImportMap instance
    """
    data = load_import_map_data(path)
    resolved_map_url = map_url or default_map_url
    if resolved_map_url is None:
        # The document's own location is the natural declaring location
        resolved_map_url = Path(path).resolve().parent.as_uri() + "/"

    logger.debug(f"Loaded import map {path} ({len(data.imports)} imports, {len(data.scopes)} scopes)")
    return ImportMap.from_data(data, resolved_map_url, root_url)


def dump_document(import_map: ImportMap) -> str:
    """Serialize an import map to its JSON document (empty tables omitted)."""
    return json.dumps(import_map.to_data().to_document(), indent=2) + "\n"


def save_to_file(import_map: ImportMap, path: str | Path) -> None:
    """Write an import map document, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_document(import_map), encoding="utf-8")
    logger.debug(f"Saved import map to {path}")
