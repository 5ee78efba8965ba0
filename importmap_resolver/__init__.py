"""importmap-resolver: WHATWG import map resolution for bundlers and loaders."""

from .import_map import ImportMap
from .import_map import ImportMapData
from .loader_hook import create_resolve_hook

__all__ = ["ImportMap", "ImportMapData", "create_resolve_hook"]
