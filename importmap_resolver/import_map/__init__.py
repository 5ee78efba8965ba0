"""Import map resolution engine.

Resolves module specifiers against an import map (imports, scopes and
integrity tables), and relocates, merges and simplifies maps.
"""

from .errors import ImportMapError
from .errors import ImportMapLoadError
from .errors import IntegrityNotFoundError
from .errors import InvalidArgumentError
from .errors import MalformedUrlError
from .errors import UnresolvedSpecifierError
from .import_map import ImportMap
from .loader import dump_document
from .loader import load_from_file
from .loader import load_import_map_data
from .loader import save_to_file
from .models import ImportMapData
from .models import ImportMapOptions
from .urls import SpecifierKind
from .urls import classify_specifier
from .urls import is_plain
from .urls import rebase_to
from .urls import resolve_against

__all__ = [
    "ImportMap",
    "ImportMapData",
    "ImportMapError",
    "ImportMapLoadError",
    "ImportMapOptions",
    "IntegrityNotFoundError",
    "InvalidArgumentError",
    "MalformedUrlError",
    "SpecifierKind",
    "UnresolvedSpecifierError",
    "classify_specifier",
    "dump_document",
    "is_plain",
    "load_from_file",
    "load_import_map_data",
    "rebase_to",
    "resolve_against",
    "save_to_file",
]
