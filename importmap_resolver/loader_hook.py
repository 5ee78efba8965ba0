"""Bundler/loader integration boundary.

A bundler calls the resolve hook for each specifier it meets while walking
the module graph and fetches whatever location comes back. Fetching and
loading content is the bundler's job, not ours.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .import_map import ImportMap
from .import_map import ImportMapData
from .import_map import InvalidArgumentError
from .paths import default_map_url

logger = logging.getLogger(__name__)

NAMESPACE = "importmap-url"

# Bundlers route specifiers not starting with "." to this hook
RESOLVE_FILTER = r"^[^.].*$"


@dataclass(frozen=True)
class ResolveArgs:
    """A resolution request from the bundler."""

    path: str
    importer: str


@dataclass(frozen=True)
class ResolveResult:
    """Resolved location handed back to the bundler."""

    path: str
    namespace: str = NAMESPACE


ResolveHook = Callable[[ResolveArgs], ResolveResult]


def create_import_map(data: ImportMapData | None = None, import_map: ImportMap | None = None) -> ImportMap:
    """Pick the import map a hook should use.

    An explicit ImportMap wins over raw data; data is declared at the
    current working directory.

    Raises:
        InvalidArgumentError: Neither data nor import_map was provided
    """
    if import_map is not None:
        return import_map
    if data is not None:
        return ImportMap.from_data(data, default_map_url())
    raise InvalidArgumentError("no import map was provided")


def create_resolve_hook(import_map: ImportMap) -> ResolveHook:
    """Build the resolve callback for a bundler.

    Engine errors propagate to the bundler, which reports them to the user.
    """

    def on_resolve(args: ResolveArgs) -> ResolveResult:
        resolved = import_map.resolve_with_parent(args.path, args.importer)
        logger.debug(f"[importmap:hook] {args.path} from {args.importer} -> {resolved}")
        return ResolveResult(path=resolved)

    return on_resolve
