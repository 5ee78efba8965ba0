"""Import map engine.

One ImportMap holds the three tables (imports, scopes, integrity) together
with the coordinates they are expressed in: the declaring location (map_url)
and an optional root location (root_url).

Resolution order (first match wins):
1. Scopes whose location equals the parent or is a "/"-terminated prefix of
   it, shortest scope location first
2. Top-level imports
3. Non-plain specifiers pass through as their absolute form

Within a table an exact key beats any prefix key, and the longest prefix
key ("/" or "*" terminated) wins among prefix keys.
"""

import logging

from .errors import IntegrityNotFoundError
from .errors import InvalidArgumentError
from .errors import UnresolvedSpecifierError
from .models import ImportMapData
from .models import ImportMapOptions
from .models import Imports
from .models import Integrity
from .models import Scopes
from .simplify import combine_sub_paths_in_table
from .simplify import flatten_scopes
from .simplify import replace_in_map
from .urls import is_network_url
from .urls import is_plain
from .urls import origin_root
from .urls import rebase_to
from .urls import resolve_against
from .urls import resolve_reference

logger = logging.getLogger(__name__)


def get_map_match(candidate: str, table: dict[str, str]) -> str | None:
    """Find the key of table that matches candidate.

    An exact key always wins. Otherwise keys ending in "/" or "*" are
    prefix keys: the sigil is stripped and the longest key whose stripped
    form prefixes candidate wins (first seen on ties).

    Returns:
        Matching key, or None
    """
    if candidate in table:
        return candidate

    best: str | None = None
    for key in table:
        if not key.endswith(("/", "*")):
            continue
        if candidate.startswith(key[:-1]) and (best is None or len(key) > len(best)):
            best = key
    return best


def get_scope_matches(parent_url: str, scopes: Scopes, map_url: str, root_url: str | None) -> list[str]:
    """Return the scope keys applying to a canonical parent location.

    A scope applies when its absolute location equals the parent, or ends
    in "/" and prefixes the parent. Keys are ordered by ascending length of
    their absolute location (least specific first).
    """
    candidates = [(key, resolve_against(key, map_url, root_url)) for key in scopes]
    candidates.sort(key=lambda candidate: len(candidate[1]))

    return [
        key
        for key, scope_url in candidates
        if scope_url == parent_url or (scope_url.endswith("/") and parent_url.startswith(scope_url))
    ]


class ImportMap:
    """Specifier resolution against imports, scopes and integrity tables.

    Usage:
        import_map = ImportMap("https://site.com/", imports={"react": "/vendor/react.js"})
        import_map.resolve("react")  # "https://site.com/vendor/react.js"

    Mutations (set, extend, rebase, flatten, ...) happen in place and return
    the map for chaining. Instances are not synchronized; callers sharing one
    map must serialize mutations themselves.
    """

    def __init__(
        self,
        map_url: str,
        root_url: str | None = None,
        imports: Imports | None = None,
        scopes: Scopes | None = None,
        integrity: Integrity | None = None,
        *,
        derive_root: bool = True,
    ):
        """Initialize an import map.

        Args:
            map_url: Declaring location relative entries are interpreted against
            root_url: Root location for "/"-leading entries
            imports: Top-level imports table
            scopes: Scope prefix -> imports table
            integrity: Target -> integrity hash
            derive_root: Derive root_url from an http(s) map_url when unset
        """
        if not map_url:
            raise InvalidArgumentError("map_url is unset; an import map requires a declaring location")

        if root_url is None and derive_root and is_network_url(map_url):
            root_url = origin_root(map_url)

        self._map_url = map_url
        self._root_url = root_url
        self._imports: Imports = dict(imports or {})
        self._scopes: Scopes = {scope: dict(table) for scope, table in (scopes or {}).items()}
        self._integrity: Integrity = dict(integrity or {})

    @classmethod
    def from_data(cls, data: ImportMapData, map_url: str, root_url: str | None = None) -> "ImportMap":
        """Create an import map from a decoded document."""
        return cls(map_url, root_url, imports=data.imports, scopes=data.scopes, integrity=data.integrity)

    @classmethod
    def from_options(cls, options: ImportMapOptions, default_map_url: str | None = None) -> "ImportMap":
        """Create an import map from construction options.

        Args:
            options: Tables and coordinates
            default_map_url: Declaring location used when options.map_url is unset

        Raises:
            InvalidArgumentError: Neither options.map_url nor default_map_url is set
        """
        map_url = options.map_url or default_map_url
        if map_url is None:
            raise InvalidArgumentError("map_url is unset and no default declaring location was given")
        return cls.from_data(options.map, map_url, options.root_url)

    # ----- Accessors -----

    @property
    def map_url(self) -> str:
        return self._map_url

    @property
    def root_url(self) -> str | None:
        return self._root_url

    @property
    def imports(self) -> Imports:
        return self._imports

    @property
    def scopes(self) -> Scopes:
        return self._scopes

    @property
    def integrity(self) -> Integrity:
        return self._integrity

    def to_data(self) -> ImportMapData:
        """Snapshot the tables as a persistable document."""
        return ImportMapData(
            imports=dict(self._imports),
            scopes={scope: dict(table) for scope, table in self._scopes.items()},
            integrity=dict(self._integrity),
        )

    def clone(self) -> "ImportMap":
        """Return an independent copy (tables are not shared)."""
        return ImportMap(
            self._map_url,
            self._root_url,
            imports=self._imports,
            scopes=self._scopes,
            integrity=self._integrity,
            derive_root=False,
        )

    # ----- Resolution -----

    def resolve(self, specifier: str) -> str:
        """Resolve specifier using the map's own declaring location as parent."""
        return self.resolve_with_parent(specifier, self._map_url)

    def resolve_with_parent(self, specifier: str, parent_url: str) -> str:
        """Resolve specifier as imported from parent_url.

        Args:
            specifier: Module specifier (plain, relative path or absolute URL)
            parent_url: Location of the importing module

        Returns:
            Resolved absolute location

        Raises:
            UnresolvedSpecifierError: Plain specifier matched no entry
            MalformedUrlError: specifier, parent_url or a table entry is not a URL reference
        """
        parent = resolve_against(parent_url, self._map_url, self._root_url)

        url_specifier = not is_plain(specifier)
        candidate = specifier
        if url_specifier:
            candidate = resolve_reference(parent_url, specifier)

        for scope_key in get_scope_matches(parent, self._scopes, self._map_url, self._root_url):
            result = self._resolve_in_table(candidate, self._scopes[scope_key], url_specifier)
            if result is not None:
                logger.debug(f"[importmap:resolve] {specifier} -> {result} (scope {scope_key})")
                return result

        result = self._resolve_in_table(candidate, self._imports, url_specifier)
        if result is not None:
            logger.debug(f"[importmap:resolve] {specifier} -> {result}")
            return result

        if url_specifier:
            logger.debug(f"[importmap:resolve] {specifier} -> {candidate} (unmapped)")
            return candidate

        raise UnresolvedSpecifierError(specifier, parent_url)

    def _resolve_in_table(self, candidate: str, table: dict[str, str], retry: bool) -> str | None:
        """Match candidate against one table and apply the matched target.

        URL specifiers that miss are retried in their compact stored form,
        then (when a root is set) in their rootless form.
        """
        key = get_map_match(candidate, table)
        if key is None and retry:
            candidate = rebase_to(candidate, self._map_url, self._root_url)
            key = get_map_match(candidate, table)
            if key is None and self._root_url is not None:
                candidate = rebase_to(candidate, self._map_url, None)
                key = get_map_match(candidate, table)

        if key is None:
            return None
        return resolve_against(table[key] + candidate[len(key) :], self._map_url, self._root_url)

    # ----- Mutation -----

    def set(self, name: str, target: str) -> "ImportMap":
        """Set a top-level import. Values are stored as given."""
        self._imports[name] = target
        return self

    def set_scoped(self, name: str, target: str, scope: str) -> "ImportMap":
        """Set an import inside scope, creating the scope if absent."""
        self._scopes.setdefault(scope, {})[name] = target
        return self

    def extend(self, other: "ImportMap", override_scopes: bool = False) -> "ImportMap":
        """Merge another import map into this one.

        The other map is first relocated onto this map's coordinates so its
        entries mean the same thing here. Its scope tables replace same-keyed
        scopes when override_scopes is set, otherwise they are merged
        entry by entry.
        """
        incoming = other.clone()
        incoming._relocate(self._map_url, self._root_url)

        self._imports.update(incoming.imports)
        for scope, table in incoming.scopes.items():
            if override_scopes:
                self._scopes[scope] = dict(table)
            else:
                self._scopes.setdefault(scope, {}).update(table)
        self._integrity.update(incoming.integrity)

        self._relocate(self._map_url, self._root_url)
        return self

    # ----- Integrity -----

    def integrity_for(self, target: str) -> str:
        """Look up the integrity hash for target.

        Raises:
            IntegrityNotFoundError: No entry under any spelling of target
        """
        canonical = rebase_to(target, self._map_url, self._root_url)
        for key in self._integrity_keys(target, canonical):
            if key in self._integrity:
                return self._integrity[key]

        for key, integrity in self._integrity.items():
            if rebase_to(key, self._map_url, self._root_url) == canonical:
                return integrity

        raise IntegrityNotFoundError(target)

    def set_integrity(self, target: str, integrity: str) -> "ImportMap":
        """Store integrity under target, dropping other spellings of the same target."""
        canonical = rebase_to(target, self._map_url, self._root_url)
        duplicates = [
            key
            for key in self._integrity
            if key != target and rebase_to(key, self._map_url, self._root_url) == canonical
        ]
        for key in duplicates:
            del self._integrity[key]

        self._integrity[target] = integrity
        return self

    @staticmethod
    def _integrity_keys(target: str, canonical: str) -> list[str]:
        """Spellings a target may be stored under, canonical form first."""
        keys: list[str] = []
        for value in (canonical, target):
            spellings = [value]
            if value.startswith("./"):
                spellings.append(value[2:])
            elif is_plain(value):
                spellings.append("./" + value)
            for spelling in spellings:
                if spelling not in keys:
                    keys.append(spelling)
        return keys

    # ----- Relocation -----

    def rebase(self, map_url: str, root_url: str | None = None) -> "ImportMap":
        """Move the map to a new declaring location, keeping resolutions identical.

        When root_url is omitted it is inferred: the current declaring location
        if map_url is unchanged; none if the map had no root or map_url is not
        http(s); otherwise map_url's origin root.

        Raises:
            InvalidArgumentError: map_url is unset
            MalformedUrlError: An entry could not be parsed; the map is left unchanged
        """
        if not map_url:
            raise InvalidArgumentError("map_url is unset; relocation requires a declaring location")

        if root_url is None:
            if map_url == self._map_url:
                root_url = self._map_url
            elif self._root_url is None or not is_network_url(map_url):
                root_url = None
            else:
                root_url = origin_root(map_url)

        self._relocate(map_url, root_url)
        return self

    def _relocate(self, map_url: str, root_url: str | None) -> None:
        """Rewrite every table onto (map_url, root_url), then commit the coordinates.

        New tables are built completely before anything is swapped in.
        Keys that collapse onto the same canonical form are folded,
        last write wins.
        """
        imports = self._relocate_table(self._imports, map_url, root_url)

        scopes: Scopes = {}
        for scope, table in self._scopes.items():
            new_scope = self._relocate_value(scope, map_url, root_url)
            scopes.setdefault(new_scope, {}).update(self._relocate_table(table, map_url, root_url))

        # Integrity keys are targets; hash payloads are opaque and kept as-is
        integrity: Integrity = {}
        for target, digest in self._integrity.items():
            integrity[self._relocate_value(target, map_url, root_url)] = digest

        logger.debug(
            f"[importmap:rebase] ({self._map_url}, {self._root_url}) -> ({map_url}, {root_url})"
        )
        self._imports = imports
        self._scopes = scopes
        self._integrity = integrity
        self._map_url = map_url
        self._root_url = root_url

    def _relocate_table(self, table: dict[str, str], map_url: str, root_url: str | None) -> dict[str, str]:
        relocated: dict[str, str] = {}
        for key, target in table.items():
            new_key = key if is_plain(key) else self._relocate_value(key, map_url, root_url)
            relocated[new_key] = self._relocate_value(target, map_url, root_url)
        return relocated

    def _relocate_value(self, value: str, map_url: str, root_url: str | None) -> str:
        absolute = resolve_against(value, self._map_url, self._root_url)
        return rebase_to(absolute, map_url, root_url)

    # ----- Simplification -----

    def flatten(self) -> "ImportMap":
        """Group scopes sharing a common ancestor to reduce duplicate mappings.

        For scopes "https://site.com/x/" and "https://site.com/y/" a scope for
        "https://site.com/" is synthesized with their shared mappings; the
        original scopes are kept only for the entries that still differ.
        Scopes on the map's own origin are grouped under their common
        ancestor; other origins are grouped per origin.
        """
        self._scopes = flatten_scopes(self._scopes, self._imports, self._map_url, self._root_url)
        return self

    def combine_sub_paths(self) -> "ImportMap":
        """Replace sibling exact mappings with one path mapping.

        { "base/a.js": "/a.js", "base/b.js": "/b.js" } becomes { "base/": "/" }.
        Applied to the top-level imports and to each scope individually.
        """
        self._imports = combine_sub_paths_in_table(self._imports)
        self._scopes = {scope: combine_sub_paths_in_table(table) for scope, table in self._scopes.items()}
        return self

    def replace(self, url: str, new_url: str) -> "ImportMap":
        """Bulk replace targets equal to url (or under url, when it ends in "/")."""
        self._imports, self._scopes, self._integrity = replace_in_map(
            self._imports, self._scopes, self._integrity, url, new_url, self._map_url, self._root_url
        )
        return self

    def __repr__(self) -> str:
        return f"ImportMap({self._map_url}, root={self._root_url})"
