"""Import map simplification: scope flattening, sub-path combining, bulk replace.

These operate on plain tables and return new tables; ImportMap wires them
into its in-place mutators.
"""

import logging
import os

from .errors import InvalidArgumentError
from .models import Imports
from .models import Integrity
from .models import Scopes
from .urls import origin_root
from .urls import parse_url
from .urls import rebase_to
from .urls import resolve_against
from .urls import same_origin

logger = logging.getLogger(__name__)

# Group key for scopes on the map's own origin (or without any origin)
_LOCAL = "local"


def _is_prefix_key(key: str) -> bool:
    return key.endswith(("/", "*"))


def common_ancestor(urls: list[str]) -> str:
    """Longest common "/"-terminated prefix of urls."""
    prefix = os.path.commonprefix(urls)
    return prefix[: prefix.rfind("/") + 1]


def shared_entries(tables: list[dict[str, str]]) -> dict[str, str]:
    """Entries present with the same target in every table."""
    first, *rest = tables
    return {key: target for key, target in first.items() if all(table.get(key) == target for table in rest)}


def _shadows(prefix_key: str, keys: list[str]) -> bool:
    """Check whether a prefix key would capture any of keys."""
    stripped = prefix_key[:-1]
    return any(key != prefix_key and key.startswith(stripped) for key in keys)


def _overlaps(key: str, other: str) -> bool:
    """Check whether two table keys can match a common specifier."""
    if key == other:
        return True
    stripped = key[:-1] if _is_prefix_key(key) else key
    other_stripped = other[:-1] if _is_prefix_key(other) else other
    if _is_prefix_key(key) and _is_prefix_key(other):
        return stripped.startswith(other_stripped) or other_stripped.startswith(stripped)
    if _is_prefix_key(key):
        return other.startswith(stripped)
    if _is_prefix_key(other):
        return key.startswith(other_stripped)
    return False


def _conflicts(key: str, target: str, table: dict[str, str]) -> bool:
    """Check whether hoisting key -> target above table would change what table resolves."""
    return any(
        _overlaps(key, other) and not (other == key and table[other] == target) for other in table
    )


def flatten_scopes(scopes: Scopes, imports: Imports, map_url: str, root_url: str | None) -> Scopes:
    """Hoist mappings shared by related scopes into one broader scope.

    Scopes are grouped by origin: scopes on map_url's origin (and root-relative
    scopes that cannot be made absolute) form one local group whose common
    scope is their common ancestor; every other origin forms its own group
    whose common scope is the origin root. A member already located at the
    common scope is reused under its existing key.

    A shared mapping is only hoisted when no resolution changes:
    - a prefix mapping must not capture a specifier that a retained entry
      of some member scope handles, since the broader scope is consulted first
    - a new common scope also applies to parents outside every member, so
      the mapping must not overlap anything the top-level imports resolve
      for them
    """
    groups: dict[str, list[tuple[str, str]]] = {}
    for scope, _table in scopes.items():
        scope_url = resolve_against(scope, map_url, root_url)
        parts = parse_url(scope_url)
        if not parts.scheme or same_origin(scope_url, map_url):
            group = _LOCAL
        else:
            group = f"{parts.scheme}://{parts.netloc}"
        groups.setdefault(group, []).append((scope, scope_url))

    result: Scopes = {scope: dict(table) for scope, table in scopes.items()}

    for group, members in groups.items():
        if len(members) < 2:
            continue

        if group == _LOCAL:
            common_url = common_ancestor([scope_url for _scope, scope_url in members])
        else:
            common_url = origin_root(members[0][1])
        if not common_url:
            continue

        member_scopes = [scope for scope, _scope_url in members]
        common_scope = next((scope for scope, scope_url in members if scope_url == common_url), None)
        # A new common scope also applies to parents outside every member, which
        # previously fell through to the top-level imports
        guarded = common_scope is None
        if common_scope is None:
            common_scope = rebase_to(common_url, map_url, root_url) if parse_url(common_url).scheme else common_url

        shared = shared_entries([scopes[scope] for scope in member_scopes])

        retained_keys = [
            key
            for scope in member_scopes
            if scope != common_scope
            for key in scopes[scope]
            if key not in shared
        ]
        shared = {
            key: target
            for key, target in shared.items()
            if not (_is_prefix_key(key) and _shadows(key, retained_keys))
            and not (guarded and _conflicts(key, target, imports))
        }

        existing = result.get(common_scope, {})
        shared = {key: target for key, target in shared.items() if existing.get(key, target) == target}
        if not shared:
            continue

        logger.debug(f"[importmap:flatten] {len(shared)} shared mappings -> scope {common_scope}")
        for scope in member_scopes:
            if scope == common_scope:
                continue
            remaining = {key: target for key, target in result[scope].items() if key not in shared}
            if remaining:
                result[scope] = remaining
            else:
                del result[scope]

        result.setdefault(common_scope, {}).update(shared)

    return result


def combine_sub_paths_in_table(table: dict[str, str]) -> dict[str, str]:
    """Collapse exact sibling mappings into one prefix mapping.

    Exact keys "dir/name" mapping to "target-dir/name" (same final segment)
    are grouped by (dir/, target-dir/). Groups of two or more become a single
    "dir/" -> "target-dir/" mapping, unless "dir/" already maps elsewhere or
    an existing prefix key would lose specifiers it currently covers.
    """
    groups: dict[tuple[str, str], list[str]] = {}
    for key, target in table.items():
        if _is_prefix_key(key):
            continue
        key_dir, separator, segment = key.rpartition("/")
        if not separator or not segment or not target.endswith("/" + segment):
            continue
        groups.setdefault((key_dir + "/", target[: -len(segment)]), []).append(key)

    result = dict(table)
    for (prefix, target_dir), keys in groups.items():
        if len(keys) < 2:
            continue

        existing = result.get(prefix)
        if existing is not None and existing != target_dir:
            continue
        if existing is None and any(
            _is_prefix_key(key) and prefix.startswith(key[:-1]) for key in result if key != prefix
        ):
            continue

        for key in keys:
            del result[key]
        result[prefix] = target_dir

    return result


def replace_in_map(
    imports: Imports,
    scopes: Scopes,
    integrity: Integrity,
    url: str,
    new_url: str,
    map_url: str,
    root_url: str | None,
) -> tuple[Imports, Scopes, Integrity]:
    """Rewrite targets equal to url, or under url when it ends in "/".

    Targets are compared in absolute form and written back in stored form.
    Integrity keys are targets and are rewritten the same way.

    Raises:
        InvalidArgumentError: url ends in "/" but new_url does not
    """
    old_absolute = resolve_against(url, map_url, root_url)
    new_absolute = resolve_against(new_url, map_url, root_url)
    path_replace = old_absolute.endswith("/")
    if path_replace and not new_absolute.endswith("/"):
        raise InvalidArgumentError(f"path replacement {url} requires a path target, got {new_url}")

    def rewrite(value: str) -> str:
        absolute = resolve_against(value, map_url, root_url)
        if path_replace and absolute.startswith(old_absolute):
            return rebase_to(new_absolute + absolute[len(old_absolute) :], map_url, root_url)
        if absolute == old_absolute:
            return rebase_to(new_absolute, map_url, root_url)
        return value

    new_imports = {key: rewrite(target) for key, target in imports.items()}
    new_scopes = {scope: {key: rewrite(target) for key, target in table.items()} for scope, table in scopes.items()}
    new_integrity = {rewrite(target): digest for target, digest in integrity.items()}
    return new_imports, new_scopes, new_integrity
