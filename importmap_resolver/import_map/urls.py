"""URL primitives for import map resolution.

Normalization helpers shared by resolution, relocation and simplification:
- resolve_against: turn a possibly relative string into an absolute location
- rebase_to: turn an absolute location into its most compact stored form
- same_origin / origin_root: origin comparisons used for root inference
- classify_specifier: plain vs relative-path vs absolute-url

Locations are passed around as strings. The stored form of a table entry is
either root-relative ("/x.js", only when a root is set) or a full absolute URL.
"""

import posixpath
import re
from enum import Enum
from urllib.parse import SplitResult
from urllib.parse import urlsplit
from urllib.parse import urlunsplit

from .errors import InvalidArgumentError
from .errors import MalformedUrlError

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")

NETWORK_SCHEMES = frozenset({"http", "https"})


class SpecifierKind(str, Enum):
    """Classification of a module specifier."""

    PLAIN = "plain"
    RELATIVE_PATH = "relative-path"
    ABSOLUTE_URL = "absolute-url"


def parse_url(value: str) -> SplitResult:
    """Split a URL reference, rejecting strings a strict URL parser would refuse.

    Raises:
        MalformedUrlError: Control characters, invalid percent escapes,
            missing scheme before ':' or an invalid port
    """
    if _CONTROL_CHARS.search(value):
        raise MalformedUrlError(value, "contains control characters")
    if _BAD_ESCAPE.search(value):
        raise MalformedUrlError(value, "invalid percent escape")
    if value.startswith(":"):
        raise MalformedUrlError(value, "missing scheme")
    try:
        parts = urlsplit(value)
        # Port is parsed lazily; force it so bad ports surface here
        parts.port
    except ValueError as e:
        raise MalformedUrlError(value, str(e)) from e
    return parts


def remove_dot_segments(path: str) -> str:
    """Remove "." and ".." segments from a URL path (RFC 3986 §5.2.4)."""
    segments = path.split("/")
    output: list[str] = []
    for segment in segments:
        if segment == "..":
            # Never pop the empty segment that anchors an absolute path
            if output and output != [""]:
                output.pop()
        elif segment != ".":
            output.append(segment)
    if segments[-1] in (".", ".."):
        output.append("")
    return "/".join(output)


def _merge_paths(base: SplitResult, path: str) -> str:
    if base.netloc and not base.path:
        return "/" + path
    return base.path[: base.path.rfind("/") + 1] + path


def resolve_reference(base: str, reference: str) -> str:
    """Resolve a URL reference against a base location (RFC 3986 §5.2).

    Works for any scheme, including ones the stdlib does not know to be
    hierarchical (app:, chrome-extension:, ...).
    """
    ref = parse_url(reference)
    if ref.scheme:
        return urlunsplit(ref._replace(path=remove_dot_segments(ref.path)))

    parts = parse_url(base)
    if ref.netloc:
        netloc, path, query = ref.netloc, remove_dot_segments(ref.path), ref.query
    elif not ref.path:
        netloc, path, query = parts.netloc, parts.path, ref.query or parts.query
    elif ref.path.startswith("/"):
        netloc, path, query = parts.netloc, remove_dot_segments(ref.path), ref.query
    else:
        netloc, path, query = parts.netloc, remove_dot_segments(_merge_paths(parts, ref.path)), ref.query

    return urlunsplit((parts.scheme, netloc, path, query, ref.fragment))


def as_directory(url: str) -> str:
    """Return url with a trailing slash so it can be used as a path prefix."""
    return url if url.endswith("/") else url + "/"


def join_root(root_url: str, path: str) -> str:
    """Join a root-relative path onto a root location.

    A doubled leading slash is a single path separator here, never a
    protocol-relative reference. Dot segments are collapsed and a trailing
    slash on the input is kept.
    """
    root = parse_url(root_url)
    reference = parse_url("/" + path.lstrip("/"))
    tail = reference.path.lstrip("/")

    joined = posixpath.normpath(posixpath.join(as_directory(root.path or "/"), tail))
    if joined.startswith("//"):
        joined = "/" + joined.lstrip("/")
    if reference.path.endswith("/") and not joined.endswith("/"):
        joined += "/"

    return urlunsplit(root._replace(path=joined, query=reference.query, fragment=reference.fragment))


def resolve_against(value: str, map_url: str | None, root_url: str | None) -> str:
    """Turn a possibly relative string into an absolute location.

    Args:
        value: Stored entry, specifier or parent location
        map_url: Declaring location relative entries are interpreted against
        root_url: Root location "/"-leading entries are interpreted against

    Returns:
        Absolute location, or value unchanged when it is root-relative and
        no root is set (it cannot be made absolute)

    Raises:
        MalformedUrlError: value cannot be parsed as a URL reference
    """
    if value.startswith("/"):
        if root_url is None:
            return value
        return join_root(root_url, value)

    parse_url(value)
    if map_url is None:
        return value
    return resolve_reference(map_url, value)


def rebase_to(value: str, map_url: str | None, root_url: str | None) -> str:
    """Convert a location into its most compact equivalent for (map_url, root_url).

    Locations under the root become root-relative ("/" + remainder); anything
    else is returned as a full absolute URL.

    Raises:
        InvalidArgumentError: map_url is unset
        MalformedUrlError: value cannot be parsed as a URL reference
    """
    if map_url is None:
        raise InvalidArgumentError("map_url is unset; relocation requires a declaring location")

    parse_url(value)

    if value.startswith("/"):
        if root_url is None:
            return value
        resolved = resolve_reference(root_url, value)
    else:
        resolved = resolve_reference(map_url, value)

    if root_url is not None:
        root_prefix = as_directory(root_url)
        if resolved.startswith(root_prefix):
            return "/" + resolved[len(root_prefix) :]

    if same_origin(resolved, map_url):
        return resolve_reference(map_url, resolved)

    return resolved


def same_origin(url: str, other: str) -> bool:
    """Check whether two locations share scheme, host and port."""
    left = parse_url(url)
    right = parse_url(other)
    return left.scheme == right.scheme and left.hostname == right.hostname and left.port == right.port


def origin_root(url: str) -> str:
    """Return the root path of url's origin (e.g. https://site.com/)."""
    parts = parse_url(url)
    return urlunsplit((parts.scheme, parts.netloc, "/", "", ""))


def is_network_url(url: str) -> bool:
    """Check whether url uses an http(s) scheme."""
    return parse_url(url).scheme in NETWORK_SCHEMES


def is_relative_path(specifier: str) -> bool:
    """Check for ./x, ../x or /x specifiers."""
    return specifier.startswith(("./", "../", "/"))


def is_absolute_url(specifier: str) -> bool:
    """Check whether specifier parses as a URL with a scheme."""
    try:
        return bool(parse_url(specifier).scheme)
    except MalformedUrlError:
        return False


def is_plain(specifier: str) -> bool:
    """Check for a bare specifier such as a package name."""
    return not is_relative_path(specifier) and not is_absolute_url(specifier)


def is_url_like(specifier: str) -> bool:
    """Check whether specifier is a relative path or an absolute URL."""
    return not is_plain(specifier)


def classify_specifier(specifier: str) -> SpecifierKind:
    """Classify a specifier as plain, relative-path or absolute-url."""
    if is_relative_path(specifier):
        return SpecifierKind.RELATIVE_PATH
    if is_absolute_url(specifier):
        return SpecifierKind.ABSOLUTE_URL
    return SpecifierKind.PLAIN
