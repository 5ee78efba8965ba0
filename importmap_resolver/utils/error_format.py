"""Safe error message formatting utilities.

Ensures exceptions always have useful display messages, even when
their str() representation is empty, and that dynamic content is
escaped before it is interpolated into Rich markup.
"""

from __future__ import annotations

from rich.markup import escape as _escape_markup

from ..import_map import ImportMapError
from ..import_map import MalformedUrlError
from ..import_map import UnresolvedSpecifierError

# Hints shown under an error for the failures users can act on
HINTS: dict[type, str] = {
    UnresolvedSpecifierError: "Add an entry for it to \"imports\" or to a scope covering the parent.",
    MalformedUrlError: "Check the specifier, parent and map entries for invalid URL syntax.",
}


def format_error_message(e: BaseException, *, include_type: bool = True) -> str:
    """Format an exception into a useful display message.

    Args:
        e: The exception to format
        include_type: Whether to include the exception type name

    Returns:
        A non-empty, user-friendly error message

    Examples:
        >>> format_error_message(ValueError("invalid input"))
        'ValueError: invalid input'

        >>> format_error_message(ValueError("invalid input"), include_type=False)
        'invalid input'
    """
    error_str = str(e)
    error_type = type(e).__name__

    if error_str:
        if include_type and error_type not in error_str:
            return f"{error_type}: {error_str}"
        return error_str

    return f"{error_type}: (no additional details)"


def error_hint(e: BaseException) -> str | None:
    """Return a remediation hint for import map errors, if there is one."""
    if not isinstance(e, ImportMapError):
        return None
    for exc_type, hint in HINTS.items():
        if isinstance(e, exc_type):
            return hint
    return None


def escape_markup(value: object) -> str:
    """Escape a value for safe interpolation into Rich markup strings."""
    return _escape_markup(str(value))
