"""Tests for CLI error message formatting and Rich markup escaping."""

from __future__ import annotations

from io import StringIO

from rich.console import Console

from importmap_resolver.import_map import IntegrityNotFoundError
from importmap_resolver.import_map import MalformedUrlError
from importmap_resolver.import_map import UnresolvedSpecifierError
from importmap_resolver.utils.error_format import error_hint
from importmap_resolver.utils.error_format import escape_markup
from importmap_resolver.utils.error_format import format_error_message


class TestFormatErrorMessage:
    def test_includes_type(self):
        assert format_error_message(ValueError("bad")) == "ValueError: bad"

    def test_without_type(self):
        assert format_error_message(ValueError("bad"), include_type=False) == "bad"

    def test_empty_message(self):
        assert format_error_message(RuntimeError()) == "RuntimeError: (no additional details)"

    def test_unresolved_specifier(self):
        e = UnresolvedSpecifierError("react", "https://site.com/main.js")
        assert format_error_message(e, include_type=False) == "unable to resolve react in https://site.com/main.js"


class TestErrorHint:
    def test_unresolved_has_hint(self):
        assert "imports" in error_hint(UnresolvedSpecifierError("react", "https://site.com/"))

    def test_malformed_has_hint(self):
        assert error_hint(MalformedUrlError("http://[::1", "invalid port")) is not None

    def test_other_errors_have_none(self):
        assert error_hint(IntegrityNotFoundError("/a.js")) is None
        assert error_hint(ValueError("x")) is None


class TestEscapeMarkup:
    def test_scope_key_brackets_survive(self):
        """Specifiers like [scope]/x.js must not be parsed as markup."""
        output = StringIO()
        console = Console(file=output, force_terminal=False, width=200)

        console.print(f"[red]Error:[/red] {escape_markup('[/vendor]/x.js')}")

        assert "[/vendor]/x.js" in output.getvalue()

    def test_plain_text_unchanged(self):
        assert escape_markup("https://site.com/a.js") == "https://site.com/a.js"
