"""Tests for ImportMap resolution: scopes, exact and prefix matching, fallbacks."""

import pytest

from importmap_resolver.import_map import ImportMap
from importmap_resolver.import_map import ImportMapOptions
from importmap_resolver.import_map import InvalidArgumentError
from importmap_resolver.import_map import MalformedUrlError
from importmap_resolver.import_map import UnresolvedSpecifierError
from importmap_resolver.import_map.import_map import get_map_match
from importmap_resolver.import_map.import_map import get_scope_matches
from importmap_resolver.paths import default_map_url


class TestSiteMap:
    """The reference example: imports, a cross-origin scope and root-relative keys."""

    def test_plain_specifier(self, site_map):
        assert site_map.resolve_with_parent("test", "https://site.com") == "https://site.com/test-map.js"

    def test_relative_specifier_from_scope_falls_through_to_imports(self, site_map):
        assert site_map.resolve_with_parent("/url.js", "https://another.com/") == "https://site.com/url-map.js"

    def test_scoped_root_relative_key(self, site_map):
        result = site_map.resolve_with_parent("https://site.com/url.js", "https://another.com/x")
        assert result == "https://site.com/scoped-map.js"

    def test_absolute_url_key(self, site_map):
        result = site_map.resolve_with_parent("https://another.com/url.js", "https://site.com")
        assert result == "https://site.com/url-map.js"

    def test_resolve_uses_map_url_as_parent(self, site_map):
        assert site_map.resolve("test") == "https://site.com/test-map.js"


def test_resolve_local_file_paths(tmp_path):
    """A "@/" prefix mapped to "./" resolves under the declaring directory."""
    import_map = ImportMap(default_map_url(tmp_path), imports={"@/": "./"})

    result = import_map.resolve_with_parent("@/lib/test.js", str(tmp_path.resolve()))

    assert result == tmp_path.resolve().as_uri() + "/lib/test.js"


class TestCustomSchemeMap:
    """Maps declared at non-http(s), non-file locations resolve the same way."""

    def test_relative_target(self):
        import_map = ImportMap("app://bundle/src/", imports={"a": "./a.js", "lib/": "../lib/"})

        assert import_map.resolve("a") == "app://bundle/src/a.js"
        assert import_map.resolve("lib/x/y.js") == "app://bundle/lib/x/y.js"

    def test_relative_specifier_from_parent(self):
        import_map = ImportMap("chrome-extension://abc/")

        result = import_map.resolve_with_parent("../util.js", "chrome-extension://abc/popup/index.js")

        assert result == "chrome-extension://abc/util.js"

    def test_rebase_stores_absolute_targets(self):
        import_map = ImportMap("app://bundle/src/", imports={"a": "./a.js"})

        import_map.rebase("app://bundle/")

        assert import_map.root_url is None
        assert import_map.imports == {"a": "app://bundle/src/a.js"}
        assert import_map.resolve("a") == "app://bundle/src/a.js"


class TestMapMatch:
    def test_exact_beats_longer_prefix(self):
        table = {"lib/": "/vendor/lib/", "lib/a.js": "/special/a.js", "lib/a.js/": "/never/"}
        assert get_map_match("lib/a.js", table) == "lib/a.js"

    def test_longest_prefix_wins(self):
        table = {"lib/": "/v1/", "lib/sub/": "/v2/"}
        assert get_map_match("lib/sub/x.js", table) == "lib/sub/"
        assert get_map_match("lib/other.js", table) == "lib/"

    def test_star_is_a_prefix_marker(self):
        assert get_map_match("pkg/a.js", {"pkg*": "/pkgs/"}) == "pkg*"

    def test_non_prefix_keys_do_not_prefix_match(self):
        assert get_map_match("react-dom", {"react": "/react.js"}) is None


class TestImportsTable:
    @pytest.fixture
    def import_map(self):
        return ImportMap(
            "https://site.com/",
            imports={
                "lib/": "/vendor/lib/",
                "lib/a.js": "/special/a.js",
                "lib/sub/": "/v2/",
                "pkg*": "/pkgs/",
                "/app/util.js": "/app/util.v2.js",
            },
        )

    def test_exact_match_wins_over_prefix(self, import_map):
        assert import_map.resolve("lib/a.js") == "https://site.com/special/a.js"

    def test_prefix_appends_remainder(self, import_map):
        assert import_map.resolve("lib/b.js") == "https://site.com/vendor/lib/b.js"

    def test_longest_prefix(self, import_map):
        assert import_map.resolve("lib/sub/x.js") == "https://site.com/v2/x.js"

    def test_star_prefix(self, import_map):
        assert import_map.resolve("pkg/a.js") == "https://site.com/pkgs/a.js"

    def test_relative_specifier_matches_root_relative_key(self, import_map):
        result = import_map.resolve_with_parent("./util.js", "https://site.com/app/main.js")
        assert result == "https://site.com/app/util.v2.js"

    def test_unmapped_relative_passes_through(self, import_map):
        result = import_map.resolve_with_parent("./other.js", "https://site.com/app/main.js")
        assert result == "https://site.com/app/other.js"

    def test_unmapped_absolute_passes_through(self, import_map):
        assert import_map.resolve("https://cdn.com/x.js") == "https://cdn.com/x.js"

    def test_unmapped_plain_fails(self, import_map):
        with pytest.raises(UnresolvedSpecifierError) as exc_info:
            import_map.resolve("missing")

        assert exc_info.value.specifier == "missing"
        assert exc_info.value.parent == "https://site.com/"
        assert "unable to resolve missing in https://site.com/" in str(exc_info.value)

    def test_malformed_parent(self, import_map):
        with pytest.raises(MalformedUrlError):
            import_map.resolve_with_parent("lib/a.js", "http://[::1")


class TestScopes:
    @pytest.fixture
    def import_map(self):
        return ImportMap(
            "https://site.com/",
            imports={"dep": "/dep.js", "shared": "/shared.js"},
            scopes={
                "https://site.com/app/main.js": {"dep": "/dep-main.js"},
                "/app/": {"dep": "/outer.js"},
                "/app/inner/": {"dep": "/inner.js"},
                "https://site.com/exact": {"dep": "/exact.js"},
            },
        )

    def test_scope_equal_to_parent_matches_without_slash(self, import_map):
        assert import_map.resolve_with_parent("dep", "https://site.com/exact") == "https://site.com/exact.js"

    def test_scope_without_slash_is_not_a_prefix(self, import_map):
        assert import_map.resolve_with_parent("dep", "https://site.com/exact/x.js") == "https://site.com/dep.js"

    def test_slash_scope_matches_descendants(self, import_map):
        assert import_map.resolve_with_parent("dep", "https://site.com/app/x/y.js") == "https://site.com/outer.js"

    def test_least_specific_scope_is_tried_first(self, import_map):
        """Matching scopes are consulted shortest location first."""
        assert import_map.resolve_with_parent("dep", "https://site.com/app/inner/x.js") == "https://site.com/outer.js"

    def test_scope_miss_falls_back_to_imports(self, import_map):
        assert import_map.resolve_with_parent("shared", "https://site.com/app/x.js") == "https://site.com/shared.js"

    def test_parent_outside_scopes_uses_imports(self, import_map):
        assert import_map.resolve_with_parent("dep", "https://site.com/other/x.js") == "https://site.com/dep.js"

    def test_scope_match_order(self, import_map):
        matches = get_scope_matches(
            "https://site.com/app/inner/x.js", import_map.scopes, import_map.map_url, import_map.root_url
        )
        assert matches == ["/app/", "/app/inner/"]


class TestConstruction:
    def test_root_derived_for_network_map(self):
        assert ImportMap("https://site.com/app/index.html").root_url == "https://site.com/"

    def test_no_root_for_file_map(self):
        assert ImportMap("file:///proj/").root_url is None

    def test_explicit_root_kept(self):
        assert ImportMap("https://site.com/app/", "https://site.com/app/").root_url == "https://site.com/app/"

    def test_map_url_required(self):
        with pytest.raises(InvalidArgumentError):
            ImportMap("")

    def test_from_options_uses_default_map_url(self):
        options = ImportMapOptions.model_validate({"map": {"imports": {"a": "./a.js"}}})
        import_map = ImportMap.from_options(options, default_map_url="file:///proj/")

        assert import_map.map_url == "file:///proj/"
        assert import_map.resolve("a") == "file:///proj/a.js"

    def test_from_options_without_any_map_url(self):
        with pytest.raises(InvalidArgumentError):
            ImportMap.from_options(ImportMapOptions())

    def test_tables_are_copied(self):
        imports = {"a": "/a.js"}
        import_map = ImportMap("https://site.com/", imports=imports)
        import_map.set("b", "/b.js")
        assert imports == {"a": "/a.js"}

    def test_set_and_set_scoped(self):
        import_map = ImportMap("https://site.com/").set("a", "/a.js").set_scoped("a", "/scoped-a.js", "/app/")

        assert import_map.resolve("a") == "https://site.com/a.js"
        assert import_map.resolve_with_parent("a", "https://site.com/app/x.js") == "https://site.com/scoped-a.js"

    def test_clone_is_independent(self, site_map):
        clone = site_map.clone()
        clone.set("extra", "/extra.js")
        clone.set_scoped("x", "/x.js", "https://another.com/")

        assert "extra" not in site_map.imports
        assert "x" not in site_map.scopes["https://another.com/"]
        assert clone.root_url == site_map.root_url
