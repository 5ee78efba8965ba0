"""Pytest configuration for importmap-resolver tests."""

import pytest

from importmap_resolver.import_map import ImportMap


@pytest.fixture
def site_map() -> ImportMap:
    """The canonical example map declared at https://site.com."""
    return ImportMap(
        "https://site.com",
        imports={
            "test": "/test-map.js",
            "https://another.com/url.js": "/url-map.js",
        },
        scopes={
            "https://another.com/": {
                "/url.js": "/scoped-map.js",
            },
        },
    )


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Point HOME and CWD at a temp dir so no real settings are read."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    return tmp_path
