"""Data models for import map documents and construction options."""

from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

Imports = dict[str, str]
Scopes = dict[str, dict[str, str]]
Integrity = dict[str, str]


class ImportMapData(BaseModel):
    """Persisted import map document.

    Attributes:
        imports: Specifier key -> target
        scopes: Scope prefix -> nested imports table
        integrity: Target -> integrity hash
    """

    model_config = ConfigDict(extra="ignore")

    imports: Imports = Field(default_factory=dict)
    scopes: Scopes = Field(default_factory=dict)
    integrity: Integrity = Field(default_factory=dict)

    def to_document(self) -> dict[str, Any]:
        """Return the JSON-ready document, omitting empty tables."""
        document: dict[str, Any] = {}
        if self.imports:
            document["imports"] = dict(self.imports)
        if self.scopes:
            document["scopes"] = {scope: dict(table) for scope, table in self.scopes.items()}
        if self.integrity:
            document["integrity"] = dict(self.integrity)
        return document


class ImportMapOptions(BaseModel):
    """Construction options for an ImportMap.

    Attributes:
        map: Initial tables
        map_url: Declaring location; the caller supplies a default when unset
        root_url: Root location; derived from map_url for http(s) maps when unset
    """

    map: ImportMapData = Field(default_factory=ImportMapData)
    map_url: str | None = None
    root_url: str | None = None
