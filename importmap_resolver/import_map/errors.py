"""Import map errors.

Every failure raised by the engine derives from ImportMapError so callers
(bundler hooks, the CLI) can catch the whole family in one place.
"""


class ImportMapError(Exception):
    """Base class for import map failures."""

    pass


class MalformedUrlError(ImportMapError, ValueError):
    """Raised when a string cannot be parsed as a URL reference."""

    def __init__(self, url: str, reason: str | None = None):
        self.url = url
        self.reason = reason
        message = f"malformed URL: {url!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class InvalidArgumentError(ImportMapError, ValueError):
    """Raised when a required argument (e.g. a relocation target) is unset."""

    pass


class UnresolvedSpecifierError(ImportMapError):
    """Raised when a plain specifier matches no import map entry."""

    def __init__(self, specifier: str, parent: str):
        self.specifier = specifier
        self.parent = parent
        super().__init__(f"unable to resolve {specifier} in {parent}")


class IntegrityNotFoundError(ImportMapError, LookupError):
    """Raised when a target has no integrity entry."""

    def __init__(self, target: str):
        self.target = target
        super().__init__(f"integrity not found for {target}")


class ImportMapLoadError(ImportMapError):
    """Raised when a persisted import map document cannot be decoded."""

    pass
