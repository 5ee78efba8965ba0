"""CLI command groups for importmap-resolver."""

__all__ = [
    "config",
    "integrity",
    "map",
    "resolve",
]
