"""Application support libraries for importmap-resolver."""
