"""Errors raised along the listing sweep pipeline.

Every stage raises one of these; only the sweep orchestrator catches them.
"""

from typing import Any


class SweepError(Exception):
    """Base class for terminal sweep failures."""


class CredentialMissingError(SweepError):
    """No Gemini API key was stored, configured or entered."""


class StorageError(SweepError):
    """The credential storage backend failed to read or write."""


class NetworkError(SweepError):
    """The request to the generative-text endpoint did not complete."""


class ResponseShapeError(SweepError):
    """The endpoint answered, but not with a candidate text part."""

    def __init__(self, message: str, payload: Any = None):
        super().__init__(message)
        self.payload = payload


class DecisionParseError(SweepError):
    """The model text could not be read as a JSON object."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text
