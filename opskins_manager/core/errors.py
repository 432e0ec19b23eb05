"""Exception hierarchy."""

from __future__ import annotations

from typing import Any, Optional


class OpskinsError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(OpskinsError, ValueError):
    pass


class ItemNotFoundError(OpskinsError, LookupError):
    def __init__(self, name: str):
        super().__init__(f"Item wasn't found: {name!r}")
        self.name = name


class RemoteCallError(OpskinsError):
    """Any failure talking to the platform: transport, HTTP or API status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Optional[Any] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class PersistenceError(OpskinsError):
    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
