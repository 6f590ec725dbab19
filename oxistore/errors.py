"""Exceptions raised by the oxistore tree storage."""
from __future__ import annotations
from typing import Any, Dict, Optional


class OxiStorageError(Exception):
    """Base exception for all storage errors.

    `data` carries the structured context of the failure (the offending
    path, value, parent descriptor, ...).
    """

    def __init__(self, message: str, data: Optional[Dict[str, Any]] = None):
        self.message = message
        self.data: Dict[str, Any] = dict(data or {})
        super().__init__(message)

    def __str__(self) -> str:
        if not self.data:
            return self.message
        ctx = ", ".join(f"{k}={v!r}" for k, v in self.data.items())
        return f"{self.message} ({ctx})"


class SerializationError(OxiStorageError):
    """A value or path cannot be committed to the backend."""


class DeserializationError(OxiStorageError, KeyError):
    """A path cannot be resolved against the stored tree."""

    # KeyError quotes its argument in str(); keep the readable form.
    __str__ = OxiStorageError.__str__
