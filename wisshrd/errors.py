"""Exception types raised by wisshrd components."""

from __future__ import annotations

__all__ = [
    "ConfigurationError",
    "HistoryError",
    "PickerError",
    "WisshrdError",
]


class WisshrdError(Exception):
    """Base class for all wisshrd failures."""


class ConfigurationError(WisshrdError):
    """Raised when the home or configuration directory cannot be resolved."""


class HistoryError(WisshrdError):
    """Raised when the selection history cannot be read or written."""


class PickerError(WisshrdError):
    """Raised when the fuzzy picker fails to produce a usable value."""
