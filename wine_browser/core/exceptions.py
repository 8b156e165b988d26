from __future__ import annotations

from typing import Any, Optional


class WineBrowserError(Exception):
    """Base exception for all wine_browser errors"""
    pass


class LoadError(WineBrowserError):
    """Dataset missing, unreachable or unreadable"""
    pass


class ParseError(WineBrowserError):
    """
    A row is missing a required field or carries a non-numeric value
    in a numeric field.
    """

    def __init__(
        self,
        message: str,
        row: Optional[int] = None,
        field: Optional[str] = None,
        value: Any = None,
    ):
        self.row = row
        self.field = field
        self.value = value
        super().__init__(message)


class ConfigurationError(WineBrowserError):
    """Invalid global config, key function or dimension setup"""
    pass


class InvariantViolation(WineBrowserError):
    """
    An accumulator went negative, i.e. add/remove calls are out of step.
    Never expected in correct code.
    """
    pass
