"""Exceptions raised during conversion."""

from __future__ import annotations

from .schemas import ConversionError


class SetupError(Exception):
    """Raised when the run cannot start: missing source or unusable result directory."""
    pass


class ConvertException(Exception):
    """Raised when a single file cannot be converted."""

    def __init__(self, error: ConversionError):
        super().__init__(error.message)
        self.error = error

    @classmethod
    def syntax(cls, path: str, line_index: int, line: str) -> "ConvertException":
        return cls(ConversionError(path=path, line_index=line_index, line=line))
