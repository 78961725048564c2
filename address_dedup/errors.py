"""Exceptions raised by the adjacency matchers."""

from __future__ import annotations


class AddressDedupError(Exception):
    """Base class for all address-dedup errors."""


class MissingParameter(AddressDedupError, ValueError):
    """A structurally required argument (group keys, target column) was not supplied."""

    def __init__(self, parameter: str, message: str | None = None):
        self.parameter = parameter
        super().__init__(message or f"{parameter} must be provided.")


class InvalidPattern(AddressDedupError, ValueError):
    """An extraction pattern could not be compiled."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")


class TypeMismatch(AddressDedupError, TypeError):
    """A column value cannot be compared as the expected type."""
