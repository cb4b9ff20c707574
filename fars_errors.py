"""Exception hierarchy for the FARS helpers."""

from __future__ import annotations

from typing import Any, Sequence

__all__ = [
    "FarsError",
    "FarsConfigError",
    "FarsFileNotFoundError",
    "InvalidYearBatchError",
    "InvalidStateError",
    "InvalidYearWarning",
]


class FarsError(Exception):
    """Base exception for all FARS helper errors."""


class FarsConfigError(FarsError):
    """Invalid configuration value."""


class FarsFileNotFoundError(FarsError, FileNotFoundError):
    """A year's accident file is not on disk."""

    def __init__(self, filename: str) -> None:
        super().__init__(f"file '{filename}' does not exist")
        self.filename = str(filename)

    def __str__(self) -> str:
        return self.args[0]


class InvalidYearBatchError(FarsError):
    """None of the requested years could be loaded."""

    def __init__(self, years: Sequence[Any]) -> None:
        self.years = list(years)
        super().__init__(f"no valid years in {self.years}")


class InvalidStateError(FarsError, ValueError):
    """State number is not present in the year's STATE values."""

    def __init__(self, state_num: int, year: int | None = None) -> None:
        self.state_num = state_num
        self.year = year
        super().__init__(f"invalid STATE number: {state_num}")


class InvalidYearWarning(UserWarning):
    """Issued once per year that failed to load in a multi-year read."""
