"""Runtime configuration for the FARS helpers."""

from __future__ import annotations

import dataclasses
import os
import pathlib
from typing import Any

from fars_errors import FarsConfigError

__all__ = ["FarsConfig"]

ENV_DATA_DIR = "FARS_DATA_DIR"
ENV_MAX_WORKERS = "FARS_MAX_WORKERS"


def _env_workers(value: str | None, default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise FarsConfigError(f"{ENV_MAX_WORKERS} must be an integer, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class FarsConfig:
    """Where the yearly accident files live and how many years load at once.

    Parameters
    ----------
    data_dir : pathlib.Path
        Directory holding ``accident_<year>.csv.bz2`` files.
    max_workers : int
        Number of years loaded concurrently. ``1`` loads sequentially.
    """

    data_dir: pathlib.Path = pathlib.Path(".")
    max_workers: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "data_dir", pathlib.Path(self.data_dir))
        if isinstance(self.max_workers, bool) or not isinstance(self.max_workers, int):
            raise FarsConfigError(f"max_workers must be an integer, got {self.max_workers!r}")
        if self.max_workers < 1:
            raise FarsConfigError(f"max_workers must be >= 1, got {self.max_workers}")

    @classmethod
    def from_env(cls, **overrides: Any) -> FarsConfig:
        """Create configuration from ``FARS_DATA_DIR`` and ``FARS_MAX_WORKERS``.

        Explicit keyword arguments override environment values.
        """
        values: dict[str, Any] = {
            "data_dir": pathlib.Path(os.environ.get(ENV_DATA_DIR) or "."),
            "max_workers": _env_workers(os.environ.get(ENV_MAX_WORKERS), 1),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
