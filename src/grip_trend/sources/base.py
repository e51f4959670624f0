"""Base classes for reading sources."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from grip_trend.model import Reading


@dataclass(frozen=True)
class SourcePaths:
    """Container for a source directory."""

    root: Path


class ReadingSource(ABC):
    """Abstract source of grip-strength readings."""

    def __init__(self, paths: SourcePaths) -> None:
        """Create a reading source.

        Args:
            paths: Source paths configuration.
        """
        self._paths = paths

    def validate(self) -> None:
        """Validate that the source directory exists.

        Raises:
            FileNotFoundError: If the directory is missing.
        """
        if not self._paths.root.exists():
            raise FileNotFoundError(str(self._paths.root))

    @abstractmethod
    def load_readings(self, path: Path) -> list[Reading]:
        """Parse one exported file into readings sorted by date."""
