"""Base class for goal file readers.

Readers return a dictionary whose "goals" entry is a list of IKGoal; the
remaining keys describe the read (count, format, failure state).
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from ikgoal.data.arbitrary_types_model import ArbitraryTypesModel


class BaseReader(ArbitraryTypesModel, ABC):
    """Abstract goal file reader.

    Subclasses implement read() and record the path they read in
    last_read_path.
    """

    last_read_path: Path | None = None

    @abstractmethod
    def read(self, *, filepath: Path) -> dict[str, Any]:
        """Read goals from file.

        Args:
            filepath: Path to goal file

        Returns:
            Dictionary with at least "goals" and "n_goals"
        """
        pass

    def validate_file(self, *, filepath: Path) -> None:
        """Fail early on a missing path or a directory.

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If path is not a file
        """
        if not filepath.exists():
            raise FileNotFoundError(f"Goal file not found: {filepath}")

        if not filepath.is_file():
            raise ValueError(f"Not a goal file: {filepath}")
