"""Base class for goal file writers."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from ikgoal.data.arbitrary_types_model import ArbitraryTypesModel


class BaseWriter(ArbitraryTypesModel, ABC):
    """Abstract goal file writer.

    Subclasses implement write() for a {"goals": [IKGoal, ...]} payload and
    record the path they wrote in last_write_path.
    """

    last_write_path: Path | None = None

    @abstractmethod
    def write(
        self,
        *,
        filepath: Path,
        data: dict[str, Any]
    ) -> None:
        """Write goals to file.

        Args:
            filepath: Path to output file
            data: Dictionary with a 'goals' list
        """
        pass

    def prepare(self, *, filepath: Path, data: dict[str, Any]) -> None:
        """Check the payload and create the parent directory.

        Raises:
            ValueError: If data has no 'goals' entry
        """
        if "goals" not in data:
            raise ValueError(f"Goal data missing 'goals' key (got keys {sorted(data)})")
        filepath.parent.mkdir(parents=True, exist_ok=True)
