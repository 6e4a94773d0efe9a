"""Readers module for ikgoal IO.

Usage:
    from ikgoal.io.readers import GoalTextReader

    reader = GoalTextReader()
    data = reader.read(filepath=Path("goals.txt"))
    if data["failed"]:
        ...
"""

from .reader_base import BaseReader

from .goal_reader import (
    GoalTokenStream,
    GoalTextReader,
    GoalJSONReader,
    read_goal,
)

__all__ = [
    # Base reader
    "BaseReader",
    # Goal readers
    "GoalTokenStream",
    "GoalTextReader",
    "GoalJSONReader",
    "read_goal",
]
