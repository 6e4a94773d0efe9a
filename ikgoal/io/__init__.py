"""IO module for ikgoal.

Structure:
    io/
    ├── readers/     - Read goal files (text, JSON)
    └── writers/     - Write goal files (text, JSON)

Usage:
    from ikgoal.io import GoalTextReader, GoalTextWriter

    GoalTextWriter().write(filepath=Path("goals.txt"), data={"goals": goals})
    data = GoalTextReader().read(filepath=Path("goals.txt"))
"""

# Readers
from .readers import (
    BaseReader,
    GoalTokenStream,
    GoalTextReader,
    GoalJSONReader,
    read_goal,
)

# Writers
from .writers import (
    BaseWriter,
    GoalTextWriter,
    GoalJSONWriter,
    format_goal,
    write_goal,
)

__all__ = [
    # Readers
    "BaseReader",
    "GoalTokenStream",
    "GoalTextReader",
    "GoalJSONReader",
    "read_goal",
    # Writers
    "BaseWriter",
    "GoalTextWriter",
    "GoalJSONWriter",
    "format_goal",
    "write_goal",
]
