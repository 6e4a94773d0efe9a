"""Writers module for ikgoal IO.

Usage:
    from ikgoal.io.writers import GoalTextWriter

    writer = GoalTextWriter()
    writer.write(filepath=Path("goals.txt"), data={"goals": goals})
"""

from .writer_base import BaseWriter

from .goal_writer import (
    GoalTextWriter,
    GoalJSONWriter,
    format_goal,
    write_goal,
)

__all__ = [
    # Base writer
    "BaseWriter",
    # Goal writers
    "GoalTextWriter",
    "GoalJSONWriter",
    "format_goal",
    "write_goal",
]
