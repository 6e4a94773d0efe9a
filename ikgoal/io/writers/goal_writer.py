"""Writers for serialized goals.

The text format is the inverse of ikgoal.io.readers.goal_reader; floats are
written with repr() so a write/read cycle reproduces every value exactly.
"""

import json
from pathlib import Path
from typing import Any, TextIO

import numpy as np

from ikgoal.core.ik_goal import IKGoal, PositionConstraint, RotationConstraint
from ikgoal.io.writers.writer_base import BaseWriter


def _format_vector(vector: np.ndarray) -> str:
    return " ".join(repr(float(value)) for value in vector)


def format_goal(*, goal: IKGoal) -> str:
    """Format one goal as its three-line text record."""
    lines = [f"{goal.link} {goal.dest_link}"]

    position_kind = goal.position_constraint
    fields = []
    if position_kind is not PositionConstraint.NONE:
        fields += [goal.local_position, goal.end_position]
    if position_kind in (PositionConstraint.PLANAR, PositionConstraint.LINEAR):
        fields.append(goal.direction)
    lines.append("   ".join([position_kind.value] + [_format_vector(v) for v in fields]))

    rotation_kind = goal.rotation_constraint
    fields = []
    if rotation_kind in (RotationConstraint.AXIS, RotationConstraint.TWO_AXIS):
        fields.append(goal.local_axis)
    if rotation_kind is not RotationConstraint.NONE:
        fields.append(goal.end_rotation)
    lines.append("   ".join([rotation_kind.value] + [_format_vector(v) for v in fields]))

    return "\n".join(lines) + "\n"


def write_goal(*, goal: IKGoal, stream: TextIO) -> None:
    stream.write(format_goal(goal=goal))


class GoalTextWriter(BaseWriter):
    """Writer for text goal files."""

    def write(
        self,
        *,
        filepath: Path,
        data: dict[str, Any]
    ) -> None:
        """Write goals to a text file.

        Args:
            filepath: Path to output file
            data: Dictionary with 'goals' key containing a list of IKGoal
        """
        self.prepare(filepath=filepath, data=data)

        with open(filepath, mode='w', encoding='utf-8') as f:
            for goal in data["goals"]:
                write_goal(goal=goal, stream=f)

        self.last_write_path = filepath


class GoalJSONWriter(BaseWriter):
    """Writer for JSON goal files.

    Output format:
        {"goals": [goal.to_dict(), ...]}
    """
    indent: int = 2

    def write(
        self,
        *,
        filepath: Path,
        data: dict[str, Any]
    ) -> None:
        """Write goals to a JSON file.

        Args:
            filepath: Path to output JSON
            data: Dictionary with 'goals' key containing a list of IKGoal
        """
        self.prepare(filepath=filepath, data=data)
        payload = {"goals": [goal.to_dict() for goal in data["goals"]]}

        with open(filepath, mode='w', encoding='utf-8') as f:
            json.dump(obj=payload, fp=f, indent=self.indent)

        self.last_write_path = filepath
