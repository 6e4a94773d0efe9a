"""Readers for serialized goals.

Text format, one record per goal (whitespace between tokens is free-form):

    link dest_link
    N | P lp lp lp  ep ep ep  d d d | L lp lp lp  ep ep ep  d d d | F lp lp lp  ep ep ep
    N | T la la la  er er er | A la la la  er er er | F er er er

Malformed input does not raise. The token stream logs the problem, becomes
failed (and stays failed), and read_goal returns None; callers check
`stream.ok` after every read.
"""

import json
import logging
from collections import deque
from pathlib import Path
from typing import Any, TextIO

from ikgoal.core.ik_goal import IKGoal, PositionConstraint, RotationConstraint
from ikgoal.io.readers.reader_base import BaseReader

logger = logging.getLogger(__name__)


class GoalTokenStream:
    """Whitespace-separated token cursor over a text stream with a sticky failure flag."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._tokens: deque[str] = deque()
        self.failed = False

    @property
    def ok(self) -> bool:
        return not self.failed

    def _fill(self) -> bool:
        while not self._tokens:
            line = self._stream.readline()
            if line == "":
                return False
            self._tokens.extend(line.split())
        return True

    def at_end(self) -> bool:
        """True when no tokens remain."""
        return not self._fill()

    def fail(self, message: str) -> None:
        logger.error(f"IKGoal: {message}")
        self.failed = True

    def next_token(self) -> str | None:
        if self.failed:
            return None
        if not self._fill():
            self.fail("unexpected end of input")
            return None
        return self._tokens.popleft()

    def next_int(self) -> int | None:
        token = self.next_token()
        if token is None:
            return None
        try:
            return int(token)
        except ValueError:
            self.fail(f"expected integer, got '{token}'")
            return None

    def next_vector(self) -> list[float] | None:
        values = []
        for _ in range(3):
            token = self.next_token()
            if token is None:
                return None
            try:
                values.append(float(token))
            except ValueError:
                self.fail(f"expected number, got '{token}'")
                return None
        return values


def read_goal(*, stream: GoalTokenStream) -> IKGoal | None:
    """Read one goal record.

    Args:
        stream: Token stream positioned at the start of a record

    Returns:
        The goal, or None if the record is malformed (stream.failed is set)
    """
    link = stream.next_int()
    dest_link = stream.next_int()

    position_token = stream.next_token()
    if position_token is None:
        return None
    try:
        position_kind = PositionConstraint(position_token)
    except ValueError:
        stream.fail(f"invalid position type character {position_token}")
        return None

    position: dict[str, Any] = {"constraint": position_kind.value}
    if position_kind is not PositionConstraint.NONE:
        position["local_position"] = stream.next_vector()
        position["end_position"] = stream.next_vector()
    if position_kind in (PositionConstraint.PLANAR, PositionConstraint.LINEAR):
        position["direction"] = stream.next_vector()

    rotation_token = stream.next_token()
    if rotation_token is None:
        return None
    try:
        rotation_kind = RotationConstraint(rotation_token)
    except ValueError:
        stream.fail(f"invalid rotation type character {rotation_token}")
        return None

    rotation: dict[str, Any] = {"constraint": rotation_kind.value}
    if rotation_kind in (RotationConstraint.AXIS, RotationConstraint.TWO_AXIS):
        rotation["local_axis"] = stream.next_vector()
    if rotation_kind is not RotationConstraint.NONE:
        rotation["end_rotation"] = stream.next_vector()

    if not stream.ok:
        return None

    return IKGoal.from_dict(
        data={"link": link, "dest_link": dest_link, "position": position, "rotation": rotation}
    )


class GoalTextReader(BaseReader):
    """Reader for text goal files (one three-line record per goal)."""

    def read_stream(self, *, stream: TextIO) -> dict[str, Any]:
        """Read goal records until end of input or the first malformed record.

        Returns:
            Dictionary with:
                - goals: list of IKGoal read before any failure
                - failed: whether a malformed record stopped the read
                - n_goals: number of goals read
                - format: "text"
        """
        tokens = GoalTokenStream(stream)
        goals = []
        while not tokens.at_end():
            goal = read_goal(stream=tokens)
            if not tokens.ok:
                break
            goals.append(goal)

        if tokens.failed:
            logger.warning(f"Stopped reading goals after {len(goals)} records (malformed input)")

        return {
            "goals": goals,
            "failed": tokens.failed,
            "n_goals": len(goals),
            "format": "text",
        }

    def read(self, *, filepath: Path) -> dict[str, Any]:
        """Read text goal file.

        Args:
            filepath: Path to goal file

        Returns:
            See read_stream
        """
        self.validate_file(filepath=filepath)

        with open(filepath, mode='r', encoding='utf-8') as f:
            result = self.read_stream(stream=f)

        self.last_read_path = filepath

        return result


class GoalJSONReader(BaseReader):
    """Reader for JSON goal files written by GoalJSONWriter.

    Expected format:
        {"goals": [goal.to_dict(), ...]}
    """

    def can_read(self, *, filepath: Path) -> bool:
        return filepath.suffix.lower() == '.json' and filepath.exists()

    def read(self, *, filepath: Path) -> dict[str, Any]:
        """Read JSON goal file.

        Returns:
            Dictionary with goals, n_goals and format "json"

        Raises:
            ValueError: If the file lacks a goals list or a goal is invalid
        """
        self.validate_file(filepath=filepath)

        with open(filepath, mode='r', encoding='utf-8') as f:
            raw = json.load(fp=f)

        if not isinstance(raw, dict) or "goals" not in raw:
            raise ValueError(f"No 'goals' list in {filepath}")

        goals = [IKGoal.from_dict(data=item) for item in raw["goals"]]
        self.last_read_path = filepath

        return {
            "goals": goals,
            "n_goals": len(goals),
            "format": "json",
        }
