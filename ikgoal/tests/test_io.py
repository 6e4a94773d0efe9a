"""Tests for goal readers and writers.

Tests the three-line text record and the JSON goal file.
"""

import io
import itertools
from pathlib import Path
from typing import Callable

import numpy as np
import pytest

from ikgoal.core.ik_goal import IKGoal, PositionConstraint, RotationConstraint
from ikgoal.io import (
    GoalJSONReader,
    GoalJSONWriter,
    GoalTextReader,
    GoalTextWriter,
    GoalTokenStream,
    format_goal,
    read_goal,
    write_goal,
)

ALL_COMBINATIONS = list(itertools.product(list(PositionConstraint), list(RotationConstraint)))


class TestTextFormat:
    """Test the text record layout."""

    def test_fixed_goal_layout(self) -> None:
        """Should write link ids, position line and rotation line."""
        goal = IKGoal(link=5, dest_link=-1)
        goal.set_fixed_position(point=[1.0, 2.0, 3.0], local_position=[0.0, 0.0, 0.5])
        goal.set_fixed_rotation(rotation=np.eye(3))

        lines = format_goal(goal=goal).splitlines()

        assert lines[0] == "5 -1"
        assert lines[1].split() == ["F", "0.0", "0.0", "0.5", "1.0", "2.0", "3.0"]
        rotation_tokens = lines[2].split()
        assert rotation_tokens[0] == "F"
        assert np.allclose([float(token) for token in rotation_tokens[1:]], 0.0)

    def test_free_goal_layout(self) -> None:
        """Should write bare type tokens for free constraints."""
        lines = format_goal(goal=IKGoal(link=1, dest_link=2)).splitlines()

        assert lines == ["1 2", "N", "N"]

    def test_axis_layout(self) -> None:
        """Should write local axis before the target axis."""
        goal = IKGoal()
        goal.set_axis_rotation(local_axis=[0.0, 0.0, 1.0], world_axis=[0.0, 1.0, 0.0])

        rotation_line = format_goal(goal=goal).splitlines()[2].split()

        assert rotation_line == ["A", "0.0", "0.0", "1.0", "0.0", "1.0", "0.0"]


class TestTextRoundTrip:
    """Test writing then reading goals."""

    @pytest.mark.parametrize("position,rotation", ALL_COMBINATIONS)
    def test_round_trip(
        self,
        position: PositionConstraint,
        rotation: RotationConstraint,
        make_goal: Callable[..., IKGoal]
    ) -> None:
        """Should restore every field exactly."""
        goal = make_goal(position=position, rotation=rotation, link=7, dest_link=2)
        buffer = io.StringIO()
        write_goal(goal=goal, stream=buffer)
        buffer.seek(0)

        stream = GoalTokenStream(buffer)
        restored = read_goal(stream=stream)

        assert stream.ok
        assert restored == goal
        if position is not PositionConstraint.NONE:
            assert np.array_equal(restored.end_position, goal.end_position)
        if rotation is not RotationConstraint.NONE:
            assert np.array_equal(restored.end_rotation, goal.end_rotation)

    def test_multiple_records(self, make_goal: Callable[..., IKGoal]) -> None:
        """Should read consecutive records from one stream."""
        goals = [
            make_goal(position=PositionConstraint.FIXED, rotation=RotationConstraint.FIXED, link=1),
            make_goal(position=PositionConstraint.PLANAR, rotation=RotationConstraint.AXIS, link=2),
            make_goal(position=PositionConstraint.NONE, rotation=RotationConstraint.NONE, link=3),
        ]
        buffer = io.StringIO("".join(format_goal(goal=goal) for goal in goals))

        data = GoalTextReader().read_stream(stream=buffer)

        assert data["failed"] is False
        assert data["n_goals"] == 3
        for restored, goal in zip(data["goals"], goals):
            assert restored.is_close(other=goal, atol=0.0)

    def test_free_form_whitespace(self) -> None:
        """Should accept tokens split across lines."""
        buffer = io.StringIO("4\n-1 L 0 0 0\n1 2 3 0 0 1\nN\n")

        stream = GoalTokenStream(buffer)
        goal = read_goal(stream=stream)

        assert stream.ok
        assert goal.link == 4
        assert goal.position_constraint is PositionConstraint.LINEAR
        assert np.allclose(goal.end_position, [1.0, 2.0, 3.0])
        assert np.allclose(goal.direction, [0.0, 0.0, 1.0])


class TestMalformedInput:
    """Test stream failure on malformed records."""

    def test_invalid_position_token(self) -> None:
        """Should mark the stream failed without raising."""
        stream = GoalTokenStream(io.StringIO("1 -1\nX 0 0 0\nN\n"))

        goal = read_goal(stream=stream)

        assert goal is None
        assert stream.failed

    def test_invalid_rotation_token(self) -> None:
        """Should mark the stream failed on an unknown rotation token."""
        stream = GoalTokenStream(io.StringIO("1 -1\nN\nQ\n"))

        assert read_goal(stream=stream) is None
        assert not stream.ok

    def test_failure_is_sticky(self) -> None:
        """Should refuse further reads after a failure."""
        valid = format_goal(goal=IKGoal(link=2))
        stream = GoalTokenStream(io.StringIO("1 -1\nZ\nN\n" + valid))

        assert read_goal(stream=stream) is None
        assert read_goal(stream=stream) is None
        assert stream.failed

    def test_bad_number(self) -> None:
        """Should fail on non-numeric vector components."""
        stream = GoalTokenStream(io.StringIO("1 -1\nF 0 0 zero 1 1 1\nN\n"))

        assert read_goal(stream=stream) is None
        assert stream.failed

    def test_truncated_record(self) -> None:
        """Should fail when input ends mid-record."""
        stream = GoalTokenStream(io.StringIO("1 -1\nF 0 0 0 1 1\n"))

        assert read_goal(stream=stream) is None
        assert stream.failed

    def test_reader_keeps_goals_before_failure(self) -> None:
        """Should return the goals read before the malformed record."""
        text = format_goal(goal=IKGoal(link=1)) + "2 -1\nW\nN\n" + format_goal(goal=IKGoal(link=3))

        data = GoalTextReader().read_stream(stream=io.StringIO(text))

        assert data["failed"] is True
        assert data["n_goals"] == 1
        assert data["goals"][0].link == 1


class TestGoalFiles:
    """Test file-level readers and writers."""

    def test_text_file(self, temp_dir: Path, make_goal: Callable[..., IKGoal]) -> None:
        """Should write and read a text goal file."""
        goals = [
            make_goal(position=position, rotation=rotation, link=i)
            for i, (position, rotation) in enumerate(ALL_COMBINATIONS)
        ]
        filepath = temp_dir / "goals" / "pose.txt"

        writer = GoalTextWriter()
        writer.write(filepath=filepath, data={"goals": goals})
        data = GoalTextReader().read(filepath=filepath)

        assert writer.last_write_path == filepath
        assert data["failed"] is False
        assert data["n_goals"] == len(goals)
        for restored, goal in zip(data["goals"], goals):
            assert restored.is_close(other=goal, atol=0.0)

    def test_json_file(self, temp_dir: Path, make_goal: Callable[..., IKGoal]) -> None:
        """Should write and read a JSON goal file."""
        goals = [
            make_goal(position=position, rotation=rotation, link=i)
            for i, (position, rotation) in enumerate(ALL_COMBINATIONS)
        ]
        filepath = temp_dir / "goals.json"

        GoalJSONWriter().write(filepath=filepath, data={"goals": goals})
        reader = GoalJSONReader()
        data = reader.read(filepath=filepath)

        assert reader.can_read(filepath=filepath) is True
        assert data["n_goals"] == len(goals)
        for restored, goal in zip(data["goals"], goals):
            assert restored == goal

    def test_missing_file(self, temp_dir: Path) -> None:
        """Should raise for a missing file."""
        with pytest.raises(FileNotFoundError):
            GoalTextReader().read(filepath=temp_dir / "missing.txt")

    def test_json_without_goals(self, temp_dir: Path) -> None:
        """Should reject a JSON file without a goals list."""
        filepath = temp_dir / "other.json"
        filepath.write_text('{"poses": []}', encoding='utf-8')

        with pytest.raises(ValueError):
            GoalJSONReader().read(filepath=filepath)

    def test_writer_requires_goals(self, temp_dir: Path) -> None:
        """Should reject data without a goals list."""
        with pytest.raises(ValueError):
            GoalTextWriter().write(filepath=temp_dir / "goals.txt", data={})
