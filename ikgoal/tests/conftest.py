"""Pytest configuration and fixtures for ikgoal tests.

Provides reusable fixtures for:
- Temporary directories
- Seeded random transforms
- Goals of every constraint combination
"""

import shutil
import tempfile
from pathlib import Path
from typing import Callable

import numpy as np
import pytest

from ikgoal.core.ik_goal import IKGoal, PositionConstraint, RotationConstraint
from ikgoal.data.rigid_transform import RigidTransform


@pytest.fixture
def temp_dir() -> Path:
    """Create temporary directory for tests.

    Yields:
        Path to temporary directory (auto-cleaned up)
    """
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(seed=42)


def random_unit_vector(rng: np.random.Generator) -> np.ndarray:
    vector = rng.normal(size=3)
    return vector / np.linalg.norm(vector)


def random_transform(rng: np.random.Generator) -> RigidTransform:
    return RigidTransform.from_rotation_vector(
        rotation_vector=rng.uniform(-2.0, 2.0, size=3),
        translation=rng.uniform(-1.0, 1.0, size=3)
    )


@pytest.fixture
def reference_transform(rng: np.random.Generator) -> RigidTransform:
    """Random transform used as a candidate pose."""
    return random_transform(rng)


@pytest.fixture
def make_goal(rng: np.random.Generator) -> Callable[..., IKGoal]:
    """Factory building a goal with random data for a constraint combination.

    TWO_AXIS goals are built through from_dict, the only way to create them.
    """

    def _make_goal(
        *,
        position: PositionConstraint,
        rotation: RotationConstraint,
        link: int = 3,
        dest_link: int = -1
    ) -> IKGoal:
        goal = IKGoal(link=link, dest_link=dest_link)
        local_position = rng.uniform(-0.5, 0.5, size=3)
        point = rng.uniform(-1.0, 1.0, size=3)

        if position is PositionConstraint.FIXED:
            goal.set_fixed_position(point=point, local_position=local_position)
        elif position is PositionConstraint.LINEAR:
            goal.set_linear_position(point=point, direction=random_unit_vector(rng), local_position=local_position)
        elif position is PositionConstraint.PLANAR:
            goal.set_planar_position(point=point, normal=random_unit_vector(rng), local_position=local_position)

        if rotation is RotationConstraint.FIXED:
            goal.set_fixed_rotation(rotation=random_transform(rng).rotation)
        elif rotation is RotationConstraint.AXIS:
            goal.set_axis_rotation(local_axis=random_unit_vector(rng), world_axis=random_unit_vector(rng))
        elif rotation is RotationConstraint.TWO_AXIS:
            data = goal.to_dict()
            data["rotation"] = {
                "constraint": "T",
                "local_axis": random_unit_vector(rng).tolist(),
                "end_rotation": random_unit_vector(rng).tolist(),
            }
            goal = IKGoal.from_dict(data=data)

        return goal

    return _make_goal
