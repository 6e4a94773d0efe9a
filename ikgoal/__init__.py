"""ikgoal - end-effector goal constraints for inverse kinematics."""

from ikgoal.core import (
    WORLD_LINK,
    IKGoal,
    PositionConstraint,
    RotationConstraint,
    ToleranceConfig,
    IKGoalError,
    GoalPreconditionError,
    NumericDegeneracyError,
    UnsupportedGoalOperationError,
)
from ikgoal.data import RigidTransform

__all__ = [
    "WORLD_LINK",
    "IKGoal",
    "PositionConstraint",
    "RotationConstraint",
    "ToleranceConfig",
    "IKGoalError",
    "GoalPreconditionError",
    "NumericDegeneracyError",
    "UnsupportedGoalOperationError",
    "RigidTransform",
]
