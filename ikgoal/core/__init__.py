"""Core goal-constraint machinery for ikgoal.

- config: numerical tolerances
- exceptions: error taxonomy
- geometry: rotation helpers, plane/line projection
- frame_fit: least-squares rigid-frame fit
- ik_goal: the IKGoal constraint type

Usage:
    from ikgoal.core import IKGoal, RigidTransform

    goal = IKGoal(link=7)
    goal.set_fixed_transform(transform=RigidTransform.identity())
    position_error, rotation_error = goal.get_error(relative_transform=current)
"""

# Configuration
from .config import (
    DEFAULT_TOLERANCES,
    ToleranceConfig,
)

# Errors
from .exceptions import (
    IKGoalError,
    GoalPreconditionError,
    NumericDegeneracyError,
    UnsupportedGoalOperationError,
)

# Geometry
from .geometry import (
    Line3D,
    Plane3D,
    canonical_basis,
    minimal_rotation,
    require_rotation,
    require_unit,
    rotation_matrix_to_vector,
    rotation_vector_to_matrix,
)

# Fitting
from .frame_fit import (
    FrameFit,
    fit_frames,
)

# Goals
from .ik_goal import (
    WORLD_LINK,
    IKGoal,
    PositionConstraint,
    RotationConstraint,
)

from ikgoal.data.rigid_transform import RigidTransform

__all__ = [
    # Configuration
    "DEFAULT_TOLERANCES",
    "ToleranceConfig",
    # Errors
    "IKGoalError",
    "GoalPreconditionError",
    "NumericDegeneracyError",
    "UnsupportedGoalOperationError",
    # Geometry
    "Line3D",
    "Plane3D",
    "canonical_basis",
    "minimal_rotation",
    "require_rotation",
    "require_unit",
    "rotation_matrix_to_vector",
    "rotation_vector_to_matrix",
    # Fitting
    "FrameFit",
    "fit_frames",
    # Goals
    "WORLD_LINK",
    "IKGoal",
    "PositionConstraint",
    "RotationConstraint",
    "RigidTransform",
]
