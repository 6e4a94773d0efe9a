"""Data structures for ikgoal.

Provides the value types shared by the goal constraints and the IO layer:
- ArbitraryTypesModel: pydantic base allowing numpy fields
- RigidTransform: rotation + translation
"""

from .arbitrary_types_model import ArbitraryTypesModel
from .rigid_transform import RigidTransform

__all__ = [
    "ArbitraryTypesModel",
    "RigidTransform",
]
