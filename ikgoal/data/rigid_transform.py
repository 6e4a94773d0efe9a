"""Rigid transform value type.

A RigidTransform maps a point p to R @ p + t. It is the currency exchanged
with the forward-kinematics collaborator (relative link transforms) and the
solver (goal transforms).
"""

import numpy as np
from pydantic import Field, field_validator, model_validator
from scipy.spatial.transform import Rotation
from typing_extensions import Self

from ikgoal.data.arbitrary_types_model import ArbitraryTypesModel


class RigidTransform(ArbitraryTypesModel):
    """Rotation plus translation.

    Attributes:
        rotation: (3, 3) rotation matrix
        translation: (3,) translation vector
    """

    rotation: np.ndarray = Field(default_factory=lambda: np.eye(3))
    translation: np.ndarray = Field(default_factory=lambda: np.zeros(3))

    @field_validator("rotation", "translation", mode="before")
    @classmethod
    def coerce_array(cls, value: object) -> np.ndarray:
        return np.array(value, dtype=np.float64)

    @model_validator(mode="after")
    def validate_shapes(self) -> Self:
        """Validate array shapes."""
        if self.rotation.shape != (3, 3):
            raise ValueError(f"Rotation must be 3x3, got shape {self.rotation.shape}")

        if self.translation.shape != (3,):
            raise ValueError(f"Translation must have shape (3,), got {self.translation.shape}")
        return self

    @classmethod
    def identity(cls) -> Self:
        return cls()

    @classmethod
    def from_rotation_vector(
        cls,
        *,
        rotation_vector: np.ndarray,
        translation: np.ndarray | None = None
    ) -> Self:
        """Create transform from a rotation vector (axis * angle).

        Args:
            rotation_vector: (3,) rotation vector in radians
            translation: Optional (3,) translation (defaults to zero)

        Returns:
            RigidTransform instance
        """
        rotation = Rotation.from_rotvec(np.asarray(rotation_vector, dtype=np.float64)).as_matrix()
        return cls(
            rotation=rotation,
            translation=np.zeros(3) if translation is None else translation
        )

    def apply(self, *, point: np.ndarray) -> np.ndarray:
        """Map a point: R @ p + t."""
        return self.rotation @ np.asarray(point, dtype=np.float64) + self.translation

    def apply_inverse(self, *, point: np.ndarray) -> np.ndarray:
        """Map a point through the inverse transform: R^T @ (p - t)."""
        return self.rotation.T @ (np.asarray(point, dtype=np.float64) - self.translation)

    def inverse(self) -> "RigidTransform":
        rotation_inv = self.rotation.T
        return RigidTransform(
            rotation=rotation_inv,
            translation=-(rotation_inv @ self.translation)
        )

    def compose(self, *, other: "RigidTransform") -> "RigidTransform":
        """Return self * other (other is applied first)."""
        return RigidTransform(
            rotation=self.rotation @ other.rotation,
            translation=self.rotation @ other.translation + self.translation
        )

    def __matmul__(self, other: "RigidTransform") -> "RigidTransform":
        return self.compose(other=other)

    def is_close(self, *, other: "RigidTransform", atol: float = 1e-8) -> bool:
        """Check element-wise closeness of rotation and translation."""
        return bool(
            np.allclose(self.rotation, other.rotation, atol=atol)
            and np.allclose(self.translation, other.translation, atol=atol)
        )

    def __str__(self) -> str:
        rotation_vector = Rotation.from_matrix(self.rotation).as_rotvec()
        return (
            f"RigidTransform(rotvec={np.round(rotation_vector, 4).tolist()}, "
            f"translation={np.round(self.translation, 4).tolist()})"
        )
