"""Geometric helpers for goal constraints.

Vector checks, rotation-vector codec, minimal rotations, canonical
orthogonal bases, and the plane/line projection types used when projecting
a candidate pose onto a position constraint.
"""

from dataclasses import dataclass

import numpy as np
from scipy.spatial.transform import Rotation

from ikgoal.core.config import ToleranceConfig, resolve_tolerances
from ikgoal.core.exceptions import GoalPreconditionError, NumericDegeneracyError


def as_vector3(value: object, *, name: str = "vector") -> np.ndarray:
    """Convert input to a (3,) float64 array.

    Raises:
        GoalPreconditionError: If the input does not have three components
    """
    vector = np.array(value, dtype=np.float64)
    if vector.shape != (3,):
        raise GoalPreconditionError(f"{name} must have shape (3,), got {vector.shape}")
    return vector


def is_unit(vector: np.ndarray, *, tolerances: ToleranceConfig | None = None) -> bool:
    tolerances = resolve_tolerances(tolerances)
    return bool(abs(float(np.dot(vector, vector)) - 1.0) <= tolerances.unit_norm_tolerance)


def require_unit(
    value: object,
    *,
    name: str,
    tolerances: ToleranceConfig | None = None
) -> np.ndarray:
    """Return value as a (3,) array, failing unless it is unit length.

    Raises:
        GoalPreconditionError: If the vector is not unit length
    """
    vector = as_vector3(value, name=name)
    if not is_unit(vector, tolerances=tolerances):
        raise GoalPreconditionError(
            f"{name} must be unit length, got norm {np.linalg.norm(vector):.6g}"
        )
    return vector


def normalize(
    value: object,
    *,
    name: str = "vector",
    tolerances: ToleranceConfig | None = None
) -> np.ndarray:
    """Return a unit-length copy of value.

    Raises:
        GoalPreconditionError: If the vector has (near) zero length
    """
    tolerances = resolve_tolerances(tolerances)
    vector = as_vector3(value, name=name)
    norm = np.linalg.norm(vector)
    if not np.isfinite(norm) or norm <= tolerances.degenerate_tolerance:
        raise GoalPreconditionError(f"{name} cannot be normalized (norm {norm:.6g})")
    return vector / norm


def require_rotation(
    value: object,
    *,
    name: str = "rotation",
    tolerances: ToleranceConfig | None = None
) -> np.ndarray:
    """Return value as a (3, 3) array, failing unless it is a proper rotation.

    Raises:
        NumericDegeneracyError: If the matrix has non-finite entries
        GoalPreconditionError: If the matrix is not 3x3, not orthonormal, or a reflection
    """
    tolerances = resolve_tolerances(tolerances)
    matrix = np.array(value, dtype=np.float64)
    if matrix.shape != (3, 3):
        raise GoalPreconditionError(f"{name} must be 3x3, got shape {matrix.shape}")
    if not np.all(np.isfinite(matrix)):
        raise NumericDegeneracyError(f"{name} has non-finite entries")

    deviation = np.max(np.abs(matrix.T @ matrix - np.eye(3)))
    if deviation > tolerances.rotation_tolerance:
        raise GoalPreconditionError(f"{name} is not orthonormal (max |R^T R - I| = {deviation:.3g})")
    if np.linalg.det(matrix) <= 0.0:
        raise GoalPreconditionError(f"{name} is a reflection, not a rotation")
    return matrix


def rotation_matrix_to_vector(rotation: np.ndarray) -> np.ndarray:
    """Encode a rotation matrix as a rotation vector.

    Raises:
        NumericDegeneracyError: If the matrix has non-finite entries
    """
    rotation = np.asarray(rotation, dtype=np.float64)
    if not np.all(np.isfinite(rotation)):
        raise NumericDegeneracyError("Rotation matrix has non-finite entries")
    rotation_vector = Rotation.from_matrix(rotation).as_rotvec()
    if not np.all(np.isfinite(rotation_vector)):
        raise NumericDegeneracyError("Rotation vector has non-finite entries")
    return rotation_vector


def rotation_vector_to_matrix(rotation_vector: np.ndarray) -> np.ndarray:
    """Decode a rotation vector into a 3x3 matrix.

    Raises:
        NumericDegeneracyError: If the vector has non-finite entries
    """
    rotation_vector = np.asarray(rotation_vector, dtype=np.float64)
    if not np.all(np.isfinite(rotation_vector)):
        raise NumericDegeneracyError("Rotation vector has non-finite entries")
    return Rotation.from_rotvec(rotation_vector).as_matrix()


def axis_angle_matrix(*, axis: np.ndarray, angle: float) -> np.ndarray:
    """Rotation matrix for a rotation of angle radians about a unit axis."""
    return Rotation.from_rotvec(np.asarray(axis, dtype=np.float64) * angle).as_matrix()


def canonical_basis(*, axis: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Orthonormal pair (x, y) spanning the plane orthogonal to a unit axis.

    The result is deterministic and right-handed: cross(x, y) == axis.

    Args:
        axis: (3,) unit vector

    Returns:
        Tuple of two (3,) unit vectors
    """
    axis = np.asarray(axis, dtype=np.float64)
    # seed with the coordinate direction least aligned with the axis
    seed = np.zeros(3)
    seed[int(np.argmin(np.abs(axis)))] = 1.0
    x = seed - np.dot(seed, axis) * axis
    x /= np.linalg.norm(x)
    y = np.cross(axis, x)
    return x, y


def minimal_rotation(
    *,
    source: np.ndarray,
    target: np.ndarray,
    tolerances: ToleranceConfig | None = None
) -> np.ndarray:
    """Smallest-angle rotation matrix mapping unit vector source onto target.

    Args:
        source: (3,) unit vector
        target: (3,) unit vector
        tolerances: Optional tolerance config

    Returns:
        (3, 3) rotation matrix R with R @ source == target
    """
    tolerances = resolve_tolerances(tolerances)
    source = np.asarray(source, dtype=np.float64)
    target = np.asarray(target, dtype=np.float64)

    cos_angle = float(np.dot(source, target))
    axis = np.cross(source, target)
    sin_angle = float(np.linalg.norm(axis))

    if sin_angle <= tolerances.degenerate_tolerance:
        if cos_angle > 0.0:
            return np.eye(3)
        # antiparallel: half turn about any axis orthogonal to source
        x, _ = canonical_basis(axis=source)
        return 2.0 * np.outer(x, x) - np.eye(3)

    angle = np.arctan2(sin_angle, cos_angle)
    return axis_angle_matrix(axis=axis / sin_angle, angle=angle)


@dataclass
class Plane3D:
    """Plane through point with unit normal."""

    point: np.ndarray
    normal: np.ndarray

    def project(self, *, point: np.ndarray) -> np.ndarray:
        """Closest point on the plane."""
        offset = np.dot(point - self.point, self.normal)
        return point - offset * self.normal


@dataclass
class Line3D:
    """Line through source along direction."""

    source: np.ndarray
    direction: np.ndarray

    def closest_point(self, *, point: np.ndarray) -> np.ndarray:
        u = np.dot(point - self.source, self.direction) / np.dot(self.direction, self.direction)
        return self.source + u * self.direction
