"""End-effector goal constraints for inverse kinematics.

An IKGoal constrains the pose of one link relative to another link (or the
world) with independent position and rotation constraint kinds:

    Position: NONE (free), PLANAR (point on a plane), LINEAR (point on a
              line), FIXED (point pinned)
    Rotation: NONE (free), AXIS (a local axis maps to a target direction),
              TWO_AXIS (storage only), FIXED (full orientation pinned)

Only the fields belonging to the active kinds are stored; the others are
None. All mutation goes through the set_*/remove_* methods so the kinds and
their fields never disagree.

The relative transform Trel passed to get_error and the reference transform
passed to get_closest_goal_transform map link-local coordinates into the
destination frame (dest_link, or the world).
"""

import logging
from enum import Enum
from typing import Any

import numpy as np
from pydantic import PrivateAttr
from typing_extensions import Self

from ikgoal.core.config import ToleranceConfig, resolve_tolerances
from ikgoal.core.exceptions import (
    GoalPreconditionError,
    NumericDegeneracyError,
    UnsupportedGoalOperationError,
)
from ikgoal.core.frame_fit import fit_frames
from ikgoal.core.geometry import (
    Line3D,
    Plane3D,
    as_vector3,
    axis_angle_matrix,
    canonical_basis,
    minimal_rotation,
    normalize,
    require_rotation,
    require_unit,
    rotation_matrix_to_vector,
    rotation_vector_to_matrix,
)
from ikgoal.data.arbitrary_types_model import ArbitraryTypesModel
from ikgoal.data.rigid_transform import RigidTransform

logger = logging.getLogger(__name__)

WORLD_LINK = -1


class PositionConstraint(Enum):
    """Position constraint kinds; values are the serialization tokens."""

    NONE = "N"
    PLANAR = "P"
    LINEAR = "L"
    FIXED = "F"

    @property
    def n_error_dims(self) -> int:
        return {"N": 0, "P": 1, "L": 2, "F": 3}[self.value]


class RotationConstraint(Enum):
    """Rotation constraint kinds; values are the serialization tokens."""

    NONE = "N"
    AXIS = "A"
    TWO_AXIS = "T"
    FIXED = "F"

    @property
    def n_error_dims(self) -> int:
        if self is RotationConstraint.TWO_AXIS:
            raise UnsupportedGoalOperationError("Two-axis rotation error is not defined")
        return {"N": 0, "A": 2, "F": 3}[self.value]


def _as_point_array(points: np.ndarray | list, *, name: str) -> np.ndarray:
    """Convert input to an (n, 3) float64 array; an empty input gives (0, 3)."""
    array = np.asarray(points, dtype=np.float64)
    if array.size == 0:
        return array.reshape(0, 3)
    if array.ndim != 2 or array.shape[1] != 3:
        raise GoalPreconditionError(f"{name} must have shape (n, 3), got {array.shape}")
    return array


class IKGoal(ArbitraryTypesModel):
    """Pose constraint on one link of an articulated chain.

    Attributes:
        link: Index of the constrained link
        dest_link: Index of the reference link, or WORLD_LINK

    Constraint state is read through properties:
        position_constraint, local_position, end_position, direction,
        rotation_constraint, local_axis, end_rotation

    `end_rotation` is a rotation vector for FIXED rotation and a unit
    direction (the target of local_axis) for AXIS / TWO_AXIS.
    """

    link: int = 0
    dest_link: int = WORLD_LINK

    _position_constraint: PositionConstraint = PrivateAttr(default=PositionConstraint.NONE)
    _local_position: np.ndarray = PrivateAttr(default_factory=lambda: np.zeros(3))
    _end_position: np.ndarray | None = PrivateAttr(default=None)
    _direction: np.ndarray | None = PrivateAttr(default=None)
    _rotation_constraint: RotationConstraint = PrivateAttr(default=RotationConstraint.NONE)
    _local_axis: np.ndarray | None = PrivateAttr(default=None)
    _end_rotation: np.ndarray | None = PrivateAttr(default=None)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def position_constraint(self) -> PositionConstraint:
        return self._position_constraint

    @property
    def rotation_constraint(self) -> RotationConstraint:
        return self._rotation_constraint

    @property
    def local_position(self) -> np.ndarray:
        return self._local_position.copy()

    @property
    def end_position(self) -> np.ndarray | None:
        return None if self._end_position is None else self._end_position.copy()

    @property
    def direction(self) -> np.ndarray | None:
        return None if self._direction is None else self._direction.copy()

    @property
    def local_axis(self) -> np.ndarray | None:
        return None if self._local_axis is None else self._local_axis.copy()

    @property
    def end_rotation(self) -> np.ndarray | None:
        return None if self._end_rotation is None else self._end_rotation.copy()

    @property
    def error_dims(self) -> tuple[int, int]:
        """Number of (position, rotation) components returned by get_error."""
        return self._position_constraint.n_error_dims, self._rotation_constraint.n_error_dims

    # ------------------------------------------------------------------
    # Position setters
    # ------------------------------------------------------------------

    def _update_local_position(self, local_position: np.ndarray | None) -> None:
        if local_position is not None:
            self._local_position = as_vector3(local_position, name="local_position")

    def set_fixed_position(
        self,
        *,
        point: np.ndarray,
        local_position: np.ndarray | None = None
    ) -> None:
        """Pin the local point to a point of the reference frame.

        Args:
            point: (3,) target point in the reference frame
            local_position: Optional (3,) constrained point in the link frame
                (keeps the current one when omitted)
        """
        end_position = as_vector3(point, name="point")
        self._update_local_position(local_position)
        self._position_constraint = PositionConstraint.FIXED
        self._end_position = end_position
        self._direction = None

    def set_linear_position(
        self,
        *,
        point: np.ndarray,
        direction: np.ndarray,
        local_position: np.ndarray | None = None,
        tolerances: ToleranceConfig | None = None
    ) -> None:
        """Constrain the local point to the line through point along direction.

        The direction is normalized.
        """
        end_position = as_vector3(point, name="point")
        direction = normalize(direction, name="direction", tolerances=tolerances)
        self._update_local_position(local_position)
        self._position_constraint = PositionConstraint.LINEAR
        self._end_position = end_position
        self._direction = direction

    def set_planar_position(
        self,
        *,
        point: np.ndarray,
        normal: np.ndarray,
        local_position: np.ndarray | None = None,
        tolerances: ToleranceConfig | None = None
    ) -> None:
        """Constrain the local point to the plane through point with normal.

        The normal is normalized.
        """
        end_position = as_vector3(point, name="point")
        normal = normalize(normal, name="normal", tolerances=tolerances)
        self._update_local_position(local_position)
        self._position_constraint = PositionConstraint.PLANAR
        self._end_position = end_position
        self._direction = normal

    def set_free_position(self) -> None:
        self._position_constraint = PositionConstraint.NONE
        self._end_position = None
        self._direction = None

    # ------------------------------------------------------------------
    # Rotation setters
    # ------------------------------------------------------------------

    def set_fixed_rotation(
        self,
        *,
        rotation: np.ndarray,
        tolerances: ToleranceConfig | None = None
    ) -> None:
        """Pin the full orientation.

        Args:
            rotation: (3, 3) rotation matrix of the link in the reference frame
            tolerances: Optional tolerance config

        Raises:
            GoalPreconditionError: If rotation is not a proper rotation matrix
        """
        rotation = require_rotation(rotation, name="rotation", tolerances=tolerances)
        end_rotation = rotation_matrix_to_vector(rotation)
        self._rotation_constraint = RotationConstraint.FIXED
        self._end_rotation = end_rotation
        self._local_axis = None

    def set_axis_rotation(
        self,
        *,
        local_axis: np.ndarray,
        world_axis: np.ndarray,
        tolerances: ToleranceConfig | None = None
    ) -> None:
        """Require local_axis to map onto world_axis; rotation about it stays free.

        Raises:
            GoalPreconditionError: If either axis is not unit length
        """
        local_axis = require_unit(local_axis, name="local_axis", tolerances=tolerances)
        world_axis = require_unit(world_axis, name="world_axis", tolerances=tolerances)
        self._rotation_constraint = RotationConstraint.AXIS
        self._local_axis = local_axis
        self._end_rotation = world_axis

    def set_free_rotation(self) -> None:
        self._rotation_constraint = RotationConstraint.NONE
        self._local_axis = None
        self._end_rotation = None

    def set_fixed_transform(
        self,
        *,
        transform: RigidTransform,
        tolerances: ToleranceConfig | None = None
    ) -> None:
        """Pin the link frame origin and orientation to a transform."""
        rotation = require_rotation(transform.rotation, name="transform.rotation", tolerances=tolerances)
        self.set_fixed_position(point=transform.translation, local_position=np.zeros(3))
        self.set_fixed_rotation(rotation=rotation, tolerances=tolerances)

    # ------------------------------------------------------------------
    # Fitting
    # ------------------------------------------------------------------

    def set_from_points(
        self,
        *,
        local_points: np.ndarray | list,
        world_points: np.ndarray | list,
        tolerance: float | None = None,
        tolerances: ToleranceConfig | None = None
    ) -> None:
        """Fit the tightest constraint supported by point correspondences.

        0 points: free. 1 point: fixed position, free rotation. 2 points:
        fixed midpoint plus an axis constraint along the pair (free rotation
        if either pair coincides). 3+ points: rigid-frame fit, relaxed to
        an axis or point constraint when the clouds are too thin.

        Args:
            local_points: (n, 3) points in the link frame
            world_points: (n, 3) matching points in the reference frame
            tolerance: Coincidence / spread tolerance (defaults to fit_tolerance)
            tolerances: Optional tolerance config

        Raises:
            GoalPreconditionError: If the point lists are not (n, 3) or differ in length
        """
        tolerances = resolve_tolerances(tolerances)
        tolerance = tolerances.fit_tolerance if tolerance is None else tolerance

        local_points = _as_point_array(local_points, name="local_points")
        world_points = _as_point_array(world_points, name="world_points")
        if len(local_points) != len(world_points):
            raise GoalPreconditionError(
                f"Point lists differ in length: {len(local_points)} != {len(world_points)}"
            )

        n_points = len(local_points)
        if n_points == 0:
            self.set_free_position()
            self.set_free_rotation()
        elif n_points == 1:
            self._local_position = local_points[0].copy()
            self.set_fixed_position(point=world_points[0])
            self.set_free_rotation()
        elif n_points == 2:
            self._local_position = 0.5 * (local_points[0] + local_points[1])
            self.set_fixed_position(point=0.5 * (world_points[0] + world_points[1]))
            local_delta = local_points[1] - local_points[0]
            world_delta = world_points[1] - world_points[0]
            if np.all(np.abs(local_delta) <= tolerance) or np.all(np.abs(world_delta) <= tolerance):
                self.set_free_rotation()
            else:
                self.set_axis_rotation(
                    local_axis=normalize(local_delta, tolerances=tolerances),
                    world_axis=normalize(world_delta, tolerances=tolerances),
                    tolerances=tolerances,
                )
        else:
            self._set_from_frame_fit(
                local_points=local_points,
                world_points=world_points,
                tolerance=tolerance,
                tolerances=tolerances,
            )

        logger.debug(
            f"Goal for link {self.link} fitted from {n_points} points: "
            f"{self._position_constraint.name}/{self._rotation_constraint.name}"
        )

    def _set_from_frame_fit(
        self,
        *,
        local_points: np.ndarray,
        world_points: np.ndarray,
        tolerance: float,
        tolerances: ToleranceConfig
    ) -> None:
        fit = fit_frames(local_points=local_points, world_points=world_points, tolerances=tolerances)
        if fit.is_degenerate:
            logger.warning(
                f"Degenerate frame fit for link {self.link} over {len(local_points)} points, "
                f"goal left unconstrained"
            )
            self.set_free_position()
            self.set_free_rotation()
            return

        self._local_position = fit.local_centroid
        self.set_fixed_position(point=fit.world_centroid)
        self.set_fixed_rotation(rotation=fit.rotation)

        # Spreads are sorted widest first; test the thinnest direction first.
        if abs(fit.spread[2]) >= tolerance:
            return
        if abs(fit.spread[1]) >= tolerance:
            # planar but non-collinear clouds still determine the full rotation
            logger.debug(f"Planar correspondences for link {self.link}, rotation stays fixed")
            return
        if abs(fit.spread[0]) < tolerance:
            # all points coincide: only the point itself is known
            self.set_free_rotation()
            return

        # collinear: only the line direction is known
        local_axis = fit.local_axes[0]
        world_axis = fit.rotation @ local_axis
        self.set_axis_rotation(
            local_axis=local_axis / np.linalg.norm(local_axis),
            world_axis=world_axis / np.linalg.norm(world_axis),
            tolerances=tolerances,
        )

    # ------------------------------------------------------------------
    # Transform queries
    # ------------------------------------------------------------------

    def _require_rotation(self, kind: RotationConstraint) -> None:
        if self._rotation_constraint is not kind:
            raise GoalPreconditionError(
                f"Requires {kind.name} rotation constraint, goal has {self._rotation_constraint.name}"
            )

    def _require_position(self, kind: PositionConstraint) -> None:
        if self._position_constraint is not kind:
            raise GoalPreconditionError(
                f"Requires {kind.name} position constraint, goal has {self._position_constraint.name}"
            )

    def get_fixed_goal_rotation(self) -> np.ndarray:
        """Target orientation as a 3x3 matrix (FIXED rotation only)."""
        self._require_rotation(RotationConstraint.FIXED)
        return rotation_vector_to_matrix(self._end_rotation)

    def get_fixed_goal_transform(self) -> RigidTransform:
        """The unique transform T with T(local_position) == end_position.

        Requires FIXED position and FIXED rotation.
        """
        self._require_position(PositionConstraint.FIXED)
        rotation = self.get_fixed_goal_rotation()
        return RigidTransform(
            rotation=rotation,
            translation=self._end_position - rotation @ self._local_position,
        )

    def get_base_edge_rotation(self) -> np.ndarray:
        """Minimal rotation taking local_axis onto the target axis (AXIS only)."""
        self._require_rotation(RotationConstraint.AXIS)
        return minimal_rotation(source=self._local_axis, target=self._end_rotation)

    def get_edge_goal_transform(self, *, theta: float) -> RigidTransform:
        """Member of the one-parameter family of goal transforms of an AXIS goal.

        Args:
            theta: Rotation angle about local_axis in radians

        Returns:
            Transform whose rotation is base_edge_rotation @ Rot(local_axis, theta)
        """
        if self._position_constraint is PositionConstraint.NONE:
            raise GoalPreconditionError("Edge goal transform requires a position constraint")
        base_rotation = self.get_base_edge_rotation()
        rotation = base_rotation @ axis_angle_matrix(axis=self._local_axis, angle=theta)
        return RigidTransform(
            rotation=rotation,
            translation=self._end_position - rotation @ self._local_position,
        )

    def get_closest_goal_transform(self, *, reference: RigidTransform) -> RigidTransform:
        """Project a reference transform onto the set of transforms meeting the goal.

        Rotation is fixed first (exact target, closest rotation about the
        target axis, or the reference rotation), then the position is
        projected onto the point, line or plane nearest the reference
        translation. The projection is idempotent.

        Args:
            reference: Candidate transform (link frame -> destination frame)

        Returns:
            Closest transform satisfying the goal
        """
        if self._rotation_constraint is RotationConstraint.FIXED:
            rotation = self.get_fixed_goal_rotation()
        elif self._rotation_constraint is RotationConstraint.AXIS:
            rotation = self._closest_axis_rotation(reference_rotation=reference.rotation)
        elif self._rotation_constraint is RotationConstraint.NONE:
            rotation = reference.rotation.copy()
        else:
            raise UnsupportedGoalOperationError(
                "Closest goal transform is not defined for two-axis rotation constraints"
            )

        if self._position_constraint is PositionConstraint.NONE:
            return RigidTransform(rotation=rotation, translation=reference.translation)

        translation = self._end_position - rotation @ self._local_position
        if self._position_constraint is PositionConstraint.PLANAR:
            plane = Plane3D(point=translation, normal=self._direction)
            translation = plane.project(point=reference.translation)
        elif self._position_constraint is PositionConstraint.LINEAR:
            line = Line3D(source=translation, direction=self._direction)
            translation = line.closest_point(point=reference.translation)

        return RigidTransform(rotation=rotation, translation=translation)

    def _closest_axis_rotation(self, *, reference_rotation: np.ndarray) -> np.ndarray:
        target_axis = self._end_rotation
        rotation = minimal_rotation(source=self._local_axis, target=target_axis)

        # spin about the target axis so the orthogonal directions follow the reference
        local_x, local_y = canonical_basis(axis=self._local_axis)
        rotated_x = rotation @ local_x
        rotated_y = rotation @ local_y
        reference_x = reference_rotation @ local_x
        theta = np.arctan2(np.dot(reference_x, rotated_y), np.dot(reference_x, rotated_x))
        return axis_angle_matrix(axis=target_axis, angle=theta) @ rotation

    # ------------------------------------------------------------------
    # Rebasing and relaxation
    # ------------------------------------------------------------------

    def transform(self, *, transform: RigidTransform) -> None:
        """Re-express the reference-frame quantities after a change of frame.

        Args:
            transform: Rigid transform applied to the destination frame

        Raises:
            NumericDegeneracyError: If a rebased value is non-finite (the goal is left unchanged)
        """
        end_position = self._end_position
        direction = self._direction
        end_rotation = self._end_rotation

        if end_position is not None:
            end_position = transform.apply(point=end_position)
        if direction is not None:
            direction = transform.rotation @ direction
        if self._rotation_constraint is RotationConstraint.FIXED:
            rotation = transform.rotation @ rotation_vector_to_matrix(end_rotation)
            end_rotation = rotation_matrix_to_vector(rotation)
        elif self._rotation_constraint in (RotationConstraint.AXIS, RotationConstraint.TWO_AXIS):
            end_rotation = transform.rotation @ end_rotation

        for name, value in (("end_position", end_position), ("direction", direction), ("end_rotation", end_rotation)):
            if value is not None and not np.all(np.isfinite(value)):
                raise NumericDegeneracyError(f"Rebased {name} has non-finite entries")

        # commit only once every rebased value is valid
        self._end_position = end_position
        self._direction = direction
        self._end_rotation = end_rotation

    def remove_rotation_axis(
        self,
        *,
        axis: np.ndarray,
        point: np.ndarray | None = None,
        tolerances: ToleranceConfig | None = None
    ) -> None:
        """Free rotation about a reference-frame axis (FIXED -> AXIS).

        With a point, the goal pivots about the axis through that point: the
        position constraint is re-anchored there (requires FIXED position).

        Args:
            axis: (3,) unit axis in the reference frame
            point: Optional (3,) pivot point in the reference frame
            tolerances: Optional tolerance config

        Raises:
            UnsupportedGoalOperationError: From AXIS or TWO_AXIS rotation
            GoalPreconditionError: If axis is not unit length
        """
        kind = self._rotation_constraint
        if kind is RotationConstraint.NONE:
            return
        if kind is RotationConstraint.AXIS:
            raise UnsupportedGoalOperationError("Relaxing an axis rotation to two-axis is not supported")
        if kind is RotationConstraint.TWO_AXIS:
            raise UnsupportedGoalOperationError("Relaxing a two-axis rotation is not supported")

        axis = require_unit(axis, name="axis", tolerances=tolerances)
        if point is None:
            rotation = self.get_fixed_goal_rotation()
            self.set_axis_rotation(local_axis=rotation.T @ axis, world_axis=axis, tolerances=tolerances)
        else:
            point = as_vector3(point, name="point")
            goal_transform = self.get_fixed_goal_transform()
            local_position = goal_transform.apply_inverse(point=point)
            self.set_axis_rotation(
                local_axis=goal_transform.rotation.T @ axis,
                world_axis=axis,
                tolerances=tolerances,
            )
            self._local_position = local_position
            self._end_position = point

        logger.debug(f"Goal for link {self.link}: rotation relaxed to AXIS about {axis}")

    def remove_position_axis(
        self,
        *,
        direction: np.ndarray,
        tolerances: ToleranceConfig | None = None
    ) -> None:
        """Free one more translational degree of freedom along direction.

        FIXED -> LINEAR along direction; LINEAR -> PLANAR when direction is
        not parallel to the line; PLANAR -> NONE when direction leaves the
        plane. Otherwise the goal is unchanged.
        """
        tolerances = resolve_tolerances(tolerances)
        direction = normalize(direction, name="direction", tolerances=tolerances)
        previous = self._position_constraint

        if previous is PositionConstraint.FIXED:
            self._direction = direction
            self._position_constraint = PositionConstraint.LINEAR
        elif previous is PositionConstraint.LINEAR:
            normal = np.cross(self._direction, direction)
            norm = np.linalg.norm(normal)
            if norm > tolerances.zero_tolerance:
                self._direction = normal / norm
                self._position_constraint = PositionConstraint.PLANAR
        elif previous is PositionConstraint.PLANAR:
            if abs(np.dot(self._direction, direction)) > tolerances.zero_tolerance:
                self.set_free_position()

        if self._position_constraint is not previous:
            logger.debug(
                f"Goal for link {self.link}: position relaxed "
                f"{previous.name} -> {self._position_constraint.name}"
            )

    # ------------------------------------------------------------------
    # Error evaluation
    # ------------------------------------------------------------------

    def get_error(self, *, relative_transform: RigidTransform) -> tuple[np.ndarray, np.ndarray]:
        """Signed position and orientation error for the current pose.

        Args:
            relative_transform: Current transform from the link frame to the
                destination frame

        Returns:
            Tuple (position_error, rotation_error) with 0-3 components each,
            sized per error_dims
        """
        position_error = self._position_error(relative_transform=relative_transform)
        rotation_error = self._rotation_error(rotation=relative_transform.rotation)
        return position_error, rotation_error

    def _position_error(self, *, relative_transform: RigidTransform) -> np.ndarray:
        kind = self._position_constraint
        if kind is PositionConstraint.NONE:
            return np.zeros(0)

        error = relative_transform.apply(point=self._local_position) - self._end_position
        if kind is PositionConstraint.FIXED:
            return error
        if kind is PositionConstraint.LINEAR:
            x_basis, y_basis = canonical_basis(axis=self._direction)
            return np.array([np.dot(error, x_basis), np.dot(error, y_basis)])
        if kind is PositionConstraint.PLANAR:
            return np.array([np.dot(error, self._direction)])
        raise UnsupportedGoalOperationError(f"Unknown position constraint {kind}")

    def _rotation_error(self, *, rotation: np.ndarray) -> np.ndarray:
        kind = self._rotation_constraint
        if kind is RotationConstraint.NONE:
            return np.zeros(0)
        if kind is RotationConstraint.FIXED:
            return rotation_matrix_to_vector(rotation @ self.get_fixed_goal_rotation().T)
        if kind is RotationConstraint.AXIS:
            x_basis, y_basis = canonical_basis(axis=self._end_rotation)
            current_axis = rotation @ self._local_axis
            return np.array([np.dot(current_axis, x_basis), np.dot(current_axis, y_basis)])
        raise UnsupportedGoalOperationError(f"Rotation error is not defined for {kind.name} constraints")

    # ------------------------------------------------------------------
    # Comparison and dictionary form
    # ------------------------------------------------------------------

    def _active_field_pairs(self, other: "IKGoal") -> list[tuple[np.ndarray, np.ndarray]] | None:
        """Pairs of active fields to compare, or None if ids or constraint kinds differ."""
        if (self.link, self.dest_link) != (other.link, other.dest_link):
            return None
        if self._position_constraint is not other._position_constraint:
            return None
        if self._rotation_constraint is not other._rotation_constraint:
            return None

        pairs = []
        if self._position_constraint is not PositionConstraint.NONE:
            pairs += [(self._local_position, other._local_position), (self._end_position, other._end_position)]
        if self._position_constraint in (PositionConstraint.LINEAR, PositionConstraint.PLANAR):
            pairs.append((self._direction, other._direction))
        if self._rotation_constraint is not RotationConstraint.NONE:
            pairs.append((self._end_rotation, other._end_rotation))
        if self._rotation_constraint in (RotationConstraint.AXIS, RotationConstraint.TWO_AXIS):
            pairs.append((self._local_axis, other._local_axis))
        return pairs

    def is_close(self, *, other: "IKGoal", atol: float = 1e-8) -> bool:
        """Compare ids, constraint kinds and active fields within atol."""
        pairs = self._active_field_pairs(other)
        return pairs is not None and all(np.allclose(a, b, atol=atol) for a, b in pairs)

    def __eq__(self, other: object) -> bool:
        """Exact equality of ids, constraint kinds and active fields.

        Inactive fields are ignored, so a goal equals its serialized round trip.
        """
        if not isinstance(other, IKGoal):
            return NotImplemented
        pairs = self._active_field_pairs(other)
        return pairs is not None and all(np.array_equal(a, b) for a, b in pairs)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary (active fields only)."""
        position: dict[str, Any] = {"constraint": self._position_constraint.value}
        if self._position_constraint is not PositionConstraint.NONE:
            position["local_position"] = self._local_position.tolist()
            position["end_position"] = self._end_position.tolist()
        if self._direction is not None:
            position["direction"] = self._direction.tolist()

        rotation: dict[str, Any] = {"constraint": self._rotation_constraint.value}
        if self._local_axis is not None:
            rotation["local_axis"] = self._local_axis.tolist()
        if self._end_rotation is not None:
            rotation["end_rotation"] = self._end_rotation.tolist()

        return {
            "link": self.link,
            "dest_link": self.dest_link,
            "position": position,
            "rotation": rotation,
        }

    @classmethod
    def from_dict(cls, *, data: dict[str, Any]) -> Self:
        """Create goal from dictionary form.

        Field values are restored as stored, without renormalization.

        Raises:
            GoalPreconditionError: On unknown constraint tokens or missing fields
        """
        try:
            link = int(data["link"])
            dest_link = int(data["dest_link"])
        except KeyError as e:
            raise GoalPreconditionError(f"Missing field {e} in goal data") from e
        except (TypeError, ValueError) as e:
            raise GoalPreconditionError(f"Link ids must be integers: {e}") from e

        goal = cls(link=link, dest_link=dest_link)
        position = data.get("position", {"constraint": "N"})
        rotation = data.get("rotation", {"constraint": "N"})

        try:
            position_kind = PositionConstraint(position["constraint"])
            rotation_kind = RotationConstraint(rotation["constraint"])
        except KeyError as e:
            raise GoalPreconditionError(f"Missing field {e} in goal data") from e
        except ValueError as e:
            raise GoalPreconditionError(f"Unknown constraint token: {e}") from e

        def vector_field(section: dict[str, Any], name: str) -> np.ndarray:
            if name not in section:
                raise GoalPreconditionError(f"Missing field '{name}' for constraint {section['constraint']}")
            return as_vector3(section[name], name=name)

        goal._position_constraint = position_kind
        if position_kind is not PositionConstraint.NONE:
            goal._local_position = vector_field(position, "local_position")
            goal._end_position = vector_field(position, "end_position")
        if position_kind in (PositionConstraint.LINEAR, PositionConstraint.PLANAR):
            goal._direction = vector_field(position, "direction")

        goal._rotation_constraint = rotation_kind
        if rotation_kind is not RotationConstraint.NONE:
            goal._end_rotation = vector_field(rotation, "end_rotation")
        if rotation_kind in (RotationConstraint.AXIS, RotationConstraint.TWO_AXIS):
            goal._local_axis = vector_field(rotation, "local_axis")

        return goal

    def __str__(self) -> str:
        return (
            f"IKGoal(link={self.link}, dest_link={self.dest_link}, "
            f"position={self._position_constraint.name}, rotation={self._rotation_constraint.name})"
        )
