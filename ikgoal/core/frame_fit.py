"""Least-squares rigid-frame fit between corresponding point sets.

Finds the rotation R and the centroids such that
    R @ (local_i - local_centroid) ~= world_i - world_centroid
in the least-squares sense (Kabsch / SVD of the cross-covariance), and
reports how well-conditioned each point cloud is along its principal axes.
"""

import logging

import numpy as np
from pydantic import model_validator
from typing_extensions import Self

from ikgoal.core.config import ToleranceConfig, resolve_tolerances
from ikgoal.core.exceptions import GoalPreconditionError
from ikgoal.data.arbitrary_types_model import ArbitraryTypesModel

logger = logging.getLogger(__name__)


class FrameFit(ArbitraryTypesModel):
    """Result of a rigid-frame fit.

    Attributes:
        rotation: (3, 3) rotation taking local directions to world directions
        local_centroid: (3,) centroid of the local points
        world_centroid: (3,) centroid of the world points
        local_axes: (3, 3) principal axes of the local cloud as rows, widest first
        spread: (3,) RMS extent along the principal axes, largest first. The
            element-wise minimum over the local and world clouds, so a
            component is small when either cloud is flat along that axis.
        residual: RMS alignment error, inf when the fit is degenerate
    """

    rotation: np.ndarray
    local_centroid: np.ndarray
    world_centroid: np.ndarray
    local_axes: np.ndarray
    spread: np.ndarray
    residual: float

    @model_validator(mode='after')
    def validate_shapes(self) -> Self:
        """Validate array shapes."""
        if self.rotation.shape != (3, 3) or self.local_axes.shape != (3, 3):
            raise ValueError("Rotation and local_axes must be 3x3")
        if self.spread.shape != (3,):
            raise ValueError(f"Spread must have shape (3,), got {self.spread.shape}")
        return self

    @property
    def is_degenerate(self) -> bool:
        return not np.isfinite(self.residual)


def _principal_axes(*, centered: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Principal axes (rows) and RMS spreads of a centered cloud, widest first."""
    _, singular_values, vt = np.linalg.svd(centered, full_matrices=True)
    spreads = np.zeros(3)
    spreads[:len(singular_values)] = singular_values / np.sqrt(len(centered))
    return vt, spreads


def fit_frames(
    *,
    local_points: np.ndarray,
    world_points: np.ndarray,
    tolerances: ToleranceConfig | None = None
) -> FrameFit:
    """Fit the rigid transform aligning local points to world points.

    The fit is degenerate (residual = inf) when the inputs are non-finite or
    when either cloud is collinear or collapsed to a point, i.e. its second
    principal spread does not exceed the degenerate tolerance. Near-degenerate
    clouds still fit; callers inspect `spread` against their own tolerance.

    Args:
        local_points: (n, 3) points in the link frame
        world_points: (n, 3) corresponding points in the reference frame
        tolerances: Optional tolerance config

    Returns:
        FrameFit result

    Raises:
        GoalPreconditionError: If shapes differ or are not (n, 3) with n >= 1
    """
    tolerances = resolve_tolerances(tolerances)
    local_points = np.asarray(local_points, dtype=np.float64)
    world_points = np.asarray(world_points, dtype=np.float64)

    if local_points.shape != world_points.shape:
        raise GoalPreconditionError(
            f"Point sets differ in shape: {local_points.shape} != {world_points.shape}"
        )
    if local_points.ndim != 2 or local_points.shape[1] != 3 or len(local_points) == 0:
        raise GoalPreconditionError(f"Points must be (n, 3) with n >= 1, got {local_points.shape}")

    if not (np.all(np.isfinite(local_points)) and np.all(np.isfinite(world_points))):
        logger.warning("Non-finite correspondence points, frame fit is degenerate")
        return FrameFit(
            rotation=np.eye(3),
            local_centroid=np.zeros(3),
            world_centroid=np.zeros(3),
            local_axes=np.eye(3),
            spread=np.zeros(3),
            residual=float("inf"),
        )

    local_centroid = local_points.mean(axis=0)
    world_centroid = world_points.mean(axis=0)
    local_centered = local_points - local_centroid
    world_centered = world_points - world_centroid

    local_axes, local_spread = _principal_axes(centered=local_centered)
    _, world_spread = _principal_axes(centered=world_centered)
    spread = np.minimum(local_spread, world_spread)

    # Kabsch: rotation maximizing trace(R^T H) with a proper-rotation correction
    cross_covariance = local_centered.T @ world_centered
    u, _, vt = np.linalg.svd(cross_covariance)
    sign = np.sign(np.linalg.det(vt.T @ u.T))
    correction = np.diag([1.0, 1.0, sign if sign != 0.0 else 1.0])
    rotation = vt.T @ correction @ u.T

    if spread[1] <= tolerances.degenerate_tolerance:
        residual = float("inf")
    else:
        errors = local_centered @ rotation.T - world_centered
        residual = float(np.sqrt(np.mean(np.sum(errors**2, axis=1))))

    logger.debug(f"Frame fit over {len(local_points)} points: residual={residual:.3g}, spread={spread}")

    return FrameFit(
        rotation=rotation,
        local_centroid=local_centroid,
        world_centroid=world_centroid,
        local_axes=local_axes,
        spread=spread,
        residual=residual,
    )
