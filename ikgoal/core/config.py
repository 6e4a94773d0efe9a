"""Numerical tolerance configuration for goal constraints.

Every operation that makes a fuzzy comparison accepts an optional
ToleranceConfig; DEFAULT_TOLERANCES is used when none is given.
"""

from dataclasses import dataclass


@dataclass
class ToleranceConfig:
    """Tolerances used by goal constraint operations.

    Attributes:
        unit_norm_tolerance: Allowed |dot(v, v) - 1| for vectors asserted as axes
        zero_tolerance: Fuzzy-zero threshold for dot/cross tests during relaxation
        degenerate_tolerance: Below this norm a direction is treated as zero length
        fit_tolerance: Default spread/coincidence tolerance for fitting from points
        rotation_tolerance: Allowed max |R^T R - I| entry for matrices asserted as rotations
    """

    unit_norm_tolerance: float = 1e-8
    zero_tolerance: float = 1e-8
    degenerate_tolerance: float = 1e-12
    fit_tolerance: float = 1e-6
    rotation_tolerance: float = 1e-6

    def __post_init__(self) -> None:
        for name in (
            "unit_norm_tolerance",
            "zero_tolerance",
            "degenerate_tolerance",
            "fit_tolerance",
            "rotation_tolerance",
        ):
            if getattr(self, name) < 0.0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")


DEFAULT_TOLERANCES = ToleranceConfig()


def resolve_tolerances(tolerances: ToleranceConfig | None) -> ToleranceConfig:
    return DEFAULT_TOLERANCES if tolerances is None else tolerances
