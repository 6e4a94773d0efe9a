"""Error taxonomy for goal constraints.

- GoalPreconditionError: caller misuse (non-unit axis, mismatched inputs,
  query that requires a different constraint kind)
- NumericDegeneracyError: non-finite rotation reached a computation
- UnsupportedGoalOperationError: constraint transition with no defined
  semantics (anything involving two-axis rotation)

Malformed serialized input is not an exception; readers flag the stream.
"""


class IKGoalError(Exception):
    """Base class for all goal constraint errors."""


class GoalPreconditionError(IKGoalError, ValueError):
    """Operation called with input or goal state it does not accept."""


class NumericDegeneracyError(GoalPreconditionError):
    """Non-finite values where a rotation was expected."""


class UnsupportedGoalOperationError(IKGoalError, NotImplementedError):
    """Constraint transition or query that is not supported."""
