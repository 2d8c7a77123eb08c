"""
Custom exception types for the arcmotion planning pipeline.

Configuration problems surface as InvalidLimitsError when a generator is
built. Everything request-dependent derives from MotionPlanningError and
carries the ErrorCode that the generator reports back to its caller.
"""

from arcmotion.protocol.types import ErrorCode


class InvalidLimitsError(ValueError):
    """Limits configuration is missing or inconsistent."""

    def __init__(self, message: str):
        self.original_message = message
        super().__init__(f"Invalid Limits: {message}")

    def __str__(self):
        return f"Invalid Limits: {self.original_message}"


class MotionPlanningError(RuntimeError):
    """Per-request planning failure."""

    error_code: ErrorCode = ErrorCode.PLANNING_FAILED
    prefix: str = "Motion Planning Error"

    def __init__(self, message: str):
        self.original_message = message
        super().__init__(f"{self.prefix}: {message}")

    def __str__(self):
        return f"{self.prefix}: {self.original_message}"


class InvalidRobotStateError(MotionPlanningError):
    """Start state is incomplete, out of limits or not at rest."""

    error_code = ErrorCode.INVALID_ROBOT_STATE
    prefix = "Invalid Robot State"


class InvalidGoalConstraintsError(MotionPlanningError):
    """Goal does not match the active joint set or violates joint limits."""

    error_code = ErrorCode.INVALID_GOAL_CONSTRAINTS
    prefix = "Invalid Goal Constraints"


class InvalidLinkNameError(MotionPlanningError):
    """Auxiliary or goal link is unknown or inconsistent."""

    error_code = ErrorCode.INVALID_LINK_NAME
    prefix = "Invalid Link Name"


class InvalidMotionPlanError(MotionPlanningError):
    """Request cannot describe a valid circular motion."""

    error_code = ErrorCode.INVALID_MOTION_PLAN
    prefix = "Invalid Motion Plan"


class IKError(InvalidMotionPlanError):
    """Inverse kinematics failure (no solution, constraints violated, etc.)."""

    prefix = "IK ERROR"


class PlanningFailedError(MotionPlanningError):
    """Geometry is fine but the dynamics cannot be achieved within limits."""

    error_code = ErrorCode.PLANNING_FAILED
    prefix = "Trajectory Planning Error"
