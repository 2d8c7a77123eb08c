"""
arcmotion Python Package

Circular-arc trajectory generation for articulated manipulators: resolves
an arc from start, goal and a center or interim point, time-parameterizes
it under velocity/acceleration limits and converts it to a joint trajectory
through a pluggable kinematics collaborator.

Key components:
- CircTrajectoryGenerator: generate(request) -> GenerationResult
- LimitsContainer / JointLimits / CartesianLimits: immutable limits model
- TrajectoryRequest, JointGoal, PoseGoal, AuxiliaryPoint: request types
- RoboticsToolboxKinematics: kinematics backed by a roboticstoolbox model
"""

from ._version import __version__
from .motion.circ import CircTrajectoryGenerator
from .motion.limits import CartesianLimits, JointLimits, LimitsContainer
from .protocol.types import (
    AuxiliaryPoint,
    AuxiliaryTag,
    ErrorCode,
    GenerationResult,
    JointGoal,
    JointState,
    JointTrajectory,
    Pose,
    PoseGoal,
    TrajectoryPoint,
    TrajectoryRequest,
)
from .utils.errors import InvalidLimitsError
from .utils.ik import IKResult, Kinematics, RoboticsToolboxKinematics

__all__ = [
    "__version__",
    "CircTrajectoryGenerator",
    "CartesianLimits",
    "JointLimits",
    "LimitsContainer",
    "AuxiliaryPoint",
    "AuxiliaryTag",
    "ErrorCode",
    "GenerationResult",
    "JointGoal",
    "JointState",
    "JointTrajectory",
    "Pose",
    "PoseGoal",
    "TrajectoryPoint",
    "TrajectoryRequest",
    "InvalidLimitsError",
    "IKResult",
    "Kinematics",
    "RoboticsToolboxKinematics",
]
