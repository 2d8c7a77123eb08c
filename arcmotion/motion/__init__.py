from .base import TrajectoryGenerator
from .circ import CircTrajectoryGenerator
from .circle import ArcGeometry, ArcPath, resolve_arc
from .limits import CartesianLimits, JointLimits, LimitsContainer
from .profile import TrapezoidProfile

__all__ = [
    "TrajectoryGenerator",
    "CircTrajectoryGenerator",
    "ArcGeometry",
    "ArcPath",
    "resolve_arc",
    "CartesianLimits",
    "JointLimits",
    "LimitsContainer",
    "TrapezoidProfile",
]
