"""
Type definitions for arcmotion planning requests and responses.

Defines enums and dataclasses used across the public API.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Union

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.spatial.transform import Rotation

from arcmotion.config import DEFAULT_ORIENTATION_TOLERANCE, DEFAULT_POSITION_TOLERANCE


class ErrorCode(IntEnum):
    """Result codes, numbered like the common motion-planning wire enumeration."""
    SUCCESS = 1
    PLANNING_FAILED = -1
    INVALID_MOTION_PLAN = -2
    INVALID_GOAL_CONSTRAINTS = -16
    INVALID_ROBOT_STATE = -17
    INVALID_LINK_NAME = -18


class AuxiliaryTag(str, Enum):
    """Meaning of the auxiliary point of a circular request."""
    CENTER = "center"
    INTERIM = "interim"


@dataclass(frozen=True)
class Pose:
    """
    Cartesian pose: position in meters and a unit quaternion (x, y, z, w).

    The quaternion is normalised on construction.
    """
    position: tuple[float, float, float]
    orientation: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)

    def __post_init__(self):
        pos = np.asarray(self.position, dtype=float).reshape(-1)
        if pos.shape != (3,):
            raise ValueError(f"Pose position needs 3 values, got {pos.size}")
        quat = np.asarray(self.orientation, dtype=float).reshape(-1)
        if quat.shape != (4,):
            raise ValueError(f"Pose orientation needs 4 values, got {quat.size}")
        norm = float(np.linalg.norm(quat))
        if norm < 1e-12 or not np.isfinite(norm):
            raise ValueError("Pose orientation quaternion must be non-zero")
        object.__setattr__(self, "position", tuple(float(x) for x in pos))
        object.__setattr__(self, "orientation", tuple(float(x) for x in quat / norm))

    @property
    def xyz(self) -> NDArray[np.float64]:
        return np.array(self.position, dtype=float)

    @property
    def rotation(self) -> Rotation:
        return Rotation.from_quat(self.orientation)

    @classmethod
    def from_rotation(cls, position: ArrayLike, rotation: Rotation) -> "Pose":
        return cls(tuple(np.asarray(position, dtype=float)), tuple(rotation.as_quat()))

    @classmethod
    def from_matrix(cls, matrix: ArrayLike) -> "Pose":
        """Build from a 4x4 homogeneous transform."""
        T = np.asarray(matrix, dtype=float)
        return cls.from_rotation(T[:3, 3], Rotation.from_matrix(T[:3, :3]))

    def as_matrix(self) -> NDArray[np.float64]:
        T = np.eye(4)
        T[:3, :3] = self.rotation.as_matrix()
        T[:3, 3] = self.xyz
        return T

    def distance_to(self, other: "Pose") -> float:
        return float(np.linalg.norm(self.xyz - other.xyz))

    def angle_to(self, other: "Pose") -> float:
        """Rotation angle (rad) between the two orientations."""
        return float((other.rotation * self.rotation.inv()).magnitude())


@dataclass(frozen=True)
class JointState:
    """Joint positions with optional velocities and accelerations, keyed by joint name."""
    positions: Mapping[str, float]
    velocities: Mapping[str, float] | None = None
    accelerations: Mapping[str, float] | None = None

    def __post_init__(self):
        object.__setattr__(self, "positions", MappingProxyType(dict(self.positions)))
        if self.velocities is not None:
            object.__setattr__(self, "velocities", MappingProxyType(dict(self.velocities)))
        if self.accelerations is not None:
            object.__setattr__(self, "accelerations", MappingProxyType(dict(self.accelerations)))

    @classmethod
    def from_arrays(cls, names: Sequence[str], positions: ArrayLike) -> "JointState":
        values = np.asarray(positions, dtype=float).reshape(-1)
        if len(names) != values.size:
            raise ValueError(f"{len(names)} joint names for {values.size} positions")
        return cls(dict(zip(names, (float(v) for v in values))))

    def ordered(self, names: Sequence[str]) -> NDArray[np.float64]:
        """Positions in the order of names. Raises KeyError for a missing joint."""
        return np.array([self.positions[n] for n in names], dtype=float)


@dataclass(frozen=True)
class AuxiliaryPoint:
    """Center or interim point of a circular motion, as received from the caller."""
    tag: str
    link_name: str
    poses: tuple[Pose, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "poses", tuple(self.poses))

    @property
    def pose(self) -> Pose:
        if len(self.poses) != 1:
            raise ValueError(f"Auxiliary point carries {len(self.poses)} poses, expected 1")
        return self.poses[0]


@dataclass(frozen=True)
class JointGoal:
    """
    Goal given as joint positions.

    Kept as (name, position) pairs so that duplicated names stay visible
    to validation.
    """
    constraints: tuple[tuple[str, float], ...]

    def __post_init__(self):
        object.__setattr__(
            self, "constraints", tuple((str(n), float(p)) for n, p in self.constraints)
        )

    @classmethod
    def from_mapping(cls, positions: Mapping[str, float]) -> "JointGoal":
        return cls(tuple(positions.items()))

    @property
    def joint_names(self) -> list[str]:
        return [n for n, _ in self.constraints]

    def as_state(self) -> JointState:
        return JointState(dict(self.constraints))


@dataclass(frozen=True)
class PoseGoal:
    """Goal given as a Cartesian pose of link_name."""
    pose: Pose
    link_name: str
    position_tolerance: float = DEFAULT_POSITION_TOLERANCE
    orientation_tolerance: float = DEFAULT_ORIENTATION_TOLERANCE


GoalSpec = Union[JointGoal, PoseGoal]


@dataclass(frozen=True)
class TrajectoryRequest:
    """Circular motion request. Scaling factors must lie in (0, 1]."""
    start_state: JointState
    goal: GoalSpec | None
    auxiliary: AuxiliaryPoint | None = None
    velocity_scale: float = 1.0
    acceleration_scale: float = 1.0


@dataclass(frozen=True)
class TrajectoryPoint:
    positions: tuple[float, ...]
    velocities: tuple[float, ...]
    accelerations: tuple[float, ...]
    time_from_start: float


@dataclass(frozen=True)
class JointTrajectory:
    """Time-parameterized joint trajectory, one value per active joint per point."""
    joint_names: tuple[str, ...]
    points: tuple[TrajectoryPoint, ...] = field(default_factory=tuple)

    @property
    def duration(self) -> float:
        return self.points[-1].time_from_start if self.points else 0.0

    def as_arrays(self) -> tuple[NDArray, NDArray, NDArray, NDArray]:
        """Return (times, positions, velocities, accelerations) as numpy arrays."""
        times = np.array([p.time_from_start for p in self.points], dtype=float)
        pos = np.array([p.positions for p in self.points], dtype=float)
        vel = np.array([p.velocities for p in self.points], dtype=float)
        acc = np.array([p.accelerations for p in self.points], dtype=float)
        return times, pos, vel, acc


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one generate() call."""
    success: bool
    error_code: ErrorCode
    trajectory: JointTrajectory | None = None
    message: str = ""

    @classmethod
    def ok(cls, trajectory: JointTrajectory) -> "GenerationResult":
        return cls(True, ErrorCode.SUCCESS, trajectory)

    @classmethod
    def failed(cls, error_code: ErrorCode, message: str = "") -> "GenerationResult":
        return cls(False, error_code, None, message)
