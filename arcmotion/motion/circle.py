"""
Circle geometry and arc sampling.

Resolves a circular arc from start, goal and one auxiliary point (center
or interim) and samples poses along it.
"""

import logging
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from scipy.spatial.transform import Rotation, Slerp

from arcmotion.config import (
    CENTER_RADIUS_WARN_TOL,
    COINCIDENT_POINT_TOLERANCE,
    COLLINEAR_TOLERANCE,
)
from arcmotion.protocol.types import AuxiliaryTag, Pose
from arcmotion.utils.errors import InvalidMotionPlanError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class ArcGeometry:
    """
    Circle through the start point.

    ``sweep`` is the angle (rad, > 0) travelled counter-clockwise about
    ``axis``; ``e1`` points from the center to the start and
    ``e2 = axis x e1`` completes the in-plane basis.
    """
    center: NDArray[np.float64]
    radius: float
    axis: NDArray[np.float64]
    sweep: float
    e1: NDArray[np.float64]
    e2: NDArray[np.float64]

    @property
    def length(self) -> float:
        return self.radius * self.sweep

    def point(self, s: float) -> NDArray[np.float64]:
        angle = s * self.sweep
        return self.center + self.radius * (np.cos(angle) * self.e1 + np.sin(angle) * self.e2)

    def tangent(self, s: float) -> NDArray[np.float64]:
        """Derivative of point(s) with respect to s."""
        angle = s * self.sweep
        return self.radius * self.sweep * (-np.sin(angle) * self.e1 + np.cos(angle) * self.e2)


def _signed_angle(a: np.ndarray, b: np.ndarray, axis: np.ndarray) -> float:
    """Counter-clockwise angle from a to b about axis, in [0, 2*pi)."""
    angle = np.arctan2(np.dot(axis, np.cross(a, b)), np.dot(a, b))
    if angle < 0.0:
        angle += 2 * np.pi
    return float(angle)


def _check_distinct(start: np.ndarray, aux: np.ndarray, goal: np.ndarray) -> None:
    pairs = (("start", start, "auxiliary", aux), ("start", start, "goal", goal), ("auxiliary", aux, "goal", goal))
    for name_a, a, name_b, b in pairs:
        if np.linalg.norm(a - b) < COINCIDENT_POINT_TOLERANCE:
            raise InvalidMotionPlanError(
                f"{name_a} and {name_b} points coincide, circle is not defined"
            )


def _basis(start: np.ndarray, center: np.ndarray, axis: np.ndarray) -> tuple[float, np.ndarray, np.ndarray]:
    r_vec = start - center
    radius = float(np.linalg.norm(r_vec))
    if radius < COINCIDENT_POINT_TOLERANCE:
        raise InvalidMotionPlanError(f"Circle radius {radius:.3g} m is too small")
    e1 = r_vec / radius
    e2 = np.cross(axis, e1)
    return radius, e1, e2 / np.linalg.norm(e2)


def circle_from_center(start: np.ndarray, goal: np.ndarray, center: np.ndarray) -> ArcGeometry:
    """
    Arc about a given center.

    The plane is spanned by start and goal as seen from the center, so the
    arc is always the one below 180 degrees. Equal start/goal radii are
    assumed, not enforced.
    """
    _check_distinct(start, center, goal)
    a = start - center
    b = goal - center
    w = np.cross(a, b)
    w_norm = float(np.linalg.norm(w))
    if w_norm <= COLLINEAR_TOLERANCE:
        raise InvalidMotionPlanError(
            "Start, goal and center are collinear, the circle plane is not defined"
        )
    axis = w / w_norm

    radius_diff = abs(np.linalg.norm(a) - np.linalg.norm(b))
    if radius_diff > CENTER_RADIUS_WARN_TOL:
        logger.warning(
            "Start and goal radius about center differ by %.4f m; the arc keeps the start radius",
            radius_diff,
        )

    radius, e1, e2 = _basis(start, center, axis)
    return ArcGeometry(center, radius, axis, _signed_angle(a, b, axis), e1, e2)


def circle_from_interim(start: np.ndarray, goal: np.ndarray, interim: np.ndarray) -> ArcGeometry:
    """
    Arc from start through interim to goal.

    The sweep direction follows the interim point, so arcs above 180
    degrees come out whenever the interim lies on the far side.
    """
    _check_distinct(start, interim, goal)
    t = interim - start
    u = goal - start
    v = goal - interim
    w = np.cross(t, u)
    w_norm = float(np.linalg.norm(w))
    if w_norm <= COLLINEAR_TOLERANCE:
        raise InvalidMotionPlanError(
            "Start, interim and goal are collinear, the circle is not defined"
        )

    center = start + (u * np.dot(t, t) * np.dot(u, v) - t * np.dot(u, u) * np.dot(t, v)) * 0.5 / w_norm**2
    # start -> interim -> goal runs counter-clockwise about w
    axis = w / w_norm
    radius, e1, e2 = _basis(start, center, axis)
    sweep = _signed_angle(start - center, goal - center, axis)
    return ArcGeometry(center, radius, axis, sweep, e1, e2)


def resolve_arc(start: Pose, goal: Pose, aux: Pose, tag: AuxiliaryTag) -> ArcGeometry:
    """Dispatch on the auxiliary tag; degenerate inputs raise InvalidMotionPlanError."""
    if tag is AuxiliaryTag.CENTER:
        return circle_from_center(start.xyz, goal.xyz, aux.xyz)
    if tag is AuxiliaryTag.INTERIM:
        return circle_from_interim(start.xyz, goal.xyz, aux.xyz)
    raise InvalidMotionPlanError(f"Unknown auxiliary point tag: {tag!r}")


class ArcPath:
    """
    Pose along a circular arc for a normalized path parameter s in [0, 1].

    Position follows the arc at constant angular rate in s; orientation is
    interpolated by SLERP between start and goal orientation.
    """

    def __init__(self, geometry: ArcGeometry, start: Pose, goal: Pose):
        self.geometry = geometry
        self.start = start
        self.goal = goal
        key_rots = Rotation.from_quat(np.stack([start.orientation, goal.orientation]))
        self._slerp = Slerp(np.array([0.0, 1.0], dtype=float), key_rots)
        # Constant world-frame rotation vector of the orientation blend
        self._rotvec = (goal.rotation * start.rotation.inv()).as_rotvec()

    @property
    def rotation_angle(self) -> float:
        return float(np.linalg.norm(self._rotvec))

    def path_length(self, equivalent_radius: float) -> float:
        """Length the time law runs over: arc length or rotation angle times lever arm, whichever is longer."""
        return max(self.geometry.length, equivalent_radius * self.rotation_angle)

    def sample(self, s: float) -> Pose:
        s = float(np.clip(s, 0.0, 1.0))
        rot = self._slerp(np.array([s], dtype=float))[0]
        return Pose.from_rotation(self.geometry.point(s), rot)

    def twist(self, s: float, s_dot: float) -> NDArray[np.float64]:
        """Cartesian velocity [vx, vy, vz, wx, wy, wz] for path rate s_dot (1/s)."""
        s = float(np.clip(s, 0.0, 1.0))
        return np.concatenate([self.geometry.tangent(s) * s_dot, self._rotvec * s_dot])
