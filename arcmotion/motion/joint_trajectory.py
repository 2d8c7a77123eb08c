"""
Joint trajectory construction from a sampled Cartesian arc.
"""

import logging

import numpy as np

from arcmotion.config import LIMIT_CHECK_TOLERANCE, TRACE, TRACE_ENABLED
from arcmotion.motion.circle import ArcPath
from arcmotion.motion.limits import LimitsContainer
from arcmotion.motion.profile import TrapezoidProfile
from arcmotion.protocol.types import JointTrajectory, Pose, TrajectoryPoint
from arcmotion.utils.errors import IKError, InvalidMotionPlanError, PlanningFailedError
from arcmotion.utils.ik import Kinematics

logger = logging.getLogger(__name__)


def build_joint_trajectory(
    path: ArcPath,
    profile: TrapezoidProfile,
    kinematics: Kinematics,
    link_name: str,
    start_q: np.ndarray,
    dt: float,
) -> JointTrajectory:
    """
    Sample the arc at the profile's time steps and convert every sample to
    joint space.

    Positions come from IK seeded with the previous sample, velocities from
    the Jacobian pseudo-inverse applied to the Cartesian twist, and
    accelerations from backward differences of the velocities. The first
    waypoint is the start state; first and last waypoints are at rest.
    """
    times = profile.sample_times(dt)
    length = profile.distance
    n_joints = len(start_q)

    positions = np.zeros((len(times), n_joints))
    velocities = np.zeros((len(times), n_joints))
    positions[0] = start_q

    seed = np.asarray(start_q, dtype=float)
    for i in range(1, len(times)):
        t = float(times[i])
        s = profile.position(t) / length
        s_dot = profile.velocity(t) / length
        pose = path.sample(s)

        ik = kinematics.inverse_kinematics(pose, link_name, seed)
        if not ik.success or ik.q is None:
            detail = ik.violations or "no solution"
            raise IKError(f"No IK solution at t={t:.3f}s (s={s:.4f}): {detail}")
        q = np.asarray(ik.q, dtype=float)
        positions[i] = q

        if s_dot > 0.0:
            J = kinematics.jacobian(q, link_name)
            velocities[i] = np.linalg.pinv(J) @ path.twist(s, s_dot)
        if TRACE_ENABLED:
            logger.log(TRACE, "sample t=%.3f s=%.4f q=%s", t, s, np.round(q, 5))
        seed = q

    velocities[-1] = 0.0
    accelerations = np.zeros_like(velocities)
    steps = np.diff(times)
    accelerations[1:] = np.diff(velocities, axis=0) / steps[:, None]
    accelerations[-1] = 0.0

    points = tuple(
        TrajectoryPoint(
            positions=tuple(float(x) for x in positions[i]),
            velocities=tuple(float(x) for x in velocities[i]),
            accelerations=tuple(float(x) for x in accelerations[i]),
            time_from_start=float(times[i]),
        )
        for i in range(len(times))
    )
    return JointTrajectory(tuple(kinematics.joint_names), points)


def check_joint_limits(
    trajectory: JointTrajectory,
    limits: LimitsContainer,
    slack: float = LIMIT_CHECK_TOLERANCE,
) -> None:
    """Raise PlanningFailedError when any waypoint exceeds a joint's velocity or acceleration limit."""
    _, _, vel, acc = trajectory.as_arrays()
    for j, name in enumerate(trajectory.joint_names):
        jl = limits.joint(name)
        if jl is None:
            continue
        for i in range(1, len(vel)):
            if not jl.verify_velocity(vel[i, j], slack):
                raise PlanningFailedError(
                    f"Joint '{name}' velocity {vel[i, j]:.4f} exceeds {jl.max_velocity} "
                    f"at t={trajectory.points[i].time_from_start:.3f}s"
                )
            speeding_up = abs(vel[i, j]) > abs(vel[i - 1, j])
            if not jl.verify_acceleration(acc[i, j], speeding_up, slack):
                bound = jl.max_acceleration if speeding_up else jl.max_deceleration
                raise PlanningFailedError(
                    f"Joint '{name}' acceleration {acc[i, j]:.4f} exceeds {bound} "
                    f"at t={trajectory.points[i].time_from_start:.3f}s"
                )


def check_goal_reached(
    trajectory: JointTrajectory,
    kinematics: Kinematics,
    link_name: str,
    goal: Pose,
    position_tolerance: float,
    orientation_tolerance: float,
) -> None:
    """Raise InvalidMotionPlanError when the last waypoint does not land on the goal pose."""
    reached = kinematics.forward_kinematics(trajectory.points[-1].positions, link_name)
    dist = reached.distance_to(goal)
    angle = reached.angle_to(goal)
    if dist > position_tolerance or angle > orientation_tolerance:
        raise InvalidMotionPlanError(
            f"Arc ends {dist:.4f} m / {angle:.4f} rad away from the goal"
        )
