"""
Circular trajectory generator.

Plans a rest-to-rest joint trajectory whose tool frame follows a circular
arc from the current pose to the goal, defined by a center or an interim
point.
"""

import logging
from enum import Enum

import numpy as np

from arcmotion.config import DEFAULT_ORIENTATION_TOLERANCE, DEFAULT_POSITION_TOLERANCE
from arcmotion.motion.base import TrajectoryGenerator
from arcmotion.motion.circle import ArcPath, resolve_arc
from arcmotion.motion.joint_trajectory import (
    build_joint_trajectory,
    check_goal_reached,
    check_joint_limits,
)
from arcmotion.motion.limits import LimitsContainer
from arcmotion.motion.profile import plan_arc_profile
from arcmotion.motion.validation import validate_request
from arcmotion.protocol.types import JointGoal, JointTrajectory, Pose, PoseGoal, TrajectoryRequest
from arcmotion.utils.errors import InvalidLimitsError, MotionPlanningError
from arcmotion.utils.ik import Kinematics

logger = logging.getLogger(__name__)


class PlanningStage(Enum):
    """Stages a generate() call passes through, in order."""
    VALIDATING = "validating"
    GEOMETRY_RESOLVED = "geometry_resolved"
    TIME_PARAMETERIZED = "time_parameterized"
    SAMPLING = "sampling"
    DONE = "done"


class CircTrajectoryGenerator(TrajectoryGenerator):
    """Generate joint trajectories along circular Cartesian arcs"""

    motion_type = "CIRC"

    def __init__(
        self,
        kinematics: Kinematics,
        limits: LimitsContainer,
        sampling_time: float | None = None,
    ):
        if limits is None or not limits.has_cartesian_limits:
            raise InvalidLimitsError("Circular motion needs cartesian limits")
        missing = limits.missing_joints(kinematics.joint_names) if limits.has_joint_limits else []
        if missing:
            logger.warning("No joint limits configured for: %s", ", ".join(missing))
        super().__init__(kinematics, limits, sampling_time)

    def _goal_pose(self, request: TrajectoryRequest, link_name: str) -> tuple[Pose, float, float]:
        goal = request.goal
        if isinstance(goal, PoseGoal):
            return goal.pose, goal.position_tolerance, goal.orientation_tolerance
        assert isinstance(goal, JointGoal)
        q_goal = goal.as_state().ordered(self.kinematics.joint_names)
        pose = self.kinematics.forward_kinematics(q_goal, link_name)
        return pose, DEFAULT_POSITION_TOLERANCE, DEFAULT_ORIENTATION_TOLERANCE

    def _plan(self, request: TrajectoryRequest) -> JointTrajectory:
        stage = PlanningStage.VALIDATING
        try:
            link_name, tag = validate_request(request, self.kinematics, self.limits)

            joint_names = list(self.kinematics.joint_names)
            start_q = request.start_state.ordered(joint_names)
            start_pose = self.kinematics.forward_kinematics(start_q, link_name)
            goal_pose, pos_tol, rot_tol = self._goal_pose(request, link_name)

            geometry = resolve_arc(start_pose, goal_pose, request.auxiliary.pose, tag)
            stage = PlanningStage.GEOMETRY_RESOLVED
            logger.debug(
                "Arc (%s): center=%s radius=%.4f sweep=%.2fdeg",
                tag.value,
                np.round(geometry.center, 4).tolist(),
                geometry.radius,
                np.degrees(geometry.sweep),
            )
            path = ArcPath(geometry, start_pose, goal_pose)

            profile = plan_arc_profile(
                path,
                self.limits.cartesian_limits,
                request.velocity_scale,
                request.acceleration_scale,
            )
            stage = PlanningStage.TIME_PARAMETERIZED
            logger.debug("Sampling %.3fs arc every %.3fs", profile.duration, self.sampling_time)

            stage = PlanningStage.SAMPLING
            trajectory = build_joint_trajectory(
                path, profile, self.kinematics, link_name, start_q, self.sampling_time
            )
            check_goal_reached(trajectory, self.kinematics, link_name, goal_pose, pos_tol, rot_tol)
            check_joint_limits(trajectory, self.limits)
        except MotionPlanningError:
            logger.debug("CIRC planning failed at stage '%s'", stage.value)
            raise

        logger.debug("CIRC planning reached stage '%s'", PlanningStage.DONE.value)
        return trajectory
