"""
Base trajectory generator.

Holds the kinematics collaborator, limits and sampling time shared by
generators, and turns per-request planning errors into typed results.
"""

import logging

from arcmotion.config import SAMPLING_TIME_S
from arcmotion.motion.limits import LimitsContainer
from arcmotion.protocol.types import GenerationResult, JointTrajectory, TrajectoryRequest
from arcmotion.utils.errors import MotionPlanningError
from arcmotion.utils.ik import Kinematics

logger = logging.getLogger(__name__)


class TrajectoryGenerator:
    """Base class for trajectory generation: generate(request) -> GenerationResult"""

    motion_type = "generic"

    def __init__(
        self,
        kinematics: Kinematics,
        limits: LimitsContainer,
        sampling_time: float | None = None,
    ):
        """
        Initialize trajectory generator

        Args:
            kinematics: Kinematics collaborator of the planning group
            limits: Immutable joint and Cartesian limits
            sampling_time: Time between trajectory samples in seconds (default from config)
        """
        self.kinematics = kinematics
        self.limits = limits
        self.sampling_time = SAMPLING_TIME_S if sampling_time is None else float(sampling_time)
        if self.sampling_time <= 0:
            raise ValueError(f"Sampling time must be positive, got {self.sampling_time}")

    def generate(self, request: TrajectoryRequest) -> GenerationResult:
        """
        Plan one request.

        Never raises for request-dependent problems: those come back as a
        failed result with the matching error code and no trajectory.
        """
        try:
            trajectory = self._plan(request)
        except MotionPlanningError as e:
            logger.warning("%s planning failed [%s]: %s", self.motion_type, e.error_code.name, e)
            return GenerationResult.failed(e.error_code, str(e))
        logger.debug(
            "%s planning succeeded: %d points, %.3fs",
            self.motion_type,
            len(trajectory.points),
            trajectory.duration,
        )
        return GenerationResult.ok(trajectory)

    def _plan(self, request: TrajectoryRequest) -> JointTrajectory:
        raise NotImplementedError("Subclasses must implement _plan")
