"""
Kinematics collaborator interface and a roboticstoolbox-backed implementation.

The planner never solves kinematics itself; it talks to any object that
satisfies the Kinematics protocol below.
"""

import logging
from collections import namedtuple
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

import numpy as np
from numpy.typing import ArrayLike, NDArray
from spatialmath import SE3

from arcmotion.protocol.types import Pose

logger = logging.getLogger(__name__)

IKResult = namedtuple('IKResult', 'success q iterations residual violations')


@runtime_checkable
class Kinematics(Protocol):
    """Forward/inverse kinematics and Jacobian of one planning group."""

    @property
    def joint_names(self) -> Sequence[str]: ...

    def has_link(self, link_name: str) -> bool: ...

    def forward_kinematics(self, q: ArrayLike, link_name: str) -> Pose: ...

    def inverse_kinematics(self, pose: Pose, link_name: str, seed: ArrayLike) -> IKResult: ...

    def jacobian(self, q: ArrayLike, link_name: str) -> NDArray[np.float64]:
        """6xN matrix mapping joint velocities to the base-frame twist [v; w]."""
        ...


def unwrap_angles(q_solution, q_current):
    """
    Vectorized unwrap: bring solution angles near current by adding/subtracting 2*pi.
    This minimizes joint motion between consecutive configurations.
    """
    qs = np.asarray(q_solution, dtype=float)
    qc = np.asarray(q_current, dtype=float)
    diff = qs - qc
    q_unwrapped = qs.copy()
    q_unwrapped[diff > np.pi] -= 2 * np.pi
    q_unwrapped[diff < -np.pi] += 2 * np.pi
    return q_unwrapped


def pose_to_se3(pose: Pose) -> SE3:
    return SE3(pose.as_matrix(), check=False)


def se3_to_pose(T: SE3) -> Pose:
    return Pose.from_matrix(T.A)


class RoboticsToolboxKinematics:
    """
    Kinematics backed by a roboticstoolbox robot model.

    Parameters
    ----------
    robot : roboticstoolbox Robot or DHRobot
        Robot model
    link_name : str, optional
        Name reported for the tool frame (default: robot's end-effector name)
    joint_names : sequence of str, optional
        Active joint names (default: joint_1 .. joint_n)
    """

    def __init__(self, robot, link_name: str | None = None, joint_names: Sequence[str] | None = None):
        self.robot = robot
        self.link_name = link_name or self._default_link_name(robot)
        n = int(robot.n)
        if joint_names is None:
            joint_names = [f"joint_{i + 1}" for i in range(n)]
        if len(joint_names) != n:
            raise ValueError(f"{len(joint_names)} joint names for a {n}-joint robot")
        self._joint_names = tuple(joint_names)

    @staticmethod
    def _default_link_name(robot) -> str:
        ee = getattr(robot, "ee_links", None)
        if ee:
            return str(getattr(ee[0], "name", "tool0"))
        return "tool0"

    @property
    def joint_names(self) -> Sequence[str]:
        return self._joint_names

    def has_link(self, link_name: str) -> bool:
        return link_name == self.link_name

    def forward_kinematics(self, q: ArrayLike, link_name: str) -> Pose:
        return se3_to_pose(self.robot.fkine(np.asarray(q, dtype=float)))

    def jacobian(self, q: ArrayLike, link_name: str) -> NDArray[np.float64]:
        return np.asarray(self.robot.jacob0(np.asarray(q, dtype=float)), dtype=float)

    def inverse_kinematics(self, pose: Pose, link_name: str, seed: ArrayLike) -> IKResult:
        """
        IK solver

        Solves with Levenberg-Marquardt seeded at ``seed`` and unwraps the
        solution toward the seed so consecutive samples stay continuous.

        Returns
        -------
        IKResult
            success - True if solution found
            q - Joint configuration in radians (or None if failed)
            iterations - Number of iterations used
            residual - Final error value
            violations - Error message if failed, None if successful
        """
        current_q = np.asarray(seed, dtype=float)
        result = self.robot.ets().ik_LM(
            pose_to_se3(pose),
            q0=current_q,
            tol=1e-10,
            joint_limits=True,
            k=0.0,
            method="sugihara"
        )
        q = result[0]
        success = result[1] > 0
        iterations = result[2]
        remaining = result[3]

        violations = None
        if success:
            q_unwrapped = unwrap_angles(q, current_q)
            qlim = getattr(self.robot, "qlim", None)
            if qlim is None or (
                np.all(q_unwrapped >= qlim[0, :]) and np.all(q_unwrapped <= qlim[1, :])
            ):
                q = q_unwrapped
            # else: keep result q which already passed the library's limit check
        else:
            violations = "IK failed to solve."
            logger.debug(violations)
        return IKResult(
            success=success,
            q=np.asarray(q, dtype=float) if success else None,
            iterations=iterations,
            residual=remaining,
            violations=violations
        )
