"""
Structural and semantic checks on a circular motion request.

Runs before any geometry is computed. Each failed check raises the
MotionPlanningError subclass that carries its error code.
"""

import logging
from collections import Counter
from collections.abc import Sequence

from arcmotion.config import START_VELOCITY_TOLERANCE
from arcmotion.motion.limits import LimitsContainer
from arcmotion.protocol.types import (
    AuxiliaryTag,
    JointGoal,
    JointState,
    PoseGoal,
    TrajectoryRequest,
)
from arcmotion.utils.errors import (
    InvalidGoalConstraintsError,
    InvalidLinkNameError,
    InvalidMotionPlanError,
    InvalidRobotStateError,
)
from arcmotion.utils.ik import Kinematics

logger = logging.getLogger(__name__)


def check_start_state(
    state: JointState,
    joint_names: Sequence[str],
    limits: LimitsContainer,
    velocity_tolerance: float = START_VELOCITY_TOLERANCE,
) -> None:
    missing = [n for n in joint_names if n not in state.positions]
    if missing:
        raise InvalidRobotStateError(f"Start state is missing joints: {', '.join(missing)}")

    for name, v in (state.velocities or {}).items():
        if not abs(v) <= velocity_tolerance:
            raise InvalidRobotStateError(
                f"Start state velocity of '{name}' is {v}, trajectory must start at rest"
            )

    for name in joint_names:
        jl = limits.joint(name)
        if jl is not None and not jl.verify_position(state.positions[name]):
            raise InvalidRobotStateError(
                f"Start position of '{name}' ({state.positions[name]}) violates its position limits"
            )


def check_scaling(name: str, value: float) -> None:
    if not 0.0 < value <= 1.0:
        raise InvalidMotionPlanError(f"{name} must lie in (0, 1], got {value}")


def check_joint_goal(goal: JointGoal, joint_names: Sequence[str], limits: LimitsContainer) -> None:
    names = goal.joint_names
    duplicates = sorted(n for n, c in Counter(names).items() if c > 1)
    if duplicates:
        raise InvalidGoalConstraintsError(f"Duplicate joint constraints: {', '.join(duplicates)}")

    expected = set(joint_names)
    extra = sorted(set(names) - expected)
    missing = sorted(expected - set(names))
    if extra or missing:
        raise InvalidGoalConstraintsError(
            f"Joint goal must name exactly the active joints (extra: {extra}, missing: {missing})"
        )

    for name, position in goal.constraints:
        jl = limits.joint(name)
        if jl is not None and not jl.verify_position(position):
            raise InvalidGoalConstraintsError(
                f"Goal position of '{name}' ({position}) violates its position limits"
            )


def check_auxiliary(request: TrajectoryRequest) -> AuxiliaryTag:
    aux = request.auxiliary
    if aux is None:
        raise InvalidMotionPlanError("Circular motion needs an auxiliary point (center or interim)")
    if not aux.tag:
        raise InvalidMotionPlanError("Auxiliary point has no tag, expected 'center' or 'interim'")
    try:
        tag = AuxiliaryTag(aux.tag)
    except ValueError:
        raise InvalidMotionPlanError(
            f"Auxiliary point tag '{aux.tag}' is neither 'center' nor 'interim'"
        ) from None
    if len(aux.poses) != 1:
        raise InvalidMotionPlanError(
            f"Auxiliary point must carry exactly one pose, got {len(aux.poses)}"
        )
    return tag


def validate_request(
    request: TrajectoryRequest,
    kinematics: Kinematics,
    limits: LimitsContainer,
) -> tuple[str, AuxiliaryTag]:
    """
    Run all upfront checks.

    Returns the link the arc is planned for and the auxiliary tag.
    """
    joint_names = list(kinematics.joint_names)

    check_start_state(request.start_state, joint_names, limits)
    check_scaling("velocity_scale", request.velocity_scale)
    check_scaling("acceleration_scale", request.acceleration_scale)

    goal = request.goal
    if isinstance(goal, JointGoal):
        check_joint_goal(goal, joint_names, limits)
    elif isinstance(goal, PoseGoal):
        if not kinematics.has_link(goal.link_name):
            raise InvalidLinkNameError(f"Unknown goal link '{goal.link_name}'")
    else:
        raise InvalidGoalConstraintsError("Request has no joint or pose goal")

    tag = check_auxiliary(request)

    link_name = request.auxiliary.link_name
    if isinstance(goal, PoseGoal) and link_name != goal.link_name:
        raise InvalidLinkNameError(
            f"Auxiliary point link '{link_name}' differs from goal link '{goal.link_name}'"
        )
    if not kinematics.has_link(link_name):
        raise InvalidLinkNameError(f"Unknown auxiliary point link '{link_name}'")

    logger.debug("Request valid: link=%s aux=%s", link_name, tag.value)
    return link_name, tag
