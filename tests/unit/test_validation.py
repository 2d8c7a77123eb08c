import math

import pytest

from arcmotion.motion.validation import (
    check_auxiliary,
    check_joint_goal,
    check_scaling,
    check_start_state,
    validate_request,
)
from arcmotion.protocol.types import AuxiliaryTag, ErrorCode, JointGoal, PoseGoal
from arcmotion.utils.errors import (
    InvalidGoalConstraintsError,
    InvalidLinkNameError,
    InvalidMotionPlanError,
    InvalidRobotStateError,
)
from tests.utils.kinematics import JOINT_NAMES, TOOL_LINK
from tests.utils.scenarios import INTERIM, circ_request, goal_pose, joint_goal, make_pose, start_state


def test_valid_request_returns_link_and_tag(kinematics, limits):
    assert validate_request(circ_request(), kinematics, limits) == (TOOL_LINK, AuxiliaryTag.CENTER)
    link, tag = validate_request(circ_request("interim", INTERIM, goal=joint_goal()), kinematics, limits)
    assert link == TOOL_LINK
    assert tag is AuxiliaryTag.INTERIM


class TestStartState:
    def test_missing_joint(self, limits):
        state = start_state()
        partial = type(state)({n: v for n, v in state.positions.items() if n != "joint_3"})
        with pytest.raises(InvalidRobotStateError, match="joint_3"):
            check_start_state(partial, JOINT_NAMES, limits)

    def test_moving_start(self, limits):
        with pytest.raises(InvalidRobotStateError, match="at rest"):
            check_start_state(start_state(velocities={"joint_2": 0.01}), JOINT_NAMES, limits)

    @pytest.mark.parametrize("velocity", [math.nan, math.inf, -math.inf])
    def test_non_finite_velocity_is_not_at_rest(self, limits, velocity):
        with pytest.raises(InvalidRobotStateError, match="joint_1"):
            check_start_state(start_state(velocities={"joint_1": velocity}), JOINT_NAMES, limits)

    def test_velocity_noise_is_at_rest(self, limits):
        check_start_state(start_state(velocities={n: 1e-16 for n in JOINT_NAMES}), JOINT_NAMES, limits)

    def test_position_out_of_limits(self, limits):
        with pytest.raises(InvalidRobotStateError, match="position limits"):
            check_start_state(start_state((1.5, 0.3, 0.5, 0.0, 0.0, 0.0)), JOINT_NAMES, limits)

    def test_error_code(self, limits):
        with pytest.raises(InvalidRobotStateError) as exc:
            check_start_state(start_state(velocities={"joint_1": 1.0}), JOINT_NAMES, limits)
        assert exc.value.error_code == ErrorCode.INVALID_ROBOT_STATE


@pytest.mark.parametrize("value", [1e-3, 0.5, 1.0])
def test_scaling_accepts_half_open_interval(value):
    check_scaling("velocity_scale", value)


@pytest.mark.parametrize("value", [0.0, -0.5, 1.0001])
def test_scaling_rejects_outside_interval(value):
    with pytest.raises(InvalidMotionPlanError, match="velocity_scale"):
        check_scaling("velocity_scale", value)


class TestJointGoal:
    def test_duplicate_joint(self, limits):
        goal = JointGoal(joint_goal().constraints + (("joint_1", 0.0),))
        with pytest.raises(InvalidGoalConstraintsError, match="Duplicate"):
            check_joint_goal(goal, JOINT_NAMES, limits)

    def test_unknown_joint(self, limits):
        goal = JointGoal(joint_goal().constraints + (("joint_7", 0.0),))
        with pytest.raises(InvalidGoalConstraintsError, match="joint_7"):
            check_joint_goal(goal, JOINT_NAMES, limits)

    def test_missing_joint(self, limits):
        goal = JointGoal(joint_goal().constraints[1:])
        with pytest.raises(InvalidGoalConstraintsError, match="joint_1"):
            check_joint_goal(goal, JOINT_NAMES, limits)

    def test_out_of_limits(self, limits):
        goal = JointGoal.from_mapping({**dict(joint_goal().constraints), "joint_4": 4.0})
        with pytest.raises(InvalidGoalConstraintsError, match="joint_4"):
            check_joint_goal(goal, JOINT_NAMES, limits)


class TestAuxiliary:
    def test_missing(self):
        req = circ_request()
        req = type(req)(req.start_state, req.goal)
        with pytest.raises(InvalidMotionPlanError, match="auxiliary point"):
            check_auxiliary(req)

    @pytest.mark.parametrize("tag", ["", "focus", "CENTER"])
    def test_bad_tag(self, tag):
        with pytest.raises(InvalidMotionPlanError):
            check_auxiliary(circ_request(tag=tag))

    @pytest.mark.parametrize("count", [0, 2])
    def test_pose_count(self, count):
        poses = [make_pose((0.0, 0.3, 0.5))] * count
        with pytest.raises(InvalidMotionPlanError, match="exactly one pose"):
            check_auxiliary(circ_request(aux_poses=poses))


class TestLinks:
    def test_unknown_goal_link(self, kinematics, limits):
        req = circ_request(goal=PoseGoal(goal_pose(), "base"))
        with pytest.raises(InvalidLinkNameError, match="goal link"):
            validate_request(req, kinematics, limits)

    def test_unknown_aux_link(self, kinematics, limits):
        req = circ_request(goal=joint_goal(), link_name="INVALID")
        with pytest.raises(InvalidLinkNameError, match="INVALID"):
            validate_request(req, kinematics, limits)

    def test_aux_link_must_match_pose_goal_link(self, kinematics, limits):
        kinematics.has_link = lambda name: True
        with pytest.raises(InvalidLinkNameError, match="differs"):
            validate_request(circ_request(link_name="flange"), kinematics, limits)


def test_missing_goal(kinematics, limits):
    req = circ_request()
    req = type(req)(req.start_state, None, req.auxiliary, req.velocity_scale, req.acceleration_scale)
    with pytest.raises(InvalidGoalConstraintsError):
        validate_request(req, kinematics, limits)
