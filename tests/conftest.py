"""
Pytest configuration and shared fixtures for arcmotion tests.

Provides the limits, kinematics double and generator used by the unit
tests. Reference requests live in tests.utils.scenarios.
"""

import math
import os
import sys

import pytest

# Add the parent directory to Python path so we can import the package
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from arcmotion.motion.circ import CircTrajectoryGenerator
from arcmotion.motion.limits import CartesianLimits, JointLimits, LimitsContainer
from tests.utils.kinematics import JOINT_NAMES, CartesianRotvecKinematics


@pytest.fixture
def kinematics() -> CartesianRotvecKinematics:
    return CartesianRotvecKinematics()


@pytest.fixture
def cartesian_limits() -> CartesianLimits:
    return CartesianLimits(
        max_trans_vel=math.pi,
        max_trans_acc=math.pi,
        max_trans_dec=math.pi,
        max_rot_vel=math.pi,
    )


@pytest.fixture
def limits(cartesian_limits) -> LimitsContainer:
    """
    Linear joints are slower than the Cartesian limits so that unscaled
    requests violate them while the nominal scaling stays inside.
    """
    linear = JointLimits(
        max_velocity=0.35, max_acceleration=2.5, min_position=-1.0, max_position=1.0
    )
    angular = JointLimits(
        max_velocity=1.0, max_acceleration=5.0, min_position=-math.pi, max_position=math.pi
    )
    joints = {name: (linear if i < 3 else angular) for i, name in enumerate(JOINT_NAMES)}
    return LimitsContainer(joints, cartesian_limits)


@pytest.fixture
def generator(kinematics, limits) -> CircTrajectoryGenerator:
    return CircTrajectoryGenerator(kinematics, limits)
