"""
Test utilities package.

Provides a closed-form kinematics double and builders for reference arc
requests used across the arcmotion test suite.
"""

from .kinematics import JOINT_NAMES, TOOL_LINK, CartesianRotvecKinematics

__all__ = [
    "JOINT_NAMES",
    "TOOL_LINK",
    "CartesianRotvecKinematics",
]
