"""
Unit tests for circle resolution and arc sampling.
"""

import logging

import numpy as np
import pytest

from arcmotion.motion.circle import (
    ArcPath,
    circle_from_center,
    circle_from_interim,
    resolve_arc,
)
from arcmotion.protocol.types import AuxiliaryTag
from arcmotion.utils.errors import InvalidMotionPlanError
from tests.utils.scenarios import CENTER, INTERIM, RADIUS, goal_pose, make_pose

START = np.array([0.2, 0.3, 0.5])
GOAL = np.array([0.0, 0.5, 0.5])


@pytest.mark.parametrize(
    "tag,aux",
    [(AuxiliaryTag.CENTER, CENTER), (AuxiliaryTag.INTERIM, INTERIM)],
)
def test_quarter_arc_endpoints(tag, aux):
    geometry = resolve_arc(make_pose(START), make_pose(GOAL), make_pose(aux), tag)

    assert np.allclose(geometry.center, CENTER)
    assert geometry.radius == pytest.approx(RADIUS)
    assert geometry.sweep == pytest.approx(np.pi / 2)
    assert geometry.length == pytest.approx(RADIUS * np.pi / 2)
    assert np.allclose(geometry.axis, [0.0, 0.0, 1.0])
    assert np.allclose(geometry.point(0.0), START)
    assert np.allclose(geometry.point(1.0), GOAL)


def test_interim_point_lies_on_arc():
    geometry = circle_from_interim(START, GOAL, np.array(INTERIM))
    assert np.allclose(geometry.point(0.5), INTERIM)


def test_tangent_is_perpendicular_to_radius():
    geometry = circle_from_center(START, GOAL, np.array(CENTER))
    for s in np.linspace(0.0, 1.0, 7):
        radial = geometry.point(s) - geometry.center
        tangent = geometry.tangent(s)
        assert abs(np.dot(radial, tangent)) < 1e-12
        assert np.linalg.norm(tangent) == pytest.approx(geometry.length)


def test_interim_on_far_side_gives_arc_above_180_degrees():
    start = np.array([-0.2, 0.3, 0.5])
    interim = np.array([0.2, 0.3, 0.5])
    goal = np.array([0.0, 0.1, 0.5])
    geometry = circle_from_interim(start, goal, interim)

    assert geometry.sweep == pytest.approx(1.5 * np.pi)
    assert np.allclose(geometry.axis, [0.0, 0.0, -1.0])
    # Passes through the interim point two thirds of the way
    assert np.allclose(geometry.point(2.0 / 3.0), interim)


def test_center_always_takes_minor_arc():
    start = np.array([-0.2, 0.3, 0.5])
    goal = np.array([0.0, 0.1, 0.5])
    geometry = circle_from_center(start, goal, np.array(CENTER))
    assert geometry.sweep == pytest.approx(np.pi / 2)
    assert np.allclose(geometry.point(1.0), goal)


def test_half_circle_through_interim():
    start = np.array([-0.2, 0.3, 0.5])
    goal = np.array([0.2, 0.3, 0.5])
    geometry = circle_from_interim(start, goal, np.array([0.0, 0.5, 0.5]))
    assert np.allclose(geometry.center, CENTER)
    assert geometry.sweep == pytest.approx(np.pi)


@pytest.mark.parametrize("fn", [circle_from_center, circle_from_interim])
def test_collinear_points_rejected(fn):
    start = np.array([-0.1, 0.3, 0.5])
    aux = np.array([0.0, 0.3, 0.5])
    goal = np.array([0.1, 0.3, 0.5])
    with pytest.raises(InvalidMotionPlanError, match="collinear"):
        fn(start, goal, aux)


def test_half_circle_about_center_rejected():
    start = np.array([-0.2, 0.3, 0.5])
    goal = np.array([0.2, 0.3, 0.5])
    with pytest.raises(InvalidMotionPlanError):
        circle_from_center(start, goal, np.array(CENTER))


@pytest.mark.parametrize("fn", [circle_from_center, circle_from_interim])
def test_coincident_points_rejected(fn):
    with pytest.raises(InvalidMotionPlanError, match="coincide"):
        fn(START, START + 1e-8, START - 1e-8)
    with pytest.raises(InvalidMotionPlanError, match="coincide"):
        fn(START, START, np.array(CENTER))


def test_center_radius_mismatch_only_warns(caplog):
    center = START + np.array([0.0, 1.0, 0.0])
    with caplog.at_level(logging.WARNING, logger="arcmotion.motion.circle"):
        geometry = circle_from_center(START, GOAL, center)

    assert "radius" in caplog.text
    assert geometry.radius == pytest.approx(1.0)
    # End point keeps the start radius and misses the goal
    assert np.linalg.norm(geometry.point(1.0) - GOAL) > 0.1


def test_equal_radii_do_not_warn(caplog):
    with caplog.at_level(logging.WARNING, logger="arcmotion.motion.circle"):
        circle_from_center(START, GOAL, np.array(CENTER))
    assert caplog.records == []


def test_unknown_tag_rejected():
    with pytest.raises(InvalidMotionPlanError):
        resolve_arc(make_pose(START), make_pose(GOAL), make_pose(CENTER), "focus")


class TestArcPath:
    def _path(self):
        start = make_pose(START)
        goal = goal_pose()
        geometry = circle_from_center(start.xyz, goal.xyz, np.array(CENTER))
        return ArcPath(geometry, start, goal)

    def test_sample_endpoints(self):
        path = self._path()
        assert path.sample(0.0).distance_to(make_pose(START)) < 1e-12
        assert path.sample(1.0).distance_to(goal_pose()) < 1e-12
        assert path.sample(1.0).angle_to(goal_pose()) < 1e-12

    def test_sample_clips_parameter(self):
        path = self._path()
        assert path.sample(1.5).distance_to(path.sample(1.0)) == 0.0
        assert path.sample(-0.5).distance_to(path.sample(0.0)) == 0.0

    def test_orientation_blends_linearly(self):
        path = self._path()
        assert path.rotation_angle == pytest.approx(0.2)
        mid = path.sample(0.5)
        assert mid.angle_to(make_pose(START)) == pytest.approx(0.1)

    def test_path_length_uses_longer_of_arc_and_rotation(self):
        path = self._path()
        arc = RADIUS * np.pi / 2
        assert path.path_length(1.0) == pytest.approx(arc)
        assert path.path_length(10.0) == pytest.approx(2.0)

    def test_twist_scales_with_path_rate(self):
        path = self._path()
        twist = path.twist(0.0, 2.0)
        assert np.allclose(twist[:3], path.geometry.tangent(0.0) * 2.0)
        assert np.allclose(twist[3:], [0.0, 0.0, 0.4])
        assert np.allclose(path.twist(0.3, 0.0), 0.0)
