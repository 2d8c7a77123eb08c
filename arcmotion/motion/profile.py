"""
Trapezoidal time law for the arc path parameter.
"""

import logging

import numpy as np

from arcmotion.config import MIN_SAMPLE_INTERVALS
from arcmotion.motion.circle import ArcPath
from arcmotion.motion.limits import CartesianLimits
from arcmotion.utils.errors import PlanningFailedError

logger = logging.getLogger(__name__)


def _samples_for_duration(duration: float, dt: float) -> np.ndarray:
    """Uniform sample times with the last one exactly at duration."""
    if duration <= 0:
        return np.array([0.0, 0.0])
    n = int(np.ceil(duration / dt - 1e-9))
    times = np.arange(max(n, 1), dtype=float) * dt
    return np.append(times, duration)


class TrapezoidProfile:
    """
    Accelerate / cruise / decelerate profile over a distance, starting and
    ending at rest.

    Falls back to a triangular profile when the distance is too short to
    reach the cruise velocity. Acceleration and deceleration may differ.
    """

    def __init__(self, distance: float, v_max: float, a_max: float, d_max: float | None = None):
        if d_max is None:
            d_max = a_max
        if distance <= 0 or v_max <= 0 or a_max <= 0 or d_max <= 0:
            raise PlanningFailedError(
                f"Profile needs positive inputs (distance={distance}, v={v_max}, a={a_max}, d={d_max})"
            )
        self.distance = float(distance)
        self.a_max = float(a_max)
        self.d_max = float(d_max)

        s_acc = v_max**2 / (2 * a_max)
        s_dec = v_max**2 / (2 * d_max)
        if s_acc + s_dec <= distance:
            self.triangular = False
            self.v_peak = float(v_max)
            self.t_cruise = (distance - s_acc - s_dec) / v_max
        else:
            # Peak velocity determined by distance
            self.triangular = True
            self.v_peak = float(np.sqrt(2 * distance * a_max * d_max / (a_max + d_max)))
            self.t_cruise = 0.0
        self.t_acc = self.v_peak / self.a_max
        self.t_dec = self.v_peak / self.d_max
        self.duration = self.t_acc + self.t_cruise + self.t_dec

    def _phase(self, t: float) -> tuple[int, float]:
        t = min(max(t, 0.0), self.duration)
        if t <= self.t_acc:
            return 0, t
        if t <= self.t_acc + self.t_cruise:
            return 1, t - self.t_acc
        return 2, t - self.t_acc - self.t_cruise

    def position(self, t: float) -> float:
        phase, tp = self._phase(t)
        s_acc = 0.5 * self.a_max * self.t_acc**2
        if phase == 0:
            return 0.5 * self.a_max * tp**2
        if phase == 1:
            return s_acc + self.v_peak * tp
        s = s_acc + self.v_peak * self.t_cruise + self.v_peak * tp - 0.5 * self.d_max * tp**2
        return min(s, self.distance)

    def velocity(self, t: float) -> float:
        if t <= 0.0 or t >= self.duration:
            return 0.0
        phase, tp = self._phase(t)
        if phase == 0:
            return self.a_max * tp
        if phase == 1:
            return self.v_peak
        return max(self.v_peak - self.d_max * tp, 0.0)

    def acceleration(self, t: float) -> float:
        if t <= 0.0 or t >= self.duration:
            return 0.0
        phase, _ = self._phase(t)
        if phase == 0:
            return self.a_max
        if phase == 1:
            return 0.0
        return -self.d_max

    def sample_times(self, dt: float, min_intervals: int = MIN_SAMPLE_INTERVALS) -> np.ndarray:
        """
        Sample times every dt, ending exactly at the duration.

        The step shrinks so that at least min_intervals steps cover the
        motion.
        """
        if dt <= 0:
            raise ValueError(f"Sampling time must be positive, got {dt}")
        return _samples_for_duration(self.duration, min(dt, self.duration / min_intervals))


def plan_arc_profile(
    path: ArcPath,
    limits: CartesianLimits,
    velocity_scale: float,
    acceleration_scale: float,
) -> TrapezoidProfile:
    """
    Time law over the arc, bounded by the scaled translational limits and,
    through the equivalent radius, by the rotational velocity limit.
    """
    length = path.path_length(limits.equivalent_radius)
    if length <= 0:
        raise PlanningFailedError("Arc has zero length")
    profile = TrapezoidProfile(
        length,
        velocity_scale * limits.max_trans_vel,
        acceleration_scale * limits.max_trans_acc,
        acceleration_scale * limits.max_trans_dec,
    )
    logger.debug(
        "Arc profile: length=%.4f duration=%.3fs v_peak=%.4f (%s)",
        length,
        profile.duration,
        profile.v_peak,
        "triangular" if profile.triangular else "trapezoidal",
    )
    return profile
