"""
Central configuration for arcmotion tunables and shared tolerances.
"""

import logging
import os

TRACE: int = 5
logging.addLevelName(TRACE, "TRACE")
TRACE_ENABLED = str(os.getenv("ARCMOTION_TRACE", "0")).lower() in ("1", "true", "yes", "on")

logger = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid value for {name}: {raw!r}")
        return default


# Time between two trajectory samples (s)
SAMPLING_TIME_S: float = _env_float("ARCMOTION_SAMPLING_TIME_S", 0.1)

# Start state joint velocities up to this magnitude count as "at rest" (rad/s)
START_VELOCITY_TOLERANCE: float = _env_float("ARCMOTION_START_VELOCITY_TOLERANCE", 1e-10)

# Circle fit guards
COLLINEAR_TOLERANCE: float = 1e-8  # lower bound on |(interim - start) x (goal - start)|
COINCIDENT_POINT_TOLERANCE: float = 1e-6  # defining points closer than this are one point (m)
CENTER_RADIUS_WARN_TOL: float = 1e-3  # start/goal radius mismatch reported for center arcs (m)

# Goal tolerances used when the goal does not bring its own
DEFAULT_POSITION_TOLERANCE: float = 1e-3  # m
DEFAULT_ORIENTATION_TOLERANCE: float = 1e-2  # rad

# Relative slack on the post-hoc per-joint velocity/acceleration check
LIMIT_CHECK_TOLERANCE: float = 1e-6

# Arcs shorter than this many sampling periods are sampled more finely
MIN_SAMPLE_INTERVALS: int = 4
