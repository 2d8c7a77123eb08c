"""
Motion limits for circular trajectory generation.

Per-joint limits for position, velocity, acceleration and deceleration
plus scalar Cartesian limits that apply uniformly along the arc.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from arcmotion.utils.errors import InvalidLimitsError

logger = logging.getLogger(__name__)


def _positive(name: str, value: Any) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise InvalidLimitsError(f"{name} must be a number, got {value!r}") from None
    if not v > 0.0:
        raise InvalidLimitsError(f"{name} must be strictly positive, got {v}")
    return v


@dataclass(frozen=True)
class JointLimits:
    """
    Limits of a single joint.

    Deceleration defaults to the acceleration limit. Position limits are
    optional; a joint without them is continuous.
    """
    max_velocity: float
    max_acceleration: float
    max_deceleration: float | None = None
    min_position: float | None = None
    max_position: float | None = None

    def __post_init__(self):
        object.__setattr__(self, "max_velocity", _positive("max_velocity", self.max_velocity))
        object.__setattr__(
            self, "max_acceleration", _positive("max_acceleration", self.max_acceleration)
        )
        dec = self.max_acceleration if self.max_deceleration is None else self.max_deceleration
        object.__setattr__(self, "max_deceleration", _positive("max_deceleration", dec))
        if (
            self.min_position is not None
            and self.max_position is not None
            and self.min_position > self.max_position
        ):
            raise InvalidLimitsError(
                f"min_position {self.min_position} above max_position {self.max_position}"
            )

    @property
    def has_position_limits(self) -> bool:
        return self.min_position is not None or self.max_position is not None

    def verify_position(self, q: float) -> bool:
        if self.min_position is not None and q < self.min_position:
            return False
        if self.max_position is not None and q > self.max_position:
            return False
        return True

    def verify_velocity(self, v: float, slack: float = 0.0) -> bool:
        return abs(v) <= self.max_velocity * (1.0 + slack)

    def verify_acceleration(self, a: float, speeding_up: bool, slack: float = 0.0) -> bool:
        """Accelerations while speeding up are bounded by max_acceleration, else by max_deceleration."""
        bound = self.max_acceleration if speeding_up else self.max_deceleration
        return abs(a) <= bound * (1.0 + slack)


@dataclass(frozen=True)
class CartesianLimits:
    """Translational (m/s, m/s^2) and rotational (rad/s) limits of the tool frame."""
    max_trans_vel: float
    max_trans_acc: float
    max_rot_vel: float
    max_trans_dec: float | None = None

    def __post_init__(self):
        object.__setattr__(self, "max_trans_vel", _positive("max_trans_vel", self.max_trans_vel))
        object.__setattr__(self, "max_trans_acc", _positive("max_trans_acc", self.max_trans_acc))
        object.__setattr__(self, "max_rot_vel", _positive("max_rot_vel", self.max_rot_vel))
        dec = self.max_trans_acc if self.max_trans_dec is None else self.max_trans_dec
        object.__setattr__(self, "max_trans_dec", _positive("max_trans_dec", dec))

    @property
    def equivalent_radius(self) -> float:
        """Lever arm (m) turning a rotation angle into an equivalent path length."""
        return self.max_trans_vel / self.max_rot_vel


@dataclass(frozen=True)
class LimitsContainer:
    """Immutable bundle of joint and Cartesian limits handed to a generator."""
    joint_limits: Mapping[str, JointLimits] = field(default_factory=dict)
    cartesian_limits: CartesianLimits | None = None

    def __post_init__(self):
        object.__setattr__(self, "joint_limits", MappingProxyType(dict(self.joint_limits)))

    @property
    def has_cartesian_limits(self) -> bool:
        return self.cartesian_limits is not None

    @property
    def has_joint_limits(self) -> bool:
        return bool(self.joint_limits)

    def joint(self, name: str) -> JointLimits | None:
        return self.joint_limits.get(name)

    def missing_joints(self, names: Iterable[str]) -> list[str]:
        return [n for n in names if n not in self.joint_limits]

    @classmethod
    def from_mapping(
        cls,
        config: Mapping[str, Any],
        defaults: Mapping[str, Any] | None = None,
    ) -> "LimitsContainer":
        """
        Build limits from a parsed configuration mapping.

        Expected shape::

            {
                "joint_limits": {
                    "joint_1": {"max_velocity": 1.0, "max_acceleration": 2.0, ...},
                    ...
                },
                "cartesian_limits": {
                    "max_trans_vel": 1.0, "max_trans_acc": 2.0,
                    "max_trans_dec": 2.0, "max_rot_vel": 1.57,
                },
            }

        Per-joint entries are merged over ``defaults`` (same keys as a joint
        entry), so a joint may override only what differs. A missing
        ``cartesian_limits`` section yields a container without Cartesian
        limits, which a circular generator refuses.
        """
        base = dict(defaults or {})
        joints: dict[str, JointLimits] = {}
        for name, entry in (config.get("joint_limits") or {}).items():
            merged = {**base, **dict(entry or {})}
            try:
                joints[name] = JointLimits(
                    max_velocity=merged["max_velocity"],
                    max_acceleration=merged["max_acceleration"],
                    max_deceleration=merged.get("max_deceleration"),
                    min_position=merged.get("min_position"),
                    max_position=merged.get("max_position"),
                )
            except KeyError as e:
                raise InvalidLimitsError(f"joint '{name}' is missing {e.args[0]}") from None
            except InvalidLimitsError as e:
                raise InvalidLimitsError(f"joint '{name}': {e.original_message}") from None

        cart_cfg = config.get("cartesian_limits")
        cart = None
        if cart_cfg:
            try:
                cart = CartesianLimits(
                    max_trans_vel=cart_cfg["max_trans_vel"],
                    max_trans_acc=cart_cfg["max_trans_acc"],
                    max_rot_vel=cart_cfg["max_rot_vel"],
                    max_trans_dec=cart_cfg.get("max_trans_dec"),
                )
            except KeyError as e:
                raise InvalidLimitsError(f"cartesian limits are missing {e.args[0]}") from None
        else:
            logger.debug("No cartesian limits configured")

        return cls(joints, cart)
