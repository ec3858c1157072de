"""
Two-Link Planar Arm Kinematics

Geometric definition of a 2R (2 revolute joint) planar arm, its current
configuration, and forward kinematics for both segment endpoints.
"""

import math
from dataclasses import dataclass
from typing import List, NamedTuple, Tuple

from .errors import ConfigurationBoundsError


class Pos(NamedTuple):
    """Cartesian point. Callers track which space (world, C-space, device) it is in."""
    x: float
    y: float


class ForwardResult(NamedTuple):
    """Joint-2 position (seg1) and end-effector position (seg2)."""
    seg1: Pos
    seg2: Pos


@dataclass(frozen=True)
class RobotDef:
    """
    Link lengths and joint limits of a 2-link arm.

    Args:
        l1: Length of first link (must be positive)
        l2: Length of second link (must be positive)
        q1_min, q1_max: Bounds of the first joint angle (radians)
        q2_min, q2_max: Bounds of the second joint angle (radians)

    Raises:
        ConfigurationBoundsError: if a length is not positive, a bound is not
            finite, or a joint minimum exceeds its maximum
    """
    l1: float
    l2: float
    q1_min: float
    q1_max: float
    q2_min: float
    q2_max: float

    def __post_init__(self):
        values = (self.l1, self.l2, self.q1_min, self.q1_max, self.q2_min, self.q2_max)
        if not all(math.isfinite(v) for v in values):
            raise ConfigurationBoundsError(f"Robot definition must be finite, got {values}")
        if self.l1 <= 0 or self.l2 <= 0:
            raise ConfigurationBoundsError(
                f"Link lengths must be positive, got l1={self.l1}, l2={self.l2}"
            )
        if self.q1_min > self.q1_max:
            raise ConfigurationBoundsError(
                f"q1 limits inverted: q1_min={self.q1_min} > q1_max={self.q1_max}"
            )
        if self.q2_min > self.q2_max:
            raise ConfigurationBoundsError(
                f"q2 limits inverted: q2_min={self.q2_min} > q2_max={self.q2_max}"
            )

    @property
    def reach(self) -> float:
        """Combined link length, the outer reachability bound."""
        return self.l1 + self.l2

    def reaches_below_base(self) -> bool:
        """
        Whether some configuration within the limits can put a link below the base.

        A link points downward when its absolute angle has a negative sine.
        Link 1 sweeps [q1_min, q1_max] and link 2 sweeps
        [q1_min + q2_min, q1_max + q2_max], so checking both ranges bounds
        the end-effector from below. The check can report True for a
        definition whose end-effector never actually crosses the base line,
        never the reverse.
        """
        return (_sine_dips_negative(self.q1_min, self.q1_max) or
                _sine_dips_negative(self.q1_min + self.q2_min, self.q1_max + self.q2_max))


def _sine_dips_negative(lo: float, hi: float) -> bool:
    """True if sin(a) < 0 for some a in [lo, hi]."""
    if hi - lo >= 2 * math.pi:
        return True
    start = lo % (2 * math.pi)
    return start + (hi - lo) > math.pi


@dataclass
class RobotConfig:
    """Current joint angles (radians)."""
    q1: float = 0.0
    q2: float = 0.0

    def as_tuple(self) -> Tuple[float, float]:
        return (self.q1, self.q2)


def forward(robot_def: RobotDef, config: RobotConfig, base_pos: Pos = Pos(0.0, 0.0)) -> ForwardResult:
    """
    Compute forward kinematics for both segment endpoints.

    Accepts any real angles; joint limits are not enforced here.

    Args:
        robot_def: Link lengths
        config: Joint angles
        base_pos: Position of the first joint in world coordinates

    Returns:
        ForwardResult with the joint-2 position and the end-effector position
    """
    q1, q2 = config.q1, config.q2
    bx, by = base_pos
    seg1 = Pos(bx + robot_def.l1 * math.cos(q1),
               by + robot_def.l1 * math.sin(q1))
    seg2 = Pos(seg1.x + robot_def.l2 * math.cos(q1 + q2),
               seg1.y + robot_def.l2 * math.sin(q1 + q2))
    return ForwardResult(seg1, seg2)


def clamp_config(robot_def: RobotDef, q1: float, q2: float) -> RobotConfig:
    """Clamp each joint angle independently into its limits."""
    return RobotConfig(
        q1=min(max(q1, robot_def.q1_min), robot_def.q1_max),
        q2=min(max(q2, robot_def.q2_min), robot_def.q2_max),
    )


class TwoLinkArm:
    """2-link planar robot arm with revolute joints mounted at a fixed base."""

    def __init__(self, robot_def: RobotDef, base=(0.0, 0.0), name="Arm"):
        """
        Initialize 2-link planar arm.

        Args:
            robot_def: Link lengths and joint limits
            base: Base position in world coordinates
            name: Name identifier for the arm
        """
        self.robot_def = robot_def
        self.base = Pos(float(base[0]), float(base[1]))
        self.name = name

    @property
    def L1(self) -> float:
        return self.robot_def.l1

    @property
    def L2(self) -> float:
        return self.robot_def.l2

    @property
    def max_reach(self) -> float:
        return self.robot_def.reach

    def forward(self, config: RobotConfig) -> ForwardResult:
        """Segment endpoints for a configuration, in world coordinates."""
        return forward(self.robot_def, config, self.base)

    def get_joint_limits(self) -> List[Tuple[float, float]]:
        """
        Get joint angle limits.

        Returns:
            List of (min, max) tuples for each joint.
        """
        d = self.robot_def
        return [(d.q1_min, d.q1_max), (d.q2_min, d.q2_max)]

    def clamp(self, q1: float, q2: float) -> RobotConfig:
        return clamp_config(self.robot_def, q1, q2)

    def is_valid_configuration(self, q1: float, q2: float) -> bool:
        """Check that both joint angles are within their limits."""
        (q1_min, q1_max), (q2_min, q2_max) = self.get_joint_limits()
        return q1_min <= q1 <= q1_max and q2_min <= q2 <= q2_max

    def __repr__(self):
        return f"{self.name}(L1={self.L1}, L2={self.L2})"
