"""
Interaction Controller Module

Session state for the explorer and the transitions driven by input: two
normalized sliders, and pointer picking in the configuration-space panel.
State transitions are pure with respect to rendering; they only ask for a
redraw through the injected `request_redraw` callable.
"""

import logging
import math
from typing import Callable, Optional, Tuple

from .config import PICK_RADIUS_PX, SLIDER_MAX, SLIDER_MIN
from .kinematics import ForwardResult, Pos, RobotConfig, RobotDef, TwoLinkArm
from .viewport import AffineTransform
from .workspace_grid import WorkspaceGrid

logger = logging.getLogger(__name__)


def _clamp_ratio(r: float) -> float:
    return min(max(float(r), SLIDER_MIN), SLIDER_MAX)


def ratio_to_config(robot_def: RobotDef, r1: float, r2: float) -> RobotConfig:
    """
    Map two slider values in [0, 100] onto joint angles.

    Each joint maps linearly and independently: 0 -> q_min, 100 -> q_max.
    Values outside the slider range are clamped first.
    """
    span = SLIDER_MAX - SLIDER_MIN
    t1 = (_clamp_ratio(r1) - SLIDER_MIN) / span
    t2 = (_clamp_ratio(r2) - SLIDER_MIN) / span
    return RobotConfig(
        q1=robot_def.q1_min + t1 * (robot_def.q1_max - robot_def.q1_min),
        q2=robot_def.q2_min + t2 * (robot_def.q2_max - robot_def.q2_min),
    )


def config_to_ratio(robot_def: RobotDef, config: RobotConfig) -> Tuple[float, float]:
    """Inverse of ratio_to_config. A joint with q_min == q_max maps to 0."""
    def ratio(q, q_min, q_max):
        if q_max == q_min:
            return SLIDER_MIN
        t = (q - q_min) / (q_max - q_min)
        return _clamp_ratio(SLIDER_MIN + t * (SLIDER_MAX - SLIDER_MIN))

    return (ratio(config.q1, robot_def.q1_min, robot_def.q1_max),
            ratio(config.q2, robot_def.q2_min, robot_def.q2_max))


class ExplorerSession:
    """
    Interactive state of one explorer: configuration, slider mirror, pointer
    and drag state, plus the workspace coverage grid.

    Pointer positions are in the configuration-space panel's device space.
    """

    def __init__(self, arm: TwoLinkArm, grid: WorkspaceGrid,
                 config_space_transform: AffineTransform,
                 pick_radius: float = PICK_RADIUS_PX,
                 request_redraw: Optional[Callable[[], None]] = None,
                 initial_config: Optional[RobotConfig] = None):
        """
        Initialize session.

        Args:
            arm: Arm being explored
            grid: Workspace grid that accumulates visited cells
            config_space_transform: (q1, q2) -> device transform of the
                configuration-space panel
            pick_radius: Device-space radius of the pickable marker
            request_redraw: Called after every state change
            initial_config: Starting configuration (clamped); defaults to the
                slider midpoints
        """
        self.arm = arm
        self.grid = grid
        self.pick_radius = pick_radius
        self._request_redraw = request_redraw if request_redraw is not None else (lambda: None)
        self._cspace_transform = config_space_transform
        self._cspace_inverse = config_space_transform.invert()

        self.pointer: Optional[Pos] = None
        self.dragging = False
        self._hovered = False

        d = arm.robot_def
        if initial_config is None:
            mid = (SLIDER_MIN + SLIDER_MAX) / 2
            initial_config = ratio_to_config(d, mid, mid)
        elif not arm.is_valid_configuration(initial_config.q1, initial_config.q2):
            logger.warning("Initial config q1=%.4f q2=%.4f outside joint limits, clamping",
                           initial_config.q1, initial_config.q2)
        self.config = arm.clamp(initial_config.q1, initial_config.q2)
        self.slider_values = config_to_ratio(d, self.config)
        self.grid.mark_visited(self.forward_result().seg2)
        logger.info("Session started for %s at q1=%.3f q2=%.3f", arm, self.config.q1, self.config.q2)

    @property
    def robot_def(self) -> RobotDef:
        return self.arm.robot_def

    @property
    def config_space_transform(self) -> AffineTransform:
        return self._cspace_transform

    def forward_result(self) -> ForwardResult:
        """Segment endpoints of the current configuration."""
        return self.arm.forward(self.config)

    def _store_config(self, config: RobotConfig):
        self.config = config
        self.grid.mark_visited(self.forward_result().seg2)
        logger.debug("Config q1=%.4f q2=%.4f", config.q1, config.q2)

    # Slider mode

    def update_config(self, r1: float, r2: float) -> RobotConfig:
        """Apply normalized slider values and request a redraw."""
        self.slider_values = (_clamp_ratio(r1), _clamp_ratio(r2))
        self._store_config(ratio_to_config(self.robot_def, *self.slider_values))
        self._refresh_hover()
        self._request_redraw()
        return self.config

    def set_normalized_inputs_from_config(self) -> Tuple[float, float]:
        """Resynchronize the slider mirror from the current configuration."""
        self.slider_values = config_to_ratio(self.robot_def, self.config)
        return self.slider_values

    # Pointer-drag mode

    def pick(self, pos) -> RobotConfig:
        """Set the configuration from a device-space point in the C-space panel."""
        q1, q2 = self._cspace_inverse.apply(pos)
        self._store_config(self.arm.clamp(q1, q2))
        self.set_normalized_inputs_from_config()
        return self.config

    def on_pointer_down(self, pos) -> None:
        self.pointer = Pos(*pos)
        if not self.dragging:
            logger.debug("Drag started at %s", self.pointer)
        self.dragging = True
        self.pick(self.pointer)
        self._refresh_hover()
        self._request_redraw()

    def on_pointer_move(self, pos) -> None:
        self.pointer = Pos(*pos)
        if self.dragging:
            self.pick(self.pointer)
            self._refresh_hover()
            self._request_redraw()
        elif self._refresh_hover():
            self._request_redraw()

    def on_pointer_up(self, pos=None) -> None:
        if pos is not None:
            self.pointer = Pos(*pos)
        if self.dragging:
            logger.debug("Drag ended at %s", self.pointer)
        self.dragging = False
        self._refresh_hover()
        self._request_redraw()

    def on_pointer_leave(self) -> None:
        """Forget the pointer when it leaves the panel. An active drag continues."""
        if self.dragging:
            return
        self.pointer = None
        if self._refresh_hover():
            self._request_redraw()

    # Hit-testing

    def marker_position(self) -> Pos:
        """Device-space centre of the current-configuration marker."""
        return self._cspace_transform.apply(self.config.as_tuple())

    def is_marker_hovered(self) -> bool:
        if self.pointer is None:
            return False
        cx, cy = self.marker_position()
        return math.hypot(self.pointer.x - cx, self.pointer.y - cy) <= self.pick_radius

    @property
    def hovered(self) -> bool:
        return self._hovered

    def _refresh_hover(self) -> bool:
        """Recompute hover state; return True if it changed."""
        hovered = self.is_marker_hovered()
        changed = hovered != self._hovered
        self._hovered = hovered
        return changed
