"""
Interactive Explorer

Matplotlib front-end wiring two joint sliders and pointer picking in the
configuration-space panel to an ExplorerSession, with redraws coalesced to
one per frame.
"""

import argparse
import logging
from typing import Optional

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.widgets import Slider

from . import config as cfg
from .controller import ExplorerSession
from .errors import ConfigurationBoundsError
from .kinematics import Pos, RobotDef, TwoLinkArm
from .renderer import MatplotlibCanvas, draw_config_space, draw_robot, draw_workspace_grid
from .scheduler import RedrawScheduler
from .viewport import bounds_view, config_space_view, robot_view
from .workspace_grid import WorkspaceGrid

logger = logging.getLogger(__name__)


class ArmExplorer:
    """Three-panel figure: arm, configuration space and workspace coverage."""

    def __init__(self, robot_def: Optional[RobotDef] = None, base=cfg.ROBOT_BASE_POSITION,
                 cols: int = cfg.GRID_COLS, rows: int = cfg.GRID_ROWS,
                 allow_negative_reach: Optional[bool] = None, panel_size=cfg.PANEL_SIZE,
                 sweep_resolution: int = 0):
        """
        Initialize explorer.

        Args:
            robot_def: Link lengths and joint limits (defaults to config)
            base: Base position in world coordinates
            cols, rows: Workspace grid resolution
            allow_negative_reach: Extend the grid below the base (None decides
                from the joint limits)
            panel_size: (width, height) of each panel in device pixels
            sweep_resolution: If positive, pre-mark the grid by sampling the
                joint limits at this many values per joint
        """
        if robot_def is None:
            robot_def = cfg.default_robot_def()
        width, height = panel_size
        self.arm = TwoLinkArm(robot_def, base=base, name="Arm")
        self.grid = WorkspaceGrid.from_robot_def(robot_def, cols=cols, rows=rows, base=base,
                                                 allow_negative_reach=allow_negative_reach)
        if sweep_resolution > 0:
            self.grid.mark_sweep(self.arm, sweep_resolution)

        self.robot_transform = robot_view(width, height, cfg.VIEW_UNITS, cfg.BASE_MARGIN_UNITS, base)
        self.cspace_transform = config_space_view(width, height, robot_def, cfg.CSPACE_FILL)
        self.grid_transform = bounds_view(width, height, *self.grid.bounds)

        self.fig = plt.figure(figsize=(13, 5))
        self.robot_ax = self.fig.add_axes([0.02, 0.25, 0.30, 0.65])
        self.cspace_ax = self.fig.add_axes([0.35, 0.25, 0.30, 0.65])
        self.grid_ax = self.fig.add_axes([0.68, 0.25, 0.30, 0.65])
        self.robot_ax.set_title('Robot')
        self.cspace_ax.set_title('Configuration space (q1, q2)')

        self.robot_canvas = MatplotlibCanvas(self.robot_ax, width, height)
        self.cspace_canvas = MatplotlibCanvas(self.cspace_ax, width, height)
        self.grid_canvas = MatplotlibCanvas(self.grid_ax, width, height)

        self._timer = None
        self.scheduler = RedrawScheduler(self.draw, self._call_later)
        self.session = ExplorerSession(self.arm, self.grid, self.cspace_transform,
                                       pick_radius=cfg.PICK_RADIUS_PX,
                                       request_redraw=self.scheduler.request_redraw)

        r1, r2 = self.session.slider_values
        self.q1_slider = Slider(self.fig.add_axes([0.15, 0.10, 0.70, 0.04]), 'q1',
                                cfg.SLIDER_MIN, cfg.SLIDER_MAX, valinit=r1)
        self.q2_slider = Slider(self.fig.add_axes([0.15, 0.04, 0.70, 0.04]), 'q2',
                                cfg.SLIDER_MIN, cfg.SLIDER_MAX, valinit=r2)
        self._syncing_sliders = False
        self.q1_slider.on_changed(self._on_slider)
        self.q2_slider.on_changed(self._on_slider)

        canvas = self.fig.canvas
        canvas.mpl_connect('button_press_event', self._on_press)
        canvas.mpl_connect('motion_notify_event', self._on_motion)
        canvas.mpl_connect('button_release_event', self._on_release)

        self.draw()

    def _call_later(self, callback):
        timer = self.fig.canvas.new_timer(interval=cfg.FRAME_INTERVAL_MS)
        timer.single_shot = True
        timer.add_callback(callback)
        timer.start()
        self._timer = timer

    def draw(self):
        """Render one frame from the current session state."""
        session = self.session
        draw_robot(self.robot_canvas, self.arm, session.config, self.robot_transform)
        draw_config_space(self.cspace_canvas, self.arm.robot_def, session.config,
                          self.cspace_transform, hovered=session.hovered)
        draw_workspace_grid(self.grid_canvas, self.grid, self.grid_transform,
                            end_effector=session.forward_result().seg2)
        q1, q2 = session.config.as_tuple()
        self.cspace_ax.set_xlabel(f'q1={np.degrees(q1):.1f}°  q2={np.degrees(q2):.1f}°')
        self.grid_ax.set_title(f'Workspace coverage {100.0 * self.grid.coverage():.1f}%')
        self.fig.canvas.draw_idle()

    def _sync_sliders(self):
        """Mirror the session's slider values onto the widgets without feeding back."""
        self._syncing_sliders = True
        try:
            r1, r2 = self.session.slider_values
            self.q1_slider.set_val(r1)
            self.q2_slider.set_val(r2)
        finally:
            self._syncing_sliders = False

    def _on_slider(self, _val):
        if self._syncing_sliders:
            return
        self.session.update_config(self.q1_slider.val, self.q2_slider.val)

    def _device_pos(self, event) -> Optional[Pos]:
        """Pointer position in the configuration-space panel's device space."""
        if event.x is None or event.y is None:
            return None
        x, y = self.cspace_ax.transData.inverted().transform((event.x, event.y))
        return Pos(float(x), float(y))

    def _on_press(self, event):
        if event.inaxes is not self.cspace_ax or event.button != 1:
            return
        pos = self._device_pos(event)
        if pos is None:
            return
        self.session.on_pointer_down(pos)
        self._sync_sliders()

    def _on_motion(self, event):
        pos = self._device_pos(event)
        if pos is None:
            return
        if self.session.dragging:
            self.session.on_pointer_move(pos)
            self._sync_sliders()
        elif event.inaxes is self.cspace_ax:
            self.session.on_pointer_move(pos)
        else:
            self.session.on_pointer_leave()

    def _on_release(self, event):
        if not self.session.dragging:
            return
        self.session.on_pointer_up(self._device_pos(event))


def build_parser() -> argparse.ArgumentParser:
    (q1_min, q1_max), (q2_min, q2_max) = cfg.JOINT_LIMITS
    parser = argparse.ArgumentParser(
        prog='twolink-explorer',
        description='Interactively explore the kinematics of a 2-link planar arm.',
    )
    parser.add_argument('--l1', type=float, default=cfg.LINK1_LENGTH, help='first link length')
    parser.add_argument('--l2', type=float, default=cfg.LINK2_LENGTH, help='second link length')
    parser.add_argument('--q1-min', type=float, default=np.degrees(q1_min), help='q1 lower limit (degrees)')
    parser.add_argument('--q1-max', type=float, default=np.degrees(q1_max), help='q1 upper limit (degrees)')
    parser.add_argument('--q2-min', type=float, default=np.degrees(q2_min), help='q2 lower limit (degrees)')
    parser.add_argument('--q2-max', type=float, default=np.degrees(q2_max), help='q2 upper limit (degrees)')
    parser.add_argument('--cols', type=int, default=cfg.GRID_COLS, help='workspace grid columns')
    parser.add_argument('--rows', type=int, default=cfg.GRID_ROWS, help='workspace grid rows')
    reach = parser.add_mutually_exclusive_group()
    reach.add_argument('--negative-reach', dest='negative_reach', action='store_const', const=True,
                       help='always extend the workspace grid below the base')
    reach.add_argument('--upper-half', dest='negative_reach', action='store_const', const=False,
                       help='limit the workspace grid to the half-plane above the base')
    parser.set_defaults(negative_reach=None)
    parser.add_argument('--sweep', type=int, default=0, metavar='N',
                        help='pre-mark the grid by sampling N values per joint')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S',
    )

    try:
        robot_def = RobotDef(
            l1=args.l1,
            l2=args.l2,
            q1_min=np.radians(args.q1_min),
            q1_max=np.radians(args.q1_max),
            q2_min=np.radians(args.q2_min),
            q2_max=np.radians(args.q2_max),
        )
        explorer = ArmExplorer(robot_def, cols=args.cols, rows=args.rows,
                               allow_negative_reach=args.negative_reach,
                               sweep_resolution=args.sweep)
    except ConfigurationBoundsError as e:
        logger.error("Invalid setup: %s", e)
        parser.error(str(e))

    logger.info("Explorer ready: %s, grid %s", explorer.arm, explorer.grid)
    plt.show()
    return explorer


if __name__ == '__main__':
    main()
