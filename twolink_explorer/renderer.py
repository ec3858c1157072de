"""
Renderer Module

Draw primitives behind an abstract Canvas, a matplotlib implementation, and
the three explorer panels: the arm, the configuration space with its
pickable marker, and the workspace coverage grid.

Primitives take logical coordinates which the canvas maps through its
current transform; line widths and radii scale with the transform.
"""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np
from matplotlib.lines import Line2D
from matplotlib.patches import Circle, Rectangle

from . import config as cfg
from .kinematics import Pos, RobotConfig, RobotDef, TwoLinkArm
from .viewport import AffineTransform
from .workspace_grid import WorkspaceGrid


class Canvas(ABC):
    """Abstract 2D drawing surface in device coordinates."""

    def __init__(self):
        self.transform = AffineTransform.identity()
        self.line_width = 1.0
        self.color = 'black'

    def set_transform(self, transform: AffineTransform):
        self.transform = transform

    def set_line_width(self, width: float):
        """Line width in logical units."""
        self.line_width = width

    def set_color(self, color):
        self.color = color

    def reset(self):
        self.transform = AffineTransform.identity()
        self.line_width = 1.0
        self.color = 'black'

    @abstractmethod
    def clear(self):
        """Erase the surface and reset transform, width and colour."""
        pass

    @abstractmethod
    def line(self, start, end):
        pass

    @abstractmethod
    def circle(self, center, radius: float, filled: bool = True):
        pass

    @abstractmethod
    def rect(self, x0: float, y0: float, x1: float, y1: float, filled: bool = True):
        """Axis-aligned rectangle between two logical corners."""
        pass


class MatplotlibCanvas(Canvas):
    """Canvas backed by a matplotlib Axes whose data limits are the panel's pixels."""

    def __init__(self, ax, width: float, height: float):
        """
        Args:
            ax: Matplotlib axes object
            width: Panel width in device pixels
            height: Panel height in device pixels
        """
        super().__init__()
        self.ax = ax
        self.width = width
        self.height = height
        self._setup_axes()

    def _setup_axes(self):
        self.ax.set_xlim(0, self.width)
        self.ax.set_ylim(self.height, 0)
        self.ax.set_aspect('equal')
        self.ax.set_xticks([])
        self.ax.set_yticks([])

    def _points_per_pixel(self) -> float:
        extent = self.ax.get_window_extent()
        return (extent.width / self.width) * 72.0 / self.ax.figure.dpi

    def _device_width(self) -> float:
        return self.line_width * self.transform.scale_factor * self._points_per_pixel()

    def clear(self):
        for artist in list(self.ax.lines) + list(self.ax.patches):
            artist.remove()
        self._setup_axes()
        self.reset()

    def line(self, start, end):
        d = self.transform.apply_many([start, end])
        self.ax.add_line(Line2D(d[:, 0], d[:, 1], linewidth=self._device_width(),
                                color=self.color, solid_capstyle='round'))

    def circle(self, center, radius: float, filled: bool = True):
        c = self.transform.apply(center)
        r = radius * self.transform.scale_factor
        if filled:
            patch = Circle(c, r, facecolor=self.color, edgecolor='none')
        else:
            patch = Circle(c, r, fill=False, edgecolor=self.color, linewidth=self._device_width())
        self.ax.add_patch(patch)

    def rect(self, x0: float, y0: float, x1: float, y1: float, filled: bool = True):
        d = self.transform.apply_many([(x0, y0), (x1, y1)])
        left, top = d.min(axis=0)
        w, h = np.abs(d[1] - d[0])
        if filled:
            patch = Rectangle((left, top), w, h, facecolor=self.color, edgecolor='none')
        else:
            patch = Rectangle((left, top), w, h, fill=False, edgecolor=self.color,
                              linewidth=self._device_width())
        self.ax.add_patch(patch)


def draw_robot(canvas: Canvas, arm: TwoLinkArm, config: RobotConfig, transform: AffineTransform):
    """Draw the base with its hatching, both links and the three joint dots."""
    canvas.clear()
    canvas.set_transform(transform)
    canvas.set_color(cfg.ARM_COLOR)
    canvas.set_line_width(cfg.LINK_LINE_WIDTH)

    base = arm.base
    base_start_x = base.x - cfg.BASE_WIDTH / 2
    base_end_x = base.x + cfg.BASE_WIDTH / 2
    canvas.line((base_start_x, base.y), (base_end_x, base.y))

    # Hatch strokes under the base
    hatch = cfg.BASE_WIDTH / 6
    for i in range(cfg.BASE_HATCH_COUNT + 1):
        x = base_start_x + i * cfg.BASE_WIDTH / cfg.BASE_HATCH_COUNT
        canvas.line((x, base.y), (x - hatch, base.y - hatch))

    seg1, seg2 = arm.forward(config)
    canvas.line(base, seg1)
    canvas.line(seg1, seg2)

    for joint in (base, seg1, seg2):
        canvas.circle(joint, cfg.JOINT_DOT_RADIUS, filled=True)


def draw_config_space(canvas: Canvas, robot_def: RobotDef, config: RobotConfig,
                      transform: AffineTransform, hovered: bool = False,
                      marker_radius: float = cfg.MARKER_RADIUS_PX):
    """
    Draw the joint-limit rectangle, the q1/q2 axes and the current-config marker.

    The marker is drawn in device space so its size does not depend on the
    transform's scale.
    """
    canvas.clear()
    canvas.set_transform(transform)
    canvas.set_color(cfg.CSPACE_COLOR)
    canvas.rect(robot_def.q1_min, robot_def.q2_min, robot_def.q1_max, robot_def.q2_max)

    canvas.set_color(cfg.GRID_LINE_COLOR)
    canvas.set_line_width(1.0 / transform.scale_factor)
    canvas.line((min(robot_def.q1_min, 0.0), 0.0), (max(robot_def.q1_max, 0.0), 0.0))
    canvas.line((0.0, min(robot_def.q2_min, 0.0)), (0.0, max(robot_def.q2_max, 0.0)))

    canvas.set_transform(AffineTransform.identity())
    canvas.set_color(cfg.MARKER_HOVER_COLOR if hovered else cfg.MARKER_COLOR)
    canvas.circle(transform.apply(config.as_tuple()), marker_radius, filled=True)


def draw_workspace_grid(canvas: Canvas, grid: WorkspaceGrid, transform: AffineTransform,
                        end_effector: Optional[Pos] = None):
    """Draw visited cells, grid lines and optionally the current end-effector."""
    canvas.clear()
    canvas.set_transform(transform)

    canvas.set_color(cfg.VISITED_COLOR)
    for row, col in grid.visited_cells():
        canvas.rect(*grid.cell_bounds(row, col))

    canvas.set_color(cfg.GRID_LINE_COLOR)
    canvas.set_line_width(1.0 / transform.scale_factor)
    for col in range(grid.cols + 1):
        x = grid.min_x + col * grid.tick_x
        canvas.line((x, grid.min_y), (x, grid.max_y))
    for row in range(grid.rows + 1):
        y = grid.min_y + row * grid.tick_y
        canvas.line((grid.min_x, y), (grid.max_x, y))

    if end_effector is not None:
        canvas.set_color(cfg.ARM_COLOR)
        canvas.circle(end_effector, min(grid.tick_x, grid.tick_y) / 2, filled=True)
