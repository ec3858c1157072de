"""
Workspace Grid Module

Fixed-resolution discretization of the plane reachable by a 2R planar arm,
with a visited map that accumulates as the end-effector sweeps around. The
grid is append-only for the lifetime of a session: cells are marked, never
cleared.
"""

import logging
import math
from typing import Iterator, Optional, Tuple

import numpy as np

from .errors import ConfigurationBoundsError
from .kinematics import RobotConfig, RobotDef, TwoLinkArm

logger = logging.getLogger(__name__)


class WorkspaceGrid:
    """Coverage map of visited end-effector cells."""

    def __init__(self, min_x: float, max_x: float, min_y: float, max_y: float,
                 cols: int = 40, rows: int = 20):
        """
        Initialize an empty grid.

        Args:
            min_x, max_x: Horizontal bounds (world units)
            min_y, max_y: Vertical bounds (world units)
            cols: Number of columns
            rows: Number of rows

        Raises:
            ConfigurationBoundsError: if the resolution is not positive or the
                bounds enclose no area
        """
        if cols <= 0 or rows <= 0:
            raise ConfigurationBoundsError(f"Grid resolution must be positive, got {cols}x{rows}")
        if not (min_x < max_x and min_y < max_y):
            raise ConfigurationBoundsError(
                f"Grid bounds are empty: [{min_x}, {max_x}] x [{min_y}, {max_y}]"
            )
        self.min_x = float(min_x)
        self.max_x = float(max_x)
        self.min_y = float(min_y)
        self.max_y = float(max_y)
        self.cols = int(cols)
        self.rows = int(rows)
        self.tick_x = (self.max_x - self.min_x) / self.cols
        self.tick_y = (self.max_y - self.min_y) / self.rows
        self._visited = np.zeros((self.rows, self.cols), dtype=bool)

    @classmethod
    def from_robot_def(cls, robot_def: RobotDef, cols: int = 40, rows: int = 20,
                       base=(0.0, 0.0),
                       allow_negative_reach: Optional[bool] = None) -> 'WorkspaceGrid':
        """
        Grid covering everything the arm can reach from `base`.

        Bounds come from the combined link length: x spans the full reach on
        both sides of the base, y spans from the base upward, or both ways
        when `allow_negative_reach` is set. Left as None, y extends below the
        base whenever the joint limits let the arm point downward.
        """
        if allow_negative_reach is None:
            allow_negative_reach = robot_def.reaches_below_base()
        reach = robot_def.reach
        bx, by = base
        min_y = by - reach if allow_negative_reach else by
        return cls(bx - reach, bx + reach, min_y, by + reach, cols=cols, rows=rows)

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        return (self.min_x, self.max_x, self.min_y, self.max_y)

    @property
    def visited(self) -> np.ndarray:
        """Read-only view of the visited map, indexed [row, col]."""
        view = self._visited.view()
        view.setflags(write=False)
        return view

    def bucket(self, point) -> Optional[Tuple[int, int]]:
        """
        Map a world point to its (row, col) cell.

        Returns None for points outside the bounds. Points on the maximum
        edge resolve to the last column/row.
        """
        x, y = point
        if not (self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y):
            return None
        col = min(int(math.floor((x - self.min_x) / self.tick_x)), self.cols - 1)
        row = min(int(math.floor((y - self.min_y) / self.tick_y)), self.rows - 1)
        return row, col

    def mark_visited(self, point) -> bool:
        """
        Mark the cell containing `point` as visited.

        Out-of-range points are ignored. Marking an already visited cell has
        no effect.

        Returns:
            True if a previously unvisited cell was marked
        """
        cell = self.bucket(point)
        if cell is None or self._visited[cell]:
            return False
        self._visited[cell] = True
        logger.debug("Visited cell row=%d col=%d", *cell)
        return True

    def is_visited(self, row: int, col: int) -> bool:
        return bool(self._visited[row, col])

    @property
    def visited_count(self) -> int:
        return int(np.count_nonzero(self._visited))

    def coverage(self) -> float:
        """Fraction of cells visited so far."""
        return self.visited_count / self._visited.size

    def visited_cells(self) -> Iterator[Tuple[int, int]]:
        for row, col in np.argwhere(self._visited):
            yield int(row), int(col)

    def cell_bounds(self, row: int, col: int) -> Tuple[float, float, float, float]:
        """World-space (x0, y0, x1, y1) of a cell."""
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError(f"Cell ({row}, {col}) outside {self.rows}x{self.cols} grid")
        x0 = self.min_x + col * self.tick_x
        y0 = self.min_y + row * self.tick_y
        return (x0, y0, x0 + self.tick_x, y0 + self.tick_y)

    def mark_sweep(self, arm: TwoLinkArm, resolution: int = 100) -> int:
        """
        Mark every cell reached by sampling the arm's joint-limit rectangle.

        Args:
            arm: Arm whose end-effector positions are sampled
            resolution: Samples per joint

        Returns:
            Number of newly visited cells
        """
        (q1_min, q1_max), (q2_min, q2_max) = arm.get_joint_limits()
        theta1_vals = np.linspace(q1_min, q1_max, resolution)
        theta2_vals = np.linspace(q2_min, q2_max, resolution)

        newly_visited = 0
        for theta1 in theta1_vals:
            for theta2 in theta2_vals:
                seg2 = arm.forward(RobotConfig(float(theta1), float(theta2))).seg2
                if self.mark_visited(seg2):
                    newly_visited += 1
        logger.info("Sweep of %s marked %d new cells (coverage %.1f%%)",
                    arm.name, newly_visited, 100.0 * self.coverage())
        return newly_visited

    def __repr__(self):
        return (f"WorkspaceGrid(x=[{self.min_x:g}, {self.max_x:g}], y=[{self.min_y:g}, {self.max_y:g}], "
                f"{self.cols}x{self.rows}, visited={self.visited_count})")
