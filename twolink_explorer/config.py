"""
Explorer Configuration Module

Single source of truth for the default robot, grid and view parameters.
Import this module everywhere instead of hardcoding values.
"""

import numpy as np

from .kinematics import RobotDef

# Link lengths in world units
LINK1_LENGTH = 20.0
LINK2_LENGTH = 20.0

# Robot base position in world coordinates (x, y)
ROBOT_BASE_POSITION = (0.0, 0.0)

# Joint limits: (min, max) for each joint in radians
JOINT_LIMITS = [
    (0.0, np.pi),               # Joint 1 (q1)
    (-np.pi / 2, np.pi / 2),    # Joint 2 (q2)
]

# Workspace grid resolution (independent of the physical extent)
GRID_COLS = 40
GRID_ROWS = 20

# Normalized slider range
SLIDER_MIN = 0.0
SLIDER_MAX = 100.0

# Robot view: the panel is VIEW_UNITS world units wide and the base sits
# BASE_MARGIN_UNITS above the bottom edge
VIEW_UNITS = 100.0
BASE_MARGIN_UNITS = 10.0

# Robot drawing, in world units
BASE_WIDTH = 20.0
BASE_HATCH_COUNT = 5
JOINT_DOT_RADIUS = 2.5
LINK_LINE_WIDTH = 1.0

# Configuration-space view
CSPACE_FILL = 0.9
MARKER_RADIUS_PX = 6.0
PICK_RADIUS_PX = 10.0

# Panel size in device pixels (width, height)
PANEL_SIZE = (400, 300)

# Frame scheduling
FRAME_INTERVAL_MS = 16

# Colours
ARM_COLOR = '#222222'
CSPACE_COLOR = '#cfe3f7'
MARKER_COLOR = '#1f77b4'
MARKER_HOVER_COLOR = '#d62728'
GRID_LINE_COLOR = '#dddddd'
VISITED_COLOR = '#2ca02c'


def default_robot_def():
    """Build the default RobotDef from the constants above."""
    (q1_min, q1_max), (q2_min, q2_max) = JOINT_LIMITS
    return RobotDef(
        l1=LINK1_LENGTH,
        l2=LINK2_LENGTH,
        q1_min=q1_min,
        q1_max=q1_max,
        q2_min=q2_min,
        q2_max=q2_max,
    )
