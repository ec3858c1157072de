"""
Two-Link Arm Explorer

Interactive visualization of a 2-link planar robot arm: forward kinematics,
a pickable configuration-space view, and a workspace coverage grid built up
as the end-effector moves.
"""

from .errors import TwoLinkExplorerError, ConfigurationBoundsError, SingularTransformError
from .kinematics import Pos, ForwardResult, RobotDef, RobotConfig, TwoLinkArm, forward, clamp_config
from .viewport import AffineTransform, robot_view, config_space_view, bounds_view
from .workspace_grid import WorkspaceGrid
from .controller import ExplorerSession, ratio_to_config, config_to_ratio
from .scheduler import RedrawScheduler

__version__ = "0.1.0"

__all__ = [
    "TwoLinkExplorerError",
    "ConfigurationBoundsError",
    "SingularTransformError",
    "Pos",
    "ForwardResult",
    "RobotDef",
    "RobotConfig",
    "TwoLinkArm",
    "forward",
    "clamp_config",
    "AffineTransform",
    "robot_view",
    "config_space_view",
    "bounds_view",
    "WorkspaceGrid",
    "ExplorerSession",
    "ratio_to_config",
    "config_to_ratio",
    "RedrawScheduler",
]
