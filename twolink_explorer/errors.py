"""
Errors Module

Exceptions raised while building a two-link explorer session. All failures
are local and synchronous: bad robot definitions are rejected when they are
created, and transforms refuse to invert when they collapse an axis.
"""


class TwoLinkExplorerError(Exception):
    """Base class for all explorer errors."""


class ConfigurationBoundsError(TwoLinkExplorerError, ValueError):
    """Raised when a robot definition or grid has inconsistent bounds."""


class SingularTransformError(TwoLinkExplorerError, ArithmeticError):
    """Raised when inverting a transform whose linear part is singular."""
