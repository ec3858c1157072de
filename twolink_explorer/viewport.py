"""
Viewport Transform Module

Invertible 2D affine transforms between a logical coordinate space (world
Cartesian coordinates or the (q1, q2) configuration plane) and a device
space (panel pixels, y pointing down). The same transform is used to render
and, inverted, to turn a pointer position back into logical coordinates.
"""

from typing import Tuple, Union

import numpy as np
from matplotlib.transforms import Affine2D

from .errors import SingularTransformError
from .kinematics import Pos, RobotDef

Scale = Union[float, Tuple[float, float]]


class AffineTransform:
    """Immutable 3x3 homogeneous transform mapping logical -> device."""

    __slots__ = ('_matrix',)

    def __init__(self, matrix):
        m = np.array(matrix, dtype=np.float64)
        if m.shape == (2, 3):
            m = np.vstack([m, [0.0, 0.0, 1.0]])
        if m.shape != (3, 3):
            raise ValueError(f"Expected a 2x3 or 3x3 matrix, got shape {m.shape}")
        m.setflags(write=False)
        self._matrix = m

    @classmethod
    def identity(cls) -> 'AffineTransform':
        return cls(np.eye(3))

    @classmethod
    def from_scale_translate(cls, scale: Scale, translate=(0.0, 0.0),
                             flip_y: bool = False) -> 'AffineTransform':
        """
        Build a transform that scales, optionally flips y, then translates.

        Args:
            scale: Uniform scale factor, or (sx, sy) per axis
            translate: Device position of the logical origin
            flip_y: Map logical y-up onto device y-down
        """
        if np.ndim(scale) == 0:
            sx = sy = float(scale)
        else:
            sx, sy = float(scale[0]), float(scale[1])
        if flip_y:
            sy = -sy
        tx, ty = translate
        return cls([[sx, 0.0, tx],
                    [0.0, sy, ty]])

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix

    @property
    def scale_factor(self) -> float:
        """Length scale of the linear part (sqrt of |det|), for radii and widths."""
        return float(np.sqrt(abs(np.linalg.det(self._matrix[:2, :2]))))

    def apply(self, p) -> Pos:
        """Map a logical point to device space."""
        x, y = p
        m = self._matrix
        return Pos(float(m[0, 0] * x + m[0, 1] * y + m[0, 2]),
                   float(m[1, 0] * x + m[1, 1] * y + m[1, 2]))

    def apply_many(self, points) -> np.ndarray:
        """Map an (N, 2) array of logical points to device space."""
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        return pts @ self._matrix[:2, :2].T + self._matrix[:2, 2]

    def invert(self) -> 'AffineTransform':
        """
        Exact inverse of this transform.

        Raises:
            SingularTransformError: if the linear part is singular (zero scale)
        """
        linear = self._matrix[:2, :2]
        det = float(np.linalg.det(linear))
        if det == 0.0 or not np.isfinite(det):
            raise SingularTransformError(f"Cannot invert transform with determinant {det}")
        inv_linear = np.linalg.inv(linear)
        inv_translate = -inv_linear @ self._matrix[:2, 2]
        return AffineTransform(np.hstack([inv_linear, inv_translate[:, None]]))

    def unapply(self, p) -> Pos:
        """Map a device point back to logical space."""
        return self.invert().apply(p)

    def compose(self, other: 'AffineTransform') -> 'AffineTransform':
        """Transform that applies `other` first, then self."""
        return AffineTransform(self._matrix @ other._matrix)

    def __matmul__(self, other: 'AffineTransform') -> 'AffineTransform':
        return self.compose(other)

    def to_matplotlib(self) -> Affine2D:
        return Affine2D(self._matrix.copy())

    def __eq__(self, other):
        if not isinstance(other, AffineTransform):
            return NotImplemented
        return np.array_equal(self._matrix, other._matrix)

    def __hash__(self):
        return hash(self._matrix.tobytes())

    def __repr__(self):
        (a, b, tx), (c, d, ty) = self._matrix[:2].tolist()
        return f"AffineTransform([[{a:g}, {b:g}, {tx:g}], [{c:g}, {d:g}, {ty:g}]])"


def robot_view(width: float, height: float, units: float = 100.0,
               base_margin: float = 10.0, base=(0.0, 0.0)) -> AffineTransform:
    """
    World -> device transform for drawing the arm.

    The panel spans `units` world units horizontally, y is flipped, and the
    robot base lands at the bottom centre, `base_margin` world units above
    the lower edge.
    """
    s = width / units
    bx, by = base
    return AffineTransform.from_scale_translate(
        s,
        translate=(width / 2 - s * bx, height - base_margin * s + s * by),
        flip_y=True,
    )


def config_space_view(width: float, height: float, robot_def: RobotDef,
                      fill: float = 0.9) -> AffineTransform:
    """
    (q1, q2) -> device transform for the configuration-space panel.

    The origin sits at the panel centre and y is flipped so increasing q2
    draws upward. The uniform scale is the largest that keeps the whole
    joint-limit rectangle inside `fill` of the panel.
    """
    half_q1 = max(abs(robot_def.q1_min), abs(robot_def.q1_max))
    half_q2 = max(abs(robot_def.q2_min), abs(robot_def.q2_max))
    candidates = []
    if half_q1 > 0:
        candidates.append(fill * (width / 2) / half_q1)
    if half_q2 > 0:
        candidates.append(fill * (height / 2) / half_q2)
    # Both limit ranges pinned at zero: any scale shows the single point
    s = min(candidates) if candidates else 1.0
    return AffineTransform.from_scale_translate(s, translate=(width / 2, height / 2), flip_y=True)


def bounds_view(width: float, height: float, min_x: float, max_x: float,
                min_y: float, max_y: float, fill: float = 0.95) -> AffineTransform:
    """Uniform-scale, y-flipped transform fitting a bounding box centred in the panel."""
    span_x = max_x - min_x
    span_y = max_y - min_y
    if span_x <= 0 or span_y <= 0:
        raise SingularTransformError(
            f"Cannot fit an empty box [{min_x}, {max_x}] x [{min_y}, {max_y}]"
        )
    s = fill * min(width / span_x, height / span_y)
    cx = (min_x + max_x) / 2
    cy = (min_y + max_y) / 2
    return AffineTransform.from_scale_translate(
        s, translate=(width / 2 - s * cx, height / 2 + s * cy), flip_y=True
    )
