# Projector.py

from dataclasses import dataclass
from typing import Tuple, Union
import numpy as np

from BasisGraph.DomainSampler import X_MIN, X_MAX

ArrayLike = Union[float, np.ndarray]

Y_MIN = -60.0
Y_MAX = 60.0

# Right/top margins are larger to leave room for depth-shifted curves and labels.
MARGIN_LEFT = 80.0
MARGIN_RIGHT = 200.0
MARGIN_TOP = 100.0
MARGIN_BOTTOM = 80.0

Z_SLANT_X = 50.0
Z_SLANT_Y = -30.0

MIN_VIEW_SIZE = 1.0


def _pair(a: ArrayLike, b: ArrayLike) -> Tuple[ArrayLike, ArrayLike]:
    if np.ndim(a) == 0 and np.ndim(b) == 0:
        return float(a), float(b)
    shape = np.broadcast(a, b).shape
    return np.broadcast_to(a, shape).astype(float), np.broadcast_to(b, shape).astype(float)


@dataclass(frozen=True)
class ProjectionParams:
    width: float
    height: float
    x_min: float = X_MIN
    x_max: float = X_MAX
    y_min: float = Y_MIN
    y_max: float = Y_MAX
    margin_left: float = MARGIN_LEFT
    margin_right: float = MARGIN_RIGHT
    margin_top: float = MARGIN_TOP
    margin_bottom: float = MARGIN_BOTTOM
    slant_x: float = Z_SLANT_X
    slant_y: float = Z_SLANT_Y

    @classmethod
    def from_viewport(cls, width: float, height: float, **kwargs) -> "ProjectionParams":
        return cls(width=float(width), height=float(height), **kwargs)

    @property
    def raw_view_width(self) -> float:
        return self.width - self.margin_left - self.margin_right

    @property
    def raw_view_height(self) -> float:
        return self.height - self.margin_top - self.margin_bottom

    @property
    def view_width(self) -> float:
        return max(MIN_VIEW_SIZE, self.raw_view_width)

    @property
    def view_height(self) -> float:
        return max(MIN_VIEW_SIZE, self.raw_view_height)

    @property
    def is_degenerate(self) -> bool:
        return not (self.raw_view_width > 0 and self.raw_view_height > 0)

    @property
    def size(self) -> Tuple[float, float]:
        return (self.width, self.height)


class Projector:
    """
    Fixed oblique projection of (x, y, z) onto the drawing surface.

    x and y are normalised over the domain/range bounds, placed inside the
    usable viewport rectangle (screen y grows downwards), and then shifted by
    z * (slant_x, slant_y) so that depth recedes up and to the right.

    All methods accept scalars or numpy arrays. A degenerate viewport is
    clamped to MIN_VIEW_SIZE so results stay finite.
    """

    def __init__(self, params: ProjectionParams) -> None:
        self.params: ProjectionParams = params
        p = params
        self._sx: float = p.view_width / (p.x_max - p.x_min)
        self._sy: float = p.view_height / (p.y_max - p.y_min)
        self._bottom: float = p.height - p.margin_bottom

    def project(self, x: ArrayLike, y: ArrayLike, z: ArrayLike) -> Tuple[ArrayLike, ArrayLike]:
        p = self.params
        sx = p.margin_left + (np.subtract(x, p.x_min)) * self._sx + np.multiply(z, p.slant_x)
        sy = self._bottom - (np.subtract(y, p.y_min)) * self._sy + np.multiply(z, p.slant_y)
        return _pair(sx, sy)

    def project_to_floor(self, x: ArrayLike, z: ArrayLike) -> Tuple[ArrayLike, ArrayLike]:
        return self.project(x, self.params.y_min, z)

    def unproject(self, sx: ArrayLike, sy: ArrayLike, z: ArrayLike = 0.0) -> Tuple[ArrayLike, ArrayLike]:
        p = self.params
        x = p.x_min + (np.subtract(sx, np.multiply(z, p.slant_x)) - p.margin_left) / self._sx
        y = p.y_min + (self._bottom - np.subtract(sy, np.multiply(z, p.slant_y))) / self._sy
        return _pair(x, y)

    def normalize(self, x: ArrayLike, y: ArrayLike) -> Tuple[ArrayLike, ArrayLike]:
        p = self.params
        xn = np.subtract(x, p.x_min) / (p.x_max - p.x_min)
        yn = np.subtract(y, p.y_min) / (p.y_max - p.y_min)
        return xn, yn
