# PathBuilder.py

from dataclasses import dataclass
import math
from typing import List, Sequence
import numpy as np

from BasisGraph.Projector import Projector

PRECISION = 1
GUIDE_STRIDE = 30
GRID_Z_STEP = 0.5
GRID_X_STEP = math.pi
# Half-open x loop bound tolerance so the last pi-step line lands on x_max.
GRID_X_TOLERANCE = 0.1
BACK_WALL_TOP = 25.0


@dataclass(frozen=True, eq=False)
class PathDescription:
    """
    Screen-space polyline. `xs`/`ys` are rounded to PRECISION decimals and may
    contain NaN; a non-finite point breaks the line into separate subpaths.
    """
    xs: np.ndarray
    ys: np.ndarray

    def __len__(self) -> int:
        return len(self.xs)

    @property
    def is_empty(self) -> bool:
        return len(self.xs) == 0

    def finite_mask(self) -> np.ndarray:
        return np.isfinite(self.xs) & np.isfinite(self.ys)

    def point(self, index: int) -> tuple:
        return (float(self.xs[index]), float(self.ys[index]))

    def svg(self) -> str:
        parts: List[str] = []
        pen_down = False
        for x, y, ok in zip(self.xs, self.ys, self.finite_mask()):
            if not ok:
                pen_down = False
                continue
            parts.append(f"{'L' if pen_down else 'M'} {x:.{PRECISION}f} {y:.{PRECISION}f}")
            pen_down = True
        return " ".join(parts)


@dataclass(frozen=True)
class GridLine:
    x1: float
    y1: float
    x2: float
    y2: float
    width: float = 1.0
    kind: str = "depth"


@dataclass(frozen=True)
class GuideSegment:
    x1: float
    y1: float
    x2: float
    y2: float


def _round(values) -> np.ndarray:
    return np.round(np.asarray(values, dtype=float), PRECISION)


def _path(sx, sy) -> PathDescription:
    xs, ys = _round(sx), _round(sy)
    xs.setflags(write=False)
    ys.setflags(write=False)
    return PathDescription(xs, ys)


def build_curve_path(projector: Projector, xs: Sequence[float], ys: Sequence[float], z: float) -> PathDescription:
    xs = np.asarray(xs, dtype=float)
    ys = np.asarray(ys, dtype=float)
    if xs.shape != ys.shape:
        raise ValueError(f"x/y length mismatch: {xs.shape} vs {ys.shape}")
    if xs.size == 0:
        return _path([], [])
    sx, sy = projector.project(xs, ys, z)
    return _path(sx, sy)


def build_shadow_path(projector: Projector, xs: Sequence[float], z: float) -> PathDescription:
    xs = np.asarray(xs, dtype=float)
    if xs.size == 0:
        return _path([], [])
    sx, sy = projector.project_to_floor(xs, z)
    return _path(sx, sy)


def build_grid_lines(projector: Projector, z_end: float) -> List[GridLine]:
    """
    Floor grid lines, all at y = y_min.
    - One line of constant z every GRID_Z_STEP from 0 to z_end, spanning the
      x range; thicker at whole depth units.
    - One line of constant x every GRID_X_STEP from x_min, spanning depth 0..z_end.
    """
    p = projector.params
    lines: List[GridLine] = []

    n_z = int(math.floor(z_end / GRID_Z_STEP + 1e-9)) + 1 if z_end >= 0 else 0
    for i in range(n_z):
        z = i * GRID_Z_STEP
        x1, y1 = projector.project(p.x_min, p.y_min, z)
        x2, y2 = projector.project(p.x_max, p.y_min, z)
        width = 1.5 if z % 1 == 0 else 0.5
        lines.append(GridLine(x1, y1, x2, y2, width=width, kind="depth"))

    n_x = int(math.floor((p.x_max + GRID_X_TOLERANCE - p.x_min) / GRID_X_STEP)) + 1
    for i in range(n_x):
        x = p.x_min + i * GRID_X_STEP
        x1, y1 = projector.project(x, p.y_min, 0.0)
        x2, y2 = projector.project(x, p.y_min, z_end)
        lines.append(GridLine(x1, y1, x2, y2, width=1.0, kind="domain"))

    return lines


def build_guide_segments(
    projector: Projector,
    xs: Sequence[float],
    ys: Sequence[float],
    stride: int = GUIDE_STRIDE,
    z: float = 0.0,
) -> List[GuideSegment]:
    if stride < 1:
        raise ValueError(f"stride must be >= 1, got {stride}")
    xs = np.asarray(xs, dtype=float)[::stride]
    ys = np.asarray(ys, dtype=float)[::stride]
    if xs.size == 0:
        return []

    top_x, top_y = projector.project(xs, ys, z)
    bot_x, bot_y = projector.project_to_floor(xs, z)

    segments: List[GuideSegment] = []
    for coords in zip(top_x, top_y, bot_x, bot_y):
        if not all(math.isfinite(c) for c in coords):
            continue
        segments.append(GuideSegment(*(float(c) for c in coords)))
    return segments


def build_depth_axis(projector: Projector, z_max: float) -> GridLine:
    p = projector.params
    x1, y1 = projector.project(p.x_min, p.y_min, 0.0)
    x2, y2 = projector.project(p.x_min, p.y_min, z_max)
    return GridLine(x1, y1, x2, y2, width=2.0, kind="axis")


def build_back_wall_guide(projector: Projector, z_max: float, top: float = BACK_WALL_TOP) -> GridLine:
    p = projector.params
    x1, y1 = projector.project(p.x_min, p.y_min, z_max)
    x2, y2 = projector.project(p.x_min, top, z_max)
    return GridLine(x1, y1, x2, y2, width=1.0, kind="wall")
