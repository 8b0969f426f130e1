# SceneComposer.py

from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Tuple, Union
import warnings

from PyQt5.QtCore import QObject, pyqtSignal

from BasisGraph.BasisSpec import BasisSpec, BasisEvaluator, DEFAULT_BASIS, check_lengths
from BasisGraph.DomainSampler import DomainGrid, sample_domain
from BasisGraph.Projector import ProjectionParams, Projector
from BasisGraph.PathBuilder import (
    GUIDE_STRIDE,
    GridLine,
    GuideSegment,
    PathDescription,
    build_back_wall_guide,
    build_curve_path,
    build_depth_axis,
    build_grid_lines,
    build_guide_segments,
    build_shadow_path,
)

RESULT_TAG = "result"
RESULT_Z = 0.0
RESULT_COLOR = "#D4AF37"
RESULT_LABEL = "R(x)"
BASIS_Z_START = 1.0
BASIS_Z_STEP = 1.2
BASIS_LABEL_DX = 10.0
RESULT_LABEL_DX = 20.0
AXIS_COLOR = "#78716c"
DEPTH_TITLE_COLOR = "#a8a29e"
X_TITLE = "Angle of Attack (α)"
Y_TITLE = "Lift Coefficient (C_L)"
Z_TITLE = "BASIS FUNCTIONS"
GRID_Z_MARGIN = 0.5

DEFAULT_VIEWPORT = (800.0, 400.0)


@dataclass(frozen=True)
class Label:
    text: str
    x: float
    y: float
    color: str
    angle: float = 0.0
    anchor: Tuple[float, float] = (0.0, 0.5)


@dataclass(frozen=True, eq=False)
class Layer:
    z: float
    curve: PathDescription
    shadow: PathDescription
    source: Union[BasisSpec, str]
    label: Label

    @property
    def is_result(self) -> bool:
        return self.source == RESULT_TAG


@dataclass(frozen=True, eq=False)
class Scene:
    """
    One consistent snapshot of everything the Canvas draws.
    `basis_layers` is already ordered farthest first.
    """
    params: ProjectionParams
    basis_layers: Tuple[Layer, ...]
    result_layer: Layer
    guides: Tuple[GuideSegment, ...]
    grid_lines: Tuple[GridLine, ...]
    depth_axis: GridLine
    back_wall: GridLine
    axis_labels: Tuple[Label, ...]
    coefficients: Tuple[float, ...]
    elapsed: float

    def draw_list(self) -> Tuple[Layer, ...]:
        return self.basis_layers + (self.result_layer,)

    @property
    def max_depth(self) -> float:
        if not self.basis_layers:
            return RESULT_Z
        return max(layer.z for layer in self.basis_layers)


class _Memo:
    """Caches the last value of `compute` keyed by its dependency tuple."""

    def __init__(self, compute: Callable[..., Any]) -> None:
        self._compute = compute
        self._deps: Optional[tuple] = None
        self._value: Any = None
        self.recomputes: int = 0

    def get(self, *deps: Any) -> Any:
        if self._deps is None or deps != self._deps:
            self._value = self._compute(*deps)
            self._deps = deps
            self.recomputes += 1
        return self._value

    def invalidate(self) -> None:
        self._deps = None


def basis_depth(index: int) -> float:
    return BASIS_Z_START + index * BASIS_Z_STEP


class SceneComposer(QObject):
    """
    Decides what to recompute and when.
    - Projector, basis layers, grid: depend on viewport size only.
    - Result layer + guides: depend on (coefficients, viewport size).
    Each `set_*` call rebuilds only stale parts and then publishes a new
    Scene in a single assignment followed by `scene_updated`.
    """
    scene_updated = pyqtSignal(object)

    def __init__(
        self,
        specs: Sequence[BasisSpec] = DEFAULT_BASIS,
        *,
        grid: Optional[DomainGrid] = None,
        coefficients: Optional[Sequence[float]] = None,
        viewport: Tuple[float, float] = DEFAULT_VIEWPORT,
        guide_stride: int = GUIDE_STRIDE,
    ) -> None:
        super().__init__()
        self.specs: Tuple[BasisSpec, ...] = tuple(specs)
        self.grid: DomainGrid = grid if grid is not None else sample_domain()
        self.evaluator: BasisEvaluator = BasisEvaluator(self.specs, self.grid)
        self.guide_stride: int = guide_stride

        if coefficients is None:
            coefficients = self.evaluator.neutral_coefficients()
        check_lengths(self.specs, coefficients)
        self._coefficients: Tuple[float, ...] = tuple(float(c) for c in coefficients)
        self._elapsed: float = 0.0
        self._viewport: Tuple[float, float] = (float(viewport[0]), float(viewport[1]))
        self._warned_sizes: set = set()

        self._projector_memo = _Memo(self._make_projector)
        self._basis_memo = _Memo(self._make_basis_layers)
        self._floor_memo = _Memo(self._make_floor)
        self._result_memo = _Memo(self._make_result)

        self._scene: Scene = self.compose()

    # --- inputs -----------------------------------------------------------

    def set_viewport(self, width: float, height: float) -> Scene:
        self._viewport = (float(width), float(height))
        return self._publish()

    def set_coefficients(self, coeffs: Sequence[float], elapsed: Optional[float] = None) -> Scene:
        check_lengths(self.specs, coeffs)
        self._coefficients = tuple(float(c) for c in coeffs)
        if elapsed is not None:
            self._elapsed = float(elapsed)
        return self._publish()

    def attach(self, coefficient_source: Any = None, viewport_observer: Any = None) -> None:
        if coefficient_source is not None:
            coefficient_source.coefficients_updated.connect(self.set_coefficients)
        if viewport_observer is not None:
            viewport_observer.resized.connect(self.set_viewport)
            if viewport_observer.is_valid():
                self.set_viewport(*viewport_observer.size())

    # --- outputs ----------------------------------------------------------

    @property
    def scene(self) -> Scene:
        return self._scene

    @property
    def coefficients(self) -> Tuple[float, ...]:
        return self._coefficients

    @property
    def viewport(self) -> Tuple[float, float]:
        return self._viewport

    @property
    def projector(self) -> Projector:
        return self._projector_memo.get(*self._viewport)

    def recompute_counts(self) -> dict:
        return {
            "projector": self._projector_memo.recomputes,
            "basis": self._basis_memo.recomputes,
            "floor": self._floor_memo.recomputes,
            "result": self._result_memo.recomputes,
        }

    def compose(self) -> Scene:
        """
        Build a Scene for the current inputs, reusing every memoised part whose
        dependencies are unchanged.
        """
        width, height = self._viewport
        projector = self._projector_memo.get(width, height)
        basis_layers = self._basis_memo.get(width, height)
        grid_lines, depth_axis, back_wall, axis_labels = self._floor_memo.get(width, height)
        result_layer, guides = self._result_memo.get(self._coefficients, width, height)

        return Scene(
            params=projector.params,
            basis_layers=basis_layers,
            result_layer=result_layer,
            guides=guides,
            grid_lines=grid_lines,
            depth_axis=depth_axis,
            back_wall=back_wall,
            axis_labels=axis_labels,
            coefficients=self._coefficients,
            elapsed=self._elapsed,
        )

    def _publish(self) -> Scene:
        scene = self.compose()
        self._scene = scene
        self.scene_updated.emit(scene)
        return scene

    # --- memoised builders ------------------------------------------------

    def _make_projector(self, width: float, height: float) -> Projector:
        params = ProjectionParams.from_viewport(width, height)
        if params.is_degenerate and (width, height) not in self._warned_sizes:
            self._warned_sizes.add((width, height))
            warnings.warn(
                f"Viewport {width:g}x{height:g} leaves no drawable area; "
                f"projecting onto a {params.view_width:g}x{params.view_height:g} fallback"
            )
        return Projector(params)

    def _make_basis_layers(self, width: float, height: float) -> Tuple[Layer, ...]:
        projector = self._projector_memo.get(width, height)
        xs = self.grid.values
        x_max = self.grid.x_max

        layers = []
        for i, spec in enumerate(self.specs):
            z = basis_depth(i)
            ys = self.evaluator.basis_curve(i)
            lx, ly = projector.project(x_max, ys[-1], z)
            label = Label(
                text=f"ϕ{spec.label}",
                x=lx + BASIS_LABEL_DX,
                y=ly + (spec.label_shift or 0.0),
                color=spec.color,
            )
            layers.append(Layer(
                z=z,
                curve=build_curve_path(projector, xs, ys, z),
                shadow=build_shadow_path(projector, xs, z),
                source=spec,
                label=label,
            ))

        layers.sort(key=lambda layer: layer.z, reverse=True)
        return tuple(layers)

    def _make_floor(self, width: float, height: float) -> tuple:
        projector = self._projector_memo.get(width, height)
        p = projector.params
        z_max = basis_depth(len(self.specs) - 1) if self.specs else RESULT_Z
        grid_lines = tuple(build_grid_lines(projector, z_max + GRID_Z_MARGIN))

        x_title = projector.project(0.0, p.y_min, RESULT_Z)
        y_title = projector.project(p.x_min, 0.0, z_max)
        z_title = projector.project(p.x_min, p.y_min, z_max / 2)
        axis_labels = (
            Label(X_TITLE, x_title[0], x_title[1] + 40, AXIS_COLOR, anchor=(0.5, 0.5)),
            Label(Y_TITLE, y_title[0] - 70, y_title[1], AXIS_COLOR, angle=90.0, anchor=(0.5, 0.5)),
            Label(Z_TITLE, z_title[0] - 50, z_title[1], DEPTH_TITLE_COLOR, angle=25.0, anchor=(0.5, 0.5)),
        )
        return (
            grid_lines,
            build_depth_axis(projector, z_max),
            build_back_wall_guide(projector, z_max),
            axis_labels,
        )

    def _make_result(self, coeffs: Tuple[float, ...], width: float, height: float) -> Tuple[Layer, Tuple[GuideSegment, ...]]:
        projector = self._projector_memo.get(width, height)
        xs = self.grid.values
        ys = self.evaluator.result_curve(coeffs)

        lx, ly = projector.project(self.grid.x_max, 0.0, RESULT_Z)
        layer = Layer(
            z=RESULT_Z,
            curve=build_curve_path(projector, xs, ys, RESULT_Z),
            shadow=build_shadow_path(projector, xs, RESULT_Z),
            source=RESULT_TAG,
            label=Label(RESULT_LABEL, lx + RESULT_LABEL_DX, ly, RESULT_COLOR),
        )
        guides = tuple(build_guide_segments(projector, xs, ys, self.guide_stride, RESULT_Z))
        return layer, guides
