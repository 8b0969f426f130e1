# graphs/FloorPlot.py

from typing import Any, Dict, List, Sequence
import numpy as np
import pyqtgraph as pg

from BasisGraph.BasePlot import GraphBase, make_pen
from BasisGraph.PathBuilder import GridLine

GRID_COLOR = "#e7e5e4"
AXIS_LINE_COLOR = "#d6d3d1"


def segments_to_pairs(lines: Sequence[Any]) -> tuple:
    """Flatten segments into x/y arrays for a connect="pairs" curve."""
    xs = np.empty(2 * len(lines))
    ys = np.empty(2 * len(lines))
    for i, ln in enumerate(lines):
        xs[2 * i], ys[2 * i] = ln.x1, ln.y1
        xs[2 * i + 1], ys[2 * i + 1] = ln.x2, ln.y2
    return xs, ys


class FloorPlot(GraphBase):
    """
    Floor grid, depth axis, dashed back-wall guide and the three axis titles.
    Grid lines are batched into one pyqtgraph curve per stroke width.
    """

    def __init__(self, *, z: int = 0, grid_opacity: float = 0.7, show_titles: bool = True) -> None:
        self.name = "Floor"
        self._grid_opacity = grid_opacity
        self._show_titles = show_titles
        self._plot_item = None
        self._view_box = None
        self._grid_curves: Dict[float, Any] = {}
        self._axis = None
        self._wall = None
        self._titles: List[Any] = []
        self._z = z

    def add_to(self, plot_item: Any, view_box: Any) -> None:
        self._plot_item = plot_item
        self._view_box = view_box

        self._axis = pg.PlotCurveItem(pen=make_pen(AXIS_LINE_COLOR, 2.0), connect="pairs")
        self._wall = pg.PlotCurveItem(pen=make_pen(AXIS_LINE_COLOR, 1.0, dashed=True), connect="pairs")
        self._plot_item.addItem(self._axis)
        self._plot_item.addItem(self._wall)
        self.set_z(self._z)
        self._update_plot()

    def remove_from(self, plot_item: Any) -> None:
        items = list(self._grid_curves.values()) + [self._axis, self._wall] + self._titles
        for item in items:
            if item is not None and item.scene() is not None:
                plot_item.removeItem(item)
        self._grid_curves.clear()
        self._titles = []
        self._axis = None
        self._wall = None
        self._plot_item = None
        self._view_box = None

    def set_z(self, z: int) -> None:
        self._z = z
        for curve in self._grid_curves.values():
            curve.setZValue(self._z)
        for item in (self._axis, self._wall):
            if item is not None:
                item.setZValue(self._z + 1)
        for item in self._titles:
            item.setZValue(self._z + 1)

    def set_titles_visible(self, visible: bool) -> None:
        self._show_titles = visible
        for item in self._titles:
            item.setVisible(visible)

    def _grid_curve(self, width: float) -> Any:
        curve = self._grid_curves.get(width)
        if curve is None:
            curve = pg.PlotCurveItem(pen=make_pen(GRID_COLOR, width, opacity=self._grid_opacity), connect="pairs")
            curve.setZValue(self._z)
            self._plot_item.addItem(curve)
            self._grid_curves[width] = curve
        return curve

    def _update_plot(self) -> None:
        if self._plot_item is None or self._scene is None:
            return
        scene = self._scene

        by_width: Dict[float, List[GridLine]] = {}
        for ln in scene.grid_lines:
            by_width.setdefault(ln.width, []).append(ln)
        for width in set(self._grid_curves) - set(by_width):
            self._grid_curves[width].setData([], [])
        for width, lines in by_width.items():
            self._grid_curve(width).setData(*segments_to_pairs(lines))

        self._axis.setData(*segments_to_pairs([scene.depth_axis]))
        self._wall.setData(*segments_to_pairs([scene.back_wall]))

        # Title count is fixed per scene, so items are created once and moved.
        if len(self._titles) != len(scene.axis_labels):
            for item in self._titles:
                if item.scene() is not None:
                    self._plot_item.removeItem(item)
            self._titles = []
            for label in scene.axis_labels:
                item = pg.TextItem(text=label.text, color=label.color, anchor=label.anchor, angle=label.angle)
                item.setZValue(self._z + 1)
                item.setVisible(self._show_titles)
                self._plot_item.addItem(item)
                self._titles.append(item)
        for item, label in zip(self._titles, scene.axis_labels):
            item.setPos(label.x, label.y)

    def _source_name(self) -> str:
        return self.name
