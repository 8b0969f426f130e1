# graphs/GuidePlot.py

from typing import Any
import pyqtgraph as pg

from BasisGraph.BasePlot import GraphBase, make_pen
from BasisGraph.SceneComposer import RESULT_COLOR
from BasisGraph.graphs.FloorPlot import segments_to_pairs


class GuidePlot(GraphBase):
    """Vertical dropper lines from the result curve down to the floor."""

    def __init__(self, *, color: str = RESULT_COLOR, opacity: float = 0.2, z: int = 1001) -> None:
        self.name = "Guides"
        self._pen = make_pen(color, 1.0, opacity=opacity)
        self._plot_item = None
        self._view_box = None
        self._curve = None
        self._visible = True
        self._z = z

    def add_to(self, plot_item: Any, view_box: Any) -> None:
        self._plot_item = plot_item
        self._view_box = view_box
        self._curve = pg.PlotCurveItem(pen=self._pen, connect="pairs")
        self._curve.setZValue(self._z)
        self._curve.setVisible(self._visible)
        self._plot_item.addItem(self._curve)
        self._update_plot()

    def remove_from(self, plot_item: Any) -> None:
        if self._curve is not None and self._curve.scene() is not None:
            plot_item.removeItem(self._curve)
        self._curve = None
        self._plot_item = None
        self._view_box = None

    def set_z(self, z: int) -> None:
        self._z = z
        if self._curve is not None:
            self._curve.setZValue(self._z)

    def set_visible(self, visible: bool) -> None:
        self._visible = visible
        if self._curve is not None:
            self._curve.setVisible(visible)

    def _update_plot(self) -> None:
        if self._plot_item is None or self._scene is None:
            return
        self._curve.setData(*segments_to_pairs(self._scene.guides))

    def _source_name(self) -> str:
        return self.name
