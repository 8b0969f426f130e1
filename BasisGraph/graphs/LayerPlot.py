# graphs/LayerPlot.py

from typing import Any, Optional, Union
import numpy as np
import pyqtgraph as pg

from BasisGraph.BasePlot import GraphBase, make_pen
from BasisGraph.BasisSpec import BasisSpec
from BasisGraph.SceneComposer import RESULT_COLOR, RESULT_TAG, Layer


class LayerPlot(GraphBase):
    """
    Draws one Layer of a Scene: floor shadow, curve and label.
    Basis layers get a thin dashed curve at their BasisSpec opacity; the result
    layer gets a thick solid gold curve and a soft dark shadow.
    """

    def __init__(
        self,
        source: Union[BasisSpec, str],
        *,
        z: int = 10,
        curve_width: Optional[float] = None,
        shadow_width: Optional[float] = None,
    ) -> None:
        self.source = source
        self.name = f"ϕ{source.label}" if isinstance(source, BasisSpec) else "R(x)"
        self._is_result = not isinstance(source, BasisSpec)

        if self._is_result:
            self._curve_pen = make_pen(RESULT_COLOR, curve_width or 3.0, round_cap=True)
            self._shadow_pen = make_pen("#000000", shadow_width or 4.0, opacity=0.08, round_cap=True)
            self._label_color = RESULT_COLOR
        else:
            self._curve_pen = make_pen(source.color, curve_width or 1.5, opacity=source.opacity, dashed=True)
            self._shadow_pen = make_pen(source.color, shadow_width or 2.0, opacity=0.1, round_cap=True)
            self._label_color = source.color

        self._plot_item = None
        self._view_box = None
        self._curve = None
        self._shadow = None
        self._label = None
        self._z = z

    def add_to(self, plot_item: Any, view_box: Any) -> None:
        self._plot_item = plot_item
        self._view_box = view_box

        self._shadow = pg.PlotCurveItem(pen=self._shadow_pen, connect="finite")
        self._curve = pg.PlotCurveItem(pen=self._curve_pen, connect="finite")
        self._label = pg.TextItem(text=self.name, color=self._label_color, anchor=(0.0, 0.5))
        for item in (self._shadow, self._curve, self._label):
            self._plot_item.addItem(item)
        self.set_z(self._z)
        self._update_plot()

    def remove_from(self, plot_item: Any) -> None:
        for item in (self._shadow, self._curve, self._label):
            if item is not None and item.scene() is not None:
                plot_item.removeItem(item)
        self._shadow = None
        self._curve = None
        self._label = None
        self._plot_item = None
        self._view_box = None

    def set_z(self, z: int) -> None:
        self._z = z
        if self._shadow is not None:
            self._shadow.setZValue(self._z)
        if self._curve is not None:
            self._curve.setZValue(self._z + 2)
        if self._label is not None:
            self._label.setZValue(self._z + 3)

    def find_layer(self, scene: Any) -> Optional[Layer]:
        if self._is_result:
            return scene.result_layer
        for layer in scene.basis_layers:
            if layer.source == self.source:
                return layer
        return None

    def _update_plot(self) -> None:
        if self._plot_item is None or self._scene is None:
            return

        layer = self.find_layer(self._scene)
        if layer is None:
            return

        self._shadow.setData(np.array(layer.shadow.xs), np.array(layer.shadow.ys))
        self._curve.setData(np.array(layer.curve.xs), np.array(layer.curve.ys))
        self._label.setText(layer.label.text, color=layer.label.color)
        self._label.setPos(layer.label.x, layer.label.y)

    def _source_name(self) -> str:
        return RESULT_TAG if self._is_result else self.name
