# canvas/Canvas.py

from PyQt5 import QtCore
import pyqtgraph as pg
from typing import Any, List, Optional

from BasisGraph.widgets.GraphWidget import GraphWidget
from BasisGraph.widgets.ViewBox import ViewBox
from BasisGraph.ViewportObserver import ViewportObserver
from BasisGraph.graphs.FloorPlot import FloorPlot
from BasisGraph.graphs.GuidePlot import GuidePlot
from BasisGraph.graphs.LayerPlot import LayerPlot
from BasisGraph.SceneComposer import RESULT_TAG

BACKGROUND = "#F9F8F4"
FLOOR_Z = 0
BASIS_Z_BASE = 10
RESULT_Z = 1000


class Canvas(GraphWidget):
    """
    Rendering surface for Scene snapshots.

    The plot area is in screen units (one unit per pixel, y down), so Scene
    coordinates are drawn as-is. The plot widget's size is fed to a
    ViewportObserver; the attached SceneComposer reprojects on change and
    sends the new Scene back through `show_scene`.
    """

    def __init__(self, composer: Optional[Any] = None, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)

        self._layers: List[Any] = []
        self._scene: Optional[Any] = None
        self._pending_scene: Optional[Any] = None
        self._view_size: Optional[tuple] = None
        self.composer: Optional[Any] = None
        self.viewport: ViewportObserver = ViewportObserver()

        self.plot_widget: pg.PlotWidget = pg.PlotWidget(viewBox=ViewBox(), background=BACKGROUND)
        self.plot_item: Any = self.plot_widget.getPlotItem()
        self.view_box: Any = self.plot_widget.getViewBox()
        self.plot_item.hideAxis("left")
        self.plot_item.hideAxis("bottom")
        self.plot_item.hideButtons()
        self.plot_item.setMenuEnabled(False)
        self.plot_item.layout.setContentsMargins(0, 0, 0, 0)

        self.content_layout.addWidget(self.plot_widget)
        self.plot_widget.installEventFilter(self)

        self._floor: Optional[FloorPlot] = None
        self._guides: Optional[GuidePlot] = None

        if composer is not None:
            self.set_composer(composer)

        self.resize(900, 600)

    def extend_toolbar(self, toolbar: Any) -> None:
        super().extend_toolbar(toolbar)

        self._guides_visible = True
        def on_toggle_guides(checked):
            self._guides_visible = checked
            if self._guides is not None:
                self._guides.set_visible(checked)
        self.add_action(self._view_menu, "Show Guide Lines", on_toggle_guides, checkable=True, checked=True)

    def set_composer(self, composer: Any) -> None:
        """
        Attach a SceneComposer and create the default draw items:
        floor, one LayerPlot per basis (farthest first), guides, result.
        """
        if self.composer is not None:
            self.composer.scene_updated.disconnect(self.show_scene)
        self.composer = composer

        for layer in list(self._layers):
            self.unplot(layer)

        scene = composer.scene
        self._floor = self.plot(FloorPlot(z=FLOOR_Z, show_titles=self._axis_labels_visible))
        for i, layer in enumerate(scene.basis_layers):
            self.plot(LayerPlot(layer.source, z=BASIS_Z_BASE + 4 * i))
        self._guides = self.plot(GuidePlot(z=RESULT_Z + 1))
        self._guides.set_visible(self._guides_visible)
        self.plot(LayerPlot(RESULT_TAG, z=RESULT_Z))

        composer.scene_updated.connect(self.show_scene)
        composer.attach(viewport_observer=self.viewport)
        self.show_scene(composer.scene)

    def plot(self, layer: Any) -> Any:
        layer = self._coerce_to_layer(layer)
        if layer in self._layers:
            return layer

        layer.add_to(self.plot_item, self.view_box)
        self._layers.append(layer)
        if self._scene is not None:
            layer.handle_scene(self._scene)
        return layer

    def unplot(self, layer: Any) -> None:
        layer = self.get_graph(layer)
        if layer is None:
            return
        try:
            layer.remove_from(self.plot_item)
        finally:
            if layer in self._layers:
                self._layers.remove(layer)
        if layer is self._floor:
            self._floor = None
        if layer is self._guides:
            self._guides = None

    def get_graph(self, layer: Any) -> Optional[Any]:
        for item in self._layers:
            if item is layer:
                return item
        return None

    def layers(self) -> List[Any]:
        return list(self._layers)

    @property
    def scene(self) -> Optional[Any]:
        return self._scene

    def has_pending_scene(self) -> bool:
        return self._pending_scene is not None

    def show_scene(self, scene: Any) -> None:
        """
        Draw a Scene. Scenes computed for a degenerate viewport are held back
        until a drawable size arrives; the last good Scene stays on screen.
        """
        if scene.params.is_degenerate:
            self._pending_scene = scene
            return
        self._pending_scene = None
        self._scene = scene

        size = scene.params.size
        if size != self._view_size:
            self._view_size = size
            self.set_view_port(0.0, 0.0, size[0], size[1])

        for layer in self._layers:
            layer.handle_scene(scene)

    def set_view_port(self, x1: float, y1: float, x2: float, y2: float) -> None:
        try:
            self.plot_widget.setXRange(x1, x2, padding=0)
            self.plot_widget.setYRange(y1, y2, padding=0)
            self.view_box.disableAutoRange()
        except Exception as e:
            print(f"[Canvas.set_view_port] Failed to set view: {e}")

    def update_axis_labels(self) -> None:
        if self._floor is not None:
            self._floor.set_titles_visible(self._axis_labels_visible)

    def eventFilter(self, source: Any, event: Any) -> bool:
        if source is self.plot_widget and event.type() == QtCore.QEvent.Resize:
            self._observe_viewport()
        return super().eventFilter(source, event)

    def _observe_viewport(self) -> None:
        self.viewport.observe(self.plot_widget.width(), self.plot_widget.height())

    def _coerce_to_layer(self, obj: Any) -> Any:
        if hasattr(obj, "add_to") and hasattr(obj, "remove_from") and hasattr(obj, "handle_scene"):
            return obj
        raise TypeError("Canvas._coerce_to_layer() expects a GraphBase-like item with add_to/remove_from/handle_scene.")
