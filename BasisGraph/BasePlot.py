from abc import ABC, abstractmethod
from typing import Any, Optional

from PyQt5 import QtCore, QtGui
import pyqtgraph as pg


def make_pen(color: str, width: float = 1.0, opacity: float = 1.0, dashed: bool = False, round_cap: bool = False) -> QtGui.QPen:
    qcolor = pg.mkColor(color)
    qcolor.setAlphaF(max(0.0, min(1.0, opacity)))
    pen = pg.mkPen(color=qcolor, width=width)
    if dashed:
        pen.setStyle(QtCore.Qt.DashLine)
    if round_cap:
        pen.setCapStyle(QtCore.Qt.RoundCap)
        pen.setJoinStyle(QtCore.Qt.RoundJoin)
    return pen


class GraphBase(ABC):
    """
    Abstract base class for every drawable item on a Canvas.
    Items receive whole Scene snapshots and redraw their part of it, so an
    item never mixes geometry from two different viewport sizes.
    """

    _scene: Optional[Any] = None

    def handle_scene(self, scene: Any) -> None:
        self._scene = scene
        self._update_plot()

    @abstractmethod
    def add_to(self, plot_item: Any, view_box: Any) -> None:
        ...

    @abstractmethod
    def remove_from(self, plot_item: Any) -> None:
        ...

    @abstractmethod
    def set_z(self, z: int) -> None:
        ...

    @abstractmethod
    def _update_plot(self) -> None:
        ...

    @abstractmethod
    def _source_name(self) -> str:
        ...
