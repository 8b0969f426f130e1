# widgets/ViewBox.py

import pyqtgraph as pg


class ViewBox(pg.ViewBox):
    """Screen-space view: one unit per pixel, y grows downwards, no pan/zoom."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, enableMouse=False, enableMenu=False, invertY=True, defaultPadding=0.0, **kwargs)

    def wheelEvent(self, ev, axis=None):
        ev.ignore()

    def mouseDragEvent(self, ev, axis=None):
        ev.ignore()
