# ViewportObserver.py

from PyQt5.QtCore import QObject, pyqtSignal
from typing import Optional, Tuple


class ViewportObserver(QObject):
    """
    Owns the last observed drawing-surface size. The Canvas is the only writer;
    `resized` fires only when the size actually changes.
    """
    resized = pyqtSignal(float, float)

    def __init__(self, size: Optional[Tuple[float, float]] = None) -> None:
        super().__init__()
        self._width: float = 0.0
        self._height: float = 0.0
        if size is not None:
            self._width, self._height = float(size[0]), float(size[1])

    def observe(self, width: float, height: float) -> bool:
        width, height = float(width), float(height)
        if (width, height) == (self._width, self._height):
            return False
        self._width, self._height = width, height
        self.resized.emit(width, height)
        return True

    def size(self) -> Tuple[float, float]:
        return (self._width, self._height)

    def is_valid(self) -> bool:
        return self._width > 0 and self._height > 0
