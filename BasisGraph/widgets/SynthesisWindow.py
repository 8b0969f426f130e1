# widgets/SynthesisWindow.py

import time
from PyQt5 import QtWidgets, QtGui
from typing import Callable, Optional, Sequence, Tuple

from BasisGraph.AnimationDriver import AnimationDriver, DEFAULT_OSCILLATORS, PLAYING, TickScheduler
from BasisGraph.BasisSpec import BasisSpec, DEFAULT_BASIS
from BasisGraph.CoefficientSource import CoefficientSource
from BasisGraph.SceneComposer import SceneComposer
from BasisGraph.canvas.Canvas import Canvas
from BasisGraph.widgets.ControlPanel import ControlPanel


class SynthesisWindow(QtWidgets.QWidget):
    """
    Control panel on the left, Canvas on the right.
    Wiring: AnimationDriver -> CoefficientSource -> (SceneComposer, ControlPanel),
    SceneComposer -> Canvas, Canvas viewport -> SceneComposer.
    """

    def __init__(
        self,
        specs: Sequence[BasisSpec] = DEFAULT_BASIS,
        *,
        oscillators: Sequence[Tuple[float, float]] = DEFAULT_OSCILLATORS,
        scheduler: Optional[TickScheduler] = None,
        clock: Callable[[], float] = time.perf_counter,
        parent: Optional[QtWidgets.QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Basis Synthesis")
        self.specs = tuple(specs)

        self.source = CoefficientSource(len(self.specs))
        self.composer = SceneComposer(self.specs)
        self.composer.attach(coefficient_source=self.source)

        self.panel = ControlPanel(self.specs, self)
        self.canvas = Canvas(self.composer, name="Basis Synthesis", parent=self)

        self.driver = AnimationDriver(
            len(self.specs),
            oscillators=oscillators,
            scheduler=scheduler,
            clock=clock,
            source=self.source,
        )

        self.source.coefficients_updated.connect(self.panel.on_coefficients)
        self.driver.state_changed.connect(self.panel.on_state)
        self.panel.play_toggled.connect(self.driver.toggle)
        self.panel.reset_requested.connect(self.driver.reset)

        layout = QtWidgets.QHBoxLayout(self)
        layout.addWidget(self.panel, 4)
        layout.addWidget(self.canvas, 8)

        self._add_playback_menu()

        self.resize(1280, 640)

    def _add_playback_menu(self) -> None:
        menu = self.canvas.add_menu("Playback")
        self.play_action = self.canvas.add_action(menu, "Pause", self.driver.toggle, "Space")
        self.reset_action = self.canvas.add_action(menu, "Reset", self.driver.reset, "R")

        def on_state(state):
            self.play_action.setText("Pause" if state == PLAYING else "Resume")
        self.driver.state_changed.connect(on_state)

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:
        self.driver.close()
        super().closeEvent(event)
