# widgets/ControlPanel.py

from PyQt5 import QtWidgets, QtCore
from PyQt5.QtCore import pyqtSignal
from typing import Any, List, Optional, Sequence

from BasisGraph.AnimationDriver import PLAYING

_SUBSCRIPTS = str.maketrans("0123456789", "₀₁₂₃₄₅₆₇₈₉")
BAR_RESOLUTION = 1000

FIGURE_TAG = "FIG. 1: NON-LINEAR COMPOSITION"
ANALYSIS_TITLE = "Visual Analysis"
ANALYSIS_TEXT = (
    "The dashed lines represent the fixed basis functions ϕ<sub>i</sub> separated "
    "by depth. The gold curve represents the resultant vector "
    "R = Σ c<sub>i</sub>ϕ<sub>i</sub>. Shadows projected on the floor plane "
    "emphasize the magnitude relative to zero."
)


def format_expression(coeffs: Sequence[float], specs: Sequence[Any]) -> str:
    terms = [f"{c:.2f} ϕ{spec.label.translate(_SUBSCRIPTS)}" for c, spec in zip(coeffs, specs)]
    return "R(x) = " + " + ".join(terms)


def bar_value(value: float) -> int:
    return int(round(min(1.0, max(0.0, value)) * BAR_RESOLUTION))


class CoefficientCard(QtWidgets.QFrame):
    def __init__(self, spec: Any, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self.spec = spec
        self.setFrameShape(QtWidgets.QFrame.StyledPanel)

        dot = QtWidgets.QLabel(self)
        dot.setFixedSize(14, 14)
        dot.setStyleSheet(f"background-color: {spec.color}; border-radius: 7px;")

        name = QtWidgets.QLabel(f"ϕ<sub>{spec.label}</sub>", self)
        name.setTextFormat(QtCore.Qt.RichText)

        caption = QtWidgets.QLabel("COEFFICIENT", self)
        caption.setStyleSheet("color: #a8a29e; font-size: 9px; font-weight: bold;")

        self.value_label = QtWidgets.QLabel("0.000", self)
        self.value_label.setAlignment(QtCore.Qt.AlignRight | QtCore.Qt.AlignVCenter)
        self.value_label.setStyleSheet("font-family: monospace; font-size: 16px;")

        self.bar = QtWidgets.QProgressBar(self)
        self.bar.setRange(0, BAR_RESOLUTION)
        self.bar.setTextVisible(False)
        self.bar.setFixedSize(80, 6)
        self.bar.setStyleSheet(f"QProgressBar::chunk {{ background-color: {spec.color}; }}")

        right = QtWidgets.QVBoxLayout()
        right.addWidget(caption, alignment=QtCore.Qt.AlignRight)
        right.addWidget(self.value_label)
        right.addWidget(self.bar, alignment=QtCore.Qt.AlignRight)

        layout = QtWidgets.QHBoxLayout(self)
        layout.addWidget(dot)
        layout.addWidget(name)
        layout.addStretch(1)
        layout.addLayout(right)

    def set_value(self, value: float) -> None:
        self.value_label.setText(f"{value:.3f}")
        self.bar.setValue(bar_value(value))


class ControlPanel(QtWidgets.QWidget):
    """
    Coefficient readouts, elapsed time, the live expression and the
    play/pause + reset buttons. Holds no animation state of its own.
    """
    play_toggled = pyqtSignal()
    reset_requested = pyqtSignal()

    def __init__(self, specs: Sequence[Any], parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self.specs = tuple(specs)

        self.figure_tag = QtWidgets.QLabel(FIGURE_TAG, self)
        self.figure_tag.setStyleSheet(
            "font-family: monospace; font-size: 10px; color: #78716c;"
            " border: 1px solid #e7e5e4; border-radius: 8px; padding: 2px 8px;"
        )

        title = QtWidgets.QLabel("Parameters", self)
        title.setStyleSheet("font-family: serif; font-size: 20px;")
        blurb = QtWidgets.QLabel(
            "Real-time modulation of basis function weights. The scalar "
            "coefficients c<sub>i</sub> oscillate around 0.5.",
            self,
        )
        blurb.setWordWrap(True)
        blurb.setTextFormat(QtCore.Qt.RichText)

        self.cards: List[CoefficientCard] = [CoefficientCard(spec, self) for spec in self.specs]

        self.expression_label = QtWidgets.QLabel(self)
        self.expression_label.setStyleSheet("font-family: monospace;")
        self.time_label = QtWidgets.QLabel("t = 0.00s", self)
        self.time_label.setStyleSheet("color: #a8a29e; font-family: monospace;")

        self.reset_button = QtWidgets.QPushButton("Reset", self)
        self.reset_button.clicked.connect(lambda: self.reset_requested.emit())
        self.play_button = QtWidgets.QPushButton("Pause", self)
        self.play_button.clicked.connect(lambda: self.play_toggled.emit())

        self.analysis_card = QtWidgets.QFrame(self)
        self.analysis_card.setFrameShape(QtWidgets.QFrame.StyledPanel)
        analysis_title = QtWidgets.QLabel(ANALYSIS_TITLE, self.analysis_card)
        analysis_title.setStyleSheet("font-family: serif; font-size: 16px;")
        self.analysis_text = QtWidgets.QLabel(ANALYSIS_TEXT, self.analysis_card)
        self.analysis_text.setTextFormat(QtCore.Qt.RichText)
        self.analysis_text.setWordWrap(True)
        self.analysis_text.setStyleSheet("color: #78716c;")
        card_layout = QtWidgets.QVBoxLayout(self.analysis_card)
        card_layout.addWidget(analysis_title)
        card_layout.addWidget(self.analysis_text)

        controls = QtWidgets.QHBoxLayout()
        controls.addWidget(self.time_label)
        controls.addStretch(1)
        controls.addWidget(self.reset_button)
        controls.addWidget(self.play_button)

        layout = QtWidgets.QVBoxLayout(self)
        layout.addWidget(self.figure_tag, alignment=QtCore.Qt.AlignRight)
        layout.addWidget(title)
        layout.addWidget(blurb)
        for card in self.cards:
            layout.addWidget(card)
        layout.addWidget(self.expression_label)
        layout.addLayout(controls)
        layout.addWidget(self.analysis_card)
        layout.addStretch(1)

        self.on_coefficients([0.5] * len(self.specs), 0.0)

    def on_coefficients(self, coeffs: Sequence[float], elapsed: float) -> None:
        if len(coeffs) != len(self.cards):
            raise ValueError(f"expected {len(self.cards)} coefficients, got {len(coeffs)}")
        for card, value in zip(self.cards, coeffs):
            card.set_value(value)
        self.time_label.setText(f"t = {elapsed:.2f}s")
        self.expression_label.setText(format_expression(coeffs, self.specs))

    def on_state(self, state: str) -> None:
        self.play_button.setText("Pause" if state == PLAYING else "Resume")
