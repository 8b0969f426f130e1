# main_synthesis.py

import os
import sys
from PyQt5 import QtWidgets

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from BasisGraph import SynthesisWindow


if __name__ == "__main__":
    # Standard Qt application
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])

    # Three dashed basis curves behind the animated gold result curve
    window = SynthesisWindow()
    window.show()

    # Run the event loop
    app.exec()
