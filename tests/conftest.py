"""Pytest fixtures for Painting Program tests."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt5.QtCore import QEvent, QPointF, Qt
from PyQt5.QtGui import QMouseEvent
from PyQt5.QtWidgets import QApplication

from painting_program.app import Canvas, MainWindow, PaintState


# ============================================================================
# Application Fixtures
# ============================================================================

@pytest.fixture(scope="session")
def qapp():
    """Create the single QApplication used by every widget test."""
    app = QApplication.instance() or QApplication([])
    yield app


# ============================================================================
# Canvas Fixtures
# ============================================================================

@pytest.fixture
def state():
    """Create a PaintState with the default color and brush size."""
    return PaintState()


@pytest.fixture
def canvas(qapp, state):
    """Create a 100x100 Canvas bound to the state fixture."""
    c = Canvas(state)
    c.resize(100, 100)
    yield c
    c.deleteLater()


@pytest.fixture
def drag():
    """Return a function that sends left-button drag moves to a widget."""
    def _drag(widget, *positions, buttons=Qt.LeftButton):
        for x, y in positions:
            event = QMouseEvent(QEvent.MouseMove, QPointF(x, y),
                                Qt.NoButton, buttons, Qt.NoModifier)
            QApplication.sendEvent(widget, event)
    return _drag


# ============================================================================
# Window Fixtures
# ============================================================================

class StubColorChooser:
    """Stands in for the modal color dialog and records its calls."""

    def __init__(self, result=None):
        self.result = result
        self.calls = []

    def __call__(self, initial, parent, title):
        self.calls.append((initial, parent, title))
        return self.result


@pytest.fixture
def chooser():
    """Create a color chooser that cancels unless given a result."""
    return StubColorChooser()


@pytest.fixture
def window(qapp, chooser):
    """Create and show a MainWindow with the stub chooser."""
    w = MainWindow(color_chooser=chooser)
    w.show()
    yield w
    w.close()
    w.deleteLater()
