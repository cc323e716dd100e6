"""Painting Program: a freehand canvas with a swatch toolbar, built with PyQt5."""

import logging
import os
import sys
from dataclasses import dataclass

from PyQt5.QtCore import QPointF, QRect, QStandardPaths, Qt, pyqtSignal
from PyQt5.QtGui import QBrush, QColor, QPainter, QPixmap, QRadialGradient
from PyQt5.QtWidgets import (
    QApplication, QColorDialog, QHBoxLayout, QLabel, QMainWindow, QPushButton,
    QSizePolicy, QSlider, QStyle, QStyleOptionSlider, QToolBar, QVBoxLayout,
    QWidget,
)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
APP_NAME = "Painting Program"
ORG_NAME = "PaintingProgram"
WINDOW_TITLE = APP_NAME
CUSTOM_COLOR_TITLE = "Select a Custom Color"
DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600

BRUSH_SIZE_MIN = 1
BRUSH_SIZE_MAX = 20
BRUSH_SIZE_DEFAULT = 5
BRUSH_TICK_SPACING = 5

BACKGROUND_COLOR = QColor(Qt.white)
PRESET_COLORS = [Qt.black, Qt.red, Qt.green, Qt.blue, Qt.yellow]
GRADIENT_COLORS = [Qt.blue, Qt.yellow, Qt.green]

SWATCH_SIZE = 30
ICON_SWATCH_SIZE = 40
ICON_SIZE = 30

RESOURCE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "resources")
ERASER_ICON_PATH = os.path.join(RESOURCE_DIR, "eraser.png")

log = logging.getLogger("paint")


# ---------------------------------------------------------------------------
# Shared state
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class ColoredPoint:
    """One dab: the top-left corner of its bounding box, color and diameter."""
    x: int
    y: int
    color: QColor
    diameter: int

    def __post_init__(self):
        # QColor is mutable, keep a private copy
        object.__setattr__(self, "color", QColor(self.color))


class PaintState:
    """Current color and brush diameter shared by the window's widgets."""

    def __init__(self, color=Qt.black, brush_size=BRUSH_SIZE_DEFAULT):
        self._color = QColor(Qt.black)
        self._brush_size = BRUSH_SIZE_DEFAULT
        self.set_color(color)
        self.set_brush_size(brush_size)

    @property
    def color(self):
        return QColor(self._color)

    @property
    def brush_size(self):
        return self._brush_size

    def set_color(self, color):
        c = QColor(color)
        if not c.isValid():
            raise ValueError(f"invalid color: {color!r}")
        self._color = c

    def set_brush_size(self, size):
        """Set the brush diameter, clamped to the slider range."""
        self._brush_size = max(BRUSH_SIZE_MIN, min(BRUSH_SIZE_MAX, int(size)))


# ---------------------------------------------------------------------------
# Canvas
# ---------------------------------------------------------------------------
class Canvas(QWidget):
    def __init__(self, state, parent=None):
        super().__init__(parent)
        self.state = state
        self._points = []
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)

    @property
    def points(self):
        return tuple(self._points)

    def add_point(self, x, y):
        """Stamp a dab at (x, y) with the current color and brush size."""
        point = ColoredPoint(x, y, self.state.color, self.state.brush_size)
        self._points.append(point)
        self.update()
        return point

    def clear(self):
        log.info(f"[clear] dropping {len(self._points)} points")
        self._points.clear()
        self.update()

    # Without mouse tracking Qt only delivers moves while a button is held
    def mouseMoveEvent(self, event):
        if event.buttons() == Qt.NoButton:
            return
        self.add_point(event.x(), event.y())

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), BACKGROUND_COLOR)
        painter.setPen(Qt.NoPen)
        for point in self._points:
            painter.setBrush(point.color)
            painter.drawEllipse(point.x, point.y, point.diameter, point.diameter)
        painter.end()


# ---------------------------------------------------------------------------
# Swatches
# ---------------------------------------------------------------------------
def solid_fill(color, margin=5):
    """Flat circle inset by ``margin`` on every side."""
    color = QColor(color)

    def render(painter, rect):
        painter.setPen(Qt.NoPen)
        painter.setBrush(color)
        painter.drawEllipse(rect.adjusted(margin, margin, -margin, -margin))
    return render


def radial_gradient_fill(colors):
    """Full circle with a radial gradient, colors spread evenly from 0 to 1."""
    colors = [QColor(c) for c in colors]

    def render(painter, rect):
        center = QPointF(rect.width() // 2, rect.height() // 2)
        gradient = QRadialGradient(center, rect.width() / 2)
        last = max(len(colors) - 1, 1)
        for i, c in enumerate(colors):
            gradient.setColorAt(i / last, c)
        painter.setPen(Qt.NoPen)
        painter.setBrush(QBrush(gradient))
        painter.drawEllipse(rect)
    return render


def icon_fill(pixmap, background=Qt.lightGray, offset=5):
    background = QColor(background)

    def render(painter, rect):
        painter.setPen(Qt.NoPen)
        painter.setBrush(background)
        painter.drawEllipse(rect)
        if not pixmap.isNull():
            painter.drawPixmap(offset, offset, pixmap)
    return render


def load_icon(path, size=ICON_SIZE):
    """Load and scale an icon; a missing file gives a null pixmap."""
    pixmap = QPixmap(path)
    if pixmap.isNull():
        log.warning(f"[icon] Could not load {path!r}, drawing swatch without it")
        return pixmap
    return pixmap.scaled(size, size, Qt.IgnoreAspectRatio, Qt.SmoothTransformation)


class Swatch(QWidget):
    """Round clickable swatch; ``render`` draws its face."""
    clicked = pyqtSignal()

    def __init__(self, render, size=SWATCH_SIZE, tooltip=None, parent=None):
        super().__init__(parent)
        self._render = render
        self.setFixedSize(size, size)
        self.setCursor(Qt.PointingHandCursor)
        if tooltip:
            self.setToolTip(tooltip)

    def paintEvent(self, event):
        p = QPainter(self)
        p.setRenderHint(QPainter.Antialiasing)
        self._render(p, QRect(0, 0, self.width(), self.height()))
        p.end()

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            self.clicked.emit()


# ---------------------------------------------------------------------------
# Tool panel
# ---------------------------------------------------------------------------
class LabeledSlider(QWidget):
    """Horizontal QSlider with its tick values painted underneath."""

    _LABEL_HEIGHT = 14

    def __init__(self, minimum, maximum, value, tick_spacing, parent=None):
        super().__init__(parent)
        self.slider = QSlider(Qt.Horizontal)
        self.slider.setRange(minimum, maximum)
        self.slider.setValue(value)
        self.slider.setTickInterval(tick_spacing)
        self.slider.setTickPosition(QSlider.TicksBelow)
        self.slider.setPageStep(tick_spacing)
        self.slider.setMinimumWidth(160)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, self._LABEL_HEIGHT)
        layout.addWidget(self.slider)

    def tick_values(self):
        s = self.slider
        return list(range(s.minimum(), s.maximum() + 1, s.tickInterval()))

    def _tick_x(self, value):
        s = self.slider
        opt = QStyleOptionSlider()
        opt.initFrom(s)
        opt.orientation = s.orientation()
        opt.minimum = s.minimum()
        opt.maximum = s.maximum()
        opt.sliderPosition = s.sliderPosition()
        opt.sliderValue = s.value()
        opt.tickPosition = s.tickPosition()
        opt.tickInterval = s.tickInterval()
        style = s.style()
        groove = style.subControlRect(QStyle.CC_Slider, opt, QStyle.SC_SliderGroove, s)
        handle = style.subControlRect(QStyle.CC_Slider, opt, QStyle.SC_SliderHandle, s)
        span = groove.width() - handle.width()
        pos = QStyle.sliderPositionFromValue(s.minimum(), s.maximum(), value, span)
        return s.x() + groove.x() + handle.width() // 2 + pos

    def label_positions(self):
        """(x, text) for each tick label, centered under its tick."""
        fm = self.fontMetrics()
        labels = []
        for value in self.tick_values():
            text = str(value)
            labels.append((self._tick_x(value) - fm.horizontalAdvance(text) // 2, text))
        return labels

    def paintEvent(self, event):
        p = QPainter(self)
        p.setPen(self.palette().color(self.foregroundRole()))
        baseline = self.height() - 2
        for x, text in self.label_positions():
            p.drawText(x, baseline, text)
        p.end()


class ToolPanel(QWidget):
    """Preset swatches, custom color, eraser, Clear and the brush slider."""
    color_selected = pyqtSignal(QColor)
    custom_color_requested = pyqtSignal()
    clear_requested = pyqtSignal()
    brush_size_changed = pyqtSignal(int)

    def __init__(self, eraser_icon, colors=PRESET_COLORS, parent=None):
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(4, 2, 4, 2)
        layout.setSpacing(4)

        self.preset_swatches = []
        for color in colors:
            c = QColor(color)
            sw = Swatch(solid_fill(c), tooltip=c.name())
            sw.clicked.connect(lambda c=c: self.color_selected.emit(QColor(c)))
            layout.addWidget(sw)
            self.preset_swatches.append(sw)

        self.custom_swatch = Swatch(radial_gradient_fill(GRADIENT_COLORS),
                                    tooltip="Custom color...")
        self.custom_swatch.clicked.connect(self.custom_color_requested)
        layout.addWidget(self.custom_swatch)

        self.eraser_swatch = Swatch(icon_fill(eraser_icon), size=ICON_SWATCH_SIZE,
                                    tooltip="Eraser")
        self.eraser_swatch.clicked.connect(
            lambda: self.color_selected.emit(QColor(BACKGROUND_COLOR)))
        layout.addWidget(self.eraser_swatch)

        self.clear_button = QPushButton("Clear")
        self.clear_button.clicked.connect(lambda checked=False: self.clear_requested.emit())
        layout.addWidget(self.clear_button)

        layout.addWidget(QLabel("Brush Size:"))
        self.brush_slider = LabeledSlider(BRUSH_SIZE_MIN, BRUSH_SIZE_MAX,
                                          BRUSH_SIZE_DEFAULT, BRUSH_TICK_SPACING)
        self.brush_slider.slider.valueChanged.connect(self.brush_size_changed)
        layout.addWidget(self.brush_slider)


# ---------------------------------------------------------------------------
# Main window
# ---------------------------------------------------------------------------
def ask_color(initial, parent=None, title=CUSTOM_COLOR_TITLE):
    """Modal color dialog. Returns the chosen QColor, or None if cancelled."""
    color = QColorDialog.getColor(QColor(initial), parent, title)
    return color if color.isValid() else None


class MainWindow(QMainWindow):
    def __init__(self, color_chooser=None, icon_path=ERASER_ICON_PATH):
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.resize(DEFAULT_WIDTH, DEFAULT_HEIGHT)

        self._color_chooser = color_chooser or ask_color

        self.state = PaintState()
        self.canvas = Canvas(self.state)
        self.setCentralWidget(self.canvas)

        self._build_tool_panel(icon_path)

    def _build_tool_panel(self, icon_path):
        tb = self.tool_bar = QToolBar("Tools")
        tb.setMovable(False)
        self.addToolBar(Qt.BottomToolBarArea, tb)

        self.tool_panel = ToolPanel(load_icon(icon_path))
        self._connect(self.tool_panel.color_selected, self.select_color, "select_color")
        self._connect(self.tool_panel.custom_color_requested, self.choose_custom_color,
                      "custom_color")
        self._connect(self.tool_panel.clear_requested, self.clear_canvas, "clear")
        self._connect(self.tool_panel.brush_size_changed, self.set_brush_size,
                      "brush_size")
        tb.addWidget(self.tool_panel)

    def _connect(self, signal, slot, name):
        def _handler(*args, _s=slot, _t=name):
            log.info(f"[action] {_t} {args}")
            try:
                _s(*args)
            except Exception as e:
                log.error(f"[action ERROR] {_t}: {e}", exc_info=True)
        signal.connect(_handler)

    # ---- Handlers ----
    def select_color(self, color):
        self.state.set_color(color)

    def choose_custom_color(self):
        color = self._color_chooser(self.state.color, self, CUSTOM_COLOR_TITLE)
        if color is None:
            log.info("[custom_color] cancelled")
            return
        self.state.set_color(color)

    def clear_canvas(self):
        self.canvas.clear()

    def set_brush_size(self, size):
        self.state.set_brush_size(size)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def _setup_logging(log_dir=None):
    """Log to debug.log in the per-user data dir, or to stderr if it is not writable."""
    fmt = "%(asctime)s %(message)s"
    log_dir = log_dir or QStandardPaths.writableLocation(QStandardPaths.AppDataLocation) \
        or os.path.expanduser("~")
    log_path = os.path.join(log_dir, "debug.log")
    try:
        os.makedirs(log_dir, exist_ok=True)
        logging.basicConfig(filename=log_path, level=logging.DEBUG, format=fmt, force=True)
    except OSError as e:
        logging.basicConfig(stream=sys.stderr, level=logging.DEBUG, format=fmt, force=True)
        log.warning(f"[log] Cannot write {log_path!r} ({e}), logging to stderr")
        return None
    return log_path


def main():
    import traceback
    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setOrganizationName(ORG_NAME)
    _setup_logging()

    def _excepthook(t, v, tb):
        log.error("".join(traceback.format_exception(t, v, tb)))
        sys.__excepthook__(t, v, tb)
    sys.excepthook = _excepthook
    log.info("Starting")
    window = MainWindow()
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
