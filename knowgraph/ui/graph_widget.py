from PyQt6.QtWidgets import QWidget
from PyQt6.QtCore import QTimer, Qt, QEvent, pyqtSignal
from PyQt6.QtGui import QPainter, QPixmap

from knowgraph.interaction import InteractionController
from knowgraph.viewport import Viewport
from knowgraph.ui.renderer import GraphRenderer
from knowgraph.resources.translations import tr

FRAME_INTERVAL_MS = 16  # ~60 FPS


class GraphWidget(QWidget):
    nodeClicked = pyqtSignal(object)  # uid
    hoverChanged = pyqtSignal(object)  # uid or None

    def __init__(self, engine, parent=None, theme="Dark", hit_padding=6.0, click_threshold=5.0):
        super().__init__(parent)
        self.engine = engine
        self.renderer = GraphRenderer(theme)
        self.viewport = Viewport(engine)
        self.controller = InteractionController(
            engine, on_click=self.nodeClicked.emit,
            hit_padding=hit_padding, click_threshold=click_threshold,
        )
        self.selected = None
        self._backing = None
        self._last_hovered = None

        self.setMinimumSize(200, 200)
        self.setMouseTracking(True)
        self.setAttribute(Qt.WidgetAttribute.WA_AcceptTouchEvents)

        # Frame loop: one physics tick + one repaint per timeout
        self.timer = QTimer(self)
        self.timer.timeout.connect(self.physics_loop)
        self.start()

    # --- Frame loop ---

    def start(self):
        if not self.timer.isActive():
            self.timer.start(FRAME_INTERVAL_MS)

    def stop(self):
        self.timer.stop()

    def physics_loop(self):
        self.engine.tick()
        self.update()

    def showEvent(self, event):
        self.start()
        super().showEvent(event)

    def hideEvent(self, event):
        self.stop()
        super().hideEvent(event)

    def closeEvent(self, event):
        self.stop()
        super().closeEvent(event)

    # --- Graph ---

    def load(self, nodes, edges):
        # Spawn around the current center even if no resize event has arrived yet
        if self.viewport.resize(self.width(), self.height(), self.devicePixelRatioF()):
            self._backing = None
        self.engine.load(nodes, edges)
        self.controller.reset()
        self.selected = None
        self._emit_hover()
        self.update()

    def set_selected(self, uid):
        self.selected = uid
        self.update()

    def set_theme(self, theme):
        self.renderer.set_theme(theme)
        self.update()

    @property
    def hovered(self):
        return self.controller.hovered

    # --- Viewport ---

    def resizeEvent(self, event):
        size = event.size()
        if self.viewport.resize(size.width(), size.height(), self.devicePixelRatioF()):
            self._backing = None
        super().resizeEvent(event)

    def _backing_pixmap(self):
        bw, bh = self.viewport.backing_size
        if self._backing is None or (self._backing.width(), self._backing.height()) != (bw, bh):
            self._backing = QPixmap(bw, bh)
            self._backing.setDevicePixelRatio(self.viewport.device_pixel_ratio)
        return self._backing

    def paintEvent(self, event):
        if self.viewport.width == 0 or self.viewport.height == 0:
            return
        backing = self._backing_pixmap()

        painter = QPainter(backing)
        try:
            self.renderer.render(
                painter, self.engine, self.viewport.width, self.viewport.height,
                hovered=self.controller.hovered, selected=self.selected,
                empty_text=tr("empty_graph"),
            )
        finally:
            painter.end()

        painter = QPainter(self)
        painter.drawPixmap(0, 0, backing)
        painter.end()

    # --- Mouse ---

    def mousePressEvent(self, event):
        if event.button() != Qt.MouseButton.LeftButton:
            return
        pos = event.position()
        if self.controller.pointer_down(pos.x(), pos.y()):
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
        self._emit_hover()

    def mouseMoveEvent(self, event):
        pos = event.position()
        self.controller.pointer_move(pos.x(), pos.y())
        if self.controller.dragging is None:
            cursor = Qt.CursorShape.PointingHandCursor if self.controller.hovered is not None else Qt.CursorShape.ArrowCursor
            self.setCursor(cursor)
        self._emit_hover()
        self.update()

    def mouseReleaseEvent(self, event):
        if event.button() != Qt.MouseButton.LeftButton:
            return
        pos = event.position()
        self.controller.pointer_up(pos.x(), pos.y())
        self.setCursor(Qt.CursorShape.ArrowCursor)
        self._emit_hover()
        self.update()

    def leaveEvent(self, event):
        self.controller.pointer_leave()
        self.setCursor(Qt.CursorShape.ArrowCursor)
        self._emit_hover()
        self.update()
        super().leaveEvent(event)

    # --- Touch ---

    def event(self, event):
        kind = event.type()
        if kind in (QEvent.Type.TouchBegin, QEvent.Type.TouchUpdate, QEvent.Type.TouchEnd, QEvent.Type.TouchCancel):
            self._touch_event(event)
            event.accept()
            return True
        return super().event(event)

    def _touch_event(self, event):
        kind = event.type()
        if kind == QEvent.Type.TouchCancel:
            self.controller.pointer_leave()
        else:
            points = event.points()
            if not points:
                return
            pos = points[0].position()
            if kind == QEvent.Type.TouchBegin:
                self.controller.pointer_down(pos.x(), pos.y(), touch=True)
            elif kind == QEvent.Type.TouchUpdate:
                self.controller.pointer_move(pos.x(), pos.y(), touch=True)
            else:
                self.controller.pointer_up(pos.x(), pos.y(), touch=True)
        self._emit_hover()
        self.update()

    def _emit_hover(self):
        hovered = self.controller.hovered
        if hovered != self._last_hovered:
            self._last_hovered = hovered
            self.hoverChanged.emit(hovered)
