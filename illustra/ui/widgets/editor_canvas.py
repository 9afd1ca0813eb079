from typing import Optional, Tuple

from PyQt5.QtCore import Qt, QPointF, QRectF, pyqtSignal
from PyQt5.QtGui import QColor, QImage, QPainter, QPen
from PyQt5.QtWidgets import QSizePolicy, QWidget

from illustra.controllers import EditSessionController
from illustra.core.bubbles.renderer import bubble_path
from illustra.core.modes import ToolMode

MASK_OVERLAY_OPACITY = 0.7


# Widget showing the layered image and handling pen and bubble input
class EditorCanvas(QWidget):
    bubble_delete_requested = pyqtSignal(str)  # Emits id of bubble to delete

    def __init__(self, controller: EditSessionController, parent=None):
        super().__init__(parent)
        self.setObjectName("EditorCanvas")
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.controller = controller

        self.zoom_level = 1.0
        self._offset = QPointF(0, 0)
        self._base_image: Optional[QImage] = None
        self._bubble_layer: Optional[QImage] = None

        # Bubble drag state
        self._dragged_bubble_id: Optional[str] = None
        self._drag_offset = (0.0, 0.0)

        self._busy_message = ""

        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setMinimumSize(320, 320)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)

        controller.history_changed.connect(self._on_history_changed)
        controller.mask_changed.connect(self.update)
        controller.bubbles_changed.connect(self._on_bubbles_changed)
        controller.selection_changed.connect(lambda _: self.update())
        controller.busy.connect(self._on_busy)
        controller.state_changed.connect(self._on_state_changed)
        controller.tool_mode_changed.connect(self._update_cursor)

        self._on_history_changed()
        self._update_cursor()

    # ------------------------------------------------------------------
    # Layers
    # ------------------------------------------------------------------

    def _on_history_changed(self):
        self._base_image = self.controller.history.current().to_image()
        self._on_bubbles_changed()

    def _on_bubbles_changed(self):
        width, height = self._base_image.width(), self._base_image.height()
        self._bubble_layer = QImage(width, height, QImage.Format_ARGB32_Premultiplied)
        self.controller.bubbles.render(self._bubble_layer)
        self.update()

    def _on_busy(self, message: str):
        self._busy_message = message
        self.update()

    def _on_state_changed(self, state):
        if self.controller.is_idle:
            self._busy_message = ""
        self.update()

    def _update_cursor(self, *_):
        if self.controller.tool_mode == ToolMode.PEN:
            self.setCursor(Qt.CrossCursor)
        elif self.controller.tool_mode == ToolMode.BUBBLE:
            self.setCursor(Qt.OpenHandCursor)
        else:
            self.setCursor(Qt.ArrowCursor)

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def _update_geometry(self):
        """Fit the raster inside the widget, keeping its aspect ratio."""
        width, height = self._base_image.width(), self._base_image.height()
        if width == 0 or height == 0:
            self.zoom_level = 1.0
            self._offset = QPointF(0, 0)
            return
        self.zoom_level = min(self.width() / width, self.height() / height) or 1.0
        self._offset = QPointF((self.width() - width * self.zoom_level) / 2,
                               (self.height() - height * self.zoom_level) / 2)

    def to_raster(self, pos) -> Tuple[float, float]:
        """Map a widget position to raster pixel coordinates."""
        self._update_geometry()
        return ((pos.x() - self._offset.x()) / self.zoom_level,
                (pos.y() - self._offset.y()) / self.zoom_level)

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def paintEvent(self, event):
        self._update_geometry()
        painter = QPainter(self)
        painter.setRenderHint(QPainter.SmoothPixmapTransform)

        painter.save()
        painter.translate(self._offset)
        painter.scale(self.zoom_level, self.zoom_level)

        # Base raster, then mask feedback, then bubbles
        painter.drawImage(0, 0, self._base_image)
        painter.setOpacity(MASK_OVERLAY_OPACITY)
        painter.drawImage(0, 0, self.controller.mask.overlay())
        painter.setOpacity(1.0)
        painter.drawImage(0, 0, self._bubble_layer)

        selected = self.controller.bubbles.selected()
        if selected is not None:
            outline = QPen(QColor(74, 158, 255), 2, Qt.DashLine)
            outline.setCosmetic(True)
            painter.setPen(outline)
            painter.setBrush(Qt.NoBrush)
            painter.drawPath(bubble_path(selected))
        painter.restore()

        if not self.controller.is_idle and self._busy_message:
            painter.fillRect(self.rect(), QColor(0, 0, 0, 153))
            painter.setPen(QColor(240, 240, 240))
            painter.drawText(QRectF(self.rect()), Qt.AlignCenter, self._busy_message)

        painter.end()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def mousePressEvent(self, event):
        self.setFocus()
        if event.button() != Qt.LeftButton:
            return

        point = self.to_raster(event.pos())
        mode = self.controller.tool_mode

        if mode == ToolMode.PEN:
            self.controller.begin_stroke(point)
        elif mode == ToolMode.BUBBLE:
            bubble = self.controller.bubbles.bubble_at(*point)
            self.controller.select_bubble(bubble.id if bubble else None)
            if bubble:
                self._dragged_bubble_id = bubble.id
                self._drag_offset = (point[0] - bubble.x, point[1] - bubble.y)
                self.setCursor(Qt.ClosedHandCursor)

    def mouseMoveEvent(self, event):
        point = self.to_raster(event.pos())
        if self.controller.mask.is_stroking():
            self.controller.extend_stroke(point)
        elif self._dragged_bubble_id is not None:
            dx, dy = self._drag_offset
            self.controller.move_bubble(self._dragged_bubble_id, point[0] - dx, point[1] - dy)

    def mouseReleaseEvent(self, event):
        if event.button() != Qt.LeftButton:
            return
        self._finish_interaction()

    def leaveEvent(self, event):
        self._finish_interaction()
        super().leaveEvent(event)

    def _finish_interaction(self):
        if self.controller.mask.is_stroking():
            self.controller.end_stroke()
        if self._dragged_bubble_id is not None:
            self._dragged_bubble_id = None
            self._update_cursor()

    def keyPressEvent(self, event):
        selected_id = self.controller.bubbles.selected_id
        if event.key() in (Qt.Key_Delete, Qt.Key_Backspace) and selected_id:
            self.bubble_delete_requested.emit(selected_id)
        elif event.key() == Qt.Key_Escape and selected_id:
            self.controller.select_bubble(None)
        else:
            super().keyPressEvent(event)
