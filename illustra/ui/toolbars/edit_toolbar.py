from PyQt5.QtCore import pyqtSignal
from PyQt5.QtWidgets import (
    QFrame, QHBoxLayout, QToolButton, QButtonGroup, QWidget
)
from illustra.core.modes import PenSize, ToolMode


class EditToolbar(QFrame):
    """Tool strip under the canvas: tools, pen sizes, clear mask and undo."""

    tool_selected = pyqtSignal(ToolMode)
    ai_select_requested = pyqtSignal()
    add_bubble_requested = pyqtSignal()
    pen_size_selected = pyqtSignal(PenSize)
    clear_mask_requested = pyqtSignal()
    undo_requested = pyqtSignal()

    PEN_SIZE_LABELS = {
        PenSize.SMALL: "S",
        PenSize.MEDIUM: "M",
        PenSize.LARGE: "L",
    }

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("EditToolbar")
        self.setup_ui()

    def _make_button(self, text, tooltip, checkable=False):
        btn = QToolButton(self)
        btn.setText(text)
        btn.setToolTip(tooltip)
        btn.setCheckable(checkable)
        btn.setFixedSize(36, 36)
        return btn

    def setup_ui(self):
        layout = QHBoxLayout(self)
        layout.setContentsMargins(8, 6, 8, 6)
        layout.setSpacing(4)

        # Tools
        self.pen_button = self._make_button("✎", "Pen", checkable=True)
        self.pen_button.clicked.connect(lambda: self.tool_selected.emit(ToolMode.PEN))
        layout.addWidget(self.pen_button)

        self.ai_select_button = self._make_button("✦", "AI select subject", checkable=True)
        self.ai_select_button.clicked.connect(self.ai_select_requested.emit)
        layout.addWidget(self.ai_select_button)

        self.bubble_button = self._make_button("💬", "Add speech bubble", checkable=True)
        self.bubble_button.clicked.connect(self.add_bubble_requested.emit)
        layout.addWidget(self.bubble_button)

        layout.addStretch()

        # Pen sizes, only shown while the pen is active
        self.pen_size_widget = QWidget(self)
        size_layout = QHBoxLayout(self.pen_size_widget)
        size_layout.setContentsMargins(0, 0, 0, 0)
        size_layout.setSpacing(4)
        self.pen_size_group = QButtonGroup(self)
        self.pen_size_group.setExclusive(True)
        self.pen_size_buttons = {}
        for size, label in self.PEN_SIZE_LABELS.items():
            btn = self._make_button(label, f"Pen size {size.value}px", checkable=True)
            btn.clicked.connect(lambda checked, s=size: self.pen_size_selected.emit(s))
            self.pen_size_group.addButton(btn)
            self.pen_size_buttons[size] = btn
            size_layout.addWidget(btn)
        layout.addWidget(self.pen_size_widget)

        layout.addStretch()

        # History and mask
        self.clear_mask_button = self._make_button("🗑", "Clear mask")
        self.clear_mask_button.clicked.connect(self.clear_mask_requested.emit)
        layout.addWidget(self.clear_mask_button)

        self.undo_button = self._make_button("↶", "Undo")
        self.undo_button.clicked.connect(self.undo_requested.emit)
        layout.addWidget(self.undo_button)

    def set_tool_mode(self, mode: ToolMode):
        """Reflect the active tool in the button states."""
        self.pen_button.setChecked(mode == ToolMode.PEN)
        self.ai_select_button.setChecked(mode == ToolMode.AI_SELECT)
        self.bubble_button.setChecked(mode == ToolMode.BUBBLE)
        self.pen_size_widget.setVisible(mode == ToolMode.PEN)

    def set_pen_size(self, size: PenSize):
        self.pen_size_buttons[size].setChecked(True)

    def update_actions(self, idle: bool, can_clear_mask: bool, can_undo: bool):
        """Enable or disable actions for the current session state."""
        self.ai_select_button.setEnabled(idle)
        self.clear_mask_button.setEnabled(can_clear_mask)
        self.undo_button.setEnabled(can_undo)
