from typing import Optional, Tuple

from PyQt5.QtCore import pyqtSignal
from PyQt5.QtGui import QColor
from PyQt5.QtWidgets import (
    QFrame, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel, QPlainTextEdit,
    QComboBox, QToolButton, QPushButton, QColorDialog
)
from illustra.core.bubbles import Bubble, BubbleShape


class BubblePanel(QFrame):
    """Editor for the selected speech bubble: text, shape and colors."""

    # Emits a dict of changed bubble attributes
    bubble_changed = pyqtSignal(dict)
    delete_requested = pyqtSignal()

    COLOR_FIELDS = (
        ("background_color", "Fill"),
        ("text_color", "Text"),
        ("border_color", "Border"),
    )

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("BubblePanel")
        self._colors = {}
        self._updating = False
        self.setup_ui()
        self.hide()

    def setup_ui(self):
        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(12, 10, 12, 10)
        main_layout.setSpacing(8)

        header_label = QLabel("Speech Bubble", self)
        header_label.setObjectName("sectionLabel")
        main_layout.addWidget(header_label)

        self.text_edit = QPlainTextEdit(self)
        self.text_edit.setFixedHeight(60)
        self.text_edit.textChanged.connect(self._on_text_changed)
        main_layout.addWidget(self.text_edit)

        # Shape
        shape_layout = QHBoxLayout()
        shape_layout.addWidget(QLabel("Shape:", self))
        self.shape_combo = QComboBox(self)
        self.shape_combo.addItem("Rounded", BubbleShape.ROUNDED)
        self.shape_combo.addItem("Oval", BubbleShape.ELLIPSE)
        self.shape_combo.currentIndexChanged.connect(self._on_shape_changed)
        shape_layout.addWidget(self.shape_combo)
        main_layout.addLayout(shape_layout)

        # Colors
        color_grid = QGridLayout()
        color_grid.setSpacing(6)
        self.color_buttons = {}
        for column, (field_name, label) in enumerate(self.COLOR_FIELDS):
            color_grid.addWidget(QLabel(label, self), 0, column)
            btn = QToolButton(self)
            btn.setToolTip(f"Choose {label.lower()} color")
            btn.setFixedSize(40, 28)
            btn.clicked.connect(lambda checked, f=field_name, l=label: self._choose_color(f, l))
            self.color_buttons[field_name] = btn
            color_grid.addWidget(btn, 1, column)
        main_layout.addLayout(color_grid)

        self.delete_button = QPushButton("Delete bubble", self)
        self.delete_button.setObjectName("deleteBubbleButton")
        self.delete_button.clicked.connect(self.delete_requested.emit)
        main_layout.addWidget(self.delete_button)

    def show_bubble(self, bubble: Optional[Bubble]):
        """Load a bubble into the panel, or hide the panel for None."""
        if bubble is None:
            self.hide()
            return

        self._updating = True
        if self.text_edit.toPlainText() != bubble.text:
            self.text_edit.setPlainText(bubble.text)
        self.shape_combo.setCurrentIndex(self.shape_combo.findData(bubble.shape))
        for field_name, _ in self.COLOR_FIELDS:
            self._colors[field_name] = getattr(bubble, field_name)
            self._update_color_button(field_name)
        self._updating = False
        self.show()

    def _on_text_changed(self):
        if not self._updating:
            self.bubble_changed.emit({"text": self.text_edit.toPlainText()})

    def _on_shape_changed(self, index):
        if not self._updating and index >= 0:
            self.bubble_changed.emit({"shape": self.shape_combo.itemData(index)})

    def _choose_color(self, field_name: str, label: str):
        """Open color picker dialog."""
        r, g, b = self._colors.get(field_name, (0, 0, 0))
        color = QColorDialog.getColor(QColor(r, g, b), self, f"Choose Bubble {label} Color")

        if color.isValid():
            rgb: Tuple[int, int, int] = (color.red(), color.green(), color.blue())
            self._colors[field_name] = rgb
            self._update_color_button(field_name)
            self.bubble_changed.emit({field_name: rgb})

    def _update_color_button(self, field_name: str):
        """Update a color button to show its current color."""
        r, g, b = self._colors[field_name]
        self.color_buttons[field_name].setStyleSheet(f"""
            QToolButton {{
                background-color: rgb({r}, {g}, {b});
                border: 2px solid #555555;
                border-radius: 4px;
            }}
            QToolButton:hover {{
                border: 2px solid #777777;
            }}
        """)
