from PyQt5.QtGui import QKeySequence
from PyQt5.QtWidgets import (
    QDialog, QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QLabel,
    QPlainTextEdit, QShortcut, QMessageBox
)
from illustra.controllers import EditSessionController
from illustra.core.errors import InvalidInput
from illustra.styles import ThemeManager
from illustra.ui.toolbars import BubblePanel, EditToolbar
from illustra.ui.widgets import EditorCanvas
from illustra.utils.warning_manager import WarningType, warning_manager


class ImageEditorWindow(QDialog):
    """Modal editor for refining one illustration."""

    def __init__(self, controller: EditSessionController, dark_mode: bool = True, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Edit Illustration")
        self.controller = controller
        self.dark_mode = dark_mode

        self.setup_ui()
        self.connect_signals()
        ThemeManager.apply_theme(self, dark_mode)

        self.toolbar.set_tool_mode(controller.tool_mode)
        self.toolbar.set_pen_size(controller.pen_size)
        self.refresh_actions()

    def setup_ui(self):
        self.resize(1100, 720)
        main_layout = QHBoxLayout(self)
        main_layout.setContentsMargins(16, 16, 16, 16)
        main_layout.setSpacing(16)

        # Left: canvas and tools
        left_layout = QVBoxLayout()
        left_layout.setSpacing(8)
        self.canvas = EditorCanvas(self.controller, self)
        left_layout.addWidget(self.canvas, 1)
        self.toolbar = EditToolbar(self)
        left_layout.addWidget(self.toolbar)
        main_layout.addLayout(left_layout, 2)

        # Right: prompt, bubble editor and session buttons
        right_panel = QWidget(self)
        right_panel.setFixedWidth(340)
        right_layout = QVBoxLayout(right_panel)
        right_layout.setContentsMargins(0, 0, 0, 0)
        right_layout.setSpacing(10)

        title_label = QLabel("Edit Illustration", right_panel)
        title_label.setObjectName("titleLabel")
        right_layout.addWidget(title_label)

        self.prompt_edit = QPlainTextEdit(right_panel)
        self.prompt_edit.setPlaceholderText("Describe the change, e.g. \"make the sky purple\"")
        self.prompt_edit.setFixedHeight(90)
        right_layout.addWidget(self.prompt_edit)

        self.apply_button = QPushButton("Apply AI Edit", right_panel)
        self.apply_button.setObjectName("applyButton")
        right_layout.addWidget(self.apply_button)

        self.error_label = QLabel("", right_panel)
        self.error_label.setObjectName("errorLabel")
        self.error_label.setWordWrap(True)
        self.error_label.hide()
        right_layout.addWidget(self.error_label)

        self.bubble_panel = BubblePanel(right_panel)
        right_layout.addWidget(self.bubble_panel)

        right_layout.addStretch()

        buttons_layout = QHBoxLayout()
        self.cancel_button = QPushButton("Cancel", right_panel)
        buttons_layout.addWidget(self.cancel_button)
        self.save_button = QPushButton("✓ Save & Close", right_panel)
        self.save_button.setObjectName("saveButton")
        buttons_layout.addWidget(self.save_button)
        right_layout.addLayout(buttons_layout)

        main_layout.addWidget(right_panel)

    def connect_signals(self):
        controller = self.controller

        # Toolbar -> controller
        self.toolbar.tool_selected.connect(self._on_tool_selected)
        self.toolbar.ai_select_requested.connect(self._on_ai_select)
        self.toolbar.add_bubble_requested.connect(self._on_add_bubble)
        self.toolbar.pen_size_selected.connect(controller.set_pen_size)
        self.toolbar.clear_mask_requested.connect(controller.clear_mask)
        self.toolbar.undo_requested.connect(controller.undo)

        # Right panel -> controller
        self.prompt_edit.textChanged.connect(
            lambda: controller.set_prompt(self.prompt_edit.toPlainText()))
        self.apply_button.clicked.connect(self._on_apply_edit)
        self.bubble_panel.bubble_changed.connect(
            lambda changes: controller.update_selected_bubble(**changes))
        self.bubble_panel.delete_requested.connect(
            lambda: self._confirm_delete_bubble(controller.bubbles.selected_id))
        self.canvas.bubble_delete_requested.connect(self._confirm_delete_bubble)
        self.cancel_button.clicked.connect(self.reject)
        self.save_button.clicked.connect(self._on_save)

        # Controller -> UI
        controller.tool_mode_changed.connect(self.toolbar.set_tool_mode)
        controller.pen_size_changed.connect(self.toolbar.set_pen_size)
        controller.prompt_changed.connect(self._on_prompt_changed)
        controller.state_changed.connect(lambda _: self.refresh_actions())
        controller.history_changed.connect(self.refresh_actions)
        controller.mask_changed.connect(self.refresh_actions)
        controller.selection_changed.connect(
            lambda _: self.bubble_panel.show_bubble(controller.bubbles.selected()))
        controller.error_occurred.connect(self._show_error)
        controller.save_failed.connect(self._on_save_failed)

        undo_shortcut = QShortcut(QKeySequence.Undo, self)
        undo_shortcut.activated.connect(controller.undo)

    # ------------------------------------------------------------------
    # State sync
    # ------------------------------------------------------------------

    def refresh_actions(self):
        """Enable or disable controls for the controller's current state."""
        controller = self.controller
        idle = controller.is_idle
        self.toolbar.update_actions(idle, controller.can_clear_mask(), controller.can_undo())
        self.prompt_edit.setEnabled(idle)
        self.apply_button.setEnabled(controller.can_apply_edit())
        self.cancel_button.setEnabled(idle)
        self.save_button.setEnabled(idle)

    def _on_prompt_changed(self, text: str):
        if self.prompt_edit.toPlainText() != text:
            self.prompt_edit.setPlainText(text)
        self.apply_button.setEnabled(self.controller.can_apply_edit())

    def _show_error(self, message: str):
        self.error_label.setText(message)
        self.error_label.show()

    def _clear_error(self):
        self.error_label.clear()
        self.error_label.hide()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _on_tool_selected(self, mode):
        self.controller.set_tool_mode(mode)
        # Clicking the active tool would otherwise uncheck its button
        self.toolbar.set_tool_mode(self.controller.tool_mode)

    def _on_ai_select(self):
        self._clear_error()
        self.controller.request_subject_mask()
        self.toolbar.set_tool_mode(self.controller.tool_mode)

    def _on_add_bubble(self):
        self.controller.add_bubble()
        self.toolbar.set_tool_mode(self.controller.tool_mode)

    def _on_apply_edit(self):
        self._clear_error()
        try:
            self.controller.apply_edit()
        except InvalidInput as e:
            self._show_error(str(e))

    def _confirm_delete_bubble(self, bubble_id):
        if not bubble_id:
            return
        if warning_manager.show_confirmation(
            self, WarningType.DELETE_BUBBLE,
            "Delete Bubble", "Are you sure you want to delete this speech bubble?"
        ):
            self.controller.delete_bubble(bubble_id)

    def _on_save(self):
        if self.controller.save_and_close() is not None:
            self.accept()

    def _on_save_failed(self, message: str):
        QMessageBox.critical(self, "Save Failed", message)

    def reject(self):
        """Cancel the session, asking first if there are edits to lose."""
        if self.controller.is_closed:
            super().reject()
            return
        if not self.controller.is_idle:
            return

        if self.controller.has_unsaved_changes and not warning_manager.show_confirmation(
            self, WarningType.DISCARD_EDITS,
            "Discard Changes", "Close the editor and discard your edits?"
        ):
            return

        self.controller.cancel()
        super().reject()

    def closeEvent(self, event):
        if self.controller.is_closed:
            event.accept()
            return
        if not self.controller.is_idle:
            QMessageBox.information(
                self, "Please Wait",
                "An AI request is still running. The editor can close once it finishes."
            )
            event.ignore()
            return
        event.ignore()
        self.reject()

