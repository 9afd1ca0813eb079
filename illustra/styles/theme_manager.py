"""
Dark and light themes for the editor window.
"""
from PyQt5.QtWidgets import QWidget
from .models import ThemeColors


def _filled_button(object_name: str, fill: str, pressed: str, disabled: str) -> str:
    """Rules for a QPushButton with its own fill color."""
    selector = f'QPushButton[objectName="{object_name}"]'
    return f"""
        {selector} {{ background-color: {fill}; color: white; }}
        {selector}:hover, {selector}:pressed {{ background-color: {pressed}; }}
        {selector}:disabled {{ background-color: {disabled}; color: #9a9aa5; }}
    """


class ThemeManager:
    """Builds and applies the editor stylesheet."""

    DARK_THEME = ThemeColors(
        window="#232326",
        panel="#2d2d31",
        control="#3a3a40",
        control_hover="#46464d",
        text="#ececf1",
        text_dim="#8b8b96",
        accent="#7c5cff",
        accent_pressed="#6847f0",
        outline="#4a4a52",
        canvas="#17171a",
        error="#ff6b6b",
        save="#2f9e44",
        save_pressed="#2b8a3e",
        danger="#c92a2a",
    )

    LIGHT_THEME = ThemeColors(
        window="#f4f4f7",
        panel="#ffffff",
        control="#e6e6ec",
        control_hover="#d9d9e1",
        text="#1f1f24",
        text_dim="#6e6e7a",
        accent="#6a4cf5",
        accent_pressed="#5636e0",
        outline="#cfcfd8",
        canvas="#dcdce3",
        error="#e03131",
        save="#2f9e44",
        save_pressed="#2b8a3e",
        danger="#c92a2a",
    )

    @classmethod
    def get_theme_colors(cls, dark_mode: bool) -> ThemeColors:
        return cls.DARK_THEME if dark_mode else cls.LIGHT_THEME

    @classmethod
    def apply_theme(cls, widget: QWidget, dark_mode: bool) -> None:
        """Style the editor window and everything inside it."""
        widget.setStyleSheet(cls._generate_stylesheet(cls.get_theme_colors(dark_mode)))

    @classmethod
    def _generate_stylesheet(cls, c: ThemeColors) -> str:
        base = f"""
            QDialog, QWidget {{ background-color: {c.window}; color: {c.text}; }}
            QLabel {{ background: transparent; }}
            #titleLabel {{ font-size: 20px; font-weight: 600; }}
            #sectionLabel {{ color: {c.text_dim}; font-weight: 600; }}
            #errorLabel {{ color: {c.error}; }}

            QPushButton {{
                background-color: {c.control};
                border-radius: 6px;
                padding: 8px 14px;
                font-weight: 600;
            }}
            QPushButton:hover {{ background-color: {c.control_hover}; }}
            QPushButton:disabled {{ background-color: {c.panel}; color: {c.text_dim}; }}

            QToolButton {{ background: transparent; color: {c.text}; border-radius: 4px; }}
            QToolButton:hover {{ background-color: {c.control_hover}; }}
            QToolButton:checked {{ background-color: {c.accent}; color: white; }}
            QToolButton:disabled {{ color: {c.text_dim}; }}

            QPlainTextEdit, QComboBox {{
                background-color: {c.panel};
                border: 1px solid {c.outline};
                border-radius: 6px;
                padding: 6px;
            }}
            QPlainTextEdit:focus, QComboBox:focus {{ border-color: {c.accent}; }}

            #EditToolbar, #BubblePanel {{
                background-color: {c.panel};
                border: 1px solid {c.outline};
                border-radius: 8px;
            }}
            #EditorCanvas {{ background-color: {c.canvas}; border-radius: 8px; }}
        """
        return base + "".join([
            _filled_button("applyButton", c.accent, c.accent_pressed, c.control),
            _filled_button("saveButton", c.save, c.save_pressed, c.control),
            _filled_button("deleteBubbleButton", c.danger, c.danger, c.control),
        ])
