"""
Yes/No confirmations that the user can silence for the rest of the run.
"""
from enum import Enum
from typing import Dict

from PyQt5.QtWidgets import QCheckBox, QMessageBox, QWidget


class WarningType(Enum):
    DELETE_BUBBLE = "delete_bubble"
    DISCARD_EDITS = "discard_edits"


class WarningManager:
    """
    Remembers answers to confirmations the user chose not to see again.

    Once "Don't ask again" is ticked, the answer given in that dialog is
    reused silently for every later confirmation of the same type.
    """

    def __init__(self):
        self._remembered: Dict[WarningType, bool] = {}

    def is_silenced(self, warning_type: WarningType) -> bool:
        return warning_type in self._remembered

    def forget_all(self) -> None:
        """Ask every confirmation again."""
        self._remembered.clear()

    def show_confirmation(self, parent: QWidget, warning_type: WarningType,
                          title: str, message: str) -> bool:
        """
        Ask the user to confirm an action.

        Args:
            parent: Dialog parent
            warning_type: Which confirmation this is
            title: Dialog title
            message: Question shown to the user

        Returns:
            True if the action should go ahead
        """
        if warning_type in self._remembered:
            return self._remembered[warning_type]

        box = QMessageBox(QMessageBox.Question, title, message,
                          QMessageBox.Yes | QMessageBox.No, parent)
        box.setDefaultButton(QMessageBox.No)
        silence = QCheckBox("Don't ask again")
        box.setCheckBox(silence)

        confirmed = box.exec_() == QMessageBox.Yes
        if silence.isChecked():
            self._remembered[warning_type] = confirmed
        return confirmed


# Shared by every editor window in the process
warning_manager = WarningManager()
