# core/backend/worker.py

import logging
from typing import Callable

from PyQt5.QtCore import QThread, pyqtSignal

from illustra.core.errors import BackendFailure

logger = logging.getLogger(__name__)


class BackendWorker(QThread):
    """Worker thread that runs one backend request without freezing the UI."""

    # Signals
    succeeded = pyqtSignal(object)  # RasterVersion
    failed = pyqtSignal(str)  # user-facing message

    def __init__(self, job: Callable[[], object], parent=None):
        super().__init__(parent)
        self._job = job
        self.finished.connect(self.deleteLater)

    def run(self):
        """Execute the request in a background thread."""
        try:
            result = self._job()
        except BackendFailure as e:
            self.failed.emit(str(e))
            return
        except Exception as e:
            logger.exception("Unexpected error during backend request")
            self.failed.emit(f"Unexpected error: {e}")
            return

        self.succeeded.emit(result)
