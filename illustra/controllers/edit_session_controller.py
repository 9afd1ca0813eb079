"""
Controller for one image editing session.
"""
import logging
from typing import Callable, Optional, Tuple

from PyQt5.QtCore import QObject, pyqtSignal

from illustra.core.backend import BackendWorker, ImageBackend
from illustra.core.bubbles import Bubble, BubbleManager
from illustra.core.errors import InvalidInput
from illustra.core.export import Compositor
from illustra.core.history import RasterVersion, VersionHistory
from illustra.core.mask import MaskSurface
from illustra.core.modes import PenSize, SessionState, ToolMode

logger = logging.getLogger(__name__)

MASK_BUSY_MESSAGE = "Selecting the main subject…"
EDIT_BUSY_MESSAGE = "Applying your edit…"


class EditSessionController(QObject):
    """
    Owns the history, mask and bubbles of a session and drives the backend.

    Backend requests are single-flight: while one is pending, the request
    triggers, undo, clear-mask and closing are all no-ops.
    """

    # Signals
    state_changed = pyqtSignal(object)  # SessionState
    tool_mode_changed = pyqtSignal(object)  # ToolMode
    pen_size_changed = pyqtSignal(object)  # PenSize
    prompt_changed = pyqtSignal(str)
    history_changed = pyqtSignal()
    mask_changed = pyqtSignal()
    bubbles_changed = pyqtSignal()
    selection_changed = pyqtSignal(object)  # selected bubble id or None
    busy = pyqtSignal(str)  # message while a request is in flight
    error_occurred = pyqtSignal(str)
    session_finished = pyqtSignal(object)  # final RasterVersion, None if cancelled
    save_failed = pyqtSignal(str)

    def __init__(self, initial: RasterVersion, backend: ImageBackend,
                 on_session_complete: Optional[Callable[[RasterVersion], None]] = None,
                 worker_factory: Optional[Callable] = None, parent: QObject = None):
        """
        Open a session on an initial raster.

        Args:
            initial: Raster the session starts from
            backend: Service for subject masks and edits
            on_session_complete: Receives the flattened image on save
            worker_factory: Builds a worker from (job, parent); defaults to BackendWorker
            parent: Qt parent
        """
        super().__init__(parent)
        self.history = VersionHistory(initial)
        width, height = initial.size()
        self.mask = MaskSurface(width, height, pen_width=PenSize.MEDIUM.value)
        self.bubbles = BubbleManager()

        self.backend = backend
        self._on_session_complete = on_session_complete
        self._worker_factory = worker_factory or BackendWorker
        self._worker = None

        self._state = SessionState.IDLE
        self._tool_mode = ToolMode.PEN
        self._pen_size = PenSize.MEDIUM
        self._prompt = ""
        self._closed = False
        self._tool_before_select: Optional[ToolMode] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_idle(self) -> bool:
        return self._state == SessionState.IDLE and not self._closed

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def tool_mode(self) -> ToolMode:
        return self._tool_mode

    @property
    def pen_size(self) -> PenSize:
        return self._pen_size

    @property
    def prompt(self) -> str:
        return self._prompt

    @property
    def has_unsaved_changes(self) -> bool:
        return len(self.history) > 1 or len(self.bubbles) > 0

    def _set_state(self, state: SessionState) -> None:
        if state != self._state:
            self._state = state
            self.state_changed.emit(state)

    def set_tool_mode(self, mode: ToolMode) -> None:
        if mode != self._tool_mode:
            self._tool_mode = mode
            self.tool_mode_changed.emit(mode)

    def set_pen_size(self, size: PenSize) -> None:
        self._pen_size = size
        self.mask.pen_width = size.value
        self.pen_size_changed.emit(size)

    def set_prompt(self, text: str) -> None:
        if text != self._prompt:
            self._prompt = text
            self.prompt_changed.emit(text)

    def can_apply_edit(self) -> bool:
        return self.is_idle and bool(self._prompt.strip())

    def can_undo(self) -> bool:
        return self.is_idle and self.history.can_undo()

    def can_clear_mask(self) -> bool:
        return self.is_idle and self.mask.has_selection()

    # ------------------------------------------------------------------
    # Backend requests
    # ------------------------------------------------------------------

    def request_subject_mask(self) -> bool:
        """
        Ask the backend to select the main subject.

        Returns:
            True if a request was issued
        """
        if not self.is_idle:
            return False

        image = self.history.current()
        if self._tool_mode != ToolMode.AI_SELECT:
            self._tool_before_select = self._tool_mode
        self.set_tool_mode(ToolMode.AI_SELECT)
        self._set_state(SessionState.AWAITING_MASK)
        self.busy.emit(MASK_BUSY_MESSAGE)
        self._run(lambda: self.backend.request_subject_mask(image), self._on_mask_ready)
        return True

    def apply_edit(self) -> bool:
        """
        Send the prompt, and the mask if anything is selected, to the backend.

        Returns:
            True if a request was issued, False while another is pending

        Raises:
            InvalidInput: If the prompt is blank
        """
        if not self.is_idle:
            return False

        prompt = self._prompt.strip()
        if not prompt:
            raise InvalidInput("Describe the edit before applying it.")

        image = self.history.current()
        mask = None
        if self.mask.has_selection():
            mask = RasterVersion.from_image(self.mask.export_for_backend(), "image/png")

        self._set_state(SessionState.AWAITING_EDIT)
        self.busy.emit(EDIT_BUSY_MESSAGE)
        self._run(lambda: self.backend.request_edited_image(image, prompt, mask),
                  self._on_edit_ready)
        return True

    def _run(self, job: Callable[[], RasterVersion],
             on_success: Callable[[RasterVersion], None]) -> None:
        worker = self._worker_factory(job, self)
        worker.succeeded.connect(on_success)
        worker.failed.connect(self._on_request_failed)
        self._worker = worker
        worker.start()

    def _on_mask_ready(self, version: RasterVersion) -> None:
        self._worker = None
        try:
            mask_image = version.to_image()
        except InvalidInput as e:
            self._on_request_failed(f"The AI returned an unreadable mask: {e}")
            return

        self.mask.import_mask(mask_image)
        self._restore_tool()
        self._set_state(SessionState.IDLE)
        self.mask_changed.emit()

    def _on_edit_ready(self, version: RasterVersion) -> None:
        self._worker = None
        try:
            width, height = version.size()
        except InvalidInput as e:
            self._on_request_failed(f"The AI returned an unreadable image: {e}")
            return

        self.history.append(version)
        self.mask.resize(width, height)
        self.set_prompt("")
        self._set_state(SessionState.IDLE)
        self.history_changed.emit()
        self.mask_changed.emit()

    def _on_request_failed(self, message: str) -> None:
        self._worker = None
        logger.warning("Backend request failed: %s", message)
        self._restore_tool()
        self._set_state(SessionState.IDLE)
        self.error_occurred.emit(message)

    def _restore_tool(self) -> None:
        # Back to the tool that was active before the subject select
        if self._tool_before_select is not None:
            self.set_tool_mode(self._tool_before_select)
            self._tool_before_select = None

    # ------------------------------------------------------------------
    # History and mask
    # ------------------------------------------------------------------

    def undo(self) -> bool:
        """
        Show the previous version. The mask is cleared.

        Returns:
            True if the displayed version changed
        """
        if not self.is_idle or not self.history.undo():
            return False

        width, height = self.history.current().size()
        self.mask.resize(width, height)
        self.history_changed.emit()
        self.mask_changed.emit()
        return True

    def begin_stroke(self, point: Tuple[float, float]) -> bool:
        if not self.is_idle or self._tool_mode != ToolMode.PEN:
            return False
        self.mask.begin_stroke(point)
        self.mask_changed.emit()
        return True

    def extend_stroke(self, point: Tuple[float, float]) -> bool:
        if not self.mask.is_stroking():
            return False
        self.mask.extend_stroke(point)
        self.mask_changed.emit()
        return True

    def end_stroke(self) -> bool:
        if not self.mask.is_stroking():
            return False
        self.mask.end_stroke()
        self.mask_changed.emit()
        return True

    def clear_mask(self) -> bool:
        if not self.can_clear_mask():
            return False
        self.mask.clear()
        self.mask_changed.emit()
        return True

    # ------------------------------------------------------------------
    # Bubbles
    # ------------------------------------------------------------------

    def add_bubble(self) -> Bubble:
        """Add a default bubble, select it and switch to the bubble tool."""
        bubble = self.bubbles.add()
        self.set_tool_mode(ToolMode.BUBBLE)
        self.bubbles_changed.emit()
        self.selection_changed.emit(bubble.id)
        return bubble

    def select_bubble(self, bubble_id: Optional[str]) -> None:
        previous = self.bubbles.selected_id
        self.bubbles.select(bubble_id)
        if self.bubbles.selected_id != previous:
            self.selection_changed.emit(self.bubbles.selected_id)

    def update_bubble(self, bubble_id: str, **attributes) -> bool:
        if self.bubbles.update(bubble_id, **attributes):
            self.bubbles_changed.emit()
            return True
        return False

    def update_selected_bubble(self, **attributes) -> bool:
        """Apply attribute changes to the selected bubble, if any."""
        if self.bubbles.selected_id is None:
            return False
        return self.update_bubble(self.bubbles.selected_id, **attributes)

    def move_bubble(self, bubble_id: str, x: float, y: float) -> bool:
        return self.update_bubble(bubble_id, x=x, y=y)

    def delete_bubble(self, bubble_id: str) -> bool:
        was_selected = self.bubbles.selected_id == bubble_id
        if not self.bubbles.remove(bubble_id):
            return False
        self.bubbles_changed.emit()
        if was_selected:
            self.selection_changed.emit(None)
        return True

    def delete_selected_bubble(self) -> bool:
        if self.bubbles.selected_id is None:
            return False
        return self.delete_bubble(self.bubbles.selected_id)

    # ------------------------------------------------------------------
    # Session end
    # ------------------------------------------------------------------

    def flatten(self) -> RasterVersion:
        """Current raster with all bubbles drawn on top."""
        return Compositor.flatten(self.history, self.bubbles)

    def save_and_close(self) -> Optional[RasterVersion]:
        """
        Flatten the session and hand the result to the completion callback.

        The session closes only once the callback returns, so a save can
        complete at most once. If the callback fails to write the image,
        save_failed is emitted and the session stays open for a retry.

        Returns:
            The flattened image, or None if the session did not close
        """
        if not self.is_idle:
            return None

        final_image = self.flatten()
        if self._on_session_complete is not None:
            try:
                self._on_session_complete(final_image)
            except OSError as e:
                logger.error("Could not save the edited image: %s", e)
                self.save_failed.emit(f"Could not save the edited image: {e}")
                return None

        self._closed = True
        logger.info("Session saved after %d version(s) with %d bubble(s)",
                    len(self.history), len(self.bubbles))
        self.session_finished.emit(final_image)
        return final_image

    def cancel(self) -> bool:
        """Discard the session without calling the completion callback."""
        if not self.is_idle:
            return False
        self._closed = True
        logger.info("Session cancelled")
        self.session_finished.emit(None)
        return True
