import pytest
from PyQt5.QtCore import QObject, pyqtSignal

from illustra.controllers import EditSessionController
from illustra.core.backend import ImageBackend
from illustra.core.errors import InvalidInput
from illustra.core.history import RasterVersion
from illustra.core.modes import PenSize, SessionState, ToolMode
from tests.conftest import pixel_rgb, solid_image, solid_version


class FakeWorker(QObject):
    """Holds a job until the test resolves or fails it."""
    succeeded = pyqtSignal(object)
    failed = pyqtSignal(str)

    def __init__(self, job):
        super().__init__()
        self.job = job
        self.started = False

    def start(self):
        self.started = True

    def resolve(self, result=None):
        self.succeeded.emit(result if result is not None else self.job())

    def fail(self, message):
        self.failed.emit(message)


class RecordingBackend(ImageBackend):
    def __init__(self, mask=None, edited=None):
        self.mask = mask
        self.edited = edited
        self.mask_calls = []
        self.edit_calls = []

    def request_subject_mask(self, image):
        self.mask_calls.append(image)
        return self.mask

    def request_edited_image(self, image, prompt, mask=None):
        self.edit_calls.append((image, prompt, mask))
        return self.edited


@pytest.fixture
def workers():
    return []


@pytest.fixture
def make_session(workers):
    def factory(backend=None, on_complete=None, initial=None):
        def worker_factory(job, parent):
            worker = FakeWorker(job)
            workers.append(worker)
            return worker

        return EditSessionController(
            initial or solid_version((0, 0, 0), 100, 100),
            backend or RecordingBackend(),
            on_session_complete=on_complete,
            worker_factory=worker_factory,
        )
    return factory


def paint_stroke(session, start=(20, 20), end=(60, 60)):
    session.begin_stroke(start)
    session.extend_stroke(end)
    session.end_stroke()


def test_new_session_is_idle_with_pen_tool(make_session):
    session = make_session()

    assert session.state == SessionState.IDLE
    assert session.tool_mode == ToolMode.PEN
    assert session.pen_size == PenSize.MEDIUM
    assert session.mask.size() == (100, 100)
    assert not session.has_unsaved_changes


def test_apply_edit_blank_prompt_raises(make_session, workers):
    session = make_session()
    session.set_prompt("   ")

    assert not session.can_apply_edit()
    with pytest.raises(InvalidInput):
        session.apply_edit()
    assert workers == []
    assert session.state == SessionState.IDLE


def test_apply_edit_success_appends_version(make_session, workers):
    edited = solid_version((255, 0, 0), 100, 100)
    backend = RecordingBackend(edited=edited)
    session = make_session(backend)
    session.set_prompt("make it red")

    assert session.apply_edit()
    assert session.state == SessionState.AWAITING_EDIT
    assert workers[0].started

    workers[0].resolve()

    assert session.state == SessionState.IDLE
    assert session.history.current() is edited
    assert len(session.history) == 2
    assert session.prompt == ""
    assert backend.edit_calls[0][1] == "make it red"


def test_edit_without_selection_sends_no_mask(make_session, workers):
    backend = RecordingBackend(edited=solid_version((1, 1, 1), 100, 100))
    session = make_session(backend)
    session.set_prompt("add a hat")

    session.apply_edit()
    workers[0].resolve()

    assert backend.edit_calls[0][2] is None


def test_edit_with_selection_sends_binary_mask(make_session, workers):
    backend = RecordingBackend(edited=solid_version((1, 1, 1), 100, 100))
    session = make_session(backend)
    paint_stroke(session)
    session.set_prompt("add a hat")

    session.apply_edit()
    workers[0].resolve()

    mask = backend.edit_calls[0][2]
    assert mask is not None
    image = mask.to_image()
    assert (image.width(), image.height()) == (100, 100)
    assert pixel_rgb(image, 40, 40) == (255, 255, 255)
    assert pixel_rgb(image, 95, 5) == (0, 0, 0)


def test_successful_edit_clears_mask(make_session, workers):
    session = make_session(RecordingBackend(edited=solid_version((1, 1, 1), 80, 60)))
    paint_stroke(session)
    session.set_prompt("sunset")

    session.apply_edit()
    workers[0].resolve()

    assert not session.mask.has_selection()
    assert session.mask.size() == (80, 60)


def test_edit_failure_leaves_session_unchanged(make_session, workers):
    session = make_session()
    paint_stroke(session)
    session.set_prompt("sunset")
    errors = []
    session.error_occurred.connect(errors.append)
    version = session.history.current()

    session.apply_edit()
    workers[0].fail("Failed to edit the image with the provided prompt.")

    assert session.state == SessionState.IDLE
    assert errors == ["Failed to edit the image with the provided prompt."]
    assert session.history.current() is version
    assert len(session.history) == 1
    assert session.mask.has_selection()
    assert session.prompt == "sunset"


def test_requests_are_single_flight(make_session, workers):
    session = make_session()
    session.set_prompt("sunset")

    assert session.apply_edit()
    assert not session.apply_edit()
    assert not session.request_subject_mask()
    assert not session.undo()
    assert not session.can_apply_edit()
    assert len(workers) == 1


def test_subject_mask_replaces_selection(make_session, workers):
    mask_image = solid_image((0, 0, 0), 50, 50)
    for y in range(50):
        for x in range(25, 50):
            mask_image.setPixel(x, y, 0xFFFFFFFF)
    backend = RecordingBackend(mask=RasterVersion.from_image(mask_image))
    session = make_session(backend)
    paint_stroke(session, (10, 10), (15, 15))

    assert session.request_subject_mask()
    assert session.state == SessionState.AWAITING_MASK
    assert session.tool_mode == ToolMode.AI_SELECT

    workers[0].resolve()

    assert session.state == SessionState.IDLE
    exported = session.mask.export_for_backend()
    assert pixel_rgb(exported, 80, 50) == (255, 255, 255)
    assert pixel_rgb(exported, 12, 12) == (0, 0, 0)


def test_subject_mask_failure_keeps_existing_mask(make_session, workers):
    session = make_session()
    paint_stroke(session)

    session.request_subject_mask()
    workers[0].fail("Failed to generate the subject mask with AI.")

    assert session.state == SessionState.IDLE
    assert session.mask.has_selection()


def test_undecodable_mask_is_reported(make_session, workers):
    session = make_session(RecordingBackend(mask=RasterVersion(b"junk")))
    errors = []
    session.error_occurred.connect(errors.append)

    session.request_subject_mask()
    workers[0].resolve()

    assert session.state == SessionState.IDLE
    assert len(errors) == 1


def test_undo_restores_previous_version_and_clears_mask(make_session, workers):
    original = solid_version((0, 0, 0), 100, 100)
    session = make_session(RecordingBackend(edited=solid_version((9, 9, 9), 100, 100)),
                           initial=original)
    session.set_prompt("brighter")
    session.apply_edit()
    workers[0].resolve()
    paint_stroke(session)

    assert session.can_undo()
    assert session.undo()

    assert session.history.current() is original
    assert not session.mask.has_selection()
    assert not session.undo()


def test_strokes_only_in_pen_mode(make_session):
    session = make_session()
    session.set_tool_mode(ToolMode.BUBBLE)

    assert not session.begin_stroke((10, 10))
    assert not session.mask.has_selection()


def test_pen_size_sets_stroke_width(make_session):
    session = make_session()

    session.set_pen_size(PenSize.LARGE)

    assert session.mask.pen_width == 50


def test_clear_mask(make_session):
    session = make_session()
    assert not session.can_clear_mask()
    paint_stroke(session)

    assert session.clear_mask()
    assert not session.mask.has_selection()


def test_add_bubble_selects_and_switches_tool(make_session):
    session = make_session()
    selections = []
    session.selection_changed.connect(selections.append)

    bubble = session.add_bubble()

    assert session.tool_mode == ToolMode.BUBBLE
    assert session.bubbles.selected_id == bubble.id
    assert selections == [bubble.id]
    assert session.has_unsaved_changes


def test_update_and_delete_selected_bubble(make_session):
    session = make_session()
    bubble = session.add_bubble()

    assert session.update_selected_bubble(text="Wow")
    assert session.bubbles.get(bubble.id).text == "Wow"
    assert session.delete_selected_bubble()
    assert session.bubbles.selected_id is None
    assert not session.update_bubble(bubble.id, text="gone")


def test_save_calls_callback_once(make_session):
    received = []
    session = make_session(on_complete=received.append)
    session.add_bubble()

    result = session.save_and_close()

    assert received == [result]
    assert result.mime_type == "image/png"
    assert session.is_closed
    assert session.save_and_close() is None
    assert len(received) == 1


def test_save_is_blocked_while_request_pending(make_session, workers):
    received = []
    session = make_session(on_complete=received.append)
    session.request_subject_mask()

    assert session.save_and_close() is None
    assert received == []


def test_cancel_does_not_call_callback(make_session):
    received = []
    finished = []
    session = make_session(on_complete=received.append)
    session.session_finished.connect(finished.append)

    assert session.cancel()

    assert received == []
    assert finished == [None]
    assert session.is_closed
    assert not session.is_idle


def test_failed_save_keeps_session_open_for_retry(make_session):
    attempts = []
    failures = []

    def flaky_writer(image):
        attempts.append(image)
        if len(attempts) == 1:
            raise OSError("disk full")

    session = make_session(on_complete=flaky_writer)
    session.save_failed.connect(failures.append)
    session.add_bubble()

    assert session.save_and_close() is None
    assert not session.is_closed
    assert session.is_idle
    assert len(failures) == 1 and "disk full" in failures[0]

    result = session.save_and_close()

    assert result is not None
    assert session.is_closed
    assert len(attempts) == 2


def test_subject_select_returns_to_previous_tool(make_session, workers):
    mask = RasterVersion.from_image(solid_image((255, 255, 255), 20, 20))
    session = make_session(RecordingBackend(mask=mask))

    session.request_subject_mask()
    workers[0].resolve()

    assert session.tool_mode == ToolMode.PEN
    assert session.begin_stroke((5, 5))


def test_failed_subject_select_returns_to_previous_tool(make_session, workers):
    session = make_session()
    session.add_bubble()

    session.request_subject_mask()
    workers[0].fail("Failed to generate the subject mask with AI.")

    assert session.tool_mode == ToolMode.BUBBLE


def test_edit_undo_edit_then_bubble_flatten(make_session, workers):
    v0 = solid_version((0, 0, 0), 200, 200)
    v1 = solid_version((128, 0, 128), 200, 200)
    v2 = solid_version((0, 200, 0), 200, 200)
    session = make_session(initial=v0)

    session.set_prompt("make the sky purple")
    session.apply_edit()
    workers[0].resolve(v1)
    assert session.undo()
    session.set_prompt("add a hat")
    session.apply_edit()
    workers[1].resolve(v2)

    assert session.history.versions == (v0, v2)
    assert session.history.cursor == 1

    bubble = session.add_bubble()
    session.update_bubble(bubble.id, text="Hi!")
    image = session.flatten().to_image()

    assert (bubble.x, bubble.y) == (50, 50)
    assert pixel_rgb(image, 58, 80) == (255, 255, 255)
    assert pixel_rgb(image, 190, 190) == (0, 200, 0)


def test_deleted_bubble_is_not_flattened(make_session):
    session = make_session(initial=solid_version((0, 200, 0), 200, 200))
    bubble = session.add_bubble()
    assert pixel_rgb(session.flatten().to_image(), 58, 80) == (255, 255, 255)

    session.delete_bubble(bubble.id)

    assert pixel_rgb(session.flatten().to_image(), 58, 80) == (0, 200, 0)
