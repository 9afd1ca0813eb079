from illustra.core.bubbles import BubbleManager
from illustra.core.export import Compositor
from illustra.core.history import VersionHistory
from illustra.core.mask import MaskSurface
from tests.conftest import pixel_rgb, solid_version

BASE = (40, 90, 160)


def test_flatten_without_bubbles_matches_base():
    history = VersionHistory(solid_version(BASE, 120, 80))

    result = Compositor.flatten(history, BubbleManager())
    image = result.to_image()

    assert result.mime_type == "image/png"
    assert (image.width(), image.height()) == (120, 80)
    assert pixel_rgb(image, 10, 10) == BASE
    assert pixel_rgb(image, 119, 79) == BASE


def test_flatten_draws_bubbles_over_base():
    history = VersionHistory(solid_version(BASE, 300, 200))
    bubbles = BubbleManager()
    bubble = bubbles.add()
    bubbles.update(bubble.id, background_color=(255, 255, 0))

    image = Compositor.flatten_image(history, bubbles)

    assert pixel_rgb(image, int(bubble.x) + 8, int(bubble.y) + 30) == (255, 255, 0)
    assert pixel_rgb(image, 250, 180) == BASE


def test_flatten_uses_current_version():
    history = VersionHistory(solid_version((0, 0, 0), 50, 50))
    history.append(solid_version((200, 10, 10), 50, 50))

    image = Compositor.flatten_image(history, BubbleManager())

    assert pixel_rgb(image, 25, 25) == (200, 10, 10)


def test_flatten_is_pure():
    history = VersionHistory(solid_version(BASE, 200, 150))
    bubbles = BubbleManager()
    bubbles.add()
    before = (history.versions, history.cursor, bubbles.bubbles, bubbles.selected_id)

    first = Compositor.flatten(history, bubbles)
    second = Compositor.flatten(history, bubbles)

    assert first == second
    assert (history.versions, history.cursor, bubbles.bubbles, bubbles.selected_id) == before


def test_mask_is_never_composited():
    history = VersionHistory(solid_version(BASE, 100, 100))
    mask = MaskSurface(100, 100, pen_width=50)
    mask.begin_stroke((50, 50))
    mask.end_stroke()

    image = Compositor.flatten_image(history, BubbleManager())

    assert pixel_rgb(image, 50, 50) == BASE
