import numpy as np
from PyQt5.QtCore import Qt
from PyQt5.QtGui import QColor, QImage

from illustra.core.imaging import ALPHA, qimage_to_array
from illustra.core.mask import MASK_TINT, MaskSurface
from tests.conftest import solid_image


def exported_values(surface):
    pixels = qimage_to_array(surface.export_for_backend())
    return pixels[..., :3]


def test_new_surface_has_no_selection():
    surface = MaskSurface(100, 80)

    assert surface.size() == (100, 80)
    assert not surface.has_selection()
    assert not exported_values(surface).any()


def test_stroke_marks_pixels_and_selection():
    surface = MaskSurface(100, 100, pen_width=20)

    surface.begin_stroke((20, 50))
    assert surface.is_stroking()
    surface.extend_stroke((80, 50))
    surface.end_stroke()

    assert surface.has_selection()
    assert not surface.is_stroking()
    values = exported_values(surface)
    assert tuple(values[50, 50]) == (255, 255, 255)
    assert tuple(values[5, 5]) == (0, 0, 0)


def test_overlapping_strokes_export_binary_values():
    surface = MaskSurface(120, 120, pen_width=35)
    for start, end in [((10, 10), (110, 110)), ((110, 10), (10, 110)), ((60, 0), (60, 120))]:
        surface.begin_stroke(start)
        surface.extend_stroke(end)
        surface.end_stroke()

    values = exported_values(surface)

    assert set(np.unique(values)) <= {0, 255}
    # each pixel is either fully white or fully black
    assert np.all((values == values[..., :1]))


def test_export_is_opaque():
    surface = MaskSurface(30, 30)
    surface.begin_stroke((15, 15))
    surface.end_stroke()

    pixels = qimage_to_array(surface.export_for_backend())

    assert np.all(pixels[..., ALPHA] == 255)


def test_stroke_overlay_uses_tint():
    surface = MaskSurface(50, 50, pen_width=20)
    surface.begin_stroke((25, 25))
    surface.end_stroke()

    color = surface.overlay().pixelColor(25, 25)

    assert color.alpha() == MASK_TINT[3]
    assert color.red() > 200 and color.blue() > 200 and color.green() < 20


def test_extend_without_begin_is_ignored():
    surface = MaskSurface(50, 50)

    surface.extend_stroke((10, 10))
    surface.end_stroke()

    assert not surface.has_selection()
    assert not exported_values(surface).any()


def test_clear_resets_selection():
    surface = MaskSurface(50, 50)
    surface.begin_stroke((25, 25))
    surface.end_stroke()

    surface.clear()

    assert not surface.has_selection()
    assert not exported_values(surface).any()


def test_resize_clears_and_changes_size():
    surface = MaskSurface(50, 50)
    surface.begin_stroke((25, 25))
    surface.end_stroke()

    surface.resize(70, 40)

    assert surface.size() == (70, 40)
    assert not surface.has_selection()


def half_white_mask(width, height):
    mask = solid_image((0, 0, 0), width, height)
    for y in range(height):
        for x in range(width // 2):
            mask.setPixel(x, y, QColor(255, 255, 255).rgb())
    return mask


def test_import_replaces_existing_strokes():
    surface = MaskSurface(40, 40, pen_width=10)
    surface.begin_stroke((35, 35))
    surface.end_stroke()

    surface.import_mask(half_white_mask(40, 40))

    values = exported_values(surface)
    assert surface.has_selection()
    assert tuple(values[20, 5]) == (255, 255, 255)
    # the earlier stroke in the black half is gone
    assert tuple(values[35, 35]) == (0, 0, 0)


def test_import_scales_to_surface_size():
    surface = MaskSurface(80, 60)

    surface.import_mask(half_white_mask(20, 10))

    values = exported_values(surface)
    assert values.shape[:2] == (60, 80)
    assert tuple(values[30, 10]) == (255, 255, 255)
    assert tuple(values[30, 70]) == (0, 0, 0)


def test_import_treats_transparent_pixels_as_unselected():
    surface = MaskSurface(20, 20)
    mask = QImage(20, 20, QImage.Format_ARGB32)
    mask.fill(Qt.transparent)

    surface.import_mask(mask)

    assert not exported_values(surface).any()


def test_stroke_in_progress_is_not_a_selection():
    surface = MaskSurface(50, 50)

    surface.begin_stroke((10, 10))
    surface.extend_stroke((40, 40))

    assert not surface.has_selection()
    surface.end_stroke()
    assert surface.has_selection()
