"""
Selection mask painted by the user or imported from the subject-select backend.
"""
import logging
from typing import Optional, Tuple

import numpy as np
from PyQt5.QtCore import QPointF, Qt
from PyQt5.QtGui import QColor, QImage, QPainter, QPen

from illustra.core.imaging import ALPHA, BLUE, GREEN, RED, array_to_qimage, qimage_to_array

logger = logging.getLogger(__name__)

# Interactive tint for selected pixels, rgba(255, 0, 255, 0.7)
MASK_TINT = (255, 0, 255, 178)

# Imported masks are thresholded at half intensity
IMPORT_THRESHOLD = 128


class MaskSurface:
    """
    Binary per-pixel selection with the same size as the current raster.

    While editing, selected pixels hold the translucent magenta tint and
    unselected pixels are transparent. export_for_backend() turns that into
    pure white/black with no intermediate values.
    """

    def __init__(self, width: int = 0, height: int = 0, pen_width: float = 35.0):
        self.pen_width = pen_width
        self._image = self._blank(width, height)
        self._has_selection = False
        self._last_point: Optional[Tuple[float, float]] = None

    @staticmethod
    def _blank(width: int, height: int) -> QImage:
        image = QImage(max(width, 0), max(height, 0), QImage.Format_ARGB32_Premultiplied)
        image.fill(Qt.transparent)
        return image

    def size(self) -> Tuple[int, int]:
        return self._image.width(), self._image.height()

    def resize(self, width: int, height: int) -> None:
        """Reallocate the surface for a raster of a new size. Always clears."""
        self._image = self._blank(width, height)
        self._has_selection = False
        self._last_point = None

    def has_selection(self) -> bool:
        """
        True once a stroke has finished or a mask has been imported since
        the last clear. A stroke still in progress does not count.
        """
        return self._has_selection

    def is_stroking(self) -> bool:
        return self._last_point is not None

    # ------------------------------------------------------------------
    # Freehand strokes
    # ------------------------------------------------------------------

    def _stroke_pen(self) -> QPen:
        pen = QPen(QColor(*MASK_TINT))
        pen.setWidthF(self.pen_width)
        pen.setCapStyle(Qt.RoundCap)
        pen.setJoinStyle(Qt.RoundJoin)
        return pen

    def _paint(self, draw) -> None:
        painter = QPainter(self._image)
        # Source mode and no antialiasing keep every painted pixel at exactly
        # the tint, however many strokes overlap.
        painter.setCompositionMode(QPainter.CompositionMode_Source)
        painter.setRenderHint(QPainter.Antialiasing, False)
        painter.setPen(self._stroke_pen())
        draw(painter)
        painter.end()

    def begin_stroke(self, point: Tuple[float, float]) -> None:
        """
        Start a freehand stroke.

        Args:
            point: (x, y) in raster pixel coordinates
        """
        if self._image.isNull():
            return
        self._last_point = point
        self._paint(lambda p: p.drawPoint(QPointF(*point)))

    def extend_stroke(self, point: Tuple[float, float]) -> None:
        """Continue the active stroke to a new point."""
        if self._last_point is None:
            return
        start = self._last_point
        self._paint(lambda p: p.drawLine(QPointF(*start), QPointF(*point)))
        self._last_point = point

    def end_stroke(self) -> None:
        """Finish the active stroke."""
        if self._last_point is None:
            return
        self._last_point = None
        self._has_selection = True
        logger.debug("Mask stroke finished")

    # ------------------------------------------------------------------
    # Whole-surface operations
    # ------------------------------------------------------------------

    def import_mask(self, mask_image: QImage) -> None:
        """
        Replace the surface with an externally produced binary mask.

        The mask is stretched to the surface size. Light, opaque pixels
        become selected; everything else becomes unselected.

        Args:
            mask_image: White-on-black subject mask
        """
        width, height = self.size()
        if width == 0 or height == 0:
            return

        scaled = mask_image.scaled(width, height, Qt.IgnoreAspectRatio, Qt.FastTransformation)
        pixels = qimage_to_array(scaled).astype(np.int32)
        luminance = (299 * pixels[..., RED] + 587 * pixels[..., GREEN]
                     + 114 * pixels[..., BLUE]) // 1000
        selected = (luminance >= IMPORT_THRESHOLD) & (pixels[..., ALPHA] >= IMPORT_THRESHOLD)

        r, g, b, a = MASK_TINT
        tinted = np.zeros((height, width, 4), dtype=np.uint8)
        tinted[selected] = (b, g, r, a)

        self._image = array_to_qimage(tinted).convertToFormat(QImage.Format_ARGB32_Premultiplied)
        self._last_point = None
        self._has_selection = True
        logger.debug("Imported subject mask, %d pixel(s) selected", int(selected.sum()))

    def clear(self) -> None:
        """Reset every pixel to unselected."""
        if not self._has_selection and self._last_point is None:
            return
        self._image.fill(Qt.transparent)
        self._has_selection = False
        self._last_point = None

    def overlay(self) -> QImage:
        """Translucent image used for on-screen feedback."""
        return self._image

    def export_for_backend(self) -> QImage:
        """
        Produce the binary mask sent with an edit request.

        Returns:
            RGB32 image of the surface's size; selected pixels are pure
            white, all others pure black
        """
        width, height = self.size()
        pixels = qimage_to_array(self._image)
        selected = pixels[..., ALPHA] > 0

        binary = np.zeros((height, width, 4), dtype=np.uint8)
        binary[selected] = 255
        binary[..., ALPHA] = 255
        return array_to_qimage(binary, QImage.Format_RGB32)
