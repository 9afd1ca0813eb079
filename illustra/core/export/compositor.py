"""
Flattens the current raster and the bubble layer into one exported image.
"""
from PyQt5.QtCore import Qt
from PyQt5.QtGui import QImage, QPainter

from illustra.core.bubbles import BubbleManager
from illustra.core.history import RasterVersion, VersionHistory


class Compositor:
    """Combines layers in a fixed order. The mask never takes part."""

    @staticmethod
    def flatten_image(history: VersionHistory, bubbles: BubbleManager) -> QImage:
        """
        Draw the current raster with all bubbles on top.

        Args:
            history: Version store whose current raster is the base layer
            bubbles: Bubbles to draw over the base

        Returns:
            ARGB32 image with the current raster's dimensions
        """
        base = history.current().to_image()
        width, height = base.width(), base.height()

        bubble_layer = QImage(width, height, QImage.Format_ARGB32_Premultiplied)
        bubbles.render(bubble_layer)

        output = QImage(width, height, QImage.Format_ARGB32_Premultiplied)
        output.fill(Qt.transparent)

        painter = QPainter(output)
        painter.drawImage(0, 0, base)
        painter.drawImage(0, 0, bubble_layer)
        painter.end()

        return output.convertToFormat(QImage.Format_ARGB32)

    @classmethod
    def flatten(cls, history: VersionHistory, bubbles: BubbleManager) -> RasterVersion:
        """Flatten and encode the result as PNG."""
        return RasterVersion.from_image(cls.flatten_image(history, bubbles), "image/png")
