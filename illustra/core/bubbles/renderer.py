"""
Rasterizes speech bubbles with QPainter.
"""
from typing import Iterable

from PyQt5.QtCore import QRectF, Qt
from PyQt5.QtGui import QColor, QFont, QImage, QPainter, QPainterPath, QPen

from .models import Bubble, BubbleShape

CORNER_RADIUS = 10.0
BORDER_WIDTH = 2.0
FONT_FAMILY = "Inter"
FONT_PIXEL_SIZE = 16
LINE_HEIGHT = 16.0


def bubble_path(bubble: Bubble) -> QPainterPath:
    """Outline of a bubble's shape."""
    rect = QRectF(bubble.x, bubble.y, bubble.width, bubble.height)
    path = QPainterPath()
    if bubble.shape == BubbleShape.ELLIPSE:
        path.addEllipse(rect)
    else:
        path.addRoundedRect(rect, CORNER_RADIUS, CORNER_RADIUS)
    return path


def bubble_font() -> QFont:
    font = QFont(FONT_FAMILY)
    font.setPixelSize(FONT_PIXEL_SIZE)
    return font


def draw_bubble(painter: QPainter, bubble: Bubble) -> None:
    """Paint one bubble: filled shape, border, then centered text lines."""
    painter.setPen(QPen(QColor(*bubble.border_color), BORDER_WIDTH))
    painter.setBrush(QColor(*bubble.background_color))
    painter.drawPath(bubble_path(bubble))

    painter.setPen(QColor(*bubble.text_color))
    painter.setFont(bubble_font())

    lines = bubble.lines
    center_x = bubble.x + bubble.width / 2
    center_y = bubble.y + bubble.height / 2
    # The block of lines is centered on the bubble's middle
    first_line_y = center_y - (len(lines) - 1) * LINE_HEIGHT / 2

    for index, line in enumerate(lines):
        line_y = first_line_y + index * LINE_HEIGHT
        line_rect = QRectF(center_x - bubble.width / 2, line_y - LINE_HEIGHT / 2,
                           bubble.width, LINE_HEIGHT)
        painter.drawText(line_rect, Qt.AlignCenter | Qt.TextDontClip, line)


def render_bubbles(bubbles: Iterable[Bubble], target: QImage) -> None:
    """
    Paint bubbles onto a target image in order, later ones on top.

    The target is cleared to transparent first.

    Args:
        bubbles: Bubbles in insertion order
        target: Image to draw into
    """
    target.fill(Qt.transparent)
    painter = QPainter(target)
    painter.setRenderHint(QPainter.Antialiasing, True)
    painter.setRenderHint(QPainter.TextAntialiasing, True)
    for bubble in bubbles:
        draw_bubble(painter, bubble)
    painter.end()
