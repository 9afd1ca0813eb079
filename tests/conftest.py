import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt5.QtGui import QColor, QImage
from PyQt5.QtWidgets import QApplication

from illustra.core.history import RasterVersion


@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


def solid_image(color, width=200, height=200):
    image = QImage(width, height, QImage.Format_ARGB32)
    image.fill(QColor(*color))
    return image


def solid_version(color, width=200, height=200):
    """Raster version of a single flat color, PNG encoded."""
    return RasterVersion.from_image(solid_image(color, width, height), "image/png")


def pixel_rgb(image, x, y):
    c = QColor(image.pixel(x, y))
    return c.red(), c.green(), c.blue()
