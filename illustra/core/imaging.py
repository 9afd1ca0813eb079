"""
Conversions between QImage and numpy pixel arrays.

Arrays are (height, width, 4) uint8 in the in-memory byte order of
QImage.Format_ARGB32 on little-endian hosts: B, G, R, A.
"""
import numpy as np
from PyQt5.QtGui import QImage

BLUE, GREEN, RED, ALPHA = 0, 1, 2, 3


def qimage_to_array(image: QImage) -> np.ndarray:
    """
    Copy a QImage's pixels into a BGRA numpy array.

    Args:
        image: Source image in any format

    Returns:
        Array of shape (height, width, 4)
    """
    image = image.convertToFormat(QImage.Format_ARGB32)
    width, height = image.width(), image.height()
    bytes_per_line = image.bytesPerLine()

    ptr = image.constBits()
    ptr.setsize(height * bytes_per_line)
    rows = np.frombuffer(ptr, dtype=np.uint8).reshape(height, bytes_per_line)
    return rows[:, :width * 4].reshape(height, width, 4).copy()


def array_to_qimage(pixels: np.ndarray,
                    fmt: QImage.Format = QImage.Format_ARGB32) -> QImage:
    """
    Build a QImage that owns a copy of a BGRA numpy array.

    Args:
        pixels: Array of shape (height, width, 4)
        fmt: 32-bit QImage format to interpret the bytes as

    Returns:
        Detached QImage
    """
    height, width = pixels.shape[:2]
    data = np.ascontiguousarray(pixels, dtype=np.uint8).tobytes()
    return QImage(data, width, height, width * 4, fmt).copy()
