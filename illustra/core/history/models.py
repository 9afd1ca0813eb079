"""
Immutable raster versions.
"""
import base64
import mimetypes
from dataclasses import dataclass
from typing import Tuple

from PyQt5.QtCore import QBuffer, QByteArray, QIODevice
from PyQt5.QtGui import QImage

from illustra.core.errors import InvalidInput

# QImage writer format names keyed by MIME type
_WRITER_FORMATS = {
    "image/png": "PNG",
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/webp": "WEBP",
    "image/bmp": "BMP",
}


@dataclass(frozen=True)
class RasterVersion:
    """One fully rendered state of the edited image."""
    data: bytes
    mime_type: str = "image/png"

    def to_image(self) -> QImage:
        """
        Decode the stored bytes into a QImage.

        Returns:
            Decoded image

        Raises:
            InvalidInput: If the bytes are not a decodable image
        """
        image = QImage.fromData(self.data)
        if image.isNull():
            raise InvalidInput(f"Could not decode {self.mime_type} image data")
        return image

    def size(self) -> Tuple[int, int]:
        """Return (width, height) in pixels."""
        image = self.to_image()
        return image.width(), image.height()

    def to_data_url(self) -> str:
        """Encode as a data:<mime>;base64,<payload> URL."""
        payload = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{payload}"

    @staticmethod
    def from_image(image: QImage, mime_type: str = "image/png") -> "RasterVersion":
        """
        Encode a QImage into a new raster version.

        Args:
            image: Image to encode
            mime_type: Target encoding; unknown types fall back to PNG

        Returns:
            New raster version holding the encoded bytes
        """
        fmt = _WRITER_FORMATS.get(mime_type)
        if fmt is None:
            mime_type, fmt = "image/png", "PNG"

        byte_array = QByteArray()
        buffer = QBuffer(byte_array)
        buffer.open(QIODevice.WriteOnly)
        if not image.save(buffer, fmt):
            buffer.close()
            raise InvalidInput(f"Could not encode image as {mime_type}")
        buffer.close()
        return RasterVersion(bytes(byte_array), mime_type)

    @staticmethod
    def from_data_url(url: str) -> "RasterVersion":
        """Create a raster version from a base64 data URL."""
        try:
            header, payload = url.split(",", 1)
            mime_type = header[len("data:"):].split(";")[0] or "image/png"
            return RasterVersion(base64.b64decode(payload), mime_type)
        except ValueError as e:
            raise InvalidInput(f"Malformed data URL: {e}") from e

    @staticmethod
    def from_file(path: str) -> "RasterVersion":
        """
        Load a raster version from an image file on disk.

        Args:
            path: Path to the image file

        Returns:
            Raster version with the file's bytes and guessed MIME type
        """
        mime_type, _ = mimetypes.guess_type(path)
        with open(path, "rb") as f:
            data = f.read()
        version = RasterVersion(data, mime_type or "image/png")
        # Fail early on files Qt cannot read
        version.to_image()
        return version
