import logging
import os
import sys

from PyQt5.QtWidgets import QApplication, QFileDialog, QMessageBox

from illustra.controllers import EditSessionController
from illustra.core.backend import GeminiImageBackend
from illustra.core.errors import InvalidInput
from illustra.core.history import RasterVersion
from illustra.ui import ImageEditorWindow
from illustra.utils import load_config

logger = logging.getLogger("illustra")


def default_output_path(input_path):
    """Place the edited image next to the original as <name>_edited.png."""
    root, _ = os.path.splitext(input_path)
    return f"{root}_edited.png"


def make_file_writer(output_path):
    """Session-complete callback that writes the flattened PNG to disk."""
    def write(final_image: RasterVersion):
        with open(output_path, 'wb') as f:
            f.write(final_image.data)
        logger.info("Saved edited illustration to %s", output_path)
    return write


def main():
    """
    Open the illustration editor on an image.

    Usage: main.py [input_image] [output_png]
    Without an input path a file picker is shown.
    """
    config = load_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    app = QApplication(sys.argv)

    input_path = sys.argv[1] if len(sys.argv) > 1 else None
    if not input_path:
        input_path, _ = QFileDialog.getOpenFileName(
            None, "Open Illustration", "", "Images (*.png *.jpg *.jpeg *.webp *.bmp)"
        )
        if not input_path:
            return 0
    output_path = sys.argv[2] if len(sys.argv) > 2 else default_output_path(input_path)

    try:
        initial = RasterVersion.from_file(input_path)
    except (OSError, InvalidInput) as e:
        logger.error("Could not open %s: %s", input_path, e)
        QMessageBox.critical(None, "Open Failed", f"Could not open {input_path}:\n{e}")
        return 1

    if not config.api_key:
        logger.warning("No Gemini API key configured; AI actions will fail")

    backend = GeminiImageBackend(api_key=config.api_key, model=config.model)
    controller = EditSessionController(initial, backend, make_file_writer(output_path))

    window = ImageEditorWindow(controller, dark_mode=config.dark_mode)
    window.show()
    return app.exec_()


if __name__ == '__main__':
    sys.exit(main())
