from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class BubbleShape(Enum):
    ROUNDED = "rounded"
    ELLIPSE = "ellipse"


# Defaults for a freshly added bubble
DEFAULT_TEXT = "Hello!"
DEFAULT_GEOMETRY = (50.0, 50.0, 120.0, 60.0)  # x, y, width, height
DEFAULT_BACKGROUND = (255, 255, 255)
DEFAULT_TEXT_COLOR = (0, 0, 0)
DEFAULT_BORDER = (0, 0, 0)


@dataclass
class Bubble:
    """A speech bubble placed on the canvas."""
    id: str
    text: str = DEFAULT_TEXT

    # Bounding box in raster pixel coordinates
    x: float = DEFAULT_GEOMETRY[0]
    y: float = DEFAULT_GEOMETRY[1]
    width: float = DEFAULT_GEOMETRY[2]
    height: float = DEFAULT_GEOMETRY[3]

    shape: BubbleShape = BubbleShape.ROUNDED
    background_color: Tuple[int, int, int] = DEFAULT_BACKGROUND  # RGB tuple (0-255)
    text_color: Tuple[int, int, int] = DEFAULT_TEXT_COLOR
    border_color: Tuple[int, int, int] = DEFAULT_BORDER

    @property
    def lines(self):
        return self.text.split("\n")

    def contains_point(self, x: float, y: float) -> bool:
        """Check if a point is inside this bubble's shape."""
        if not (self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height):
            return False
        if self.shape == BubbleShape.ELLIPSE:
            rx, ry = self.width / 2, self.height / 2
            if rx == 0 or ry == 0:
                return False
            dx = (x - (self.x + rx)) / rx
            dy = (y - (self.y + ry)) / ry
            return dx * dx + dy * dy <= 1.0
        return True
