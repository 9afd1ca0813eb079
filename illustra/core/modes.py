from enum import Enum


class SessionState(Enum):
    """Request state of an editing session. Only one request may be in flight."""
    IDLE = "idle"
    AWAITING_MASK = "awaiting_mask"
    AWAITING_EDIT = "awaiting_edit"


class ToolMode(Enum):
    PEN = "pen"
    AI_SELECT = "ai_select"
    BUBBLE = "bubble"


class PenSize(Enum):
    """Brush diameters in raster pixels."""
    SMALL = 20
    MEDIUM = 35
    LARGE = 50
