from dataclasses import dataclass


@dataclass(frozen=True)
class ThemeColors:
    """Palette for one editor theme, as CSS color strings."""
    window: str
    panel: str
    control: str
    control_hover: str

    text: str
    text_dim: str

    accent: str
    accent_pressed: str
    outline: str

    # Canvas frame behind the raster
    canvas: str

    error: str
    save: str
    save_pressed: str
    danger: str
