"""
Owns the speech bubbles of an editing session.
"""
import dataclasses
import itertools
import logging
from typing import List, Optional, Tuple

from PyQt5.QtGui import QImage

from illustra.core.errors import InvalidInput, NotFound
from .models import Bubble
from .renderer import render_bubbles

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = frozenset(
    f.name for f in dataclasses.fields(Bubble) if f.name != "id"
)


class BubbleManager:
    """Ordered set of bubbles with a single optional selection."""

    def __init__(self):
        self._bubbles: List[Bubble] = []
        self._ids = itertools.count(1)

        # Weak selection: only the id is kept
        self.selected_id: Optional[str] = None

    @property
    def bubbles(self) -> Tuple[Bubble, ...]:
        return tuple(self._bubbles)

    def __len__(self) -> int:
        return len(self._bubbles)

    def _find(self, bubble_id: str) -> Bubble:
        for bubble in self._bubbles:
            if bubble.id == bubble_id:
                return bubble
        raise NotFound(f"No bubble with id {bubble_id!r}")

    def get(self, bubble_id: Optional[str]) -> Optional[Bubble]:
        """Return the bubble with the given id, or None."""
        try:
            return self._find(bubble_id)
        except NotFound:
            return None

    def add(self) -> Bubble:
        """
        Create a bubble with default text, geometry and colors.

        The new bubble becomes the selected one.

        Returns:
            The created bubble
        """
        bubble = Bubble(id=f"bubble-{next(self._ids)}")
        self._bubbles.append(bubble)
        self.selected_id = bubble.id
        logger.debug("Added %s", bubble.id)
        return bubble

    def update(self, bubble_id: str, **attributes) -> bool:
        """
        Merge attributes into a bubble.

        Args:
            bubble_id: Bubble to change
            **attributes: Field values to set (text, x, y, width, height,
                shape, background_color, text_color, border_color)

        Returns:
            True if the bubble was found and updated

        Raises:
            InvalidInput: If an attribute is not a bubble field
        """
        unknown = set(attributes) - _EDITABLE_FIELDS
        if unknown:
            raise InvalidInput(f"Unknown bubble attribute(s): {', '.join(sorted(unknown))}")

        try:
            bubble = self._find(bubble_id)
        except NotFound:
            logger.debug("Ignoring update to stale bubble id %r", bubble_id)
            return False

        for name, value in attributes.items():
            setattr(bubble, name, value)
        return True

    def move(self, bubble_id: str, x: float, y: float) -> bool:
        """Move a bubble's top-left corner."""
        return self.update(bubble_id, x=x, y=y)

    def remove(self, bubble_id: str) -> bool:
        """
        Delete a bubble, clearing the selection if it pointed at it.

        Returns:
            True if a bubble was removed
        """
        try:
            bubble = self._find(bubble_id)
        except NotFound:
            logger.debug("Ignoring removal of stale bubble id %r", bubble_id)
            return False

        self._bubbles.remove(bubble)
        if self.selected_id == bubble_id:
            self.selected_id = None
        return True

    def select(self, bubble_id: Optional[str]) -> None:
        """Select a bubble by id, or pass None to deselect."""
        if bubble_id is not None and self.get(bubble_id) is None:
            bubble_id = None
        self.selected_id = bubble_id

    def selected(self) -> Optional[Bubble]:
        return self.get(self.selected_id) if self.selected_id else None

    def bubble_at(self, x: float, y: float) -> Optional[Bubble]:
        """
        Get the topmost bubble at a point.

        Args:
            x: X coordinate in raster pixels
            y: Y coordinate in raster pixels

        Returns:
            The topmost bubble containing the point, or None
        """
        # Check in reverse order (topmost first)
        for bubble in reversed(self._bubbles):
            if bubble.contains_point(x, y):
                return bubble
        return None

    def render(self, target: QImage) -> None:
        """Draw every bubble onto a transparent target image."""
        render_bubbles(self._bubbles, target)
