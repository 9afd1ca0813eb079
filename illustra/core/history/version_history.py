"""
Linear version history for edited rasters.
"""
import logging
from typing import List, Tuple

from .models import RasterVersion

logger = logging.getLogger(__name__)


class VersionHistory:
    """Ordered list of raster versions with a cursor to the current one."""

    def __init__(self, initial: RasterVersion):
        """
        Initialize the history with the session's starting raster.

        Args:
            initial: Raster the session opened with (index 0)
        """
        if initial is None:
            raise ValueError("History needs an initial raster version")
        self._versions: List[RasterVersion] = [initial]
        self._cursor = 0

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def versions(self) -> Tuple[RasterVersion, ...]:
        return tuple(self._versions)

    def __len__(self) -> int:
        return len(self._versions)

    def current(self) -> RasterVersion:
        """Return the version currently shown to the user."""
        return self._versions[self._cursor]

    def append(self, version: RasterVersion) -> None:
        """
        Push a new version after the cursor.

        Anything after the cursor is discarded first, so an edit applied
        after an undo drops the undone versions for good.

        Args:
            version: Newly produced raster
        """
        discarded = len(self._versions) - (self._cursor + 1)
        del self._versions[self._cursor + 1:]
        self._versions.append(version)
        self._cursor = len(self._versions) - 1

        if discarded:
            logger.info("Dropped %d undone version(s)", discarded)
        logger.info("History now at version %d of %d",
                    self._cursor + 1, len(self._versions))

    def can_undo(self) -> bool:
        """Check if an earlier version exists."""
        return self._cursor > 0

    def undo(self) -> bool:
        """
        Step the cursor back one version.

        Returns:
            True if the cursor moved, False if already at the first version
        """
        if not self.can_undo():
            logger.debug("No earlier version to undo to")
            return False

        self._cursor -= 1
        logger.info("Undo to version %d of %d",
                    self._cursor + 1, len(self._versions))
        return True
