"""
Contract for the generative image backend.
"""
from abc import ABC, abstractmethod
from typing import Optional

from illustra.core.history import RasterVersion


class ImageBackend(ABC):
    """
    Produces subject masks and edited images.

    Implementations block until the service answers and raise
    BackendFailure on any error. The editor runs them off the GUI thread.
    """

    @abstractmethod
    def request_subject_mask(self, image: RasterVersion) -> RasterVersion:
        """
        Segment the main subject of an image.

        Args:
            image: Current raster and its encoding

        Returns:
            Same-size mask, white on the subject and black elsewhere
        """

    @abstractmethod
    def request_edited_image(self, image: RasterVersion, prompt: str,
                             mask: Optional[RasterVersion] = None) -> RasterVersion:
        """
        Apply a text instruction to an image.

        Args:
            image: Current raster and its encoding
            prompt: Edit instruction
            mask: Optional binary PNG mask confining the edit to white pixels

        Returns:
            The edited raster with its encoding
        """
