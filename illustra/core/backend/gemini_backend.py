"""
Image backend backed by Google's Gemini image model.
"""
import logging
from typing import List, Optional

from google import genai
from google.genai import types

from illustra.core.errors import BackendFailure
from illustra.core.history import RasterVersion
from .base import ImageBackend

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash-image-preview"

SUBJECT_MASK_INSTRUCTION = (
    "Task: Create a binary segmentation mask for the most prominent subject in this image. "
    "The subject must be solid white (#FFFFFF) and the background must be solid black (#000000). "
    "Return only the image file without any text."
)

QUOTA_MESSAGE = "Image generation limit reached. Please wait a moment before trying again."


class GeminiImageBackend(ImageBackend):
    """Sends edit and segmentation requests to generate_content."""

    def __init__(self, api_key: Optional[str] = None, model: str = DEFAULT_MODEL,
                 client=None):
        """
        Args:
            api_key: Gemini API key; only needed when no client is given
            model: Image-capable model name
            client: Preconfigured genai.Client
        """
        self.model = model
        self._api_key = api_key
        self._client = client

    def _get_client(self):
        if self._client is None:
            if not self._api_key:
                raise BackendFailure(
                    "No Gemini API key configured. Set GEMINI_API_KEY and reopen the editor."
                )
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    def request_subject_mask(self, image: RasterVersion) -> RasterVersion:
        parts = [
            types.Part.from_bytes(data=image.data, mime_type=image.mime_type),
            types.Part.from_text(text=SUBJECT_MASK_INSTRUCTION),
        ]
        return self._generate_image(
            parts,
            modalities=["IMAGE"],
            missing_message="The AI did not return a mask image.",
            failure_message="Failed to generate the subject mask with AI.",
        )

    def request_edited_image(self, image: RasterVersion, prompt: str,
                             mask: Optional[RasterVersion] = None) -> RasterVersion:
        parts = [types.Part.from_bytes(data=image.data, mime_type=image.mime_type)]
        if mask is not None:
            # The mask goes between the source image and the instruction
            parts.append(types.Part.from_bytes(data=mask.data, mime_type="image/png"))
        parts.append(types.Part.from_text(text=prompt))

        return self._generate_image(
            parts,
            modalities=["IMAGE", "TEXT"],
            missing_message="The AI did not return an edited image.",
            failure_message="Failed to edit the image with the provided prompt.",
        )

    def _generate_image(self, parts: List[types.Part], modalities: List[str],
                        missing_message: str, failure_message: str) -> RasterVersion:
        client = self._get_client()
        try:
            response = client.models.generate_content(
                model=self.model,
                contents=parts,
                config=types.GenerateContentConfig(response_modalities=modalities),
            )
        except Exception as e:
            logger.warning("Gemini request failed: %s", e)
            text = str(e)
            if "429" in text or "RESOURCE_EXHAUSTED" in text:
                raise BackendFailure(QUOTA_MESSAGE) from e
            raise BackendFailure(failure_message) from e

        inline = self._first_inline_image(response)
        if inline is None:
            logger.warning("Gemini response had no image part")
            raise BackendFailure(missing_message)

        return RasterVersion(inline.data, inline.mime_type or "image/png")

    @staticmethod
    def _first_inline_image(response):
        """Find the first inline data part of the first candidate."""
        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            return None
        content = getattr(candidates[0], "content", None)
        for part in getattr(content, "parts", None) or []:
            inline = getattr(part, "inline_data", None)
            if inline is not None and inline.data:
                return inline
        return None
