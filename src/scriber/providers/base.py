"""Abstract base for vision model providers."""

from abc import ABC, abstractmethod
from typing import Optional

MEDIA_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
}

USER_INSTRUCTION = "Transcribe the handwritten note in this image."


class TranscriptionError(RuntimeError):
    """The provider could not produce a transcription for an image."""


def media_type(extension: str) -> str:
    try:
        return MEDIA_TYPES[extension.lower()]
    except KeyError:
        raise TranscriptionError(f"Unsupported image type: {extension}") from None


class BaseProvider(ABC):
    @abstractmethod
    def transcribe(
        self,
        image: bytes,
        extension: str,
        system_prompt: str,
        reference_text: Optional[str] = None,
    ) -> str:
        """Send one image and return the model's raw text response.

        Raises:
            TranscriptionError: the request failed (network, HTTP status, auth).
        """
        ...
