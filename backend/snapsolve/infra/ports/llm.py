from __future__ import annotations

from abc import ABC, abstractmethod


class VisionLLMPort(ABC):
    provider_name = "unknown"
    model_name = "unknown"

    @abstractmethod
    def generate_text_from_media(
        self,
        *,
        prompt: str,
        media_bytes: bytes,
        media_mime_type: str,
        system_prompt: str | None = None,
        model: str | None = None,
    ) -> str:
        """Return the model's raw text answer for one image.

        Implementations raise ``TransportError`` (or ``ExtractionTimeoutError``)
        for anything that prevents a usable answer; they never retry.
        """
