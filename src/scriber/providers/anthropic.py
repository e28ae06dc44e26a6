"""Anthropic Claude vision provider."""

import base64
import logging
from typing import Any, Optional

import anthropic

from scriber.prompt import build_system_prompt
from scriber.providers.base import USER_INSTRUCTION, BaseProvider, TranscriptionError, media_type

_log = logging.getLogger("anthropic_provider")


class AnthropicProvider(BaseProvider):
    def __init__(self, api_key: str, model: str) -> None:
        self.client = anthropic.Anthropic(api_key=api_key)
        self.model = model

    def transcribe(
        self,
        image: bytes,
        extension: str,
        system_prompt: str,
        reference_text: Optional[str] = None,
    ) -> str:
        content: list[Any] = [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": media_type(extension),
                    "data": base64.standard_b64encode(image).decode("utf-8"),
                },
            },
            {"type": "text", "text": USER_INSTRUCTION},
        ]

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=8192,
                system=build_system_prompt(system_prompt, reference_text),
                messages=[{"role": "user", "content": content}],
            )
        except anthropic.AnthropicError as e:
            raise TranscriptionError(f"Anthropic request failed: {e}") from e

        _log.debug("Anthropic usage: %s", getattr(response, "usage", None))
        return "".join(block.text for block in response.content if block.type == "text")
