"""OpenAI vision provider."""

import base64
import logging
from typing import Any, Optional

import openai
from openai import OpenAI

from scriber.prompt import build_system_prompt
from scriber.providers.base import USER_INSTRUCTION, BaseProvider, TranscriptionError, media_type

_log = logging.getLogger("openai_provider")


class OpenAIProvider(BaseProvider):
    def __init__(self, api_key: str, model: str) -> None:
        self.client = OpenAI(api_key=api_key)
        self.model = model

    def transcribe(
        self,
        image: bytes,
        extension: str,
        system_prompt: str,
        reference_text: Optional[str] = None,
    ) -> str:
        b64 = base64.standard_b64encode(image).decode("utf-8")
        content: list[Any] = [
            {
                "type": "image_url",
                "image_url": {
                    "url": f"data:{media_type(extension)};base64,{b64}",
                    "detail": "high",
                },
            },
            {"type": "text", "text": USER_INSTRUCTION},
        ]

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                max_tokens=4096,
                messages=[
                    {"role": "system", "content": build_system_prompt(system_prompt, reference_text)},
                    {"role": "user", "content": content},
                ],
            )
        except openai.OpenAIError as e:
            raise TranscriptionError(f"OpenAI request failed: {e}") from e

        _log.debug("OpenAI usage: %s", getattr(response, "usage", None))
        return response.choices[0].message.content or ""
