"""Configuration loading from environment variables and CLI flags."""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from scriber.prompt import SCRIBER_PROMPT


class Provider(str, Enum):
    ANTHROPIC = "anthropic"
    OPENAI = "openai"


DEFAULTS = {
    Provider.ANTHROPIC: "claude-sonnet-4-6",
    Provider.OPENAI: "gpt-4o",
}

ENV_KEYS = {
    Provider.ANTHROPIC: "ANTHROPIC_API_KEY",
    Provider.OPENAI: "OPENAI_API_KEY",
}

DEFAULT_ATTACHMENTS_FOLDER = "Attachments"
DEFAULT_MAX_WORKERS = 4

# Vault-relative settings that may also come from the environment / .env
ENV_SETTINGS = {
    "attachments_folder": "SCRIBER_ATTACHMENTS_FOLDER",
    "prompt_note_path": "SCRIBER_PROMPT_NOTE",
    "reference_note_path": "SCRIBER_REFERENCE_NOTE",
    "activity_log_path": "SCRIBER_ACTIVITY_LOG",
}


@dataclass
class Config:
    provider: Provider
    model: str
    api_key: str
    attachments_folder: str = DEFAULT_ATTACHMENTS_FOLDER
    prompt: str = SCRIBER_PROMPT
    prompt_note_path: Optional[str] = None
    reference_note_path: Optional[str] = None
    activity_log_path: Optional[str] = None
    max_workers: int = DEFAULT_MAX_WORKERS
    preprocess: bool = True
    tags_without_frontmatter: bool = False

    @classmethod
    def from_env(
        cls,
        provider: Provider,
        model_override: Optional[str] = None,
        api_key_override: Optional[str] = None,
        attachments_folder: Optional[str] = None,
        prompt_note_path: Optional[str] = None,
        reference_note_path: Optional[str] = None,
        activity_log_path: Optional[str] = None,
        max_workers: Optional[int] = None,
        preprocess: bool = True,
        tags_without_frontmatter: bool = False,
    ) -> "Config":
        model = model_override or DEFAULTS[provider]
        api_key = api_key_override or os.environ.get(ENV_KEYS[provider], "")
        if not api_key:
            raise RuntimeError(
                f"No API key for {provider.value}. "
                f"Set {ENV_KEYS[provider]} in your environment or .env file."
            )

        overrides = {
            "attachments_folder": attachments_folder,
            "prompt_note_path": prompt_note_path,
            "reference_note_path": reference_note_path,
            "activity_log_path": activity_log_path,
        }
        settings = {
            name: value or os.environ.get(ENV_SETTINGS[name]) or None
            for name, value in overrides.items()
        }
        settings["attachments_folder"] = settings["attachments_folder"] or DEFAULT_ATTACHMENTS_FOLDER

        workers = DEFAULT_MAX_WORKERS if max_workers is None else max_workers
        if workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {workers}")

        return cls(
            provider=provider,
            model=model,
            api_key=api_key,
            max_workers=workers,
            preprocess=preprocess,
            tags_without_frontmatter=tags_without_frontmatter,
            **settings,
        )
