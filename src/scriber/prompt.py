"""System prompt for handwritten-note transcription, and its vault overrides."""

import logging
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from scriber.config import Config
    from scriber.vault import Vault

_log = logging.getLogger("prompt")

REFERENCE_HEADER = "Reference terms and names:"

SCRIBER_PROMPT = """\
You are Scriber, an expert transcriber of handwritten notes, including \
mathematical and scientific notes.

Transcribe the content of the provided image exactly and return it as \
Markdown following the rules below.

### Front-matter
Start the output with a YAML front-matter block delimited by --- lines. \
Include a title when the page has one, and a date when one is written on \
the page. Example:

---
title: Lecture 3 - Recurrences
date: 2024-05-01
---

Do not put tags in the front-matter.

### Tags
Directly below the front-matter, write one line listing topic tags for the \
page, comma separated, in this exact format:

**Tags:** mathematics, algorithms

Hashtags written on the page (e.g. #mathematics) must be listed there \
without the # and not left inline in the body.

### Body
- Underlined text in the title position becomes a level-1 heading (#); \
underlined text elsewhere becomes a level-2 heading (##).
- Render mathematics in LaTeX with dollar-sign delimiters: $x$ inline, \
$$ ... $$ on their own lines for display math.
- Preserve bullet points, numbered lists, tables and code blocks.
- Do not wrap the output in a code fence.
- Do not add commentary, interpretation, or content not present in the image.
"""


def build_system_prompt(prompt: str, reference_text: Optional[str] = None) -> str:
    """Append the reference vocabulary, if any, to *prompt*."""
    if not reference_text:
        return prompt
    return f"{prompt}\n\n{REFERENCE_HEADER}\n{reference_text}"


def resolve_system_prompt(vault: "Vault", config: "Config") -> str:
    """Return the prompt note's text when configured, else ``config.prompt``."""
    if config.prompt_note_path:
        if vault.exists(config.prompt_note_path):
            return vault.read(config.prompt_note_path)
        _log.warning(
            "Prompt note %s not found. Using the configured prompt.", config.prompt_note_path
        )
    return config.prompt


def load_reference_text(vault: "Vault", config: "Config") -> Optional[str]:
    if not config.reference_note_path:
        return None
    if not vault.exists(config.reference_note_path):
        _log.warning("Reference note %s not found. Continuing without it.", config.reference_note_path)
        return None
    return vault.read(config.reference_note_path)
