"""Normalisation of a single model response into a note fragment.

A well-behaved response looks like::

    ```markdown
    ---
    title: Lecture 3
    ---
    **Tags:** math, week 3

    # Lecture 3
    ...
    ```

Models drift from that shape often enough that nothing here is allowed to
fail.  The worst case is a fragment with no front-matter, no tags, and the
cleaned response as its body.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from scriber.frontmatter import split_leading_block, strip_leading_blocks

_log = logging.getLogger("normalize")

_OPENING_FENCE_RE = re.compile(r"\A\s*```(?:markdown|md)?[ \t]*(?:\n|\Z)", re.IGNORECASE)
_CLOSING_FENCE_RE = re.compile(r"\n?```\s*\Z")
_TAGS_ANNOTATION_RE = re.compile(r"\*\*Tags:\*\*[ \t]*(.*)", re.IGNORECASE)


@dataclass
class NormalizedFragment:
    frontmatter: Optional[str]
    body: str
    tags: list[str] = field(default_factory=list)


def strip_code_fence(text: str) -> str:
    """Remove a code fence wrapping the whole response, if there is one."""
    text = text.replace("\r\n", "\n")
    text, opened = _OPENING_FENCE_RE.subn("", text, count=1)
    # A trailing fence closing a code block inside the body must stay.
    if opened or text.count("```") % 2 == 1:
        text = _CLOSING_FENCE_RE.sub("", text, count=1)
    return text.strip()


def extract_tags(body: str) -> tuple[list[str], str]:
    """Pull the first ``**Tags:** a, b`` annotation out of *body*.

    Returns the parsed tags and the body with the annotation removed.
    """
    m = _TAGS_ANNOTATION_RE.search(body)
    if not m:
        return [], body
    tags = [t.strip() for t in m.group(1).split(",") if t.strip()]
    return tags, (body[:m.start()] + body[m.end():]).strip()


def normalize_response(
    raw: str,
    extension: str,
    tags_without_frontmatter: bool = False,
) -> NormalizedFragment:
    """Split a raw model response into front-matter, body and tags.

    Args:
        raw:        The response text exactly as the model returned it.
        extension:  Extension of the source image.  Not used for parsing.
        tags_without_frontmatter:
                    Also extract the ``**Tags:**`` annotation from responses
                    that carry no front-matter block.  Off by default, in
                    which case such responses are kept verbatim.
    """
    clean = strip_code_fence(raw)
    frontmatter, remainder = split_leading_block(clean)

    if frontmatter is None:
        if not tags_without_frontmatter:
            return NormalizedFragment(frontmatter=None, body=clean, tags=[])
        tags, body = extract_tags(clean)
        return NormalizedFragment(frontmatter=None, body=strip_leading_blocks(body), tags=tags)

    tags, body = extract_tags(remainder.strip())
    # Models sometimes echo the front-matter a second time under the tags line.
    body = strip_leading_blocks(body)
    _log.debug("Normalised %s response: %d tag(s), %d body chars", extension, len(tags), len(body))
    return NormalizedFragment(frontmatter=frontmatter, body=body, tags=tags)
