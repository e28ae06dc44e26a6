"""Line-oriented handling of YAML front-matter blocks.

Model responses carry at most a handful of metadata lines at the top, framed
by ``---`` delimiters.  Scriber never parses that YAML: every operation here
works on raw lines of text, which keeps the merge rules predictable and lets
values the model emits pass through untouched.

Block shape
-----------
A block is recognised only at the very start of the text::

    ---
    title: Lecture 3
    date: 2024-05-01
    ---

The match is the shortest span that starts with ``---\\n`` and ends with
``\\n---``, so at least one character must sit between the delimiters.

Tags
----
Tags are emitted as a single-line flow sequence with every value
double-quoted verbatim (no escaping)::

    tags: ["math", "week 3"]
"""

import re
from typing import Optional

DELIMITER = "---"

_LEADING_BLOCK_RE = re.compile(r"\A---\n.+?\n---", re.DOTALL)
_TAGS_DECLARATION_RE = re.compile(r"^tags:\s*(.*)$", re.IGNORECASE)
_LIST_ITEM_RE = re.compile(r"^\s*-(\s|$)")


# ── Detection ──────────────────────────────────────────────────────────────────


def split_leading_block(text: str) -> tuple[Optional[str], str]:
    """Split *text* into ``(block, remainder)``.

    ``block`` is ``None`` when the text does not open with a front-matter
    block, in which case ``remainder`` is *text* unchanged.
    """
    m = _LEADING_BLOCK_RE.match(text)
    if not m:
        return None, text
    return m.group(0), text[m.end():]


def strip_leading_blocks(text: str) -> str:
    """Remove every front-matter block stacked at the start of *text*."""
    text = text.strip()
    block, remainder = split_leading_block(text)
    while block is not None:
        text = remainder.strip()
        block, remainder = split_leading_block(text)
    return text


# ── Editing ────────────────────────────────────────────────────────────────────


def strip_tags_declarations(block: str) -> str:
    """Drop every ``tags:`` declaration from *block*.

    Both the single-line form (``tags: [a, b]``) and the block-list form
    (``tags:`` followed by ``- item`` lines) are removed.
    """
    kept: list[str] = []
    in_tag_list = False
    for line in block.split("\n"):
        m = _TAGS_DECLARATION_RE.match(line.strip())
        if m:
            in_tag_list = not m.group(1).strip()
            continue
        if in_tag_list and _LIST_ITEM_RE.match(line):
            continue
        in_tag_list = False
        kept.append(line)
    return "\n".join(kept)


def ensure_closing_delimiter(lines: list[str]) -> list[str]:
    if not lines or lines[-1].strip() != DELIMITER:
        return lines + [DELIMITER]
    return list(lines)


def insert_before_closing(block: str, line: str) -> str:
    """Insert *line* immediately before the closing delimiter of *block*."""
    lines = ensure_closing_delimiter(block.split("\n"))
    lines.insert(len(lines) - 1, line)
    return "\n".join(lines)


def render_tags_line(tags: list[str]) -> str:
    return "tags: [" + ", ".join(f'"{tag}"' for tag in tags) + "]"


def synthesize_block(lines: list[str]) -> str:
    return "\n".join([DELIMITER, *lines, DELIMITER])
