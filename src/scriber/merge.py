"""Deterministic merge of per-image fragments into one note fragment.

Each image yields its own fragment; the note gets exactly one front-matter
block and one body.  The rules:

* Tags from every fragment are unioned in fragment order, first occurrence
  wins, compared by exact string.
* The first fragment that carries front-matter provides the template
  (first-wins).  Front-matter of later fragments is discarded; their tags
  survive because tags come from the ``**Tags:**`` annotations.
* Any ``tags:`` declaration in the template is replaced by a single
  ``tags: [...]`` line placed just before the closing delimiter.
* With no template but some tags, a block holding only the tags line is
  synthesized.
* Bodies are joined with one blank line, in fragment order.  Empty bodies
  keep their slot.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from scriber.frontmatter import (
    ensure_closing_delimiter,
    insert_before_closing,
    render_tags_line,
    strip_tags_declarations,
    synthesize_block,
)
from scriber.normalize import NormalizedFragment

_log = logging.getLogger("merge")


@dataclass
class MergedResult:
    frontmatter: str
    body: str
    tags: list[str] = field(default_factory=list)

    def render(self) -> str:
        return f"{self.frontmatter}\n\n{self.body}"


def unique_tags(tag_lists: Iterable[list[str]]) -> list[str]:
    """Flatten *tag_lists*, dropping repeats but keeping first-seen order."""
    seen: dict[str, None] = {}
    for tags in tag_lists:
        for tag in tags:
            seen.setdefault(tag.strip(), None)
    return list(seen)


def merge_frontmatter(template: Optional[str], tags: list[str]) -> str:
    if template is None:
        return synthesize_block([render_tags_line(tags)]) if tags else ""

    block = strip_tags_declarations(template).strip()
    if tags:
        return insert_before_closing(block, render_tags_line(tags))
    return "\n".join(ensure_closing_delimiter(block.split("\n")))


def merge_fragments(fragments: list[NormalizedFragment]) -> MergedResult:
    """Fold *fragments* (in image order) into a single :class:`MergedResult`."""
    if not fragments:
        raise ValueError("merge_fragments() needs at least one fragment")

    tags = unique_tags(f.tags for f in fragments)
    template = next((f.frontmatter for f in fragments if f.frontmatter is not None), None)
    dropped = sum(1 for f in fragments if f.frontmatter is not None) - (template is not None)
    if dropped:
        _log.debug("Discarding front-matter of %d later fragment(s)", dropped)

    return MergedResult(
        frontmatter=merge_frontmatter(template, tags),
        body="\n\n".join(f.body for f in fragments),
        tags=tags,
    )
