"""Extraction of Obsidian image embeds from note text."""

import re
from dataclasses import dataclass

SUPPORTED_EXTENSIONS = ("png", "jpg", "jpeg")

# ![[<name>.<ext>]] where <name> contains no closing bracket.
_EMBED_RE = re.compile(
    r"!\[\[([^\]]+\.(?:" + "|".join(SUPPORTED_EXTENSIONS) + r"))\]\]",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ImageReference:
    link: str
    path: str

    @property
    def extension(self) -> str:
        return self.path.rsplit(".", 1)[-1].lower()


def extract_image_links(text: str) -> list[ImageReference]:
    """Return every image embed in *text*, in order of appearance.

    Duplicates are kept: the same embed appearing twice yields two references.
    """
    return [
        ImageReference(link=m.group(0), path=m.group(1))
        for m in _EMBED_RE.finditer(text)
    ]
