"""Insertion of the merged fragment into the host note."""


def patch_document(document: str, anchor: str, merged_text: str) -> str:
    """Insert *merged_text* directly before the first occurrence of *anchor*.

    The anchor itself stays in place, separated from the inserted text by a
    blank line.  Later occurrences of the same anchor are left alone.

    Raises:
        ValueError: *anchor* does not occur in *document*.
    """
    index = document.find(anchor)
    if index == -1:
        raise ValueError(f"Anchor {anchor!r} not found in document")
    return document[:index] + merged_text + "\n\n" + document[index:]
