"""Obsidian vault access: whole-note reads and writes plus image lookup.

Notes and attachments are addressed by vault-relative POSIX paths, the same
form Obsidian uses inside ``![[...]]`` embeds.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

_log = logging.getLogger("vault")


@dataclass(frozen=True)
class ImageAsset:
    path: str
    data: bytes
    extension: str


class Vault:
    def __init__(self, root: Path) -> None:
        self.root = Path(root).resolve()

    def _path(self, note_id: str) -> Path:
        path = (self.root / note_id).resolve()
        if path != self.root and self.root not in path.parents:
            raise ValueError(f"{note_id!r} points outside the vault at {self.root}")
        return path

    def note_id(self, path: Path) -> str:
        """Return the vault-relative id of *path*."""
        try:
            return Path(path).resolve().relative_to(self.root).as_posix()
        except ValueError:
            raise ValueError(f"{path} is not inside the vault at {self.root}") from None

    def exists(self, note_id: str) -> bool:
        return self._path(note_id).is_file()

    def read(self, note_id: str) -> str:
        return self._path(note_id).read_text(encoding="utf-8")

    def read_binary(self, note_id: str) -> bytes:
        return self._path(note_id).read_bytes()

    def write(self, note_id: str, text: str) -> None:
        """Replace the whole content of an existing note in one step."""
        path = self._path(note_id)
        tmp_path = path.with_name(f".{path.name}.tmp")
        try:
            with tmp_path.open("w", encoding="utf-8", newline="") as fh:
                fh.write(text)
            tmp_path.replace(path)
        except Exception:
            if tmp_path.exists():
                tmp_path.unlink()
            raise
        _log.debug("Wrote %s (%d chars)", note_id, len(text))

    def create(self, note_id: str, text: str) -> None:
        path = self._path(note_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("x", encoding="utf-8", newline="") as fh:
            fh.write(text)
        _log.debug("Created %s", note_id)

    def resolve_image(self, path: str, fallback_folder: Optional[str] = None) -> Optional[ImageAsset]:
        """Find the image an embed refers to.

        The literal path is tried first, then the same path under
        *fallback_folder* (the vault's attachments folder).  Returns ``None``
        when neither is a file.
        """
        candidates = [path]
        if fallback_folder:
            candidates.append(f"{fallback_folder.rstrip('/')}/{path}")

        for candidate in candidates:
            try:
                if not self.exists(candidate):
                    continue
            except ValueError:
                _log.warning("Ignoring embed outside the vault: %s", candidate)
                continue
            return ImageAsset(
                path=candidate,
                data=self.read_binary(candidate),
                extension=Path(candidate).suffix.lstrip(".").lower(),
            )
        return None
