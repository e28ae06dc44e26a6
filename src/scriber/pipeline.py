"""Transcription run for one note: fetch every image, merge, write once.

The run has two stages.  The fetch stage resolves each embedded image,
sends it to the model and normalises the response; images are independent,
so this stage may run on a thread pool.  Results are buffered by position
and handed to the merge stage in the order the embeds appear in the note,
whatever order the requests finished in.

Failures stay local to their image: a missing file, an unsupported type or a
failed request means that image contributes no fragment and the others carry
on.  The note is only touched when at least one fragment came back, and then
exactly once.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from PIL import Image

from scriber.activity import append_activity
from scriber.config import Config
from scriber.links import SUPPORTED_EXTENSIONS, ImageReference, extract_image_links
from scriber.merge import MergedResult, merge_fragments
from scriber.normalize import NormalizedFragment, normalize_response
from scriber.patch import patch_document
from scriber.preprocessing import prepare_image
from scriber.prompt import load_reference_text, resolve_system_prompt
from scriber.providers.base import BaseProvider, TranscriptionError
from scriber.vault import Vault

_log = logging.getLogger("pipeline")


class RunStatus(str, Enum):
    NO_IMAGES = "no_images"
    NOTHING_EXTRACTED = "nothing_extracted"
    UPDATED = "updated"


class OutcomeStatus(str, Enum):
    TRANSCRIBED = "transcribed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class ImageOutcome:
    reference: ImageReference
    status: OutcomeStatus
    fragment: Optional[NormalizedFragment] = None
    error: Optional[str] = None


@dataclass
class RunResult:
    status: RunStatus
    outcomes: list[ImageOutcome] = field(default_factory=list)
    merged: Optional[MergedResult] = None
    document: Optional[str] = None

    @property
    def transcribed(self) -> int:
        return sum(1 for o in self.outcomes if o.status is OutcomeStatus.TRANSCRIBED)

    @property
    def unsuccessful(self) -> int:
        return len(self.outcomes) - self.transcribed


# ── Fetch stage ────────────────────────────────────────────────────────────────


def transcribe_image(
    reference: ImageReference,
    vault: Vault,
    provider: BaseProvider,
    config: Config,
    system_prompt: str,
    reference_text: Optional[str] = None,
) -> ImageOutcome:
    """Resolve, upload and normalise a single embedded image."""
    asset = vault.resolve_image(reference.path, config.attachments_folder)
    if asset is None:
        _log.warning("Image not found: %s", reference.path)
        return ImageOutcome(reference, OutcomeStatus.SKIPPED, error="not found")

    if asset.extension not in SUPPORTED_EXTENSIONS:
        _log.warning("Unsupported image type %r: %s", asset.extension, asset.path)
        return ImageOutcome(reference, OutcomeStatus.SKIPPED, error="unsupported type")

    try:
        data, extension = prepare_image(asset.data, asset.extension, config.preprocess)
    except (OSError, Image.DecompressionBombError, ValueError) as e:
        _log.error("Could not read image %s: %s", asset.path, e)
        return ImageOutcome(reference, OutcomeStatus.FAILED, error=str(e))

    _log.info("Sending %s to %s", asset.path, config.model)
    try:
        raw = provider.transcribe(data, extension, system_prompt, reference_text)
    except TranscriptionError as e:
        _log.error("Transcription failed for %s: %s", asset.path, e)
        return ImageOutcome(reference, OutcomeStatus.FAILED, error=str(e))

    if not raw.strip():
        _log.error("Empty response for %s", asset.path)
        return ImageOutcome(reference, OutcomeStatus.FAILED, error="empty response")

    _log.debug("Response for %s:\n%s", asset.path, raw)
    fragment = normalize_response(raw, extension, config.tags_without_frontmatter)
    return ImageOutcome(reference, OutcomeStatus.TRANSCRIBED, fragment=fragment)


def fetch_in_order(
    references: list[ImageReference],
    worker: Callable[[ImageReference], ImageOutcome],
    max_workers: int = 1,
) -> list[ImageOutcome]:
    """Run *worker* over *references*, returning outcomes in input order.

    An exception raised by *worker* becomes a FAILED outcome for that
    reference only.
    """
    if max_workers <= 1 or len(references) <= 1:
        return [_run_one(worker, ref) for ref in references]

    results: list[Optional[ImageOutcome]] = [None] * len(references)
    with ThreadPoolExecutor(max_workers=min(max_workers, len(references))) as executor:
        futures = {executor.submit(_run_one, worker, ref): i for i, ref in enumerate(references)}
        for future in as_completed(futures):
            results[futures[future]] = future.result()
    return [outcome for outcome in results if outcome is not None]


def _run_one(worker: Callable[[ImageReference], ImageOutcome], reference: ImageReference) -> ImageOutcome:
    try:
        return worker(reference)
    except Exception as e:
        _log.exception("Unexpected error while transcribing %s", reference.path)
        return ImageOutcome(reference, OutcomeStatus.FAILED, error=f"{type(e).__name__}: {e}")


# ── Run ────────────────────────────────────────────────────────────────────────


def transcribe_note(
    vault: Vault,
    note_id: str,
    provider: BaseProvider,
    config: Config,
    dry_run: bool = False,
) -> RunResult:
    """Transcribe every image embedded in *note_id* and merge the result in.

    With ``dry_run`` the patched text is returned in the result but nothing
    is written to the vault.
    """
    document = vault.read(note_id)
    references = extract_image_links(document)
    if not references:
        _log.info("No images found in %s", note_id)
        return RunResult(status=RunStatus.NO_IMAGES)

    anchor = references[0].link
    if document.count(anchor) > 1:
        _log.warning("%s appears more than once in %s; inserting before the first one", anchor, note_id)
    _log.info("Found %d image link(s) in %s", len(references), note_id)

    system_prompt = resolve_system_prompt(vault, config)
    reference_text = load_reference_text(vault, config)

    outcomes = fetch_in_order(
        references,
        lambda ref: transcribe_image(ref, vault, provider, config, system_prompt, reference_text),
        max_workers=config.max_workers,
    )
    fragments = [o.fragment for o in outcomes if o.fragment is not None]

    if not fragments:
        _log.warning("No Markdown extracted from %d image(s) in %s", len(references), note_id)
        if config.activity_log_path and not dry_run:
            append_activity(vault, config.activity_log_path, f"No Markdown extracted from {note_id}")
        return RunResult(status=RunStatus.NOTHING_EXTRACTED, outcomes=outcomes)

    merged = merge_fragments(fragments)
    patched = patch_document(document, anchor, merged.render())

    if not dry_run:
        vault.write(note_id, patched)
        if config.activity_log_path:
            append_activity(
                vault,
                config.activity_log_path,
                f"Processed {len(fragments)} of {len(references)} image(s) in {note_id}",
            )

    return RunResult(status=RunStatus.UPDATED, outcomes=outcomes, merged=merged, document=patched)
