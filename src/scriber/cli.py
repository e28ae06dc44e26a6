"""Main CLI entry point."""

import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from scriber.config import DEFAULT_MAX_WORKERS, Config, Provider
from scriber.pipeline import RunStatus, transcribe_note
from scriber.providers.anthropic import AnthropicProvider
from scriber.providers.openai import OpenAIProvider
from scriber.vault import Vault

console = Console(stderr=True)
load_dotenv()


@click.command()
@click.argument("note_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--vault",
    "vault_root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    envvar="SCRIBER_VAULT",
    default=None,
    help="Vault root that embed paths are relative to. Defaults to the note's folder.",
)
@click.option(
    "--provider", "-p",
    type=click.Choice(["openai", "anthropic"], case_sensitive=False),
    default="openai",
    show_default=True,
    help="LLM provider to transcribe with.",
)
@click.option(
    "--model", "-m",
    default=None,
    help="Model name override (defaults to the provider's vision model).",
)
@click.option(
    "--api-key",
    default=None,
    help="API key (overrides environment variable).",
)
@click.option(
    "--attachments-folder",
    default=None,
    help="Vault folder searched when an embed path does not resolve. [default: Attachments]",
)
@click.option(
    "--prompt-note",
    default=None,
    help="Vault note whose text replaces the built-in system prompt.",
)
@click.option(
    "--reference-note",
    default=None,
    help="Vault note with names and vocabulary appended to the prompt.",
)
@click.option(
    "--activity-log",
    default=None,
    help="Vault note to append a line to after each run.",
)
@click.option(
    "--workers", "-j",
    type=click.IntRange(min=1),
    default=DEFAULT_MAX_WORKERS,
    show_default=True,
    help="Images transcribed in parallel.",
)
@click.option(
    "--preprocess/--no-preprocess",
    default=True,
    show_default=True,
    help="Straighten, downscale and sharpen images before sending them.",
)
@click.option(
    "--tags-without-frontmatter",
    is_flag=True,
    default=False,
    help="Also collect **Tags:** lines from responses that have no front-matter.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Print the updated note to stdout instead of writing it.",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
@click.version_option()
def main(
    note_path,
    vault_root,
    provider,
    model,
    api_key,
    attachments_folder,
    prompt_note,
    reference_note,
    activity_log,
    workers,
    preprocess,
    tags_without_frontmatter,
    dry_run,
    verbose,
):
    """Transcribe handwritten-note images embedded in an Obsidian note.

    Every ![[image.png]] embed in NOTE_PATH is sent to the model.  The merged
    Markdown is inserted above the first embed and the note is saved.
    """
    _setup_logging(verbose)

    try:
        config = Config.from_env(
            provider=Provider(provider),
            model_override=model,
            api_key_override=api_key,
            attachments_folder=attachments_folder,
            prompt_note_path=prompt_note,
            reference_note_path=reference_note,
            activity_log_path=activity_log,
            max_workers=workers,
            preprocess=preprocess,
            tags_without_frontmatter=tags_without_frontmatter,
        )
    except (RuntimeError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    vault = Vault(vault_root or note_path.parent)
    try:
        note_id = vault.note_id(note_path)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    provider_obj = _build_provider(config)

    try:
        with console.status(f"[cyan]Transcribing images in {note_id} via {provider} ({config.model})..."):
            result = transcribe_note(vault, note_id, provider_obj, config, dry_run=dry_run)
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if result.status is RunStatus.NO_IMAGES:
        console.print("[yellow]No images found to process.[/yellow]")
        return

    if result.status is RunStatus.NOTHING_EXTRACTED:
        console.print("[red]No Markdown extracted from images.[/red]")
        sys.exit(1)

    if dry_run:
        click.echo(result.document, nl=False)
    else:
        console.print(f"[green]Processed {result.transcribed} image(s).[/green]")
    if result.unsuccessful:
        console.print(f"[yellow]{result.unsuccessful} image(s) skipped or failed.[/yellow]")


def _setup_logging(verbose: bool) -> None:
    handler = RichHandler(console=console, show_path=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    for name in ("httpx", "httpcore", "openai", "anthropic"):
        logging.getLogger(name).setLevel(logging.WARNING)


def _build_provider(config: Config):
    if config.provider == Provider.ANTHROPIC:
        return AnthropicProvider(api_key=config.api_key, model=config.model)
    elif config.provider == Provider.OPENAI:
        return OpenAIProvider(api_key=config.api_key, model=config.model)
    else:
        raise ValueError(f"Unknown provider: {config.provider}")
