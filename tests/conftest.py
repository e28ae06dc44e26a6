"""Shared fixtures for the test suite.

All fixtures here produce real files / real bytes so tests exercise actual
code paths rather than hand-crafted stubs.
"""

import io
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from click.testing import CliRunner
from PIL import Image

from scriber.config import Config, Provider
from scriber.vault import Vault


# ── CLI runner ─────────────────────────────────────────────────────────────


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


# ── Image fixtures ─────────────────────────────────────────────────────────


@pytest.fixture
def png_bytes() -> bytes:
    """A real, valid 10×10 red PNG image as raw bytes."""
    buf = io.BytesIO()
    Image.new("RGB", (10, 10), color=(255, 0, 0)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def jpg_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (12, 8), color=(0, 0, 255)).save(buf, format="JPEG")
    return buf.getvalue()


@pytest.fixture
def png_file(tmp_path: Path, png_bytes: bytes) -> Path:
    """The PNG written to a temporary file on disk."""
    path = tmp_path / "test.png"
    path.write_bytes(png_bytes)
    return path


# ── Vault fixtures ─────────────────────────────────────────────────────────


@pytest.fixture
def vault_dir(tmp_path: Path, png_bytes: bytes, jpg_bytes: bytes) -> Path:
    """A small vault: one image at the root, one in Attachments/, one note."""
    root = tmp_path / "vault"
    (root / "Attachments").mkdir(parents=True)
    (root / "scan.png").write_bytes(png_bytes)
    (root / "Attachments" / "page2.jpg").write_bytes(jpg_bytes)
    (root / "note.md").write_text(
        "# Week 3\n\nbefore ![[scan.png]] middle ![[page2.jpg]] after\n",
        encoding="utf-8",
    )
    return root


@pytest.fixture
def vault(vault_dir: Path) -> Vault:
    return Vault(vault_dir)


@pytest.fixture
def config() -> Config:
    return Config(provider=Provider.OPENAI, model="gpt-test-model", api_key="test-key", preprocess=False)


@pytest.fixture
def mock_provider() -> MagicMock:
    provider = MagicMock()
    provider.transcribe.return_value = "---\ntitle: x\n---\n**Tags:** a, b\nHello"
    return provider
