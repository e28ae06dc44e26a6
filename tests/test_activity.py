"""Tests for scriber.activity: append_activity()."""

from datetime import datetime

from scriber.activity import LOG_HEADER, append_activity

NOW = datetime(2024, 5, 1, 9, 30, 5)


class TestAppendActivity:
    def test_creates_log_with_header(self, vault, vault_dir):
        append_activity(vault, "Scriber Log.md", "first", now=NOW)
        text = (vault_dir / "Scriber Log.md").read_text(encoding="utf-8")
        assert text == LOG_HEADER + "\n[2024-05-01 09:30:05] first"

    def test_appends_to_existing_log(self, vault, vault_dir):
        append_activity(vault, "Scriber Log.md", "first", now=NOW)
        append_activity(vault, "Scriber Log.md", "second", now=NOW)
        lines = (vault_dir / "Scriber Log.md").read_text(encoding="utf-8").splitlines()
        assert lines[-2:] == ["[2024-05-01 09:30:05] first", "[2024-05-01 09:30:05] second"]

    def test_log_in_subfolder(self, vault, vault_dir):
        append_activity(vault, "Logs/scriber.md", "entry", now=NOW)
        assert (vault_dir / "Logs" / "scriber.md").exists()
