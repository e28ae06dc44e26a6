"""Optional activity log kept as a note inside the vault."""

import logging
from datetime import datetime
from typing import Optional

from scriber.vault import Vault

_log = logging.getLogger("activity")

LOG_HEADER = "# Scriber Activity Log\n"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def append_activity(vault: Vault, log_path: str, message: str, now: Optional[datetime] = None) -> None:
    """Append a timestamped *message* to the log note, creating it if needed."""
    entry = f"\n[{(now or datetime.now()).strftime(TIMESTAMP_FORMAT)}] {message}"
    if vault.exists(log_path):
        vault.write(log_path, vault.read(log_path) + entry)
    else:
        vault.create(log_path, LOG_HEADER + entry)
    _log.debug("Logged activity to %s: %s", log_path, message)
