"""Write-ahead logging: record a change durably before applying it."""

from __future__ import annotations

import os
from pathlib import Path

DEFAULT_LOG = "wal.log"
DEFAULT_WAL_LOG = "write_ahead_log.txt"
DEFAULT_DATA_STORE = "data_store.txt"


def _append_line(path: str | os.PathLike, data: str, mode: int) -> None:
    def opener(name: str, flags: int) -> int:
        return os.open(name, flags, mode)

    with open(path, "a", encoding="utf-8", opener=opener) as handle:
        handle.write(f"{data}\n")


def write_log(entry: str, path: str | os.PathLike = DEFAULT_LOG) -> None:
    """Append one action to the log file, creating it if needed."""
    _append_line(path, entry, 0o644)


class WriteAheadLog:
    """A log file paired with a data store that is replayed from it."""

    def __init__(
        self,
        log_path: str | os.PathLike = DEFAULT_WAL_LOG,
        data_path: str | os.PathLike = DEFAULT_DATA_STORE,
    ) -> None:
        self.log_path = Path(log_path)
        self.data_path = Path(data_path)

    def _apply(self, data: str) -> None:
        _append_line(self.data_path, data, 0o600)

    def write(self, data: str) -> None:
        """Log ``data`` first, then apply it to the data store."""
        _append_line(self.log_path, data, 0o600)
        self._apply(data)

    def recover(self) -> int:
        """Apply every logged entry to the data store again.

        Returns the number of entries replayed; a missing log replays nothing.
        """
        try:
            with open(self.log_path, encoding="utf-8") as handle:
                entries = [line.rstrip("\n").removesuffix("\r") for line in handle]
        except FileNotFoundError:
            return 0
        for entry in entries:
            self._apply(entry)
        return len(entries)