"""An idempotent message consumer backed by SQLite."""

from __future__ import annotations

import os
import sqlite3

DEFAULT_DATABASE = "messages.db"

_SCHEMA = (
    "CREATE TABLE IF NOT EXISTS processed_messages "
    "(message_id TEXT PRIMARY KEY, content TEXT)"
)


class IdempotentConsumer:
    """Processes each message id at most once, remembering ids in a database."""

    def __init__(self, database: str | os.PathLike = DEFAULT_DATABASE) -> None:
        self._conn = sqlite3.connect(os.fspath(database), check_same_thread=False)
        with self._conn:
            self._conn.execute(_SCHEMA)

    def process_message(self, message_id: str, content: str) -> bool:
        """Store a message unless its id was seen before.

        Returns True if the message was processed now, False if it was skipped.
        """
        with self._conn:
            cursor = self._conn.execute(
                "INSERT OR IGNORE INTO processed_messages (message_id, content) "
                "VALUES (?, ?)",
                (message_id, content),
            )
        if cursor.rowcount == 0:
            print(f"Message already processed, skipping: {message_id}")
            return False
        print(f"Processed message: {message_id}")
        return True

    def __contains__(self, message_id: object) -> bool:
        row = self._conn.execute(
            "SELECT EXISTS(SELECT 1 FROM processed_messages WHERE message_id = ?)",
            (message_id,),
        ).fetchone()
        return bool(row[0])

    def __len__(self) -> int:
        (count,) = self._conn.execute(
            "SELECT COUNT(*) FROM processed_messages"
        ).fetchone()
        return count

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def __enter__(self) -> IdempotentConsumer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()