"""SQLite storage for short links."""

from __future__ import annotations

import logging
import sqlite3
import time
from dataclasses import dataclass
from typing import NamedTuple, Optional

logger = logging.getLogger(__name__)

# Incremented whenever the schema changes.
USER_VERSION = 1


@dataclass(frozen=True)
class DBRow:
    """One stored link as reported to clients."""

    shortlink: str
    longlink: str
    hits: int
    expiry_time: int

    def to_dict(self) -> dict:
        """Return the row as a JSON-ready mapping."""
        return {
            "shortlink": self.shortlink,
            "longlink": self.longlink,
            "hits": self.hits,
            "expiry_time": self.expiry_time,
        }


class LookupResult(NamedTuple):
    """Long link, hit count and expiry time of a looked-up short link."""

    longlink: Optional[str] = None
    hits: Optional[int] = None
    expiry_time: Optional[int] = None


class DuplicateShortlinkError(Exception):
    """Raised when a short link is already stored."""


def _now() -> int:
    return int(time.time())


class LinkDatabase:
    """A connection to the link database, migrated to the current schema on open."""

    def __init__(self, path) -> None:
        self._conn = sqlite3.connect(str(path), isolation_level=None)
        self._conn.row_factory = sqlite3.Row
        self._migrate()

    def _migrate(self) -> None:
        conn = self._conn
        (table_exists,) = conn.execute(
            "SELECT count(*) FROM sqlite_master WHERE type = 'table' AND name = 'urls'"
        ).fetchone()

        conn.execute(
            """CREATE TABLE IF NOT EXISTS urls (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                long_url TEXT NOT NULL,
                short_url TEXT NOT NULL,
                hits INTEGER NOT NULL,
                expiry_time INTEGER NOT NULL DEFAULT 0
            )"""
        )
        conn.execute(
            "CREATE UNIQUE INDEX IF NOT EXISTS idx_short_url ON urls (short_url)"
        )

        if table_exists == 0:
            current_version = USER_VERSION
        else:
            row = conn.execute("PRAGMA user_version").fetchone()
            current_version = row[0] if row else 0

        # Migration 1: add expiry_time.
        if current_version < 1:
            conn.execute(
                "ALTER TABLE urls ADD COLUMN expiry_time INTEGER NOT NULL DEFAULT 0"
            )

        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_expiry_time ON urls (expiry_time)"
        )
        conn.execute(f"PRAGMA user_version = {USER_VERSION}")

    def close(self) -> None:
        """Close the underlying connection."""
        self._conn.close()

    def __enter__(self) -> "LinkDatabase":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def find_url(self, shortlink: str, needhits: bool) -> LookupResult:
        """Look up an unexpired short link; hits and expiry only when asked for."""
        now = _now()
        if needhits:
            query = (
                "SELECT long_url, hits, expiry_time FROM urls "
                "WHERE short_url = ? AND (expiry_time > ? OR expiry_time = 0)"
            )
        else:
            query = (
                "SELECT long_url FROM urls "
                "WHERE short_url = ? AND (expiry_time > ? OR expiry_time = 0)"
            )
        row = self._conn.execute(query, (shortlink, now)).fetchone()
        if row is None:
            return LookupResult()
        if needhits:
            return LookupResult(row["long_url"], row["hits"], row["expiry_time"])
        return LookupResult(row["long_url"])

    def getall(self) -> list[DBRow]:
        """Return every unexpired link in insertion order."""
        now = _now()
        cursor = self._conn.execute(
            "SELECT * FROM urls WHERE expiry_time > ? OR expiry_time = 0 ORDER BY id ASC",
            (now,),
        )
        return [
            DBRow(
                shortlink=row["short_url"],
                longlink=row["long_url"],
                hits=row["hits"],
                expiry_time=row["expiry_time"] or 0,
            )
            for row in cursor
        ]

    def add_hit(self, shortlink: str) -> None:
        """Count one visit to a short link."""
        self._conn.execute(
            "UPDATE urls SET hits = hits + 1 WHERE short_url = ?", (shortlink,)
        )

    def add_link(self, shortlink: str, longlink: str, expiry_delay: int) -> int:
        """Store a link and return its expiry time (0 means never).

        Raises DuplicateShortlinkError if the short link is taken.
        """
        expiry_time = 0 if expiry_delay == 0 else _now() + expiry_delay
        try:
            self._conn.execute(
                "INSERT INTO urls (long_url, short_url, hits, expiry_time) "
                "VALUES (?, ?, ?, ?)",
                (longlink, shortlink, 0, expiry_time),
            )
        except sqlite3.IntegrityError as err:
            if "UNIQUE constraint failed" in str(err):
                raise DuplicateShortlinkError(shortlink) from err
            raise
        return expiry_time

    def cleanup(self) -> int:
        """Delete expired links and return how many were removed."""
        now = _now()
        for row in self._conn.execute(
            "SELECT short_url FROM urls WHERE ? > expiry_time AND expiry_time > 0",
            (now,),
        ):
            logger.info("Expired link marked for deletion: %s", row["short_url"])

        deleted = self._conn.execute(
            "DELETE FROM urls WHERE expiry_time < ? AND expiry_time > 0", (now,)
        ).rowcount
        if deleted == 1:
            logger.info("1 link was deleted.")
        elif deleted > 1:
            logger.info("%d links were deleted.", deleted)
        return deleted

    def delete_link(self, shortlink: str) -> bool:
        """Delete a short link; return whether anything was removed."""
        try:
            cursor = self._conn.execute(
                "DELETE FROM urls WHERE short_url = ?", (shortlink,)
            )
        except sqlite3.Error:
            return False
        return cursor.rowcount > 0