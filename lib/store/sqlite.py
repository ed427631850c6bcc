"""SQLite backed store using :mod:`aiosqlite`.

A single connection is shared by all tasks.  Its transaction is shared too,
so every operation holds a lock from its first statement through its commit;
no task can commit or roll back another task's half-finished write.
Participant names carry a ``PRIMARY KEY`` constraint, which is what actually
guarantees uniqueness when two registrations race.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, List, Optional

import aiosqlite

from lib.contracts.errors import ConflictError, StoreError
from lib.contracts.message import BROADCAST, Message
from lib.contracts.participant import Participant
from lib.telemetry.logger import get_logger

from . import ChatStore

log = get_logger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS participants (
    name TEXT PRIMARY KEY,
    last_status INTEGER NOT NULL
);
CREATE TABLE IF NOT EXISTS messages (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    sender TEXT NOT NULL,
    recipient TEXT NOT NULL,
    text TEXT NOT NULL,
    type TEXT NOT NULL,
    time TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_participants_last_status ON participants(last_status);
"""


def _row_to_message(row: aiosqlite.Row) -> Message:
    return Message(
        sender=row["sender"],
        to=row["recipient"],
        text=row["text"],
        type=row["type"],
        time=row["time"],
    )


class SqliteStore(ChatStore):
    def __init__(self, path: str):
        self.path = path
        self.url = f"sqlite:///{path}"
        self._db: Optional[aiosqlite.Connection] = None
        self._lock: Optional[asyncio.Lock] = None

    @property
    def connected(self) -> bool:
        return self._db is not None

    async def connect(self) -> None:
        if self._db is not None:
            return
        try:
            db = await aiosqlite.connect(self.path)
            db.row_factory = aiosqlite.Row
            await db.executescript(_SCHEMA)
            await db.commit()
        except aiosqlite.Error as exc:
            raise StoreError(f"cannot open sqlite database {self.path!r}: {exc}") from exc
        self._db = db
        self._lock = asyncio.Lock()
        log.info("Connected to sqlite store at %s", self.path)

    async def close(self) -> None:
        if self._db is None:
            return
        async with self._lock:
            db, self._db = self._db, None
            await db.close()

    @asynccontextmanager
    async def _session(self, op: str) -> AsyncIterator[aiosqlite.Connection]:
        if self._lock is None:
            raise StoreError("store is not connected")
        async with self._lock:
            if self._db is None:
                raise StoreError("store is not connected")
            try:
                yield self._db
            except aiosqlite.Error as exc:
                raise StoreError(f"{op} failed: {exc}") from exc

    async def find_participant(self, name: str) -> Optional[Participant]:
        async with self._session("find_participant") as db:
            async with db.execute(
                "SELECT name, last_status FROM participants WHERE name = ?", (name,)
            ) as cur:
                row = await cur.fetchone()
        if row is None:
            return None
        return Participant(name=row["name"], last_status=row["last_status"])

    async def insert_participant(self, participant: Participant) -> None:
        async with self._session("insert_participant") as db:
            try:
                await db.execute(
                    "INSERT INTO participants(name, last_status) VALUES (?, ?)",
                    (participant.name, participant.last_status),
                )
                await db.commit()
            except aiosqlite.IntegrityError:
                # sqlite has already undone the failed statement
                raise ConflictError(participant.name) from None

    async def list_participants(self) -> List[Participant]:
        async with self._session("list_participants") as db:
            async with db.execute("SELECT name, last_status FROM participants ORDER BY rowid") as cur:
                rows = await cur.fetchall()
        return [Participant(name=r["name"], last_status=r["last_status"]) for r in rows]

    async def touch_participant(self, name: str, last_status: int) -> bool:
        async with self._session("touch_participant") as db:
            cur = await db.execute(
                "UPDATE participants SET last_status = ? WHERE name = ?", (last_status, name)
            )
            await db.commit()
            return cur.rowcount > 0

    async def find_inactive(self, threshold: int) -> List[Participant]:
        async with self._session("find_inactive") as db:
            async with db.execute(
                "SELECT name, last_status FROM participants WHERE last_status <= ?", (threshold,)
            ) as cur:
                rows = await cur.fetchall()
        return [Participant(name=r["name"], last_status=r["last_status"]) for r in rows]

    async def delete_participants(self, names: Iterable[str]) -> int:
        names = list(dict.fromkeys(names))
        if not names:
            return 0
        marks = ", ".join("?" for _ in names)
        async with self._session("delete_participants") as db:
            cur = await db.execute(f"DELETE FROM participants WHERE name IN ({marks})", names)
            await db.commit()
            return cur.rowcount

    async def insert_messages(self, messages: Iterable[Message]) -> None:
        rows = [(m.sender, m.to, m.text, m.type, m.time) for m in messages]
        if not rows:
            return
        async with self._session("insert_messages") as db:
            await db.executemany(
                "INSERT INTO messages(sender, recipient, text, type, time) VALUES (?, ?, ?, ?, ?)",
                rows,
            )
            await db.commit()

    async def list_messages(self, reader: Optional[str]) -> List[Message]:
        async with self._session("list_messages") as db:
            async with db.execute(
                "SELECT sender, recipient, text, type, time FROM messages"
                " WHERE recipient = ? OR recipient = ? OR sender = ? ORDER BY id",
                (BROADCAST, reader, reader),
            ) as cur:
                rows = await cur.fetchall()
        return [_row_to_message(r) for r in rows]


__all__ = ["SqliteStore"]
