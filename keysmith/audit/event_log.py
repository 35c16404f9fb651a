"""JSONL diagnostic event log with hash-chain.

The chain head is held in memory and seeded once from the last complete line
on disk. Appends never re-read the file, so a torn or corrupt line only
affects `events()` and `verify()`, never the callers emitting events.
"""

from __future__ import annotations

import hashlib
import json
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator

from keysmith.audit.sinks import DiagnosticSink

logger = logging.getLogger(__name__)

GENESIS_HASH = "GENESIS"
_TAIL_CHUNK = 4096


class EventLogError(RuntimeError):
    """Raised when a stored event line cannot be decoded."""


@dataclass(frozen=True)
class DiagnosticEvent:
    ts: str
    event_id: str
    message: str
    prev_hash: str
    event_hash: str


def _hash_event(canonical: dict[str, Any]) -> str:
    return hashlib.sha256(
        json.dumps(canonical, sort_keys=True, ensure_ascii=True).encode("utf-8")
    ).hexdigest()


def _decode(line: str) -> DiagnosticEvent:
    try:
        row = json.loads(line)
        return DiagnosticEvent(
            ts=row["ts"],
            event_id=row["event_id"],
            message=row["message"],
            prev_hash=row["prev_hash"],
            event_hash=row["event_hash"],
        )
    except (ValueError, KeyError, TypeError) as exc:
        raise EventLogError(f"undecodable event line: {line[:80]!r}") from exc


class EventLog(DiagnosticSink):
    def __init__(self, out_dir: Path, name: str = "events") -> None:
        self._out_dir = out_dir
        self._out_dir.mkdir(parents=True, exist_ok=True)
        self._path = self._out_dir / f"{name}.jsonl"
        self._head = self._read_tail_hash()

    @property
    def path(self) -> Path:
        return self._path

    def emit(self, message: str) -> None:
        self.append(message)

    def append(self, message: str) -> DiagnosticEvent:
        prev_hash = self._head
        ts = datetime.now(timezone.utc).isoformat()
        event_id = f"evt_{uuid.uuid4().hex}"

        canonical = {
            "ts": ts,
            "event_id": event_id,
            "message": message,
            "prev_hash": prev_hash,
        }
        event = DiagnosticEvent(
            ts=ts,
            event_id=event_id,
            message=message,
            prev_hash=prev_hash,
            event_hash=_hash_event(canonical),
        )

        line = {
            "ts": event.ts,
            "event_id": event.event_id,
            "message": event.message,
            "prev_hash": event.prev_hash,
            "event_hash": event.event_hash,
        }
        prefix = "" if self._ends_with_newline() else "\n"
        with self._path.open("a", encoding="utf-8") as fp:
            fp.write(prefix + json.dumps(line, ensure_ascii=True) + "\n")
        self._head = event.event_hash
        return event

    def events(self) -> Iterator[DiagnosticEvent]:
        """Yield stored events in order; EventLogError on the first bad line."""
        if not self._path.exists():
            return
        with self._path.open("r", encoding="utf-8") as fp:
            for line in fp:
                if not line.strip():
                    continue
                yield _decode(line)

    def last_hash(self) -> str:
        return self._head

    def verify(self) -> bool:
        expected_prev = GENESIS_HASH
        try:
            for event in self.events():
                if event.prev_hash != expected_prev:
                    return False
                canonical = {
                    "ts": event.ts,
                    "event_id": event.event_id,
                    "message": event.message,
                    "prev_hash": event.prev_hash,
                }
                if _hash_event(canonical) != event.event_hash:
                    return False
                expected_prev = event.event_hash
        except EventLogError:
            return False
        return True

    def _ends_with_newline(self) -> bool:
        if not self._path.exists():
            return True
        with self._path.open("rb") as fp:
            fp.seek(0, 2)
            if fp.tell() == 0:
                return True
            fp.seek(-1, 2)
            return fp.read(1) == b"\n"

    def _read_tail_hash(self) -> str:
        if not self._path.exists():
            return GENESIS_HASH
        with self._path.open("rb") as fp:
            fp.seek(0, 2)
            end = fp.tell()
            start = max(0, end - _TAIL_CHUNK)
            skipped = False
            while True:
                fp.seek(start)
                lines = fp.read(end - start).splitlines()
                # The first line may be cut by the chunk boundary unless we read from 0.
                candidates = lines if start == 0 else lines[1:]
                for raw in reversed(candidates):
                    try:
                        return _decode(raw.decode("utf-8")).event_hash
                    except (EventLogError, UnicodeDecodeError):
                        if not skipped:
                            logger.warning("skipping undecodable event line in %s", self._path)
                            skipped = True
                if start == 0:
                    return GENESIS_HASH
                start = max(0, start - _TAIL_CHUNK)
