"""SQLite persistence helpers."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from pydantic import ValidationError

from keysmith.core.keystore import KeyStore
from keysmith.models.credential import Credential, KeyStoreSnapshot


class KeyStoreLoadError(RuntimeError):
    """Raised when persisted credentials cannot be rebuilt into a KeyStore."""


class KeyStoreRepository:
    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def _conn(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def apply_schema(self, schema_sql: str) -> None:
        with self._conn() as conn:
            conn.executescript(schema_sql)

    def save(self, store: KeyStore) -> None:
        rows = [
            (account, resource, credential.owner_identifier, credential.secret_value)
            for account, resource, credential in store.items()
        ]
        with self._conn() as conn:
            conn.execute("DELETE FROM credentials")
            conn.executemany(
                """
                INSERT INTO credentials (account, resource, owner_identifier, secret_value)
                VALUES (?, ?, ?, ?)
                """,
                rows,
            )

    def load(self) -> KeyStore:
        with self._conn() as conn:
            rows = conn.execute(
                """
                SELECT account, resource, owner_identifier, secret_value
                FROM credentials ORDER BY account, resource
                """
            ).fetchall()

        keys: dict[str, dict[str, Credential]] = {}
        for row in rows:
            try:
                credential = Credential(
                    owner_identifier=row["owner_identifier"],
                    secret_value=row["secret_value"],
                )
            except ValidationError as exc:
                raise KeyStoreLoadError(
                    f"invalid credential row account={row['account']!r} resource={row['resource']!r}"
                ) from exc
            keys.setdefault(row["account"], {})[row["resource"]] = credential
        return KeyStore.from_snapshot(KeyStoreSnapshot(keys=keys))

    def count(self) -> int:
        with self._conn() as conn:
            row = conn.execute("SELECT COUNT(*) AS n FROM credentials").fetchone()
        return int(row["n"])
