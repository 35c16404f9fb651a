"""Application runtime wiring."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Optional

from keysmith.audit.event_log import EventLog
from keysmith.audit.sinks import CompositeSink, DiagnosticSink, LoggingSink
from keysmith.config.settings import KeysmithSettings, ensure_storage_dirs, load_settings
from keysmith.core.db import KeyStoreRepository
from keysmith.core.keychain import InvocationContext, Keychain
from keysmith.core.keystore import KeyStore
from keysmith.entropy.base import EntropySource
from keysmith.entropy.factory import create_entropy_source

logger = logging.getLogger(__name__)

EntropyFactory = Callable[[str], EntropySource]


class KeychainRuntime:
    """Host for the keychain: config, persistence, diagnostics and serialised invocations.

    Every invocation runs under one lock. A generation works on a copy of the
    store, which is persisted before it replaces the live store, so a failure in
    entropy or in the save leaves both memory and disk as they were.
    """

    def __init__(
        self,
        workspace_root: Path,
        settings_path: Path,
        entropy_factory: Optional[EntropyFactory] = None,
        sink: Optional[DiagnosticSink] = None,
    ) -> None:
        self.workspace_root = workspace_root.resolve()
        self.settings: KeysmithSettings = load_settings(settings_path)
        ensure_storage_dirs(self.workspace_root, self.settings.storage)

        self.repository = KeyStoreRepository(self.workspace_root / self.settings.storage.sqlite)
        schema_sql = (self.workspace_root / "db/schema.sql").read_text(encoding="utf-8")
        self.repository.apply_schema(schema_sql)

        self.events = EventLog(self.workspace_root / self.settings.storage.events_dir)
        self.sink = sink or CompositeSink([LoggingSink(), self.events])
        self._entropy_factory = entropy_factory or create_entropy_source
        self._lock = threading.Lock()
        self._store: KeyStore = self.repository.load()
        logger.info(
            "keystore loaded path=%s credentials=%d",
            self.settings.storage.sqlite,
            len(self._store),
        )

    def _keychain(self, store: KeyStore) -> Keychain:
        return Keychain(
            store=store,
            sink=self.sink,
            password_length=self.settings.generator.password_length,
            account_map_mode=self.settings.generator.account_map_mode,
        )

    def generate(self, account_id: str, resource: str, identifier: str) -> None:
        with self._lock:
            working = self._store.copy()
            context = InvocationContext(
                signer_account_id=account_id,
                entropy=self._entropy_factory(self.settings.entropy.mode),
            )
            existing = self._store.lookup(account_id, resource)
            self._keychain(working).generate(context, resource, identifier)
            if working.lookup(account_id, resource) is existing:
                return
            self.repository.save(working)
            self._store = working

    def get(self, account_id: str, resource: str) -> str:
        with self._lock:
            return self._keychain(self._store).get(account_id, resource)

    def snapshot_json(self) -> str:
        with self._lock:
            return self._store.snapshot().model_dump_json(indent=2)
