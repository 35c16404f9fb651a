"""Keychain generate/retrieve contract.

generate(context, resource, identifier)
    -> get(account, resource) as idempotence check
    -> draw `length` indices from the context's entropy source
    -> store Credential(identifier, secret) for (account, resource)

The secret is fully built before the store is touched, so an entropy fault
never leaves a partial credential behind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from keysmith.audit.sinks import DiagnosticSink, LoggingSink
from keysmith.core.charset import CHARACTER_UNIVERSE
from keysmith.core.keystore import ACCOUNT_MAP_MODES, KeyStore
from keysmith.entropy.base import EntropyError, EntropySource
from keysmith.models.credential import Credential

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD_LENGTH = 12


@dataclass(frozen=True)
class InvocationContext:
    signer_account_id: str
    entropy: EntropySource


def _redact(value: str) -> str:
    return "*" * len(value)


def generate_secret(
    entropy: EntropySource,
    length: int = DEFAULT_PASSWORD_LENGTH,
    universe: str = CHARACTER_UNIVERSE,
) -> str:
    if length < 1:
        raise ValueError("password length must be >= 1")
    size = len(universe)
    chars: list[str] = []
    for _ in range(length):
        index = entropy.next_index(size)
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < size:
            raise EntropyError(f"entropy source returned out-of-range index: {index!r}")
        chars.append(universe[index])
    return "".join(chars)


class Keychain:
    def __init__(
        self,
        store: KeyStore,
        sink: Optional[DiagnosticSink] = None,
        password_length: int = DEFAULT_PASSWORD_LENGTH,
        account_map_mode: str = "replace",
    ) -> None:
        if password_length < 1:
            raise ValueError("password length must be >= 1")
        if account_map_mode not in ACCOUNT_MAP_MODES:
            raise ValueError(f"invalid account map mode: {account_map_mode}")
        self._store = store
        self._sink = sink or LoggingSink()
        self._password_length = password_length
        self._account_map_mode = account_map_mode

    @property
    def store(self) -> KeyStore:
        return self._store

    def generate(self, context: InvocationContext, resource: str, identifier: str) -> None:
        account_id = context.signer_account_id
        self._sink.emit("started executing")

        if not self.get(account_id, resource):
            password = generate_secret(context.entropy, self._password_length)
            self._store.put(
                account_id,
                resource,
                Credential(owner_identifier=identifier, secret_value=password),
                mode=self._account_map_mode,
            )
            logger.debug("stored new credential account=%s resource=%s", account_id, resource)

        self._sink.emit("finished executing")

    def get(self, account_id: str, resource: str) -> str:
        credential = self._store.lookup(account_id, resource)
        result = credential.secret_value if credential is not None else ""
        self._sink.emit(f"Lookup result '{_redact(result)}' for account '{account_id}'")
        return result
