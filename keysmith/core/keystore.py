"""In-memory credential store.

Shape: account -> (resource -> Credential). The store is the sole owner of
every Credential; readers only ever receive frozen models, strings or fresh
dict copies.
"""

from __future__ import annotations

from typing import Iterator, Optional

from keysmith.models.credential import Credential, KeyStoreSnapshot

ACCOUNT_MAP_MODES = {"replace", "merge"}


class KeyStore:
    def __init__(self) -> None:
        self._keys: dict[str, dict[str, Credential]] = {}

    def __len__(self) -> int:
        return sum(len(record) for record in self._keys.values())

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        account, resource = item
        return self.lookup(account, resource) is not None

    def lookup(self, account: str, resource: str) -> Optional[Credential]:
        record = self._keys.get(account)
        if record is None:
            return None
        return record.get(resource)

    def put(self, account: str, resource: str, credential: Credential, mode: str = "replace") -> None:
        """Store a credential for (account, resource).

        ``replace`` swaps the account's whole resource map for one holding only
        this resource, so earlier resources for the account are dropped.
        ``merge`` inserts into the existing map.
        """
        if mode == "replace":
            self._keys[account] = {resource: credential}
        elif mode == "merge":
            self._keys.setdefault(account, {})[resource] = credential
        else:
            raise ValueError(f"invalid account map mode: {mode}")

    def accounts(self) -> list[str]:
        return list(self._keys)

    def resources(self, account: str) -> dict[str, Credential]:
        return dict(self._keys.get(account, {}))

    def items(self) -> Iterator[tuple[str, str, Credential]]:
        for account, record in list(self._keys.items()):
            for resource, credential in list(record.items()):
                yield account, resource, credential

    def copy(self) -> "KeyStore":
        clone = KeyStore()
        clone._keys = {account: dict(record) for account, record in self._keys.items()}
        return clone

    def snapshot(self) -> KeyStoreSnapshot:
        return KeyStoreSnapshot(keys={account: dict(record) for account, record in self._keys.items()})

    @classmethod
    def from_snapshot(cls, snapshot: KeyStoreSnapshot) -> "KeyStore":
        store = cls()
        store._keys = {account: dict(record) for account, record in snapshot.keys.items()}
        return store
