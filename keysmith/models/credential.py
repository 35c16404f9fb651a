"""Credential contract for keysmith.

Account and resource keys are opaque strings and are never validated.
The secret is stored in cleartext; no field here implies encryption.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Credential(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    owner_identifier: str
    secret_value: str


class KeyStoreSnapshot(BaseModel):
    """Serialisable shape of a KeyStore: account -> resource -> Credential."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    keys: dict[str, dict[str, Credential]] = Field(default_factory=dict)


def keystore_json_schema() -> dict[str, Any]:
    return KeyStoreSnapshot.model_json_schema()
