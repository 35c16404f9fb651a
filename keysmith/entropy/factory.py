"""Entropy source factory based on configured mode."""

from __future__ import annotations

import secrets
from typing import Optional

from keysmith.entropy.base import EntropyError, EntropySource
from keysmith.entropy.seeded import SEED_LENGTH, SeededEntropySource
from keysmith.entropy.system import SystemEntropySource

ENTROPY_MODES = {"seed", "system"}


def create_entropy_source(mode: str = "seed", seed: Optional[bytes] = None) -> EntropySource:
    if mode == "seed":
        if seed is None:
            try:
                seed = secrets.token_bytes(SEED_LENGTH)
            except Exception as exc:
                raise EntropyError("failed to draw generation seed") from exc
        return SeededEntropySource(seed)
    if mode == "system":
        return SystemEntropySource()
    raise EntropyError(
        f"unsupported entropy mode: {mode} "
        "(supported: seed, system)"
    )
