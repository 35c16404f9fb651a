"""Seed-derived entropy session.

One fixed-length seed is consumed per generation. Indices are derived from
HMAC-SHA256(seed, counter) blocks, and rejection sampling keeps every index
uniform over [0, upper_bound).
"""

from __future__ import annotations

import hashlib
import hmac

from keysmith.entropy.base import EntropyError, EntropySource, require_upper_bound

SEED_LENGTH = 32
_BLOCK_BITS = 64
_BLOCK_SPACE = 1 << _BLOCK_BITS
_MAX_REJECTIONS = 1024


class SeededEntropySource(EntropySource):
    def __init__(self, seed: bytes) -> None:
        if not isinstance(seed, (bytes, bytearray)):
            raise EntropyError("seed must be bytes")
        if len(seed) != SEED_LENGTH:
            raise EntropyError(f"seed must be {SEED_LENGTH} bytes, got {len(seed)}")
        self._seed = bytes(seed)
        self._counter = 0

    def _next_block(self) -> int:
        digest = hmac.new(self._seed, self._counter.to_bytes(8, "big"), hashlib.sha256).digest()
        self._counter += 1
        return int.from_bytes(digest[: _BLOCK_BITS // 8], "big")

    def next_index(self, upper_bound: int) -> int:
        bound = require_upper_bound(upper_bound)
        # Largest multiple of bound within the block space.
        limit = _BLOCK_SPACE - (_BLOCK_SPACE % bound)
        for _ in range(_MAX_REJECTIONS):
            value = self._next_block()
            if value < limit:
                return value % bound
        raise EntropyError("seeded entropy exhausted rejection budget")
