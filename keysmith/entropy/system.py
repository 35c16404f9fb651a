"""OS CSPRNG entropy adapter."""

from __future__ import annotations

import secrets

from keysmith.entropy.base import EntropyError, EntropySource, require_upper_bound


class SystemEntropySource(EntropySource):
    def next_index(self, upper_bound: int) -> int:
        bound = require_upper_bound(upper_bound)
        try:
            return secrets.randbelow(bound)
        except Exception as exc:
            raise EntropyError("failed to read OS randomness") from exc
