"""EntropySource abstractions.

Sources are supplied by the host per invocation; the keychain only consumes them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class EntropyError(RuntimeError):
    """Raised when randomness cannot be sourced for a generation."""


class EntropySource(ABC):
    """Index supplier used once per character position."""

    @abstractmethod
    def next_index(self, upper_bound: int) -> int:
        """Return an integer in [0, upper_bound) or raise EntropyError."""


def require_upper_bound(upper_bound: int) -> int:
    if isinstance(upper_bound, bool) or not isinstance(upper_bound, int):
        raise EntropyError(f"upper_bound must be an int: {upper_bound!r}")
    if upper_bound < 1:
        raise EntropyError(f"upper_bound must be positive: {upper_bound}")
    return upper_bound
