"""Diagnostic event sinks.

Sinks accept free-text lines; nothing downstream parses them.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Iterable, Optional


class DiagnosticSink(ABC):
    @abstractmethod
    def emit(self, message: str) -> None:
        """Record one diagnostic line."""


class LoggingSink(DiagnosticSink):
    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger("keysmith.diagnostics")

    def emit(self, message: str) -> None:
        self._logger.info("%s", message)


class CompositeSink(DiagnosticSink):
    def __init__(self, sinks: Iterable[DiagnosticSink]) -> None:
        self._sinks = list(sinks)

    def emit(self, message: str) -> None:
        for sink in self._sinks:
            sink.emit(message)
