"""Run-scoped diagnostic log.

Non-fatal issues (a protocol version missing from the catalog, an
unavailable housekeeping codebook, ...) are collected here so they can be
shown to the user after a run. The log is cleared at the start of every
run and has no influence on the translated output.
"""

from __future__ import annotations

from collections.abc import Iterator

from loguru import logger
from pydantic import BaseModel, Field


class Diagnostic(BaseModel):
    """A single non-fatal issue."""

    source: str = Field(..., description="Component that reported the issue")
    message: str = Field(..., description="What happened")


class RunLog:
    """Collects diagnostics for the current run."""

    def __init__(self) -> None:
        self._entries: list[Diagnostic] = []

    def record(self, source: str, message: str) -> None:
        """Store a diagnostic and log it as a warning."""
        logger.warning("{}: {}", source, message)
        self._entries.append(Diagnostic(source=source, message=message))

    def clear(self) -> None:
        self._entries.clear()

    @property
    def entries(self) -> list[Diagnostic]:
        return list(self._entries)

    @property
    def messages(self) -> list[str]:
        return [e.message for e in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(list(self._entries))
