"""Domain-level protocols for error classification."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Coded(Protocol):
    """An error that exposes a classification code."""

    @property
    def code(self) -> Any:  # pragma: no cover - protocol definition
        """Return the classification code."""
