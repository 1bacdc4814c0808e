from __future__ import annotations

from .stack import Caller, callers, resolve, resolve_all

__all__ = ["Caller", "callers", "resolve", "resolve_all"]
