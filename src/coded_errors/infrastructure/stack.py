"""Call stack capture and frame resolution.

Capturing only records raw handles: the code object, the offset of the
last executed instruction and the module name of each frame. Line numbers
are looked up in the code object's line table when a handle is resolved.
"""

from __future__ import annotations

import sys
from types import CodeType, FrameType
from typing import NamedTuple

from loguru import logger
from pydantic import ValidationError

from coded_errors.config import DEFAULT_STACK_DEPTH, get_settings
from coded_errors.domain.models import UNKNOWN, Frame


class Caller(NamedTuple):
    """Unresolved location of one stack frame."""

    code: CodeType
    lasti: int
    module: str | None


def _configured_depth() -> int:
    try:
        return get_settings().stack_depth
    except ValidationError as exc:
        logger.warning(
            "Invalid settings, capturing {} frames instead: {}", DEFAULT_STACK_DEPTH, exc
        )
        return DEFAULT_STACK_DEPTH


def callers(stacklevel: int = 1, depth: int | None = None) -> tuple[Caller, ...]:
    """Return raw handles for at most *depth* frames of the calling thread.

    ``stacklevel=1`` makes the caller of the function that invoked
    :func:`callers` the first handle, so neither this helper nor the error
    constructor using it are recorded. Frames nearest to that call site are
    kept when the stack is deeper than *depth*.
    """
    if depth is None:
        depth = _configured_depth()
    try:
        frame: FrameType | None = sys._getframe(stacklevel + 1)
    except ValueError:
        return ()

    handles: list[Caller] = []
    try:
        while frame is not None and len(handles) < depth:
            handles.append(
                Caller(frame.f_code, frame.f_lasti, frame.f_globals.get("__name__"))
            )
            frame = frame.f_back
    finally:
        # frame objects reference their locals
        del frame
    return tuple(handles)


def _line_for(code: CodeType, lasti: int) -> int | None:
    if lasti < 0:
        return None
    for start, end, line in code.co_lines():
        if start <= lasti < end:
            return line
    return None


def resolve(caller: Caller) -> Frame:
    """Resolve *caller* to a :class:`Frame`, substituting sentinels for gaps."""
    code, lasti, module = caller
    line = _line_for(code, lasti)
    if line is None:
        logger.trace("Can't resolve line of {} at offset {}", code.co_qualname, lasti)
        line = 0

    qualname = code.co_qualname or UNKNOWN
    return Frame(
        path=code.co_filename or UNKNOWN,
        line=line,
        function=f"{module}.{qualname}" if module else qualname,
    )


def resolve_all(handles: tuple[Caller, ...]) -> list[Frame]:
    return [resolve(handle) for handle in handles]
