from __future__ import annotations

import asyncio
import functools
import inspect
import traceback
from collections.abc import Callable, Iterator
from typing import Any, ParamSpec, TypeVar

from loguru import logger

from coded_errors.errors import CodedError, Data, wrap

P = ParamSpec("P")
R = TypeVar("R")


def _format_tail(exc: BaseException, *, limit: int = 6) -> str:
    tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return "".join(tb[-limit:])


def _wrap_and_log(exc: Exception, code: Any, data: tuple[Data, ...]) -> CodedError[Any]:
    # skip this helper and the decorator's wrapper
    wrapped = wrap(exc, code, *data, stacklevel=3)
    logger.opt(lazy=True, exception=exc).debug(
        "Wrapped {} into {}\n{}",
        lambda: type(exc).__name__,
        lambda: str(wrapped),
        lambda: _format_tail(exc),
    )
    return wrapped


def wrap_exceptions(
    code: Any, *data: Data
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Decorator re-raising errors escaping the function as coded errors.

    The escaping exception becomes the cause of a :class:`CodedError` with
    *code* and *data*. Cancellation is never wrapped.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs):  # type: ignore[override]
                try:
                    return await func(*args, **kwargs)
                except asyncio.CancelledError:
                    raise
                except Exception as exc:
                    raise _wrap_and_log(exc, code, data) from exc

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs):  # type: ignore[override]
            try:
                return func(*args, **kwargs)
            except Exception as exc:
                raise _wrap_and_log(exc, code, data) from exc

        return sync_wrapper  # type: ignore[return-value]

    return decorator


def iter_causes(err: BaseException) -> Iterator[BaseException]:
    """Yield the causes of *err*, nearest first.

    Walking stops after the first cause that is not a :class:`CodedError`.
    """
    current: BaseException | None = err
    while isinstance(current, CodedError):
        current = current.cause
        if current is None:
            return
        yield current


def origin(err: BaseException) -> CodedError[Any] | None:
    """Return the error in *err*'s chain that holds the captured stack."""
    for candidate in (err, *iter_causes(err)):
        if isinstance(candidate, CodedError) and candidate.callers:
            return candidate
    return None
