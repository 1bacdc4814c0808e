from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Generic, TypeVar

from coded_errors.domain.models import NO_CODE, Frame, NoCode
from coded_errors.domain.protocols import Coded
from coded_errors.infrastructure import stack

C = TypeVar("C")

Data = Mapping[str, Any]


def _merge(fragments: tuple[Data, ...]) -> dict[str, Any]:
    merged: dict[str, Any] = {}
    for fragment in fragments:
        merged.update(fragment)
    return merged


def _safe(render: Any, value: object) -> str:
    try:
        return render(value)
    except Exception as exc:
        return f"<{type(value).__name__} {render.__name__} failed: {type(exc).__name__}>"


def _render_data(data: Mapping[str, Any]) -> str:
    items = ", ".join(
        f"{_safe(repr, key)}: {_safe(repr, data[key])}" for key in sorted(data, key=str)
    )
    return f"{{{items}}}"


class CodedError(Exception, Generic[C]):
    """Error with a classification code, diagnostic data and a cause.

    Build instances with :func:`new` or :func:`wrap`; they record where the
    error chain started. Calling the class directly records nothing unless
    *callers* is passed, so such an error has no frames and is never an
    :func:`origin`. All attributes are read-only.

    :func:`copy.copy` keeps everything. Pickling and :func:`copy.deepcopy`
    keep code, data and cause but drop the captured stack, since code
    objects can't be pickled.

    Attributes:
        code: Opaque classification token, ``NO_CODE`` when none was given.
        data: Read-only view of the merged diagnostic data.
        cause: Error this one wraps, ``None`` for root errors.
        callers: Raw stack handles, empty unless this error is a chain origin.
    """

    __slots__ = ("_code", "_data", "_cause", "_callers")

    def __init__(
        self,
        code: C | None = None,
        data: Data | None = None,
        *,
        cause: BaseException | None = None,
        callers: tuple[stack.Caller, ...] = (),
    ) -> None:
        resolved: C | NoCode = NO_CODE if code is None else code
        Exception.__init__(self, resolved)
        self._code = resolved
        self._data: Mapping[str, Any] = MappingProxyType(dict(data or {}))
        self._cause = cause
        self._callers = tuple(callers)
        if cause is not None:
            self.__cause__ = cause

    @property
    def code(self) -> C | NoCode:
        return self._code

    @property
    def data(self) -> Mapping[str, Any]:
        return self._data

    @property
    def cause(self) -> BaseException | None:
        return self._cause

    @property
    def callers(self) -> tuple[stack.Caller, ...]:
        return self._callers

    def frames(self) -> list[Frame]:
        """Resolve the captured stack, nearest frame to the call site first."""
        return stack.resolve_all(self._callers)

    def __copy__(self) -> CodedError[C]:
        return type(self)(
            self._code, self._data, cause=self._cause, callers=self._callers
        )

    def __reduce__(self) -> tuple[Any, ...]:
        return (_restore, (type(self), self._code, dict(self._data), self._cause))

    def __str__(self) -> str:
        msg = _safe(str, self._code)
        if self._data:
            msg = f"{msg}, data: {_render_data(self._data)}"
        return msg

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={_safe(repr, self._code)}, "
            f"data={_render_data(self._data)})"
        )


def _restore(
    cls: type[CodedError[Any]],
    code: Any,
    data: dict[str, Any],
    cause: BaseException | None,
) -> CodedError[Any]:
    return cls(code, data, cause=cause)


def new(code: C | None = None, *data: Data, stacklevel: int = 1) -> CodedError[C]:
    """Return a root error carrying *code* and the merged *data* fragments.

    The stack is captured starting at the caller, or further out when a
    helper passes a larger *stacklevel*.
    """
    return CodedError(code, _merge(data), callers=stack.callers(stacklevel))


def wrap(
    cause: BaseException | None,
    code: C | None = None,
    *data: Data,
    stacklevel: int = 1,
) -> CodedError[C]:
    """Return an error wrapping *cause*.

    The stack is only captured when *cause* is not a :class:`CodedError`,
    since the origin of a coded chain already holds it. A ``None`` cause
    gives a root error, same as :func:`new`.
    """
    handles: tuple[stack.Caller, ...] = ()
    if not isinstance(cause, CodedError):
        handles = stack.callers(stacklevel)
    return CodedError(code, _merge(data), cause=cause, callers=handles)


def code_of(err: object) -> Any:
    """Return the code of *err*.

    ``None`` for ``None``, ``NO_CODE`` when *err* does not expose a code or
    its code is ``None``. Any object with a ``code`` attribute counts as
    classified, including stdlib exceptions: ``SystemExit(2)`` gives ``2``
    and ``urllib.error.HTTPError`` gives its HTTP status.
    """
    if err is None:
        return None
    if isinstance(err, Coded) and err.code is not None:
        return err.code
    return NO_CODE
