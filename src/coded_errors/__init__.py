"""Errors carrying a classification code, diagnostic data and a cause.

Root errors record the call stack where they were created; errors wrapping
another coded error do not, since the origin of the chain already has it::

    err = new("db/not-found", {"table": "users"})
    raise wrap(err, "api/lookup-failed", {"user_id": 42})
"""

from __future__ import annotations

from loguru import logger

from coded_errors.domain.models import NO_CODE, Frame, NoCode
from coded_errors.domain.protocols import Coded
from coded_errors.errors import CodedError, Data, code_of, new, wrap
from coded_errors.infrastructure.error_utils import iter_causes, origin, wrap_exceptions

logger.disable("coded_errors")

__all__ = [
    "NO_CODE",
    "Coded",
    "CodedError",
    "Data",
    "Frame",
    "NoCode",
    "code_of",
    "iter_causes",
    "new",
    "origin",
    "wrap",
    "wrap_exceptions",
]
