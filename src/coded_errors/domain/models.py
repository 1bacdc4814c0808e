from __future__ import annotations

from typing import Final

from pydantic import BaseModel, ConfigDict

UNKNOWN: Final = "UNKNOWN"


class ConfiguredBaseModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class Frame(ConfiguredBaseModel):
    """A resolved stack location."""

    path: str = UNKNOWN
    line: int = 0
    function: str = UNKNOWN


class NoCode:
    """Code carried by errors that were built without one."""

    __slots__ = ()
    _instance: NoCode | None = None

    def __new__(cls) -> NoCode:
        if cls._instance is None:
            cls._instance = object.__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return ""

    def __repr__(self) -> str:
        return "NO_CODE"

    def __reduce__(self) -> str:
        return "NO_CODE"


NO_CODE: Final = NoCode()
