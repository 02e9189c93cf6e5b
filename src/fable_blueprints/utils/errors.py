from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class Err(Enum):
    INVALID_CATALOG = auto()
    INVALID_CONFIG = auto()
    UNKNOWN_STORY = auto()
    IO_ERROR = auto()


@dataclass(eq=False)
class BPError(Exception):
    """Structured error raised by the catalog loader and the CLI surface.

    The analysis pipeline itself never raises once a blueprint is being
    assembled; degenerate results travel as warnings on the blueprint.
    """

    code: Err
    ctx: dict[str, Any] | None = None
    cause: Exception | None = None

    def __post_init__(self) -> None:
        if self.ctx is None:
            self.ctx = {}
        if self.cause is not None:
            self.__cause__ = self.cause
        super().__init__(self.code.name)

    def __str__(self) -> str:
        if not self.ctx:
            return self.code.name
        parts = ", ".join(f"{k}={v!r}" for k, v in self.ctx.items())
        return f"{self.code.name}: {parts}"
