"""Selection diagnostics collected alongside question ids."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class WarningCode(str, Enum):
    NO_ACTIVE_QUESTIONS_INDICATOR = "NO_ACTIVE_QUESTIONS_INDICATOR"
    NO_ACTIVE_INDICATORS_COMPETENCY = "NO_ACTIVE_INDICATORS_COMPETENCY"
    NO_ACTIVE_INDICATORS_COMPETENCIES = "NO_ACTIVE_INDICATORS_COMPETENCIES"
    INDICATOR_SHORTFALL = "INDICATOR_SHORTFALL"
    DIFFICULTY_BAND_FALLBACK = "DIFFICULTY_BAND_FALLBACK"


@dataclass(slots=True, frozen=True)
class SelectionWarning:
    code: WarningCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)


class SelectionWarnings:
    """Explicit warning sink passed down through a selection call."""

    def __init__(self) -> None:
        self._items: list[SelectionWarning] = []

    def add(self, code: WarningCode, message: str, **details: Any) -> None:
        self._items.append(SelectionWarning(code=code, message=message, details=details))

    @property
    def items(self) -> list[SelectionWarning]:
        return list(self._items)

    def codes(self) -> list[WarningCode]:
        return [item.code for item in self._items]

    def drain(self) -> list[SelectionWarning]:
        drained, self._items = self._items, []
        return drained

    def __len__(self) -> int:
        return len(self._items)
