"""Difficulty-aware ordering of candidate questions."""

from __future__ import annotations

import random
import uuid
from itertools import groupby
from typing import Sequence

from ...schemas import DifficultyLevel, Question

# Sorts questions without a difficulty after every graded question.
_MISSING_DIFFICULTY_DISTANCE = len(DifficultyLevel)


def session_rng(session_id: uuid.UUID | str | None) -> random.Random:
    """Return a generator seeded from a session id.

    The same session always yields the same question order. Without a session
    id the generator is seeded from system entropy.
    """
    if session_id is None:
        return random.Random()
    if not isinstance(session_id, uuid.UUID):
        session_id = uuid.UUID(str(session_id))
    most_significant = session_id.int >> 64
    return random.Random(most_significant)


class DifficultyRanker:
    """Order questions by closeness to a preferred difficulty."""

    def __init__(self, *, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    @property
    def rng(self) -> random.Random:
        return self._rng

    def rank(
        self,
        questions: Sequence[Question],
        preferred: DifficultyLevel | None = None,
    ) -> list[Question]:
        ordered = list(questions)
        if preferred is None:
            self._rng.shuffle(ordered)
            return ordered

        ordered.sort(key=lambda question: self._distance(question, preferred))
        ranked: list[Question] = []
        for _, group in groupby(ordered, key=lambda question: self._distance(question, preferred)):
            tie_group = list(group)
            self._rng.shuffle(tie_group)
            ranked.extend(tie_group)
        return ranked

    @staticmethod
    def _distance(question: Question, preferred: DifficultyLevel) -> int:
        if question.difficulty is None:
            return _MISSING_DIFFICULTY_DISTANCE
        return question.difficulty.distance(preferred)
