"""Raw answer normalization to the [0, 1] scale."""

from __future__ import annotations

import math

from ...schemas import Answer, AnswerKind

LIKERT_MIN = 1
LIKERT_MAX = 5


class ScoreNormalizer:
    """Map Likert, binary and continuous answers onto [0, 1].

    Malformed input never raises: skipped answers, answers without a question
    reference and answers without any value all normalize to 0.
    """

    def normalize(self, answer: Answer | None) -> float:
        if answer is None or answer.skipped or not answer.question_id:
            return 0.0

        kind = answer.kind
        if kind is AnswerKind.LIKERT:
            if answer.likert_value is not None:
                return self._likert(answer.likert_value)
            return self._continuous(answer.score)
        if kind is AnswerKind.BINARY:
            if answer.score is not None:
                return self._binary(answer.score)
            return self._likert(answer.likert_value)
        if kind is AnswerKind.CONTINUOUS:
            if answer.score is not None:
                return self._continuous(answer.score)
            return self._likert(answer.likert_value)

        if answer.likert_value is not None:
            return self._likert(answer.likert_value)
        return self._continuous(answer.score)

    @staticmethod
    def _likert(value: int | None) -> float:
        if value is None:
            return 0.0
        clamped = max(LIKERT_MIN, min(LIKERT_MAX, int(value)))
        return (clamped - LIKERT_MIN) / (LIKERT_MAX - LIKERT_MIN)

    @staticmethod
    def _binary(value: float) -> float:
        # 0/1 pass through unchanged
        if math.isnan(value):
            return 0.0
        return max(0.0, min(1.0, float(value)))

    @staticmethod
    def _continuous(value: float | None) -> float:
        if value is None or math.isnan(value):
            return 0.0
        return max(0.0, min(1.0, float(value)))
