"""Question eligibility and context-neutrality checks."""

from __future__ import annotations

from ...schemas import Question
from ..interfaces import EligibilityOracle

NEUTRAL_TAG = "GENERAL"


class EligibilityFilter:
    """Delegate validity checks to the psychometric oracle.

    Missing question data is never eligible.
    """

    def __init__(self, oracle: EligibilityOracle) -> None:
        self._oracle = oracle

    def is_eligible(self, question: Question | None) -> bool:
        if question is None or not question.question_id:
            return False
        if not question.active:
            return False
        return bool(self._oracle.is_eligible(question.question_id))


class ContextNeutralityFilter:
    """Accept questions usable in a universal baseline assessment.

    A question is neutral when it has no tags or carries the GENERAL tag.
    Missing question data counts as neutral.
    """

    def __init__(self, neutral_tag: str = NEUTRAL_TAG) -> None:
        self._neutral_tag = neutral_tag.upper()

    def is_context_neutral(self, question: Question | None) -> bool:
        if question is None or not question.tags:
            return True
        return self._neutral_tag in question.tags

    __call__ = is_context_neutral
