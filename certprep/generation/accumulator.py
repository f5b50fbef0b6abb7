"""Per-run deduplicated question pool."""

from typing import Iterable, List, Set

from ..models import Question


class QuestionPool:
    """Monotonically growing, deduplicated collection of questions.

    Two questions are duplicates iff their ``question_text`` is identical.
    The pool only grows; :meth:`take` returns a truncated copy without
    modifying it.
    """

    def __init__(self) -> None:
        self._questions: List[Question] = []
        self._seen: Set[str] = set()

    def __len__(self) -> int:
        return len(self._questions)

    def add_all(self, questions: Iterable[Question]) -> int:
        """Append questions not already present, preserving order.

        Returns:
            Number of questions actually added
        """
        added = 0
        for question in questions:
            if question.question_text in self._seen:
                continue
            self._seen.add(question.question_text)
            self._questions.append(question)
            added += 1
        return added

    def shortfall(self, target: int) -> int:
        """Number of questions still missing to reach ``target``."""
        return max(target - len(self._questions), 0)

    def take(self, count: int) -> List[Question]:
        """First ``count`` questions in insertion order."""
        return list(self._questions[:count])
