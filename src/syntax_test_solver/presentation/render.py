from __future__ import annotations

from enum import Enum
from typing import List

from ..result.models import Question, TestResult


class ViewMode(Enum):
    ENGLISH = "english"
    VIETNAMESE = "vietnamese"
    SOLUTION = "solution"

    @property
    def label(self) -> str:
        return _TAB_LABELS[self]


_TAB_LABELS = {
    ViewMode.ENGLISH: "English Test",
    ViewMode.VIETNAMESE: "Bản dịch Tiếng Việt",
    ViewMode.SOLUTION: "Solutions & Guide",
}


def sorted_questions(result: TestResult) -> List[Question]:
    """
    Questions in ascending question_number order.

    Stable, so duplicates keep their service order. The result is not modified.
    """
    return sorted(result.questions, key=lambda q: q.question_number)


def _indent(text: str, prefix: str = "    ") -> List[str]:
    return [prefix + line for line in text.splitlines()] or [prefix]


def _render_question(question: Question, mode: ViewMode) -> List[str]:
    lines = [f"Question {question.question_number}"]

    if mode is ViewMode.ENGLISH:
        lines += _indent(question.english.prompt)
        lines += _indent(question.english.content)
    elif mode is ViewMode.VIETNAMESE:
        lines += _indent(question.vietnamese.prompt)
        lines += _indent(question.vietnamese.content)
    else:
        lines.append("  Solution (English)")
        lines += _indent(question.solution.english)
        lines.append("  Giải thích (Tiếng Việt)")
        lines += _indent(question.solution.vietnamese)

    return lines


def render_view(result: TestResult, mode: ViewMode = ViewMode.ENGLISH) -> str:
    """
    Plain-text rendering of one tab. Sorting happens here on every call.
    """
    lines: List[str] = []
    lines.append(result.title)
    lines.append(f"Time Allotted: {result.time_allotted}")
    lines.append(f"[{mode.label}]")

    for question in sorted_questions(result):
        lines.append("")
        lines += _render_question(question, mode)

    return "\n".join(lines)
