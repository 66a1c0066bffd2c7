from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

# Python attribute name -> JSON key used on the wire and in the schema
WIRE_NAMES = {
    "question_number": "questionNumber",
    "time_allotted": "timeAllotted",
}


@dataclass(frozen=True)
class QuestionContent:
    prompt: str
    content: str

    def to_dict(self) -> Dict[str, Any]:
        return {"prompt": self.prompt, "content": self.content}


@dataclass(frozen=True)
class SolutionContent:
    english: str
    vietnamese: str

    def to_dict(self) -> Dict[str, Any]:
        return {"english": self.english, "vietnamese": self.vietnamese}


@dataclass(frozen=True)
class Question:
    question_number: int
    english: QuestionContent
    vietnamese: QuestionContent
    solution: SolutionContent

    def to_dict(self) -> Dict[str, Any]:
        return {
            "questionNumber": self.question_number,
            "english": self.english.to_dict(),
            "vietnamese": self.vietnamese.to_dict(),
            "solution": self.solution.to_dict(),
        }


@dataclass(frozen=True)
class TestResult:
    """
    Parsed output of one analysis run.

    `questions` keeps the order the service returned; presenters sort by
    question_number at render time. Duplicate numbers are kept as-is.
    """
    __test__ = False  # not a pytest test class

    title: str
    time_allotted: str
    questions: Tuple[Question, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "timeAllotted": self.time_allotted,
            "questions": [q.to_dict() for q in self.questions],
        }
