from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from ..errors import ParseError
from .models import Question, QuestionContent, SolutionContent, TestResult

logger = logging.getLogger(__name__)


class _ShapeError(Exception):
    pass


def _require(obj: Dict[str, Any], key: str, where: str) -> Any:
    if key not in obj:
        raise _ShapeError(f"{where}: missing field '{key}'")
    return obj[key]


def _object(value: Any, where: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise _ShapeError(f"{where}: expected object, got {type(value).__name__}")
    return value


def _string(obj: Dict[str, Any], key: str, where: str) -> str:
    value = _require(obj, key, where)
    if not isinstance(value, str):
        raise _ShapeError(f"{where}.{key}: expected string, got {type(value).__name__}")
    return value


def _integer(obj: Dict[str, Any], key: str, where: str) -> int:
    value = _require(obj, key, where)
    # bool is an int subclass in Python but not an integer in JSON
    if isinstance(value, bool) or not isinstance(value, int):
        raise _ShapeError(f"{where}.{key}: expected integer, got {type(value).__name__}")
    return value


def _content(obj: Dict[str, Any], key: str, where: str) -> QuestionContent:
    node = _object(_require(obj, key, where), f"{where}.{key}")
    path = f"{where}.{key}"
    return QuestionContent(prompt=_string(node, "prompt", path), content=_string(node, "content", path))


def _question(value: Any, where: str) -> Question:
    node = _object(value, where)
    sol = _object(_require(node, "solution", where), f"{where}.solution")
    return Question(
        question_number=_integer(node, "questionNumber", where),
        english=_content(node, "english", where),
        vietnamese=_content(node, "vietnamese", where),
        solution=SolutionContent(
            english=_string(sol, "english", f"{where}.solution"),
            vietnamese=_string(sol, "vietnamese", f"{where}.solution"),
        ),
    )


def _build_result(data: Any) -> TestResult:
    root = _object(data, "$")
    questions = _require(root, "questions", "$")
    if not isinstance(questions, list):
        raise _ShapeError(f"$.questions: expected array, got {type(questions).__name__}")

    return TestResult(
        title=_string(root, "title", "$"),
        time_allotted=_string(root, "timeAllotted", "$"),
        questions=tuple(_question(q, f"$.questions[{i}]") for i, q in enumerate(questions)),
    )


def parse_test_result(raw_text: Optional[str]) -> TestResult:
    """
    Parse the service's JSON payload into a TestResult.

    Only structure is checked: every declared field present with the declared
    JSON type. Numbering, uniqueness and empty strings are not validated.

    Raises:
        ParseError: on any parse or shape failure. The raw payload is on
            `err.raw_text`; the message itself is generic.
    """
    text = (raw_text or "").strip()
    try:
        data = json.loads(text)
        result = _build_result(data)
    except (json.JSONDecodeError, _ShapeError) as exc:
        logger.error("Failed to parse JSON response (%s): %s", exc, raw_text)
        raise ParseError(raw_text, detail=str(exc)) from exc

    logger.debug("Parsed test result with %d questions", len(result.questions))
    return result
