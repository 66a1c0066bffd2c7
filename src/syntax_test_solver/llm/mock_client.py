from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Optional, Sequence

from ..config import SolverConfig
from ..images.encoder import EncodedImagePart
from .client_base import LLMClient, LLMResponse
from .registry import register_client

_SAMPLE_SENTENCES = [
    (
        "The book that you lent me was fascinating.",
        "Cuốn sách mà bạn cho tôi mượn rất hấp dẫn.",
    ),
    (
        "Having finished her homework, she went out.",
        "Sau khi làm xong bài tập, cô ấy đi ra ngoài.",
    ),
    (
        "It was in Hanoi that they first met.",
        "Chính ở Hà Nội họ đã gặp nhau lần đầu.",
    ),
]


def _question(number: int, sentence: str, translation: str) -> Dict[str, Any]:
    return {
        "questionNumber": number,
        "english": {
            "prompt": "Identify the main clause and any subordinate clauses.",
            "content": sentence,
        },
        "vietnamese": {
            "prompt": "Xác định mệnh đề chính và các mệnh đề phụ.",
            "content": translation,
        },
        "solution": {
            "english": f"Step 1: Find the main verb.\nStep 2: Mark clause boundaries in \"{sentence}\".",
            "vietnamese": f"Bước 1: Tìm động từ chính.\nBước 2: Đánh dấu ranh giới mệnh đề trong \"{translation}\".",
        },
    }


@register_client("mock")
@dataclass
class MockLLMClient(LLMClient):
    """
    Offline backend with a deterministic answer.

    Produces one question per image, listed in descending number order so
    callers exercise render-time sorting.
    """
    model_name: str = "mock-llm"

    requires_api_key: ClassVar[bool] = False

    @classmethod
    def from_config(cls, config: SolverConfig) -> "MockLLMClient":
        return cls()

    def generate(
        self,
        *,
        prompt: str,
        images: Sequence[EncodedImagePart],
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> LLMResponse:
        count = max(len(images), 1)
        questions: List[Dict[str, Any]] = []
        for number in range(count, 0, -1):
            sentence, translation = _SAMPLE_SENTENCES[(number - 1) % len(_SAMPLE_SENTENCES)]
            questions.append(_question(number, sentence, translation))

        payload = {"title": "SYNTAX TEST", "timeAllotted": "60 minutes", "questions": questions}
        text = json.dumps(payload, ensure_ascii=False, indent=2)
        return LLMResponse(raw_text=text, model_name=self.model_name, usage=None)
