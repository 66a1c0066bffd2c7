from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, Sequence

from ..images.encoder import EncodedImagePart


@dataclass(frozen=True)
class LLMResponse:
    """
    Standard response object returned by any LLM client implementation.
    """
    raw_text: str
    model_name: str
    usage: Optional[Any] = None  # provider usage object, kept as-is


class LLMClient(Protocol):
    """
    Protocol / interface for LLM clients.

    A client takes the instruction text, the encoded image parts in upload
    order and an optional response-shape descriptor, makes exactly one
    request and returns the text payload.
    """

    def generate(
        self,
        *,
        prompt: str,
        images: Sequence[EncodedImagePart],
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> LLMResponse:
        ...
