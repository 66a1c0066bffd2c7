from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional, Sequence

from google import genai
from google.genai import types

from ..config import DEFAULT_MODEL, SolverConfig
from ..images.encoder import EncodedImagePart
from .client_base import LLMClient, LLMResponse
from .registry import register_client

logger = logging.getLogger(__name__)


@register_client("gemini")
@dataclass
class GeminiLLMClient(LLMClient):
    """
    Google Gemini client (google-genai SDK).

    Sends the prompt and inline image parts as one user turn and asks for
    JSON constrained by the response schema.
    """
    api_key: str
    model_name: str = DEFAULT_MODEL
    timeout_seconds: Optional[float] = None

    requires_api_key: ClassVar[bool] = True

    def __post_init__(self):
        http_options = None
        if self.timeout_seconds:
            # HttpOptions.timeout is in milliseconds
            http_options = types.HttpOptions(timeout=int(self.timeout_seconds * 1000))

        self._client = genai.Client(api_key=self.api_key, http_options=http_options)

    @classmethod
    def from_config(cls, config: SolverConfig) -> "GeminiLLMClient":
        return cls(
            api_key=config.api_key,
            model_name=config.model_name,
            timeout_seconds=config.timeout_seconds,
        )

    def generate(
        self,
        *,
        prompt: str,
        images: Sequence[EncodedImagePart],
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> LLMResponse:
        parts = [types.Part.from_text(text=prompt)]
        for image in images:
            parts.append(types.Part.from_bytes(data=image.to_bytes(), mime_type=image.mime_type))

        config = None
        if response_schema is not None:
            config = types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=response_schema,
            )

        logger.debug("Calling %s with %d image parts", self.model_name, len(images))
        resp = self._client.models.generate_content(
            model=self.model_name,
            contents=[types.Content(role="user", parts=parts)],
            config=config,
        )

        return LLMResponse(
            raw_text=resp.text or "",
            model_name=self.model_name,
            usage=getattr(resp, "usage_metadata", None),
        )
