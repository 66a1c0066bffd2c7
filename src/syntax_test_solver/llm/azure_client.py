from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional, Sequence

from openai import AzureOpenAI

from ..config import SolverConfig
from ..errors import ConfigError
from ..images.encoder import EncodedImagePart
from ..schema.response_schema import to_json_schema
from .client_base import LLMClient, LLMResponse
from .registry import register_client


@register_client("azure")
@dataclass
class AzureOpenAIClient(LLMClient):
    """
    Azure OpenAI client implementation.

    Uses text + image inputs (as data URLs) and structured JSON output.
    Makes a single attempt: the SDK's own retries are switched off.
    """
    api_key: str
    endpoint: str
    deployment: str
    api_version: str
    timeout_seconds: Optional[float] = None
    model_name: str = "azure-openai"

    requires_api_key: ClassVar[bool] = True

    def __post_init__(self):
        self._client = AzureOpenAI(
            api_key=self.api_key,
            api_version=self.api_version,
            azure_endpoint=self.endpoint,
            timeout=self.timeout_seconds,
            max_retries=0,
        )

    @classmethod
    def from_config(cls, config: SolverConfig) -> "AzureOpenAIClient":
        if not all([config.azure_endpoint, config.azure_deployment, config.azure_api_version]):
            raise ConfigError(
                "Missing Azure OpenAI settings. "
                "Check AZURE_OPENAI_ENDPOINT, AZURE_OPENAI_DEPLOYMENT_NAME, AZURE_OPENAI_API_VERSION."
            )
        return cls(
            api_key=config.api_key,
            endpoint=config.azure_endpoint,
            deployment=config.azure_deployment,
            api_version=config.azure_api_version,
            timeout_seconds=config.timeout_seconds,
        )

    def generate(
        self,
        *,
        prompt: str,
        images: Sequence[EncodedImagePart],
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> LLMResponse:
        """
        Send prompt + images to Azure OpenAI in one user message.
        """
        content = [{"type": "text", "text": prompt}]
        for image in images:
            content.append({"type": "image_url", "image_url": {"url": image.as_data_url()}})

        kwargs: Dict[str, Any] = {}
        if response_schema is not None:
            kwargs["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": "test_result",
                    "strict": True,
                    "schema": to_json_schema(response_schema),
                },
            }

        resp = self._client.chat.completions.create(
            model=self.deployment,
            messages=[{"role": "user", "content": content}],
            temperature=0.2,
            **kwargs,
        )

        return LLMResponse(
            raw_text=resp.choices[0].message.content or "",
            model_name=self.model_name,
            usage=getattr(resp, "usage", None),
        )
