from __future__ import annotations

import logging
from typing import Optional, Sequence

from .config import SolverConfig
from .errors import (
    AuthConfigError,
    AuthInvalidError,
    ConfigError,
    InputError,
    ServiceError,
    SolverError,
)
from .images.encoder import UploadedImage, encode_images
from .llm.client_base import LLMClient
from .llm.registry import discover_clients, get_client, list_clients
from .prompts.prompt_builder import build_prompt_text
from .result.models import TestResult
from .result.parser import parse_test_result
from .schema.response_schema import RESPONSE_SCHEMA

logger = logging.getLogger(__name__)

NO_IMAGES_MESSAGE = "Please select at least one image file."
MISSING_KEY_MESSAGE = "API_KEY environment variable is not set."

# Substrings the model service uses for missing or rejected credentials
AUTH_ERROR_MARKERS = (
    "API_KEY environment variable is not set",
    "Requested entity was not found",
    "API key not valid",
)


def is_auth_error(message: str) -> bool:
    return any(marker in (message or "") for marker in AUTH_ERROR_MARKERS)


def create_client(config: SolverConfig) -> LLMClient:
    """
    Instantiate the backend named by config.llm_backend.

    Raises:
        ConfigError: unknown backend
        AuthConfigError: backend needs a credential and none is configured
    """
    discover_clients()
    client_cls = get_client(config.llm_backend)
    if client_cls is None:
        raise ConfigError(
            f"Unsupported llm_backend: {config.llm_backend} "
            f"(available: {', '.join(list_clients())})"
        )
    if getattr(client_cls, "requires_api_key", True) and not config.api_key:
        raise AuthConfigError(MISSING_KEY_MESSAGE)
    return client_cls.from_config(config)


def process_test_images(
    images: Sequence[UploadedImage],
    config: SolverConfig,
    *,
    client: Optional[LLMClient] = None,
) -> TestResult:
    """
    End-to-end pipeline:
      images -> inline parts -> prompt + schema -> one model call -> TestResult

    Exactly one request per call, no retry. Either a complete TestResult is
    returned or an error is raised.

    Raises:
        InputError: no images
        AuthConfigError: no credential configured (checked before any request)
        ReadError: an image could not be read
        AuthInvalidError: the service rejected the credential
        ServiceError: any other service failure
        ParseError: the response was not a valid TestResult
    """
    if not images:
        raise InputError(NO_IMAGES_MESSAGE)

    if client is None:
        client = create_client(config)
    elif getattr(client, "requires_api_key", True) and not config.api_key:
        raise AuthConfigError(MISSING_KEY_MESSAGE)

    # 1) Encode (concurrent, order preserved)
    parts = encode_images(images, max_workers=config.max_workers)

    # 2) Prompt
    prompt_text = build_prompt_text(len(parts))

    # 3) Model call
    logger.info(
        "Analyzing %d image(s) with backend=%s model=%s",
        len(parts),
        config.llm_backend,
        config.model_name,
    )
    try:
        resp = client.generate(prompt=prompt_text, images=parts, response_schema=RESPONSE_SCHEMA)
    except SolverError:
        raise
    except Exception as e:
        message = str(e)
        logger.error("Model request failed: %s", message)
        if is_auth_error(message):
            raise AuthInvalidError(message) from e
        raise ServiceError(message) from e

    logger.debug("Received %d characters from %s", len(resp.raw_text), resp.model_name)

    # 4) Parse
    return parse_test_result(resp.raw_text)
