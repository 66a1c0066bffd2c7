from __future__ import annotations

import importlib
import logging
from typing import Callable, Dict, List, Optional, Type, TypeVar

from .client_base import LLMClient

logger = logging.getLogger(__name__)

ClientT = TypeVar("ClientT", bound=Type[LLMClient])

# backend name -> client class; classes expose `requires_api_key` and `from_config`
_REGISTRY: Dict[str, Type[LLMClient]] = {}

_BUILTIN_MODULES = ("mock_client", "gemini_client", "azure_client")


def register_client(backend: str) -> Callable[[ClientT], ClientT]:
    """Class decorator: make an LLM client selectable as `--llm <backend>`."""
    def decorator(client_cls: ClientT) -> ClientT:
        if backend in _REGISTRY and _REGISTRY[backend] is not client_cls:
            logger.warning("Backend %s re-registered by %s", backend, client_cls.__name__)
        _REGISTRY[backend] = client_cls
        return client_cls
    return decorator


def get_client(backend: str) -> Optional[Type[LLMClient]]:
    return _REGISTRY.get(backend)


def list_clients() -> List[str]:
    return sorted(_REGISTRY)


def discover_clients() -> None:
    """
    Import the built-in backends so they register themselves.

    A backend whose SDK is not installed is skipped with a warning.
    """
    for module in _BUILTIN_MODULES:
        try:
            importlib.import_module(f"{__package__}.{module}")
        except ImportError as e:
            logger.warning("Skipping LLM backend module %s: %s", module, e)
