from __future__ import annotations

import getpass
import os
from dataclasses import dataclass, field
from typing import Callable, MutableMapping, Protocol

from .config import API_KEY_VARS


class CredentialSelector(Protocol):
    """
    Host-side credential picker.

    Both calls may raise; callers decide how to surface that.
    """

    def has_selected_credential(self) -> bool:
        ...

    def open_select_credential(self) -> None:
        ...


@dataclass
class EnvCredentialSelector(CredentialSelector):
    """
    Credential selection backed by the process environment.

    Opening the flow prompts for a key (hidden input) and stores it under
    API_KEY for the rest of the process.
    """
    env: MutableMapping[str, str] = field(default_factory=lambda: os.environ)
    prompt: Callable[[str], str] = getpass.getpass

    def has_selected_credential(self) -> bool:
        return any((self.env.get(var) or "").strip() for var in API_KEY_VARS)

    def open_select_credential(self) -> None:
        key = self.prompt("Google AI API key: ").strip()
        if not key:
            raise ValueError("No API key entered.")
        self.env["API_KEY"] = key
