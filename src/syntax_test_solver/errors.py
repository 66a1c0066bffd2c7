from __future__ import annotations

from typing import Optional


INVALID_FORMAT_MESSAGE = "The API returned an invalid format. Please try again."


class SolverError(Exception):
    """Base class for every error surfaced by the solver pipeline."""


class InputError(SolverError, ValueError):
    """No images were supplied."""


class ReadError(SolverError, OSError):
    """An uploaded image could not be read into an inline part."""


class ConfigError(SolverError):
    """A configuration value is present but unusable."""


class AuthError(SolverError):
    """Base for credential problems. Callers reset credential selection on these."""


class AuthConfigError(AuthError):
    """No credential is configured for the selected backend."""


class AuthInvalidError(AuthError):
    """The backend rejected the credential."""


class ServiceError(SolverError, RuntimeError):
    """Any other failure raised by the model service."""


class ParseError(SolverError, ValueError):
    """
    The service response did not parse into a TestResult.

    The raw payload is kept on `raw_text` for diagnostics; the message is
    generic so it can be shown to a user as-is.
    """

    def __init__(self, raw_text: Optional[str], detail: str = ""):
        super().__init__(INVALID_FORMAT_MESSAGE)
        self.raw_text = raw_text or ""
        self.detail = detail


class SessionBusyError(SolverError):
    """A request is in flight; the session refuses the action."""
