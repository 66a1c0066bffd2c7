from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional, Sequence

from .config import SolverConfig
from .credentials import CredentialSelector
from .errors import AuthError, SessionBusyError
from .images.encoder import UploadedImage
from .pipeline import NO_IMAGES_MESSAGE, is_auth_error, process_test_images
from .presentation.render import ViewMode
from .result.models import TestResult

logger = logging.getLogger(__name__)

INVALID_KEY_MESSAGE = (
    "Your API key appears to be invalid or missing. "
    "Please select a valid API key to proceed."
)
SELECT_DIALOG_FAILED_MESSAGE = "Could not open the API key selection dialog. Please try again."
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred. Please check the logs."


class SolverSession:
    """
    State of one interactive session: selected files, credential state,
    the in-flight flag and the latest result or error.

    Only one analysis may run at a time, and the file list is frozen while
    it runs.
    """

    def __init__(
        self,
        selector: CredentialSelector,
        config_factory: Callable[[], SolverConfig] = SolverConfig.from_env,
        runner: Callable[..., TestResult] = process_test_images,
    ):
        self.selector = selector
        self.config_factory = config_factory
        self.runner = runner

        self.images: List[UploadedImage] = []
        self.result: Optional[TestResult] = None
        self.error: Optional[str] = None
        self.credential_selected = False
        self.view_mode = ViewMode.ENGLISH
        self._busy = threading.Lock()

    @property
    def is_loading(self) -> bool:
        return self._busy.locked()

    def _ensure_idle(self) -> None:
        if self.is_loading:
            raise SessionBusyError("An analysis is already in progress.")

    # ---- credentials ----

    def check_credential(self) -> bool:
        try:
            self.credential_selected = bool(self.selector.has_selected_credential())
        except Exception as e:
            logger.error("Could not check for API key: %s", e)
            self.credential_selected = False
        return self.credential_selected

    def select_credential(self) -> bool:
        self.error = None
        try:
            self.selector.open_select_credential()
        except Exception as e:
            logger.error("Error opening select key dialog: %s", e)
            self.error = SELECT_DIALOG_FAILED_MESSAGE
            return False

        # Optimistic: the host API reports completion before the selection is
        # visible to has_selected_credential(), so we do not re-query here.
        self.credential_selected = True
        return True

    # ---- file list ----

    def add_images(self, images: Sequence[UploadedImage]) -> None:
        self._ensure_idle()
        self.images.extend(images)

    def remove_image(self, index: int) -> UploadedImage:
        self._ensure_idle()
        return self.images.pop(index)

    # ---- view ----

    def set_view_mode(self, mode: ViewMode) -> None:
        self.view_mode = ViewMode(mode)

    # ---- analysis ----

    def analyze(self) -> Optional[TestResult]:
        """
        Run the pipeline once on the selected images.

        Errors end up in `self.error` as one human-readable line; credential
        errors also clear `credential_selected`.

        Raises:
            SessionBusyError: a previous analyze() has not finished
        """
        if not self.images:
            self.error = NO_IMAGES_MESSAGE
            return None

        if not self._busy.acquire(blocking=False):
            raise SessionBusyError("An analysis is already in progress.")

        self.error = None
        self.result = None
        try:
            config = self.config_factory()
            self.result = self.runner(list(self.images), config)
        except Exception as e:
            logger.error("Analysis failed: %s", e)
            message = str(e) or UNKNOWN_ERROR_MESSAGE
            if isinstance(e, AuthError) or is_auth_error(message):
                self.error = INVALID_KEY_MESSAGE
                self.credential_selected = False
            else:
                self.error = message
        finally:
            self._busy.release()

        return self.result
