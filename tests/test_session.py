import threading
from unittest.mock import MagicMock

import pytest

from syntax_test_solver.config import SolverConfig
from syntax_test_solver.errors import AuthConfigError, AuthInvalidError, ParseError, ServiceError, SessionBusyError
from syntax_test_solver.images.encoder import UploadedImage
from syntax_test_solver.presentation.render import ViewMode
from syntax_test_solver.result.models import TestResult
from syntax_test_solver.session import (
    INVALID_KEY_MESSAGE,
    SELECT_DIALOG_FAILED_MESSAGE,
    SolverSession,
)

RESULT = TestResult(title="T", time_allotted="5 minutes", questions=())
IMAGE = UploadedImage(data=b"img", mime_type="image/png", name="a.png")


def make_session(runner=None, selector=None):
    return SolverSession(
        selector=selector or MagicMock(),
        config_factory=lambda: SolverConfig(api_key="k"),
        runner=runner or MagicMock(return_value=RESULT),
    )


class TestCredentials:
    def test_check_credential(self):
        selector = MagicMock()
        selector.has_selected_credential.return_value = True
        session = make_session(selector=selector)

        assert session.check_credential() is True
        assert session.credential_selected is True

    def test_check_credential_failure_means_not_selected(self):
        selector = MagicMock()
        selector.has_selected_credential.side_effect = RuntimeError("host unavailable")
        session = make_session(selector=selector)
        session.credential_selected = True

        assert session.check_credential() is False
        assert session.credential_selected is False

    def test_select_credential_is_optimistic(self):
        selector = MagicMock()
        selector.has_selected_credential.return_value = False
        session = make_session(selector=selector)

        assert session.select_credential() is True
        assert session.credential_selected is True
        selector.open_select_credential.assert_called_once()
        selector.has_selected_credential.assert_not_called()

    def test_select_credential_failure(self):
        selector = MagicMock()
        selector.open_select_credential.side_effect = RuntimeError("dialog blocked")
        session = make_session(selector=selector)

        assert session.select_credential() is False
        assert session.credential_selected is False
        assert session.error == SELECT_DIALOG_FAILED_MESSAGE


class TestAnalyze:
    def test_no_images_sets_error_without_running(self):
        runner = MagicMock()
        session = make_session(runner=runner)

        assert session.analyze() is None
        assert session.error == "Please select at least one image file."
        runner.assert_not_called()

    def test_success(self):
        runner = MagicMock(return_value=RESULT)
        session = make_session(runner=runner)
        session.add_images([IMAGE])

        assert session.analyze() is RESULT
        assert session.result is RESULT
        assert session.error is None
        assert session.is_loading is False
        images, config = runner.call_args.args
        assert images == [IMAGE]
        assert config.api_key == "k"

    @pytest.mark.parametrize(
        "error",
        [
            AuthInvalidError("API key not valid. Please pass a valid API key."),
            AuthConfigError("API_KEY environment variable is not set."),
            RuntimeError("Requested entity was not found."),
        ],
    )
    def test_auth_errors_reset_credential(self, error):
        session = make_session(runner=MagicMock(side_effect=error))
        session.credential_selected = True
        session.add_images([IMAGE])

        assert session.analyze() is None
        assert session.error == INVALID_KEY_MESSAGE
        assert session.credential_selected is False

    def test_other_errors_pass_message_through(self):
        session = make_session(runner=MagicMock(side_effect=ServiceError("network timeout")))
        session.credential_selected = True
        session.add_images([IMAGE])

        session.analyze()
        assert session.error == "network timeout"
        assert session.credential_selected is True

    def test_parse_error_shows_generic_message(self):
        session = make_session(runner=MagicMock(side_effect=ParseError("raw junk")))
        session.add_images([IMAGE])

        session.analyze()
        assert session.error == "The API returned an invalid format. Please try again."
        assert "raw junk" not in session.error

    def test_previous_result_cleared(self):
        runner = MagicMock(side_effect=[RESULT, ServiceError("boom")])
        session = make_session(runner=runner)
        session.add_images([IMAGE])

        session.analyze()
        session.analyze()
        assert session.result is None
        assert session.error == "boom"


class TestBusyGuard:
    def _blocking_session(self):
        started = threading.Event()
        release = threading.Event()

        def runner(images, config):
            started.set()
            release.wait(timeout=5)
            return RESULT

        session = make_session(runner=runner)
        session.add_images([IMAGE])
        worker = threading.Thread(target=session.analyze)
        worker.start()
        started.wait(timeout=5)
        return session, release, worker

    def test_second_analyze_rejected(self):
        session, release, worker = self._blocking_session()
        try:
            assert session.is_loading is True
            with pytest.raises(SessionBusyError):
                session.analyze()
        finally:
            release.set()
            worker.join()
        assert session.result is RESULT

    def test_file_list_locked_while_loading(self):
        session, release, worker = self._blocking_session()
        try:
            with pytest.raises(SessionBusyError):
                session.add_images([IMAGE])
            with pytest.raises(SessionBusyError):
                session.remove_image(0)
        finally:
            release.set()
            worker.join()
        assert session.images == [IMAGE]


class TestFilesAndView:
    def test_add_and_remove(self):
        other = UploadedImage(data=b"2", mime_type="image/jpeg", name="b.jpg")
        session = make_session()
        session.add_images([IMAGE, other])

        assert session.remove_image(0) is IMAGE
        assert session.images == [other]

    def test_view_mode_switch(self):
        session = make_session()
        assert session.view_mode is ViewMode.ENGLISH
        session.set_view_mode(ViewMode.SOLUTION)
        assert session.view_mode is ViewMode.SOLUTION
        session.set_view_mode("vietnamese")
        assert session.view_mode is ViewMode.VIETNAMESE
