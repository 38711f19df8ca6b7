"""
Unit tests for the error isolation boundary.
"""

from unittest.mock import Mock

import pytest

from pagebuilder.errors import BoundaryState, ErrorBoundary, ErrorCard, ErrorKind, RecoveryActionType


def broken():
    raise ValueError("template exploded")


class TestRender:
    """Tests for catching child failures."""

    def test_healthy_child_passes_through(self):
        boundary = ErrorBoundary("Hero Section")

        assert boundary.render(lambda: "<h1>Hi</h1>") == "<h1>Hi</h1>"
        assert boundary.state is BoundaryState.OK
        assert boundary.error is None

    def test_failure_renders_error_card(self):
        boundary = ErrorBoundary("Hero Section", section_id="s1", on_retry=Mock())

        html = boundary.render(broken)

        assert boundary.state is BoundaryState.ERRORED
        assert boundary.error.kind is ErrorKind.RENDER
        assert boundary.error.section_id == "s1"
        assert 'class="error-card error-render"' in html
        assert "Hero Section failed to render" in html
        assert 'data-action="retry"' in html
        assert "Retry Section" in html

    def test_errored_boundary_does_not_call_child(self):
        boundary = ErrorBoundary("Hero Section")
        boundary.render(broken)
        child = Mock(return_value="ok")

        html = boundary.render(child)

        child.assert_not_called()
        assert "error-card" in html

    def test_details_hidden_by_default(self):
        boundary = ErrorBoundary("Hero Section")
        assert "Technical details" not in boundary.render(broken)

    def test_details_shown_when_enabled(self):
        boundary = ErrorBoundary("Hero Section", show_details=True)
        html = boundary.render(broken)
        assert "Technical details" in html
        assert "template exploded" in html

    def test_on_error_called(self):
        on_error = Mock()
        boundary = ErrorBoundary("Hero Section", on_error=on_error)

        boundary.render(broken)

        on_error.assert_called_once_with(boundary.error)

    def test_on_error_failure_is_contained(self):
        boundary = ErrorBoundary("Hero Section", on_error=Mock(side_effect=RuntimeError("x")))
        assert "error-card" in boundary.render(broken)

    def test_message_is_escaped(self):
        boundary = ErrorBoundary("Hero Section")
        def child():
            raise ValueError("<script>")

        html = boundary.render(child)
        assert "<script>" not in html
        assert "&lt;script&gt;" in html


class TestRecoveryActions:
    """Tests for running recovery actions from the card."""

    def test_actions_follow_callbacks(self):
        boundary = ErrorBoundary("Hero Section", on_retry=Mock(), on_reset=Mock(), on_fallback=Mock())
        boundary.render(broken)

        assert [a.type for a in boundary.actions] == [
            RecoveryActionType.RETRY, RecoveryActionType.RESET, RecoveryActionType.FALLBACK,
        ]

    def test_dismiss_only_without_callbacks(self):
        boundary = ErrorBoundary("Hero Section")
        boundary.render(broken)
        assert [a.type for a in boundary.actions] == [RecoveryActionType.DISMISS]

    @pytest.mark.parametrize("ref", [RecoveryActionType.RETRY, "retry", 0])
    def test_retry_clears_and_rerenders(self, ref):
        on_retry = Mock()
        boundary = ErrorBoundary("Hero Section", on_retry=on_retry)
        boundary.render(broken)

        assert boundary.run_action(ref) is True

        on_retry.assert_called_once_with()
        assert boundary.state is BoundaryState.OK
        assert boundary.render(lambda: "fixed") == "fixed"

    def test_reset_clears(self):
        boundary = ErrorBoundary("Hero Section", on_reset=Mock())
        boundary.render(broken)

        assert boundary.run_action(RecoveryActionType.RESET) is True
        assert boundary.state is BoundaryState.OK

    def test_retry_that_fails_again_re_errors(self):
        boundary = ErrorBoundary("Hero Section", on_retry=Mock())
        boundary.render(broken)
        first_id = boundary.error.error_id

        boundary.run_action("retry")
        boundary.render(broken)

        assert boundary.state is BoundaryState.ERRORED
        assert boundary.error.error_id != first_id

    def test_fallback_keeps_errored(self):
        on_fallback = Mock()
        boundary = ErrorBoundary("Hero Section", on_fallback=on_fallback)
        boundary.render(broken)

        assert boundary.run_action("fallback") is True

        on_fallback.assert_called_once_with()
        assert boundary.state is BoundaryState.ERRORED

    def test_dismiss_hides_card_until_remount(self):
        boundary = ErrorBoundary("Hero Section")
        boundary.render(broken)

        assert boundary.run_action(RecoveryActionType.DISMISS) is True

        assert boundary.is_dismissed is True
        assert boundary.state is BoundaryState.ERRORED
        assert boundary.render(lambda: "fine") == ""

        boundary.remount()
        assert boundary.render(lambda: "fine") == "fine"

    def test_failing_action_keeps_card(self):
        boundary = ErrorBoundary("Hero Section", on_reset=Mock(side_effect=RuntimeError("nope")))
        boundary.render(broken)

        assert boundary.run_action("reset") is False
        assert boundary.state is BoundaryState.ERRORED

    @pytest.mark.parametrize("ref", ["fallback", "explode", 7])
    def test_unknown_action_ref(self, ref):
        boundary = ErrorBoundary("Hero Section", on_retry=Mock())
        boundary.render(broken)

        assert boundary.run_action(ref) is False
        assert boundary.state is BoundaryState.ERRORED

    def test_ascii_card(self):
        boundary = ErrorBoundary("Hero Section", on_retry=Mock(), on_reset=Mock())
        boundary.render(broken)

        text = ErrorCard(boundary.error, boundary.actions).render_ascii()

        assert text.splitlines()[0] == "[!] Hero Section failed to render"
        assert "(1) Retry Section" in text
        assert "(2) Reset Section" in text
