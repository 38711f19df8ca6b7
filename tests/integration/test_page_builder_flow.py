"""
Integration tests for the page builder flow.

Load a page, edit sections through sessions, render with error isolation,
save and publish, and recover from repository failures.
"""

import json
from unittest.mock import Mock

import pytest

from pagebuilder.builder import PageBuilder
from pagebuilder.config import PageBuilderConfig
from pagebuilder.entrypoints import cli_main
from pagebuilder.errors import (
    DATA_FORMAT_MESSAGE,
    NETWORK_MESSAGE,
    ErrorKind,
    RecoveryActionType,
    invoke_recovery_action,
)
from pagebuilder.persistence import InMemoryPageRepository, JsonFilePageRepository, PageRepository


@pytest.fixture
def builder(repository, config, scheduler):
    builder = PageBuilder("home", repository, config=config, scheduler=scheduler)
    assert builder.open() is True
    return builder


@pytest.fixture
def failing_repository():
    repository = Mock(spec=PageRepository)
    repository.load_page.return_value = []
    return repository


class TestEditAndSave:
    """Golden path: open, edit, save, publish."""

    def test_open_loads_page(self, builder):
        assert builder.store.section_ids == ["section-hero"]
        assert builder.store.history.current.description == "Initial load"
        assert builder.has_unsaved_changes is False
        assert builder.errors == []

    def test_edit_save_and_publish(self, builder, repository, scheduler):
        with builder.edit("section-hero") as session:
            session.update_content("Spring collection")
            session.update_config("hero.overlayOpacity", 0.4)
            assert session.save() is True

        assert builder.has_unsaved_changes is True
        assert builder.save_page() is True
        assert builder.has_unsaved_changes is False
        assert builder.store.history.current.description == "Save Page"

        stored = repository.stored("home")
        assert stored[0]["content"] == "Spring collection"
        assert stored[0]["settings"]["hero"]["overlayOpacity"] == 0.4
        assert repository.published("home") == []

        assert builder.publish_page() is True
        assert repository.published("home")[0]["content"] == "Spring collection"

    def test_invalid_edit_never_reaches_storage(self, builder, repository):
        builder.store.set_real_time_preview(False)
        session = builder.edit("section-hero")
        session.update_config("hero.backgroundImage", "hero dot jpg")

        assert session.save() is False
        builder.save_page()

        assert repository.stored("home")[0]["settings"]["hero"]["backgroundImage"] == "/hero.jpg"

    def test_debounced_typing_then_render(self, builder, scheduler):
        session = builder.edit("section-hero")
        session.update_content("Sale")
        scheduler.advance(1.0)

        page = builder.render(is_preview=True)

        assert "Sale" in page.html
        assert builder.store.history.current.description == "Edit content"

    def test_undo_restores_previous_content(self, builder):
        with builder.edit("section-hero") as session:
            session.update_content("Changed")
            session.save()

        assert builder.store.undo() is True
        assert builder.store.get_view("section-hero").content == "Welcome to the shop"

    def test_opening_editor_closes_previous(self, builder):
        second_id = builder.store.add_section("text")

        first = builder.edit("section-hero")
        second = builder.edit(second_id)

        assert first.is_open is False
        assert builder.session is second
        assert builder.store.selected_section_id == second_id

        second.cancel()
        assert builder.session is None

    def test_edit_unknown_section(self, builder):
        with pytest.raises(KeyError):
            builder.edit("section-missing")

    def test_close_tears_down(self, builder):
        session = builder.edit("section-hero")
        builder.close()

        assert session.is_open is False
        assert len(builder.store) == 0

    def test_json_repository_round_trip(self, tmp_path, config, scheduler):
        repository = JsonFilePageRepository(str(tmp_path))
        with PageBuilder("landing", repository, config=config, scheduler=scheduler) as builder:
            builder.open()
            builder.store.add_section("hero")
            builder.store.add_section("cta")
            assert builder.save_page() is True

        reopened = PageBuilder("landing", repository, config=config, scheduler=scheduler)
        reopened.open()
        assert [v.type for v in reopened.store.sections] == ["hero", "cta"]

    def test_save_keeps_unrecognised_section_keys(self, config, scheduler):
        """Keys the editor does not model survive a load and save."""
        repository = InMemoryPageRepository({"home": [
            {"id": "a", "type": "text", "order": 0, "content": "Hi", "anchor": "intro"},
        ]})
        builder = PageBuilder("home", repository, config=config, scheduler=scheduler)
        builder.open()
        builder.store.add_section("cta")

        assert builder.save_page() is True

        stored = repository.stored("home")
        assert stored[0]["anchor"] == "intro"
        assert "anchor" not in stored[1]


class TestRepositoryFailures:
    """Repository failures become classified errors with recovery actions."""

    def test_network_failure_on_save(self, failing_repository, config, scheduler):
        failing_repository.save_page.side_effect = [ConnectionError("refused"), None]
        builder = PageBuilder("home", failing_repository, config=config, scheduler=scheduler)
        builder.open()
        builder.store.add_section("hero")

        assert builder.save_page() is False
        assert builder.is_saving is False

        error = builder.errors[0]
        assert error.kind is ErrorKind.NETWORK
        assert error.message == NETWORK_MESSAGE
        assert error.component == "Save Page"

        actions = builder.recovery_actions(error)
        assert [a.type for a in actions] == [RecoveryActionType.RETRY, RecoveryActionType.RESET]
        assert [a.label for a in actions] == ["Retry Connection", "Reset to Last Saved"]

        assert invoke_recovery_action(actions[0]) is True
        assert builder.errors == []
        assert failing_repository.save_page.call_count == 2
        assert builder.has_unsaved_changes is False

    def test_reset_discards_unsaved_changes(self, failing_repository, config, scheduler):
        failing_repository.save_page.side_effect = TimeoutError("timed out")
        builder = PageBuilder("home", failing_repository, config=config, scheduler=scheduler)
        builder.open()
        builder.store.add_section("hero")
        builder.publish_page()

        reset = builder.recovery_actions(builder.errors[0])[1]
        assert invoke_recovery_action(reset) is True

        assert len(builder.store) == 0
        assert builder.has_unsaved_changes is False

    def test_corrupt_page_on_load(self, failing_repository, config, scheduler):
        failing_repository.load_page.side_effect = json.JSONDecodeError("Expecting value", "", 0)
        builder = PageBuilder("home", failing_repository, config=config, scheduler=scheduler)

        assert builder.open() is False
        assert builder.is_loading is False
        assert builder.errors[0].message == DATA_FORMAT_MESSAGE
        assert builder.errors[0].kind is ErrorKind.UNKNOWN

    def test_dismiss_and_clear_errors(self, failing_repository, config, scheduler):
        failing_repository.save_page.side_effect = ConnectionError("refused")
        builder = PageBuilder("home", failing_repository, config=config, scheduler=scheduler)
        builder.open()
        builder.save_page()
        builder.save_page()
        assert len(builder.errors) == 2

        builder.dismiss_error(0)
        assert len(builder.errors) == 1

        builder.clear_errors()
        assert builder.errors == []


class TestAutomaticRetry:
    """Network failures retry on the scheduler with backoff."""

    def make_builder(self, repository, config, scheduler):
        builder = PageBuilder("home", repository, config=config, scheduler=scheduler)
        builder.open()
        builder.store.add_section("hero")
        return builder

    def test_backoff_until_retries_exhausted(self, failing_repository, config, scheduler):
        failing_repository.save_page.side_effect = ConnectionError("refused")
        builder = self.make_builder(failing_repository, config, scheduler)

        assert builder.save_page() is False
        assert builder.pending_retry_count == 1
        assert scheduler.pending_count == 1

        scheduler.advance(1.0)
        assert failing_repository.save_page.call_count == 2
        scheduler.advance(2.0)
        assert failing_repository.save_page.call_count == 3
        scheduler.advance(4.0)
        assert failing_repository.save_page.call_count == 4

        scheduler.advance(100.0)
        assert failing_repository.save_page.call_count == 4
        assert builder.pending_retry_count == 0
        assert len(builder.errors) == 1
        assert builder.has_unsaved_changes is True

    def test_retry_not_due_yet(self, failing_repository, config, scheduler):
        failing_repository.save_page.side_effect = ConnectionError("refused")
        builder = self.make_builder(failing_repository, config, scheduler)
        builder.save_page()

        scheduler.advance(0.9)

        assert failing_repository.save_page.call_count == 1

    def test_successful_retry_clears_error(self, failing_repository, config, scheduler):
        failing_repository.save_page.side_effect = [ConnectionError("refused"), None]
        builder = self.make_builder(failing_repository, config, scheduler)
        builder.save_page()

        scheduler.advance(1.0)

        assert failing_repository.save_page.call_count == 2
        assert builder.errors == []
        assert builder.has_unsaved_changes is False
        assert scheduler.pending_count == 0

    def test_publish_retry_keeps_publish_flag(self, failing_repository, config, scheduler):
        failing_repository.save_page.side_effect = [TimeoutError("timed out"), None]
        builder = self.make_builder(failing_repository, config, scheduler)
        builder.publish_page()

        scheduler.advance(1.0)

        assert failing_repository.save_page.call_args.kwargs["publish"] is True
        assert builder.errors == []

    def test_manual_retry_cancels_automatic_retry(self, failing_repository, config, scheduler):
        failing_repository.save_page.side_effect = [ConnectionError("refused"), None]
        builder = self.make_builder(failing_repository, config, scheduler)
        builder.save_page()

        retry = builder.recovery_actions(builder.errors[0])[0]
        assert invoke_recovery_action(retry) is True

        assert scheduler.pending_count == 0
        scheduler.advance(10.0)
        assert failing_repository.save_page.call_count == 2

    def test_reset_cancels_automatic_retry(self, failing_repository, config, scheduler):
        failing_repository.save_page.side_effect = ConnectionError("refused")
        builder = self.make_builder(failing_repository, config, scheduler)
        builder.save_page()

        reset = builder.recovery_actions(builder.errors[0])[1]
        invoke_recovery_action(reset)

        assert builder.errors == []
        assert scheduler.pending_count == 0

    def test_dismiss_and_close_cancel_retries(self, failing_repository, config, scheduler):
        failing_repository.save_page.side_effect = ConnectionError("refused")
        builder = self.make_builder(failing_repository, config, scheduler)
        builder.save_page()
        builder.save_page()
        assert scheduler.pending_count == 2

        builder.dismiss_error(0)
        assert scheduler.pending_count == 1

        builder.close()
        assert scheduler.pending_count == 0
        assert scheduler.advance(10.0) == 0

    def test_non_network_failure_not_retried(self, failing_repository, config, scheduler):
        failing_repository.save_page.side_effect = RuntimeError("disk full")
        builder = self.make_builder(failing_repository, config, scheduler)

        builder.save_page()

        assert builder.errors[0].kind is ErrorKind.UNKNOWN
        assert scheduler.pending_count == 0

    def test_load_failure_retries_open(self, failing_repository, config, scheduler, hero_page):
        failing_repository.load_page.side_effect = [ConnectionError("refused"), hero_page["home"]]
        builder = PageBuilder("home", failing_repository, config=config, scheduler=scheduler)

        assert builder.open() is False
        assert builder.errors[0].component == "Load Page"

        scheduler.advance(1.0)

        assert failing_repository.load_page.call_count == 2
        assert builder.store.section_ids == ["section-hero"]
        assert builder.errors == []


class TestFromConfig:
    """Builders wired from configuration."""

    def test_uses_configured_pages_dir(self, tmp_path, scheduler):
        config = PageBuilderConfig.from_dict({"storage": {"pages_dir": str(tmp_path)}})
        builder = PageBuilder.from_config("landing", config=config, scheduler=scheduler)
        builder.open()
        builder.store.add_section("text")

        assert builder.save_page() is True
        assert (tmp_path / "landing.json").exists()

        reopened = JsonFilePageRepository(str(tmp_path)).load_page("landing")
        assert [s.type for s in reopened] == ["text"]


class TestRenderIsolation:
    """A broken renderer only takes down its own section."""

    def test_broken_section_in_builder(self, builder):
        builder.store.add_section("text")
        builder.store.add_section("cta")

        @builder.renderer.registry.register("text")
        def broken_text(view, is_preview):
            raise AttributeError("'NoneType' object has no attribute 'strip'")

        page = builder.render()

        assert len(page.sections) == 3
        assert len(page.errored_ids) == 1
        assert "Welcome to the shop" in page.html
        assert "Ready to Get Started?" in page.html


@pytest.mark.usefixtures("restore_root_logging")
class TestCommandLine:
    """Tests for the pagebuilder command."""

    def write_page(self, tmp_path, sections):
        path = tmp_path / "home.json"
        path.write_text(json.dumps({"pageId": "home", "sections": sections}))
        return str(path)

    def test_validate_reports_errors(self, tmp_path, capsys):
        page = self.write_page(tmp_path, [
            {"id": "s-hero", "type": "hero", "order": 0, "content": "Hi"},
            {"id": "s-cta", "type": "cta", "order": 1, "settings": {"cta": {"ctaTitle": ""}}},
        ])

        assert cli_main(["validate", page]) == 1

        out = capsys.readouterr().out
        assert "s-hero (hero): ok" in out
        assert "cta.ctaTitle: CTA Title is required" in out

    def test_validate_json_output(self, tmp_path, capsys):
        page = self.write_page(tmp_path, [{"id": "s-hero", "type": "hero", "content": "Hi"}])

        assert cli_main(["--json", "validate", page]) == 0

        report = json.loads(capsys.readouterr().out)
        assert report == [{"id": "s-hero", "type": "hero", "errors": []}]

    def test_render_page(self, tmp_path, capsys):
        page = self.write_page(tmp_path, [
            {"id": "s-hero", "type": "hero", "content": "Hi"},
            {"id": "s-odd", "type": "carousel", "order": 1},
        ])

        assert cli_main(["render", page, "--preview"]) == 0

        out = capsys.readouterr().out
        assert 'data-section-id="s-hero"' in out
        assert "Unknown section type: carousel" in out

    def test_missing_file(self, tmp_path):
        assert cli_main(["validate", str(tmp_path / "nope.json")]) == 2
