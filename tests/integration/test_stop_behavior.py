"""
Integration tests for stopping and interrupting a run.
"""
import threading
from datetime import timedelta
from unittest.mock import patch

import pytest

import main
from comment_overkill.config import settings
from comment_overkill.utils.cancellation import CancellationToken
from comment_overkill.utils.logging import get_logger
from tests.unit.fixtures.fakes import build_engine, make_candidate


def many_items(prefix, count):
    return [make_candidate(f"{prefix}{i}", 30) for i in range(count)]


@pytest.mark.integration
class TestStopBehavior:
    def test_stop_halts_within_one_deletion(self, tmp_path):
        progress_path = tmp_path / "progress.json"
        engine = build_engine(
            progress_path, {"new": [many_items("n", 5)], "top": [many_items("t", 5)]}, current="new"
        )
        engine.controller.start(timedelta(days=10), ["new", "top"])

        def stop_after_two(candidate):
            if len(engine.handler.deleted) == 2:
                engine.controller.stop()

        engine.handler.on_confirm = stop_after_two

        assert engine.controller.run() == "stopped"
        assert engine.handler.deleted == ["n0", "n1"]
        assert engine.source.navigations == []
        assert not progress_path.exists()

    def test_repeated_stop(self, tmp_path):
        progress_path = tmp_path / "progress.json"
        engine = build_engine(progress_path, {"new": [many_items("n", 3)]}, current="new")
        engine.controller.start(timedelta(days=10), ["new"])

        def stop_every_time(candidate):
            engine.controller.stop()
            engine.controller.stop()

        engine.handler.on_confirm = stop_every_time

        assert engine.controller.run() == "stopped"
        assert engine.handler.deleted == ["n0"]

    def test_stop_command_from_other_process(self, tmp_path):
        """A stop written to disk ends the run before the next deletion."""
        progress_path = tmp_path / "progress.json"
        engine = build_engine(
            progress_path,
            {"new": [many_items("n", 3), many_items("m", 3)], "top": [many_items("t", 2)]},
            current="new",
        )
        engine.controller.start(timedelta(days=10), ["new", "top"])

        def operator_stops(candidate):
            if candidate.item_id == "n0":
                with patch.object(settings, "PROGRESS_PATH", progress_path), patch(
                    "main.setup_logging", return_value=get_logger()
                ):
                    main.stop_run()

        engine.handler.on_confirm = operator_stops

        assert engine.controller.run() == "stopped"
        assert engine.handler.deleted == ["n0"]
        assert engine.handler.begun == ["n0"]
        assert engine.source.page_index == 0
        assert not progress_path.exists()

    def test_stop_command_during_retry_cooldown(self, tmp_path):
        """A stop written to disk while a deletion is retried ends the retries."""
        progress_path = tmp_path / "progress.json"
        engine = build_engine(progress_path, {"new": [many_items("n", 2)]}, current="new")
        engine.handler.failures["n0"] = 3
        engine.controller.start(timedelta(days=10), ["new"])

        original = engine.handler.begin_delete

        def failing_then_stopped(page, candidate):
            try:
                return original(page, candidate)
            finally:
                engine.state_manager.clear_state()

        engine.handler.begin_delete = failing_then_stopped

        assert engine.controller.run() == "stopped"
        assert engine.handler.begun == ["n0"]
        assert engine.handler.deleted == []

    def test_interrupt_after_stop_command_does_not_restore_cursor(self, tmp_path):
        """Ctrl-C after another process cleared the cursor keeps it cleared."""
        progress_path = tmp_path / "progress.json"
        engine = build_engine(progress_path, {"new": [many_items("n", 3)]}, current="new")
        engine.controller.start(timedelta(days=10), ["new"])

        def stop_then_interrupt(candidate):
            engine.state_manager.clear_state()
            engine.controller.interrupt()

        engine.handler.on_confirm = stop_then_interrupt

        assert engine.controller.run() == "stopped"
        assert engine.handler.deleted == ["n0"]
        assert not progress_path.exists()

    def test_interrupt_then_stop(self, tmp_path):
        progress_path = tmp_path / "progress.json"
        engine = build_engine(progress_path, {"new": [many_items("n", 3)]}, current="new")
        engine.controller.start(timedelta(days=10), ["new"])
        engine.handler.on_confirm = lambda candidate: engine.controller.interrupt()

        assert engine.controller.run() == "interrupted"
        assert progress_path.exists()

        with patch.object(settings, "PROGRESS_PATH", progress_path), patch(
            "main.setup_logging", return_value=get_logger()
        ):
            assert main.stop_run() == 0

        assert not progress_path.exists()


@pytest.mark.integration
class TestCancellationFromAnotherThread:
    def test_cancel_wakes_long_wait(self, tmp_path):
        """A real token cancelled from a signal-handler thread ends a 30s navigation wait."""
        progress_path = tmp_path / "progress.json"
        token = CancellationToken()
        engine = build_engine(progress_path, {"new": [many_items("n", 1)]}, token=token)
        engine.controller.start(timedelta(days=10), ["new"])

        timer = threading.Timer(0.1, engine.controller.interrupt)
        timer.start()
        try:
            outcome = engine.controller.run()
        finally:
            timer.cancel()

        assert outcome == "interrupted"
        assert engine.source.navigations == []
        assert engine.state_manager.load_state().running is True
