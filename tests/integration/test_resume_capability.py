"""
Integration tests for resume capability.
"""
import json
from datetime import timedelta

import pytest

from tests.unit.fixtures.fakes import build_engine, make_candidate


def listing():
    return {
        "new": [[make_candidate("n1", 30), make_candidate("n2", 30)]],
        "hot": [[make_candidate("h1", 30)]],
        "top": [[make_candidate("t1", 30), make_candidate("t_recent", 1)]],
        "controversial": [[]],
    }


@pytest.mark.integration
class TestResumeCapability:
    """Resume from a saved cursor after an interrupt or a crash."""

    def test_resume_after_interrupt(self, tmp_path):
        progress_path = tmp_path / "progress.json"
        first = build_engine(progress_path, listing(), current="new")
        first.controller.start(timedelta(days=10))

        def interrupt_in_hot(candidate):
            if candidate.item_id == "h1":
                first.controller.interrupt()

        first.handler.on_confirm = interrupt_in_hot

        assert first.controller.run() == "interrupted"
        assert first.handler.deleted == ["n1", "n2", "h1"]

        saved = json.loads(progress_path.read_text(encoding="utf-8"))
        assert saved["running"] is True
        assert saved["partition"] == "hot"
        assert saved["completed_partitions"] == ["new"]

        # New process: the browser opens on the default listing again
        second = build_engine(progress_path, listing(), current="new")
        second.source.removed = {"n1", "n2", "h1"}
        state = second.controller.resume()

        assert state.current_partition == "hot"
        assert state.completed_partitions == {"new"}

        assert second.controller.run() == "complete"
        assert second.source.navigations == ["hot", "top", "controversial"]
        assert second.handler.deleted == ["t1"]
        assert not progress_path.exists()

    def test_completed_partitions_not_revisited(self, tmp_path):
        progress_path = tmp_path / "progress.json"
        first = build_engine(progress_path, listing())
        first.controller.start(timedelta(days=10))
        first.controller.state.mark_completed("new")
        first.controller.state.mark_completed("hot")
        first.state_manager.save_state(first.controller.state)

        second = build_engine(progress_path, listing())
        second.controller.resume()
        second.controller.run()

        assert "new" not in second.source.navigations
        assert "hot" not in second.source.navigations
        assert second.handler.deleted == ["t1"]

    def test_resume_keeps_saved_window(self, tmp_path):
        progress_path = tmp_path / "progress.json"
        first = build_engine(progress_path, listing())
        first.controller.start(timedelta(days=45), ["top"])

        state = build_engine(progress_path, listing()).controller.resume()

        assert state.preserve_window == timedelta(days=45)
        assert state.partitions == ["top"]

    def test_crash_leaves_resumable_cursor(self, tmp_path):
        progress_path = tmp_path / "progress.json"
        first = build_engine(progress_path, listing())
        first.controller.start(timedelta(days=10))

        def crash(partition):
            raise KeyboardInterrupt

        first.source.navigate_to = crash

        with pytest.raises(KeyboardInterrupt):
            first.controller.run()

        # Cursor saved before navigating survives the crash
        second = build_engine(progress_path, listing())
        state = second.controller.resume()
        assert state is not None
        assert state.current_partition == "new"

    def test_corrupted_cursor_is_not_resumed(self, tmp_path):
        progress_path = tmp_path / "progress.json"
        progress_path.write_text("{ truncated", encoding="utf-8")

        assert build_engine(progress_path, listing()).controller.resume() is None

    def test_finished_cursor_is_not_resumed(self, tmp_path):
        progress_path = tmp_path / "progress.json"
        first = build_engine(progress_path, listing())
        first.controller.start(timedelta(days=10))
        first.controller.state.running = False
        first.state_manager.save_state(first.controller.state)

        assert build_engine(progress_path, listing()).controller.resume() is None
