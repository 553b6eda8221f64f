"""
Unit Tests for the Interactive Mark Editor
"""

import threading

import pytest

from conftest import make_mark
from smartgrade.core.models import MarkStatus
from smartgrade.pipeline.editor import DeltaKind, MarkEditor


@pytest.fixture
def editor():
    return MarkEditor([
        make_mark("a", page_index=0),
        make_mark("b", page_index=1, status=MarkStatus.INCORRECT),
        make_mark("c", page_index=0),
    ])


class TestMutations:
    def test_add_when_called_then_correct_manual_mark(self, editor):
        mark = editor.add(12.5, 40.0, page_index=1)
        assert mark.id.startswith("manual-")
        assert mark.status is MarkStatus.CORRECT
        assert mark.question is None
        assert editor.get(mark.id) == mark

    def test_add_when_called_twice_then_distinct_ids(self, editor):
        assert editor.add(1, 1, 0).id != editor.add(1, 1, 0).id

    def test_update_when_known_id_then_replaced_in_place(self, editor):
        moved = editor.get("a").moved_to(1, 2)
        delta = editor.update(moved)
        assert delta.kind is DeltaKind.UPDATED
        assert [m.id for m in editor.snapshot()] == ["a", "b", "c"]
        assert editor.get("a").x == 1

    def test_update_when_unknown_id_then_no_change(self, editor):
        before = editor.snapshot()
        assert editor.update(make_mark("zzz")) is None
        assert editor.snapshot() == before

    def test_update_when_repeated_then_idempotent(self, editor):
        changed = editor.get("a").with_text(question="Q")
        editor.update(changed)
        once = editor.snapshot()
        editor.update(changed)
        assert editor.snapshot() == once

    def test_remove_when_known_id_then_gone(self, editor):
        delta = editor.remove("b")
        assert delta.kind is DeltaKind.REMOVED
        assert editor.get("b") is None
        assert len(editor) == 2

    def test_remove_when_unknown_id_then_none(self, editor):
        assert editor.remove("nope") is None
        assert len(editor) == 3

    def test_toggle_when_called_then_status_flipped(self, editor):
        assert editor.toggle("b").mark.status is MarkStatus.CORRECT
        assert editor.toggle("b").mark.status is MarkStatus.INCORRECT

    def test_load_when_duplicate_id_then_nothing_inserted(self, editor):
        with pytest.raises(ValueError, match="Duplicate mark id"):
            editor.load([make_mark("d"), make_mark("a")])
        assert editor.get("d") is None

    def test_replace_page_when_called_then_other_pages_kept(self, editor):
        editor.replace_page(0, [make_mark("x", page_index=0)])
        assert [m.id for m in editor.query(0)] == ["x"]
        assert [m.id for m in editor.query(1)] == ["b"]

    def test_replace_page_when_mark_from_other_page_then_raises_error(self, editor):
        with pytest.raises(ValueError, match="do not belong"):
            editor.replace_page(0, [make_mark("x", page_index=1)])

    def test_clear_when_called_then_empty(self, editor):
        editor.clear()
        assert len(editor) == 0


class TestQueries:
    def test_query_when_page_then_arrival_order(self, editor):
        assert [m.id for m in editor.query(0)] == ["a", "c"]

    def test_snapshot_when_editor_changes_then_snapshot_unchanged(self, editor):
        snap = editor.snapshot()
        editor.remove("a")
        assert [m.id for m in snap] == ["a", "b", "c"]

    def test_counts_when_mixed_then_tallied(self, editor):
        counts = editor.counts()
        assert (counts.correct, counts.incorrect, counts.total) == (2, 1, 3)


class TestListeners:
    def test_subscribe_when_mutated_then_deltas_delivered(self, editor):
        seen = []
        unsubscribe = editor.subscribe(seen.append)
        editor.toggle("a")
        editor.remove("c")
        unsubscribe()
        editor.remove("a")
        assert [(d.kind, d.mark.id) for d in seen] == [
            (DeltaKind.UPDATED, "a"),
            (DeltaKind.REMOVED, "c"),
        ]

    def test_clear_when_called_then_removed_delta_per_mark(self, editor):
        seen = []
        editor.subscribe(seen.append)
        editor.clear()
        assert [(d.kind, d.mark.id) for d in seen] == [
            (DeltaKind.REMOVED, "a"),
            (DeltaKind.REMOVED, "b"),
            (DeltaKind.REMOVED, "c"),
        ]

    def test_clear_when_empty_then_no_deltas(self):
        editor = MarkEditor()
        seen = []
        editor.subscribe(seen.append)
        editor.clear()
        assert seen == []

    def test_toggle_when_listener_runs_then_lock_released(self, editor):
        """A listener handing work to another thread must not deadlock on the editor."""
        results = []

        def read_from_other_thread(delta):
            def reader():
                acquired = editor._lock.acquire(timeout=1)
                if acquired:
                    editor._lock.release()
                results.append((acquired, len(editor.snapshot()) if acquired else None))

            thread = threading.Thread(target=reader)
            thread.start()
            thread.join(timeout=5)

        editor.subscribe(read_from_other_thread)
        editor.toggle("a")
        assert results == [(True, 3)]
        assert editor.get("a").status is MarkStatus.INCORRECT


class TestConcurrency:
    def test_when_many_threads_add_then_no_mark_lost(self):
        editor = MarkEditor()

        def worker():
            for _ in range(50):
                editor.add(1, 1, 0)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(editor) == 400
        assert len({m.id for m in editor.snapshot()}) == 400
