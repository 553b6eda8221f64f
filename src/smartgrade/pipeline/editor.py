"""
Module: pipeline.editor

Purpose:
    The authoritative, mutable set of marks for a grading session.
    Reviewers add, update, toggle and remove marks here; the report
    renderer reads an immutable snapshot taken right before export.

Key Classes:
    - MarkEditor: Single-writer mark collection
    - MarkDelta: Change notification emitted after each mutation

Design:
    - Mutations hold a re-entrant lock, so no partial mutation is ever
      observable by another thread.
    - Readers receive tuples, never the live list.
    - update()/remove() on an unknown id are silent no-ops: a stale view
      may race a removal.
    - The editor does NOT validate coordinate ranges. Callers clamp at the
      interaction boundary (core.utils.geometry).

Dependencies:
    - threading (std)

Used By:
    - pipeline.session: Review stage
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional

from smartgrade.core.models import Mark, MarkCounts, MarkStatus

logger = logging.getLogger(__name__)


class DeltaKind(str, Enum):
    ADDED = "added"
    UPDATED = "updated"
    REMOVED = "removed"


@dataclass(frozen=True)
class MarkDelta:
    """One committed change to the mark set."""

    kind: DeltaKind
    mark: Mark


MarkListener = Callable[[MarkDelta], None]


def _manual_mark_id() -> str:
    return f"manual-{uuid.uuid4().hex}"


class MarkEditor:
    """
    Live mark collection for one session.

    Example:
        >>> editor = MarkEditor()
        >>> mark = editor.add(12.5, 40.0, page_index=0)
        >>> editor.toggle(mark.id).mark.status
        <MarkStatus.INCORRECT: 'incorrect'>
        >>> editor.query(0)[0].id == mark.id
        True
    """

    def __init__(self, marks: Iterable[Mark] = ()) -> None:
        self._lock = threading.RLock()
        self._marks: List[Mark] = []
        self._listeners: List[MarkListener] = []
        if marks:
            self.load(marks)

    # ─────────────────────────────────────────────────────────────────────────
    # Mutations
    # ─────────────────────────────────────────────────────────────────────────

    def add(self, x: float, y: float, page_index: int) -> Mark:
        """
        Add a manual mark at (x, y) percent on a page.

        New marks are CORRECT with no text. x/y must already be clamped.
        """
        mark = Mark(
            id=_manual_mark_id(),
            x=x,
            y=y,
            status=MarkStatus.CORRECT,
            page_index=page_index,
        )
        with self._lock:
            self._marks.append(mark)
        logger.debug(f"Added mark {mark.id} on page {page_index} at ({x:.1f}, {y:.1f})")
        self._emit(MarkDelta(DeltaKind.ADDED, mark))
        return mark

    def update(self, mark: Mark) -> Optional[MarkDelta]:
        """
        Replace the mark with the same id.

        Returns:
            The delta, or None when no mark has that id (set unchanged)
        """
        with self._lock:
            index = self._index_of(mark.id)
            if index is None:
                logger.debug(f"Ignoring update for unknown mark {mark.id}")
                return None
            self._marks[index] = mark
        delta = MarkDelta(DeltaKind.UPDATED, mark)
        self._emit(delta)
        return delta

    def remove(self, mark_id: str) -> Optional[MarkDelta]:
        """Delete a mark by id. Returns None when it was not present."""
        with self._lock:
            index = self._index_of(mark_id)
            if index is None:
                return None
            removed = self._marks.pop(index)
        delta = MarkDelta(DeltaKind.REMOVED, removed)
        self._emit(delta)
        return delta

    def toggle(self, mark_id: str) -> Optional[MarkDelta]:
        """Flip a mark between correct and incorrect."""
        with self._lock:
            index = self._index_of(mark_id)
            if index is None:
                return None
            mark = self._marks[index]
        return self.update(mark.toggled())

    def load(self, marks: Iterable[Mark]) -> int:
        """
        Bulk-insert marks (e.g. from the annotation service).

        Raises:
            ValueError: If any id is already present or repeated in the batch.
                Nothing is inserted in that case.
        """
        incoming = list(marks)
        with self._lock:
            seen = {m.id for m in self._marks}
            for mark in incoming:
                if mark.id in seen:
                    raise ValueError(f"Duplicate mark id: {mark.id}")
                seen.add(mark.id)
            self._marks.extend(incoming)
        for mark in incoming:
            self._emit(MarkDelta(DeltaKind.ADDED, mark))
        return len(incoming)

    def replace_page(self, page_index: int, marks: Iterable[Mark]) -> None:
        """
        Swap all marks of one page for a replacement set.

        Used when a page is reconciled again. The incoming marks must
        belong to ``page_index``.
        """
        incoming = list(marks)
        wrong = [m.id for m in incoming if m.page_index != page_index]
        if wrong:
            raise ValueError(f"Marks {wrong} do not belong to page {page_index}")

        with self._lock:
            removed = [m for m in self._marks if m.page_index == page_index]
            kept = [m for m in self._marks if m.page_index != page_index]
            kept_ids = {m.id for m in kept}
            for mark in incoming:
                if mark.id in kept_ids:
                    raise ValueError(f"Duplicate mark id: {mark.id}")
                kept_ids.add(mark.id)
            self._marks = kept + incoming

        for mark in removed:
            self._emit(MarkDelta(DeltaKind.REMOVED, mark))
        for mark in incoming:
            self._emit(MarkDelta(DeltaKind.ADDED, mark))

    def clear(self) -> None:
        with self._lock:
            removed = self._marks
            self._marks = []
        for mark in removed:
            self._emit(MarkDelta(DeltaKind.REMOVED, mark))

    # ─────────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────────

    def get(self, mark_id: str) -> Optional[Mark]:
        with self._lock:
            index = self._index_of(mark_id)
            return None if index is None else self._marks[index]

    def query(self, page_index: int) -> tuple[Mark, ...]:
        """Marks of one page in arrival order."""
        with self._lock:
            return tuple(m for m in self._marks if m.page_index == page_index)

    def snapshot(self) -> tuple[Mark, ...]:
        """Immutable copy of every mark, taken before export."""
        with self._lock:
            return tuple(self._marks)

    def counts(self) -> MarkCounts:
        with self._lock:
            correct = sum(1 for m in self._marks if m.is_correct)
            return MarkCounts(correct=correct, incorrect=len(self._marks) - correct)

    def __len__(self) -> int:
        with self._lock:
            return len(self._marks)

    # ─────────────────────────────────────────────────────────────────────────
    # Listeners
    # ─────────────────────────────────────────────────────────────────────────

    def subscribe(self, listener: MarkListener) -> Callable[[], None]:
        """
        Register a listener for committed deltas.

        Returns:
            A callable that unsubscribes the listener
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _emit(self, delta: MarkDelta) -> None:
        for listener in list(self._listeners):
            listener(delta)

    def _index_of(self, mark_id: str) -> Optional[int]:
        for i, mark in enumerate(self._marks):
            if mark.id == mark_id:
                return i
        return None
