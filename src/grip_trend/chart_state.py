"""Per-session chart state: scroll position, initialization, stable y domain."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

_LOG = logging.getLogger(__name__)

NO_HASH = 0


@dataclass
class _Deferred:
    generation: int
    apply: Callable[[], None]
    guarded: bool = True


@dataclass
class ChartState:
    """Session-scoped state of one chart view.

    Writes that happen while a render pass reads the state
    (``update_stable_domain`` and the ``has_initialized`` flip) are queued
    and only applied by :meth:`flush`, which the render loop calls after
    the pass completes. Each reset bumps ``generation``; queued domain
    updates of an older generation are dropped on flush.
    """

    scroll_position: datetime = field(default_factory=datetime.now)
    has_initialized: bool = False
    stable_y_domain: tuple[float, float] | None = None
    last_visible_data_hash: int = NO_HASH
    generation: int = 0
    _pending: list[_Deferred] = field(default_factory=list, repr=False)

    @property
    def has_pending(self) -> bool:
        """Whether deferred updates are waiting for the next flush."""
        return bool(self._pending)

    def initialize_scroll_position(self, position: datetime) -> None:
        """Place the first scroll position; no-op once initialized."""
        if self.has_initialized:
            return
        self.scroll_position = position
        self._defer(self._mark_initialized, guarded=False)

    def reset_for_period_change(self, position: datetime) -> None:
        """Re-anchor on the right edge after the period selector changed."""
        self._invalidate("period change")
        self.has_initialized = False
        self.scroll_position = position
        self._defer(self._mark_initialized, guarded=False)

    def reset_for_new_data(self, position: datetime) -> None:
        """Scroll to the newest data and drop the frozen domain."""
        self._invalidate("new data")
        self.scroll_position = position

    def reset_for_scale_change(self) -> None:
        """Drop the frozen domain after switching daily/weekly buckets."""
        self._invalidate("scale change")

    def update_stable_domain(self, domain: tuple[float, float], data_hash: int) -> None:
        """Queue a new stable y domain together with the hash it belongs to."""

        def _store() -> None:
            self.stable_y_domain = domain
            self.last_visible_data_hash = data_hash

        self._defer(_store)

    def flush(self) -> int:
        """Apply queued updates of the current generation.

        Returns:
            Number of updates applied; stale ones are discarded.
        """
        pending, self._pending = self._pending, []
        applied = 0
        for item in pending:
            if item.guarded and item.generation != self.generation:
                continue
            item.apply()
            applied += 1
        if applied != len(pending):
            _LOG.debug("dropped %d stale chart updates", len(pending) - applied)
        return applied

    def _defer(self, apply: Callable[[], None], guarded: bool = True) -> None:
        self._pending.append(
            _Deferred(generation=self.generation, apply=apply, guarded=guarded)
        )

    def _mark_initialized(self) -> None:
        self.has_initialized = True

    def _invalidate(self, reason: str) -> None:
        self.generation += 1
        self.stable_y_domain = None
        self.last_visible_data_hash = NO_HASH
        _LOG.debug("chart state reset (%s), generation %d", reason, self.generation)
