"""Study refresh bookkeeping: only the newest parse result is applied."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

from openingtrainer.core.models import Chapter
from openingtrainer.review.scheduler import reconcile_selected_chapters

_LOGGER = logging.getLogger(__name__)


class RefreshTracker:
    """Holds the current chapters of a study and the chapter selection.

    Each refresh calls :meth:`begin` for a request id and later hands the
    parsed chapters to :meth:`complete`. A result is applied only while its
    request is still the newest one started; results of superseded requests
    are dropped so the last refresh started wins.
    """

    __slots__ = (
        "_chapters",
        "_selected_names",
        "_next_request_id",
        "_pending_request_id",
        "_on_applied",
    )

    def __init__(
        self,
        chapters: Iterable[Chapter] = (),
        selected_names: Iterable[str] | None = None,
        *,
        on_applied: Callable[[tuple[Chapter, ...], list[str]], None] | None = None,
    ) -> None:
        self._chapters: tuple[Chapter, ...] = tuple(chapters)
        if selected_names is None:
            self._selected_names = [chapter.name for chapter in self._chapters]
        else:
            self._selected_names = list(selected_names)
        self._next_request_id = 0
        self._pending_request_id: int | None = None
        self._on_applied = on_applied

    @property
    def chapters(self) -> tuple[Chapter, ...]:
        return self._chapters

    @property
    def selected_names(self) -> list[str]:
        return list(self._selected_names)

    @property
    def is_pending(self) -> bool:
        return self._pending_request_id is not None

    def select(self, names: Iterable[str]) -> None:
        """Replace the selection, keeping only names of current chapters."""
        wanted = set(names)
        self._selected_names = [c.name for c in self._chapters if c.name in wanted]

    def begin(self) -> int:
        """Start a refresh and return its request id."""
        self._next_request_id += 1
        self._pending_request_id = self._next_request_id
        return self._pending_request_id

    def complete(self, request_id: int, chapters: Sequence[Chapter]) -> bool:
        """Apply *chapters* if *request_id* is still the newest request.

        Returns ``False`` (and changes nothing) for a superseded request.
        """
        if request_id != self._pending_request_id:
            _LOGGER.debug(
                "Discarding stale refresh %d (newest is %s)",
                request_id,
                self._pending_request_id,
            )
            return False
        self._pending_request_id = None
        self._selected_names = reconcile_selected_chapters(
            self._chapters, chapters, self._selected_names
        )
        self._chapters = tuple(chapters)
        _LOGGER.info(
            "Refreshed study: %d chapters, %d selected",
            len(self._chapters),
            len(self._selected_names),
        )
        if self._on_applied is not None:
            self._on_applied(self._chapters, self.selected_names)
        return True

    def cancel(self) -> None:
        """Forget the pending request; its result will be discarded."""
        self._pending_request_id = None
