from __future__ import annotations

import asyncio
import logging
from typing import List, Sequence

from pokeapi_live import CandidateEntry
from settings import DEFAULT_BLUR_DELAY

logger = logging.getLogger(__name__)


def filter_candidates(candidates: Sequence[CandidateEntry], query_text: str) -> List[CandidateEntry]:
    """Return candidates whose name starts with ``query_text``, ignoring case, in index order."""
    if not query_text:
        return []
    prefix = query_text.lower()
    return [c for c in candidates if c.name.lower().startswith(prefix)]


class SuggestionPanel:
    """Hidden/Visible state of the autocomplete dropdown.

    Blur does not hide the panel right away: the hide runs after ``blur_delay``
    so a click on a suggestion lands first. Any focus, text change or
    selection cancels the pending hide.
    """

    def __init__(self, blur_delay: float = DEFAULT_BLUR_DELAY) -> None:
        self.blur_delay = blur_delay
        self.visible = False
        self._pending_hide: asyncio.TimerHandle | None = None

    @property
    def hide_pending(self) -> bool:
        return self._pending_hide is not None

    def show(self) -> None:
        self.cancel_pending_hide()
        self.visible = True

    def hide(self) -> None:
        self.cancel_pending_hide()
        self.visible = False

    def schedule_hide(self) -> None:
        # Must be called from the event loop thread.
        loop = asyncio.get_running_loop()
        self.cancel_pending_hide()
        self._pending_hide = loop.call_later(self.blur_delay, self._hide_after_blur)

    def cancel_pending_hide(self) -> None:
        if self._pending_hide is not None:
            self._pending_hide.cancel()
            self._pending_hide = None

    def _hide_after_blur(self) -> None:
        self._pending_hide = None
        self.visible = False
        logger.debug("Suggestions hidden after blur")

    def should_render(self, query_text: str, matches: Sequence[CandidateEntry]) -> bool:
        return self.visible and bool(query_text) and bool(matches)
