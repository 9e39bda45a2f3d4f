"""Debounced category suggestions for free-text expense descriptions."""

import asyncio
import logging
from typing import Optional

from config import Settings, get_settings
from schemas.advisory import CategorySuggestion, Success
from services.transactions import DEFAULT_CATEGORY

logger = logging.getLogger(__name__)


class DebouncedSuggestionController:
    """Turns keystrokes on one input field into settled suggestion requests.

    A request is issued only after ``delay`` seconds without further input.
    Every issuance takes the next sequence number; a response is applied only
    if its number is still the latest, so a superseded response is dropped no
    matter when it arrives. Issued requests are never aborted, only ignored.
    """

    def __init__(
        self,
        gateway,
        settings: Optional[Settings] = None,
        delay: Optional[float] = None,
        min_length: Optional[int] = None,
    ):
        settings = settings or get_settings()
        self.gateway = gateway
        self.delay = delay if delay is not None else settings.suggestion_debounce_ms / 1000
        self.min_length = min_length if min_length is not None else settings.suggestion_min_length

        self.text = ""
        self.suggestion: Optional[str] = None
        self.is_suggesting = False
        self._seq = 0
        self._timer: Optional[asyncio.Task] = None
        self._outstanding: set[asyncio.Task] = set()

    def on_input_change(self, text: str) -> None:
        self.text = text
        self._cancel_timer()

        if len(text.strip()) < self.min_length:
            self._invalidate()
            return

        self.is_suggesting = True
        self._timer = asyncio.get_running_loop().create_task(self._wait_then_issue(text))

    def commit_category(self) -> str:
        """Category to store on the transaction being added."""
        return self.suggestion or DEFAULT_CATEGORY

    def reset(self) -> None:
        self.text = ""
        self._cancel_timer()
        self._invalidate()

    async def settle(self) -> None:
        """Wait for the pending timer and every outstanding request to finish."""
        if self._timer is not None:
            try:
                await self._timer
            except asyncio.CancelledError:
                pass
        while self._outstanding:
            await asyncio.gather(*list(self._outstanding))

    def close(self) -> None:
        self._cancel_timer()
        self._invalidate()

    # ── internals ──

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    def _invalidate(self) -> None:
        self._seq += 1
        self.suggestion = None
        self.is_suggesting = False

    async def _wait_then_issue(self, text: str) -> None:
        await asyncio.sleep(self.delay)
        self._issue(text)

    def _issue(self, text: str) -> None:
        self._seq += 1
        seq = self._seq
        task = asyncio.get_running_loop().create_task(self._request(seq, text))
        self._outstanding.add(task)
        task.add_done_callback(self._outstanding.discard)
        logger.debug("Suggestion request #%d issued", seq)

    async def _request(self, seq: int, text: str) -> None:
        result = await self.gateway.submit(CategorySuggestion(description=text.strip()))
        if seq != self._seq:
            logger.debug("Discarding stale suggestion #%d (latest is #%d)", seq, self._seq)
            return
        self.suggestion = result.payload.category if isinstance(result, Success) else None
        self.is_suggesting = False
