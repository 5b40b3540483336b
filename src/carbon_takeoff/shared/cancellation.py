"""Cooperative cancellation for long-running retrieval runs."""
from __future__ import annotations

import asyncio


class CancellationToken:
    """Cancellation signal checked between batches.

    The caller keeps a reference and calls ``cancel()``; workers poll
    ``cancelled`` before issuing the next outbound request.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None

    def cancel(self, reason: str | None = None) -> None:
        """Signal cancellation."""
        self._reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Whether cancellation was requested."""
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        """Optional reason given by the caller."""
        return self._reason
