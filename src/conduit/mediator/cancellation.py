# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit
"""
Cooperative cancellation for mediator dispatches.

A ``CancellationTokenSource`` owns the ability to cancel; the
``CancellationToken`` it hands out is a read-only view that handlers and
behaviors may consult. Nothing is interrupted: observing the token is up to
whoever holds it.
"""

from __future__ import annotations

import threading
from typing import Final

from conduit.mediator.errors import CancellationRequestedError


class CancellationToken:
    """Read-only view of a cancellation request."""

    __slots__ = ("_source",)

    def __init__(self, source: CancellationTokenSource | None) -> None:
        self._source = source

    @classmethod
    def none(cls) -> CancellationToken:
        """A token that is never cancelled."""
        return NONE

    @property
    def can_be_cancelled(self) -> bool:
        return self._source is not None

    @property
    def is_cancellation_requested(self) -> bool:
        return self._source is not None and self._source.is_cancellation_requested

    def raise_if_cancellation_requested(self) -> None:
        """Raise ``CancellationRequestedError`` if cancellation was requested."""
        if self.is_cancellation_requested:
            raise CancellationRequestedError(reason=self._source.reason)

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.is_cancellation_requested})"


class CancellationTokenSource:
    """Issues a token and signals cancellation to every holder of it."""

    def __init__(self) -> None:
        self._cancelled = threading.Event()
        self.reason: str | None = None
        self._token = CancellationToken(self)

    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def is_cancellation_requested(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self, reason: str | None = None) -> None:
        """Request cancellation. Later calls keep the first reason."""
        if not self._cancelled.is_set():
            self.reason = reason
            self._cancelled.set()


NONE: Final = CancellationToken(None)
