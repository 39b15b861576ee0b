"""Blocking wait for a termination signal."""

from __future__ import annotations

import logging
import queue
import signal
from types import FrameType, TracebackType
from typing import Any

logger = logging.getLogger(__name__)

TERMINATION_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class SignalWaiter:
    """Hand the first termination signal over to a blocked :meth:`wait`.

    Handlers are installed on ``__enter__`` and the previous ones restored
    on ``__exit__``.  A signal that arrives between installation and
    :meth:`wait` is kept in the queue, so it is never missed.

    Only the first signal is handed over.  A second one restores the
    previous handlers and re-raises the signal, so an operator can still
    abort a report that hangs before :meth:`wait` is reached.
    """

    def __init__(self, signals: tuple[signal.Signals, ...] = TERMINATION_SIGNALS) -> None:
        self._signals = signals
        # SimpleQueue.put is reentrant, so it is safe to call from a handler
        # that interrupts the main thread inside get().
        self._received: queue.SimpleQueue[signal.Signals] = queue.SimpleQueue()
        self._signalled = False
        self._previous: dict[signal.Signals, Any] = {}

    def _handle(self, signum: int, _frame: FrameType | None) -> None:
        sig = signal.Signals(signum)
        if self._signalled:
            logger.warning("received %s again, aborting", sig.name)
            self._restore()
            signal.raise_signal(sig)
            return
        self._signalled = True
        self._received.put(sig)

    def _restore(self) -> None:
        for sig, previous in self._previous.items():
            signal.signal(sig, previous)
        self._previous.clear()

    def __enter__(self) -> SignalWaiter:
        for sig in self._signals:
            self._previous[sig] = signal.signal(sig, self._handle)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._restore()

    def wait(self) -> signal.Signals:
        """Block until a signal arrives and return it."""
        return self._received.get()
