"""Fire-and-forget delivery of runtime errors to the error observer.

Push and listener errors are handed to the observer on the event loop's
default executor, so neither a slow observer nor one that raises can
delay the task that produced the error.
"""

from __future__ import annotations

import asyncio

import structlog

from livebeat.application.ports.error_observer import ErrorObserver

log = structlog.get_logger()


class ErrorDispatcher:
    """Delivers each runtime error to an optional observer exactly once.

    Attributes:
        _observer: The observer, or None to drop errors after logging.
        _pending: Observer invocations not yet finished.
    """

    def __init__(self, observer: ErrorObserver | None) -> None:
        """Initialize the dispatcher.

        Args:
            observer: Callable receiving errors. None disables delivery.
        """
        self._observer = observer
        self._pending: set[asyncio.Future[None]] = set()

    @property
    def pending_count(self) -> int:
        """Get the number of observer calls still running."""
        return len(self._pending)

    def dispatch(self, error: Exception) -> None:
        """Schedule delivery of an error without waiting for it.

        Must be called from a coroutine running on the event loop.

        Args:
            error: The error to deliver.
        """
        if self._observer is None:
            log.debug("error_dropped_no_observer", error=str(error))
            return

        loop = asyncio.get_running_loop()
        future = loop.run_in_executor(None, self._invoke, error)
        self._pending.add(future)
        future.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for every scheduled observer call to finish."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    def _invoke(self, error: Exception) -> None:
        assert self._observer is not None
        try:
            self._observer(error)
        except Exception as exc:
            log.error(
                "error_observer_failed",
                error=str(error),
                observer_error=str(exc) or type(exc).__name__,
            )
