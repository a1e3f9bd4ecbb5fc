"""Periodic heartbeat push to a remote monitoring URL.

On every tick the sender checks LivenessState. While the subject is
alive it issues one GET to the push URL (Uptime Kuma style push monitor)
and classifies the outcome; while it is not alive the tick is skipped
without any network traffic.

Outcome precedence:
    transport error > non-2xx status > negative acknowledgement > success

A 2xx response whose body is not an acknowledgement counts as success.
Failures are never retried; the next attempt is the next tick.

Scheduling:
    Ticks are spaced by the interval on the event loop clock, not by
    completion of the previous send. Each tick runs as its own task so a
    hung request (bounded by the HTTP timeout) never delays later ticks.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any

import httpx
from pydantic import ValidationError

from livebeat.api.models.push import PushAcknowledgement, parse_acknowledgement
from livebeat.application.ports.time_authority import TimeAuthorityProtocol
from livebeat.domain.errors.heartbeat import PushFailedError
from livebeat.domain.models.liveness_state import LivenessState
from livebeat.infrastructure.monitoring.error_dispatcher import ErrorDispatcher
from livebeat.infrastructure.observability.logging import get_logger_for_service


class PushSender:
    """Background task pushing heartbeats while the subject is alive.

    Usage:
        sender = PushSender(
            push_url="https://status.example.com/api/push/abc123",
            interval_seconds=60,
            timeout_seconds=59,
            liveness=liveness,
            dispatcher=ErrorDispatcher(on_error),
            time_authority=SystemTimeAuthority(),
        )
        sender.start()  # inside a running event loop
        ...
        await sender.aclose()
    """

    def __init__(
        self,
        *,
        push_url: str,
        interval_seconds: float,
        timeout_seconds: float,
        liveness: LivenessState,
        dispatcher: ErrorDispatcher,
        time_authority: TimeAuthorityProtocol,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the push sender. Nothing runs until start().

        Args:
            push_url: URL to GET on every tick while alive.
            interval_seconds: Spacing between ticks.
            timeout_seconds: Bound on each push request.
            liveness: Shared liveness state.
            dispatcher: Delivers push errors to the error observer.
            time_authority: Clock used to time each send.
            transport: Optional httpx transport (tests use MockTransport).
        """
        self._push_url = push_url
        self._interval = interval_seconds
        self._timeout = timeout_seconds
        self._liveness = liveness
        self._dispatcher = dispatcher
        self._time = time_authority
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._task: asyncio.Task[None] | None = None
        self._in_flight: set[asyncio.Task[None]] = set()
        self._tick_count = 0
        self._log = get_logger_for_service("push_sender").bind(push_url=push_url)

    @property
    def running(self) -> bool:
        """Check if the ticker task is running."""
        return self._task is not None and not self._task.done()

    @property
    def tick_count(self) -> int:
        """Get the number of ticks scheduled so far."""
        return self._tick_count

    def start(self) -> None:
        """Start the ticker on the running event loop.

        Note:
            Calling start multiple times is safe (idempotent).

        Raises:
            RuntimeError: If no event loop is running.
        """
        if self._task is not None:
            return

        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run_loop(), name="livebeat-push-ticker")
        self._log.info(
            "push_sender_started",
            interval_seconds=self._interval,
            timeout_seconds=self._timeout,
        )

    async def aclose(self) -> None:
        """Stop ticking, cancel in-flight sends, and close the HTTP client."""
        tasks: list[asyncio.Task[None]] = list(self._in_flight)
        if self._task is not None:
            tasks.append(self._task)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._in_flight.clear()
        self._task = None

        if self._client is not None:
            await self._client.aclose()
            self._client = None
        self._log.info("push_sender_stopped", ticks=self._tick_count)

    async def tick(self) -> None:
        """Run one tick: push if alive, report the error if the push fails."""
        if not self._liveness.is_alive():
            self._log.debug("push_skipped_not_alive")
            return

        error = await self.send_once()
        if error is not None:
            self._dispatcher.dispatch(error)

    async def send_once(self) -> PushFailedError | None:
        """Send one heartbeat and classify the result.

        Returns:
            None on success, otherwise the classified PushFailedError.
        """
        started = self._time.monotonic()
        try:
            response = await self._get_client().get(self._push_url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            return self._failed(str(exc) or type(exc).__name__, started)

        if not response.is_success:
            return self._failed(
                f"{response.status_code} {response.reason_phrase}".strip(), started
            )

        try:
            ack: PushAcknowledgement | None = parse_acknowledgement(response.content)
        except ValidationError:
            ack = None

        if ack is not None and not ack.accepted:
            return self._failed(ack.message, started)

        self._log.debug(
            "push_succeeded",
            status_code=response.status_code,
            acknowledged=ack is not None,
            elapsed_seconds=self._time.monotonic() - started,
        )
        return None

    def _failed(self, detail: str, started: float) -> PushFailedError:
        error = PushFailedError(self._push_url, detail)
        self._log.warning(
            "push_failed",
            detail=detail,
            elapsed_seconds=self._time.monotonic() - started,
        )
        return error

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def _run_loop(self) -> None:
        """Internal ticker loop.

        Runs until cancelled. Missed ticks are dropped rather than
        replayed in a burst.
        """
        loop = asyncio.get_running_loop()
        next_tick = loop.time() + self._interval
        while True:
            await asyncio.sleep(max(0.0, next_tick - loop.time()))
            next_tick += self._interval
            now = loop.time()
            while next_tick <= now:
                next_tick += self._interval
            self._tick_count += 1
            self._spawn(self.tick())

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro, name="livebeat-push-tick")
        self._in_flight.add(task)
        task.add_done_callback(self._on_tick_done)

    def _on_tick_done(self, task: asyncio.Task[None]) -> None:
        self._in_flight.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._log.error(
                "push_tick_crashed",
                error=str(exc) or type(exc).__name__,
                exc_info=exc,
            )
