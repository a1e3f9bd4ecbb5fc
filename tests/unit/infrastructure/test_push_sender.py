"""Unit tests for PushSender.

Outbound requests go through httpx.MockTransport; time for liveness
decisions comes from FakeTimeAuthority.
"""

from __future__ import annotations

import asyncio
from datetime import timedelta

import httpx
import pytest
from structlog.testing import capture_logs

from livebeat.domain.errors.heartbeat import PushFailedError
from livebeat.domain.models.liveness_state import LivenessState
from livebeat.infrastructure.monitoring.error_dispatcher import ErrorDispatcher
from livebeat.infrastructure.monitoring.push_sender import PushSender
from tests.helpers import ErrorRecorder, FakeTimeAuthority

PUSH_URL = "http://push.test/api/push/abc123"


def _make_sender(
    handler: httpx.MockTransport | None,
    *,
    clock: FakeTimeAuthority,
    recorder: ErrorRecorder | None = None,
    interval_seconds: float = 60.0,
    alive: bool = True,
) -> tuple[PushSender, LivenessState]:
    liveness = LivenessState(timedelta(seconds=60), clock=clock.utcnow)
    if alive:
        liveness.report(clock.utcnow())
    sender = PushSender(
        push_url=PUSH_URL,
        interval_seconds=interval_seconds,
        timeout_seconds=1.0,
        liveness=liveness,
        dispatcher=ErrorDispatcher(recorder),
        time_authority=clock,
        transport=handler,
    )
    return sender, liveness


class TestSendOnce:
    """Tests for outcome classification of a single push."""

    @pytest.mark.asyncio
    async def test_ok_ack_is_success(self, fake_time_authority: FakeTimeAuthority) -> None:
        """Test 200 with ok=true is a success."""
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"ok": True})
        )
        sender, _ = _make_sender(transport, clock=fake_time_authority)

        assert await sender.send_once() is None
        await sender.aclose()

    @pytest.mark.asyncio
    async def test_negative_ack_is_error_with_message(
        self, fake_time_authority: FakeTimeAuthority
    ) -> None:
        """Test 200 with ok=false fails with the acknowledgement message."""
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"ok": False, "msg": "bad"})
        )
        sender, _ = _make_sender(transport, clock=fake_time_authority)

        error = await sender.send_once()

        assert isinstance(error, PushFailedError)
        assert error.detail == "bad"
        assert str(error) == f"push to '{PUSH_URL}' failed: bad"
        await sender.aclose()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("content", "detail"),
        [
            (b"{}", ""),
            (b"null", ""),
            (b'{"status": "up"}', ""),
            (b'{"msg": "paused"}', "paused"),
            (b'{"ok": null, "msg": null}', ""),
        ],
    )
    async def test_ack_without_ok_is_negative(
        self, fake_time_authority: FakeTimeAuthority, content: bytes, detail: str
    ) -> None:
        """Test a JSON object lacking ok=true is a negative acknowledgement."""
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, content=content)
        )
        sender, _ = _make_sender(transport, clock=fake_time_authority)

        error = await sender.send_once()

        assert isinstance(error, PushFailedError)
        assert error.detail == detail
        await sender.aclose()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "content",
        [
            b"",
            b"OK",
            b"[]",
            b"42",
            b'"ok"',
            b"<html></html>",
            b'{"ok": "false"}',
            b'{"ok": 0}',
            b'{"ok": false, "msg": 7}',
        ],
    )
    async def test_unparseable_body_is_success(
        self, fake_time_authority: FakeTimeAuthority, content: bytes
    ) -> None:
        """Test a 2xx body that is not an acknowledgement counts as success."""
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, content=content)
        )
        sender, _ = _make_sender(transport, clock=fake_time_authority)

        assert await sender.send_once() is None
        await sender.aclose()

    @pytest.mark.asyncio
    async def test_non_2xx_status_is_error(
        self, fake_time_authority: FakeTimeAuthority
    ) -> None:
        """Test a non-2xx status fails with the status text."""
        transport = httpx.MockTransport(lambda request: httpx.Response(503))
        sender, _ = _make_sender(transport, clock=fake_time_authority)

        error = await sender.send_once()

        assert isinstance(error, PushFailedError)
        assert error.detail == "503 Service Unavailable"
        await sender.aclose()

    @pytest.mark.asyncio
    async def test_status_takes_precedence_over_ack(
        self, fake_time_authority: FakeTimeAuthority
    ) -> None:
        """Test a bad status wins over a negative acknowledgement body."""
        transport = httpx.MockTransport(
            lambda request: httpx.Response(500, json={"ok": False, "msg": "bad"})
        )
        sender, _ = _make_sender(transport, clock=fake_time_authority)

        error = await sender.send_once()

        assert error is not None
        assert error.detail == "500 Internal Server Error"
        await sender.aclose()

    @pytest.mark.asyncio
    async def test_transport_error(self, fake_time_authority: FakeTimeAuthority) -> None:
        """Test a connection failure becomes a PushFailedError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        sender, _ = _make_sender(httpx.MockTransport(handler), clock=fake_time_authority)

        error = await sender.send_once()

        assert isinstance(error, PushFailedError)
        assert "connection refused" in error.detail
        await sender.aclose()

    @pytest.mark.asyncio
    async def test_timeout_is_transport_error(
        self, fake_time_authority: FakeTimeAuthority
    ) -> None:
        """Test a timeout is reported like any transport failure."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        sender, _ = _make_sender(httpx.MockTransport(handler), clock=fake_time_authority)

        error = await sender.send_once()

        assert error is not None
        assert "timed out" in error.detail
        await sender.aclose()

    @pytest.mark.asyncio
    async def test_redirects_are_followed(
        self, fake_time_authority: FakeTimeAuthority
    ) -> None:
        """Test the final response after redirects decides the outcome."""
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.path)
            if request.url.path == "/api/push/abc123":
                return httpx.Response(302, headers={"Location": "/api/push/final"})
            return httpx.Response(200, json={"ok": False, "msg": "monitor paused"})

        sender, _ = _make_sender(httpx.MockTransport(handler), clock=fake_time_authority)

        error = await sender.send_once()

        assert seen == ["/api/push/abc123", "/api/push/final"]
        assert error is not None
        assert error.detail == "monitor paused"
        await sender.aclose()

    @pytest.mark.asyncio
    async def test_uses_get(self, fake_time_authority: FakeTimeAuthority) -> None:
        """Test the push is a GET to the configured URL."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"ok": True})

        sender, _ = _make_sender(httpx.MockTransport(handler), clock=fake_time_authority)

        await sender.send_once()

        assert len(requests) == 1
        assert requests[0].method == "GET"
        assert str(requests[0].url) == PUSH_URL
        await sender.aclose()

    @pytest.mark.asyncio
    async def test_failure_is_logged(self, fake_time_authority: FakeTimeAuthority) -> None:
        """Test a failed push emits a push_failed warning."""
        transport = httpx.MockTransport(lambda request: httpx.Response(404))
        sender, _ = _make_sender(transport, clock=fake_time_authority)

        with capture_logs() as logs:
            await sender.send_once()

        failures = [entry for entry in logs if entry["event"] == "push_failed"]
        assert len(failures) == 1
        assert failures[0]["log_level"] == "warning"
        assert failures[0]["detail"] == "404 Not Found"
        await sender.aclose()


class TestTick:
    """Tests for the liveness gate and error delivery of a tick."""

    @pytest.mark.asyncio
    async def test_not_alive_skips_request(
        self, fake_time_authority: FakeTimeAuthority, error_recorder: ErrorRecorder
    ) -> None:
        """Test no request is issued while not alive."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"ok": True})

        sender, _ = _make_sender(
            httpx.MockTransport(handler),
            clock=fake_time_authority,
            recorder=error_recorder,
            alive=False,
        )

        await sender.tick()

        assert requests == []
        assert error_recorder.errors == []
        await sender.aclose()

    @pytest.mark.asyncio
    async def test_expired_report_skips_request(
        self, fake_time_authority: FakeTimeAuthority
    ) -> None:
        """Test a report older than the threshold stops pushes."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"ok": True})

        sender, _ = _make_sender(httpx.MockTransport(handler), clock=fake_time_authority)

        await sender.tick()
        fake_time_authority.advance(seconds=60)
        await sender.tick()

        assert len(requests) == 1
        await sender.aclose()

    @pytest.mark.asyncio
    async def test_negative_ack_fires_one_callback_per_tick(
        self, fake_time_authority: FakeTimeAuthority, error_recorder: ErrorRecorder
    ) -> None:
        """Test each failing tick produces exactly one callback."""
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"ok": False, "msg": "bad"})
        )
        sender, _ = _make_sender(
            transport, clock=fake_time_authority, recorder=error_recorder
        )

        await sender.tick()
        await sender.tick()
        errors = await error_recorder.wait_for(2)
        await asyncio.sleep(0.05)

        assert len(error_recorder.errors) == 2
        assert all("bad" in str(error) for error in errors)
        await sender.aclose()

    @pytest.mark.asyncio
    async def test_positive_ack_fires_no_callback(
        self, fake_time_authority: FakeTimeAuthority, error_recorder: ErrorRecorder
    ) -> None:
        """Test a successful push produces no callback."""
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"ok": True})
        )
        sender, _ = _make_sender(
            transport, clock=fake_time_authority, recorder=error_recorder
        )

        await sender.tick()
        await asyncio.sleep(0.05)

        assert error_recorder.errors == []
        await sender.aclose()


class TestTicker:
    """Tests for the periodic schedule."""

    @pytest.mark.asyncio
    async def test_pushes_periodically(self, fake_time_authority: FakeTimeAuthority) -> None:
        """Test the ticker issues one push per interval while alive."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"ok": True})

        sender, _ = _make_sender(
            httpx.MockTransport(handler),
            clock=fake_time_authority,
            interval_seconds=0.05,
        )

        sender.start()
        assert sender.running
        await asyncio.sleep(0.32)
        await sender.aclose()

        assert 3 <= len(requests) <= 7
        assert not sender.running

    @pytest.mark.asyncio
    async def test_slow_send_does_not_delay_ticks(
        self, fake_time_authority: FakeTimeAuthority
    ) -> None:
        """Test ticks keep firing while earlier sends are still in flight."""
        started: list[float] = []

        async def handler(request: httpx.Request) -> httpx.Response:
            started.append(asyncio.get_running_loop().time())
            await asyncio.sleep(1.0)
            return httpx.Response(200, json={"ok": True})

        sender, _ = _make_sender(
            httpx.MockTransport(handler),
            clock=fake_time_authority,
            interval_seconds=0.05,
        )

        sender.start()
        await asyncio.sleep(0.32)
        await sender.aclose()

        assert sender.tick_count >= 3
        assert len(started) >= 3

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self, fake_time_authority: FakeTimeAuthority) -> None:
        """Test a second start does not create a second ticker."""
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"ok": True})
        )
        sender, _ = _make_sender(
            transport, clock=fake_time_authority, interval_seconds=60
        )

        sender.start()
        first_task = sender._task
        sender.start()

        assert sender._task is first_task
        await sender.aclose()

    def test_start_requires_running_loop(
        self, fake_time_authority: FakeTimeAuthority
    ) -> None:
        """Test start outside an event loop raises RuntimeError."""
        sender, _ = _make_sender(None, clock=fake_time_authority)

        with pytest.raises(RuntimeError):
            sender.start()
