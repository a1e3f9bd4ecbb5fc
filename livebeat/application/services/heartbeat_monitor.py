"""HeartbeatMonitor application service.

The monitor owns the validated configuration, the shared LivenessState,
and the two optional background outputs:

    report_alive(at)
      └─ LivenessState.report()          # max(last_alive, at) under lock

    start()                              # first call only
      ├─ PushSender.start()              # if push_url configured
      └─ HealthServer.start()            # if port configured

State machine:
    Unstarted -> Running. start() transitions once; later calls are no-ops.
    aclose() stops the background tasks for shutdown but does not return
    the monitor to Unstarted.

Runtime errors from either output go to the configured error observer
and never back to start() or report_alive().
"""

from __future__ import annotations

import asyncio
import threading
from datetime import datetime, timedelta

import httpx
import structlog

from livebeat.application.ports.error_observer import ErrorObserver
from livebeat.application.ports.time_authority import TimeAuthorityProtocol
from livebeat.config.heartbeat_config import HeartbeatConfig
from livebeat.domain.models.liveness_state import LivenessState
from livebeat.infrastructure.adapters.system_time_authority import SystemTimeAuthority
from livebeat.infrastructure.monitoring.error_dispatcher import ErrorDispatcher
from livebeat.infrastructure.monitoring.health_server import HealthServer
from livebeat.infrastructure.monitoring.push_sender import PushSender

logger = structlog.get_logger()


class HeartbeatMonitor:
    """Façade tracking liveness and emitting heartbeats.

    Example:
        >>> monitor = HeartbeatMonitor(
        ...     HeartbeatConfig(
        ...         heartbeat_interval_seconds=60,
        ...         liveness_threshold_seconds=120,
        ...         push_url="https://status.example.com/api/push/abc123",
        ...     )
        ... )
        >>> monitor.report_alive()
        >>> monitor.start()  # inside a running event loop

    Attributes:
        config: The validated configuration.
    """

    def __init__(
        self,
        config: HeartbeatConfig,
        *,
        time_authority: TimeAuthorityProtocol | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the monitor. No sockets or tasks are created.

        Configuration is validated when the HeartbeatConfig is built, so
        an invalid configuration never reaches this point.

        Args:
            config: Validated heartbeat configuration.
            time_authority: Clock for liveness decisions. Defaults to the
                system clock.
            transport: Optional httpx transport for pushes.
        """
        self.config = config
        self._time = time_authority or SystemTimeAuthority()
        self._lock = threading.Lock()
        self._started = False
        self._liveness = LivenessState(
            timedelta(seconds=config.liveness_threshold_seconds),
            clock=self._time.utcnow,
            lock=self._lock,
        )
        self._dispatcher = ErrorDispatcher(config.on_error)

        self._push_sender: PushSender | None = None
        if config.push_enabled:
            assert config.push_url is not None
            self._push_sender = PushSender(
                push_url=config.push_url,
                interval_seconds=config.heartbeat_interval_seconds,
                timeout_seconds=config.effective_http_timeout_seconds,
                liveness=self._liveness,
                dispatcher=self._dispatcher,
                time_authority=self._time,
                transport=transport,
            )

        self._health_server: HealthServer | None = None
        if config.server_enabled:
            assert config.port is not None
            self._health_server = HealthServer(
                host=config.host,
                port=config.port,
                liveness=self._liveness,
                dispatcher=self._dispatcher,
            )

    @classmethod
    def from_environment(
        cls,
        on_error: ErrorObserver | None = None,
        *,
        time_authority: TimeAuthorityProtocol | None = None,
    ) -> "HeartbeatMonitor":
        """Create a monitor from HEARTBEAT_* environment variables.

        Args:
            on_error: Optional observer for push and listener errors.
            time_authority: Optional clock override.

        Returns:
            An unstarted HeartbeatMonitor.

        Raises:
            HeartbeatConfigurationError: If the environment is invalid.
        """
        return cls(
            HeartbeatConfig.from_environment(on_error=on_error),
            time_authority=time_authority,
        )

    @property
    def started(self) -> bool:
        """Check if start() has taken effect."""
        with self._lock:
            return self._started

    @property
    def last_alive(self) -> datetime:
        """Get the most recent accepted liveness report."""
        return self._liveness.last_alive

    @property
    def push_sender(self) -> PushSender | None:
        """Get the push sender, or None if pushing is disabled."""
        return self._push_sender

    @property
    def health_server(self) -> HealthServer | None:
        """Get the health listener, or None if it is disabled."""
        return self._health_server

    def start(self) -> None:
        """Launch the configured background outputs exactly once.

        Subsequent calls, including concurrent ones, are no-ops.

        Raises:
            RuntimeError: If called without a running event loop. The
                monitor stays unstarted in that case.
        """
        asyncio.get_running_loop()

        with self._lock:
            if self._started:
                return
            self._started = True

        # Outputs log on start; the lock also guards last_alive.
        if self._push_sender is not None:
            self._push_sender.start()
        if self._health_server is not None:
            self._health_server.start()

        logger.info(
            "heartbeat_monitor_started",
            push_enabled=self._push_sender is not None,
            server_enabled=self._health_server is not None,
            interval_seconds=self.config.heartbeat_interval_seconds,
            liveness_threshold_seconds=self.config.liveness_threshold_seconds,
        )

    def report_alive(self, at: datetime | None = None) -> None:
        """Record that the monitored subject was functioning at a time.

        Safe to call from any thread, before or after start(). Older
        reports never move the timestamp backwards.

        Args:
            at: When the subject was alive. Defaults to now.
        """
        self._liveness.report(at if at is not None else self._time.utcnow())

    def is_alive(self) -> bool:
        """Check whether the subject is currently considered alive."""
        return self._liveness.is_alive()

    async def aclose(self) -> None:
        """Stop background outputs and wait for pending error deliveries."""
        if self._push_sender is not None:
            await self._push_sender.aclose()
        if self._health_server is not None:
            await self._health_server.aclose()
        await self._dispatcher.drain()
        logger.info("heartbeat_monitor_closed")
