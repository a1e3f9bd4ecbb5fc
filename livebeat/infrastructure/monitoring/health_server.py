"""Local health listener serving the liveness judgment over HTTP.

The listener binds its own socket and serves the FastAPI health app with
uvicorn inside an asyncio task on the caller's event loop. Requests are
handled concurrently and each one re-reads LivenessState.

Failure reporting:
- bind failure: reported once through the error dispatcher
- server exits while not being shut down: reported once
- intentional shutdown via aclose(): not an error
"""

from __future__ import annotations

import asyncio
import contextlib
import socket
from collections.abc import Generator

import uvicorn

from livebeat.api.main import create_health_app
from livebeat.domain.errors.heartbeat import HealthListenerError
from livebeat.domain.models.liveness_state import LivenessState
from livebeat.infrastructure.monitoring.error_dispatcher import ErrorDispatcher
from livebeat.infrastructure.observability.logging import get_logger_for_service


class _EmbeddedServer(uvicorn.Server):
    """uvicorn server that leaves signal handling to the embedding process."""

    @contextlib.contextmanager
    def capture_signals(self) -> Generator[None, None, None]:
        yield


class HealthServer:
    """Background HTTP listener answering health checks.

    Attributes:
        host: Bind address.
        port: Bind port.
    """

    def __init__(
        self,
        *,
        host: str,
        port: int,
        liveness: LivenessState,
        dispatcher: ErrorDispatcher,
    ) -> None:
        """Initialize the listener. Nothing is bound until start().

        Args:
            host: Bind address.
            port: Bind port.
            liveness: Shared liveness state read by every request.
            dispatcher: Delivers listener errors to the error observer.
        """
        self.host = host
        self.port = port
        self._liveness = liveness
        self._dispatcher = dispatcher
        self._server: _EmbeddedServer | None = None
        self._task: asyncio.Task[None] | None = None
        self._stopping = False
        self._log = get_logger_for_service("health_server").bind(host=host, port=port)

    @property
    def started(self) -> bool:
        """Check if the server has finished startup and is accepting requests."""
        return self._server is not None and self._server.started

    def start(self) -> None:
        """Start serving on the running event loop.

        Note:
            Calling start multiple times is safe (idempotent).

        Raises:
            RuntimeError: If no event loop is running.
        """
        if self._task is not None:
            return

        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._serve(), name="livebeat-health-server")

    async def wait_started(self, timeout: float = 5.0) -> bool:
        """Wait until the server accepts requests or its task ends.

        Args:
            timeout: Maximum seconds to wait.

        Returns:
            True if the server is accepting requests.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not self.started and loop.time() < deadline:
            if self._task is None or self._task.done():
                break
            await asyncio.sleep(0.01)
        return self.started

    async def aclose(self) -> None:
        """Shut the server down and wait for the serving task to end."""
        self._stopping = True
        if self._server is not None:
            self._server.should_exit = True
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)
            self._task = None
        self._log.info("health_server_stopped")

    async def _serve(self) -> None:
        try:
            sock = self._bind()
        except OSError as exc:
            self._report(f"bind failed: {exc}")
            return

        config = uvicorn.Config(
            create_health_app(self._liveness),
            log_config=None,
            access_log=False,
            lifespan="off",
        )
        self._server = _EmbeddedServer(config)
        self._log.info("health_server_starting")
        try:
            await self._server.serve(sockets=[sock])
        except Exception as exc:
            if not self._stopping:
                self._report(str(exc) or type(exc).__name__)
            return
        finally:
            sock.close()

        if not self._stopping:
            self._report("listener exited unexpectedly")

    def _bind(self) -> socket.socket:
        family = socket.AF_INET6 if ":" in self.host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.host, self.port))
        except OSError:
            sock.close()
            raise
        return sock

    def _report(self, detail: str) -> None:
        self._log.error("health_server_failed", detail=detail)
        self._dispatcher.dispatch(HealthListenerError(self.host, self.port, detail))
