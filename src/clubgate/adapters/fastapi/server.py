"""FastAPI adapter – uvicorn server on a background thread.

The listening socket is bound before the thread starts, so a port clash is
reported synchronously to the caller as :class:`PortInUseError` rather than
surfacing later inside the server thread.
"""
from __future__ import annotations

import errno
import socket
import threading
import time
from typing import Any

import uvicorn

from clubgate.config.validation import ConfigurationError, PortInUseError
from clubgate.observability.logging import get_logger

logger = get_logger(__name__)


class UvicornServerThread:
    """Run one ASGI app under ``uvicorn.Server`` on a dedicated daemon thread.

    Parameters
    ----------
    app:
        The ASGI application.
    host / port:
        Address to bind.
    startup_timeout:
        Seconds :meth:`start` waits for uvicorn to report it is serving.
    """

    def __init__(
        self,
        app: Any,
        host: str,
        port: int,
        *,
        startup_timeout: float = 5.0,
        log_level: str = "warning",
    ) -> None:
        self._app = app
        self._host = host
        self._port = port
        self._startup_timeout = startup_timeout
        self._log_level = log_level
        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None
        self._socket: socket.socket | None = None

    @property
    def started(self) -> bool:
        return self._server is not None and self._server.started

    def start(self) -> None:
        sock = self._bind()
        config = uvicorn.Config(
            self._app,
            host=self._host,
            port=self._port,
            log_level=self._log_level,
            log_config=None,
            access_log=False,
            lifespan="off",
        )
        server = uvicorn.Server(config)
        thread = threading.Thread(
            target=server.run,
            kwargs={"sockets": [sock]},
            name=f"clubgate-webhook-{self._port}",
            daemon=True,
        )
        self._server, self._thread, self._socket = server, thread, sock
        thread.start()

        deadline = time.monotonic() + self._startup_timeout
        while not server.started:
            if not thread.is_alive() or time.monotonic() > deadline:
                self.stop()
                raise ConfigurationError(f"Webhook listener did not start on {self._host}:{self._port}")
            time.sleep(0.01)

    def stop(self, timeout: float = 5.0) -> None:
        server, thread, sock = self._server, self._thread, self._socket
        self._server = self._thread = self._socket = None
        if server is not None:
            server.should_exit = True
        if thread is not None:
            thread.join(timeout)
            if thread.is_alive():
                logger.warning("webhook.server_stop_timeout", port=self._port, timeout=timeout)
        if sock is not None:
            sock.close()

    def _bind(self) -> socket.socket:
        family = socket.AF_INET6 if ":" in self._host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((self._host, self._port))
        except OSError as exc:
            sock.close()
            if exc.errno == errno.EADDRINUSE:
                raise PortInUseError(self._host, self._port, cause=exc) from exc
            raise ConfigurationError(f"Cannot bind {self._host}:{self._port}: {exc}", cause=exc) from exc
        sock.set_inheritable(True)
        return sock


__all__ = ["UvicornServerThread"]
