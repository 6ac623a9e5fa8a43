"""Launcher: bind an ephemeral loopback port, announce it, then serve.

The host process reads exactly one line from stdout:

    1|1|tcp|<host>:<port>|<protocol>

Nothing else may be written to stdout, so all logging goes to stderr.
"""

import socket
import sys

import structlog
import uvicorn

from codepack.core.config import Settings, get_settings

logger = structlog.get_logger(__name__)

HANDSHAKE_CORE_VERSION = 1
HANDSHAKE_APP_VERSION = 1


def handshake_line(host: str, port: int, protocol: str) -> str:
    return f"{HANDSHAKE_CORE_VERSION}|{HANDSHAKE_APP_VERSION}|tcp|{host}:{port}|{protocol}"


def bind_socket(host: str, port: int) -> socket.socket:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    sock.bind((host, port))
    sock.listen(128)
    sock.set_inheritable(True)
    return sock


def serve(settings: Settings | None = None) -> None:
    """Bind, print the handshake line, and run the application until stopped."""
    settings = settings or get_settings()

    # Importing the app configures logging (stderr only) before anything else logs
    from codepack.main import app

    sock = bind_socket(settings.host, settings.port)
    host, port = sock.getsockname()[:2]

    config = uvicorn.Config(app, log_config=None, access_log=False)
    server = uvicorn.Server(config)

    print(handshake_line(host, port, settings.handshake_protocol), flush=True)
    logger.info("server_listening", host=host, port=port)

    try:
        server.run(sockets=[sock])
    finally:
        sock.close()
        sys.stdout.flush()
