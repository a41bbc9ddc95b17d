"""Command line entry point that starts the HTTP API."""

from __future__ import annotations

import argparse
import logging
import signal
import threading
from collections.abc import Sequence
from socketserver import ThreadingMixIn
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from . import routinewrapper
from .config import AppConfig, get_config
from .logger import new_root_logger
from .metrics import init_prometheus_metrics
from .routes import create_app

_log = logging.getLogger(__name__)

_ANY_HOST = "0.0.0.0"


class _Server(ThreadingMixIn, WSGIServer):
    daemon_threads = True


class _QuietHandler(WSGIRequestHandler):
    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        """Requests are logged by the application middleware."""


def parse_port(port: str) -> tuple[str, int]:
    """Split a listen address such as ``:8000`` into host and port.

    An empty host listens on every interface; an empty address or port picks
    a free port.
    """
    if not port:
        return _ANY_HOST, 0
    host, sep, number = port.rpartition(":")
    if not sep:
        raise ValueError(f"address {port}: missing port in address")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    if not number:
        value = 0
    elif number.isdigit():
        value = int(number)
    else:
        raise ValueError(f"address {port}: unknown port")
    if value > 65535:
        raise ValueError(f"address {port}: invalid port")
    return host or _ANY_HOST, value


def run_api(config: AppConfig, logger: logging.Logger) -> None:
    """Serve the API until SIGINT or SIGTERM, then shut down gracefully."""
    metrics = init_prometheus_metrics()
    app = create_app(config, logger, metrics)
    host, port = parse_port(config.port)

    stop = threading.Event()

    def _on_signal(signum: int, frame: object) -> None:
        stop.set()

    previous = {sig: signal.signal(sig, _on_signal) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        server = make_server(host, port, app, server_class=_Server, handler_class=_QuietHandler)
        worker = threading.Thread(target=server.serve_forever, daemon=True)
        worker.start()
        while not stop.wait(0.2):
            pass
        logger.info("gracefully shutting down...")
        server.shutdown()
        server.server_close()
        worker.join()
        logger.info("server stopped to receive new requests or connection.")
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def _report_failure(exc: Exception | None) -> None:
    if exc is not None:
        _log.error("unhandled error", exc_info=exc)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="movieapi")
    commands = parser.add_subparsers(dest="command", title="Available Commands")
    api = commands.add_parser("api", help="To start api", description="To start api")
    api.set_defaults(handler=run_api)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command named in ``argv``; return the exit status."""
    config = get_config()
    logger = new_root_logger(config.debug, config.is_development)
    routinewrapper.init(_report_failure)

    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 0
    try:
        args.handler(config, logger)
    except Exception as exc:
        _report_failure(exc)
        return 1
    return 0