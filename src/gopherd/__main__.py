"""Entry point for the Gopher server."""

import argparse
import signal
import sys
import threading

import structlog
from pydantic import ValidationError

from gopherd.config import Settings
from gopherd.content.loader import FileSystemError, ScriptError
from gopherd.dispatcher import render
from gopherd.lifecycle import GracefulShutdown
from gopherd.logging import configure_logging
from gopherd.server import GopherServer

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser.

    Every option defaults to None so unset flags fall back to the
    environment-driven Settings.
    """
    parser = argparse.ArgumentParser(
        prog="gopherd",
        description="Serve a directory over the Gopher protocol.",
    )
    parser.add_argument("root", nargs="?", help="directory to serve (default: .)")
    parser.add_argument("-p", "--port", type=int, help="port advertised in menus (default: 7070)")
    parser.add_argument("-H", "--host", help="hostname advertised in menus (default: localhost)")
    parser.add_argument("-b", "--bind", dest="bind_raw", help="address to listen on, as HOST:PORT")
    parser.add_argument(
        "-r",
        "--render",
        metavar="SELECTOR",
        help="print the response to SELECTOR and exit",
    )
    parser.add_argument("--debug", action="store_true", default=None, help="debug logging")
    parser.add_argument(
        "--json-logs",
        dest="log_format",
        action="store_const",
        const="json",
        help="log JSON lines instead of console output",
    )
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Merge command-line flags over environment configuration."""
    overrides = {
        name: value
        for name, value in vars(args).items()
        if name != "render" and value is not None
    }
    return Settings(**overrides)


def serve(settings: Settings) -> None:
    """Run the server until SIGINT or SIGTERM.

    ``serve_forever`` runs on a background thread so the main thread is
    free to wait for the shutdown signal and stop it.

    Args:
        settings: Server configuration.
    """
    server = GopherServer.from_settings(settings)
    shutdown = GracefulShutdown()
    for sig in (signal.SIGTERM, signal.SIGINT):
        signal.signal(sig, shutdown.trigger)

    bind_host, bind_port = settings.bind_address
    logger.info(
        "server_listening",
        bind=f"{bind_host}:{bind_port}",
        root=server.root,
        advertised=f"{settings.host}:{settings.port}",
        max_workers=settings.max_workers,
    )

    thread = threading.Thread(target=server.serve_forever, name="gopherd-accept")
    thread.start()
    try:
        shutdown.wait_for_trigger()
    finally:
        server.shutdown()
        thread.join(timeout=settings.shutdown_timeout)
        server.server_close()
    logger.info("server_stopped")


def main(argv: list[str] | None = None) -> int:
    """Entry point for python -m gopherd."""
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args)
    except ValidationError as e:
        print(f"gopherd: invalid configuration: {e}", file=sys.stderr)
        return 1

    configure_logging(debug=settings.debug, log_format=settings.log_format)

    try:
        if args.render is not None:
            sys.stdout.write(render(settings.host, settings.port, settings.root, args.render))
            return 0
        serve(settings)
    except (FileSystemError, ScriptError) as e:
        logger.error("fatal", error=str(e), path=e.path)
        return 1
    except OSError as e:
        logger.error("fatal", error=str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
