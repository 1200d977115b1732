"""Response dispatch: turn a Request into bytes written to a sink."""
import io
import os
import shutil
import stat
from enum import Enum
from typing import Any, BinaryIO, Protocol

import structlog

from gopherd.content.loader import load_gophermap
from gopherd.content.paths import (
    FOOTER_FILE,
    GOPHERMAP_SUFFIX,
    HEADER_FILE,
    SecurityError,
    find_override,
    resolve_path,
)
from gopherd.content.request import Request
from gopherd.content.walker import list_directory
from gopherd.gophermap import render_gophermap

logger = structlog.get_logger()

MENU_TERMINATOR = b".\r\n"
MAX_REQUEST_LINE = 4096


class ResponseKind(str, Enum):
    """The four ways a request can be answered."""

    GOPHERMAP = "MAP"
    NOT_FOUND = "NOT_FOUND"
    DIRECTORY = "DIR"
    FILE = "FILE"


class ResponseSink(Protocol):
    """Anything that accepts response bytes in order.

    ``io.BytesIO`` and the write side of a socket both qualify.
    """

    def write(self, data: bytes, /) -> Any:
        """Write a chunk of the response."""
        ...


class Dispatcher:
    """Renders Gopher responses for requests against a content root.

    Attributes:
        verbose: Whether to log a status event for every response.
    """

    def __init__(self, verbose: bool = True) -> None:
        """Initialize dispatcher.

        Args:
            verbose: Log per-response status events when True.
        """
        self.verbose = verbose

    def _info(self, event: str, **kwargs: Any) -> None:
        if self.verbose:
            logger.info(event, **kwargs)

    def resolve(self, req: Request) -> tuple[ResponseKind, Request]:
        """Decide how to answer a request.

        Gophermap overrides (``<path>.gph``, then ``<path>/index.gph``)
        take precedence over whatever lives at the path itself. Special
        files such as FIFOs, sockets and devices are NOT_FOUND, as are
        missing paths and paths that escape the root.

        Args:
            req: Parsed request.

        Returns:
            Tuple of (kind, effective request). The effective request
            carries the override selector when one applies.
        """
        try:
            path = resolve_path(req.root, req.selector)
        except SecurityError as e:
            logger.warning("path_escapes_root", selector=e.path, error=str(e))
            return ResponseKind.NOT_FOUND, req

        override = find_override(path)
        if override is not None:
            if override == ".gph":
                selector = req.selector.rstrip("/") + GOPHERMAP_SUFFIX
            else:
                selector = req.selector + override
            try:
                resolve_path(req.root, selector)
            except SecurityError as e:
                logger.warning("path_escapes_root", selector=e.path, error=str(e))
                return ResponseKind.NOT_FOUND, req
            return ResponseKind.GOPHERMAP, req.with_selector(selector)

        try:
            mode = os.stat(path).st_mode
        except OSError:
            return ResponseKind.NOT_FOUND, req

        if path.endswith(GOPHERMAP_SUFFIX):
            return ResponseKind.GOPHERMAP, req
        if stat.S_ISREG(mode):
            return ResponseKind.FILE, req
        if stat.S_ISDIR(mode):
            return ResponseKind.DIRECTORY, req
        return ResponseKind.NOT_FOUND, req

    def write_response(self, sink: ResponseSink, req: Request) -> None:
        """Write the full response for a request.

        Args:
            sink: Destination for the response bytes.
            req: Parsed request.

        Raises:
            FileSystemError: If content cannot be read mid-response.
            ScriptError: If an executable gophermap fails.
            OSError: If the sink cannot be written to.
        """
        kind, req = self.resolve(req)
        if kind is ResponseKind.GOPHERMAP:
            self.write_gophermap(sink, req)
        elif kind is ResponseKind.DIRECTORY:
            self.write_dir(sink, req)
        elif kind is ResponseKind.FILE:
            self.write_file(sink, req)
        else:
            self.write_not_found(sink, req)

    def write_dir(self, sink: ResponseSink, req: Request) -> None:
        """Write a directory listing framed by optional header and footer."""
        path = req.file_path().rstrip("/")

        if os.path.exists(f"{path}/{HEADER_FILE}"):
            self.write_response(sink, req.with_selector(f"{req.selector}/{HEADER_FILE}"))

        for entry in list_directory(path, req.relative_file_path()):
            sink.write(entry.to_menu_line(req.host, req.port).encode("utf-8"))

        if os.path.exists(f"{path}/{FOOTER_FILE}"):
            self.write_response(sink, req.with_selector(f"{req.selector}/{FOOTER_FILE}"))

        sink.write(MENU_TERMINATOR)
        self._info("server_reply", kind=ResponseKind.DIRECTORY.value, path=req.relative_file_path())

    def write_file(self, sink: ResponseSink, req: Request) -> None:
        """Copy a file's raw bytes to the sink."""
        with open(req.file_path(), "rb") as fh:
            shutil.copyfileobj(fh, sink)
        self._info("server_reply", kind=ResponseKind.FILE.value, path=req.relative_file_path())

    def write_gophermap(self, sink: ResponseSink, req: Request) -> None:
        """Transcode a static or executable gophermap to the sink."""
        text = load_gophermap(req.file_path(), req.query, req.host, req.port)
        sink.write(render_gophermap(text, req.host, req.port).encode("utf-8"))
        self._info("server_reply", kind=ResponseKind.GOPHERMAP.value, path=req.relative_file_path())

    def write_not_found(self, sink: ResponseSink, req: Request) -> None:
        """Write a single Gopher error line naming the selector."""
        line = f"3Not Found: {req.selector}\t/\tnone\t70\r\n"
        sink.write(line.encode("utf-8"))
        self._info("not_found", selector=req.selector, path=req.relative_file_path())

    def handle(
        self,
        reader: BinaryIO,
        writer: ResponseSink,
        host: str,
        port: int,
        root: str,
    ) -> None:
        """Serve one connection: read a request line and respond.

        Only one line is ever read. A connection closed before sending
        anything gets no response, and so does a request line that does
        not end within ``MAX_REQUEST_LINE`` bytes.

        Args:
            reader: Readable side of the connection.
            writer: Writable side of the connection.
            host: Advertised hostname.
            port: Advertised port.
            root: Server root directory.
        """
        req = Request.from_root(host, port, root)
        raw = reader.readline(MAX_REQUEST_LINE)
        if not raw:
            return
        if len(raw) == MAX_REQUEST_LINE and not raw.endswith(b"\n"):
            logger.warning("request_too_long", limit=MAX_REQUEST_LINE)
            return

        line = raw.decode("utf-8", errors="replace")
        line = line.removesuffix("\n").removesuffix("\r")
        self._info("client_request", line=line)
        req.parse_request(line)
        self.write_response(writer, req)


def render_bytes(host: str, port: int, root: str, selector: str) -> bytes:
    """Render the response to a selector without a connection.

    Args:
        host: Advertised hostname.
        port: Advertised port.
        root: Server root directory.
        selector: Request line to render, as a client would send it.

    Returns:
        The exact bytes a client would receive.
    """
    req = Request.from_root(host, port, root)
    req.parse_request(selector)
    buffer = io.BytesIO()
    Dispatcher(verbose=False).write_response(buffer, req)
    return buffer.getvalue()


def render(host: str, port: int, root: str, selector: str) -> str:
    """Render the response to a selector as text, replacing invalid UTF-8."""
    return render_bytes(host, port, root, selector).decode("utf-8", errors="replace")
