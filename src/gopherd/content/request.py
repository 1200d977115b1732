"""Per-connection request state."""
import os

from pydantic import BaseModel, Field

from gopherd.content.loader import FileSystemError
from gopherd.content.paths import join_root

QUERY_SEPARATORS = ("\t", "?")


class Request(BaseModel):
    """A single Gopher request and the server context it runs in.

    Attributes:
        selector: Selector sent by the client, never trusted as a path.
        query: Search string following the selector, if any.
        root: Canonical root directory; nothing outside it is served.
        host: Hostname used when generating menu links.
        port: Port used when generating menu links.
    """

    selector: str = ""
    query: str = ""
    root: str = Field(description="Canonical absolute root directory")
    host: str
    port: int

    @classmethod
    def from_root(cls, host: str, port: int, root: str) -> "Request":
        """Create an empty request for a server root.

        Args:
            host: Advertised hostname.
            port: Advertised port.
            root: Root directory, canonicalized here.

        Returns:
            Request with an empty selector and query.

        Raises:
            FileSystemError: If the root does not exist.
        """
        if not os.path.isdir(root):
            raise FileSystemError(f"Root directory not found: {root}", root, "ENOENT")
        return cls(host=host, port=port, root=os.path.realpath(root))

    def parse_request(self, line: str) -> None:
        """Set selector and query from the line the client sent.

        The selector ends at the first tab or ``?``; the rest is the query.
        Without a query, one trailing ``/`` is dropped from the selector.

        Args:
            line: Request line without its line terminator.
        """
        for i, char in enumerate(line):
            if char in QUERY_SEPARATORS:
                self.selector = line[:i]
                self.query = line[i + 1:]
                return

        self.query = ""
        self.selector = line[:-1] if line.endswith("/") else line

    def with_selector(self, selector: str) -> "Request":
        """Derive a sibling request that differs only in its selector."""
        return self.model_copy(update={"selector": selector})

    def file_path(self) -> str:
        """Path to the requested target on disk."""
        return join_root(self.root, self.selector)

    def relative_file_path(self) -> str:
        """Path to the requested target relative to the root."""
        path = self.file_path()
        root = self.root.rstrip("/")
        return path[len(root):] if path.startswith(root) else path
