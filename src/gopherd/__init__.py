"""gopherd: serve a directory tree over the Gopher protocol.

Directories become menus, files are sent as-is and ``.gph`` gophermaps
(static or executable) are transcoded into menus.
"""

from gopherd.content.request import Request
from gopherd.dispatcher import Dispatcher, ResponseKind, render, render_bytes
from gopherd.gophermap import render_line

__all__ = [
    "Dispatcher",
    "Request",
    "ResponseKind",
    "render",
    "render_bytes",
    "render_line",
]
