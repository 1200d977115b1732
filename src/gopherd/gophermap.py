"""Gophermap transcoding: human-written .gph lines to Gopher menu lines.

Two syntaxes are supported. The terse one is a plain tab-separated line
where missing trailing fields are filled in::

    Welcome to my hole            (info line)
    0About me\t/about.txt         (host and port added)

The bracketed one is the geomyidae format, with ``|`` as separator and
``server``/``port`` as placeholders for this server::

    [1|Phlog|/phlog|server|port]
    [h|Website|URL:https://example.com|server|port]

Lines starting with ``#`` are comments and produce no output.
"""

CRLF = "\r\n"
NULL_SELECTOR = "(null)"
DEFAULT_PORT = 70

ESCAPED_PIPE = "\\|"
ESCAPED_PIPE_PLACEHOLDER = "\x00P_ESC_PIPE\x00"

HOST_PLACEHOLDER = "server"
PORT_PLACEHOLDER = "port"


def is_bracketed(line: str) -> bool:
    """Check whether a line uses the bracketed syntax."""
    return line.startswith("[") and line.endswith("]") and "|" in line


def render_bracketed(line: str, host: str, port: int) -> str:
    """Convert a ``[type|name|selector|server|port]`` line.

    Args:
        line: Bracketed line without its line terminator.
        host: Advertised hostname.
        port: Advertised port.

    Returns:
        Tab-separated menu line without CRLF.
    """
    body = line.replace("|", "", 1).lstrip("[").rstrip("]")
    body = (
        body.replace(ESCAPED_PIPE, ESCAPED_PIPE_PLACEHOLDER)
        .replace("|", "\t")
        .replace(ESCAPED_PIPE_PLACEHOLDER, ESCAPED_PIPE)
    )

    fields = body.split("\t")
    if len(fields) > 2 and fields[2] == HOST_PLACEHOLDER:
        fields[2] = host
    if len(fields) > 3 and fields[3] == PORT_PLACEHOLDER:
        fields[3] = str(port)

    tabs = len(fields) - 1
    if tabs < 1:
        fields.append(NULL_SELECTOR)
    # links without a host point at this server, links with a host but
    # no port use the Gopher default
    if tabs < 2:
        fields.extend([host, str(port)])
    elif tabs < 3:
        fields.append(str(DEFAULT_PORT))
    return "\t".join(fields)


def render_terse(line: str, host: str, port: int) -> str:
    """Fill in the missing fields of a tab-separated line.

    Args:
        line: Line without its line terminator.
        host: Advertised hostname.
        port: Advertised port.

    Returns:
        Tab-separated menu line without CRLF.
    """
    tabs = line.count("\t")
    if tabs == 0:
        return f"i{line}\t{NULL_SELECTOR}\t{host}\t{port}"
    if tabs == 1:
        return f"{line}\t{host}\t{port}"
    if tabs == 2:
        return f"{line}\t{port}"
    return line


def render_line(raw_line: str, host: str, port: int) -> str:
    """Transcode one gophermap line into a Gopher menu line.

    Args:
        raw_line: Line from a .gph file or script output.
        host: Advertised hostname.
        port: Advertised port.

    Returns:
        CRLF-terminated menu line, or an empty string for comments.
    """
    if raw_line.startswith("#"):
        return ""

    line = raw_line.rstrip("\r")
    if is_bracketed(line):
        line = render_bracketed(line, host, port)
    else:
        line = render_terse(line, host, port)
    return line + CRLF


def split_lines(text: str) -> list[str]:
    """Split gophermap text on LF, dropping the empty tail after a final newline."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def render_gophermap(text: str, host: str, port: int) -> str:
    """Transcode a whole gophermap.

    Args:
        text: Gophermap source.
        host: Advertised hostname.
        port: Advertised port.

    Returns:
        Concatenated menu lines.
    """
    return "".join(render_line(line, host, port) for line in split_lines(text))
