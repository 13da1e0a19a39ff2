"""Mirror site listing published by a gnudb/CDDB server."""

from __future__ import annotations

import enum
import logging
import re
import urllib.parse
import urllib.request
from dataclasses import dataclass

log = logging.getLogger(__name__)

CLIENT_NAME = "discmeta"
CLIENT_VERSION = "0.1.0"

DEFAULT_HOST = "gnudb.gnudb.org"
DEFAULT_PORT = 80
DEFAULT_TIMEOUT = 30.0
CGI_PATH = "/~cddb/cddb.cgi"
PROTOCOL_LEVEL = "5"

SITES_OK = 210

_SITE_RE = re.compile(
    r"([^ ]+) (cddbp|http) (\d+) ([^ ]+) "
    r"[N|S]\d{3}.\d{2} [E|W]\d{3}.\d{2} (.*)",
    re.ASCII,
)


class Transport(enum.Enum):
    """Protocol a mirror is reached with."""

    CDDBP = "cddbp"
    HTTP = "http"


@dataclass
class Mirror:
    """One server listed in a sites response."""

    address: str = ""
    transport: Transport = Transport.CDDBP
    port: int = 0
    description: str = ""


def status_code(line: str) -> int:
    """Return the numeric status at the start of a server line, or 0."""
    tokens = line.split()
    if not tokens:
        return 0
    first = tokens[0]
    if first.isascii() and first.isdigit():
        return int(first)
    return 0


def parse_line(line: str) -> Mirror:
    """Parse one sites entry; a line that does not match yields an empty Mirror."""
    match = _SITE_RE.search(line)
    if match is None:
        return Mirror()

    address, transport_name, port, path, description = match.groups()
    transport = Transport.CDDBP if transport_name == "cddbp" else Transport.HTTP
    if transport is Transport.HTTP and path != CGI_PATH:
        log.warning("Non default urls are not supported for http")

    return Mirror(
        address=address,
        transport=transport,
        port=int(port),
        description=description,
    )


def read_data(data: bytes | str) -> list[Mirror]:
    """Parse a whole sites response; anything but status 210 gives no mirrors."""
    text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
    lines = iter(text.splitlines())

    header = next(lines, "")
    if status_code(header) != SITES_OK:
        return []

    mirrors = []
    for line in lines:
        if line == ".":
            break
        mirrors.append(parse_line(line))
    return mirrors


class Sites:
    """Fetches the list of mirrors from a gnudb server over HTTP."""

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout

    def url(self) -> str:
        """The CGI URL that asks the server for its sites."""
        hello = f"libkcddb-user localHost {CLIENT_NAME} {CLIENT_VERSION}"
        query = urllib.parse.urlencode(
            [("cmd", "sites"), ("hello", hello), ("proto", PROTOCOL_LEVEL)],
            quote_via=urllib.parse.quote,
        )
        return urllib.parse.urlunsplit(
            ("http", f"{self.host}:{self.port}", CGI_PATH, query, "")
        )

    def site_list(self) -> list[Mirror]:
        """Download and parse the mirror list; a failed transfer gives an empty list."""
        try:
            with urllib.request.urlopen(self.url(), timeout=self.timeout) as response:
                data = response.read()
        except OSError as exc:
            log.debug("Fetching sites failed: %s", exc)
            return []
        return read_data(data)