import io
import urllib.parse
from unittest import mock

import pytest

from discmeta.sites import (
    Mirror,
    Sites,
    Transport,
    parse_line,
    read_data,
    status_code,
)

CDDBP_LINE = "gnudb.gnudb.org cddbp 8880 - N000.00 W000.00 Random gnudb server"
HTTP_LINE = "gnudb.gnudb.org http 80 /~cddb/cddb.cgi N000.00 W000.00 Random gnudb server"

RESPONSE = (
    "210 OK, site information follows (until terminating `.')\r\n"
    f"{CDDBP_LINE}\r\n"
    f"{HTTP_LINE}\r\n"
    ".\r\n"
).encode("utf-8")


@pytest.mark.parametrize(
    "line, expected",
    [
        ("210 OK", 210),
        ("320 OK, input CDDB data", 320),
        ("", 0),
        ("garbage", 0),
        ("-5 bad", 0),
    ],
)
def test_status_code(line, expected):
    assert status_code(line) == expected


def test_parse_cddbp_line():
    mirror = parse_line(CDDBP_LINE)
    assert mirror == Mirror(
        address="gnudb.gnudb.org",
        transport=Transport.CDDBP,
        port=8880,
        description="Random gnudb server",
    )


def test_parse_http_line():
    mirror = parse_line(HTTP_LINE)
    assert mirror.transport is Transport.HTTP
    assert mirror.port == 80
    assert mirror.address == "gnudb.gnudb.org"


def test_parse_http_non_default_path_warns(caplog):
    line = "example.com http 80 /other.cgi S012.34 E123.45 Somewhere"
    with caplog.at_level("WARNING"):
        mirror = parse_line(line)
    assert mirror.description == "Somewhere"
    assert "Non default urls" in caplog.text


def test_parse_unmatched_line_gives_empty_mirror():
    assert parse_line("not a site line") == Mirror()


def test_read_data():
    mirrors = read_data(RESPONSE)
    assert [m.transport for m in mirrors] == [Transport.CDDBP, Transport.HTTP]
    assert [m.port for m in mirrors] == [8880, 80]


def test_read_data_stops_at_terminator():
    data = RESPONSE + f"{CDDBP_LINE}\r\n".encode()
    assert len(read_data(data)) == 2


def test_read_data_wrong_status():
    assert read_data(b"401 No site information available.\r\n" + RESPONSE) == []


def test_read_data_empty():
    assert read_data(b"") == []


def test_url_components():
    parts = urllib.parse.urlsplit(Sites().url())
    assert parts.scheme == "http"
    assert parts.netloc == "gnudb.gnudb.org:80"
    assert parts.path == "/~cddb/cddb.cgi"
    query = urllib.parse.parse_qs(parts.query)
    assert query["cmd"] == ["sites"]
    assert query["proto"] == ["5"]
    assert query["hello"][0].startswith("libkcddb-user localHost ")
    assert [key for key, _ in urllib.parse.parse_qsl(parts.query)] == [
        "cmd",
        "hello",
        "proto",
    ]


def test_url_custom_host():
    parts = urllib.parse.urlsplit(Sites(host="localhost", port=8080).url())
    assert parts.netloc == "localhost:8080"


def test_site_list_fetches_and_parses():
    sites = Sites(timeout=5)
    with mock.patch(
        "urllib.request.urlopen", return_value=io.BytesIO(RESPONSE)
    ) as urlopen:
        mirrors = sites.site_list()
    assert len(mirrors) == 2
    assert mirrors[0].address == "gnudb.gnudb.org"
    urlopen.assert_called_once_with(sites.url(), timeout=5)


def test_site_list_network_failure_gives_empty():
    with mock.patch("urllib.request.urlopen", side_effect=OSError("down")):
        assert Sites().site_list() == []