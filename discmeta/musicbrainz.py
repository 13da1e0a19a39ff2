"""Disc lookups against the MusicBrainz web service and its local cache."""

from __future__ import annotations

import base64
import hashlib
import json
import logging
import re
import urllib.parse
import urllib.request
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from discmeta.sites import CLIENT_NAME, CLIENT_VERSION

log = logging.getLogger(__name__)

MB_HOST = "musicbrainz.org"
MB_TIMEOUT = 30.0
RELEASE_INCLUDES = (
    "artists labels recordings release-groups url-rels discids artist-credits"
)
SOURCE = "musicbrainz"

_YEAR_RE = re.compile(r"^(\d{4,4})(-\d{1,2}-\d{1,2})?$", re.ASCII)
_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)
_ESCAPES = {"n": "\n", "t": "\t", "\\": "\\"}
_TRACK_KEY_RE = re.compile(r"^(TTITLE|EXTT)(\d+)$")

Fetch = Callable[[str, Mapping[str, str]], Mapping[str, Any]]


@dataclass
class TrackEntry:
    """Metadata for one track of a disc."""

    title: str = ""
    artist: str = ""
    comment: str = ""


@dataclass
class DiscEntry:
    """Metadata for one disc as found by a lookup."""

    discid: str = ""
    source: str = ""
    category: str = ""
    title: str = ""
    artist: str = ""
    genre: str = ""
    year: int = 0
    comment: str = ""
    tracks: list[TrackEntry] = field(default_factory=list)


class MusicBrainzError(Exception):
    """The MusicBrainz lookup failed."""


class NoRecordFoundError(MusicBrainzError):
    """The service knows no release for the disc."""

    def __init__(self, disc_id: str) -> None:
        super().__init__(f"no record found for disc {disc_id}")
        self.disc_id = disc_id


def calculate_disc_id(offsets: Sequence[int]) -> str:
    """The MusicBrainz disc id for track starts followed by the disc end, in frames."""
    if not offsets:
        raise ValueError("at least the disc end offset is needed")
    num_tracks = len(offsets) - 1

    def offset_at(index: int) -> int:
        if index == 0:
            return offsets[num_tracks]
        if index <= num_tracks:
            return offsets[index - 1]
        return 0

    text = f"{1:02X}{num_tracks:02X}" + "".join(
        f"{offset_at(index):08X}" for index in range(100)
    )
    digest = hashlib.sha1(text.encode("ascii")).digest()
    encoded = base64.b64encode(digest).decode("ascii")
    return encoded.translate(str.maketrans({"/": "_", "+": ".", "=": "-"}))


def artist_from_credit_list(credits: Iterable[Mapping[str, Any]] | None) -> str:
    """Join an artist credit list into one display name."""
    if not credits:
        return ""
    parts = []
    for credit in credits:
        name = credit.get("name") or ""
        if not name:
            name = (credit.get("artist") or {}).get("name") or ""
        parts.append(name)
        parts.append(credit.get("joinphrase") or "")
    artist = "".join(parts)
    log.debug("Artist: %s", artist)
    return artist


def parse_year(date: str | None) -> int:
    """The year of a YYYY or YYYY-MM-DD date, or 0 for anything else."""
    match = _YEAR_RE.match(date or "")
    return int(match.group(1)) if match else 0


def _track_entry(track: Mapping[str, Any]) -> TrackEntry:
    recording = track.get("recording")
    credits = track.get("artist-credit")
    if recording and credits is None:
        artist = artist_from_credit_list(recording.get("artist-credit"))
    else:
        artist = artist_from_credit_list(credits)

    title = track.get("title") or ""
    if recording and not title:
        title = recording.get("title") or ""
    return TrackEntry(title=title, artist=artist)


def release_to_entries(
    release: Mapping[str, Any], disc_id: str, start_index: int = 1
) -> list[DiscEntry]:
    """Entries for the media of a full release that carry the disc id.

    The first entry overall keeps the plain disc id; later ones get
    ``-2``, ``-3`` and so on, counting from ``start_index``.
    """
    media = release.get("media") or []
    matching = [
        medium
        for medium in media
        if any(disc.get("id") == disc_id for disc in medium.get("discs") or [])
    ]

    release_title = release.get("title") or ""
    artist = artist_from_credit_list(release.get("artist-credit"))
    year = parse_year(release.get("date"))

    entries = []
    for number, medium in enumerate(matching, start=start_index):
        title = release_title
        if len(media) > 1:
            title = f"{release_title} (disc {medium.get('position', 0)})"
        entries.append(
            DiscEntry(
                discid=disc_id if number == 1 else f"{disc_id}-{number}",
                source=SOURCE,
                title=title,
                artist=artist,
                year=year,
                tracks=[_track_entry(track) for track in medium.get("tracks") or []],
            )
        )
    return entries


def _unescape(value: str) -> str:
    return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(0)), value)


def _parse_xmcd(text: str) -> DiscEntry:
    fields: dict[str, str] = {}
    for line in text.splitlines():
        if line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip().upper()
        fields[key] = fields.get(key, "") + _unescape(value)

    dtitle = fields.get("DTITLE", "")
    artist, sep, title = dtitle.partition(" / ")
    if not sep:
        artist = title = dtitle

    year_text = fields.get("DYEAR", "").strip()
    entry = DiscEntry(
        discid=fields.get("DISCID", ""),
        category=fields.get("CATEGORY", ""),
        title=title,
        artist=artist,
        genre=fields.get("DGENRE", ""),
        year=int(year_text) if year_text.isascii() and year_text.isdigit() else 0,
        comment=fields.get("EXTD", ""),
    )

    tracks: dict[int, TrackEntry] = {}
    for key, value in fields.items():
        match = _TRACK_KEY_RE.match(key)
        if match is None:
            continue
        track = tracks.setdefault(int(match.group(2)), TrackEntry(artist=artist))
        if match.group(1) == "EXTT":
            track.comment = value
            continue
        track_artist, sep, track_title = value.partition(" / ")
        if sep:
            track.artist, track.title = track_artist, track_title
        else:
            track.title = value
    if tracks:
        entry.tracks = [
            tracks.get(index, TrackEntry(artist=artist))
            for index in range(max(tracks) + 1)
        ]
    return entry


def cache_files(
    offsets: Sequence[int], cache_locations: Iterable[str | Path]
) -> list[DiscEntry]:
    """Entries stored under ``<location>/musicbrainz/<discid>*`` for the disc."""
    disc_id = calculate_disc_id(offsets)
    entries = []
    for location in cache_locations:
        directory = Path(location) / "musicbrainz"
        if not directory.is_dir():
            continue
        files = sorted(p for p in directory.iterdir() if p.name.startswith(disc_id))
        log.debug("Cache files found: %d", len(files))
        for path in files:
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                log.debug("Could not read file: %s", path)
                continue
            entry = _parse_xmcd(text)
            entry.source = SOURCE
            entry.discid = disc_id
            entries.append(entry)
    return entries


def _http_fetch(path: str, params: Mapping[str, str]) -> Mapping[str, Any]:
    query = urllib.parse.urlencode({**params, "fmt": "json"})
    url = urllib.parse.urlunsplit(("https", MB_HOST, f"/ws/2/{path}", query, ""))
    request = urllib.request.Request(
        url, headers={"User-Agent": f"{CLIENT_NAME}/{CLIENT_VERSION}"}
    )
    with urllib.request.urlopen(request, timeout=MB_TIMEOUT) as response:
        return json.load(response)


class MusicBrainzLookup:
    """Looks a disc up by its MusicBrainz disc id."""

    def __init__(self, fetch: Fetch | None = None) -> None:
        self._fetch = fetch or _http_fetch

    def lookup(self, offsets: Sequence[int]) -> list[DiscEntry]:
        """All entries for the disc; raises MusicBrainzError or NoRecordFoundError."""
        disc_id = calculate_disc_id(offsets)
        log.debug("Should lookup %s", disc_id)

        entries: list[DiscEntry] = []
        try:
            disc = self._fetch(f"discid/{disc_id}", {})
            releases = disc.get("releases") or []
            log.debug("Found %d release(s)", len(releases))
            for release in releases:
                full = self._fetch(
                    f"release/{release['id']}", {"inc": RELEASE_INCLUDES}
                )
                if not full:
                    continue
                entries.extend(release_to_entries(full, disc_id, len(entries) + 1))
        except (OSError, ValueError) as exc:
            raise MusicBrainzError(f"lookup of {disc_id} failed: {exc}") from exc

        if not entries:
            raise NoRecordFoundError(disc_id)
        return entries