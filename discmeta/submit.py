"""Building and checking CDDB submissions."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from discmeta.sites import status_code

log = logging.getLogger(__name__)

VALID_CATEGORIES = frozenset(
    {
        "blues",
        "classical",
        "country",
        "data",
        "folk",
        "jazz",
        "misc",
        "newage",
        "reggae",
        "rock",
        "soundtrack",
    }
)

WRITE_OK = 320
FRAMES_PER_SECOND = 75


class SubmitError(Exception):
    """A submission could not be made."""


class InvalidCategoryError(SubmitError):
    """The entry's category is not one CDDB accepts."""

    def __init__(self, category: str) -> None:
        super().__init__(f"invalid category: {category!r}")
        self.category = category


class ServerError(SubmitError):
    """The server refused the submission."""

    def __init__(self, status: int, line: str = "") -> None:
        super().__init__(f"server error {status}: {line.strip()}")
        self.status = status
        self.line = line


def valid_category(category: str) -> bool:
    """Whether the category is one of the eleven CDDB categories."""
    return category in VALID_CATEGORIES


def parse_write(line: str) -> int:
    """Check the server's reply to a write; return its status or raise ServerError."""
    status = status_code(line)
    if status != WRITE_OK:
        raise ServerError(status, line)
    return status


def make_disk_data(
    offsets: Sequence[int], entry: str, num_tracks: int | None = None
) -> str:
    """Prefix an xmcd entry with its track offsets and disc length comments.

    ``offsets`` holds every track start followed by the disc end, in frames.
    ``entry`` is the xmcd text of the disc. ``num_tracks`` defaults to the
    number of track starts in ``offsets``.
    """
    if num_tracks is None:
        num_tracks = len(offsets) - 1
    if num_tracks < 0 or num_tracks >= len(offsets):
        raise ValueError(
            f"{len(offsets)} offsets cannot describe {num_tracks} tracks"
        )

    lines = ["# xmcd\n", "#\n", "# Track frame offsets:\n"]
    lines.extend(f"#\t{offset}\n" for offset in offsets[:num_tracks])
    length = offsets[num_tracks] // FRAMES_PER_SECOND
    lines.append(f"# Disc length: {length} seconds\n")
    lines.append(entry)

    data = "".join(lines)
    log.debug("disk data: %r", data)
    return data