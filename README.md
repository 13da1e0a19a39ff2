# discmeta

A small library for audio CD metadata. It has no dependencies beyond the
standard library.

Track offsets are always given in frames (75 per second): the start of
every track, followed by the end of the disc.

## Modules

### `discmeta.sites`

Reads the list of mirrors a gnudb/CDDB server publishes.

- `status_code(line)` returns the number at the start of a server reply
  line, or `0` if there is none.
- `parse_line(line)` turns one sites entry into a `Mirror` (`address`,
  `transport`, `port`, `description`). `transport` is a `Transport`
  (`CDDBP` or `HTTP`). A line that does not match gives an empty `Mirror`.
- `read_data(data)` parses a whole reply (bytes or text). Unless the first
  line carries status 210 the result is an empty list; reading stops at a
  line holding only `.`.
- `Sites(host, port, timeout)` (defaults `gnudb.gnudb.org`, `80`, `30.0`)
  has `url()`, the CGI address asking for the sites, and `site_list()`,
  which downloads and parses it. A failed transfer gives an empty list.

```python
from discmeta.sites import read_data

data = (b"210 OK, site information follows\n"
        b"gnudb.gnudb.org cddbp 8880 - N000.00 W000.00 Random gnudb server\n"
        b".\n")
for mirror in read_data(data):
    print(mirror.address, mirror.transport, mirror.port, mirror.description)
```

### `discmeta.submit`

Checks and prepares a submission of a disc entry.

- `valid_category(category)` is true for the eleven CDDB categories
  (`blues`, `classical`, `country`, `data`, `folk`, `jazz`, `misc`,
  `newage`, `reggae`, `rock`, `soundtrack`).
- `make_disk_data(offsets, entry, num_tracks=None)` puts the
  `# xmcd` header, one `#\t<offset>` comment per track and the
  `# Disc length: N seconds` comment in front of the xmcd text `entry`.
  It raises `ValueError` if the offsets cannot describe that many tracks.
- `parse_write(line)` returns the status of a write reply when it is 320
  and raises `ServerError` otherwise.
- `SubmitError` is the base of `InvalidCategoryError` and `ServerError`.

```python
from discmeta.submit import make_disk_data, valid_category

valid_category("jazz")   # True
valid_category("pop")    # False

text = make_disk_data([150, 2592, 35472, 47891, 123310, 133125],
                      "DISCID=3606ed05\nDTITLE=Musiksage / Bamse och Bronto\n")
```

### `discmeta.musicbrainz`

- `calculate_disc_id(offsets)` computes the MusicBrainz disc id
  (SHA-1, base64 with `/`, `+`, `=` replaced by `_`, `.`, `-`).
- `MusicBrainzLookup(fetch=None).lookup(offsets)` asks the MusicBrainz web
  service (JSON) for the disc and its releases, and returns a list of
  `DiscEntry` objects (with `TrackEntry` tracks), one per matching medium.
  The first entry keeps the disc id; later ones get `-2`, `-3`, and so on.
  Releases with several media get ` (disc N)` added to the title. It raises
  `NoRecordFoundError` when nothing is found and `MusicBrainzError` when the
  request fails. `fetch(path, params)` may be given to supply the service's
  replies as mappings instead of making HTTP requests.
- `release_to_entries(release, disc_id, start_index=1)`,
  `artist_from_credit_list(credits)` and `parse_year(date)` are the pieces
  the lookup is built from.
- `cache_files(offsets, cache_locations)` reads xmcd files stored under
  `<location>/musicbrainz/<discid>*` and returns them as `DiscEntry` objects.

```python
from discmeta.musicbrainz import calculate_disc_id

offsets = [150, 29462, 66983, 96785, 135628, 168676,
           194147, 222158, 247076, 278203, 316732]
print(calculate_disc_id(offsets))
```

### `discmeta.asynclookup`

`AsyncMusicBrainzLookup(callback=None, lookup_factory=MusicBrainzLookup)`
runs each `lookup(offsets)` on a background thread. When a lookup ends the
callback receives a `LookupOutcome` with `entries` and `error` (a
`MusicBrainzError` or `None`). `lookup_response()` returns the entries of
the lookup that finished last, and `wait(timeout=None)` waits for all
started lookups, returning `True` if they all finished.

```python
from discmeta.asynclookup import AsyncMusicBrainzLookup

lookup = AsyncMusicBrainzLookup(callback=lambda outcome: print(outcome.error))
lookup.lookup([150, 9219, 20386, 34134])
lookup.wait(60)
print(lookup.lookup_response())
```

## What it does not do

- There is no command-line program; everything is used from Python.
- It does not query or read entries from CDDB/gnudb servers, over CDDBP or
  HTTP; only the mirror list is fetched.
- It does not send submissions; `make_disk_data` only builds the text.
- The cache is read only: `cache_files` loads entries but nothing stores them.

## Installation

```
pip install .
```

## Running the tests

```
pip install .[test]
pytest
```