import pytest

from discmeta.submit import (
    InvalidCategoryError,
    ServerError,
    SubmitError,
    make_disk_data,
    parse_write,
    valid_category,
)

OFFSETS = [150, 2592, 35472, 47891, 123310, 133125]
ENTRY = "DISCID=3606ed05\nDTITLE=Musiksage / Bamse och Bronto\n"


@pytest.mark.parametrize(
    "category",
    [
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
    ],
)
def test_valid_categories(category):
    assert valid_category(category) is True


@pytest.mark.parametrize("category", ["Rock", "pop", "", "user", "musicbrainz"])
def test_invalid_categories(category):
    assert valid_category(category) is False


def test_parse_write_ok():
    assert parse_write("320 OK, input CDDB data") == 320


def test_parse_write_failure():
    with pytest.raises(ServerError) as info:
        parse_write("501 Entry rejected")
    assert info.value.status == 501
    assert isinstance(info.value, SubmitError)


def test_parse_write_garbage():
    with pytest.raises(ServerError) as info:
        parse_write("nonsense")
    assert info.value.status == 0


def test_invalid_category_error_carries_category():
    error = InvalidCategoryError("pop")
    assert error.category == "pop"
    assert isinstance(error, SubmitError)


def test_make_disk_data_header():
    data = make_disk_data(OFFSETS, ENTRY, 5)
    assert data.startswith("# xmcd\n#\n# Track frame offsets:\n")


def test_make_disk_data_lists_track_offsets():
    lines = make_disk_data(OFFSETS, ENTRY, 5).splitlines()
    offset_lines = [line for line in lines if line.startswith("#\t")]
    assert offset_lines == [f"#\t{offset}" for offset in OFFSETS[:5]]


def test_make_disk_data_disc_length():
    data = make_disk_data([150, 7500], "", 1)
    assert "# Disc length: 100 seconds\n" in data


def test_make_disk_data_ends_with_entry():
    data = make_disk_data(OFFSETS, ENTRY, 5)
    assert data.endswith(ENTRY)


def test_make_disk_data_default_track_count():
    assert make_disk_data(OFFSETS, ENTRY) == make_disk_data(OFFSETS, ENTRY, 5)


def test_make_disk_data_too_many_tracks():
    with pytest.raises(ValueError):
        make_disk_data(OFFSETS, ENTRY, 6)