import pytest

from terabox_link.formatting import extract_thumbnail, format_file_size, get_file_type


@pytest.mark.parametrize(
    "size, expected",
    [
        (0, "0 Bytes"),
        (None, "0 Bytes"),
        (512, "512 Bytes"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (1048576, "1 MB"),
        (5 * 1024**3 + 1024**3 // 4, "5.25 GB"),
        (2048 * 1024**4, "2048 TB"),
    ],
)
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("movie.MKV", "video"),
        ("archive.tar.gz", "archive"),
        ("noext", "other"),
        ("song.flac", "audio"),
        ("photo.HEIC", "image"),
        ("report.pdf", "document"),
        ("script.py", "code"),
        ("data.parquet", "other"),
        ("trailing.", "other"),
    ],
)
def test_get_file_type(filename, expected):
    assert get_file_type(filename) == expected


def test_extract_thumbnail_prefers_largest():
    assert extract_thumbnail({"thumbs": {"url1": "s", "url2": "m", "url3": "l"}}) == "l"
    assert extract_thumbnail({"thumbs": {"url1": "s", "url2": "m"}}) == "m"
    assert extract_thumbnail({"thumbs": {"url1": "s"}}) == "s"
    assert extract_thumbnail({"thumbs": {}}) is None
    assert extract_thumbnail({}) is None
