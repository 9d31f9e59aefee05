import pytest

from terabox_link.errors import InvalidUrl, ShareIdNotFound, UnsupportedDomain, ValidationError
from terabox_link.validation import extract_share_id, is_supported_url, validate_and_extract


@pytest.mark.parametrize(
    "url",
    [
        "https://www.terabox.com/s/1AbC_d-9",
        "https://www.terabox.com/sharing/link?surl=1AbC_d-9",
        "https://www.1024tera.com/share/link?surl=1AbC_d-9",
        "https://dubox.com/web/share/link?surl=1AbC_d-9",
    ],
)
def test_extracts_share_id_from_known_shapes(url):
    assert validate_and_extract(url) == "1AbC_d-9"


def test_host_match_is_substring():
    assert validate_and_extract("https://www.teraboxapp.com/s/1xyz") == "1xyz"
    assert is_supported_url("https://eu.terabox.com.mirror.example/s/1xyz")


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com/s/1abc",
        "https://drive.google.com/file/d/abc",
        "https://pan.quark.cn/s/abcdef",
    ],
)
def test_unknown_host_is_unsupported(url):
    with pytest.raises(UnsupportedDomain):
        validate_and_extract(url)
    assert not is_supported_url(url)


@pytest.mark.parametrize("url", ["not a url", "terabox.com/s/1abc", "", "http://[::1"])
def test_unparseable_url_is_invalid(url):
    with pytest.raises(InvalidUrl):
        validate_and_extract(url)
    assert not is_supported_url(url)


def test_missing_share_id():
    with pytest.raises(ShareIdNotFound) as exc_info:
        validate_and_extract("https://www.terabox.com/main?category=all")
    assert isinstance(exc_info.value, ValidationError)
    assert exc_info.value.status_code == 400


def test_extract_share_id_returns_none_without_match():
    assert extract_share_id("https://www.terabox.com/") is None
    assert extract_share_id("https://www.terabox.com/s/1first?surl=second") == "1first"


def test_custom_allow_list():
    assert validate_and_extract("https://files.example.org/s/abc", ["example.org"]) == "abc"
    with pytest.raises(UnsupportedDomain):
        validate_and_extract("https://www.terabox.com/s/abc", ["example.org"])
