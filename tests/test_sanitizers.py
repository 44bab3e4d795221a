import pytest

from order_tracking.sanitizers import sanitize_text_field, sanitize_url


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("ABC123", "ABC123"),
        ("  <b>ABC</b>123 \n ", "ABC123"),
        ("A  B\tC\r\nD", "A B C D"),
        ("ABC%20123", "ABC123"),
        ("", ""),
        (None, ""),
        (12345, "12345"),
    ],
)
def test_sanitize_text_field(raw, expected):
    assert sanitize_text_field(raw) == expected


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("https://track.example/1Z999", "https://track.example/1Z999"),
        ("  carrier.example/ABC123 ", "http://carrier.example/ABC123"),
        ("example.com:8080/x", "http://example.com:8080/x"),
        ("https://example.com/a b", "https://example.com/a%20b"),
        ("https://example.com/x%0d%0aSet-Cookie:y", "https://example.com/xSet-Cookie:y"),
        ('https://example.com/"><script>', "https://example.com/script"),
        ("https://ex.example/ñ", "https://ex.example/%C3%B1"),
        ("HTTPS://track.example/1", "HTTPS://track.example/1"),
    ],
)
def test_sanitize_url_normalizes(raw, expected):
    assert sanitize_url(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "",
        "   ",
        "javascript:alert(1)",
        "ftp://files.example/label.pdf",
        "/relative/path",
        "#fragment",
        "https://",
        "http://[::1",
    ],
)
def test_sanitize_url_drops_unusable_values(raw):
    assert sanitize_url(raw) == ""
