"""
Tests for unfurl/utils.py URL and text helpers.
"""
import pytest

from unfurl.errors import ResolveFailed
from unfurl.utils import (
    clean_text,
    collapse_newlines,
    generate_unique_filename,
    is_absolute_url,
    is_remote_url,
    resolve_url,
    split_lines,
    validate_url,
)


class TestValidateUrl:
    """Test URL acceptance by scheme."""

    @pytest.mark.parametrize("url", [
        "https://example.com",
        "http://example.com/page?q=1",
        "https://x.com/jack/status/20",
        "HTTPS://EXAMPLE.COM",
        "file:///tmp/page.html",
        "http://localhost:8000/",
    ])
    def test_accepts_supported_schemes(self, url):
        assert validate_url(url) is True

    @pytest.mark.parametrize("url", [
        "",
        "   ",
        "example.com",
        "ftp://example.com/file",
        "mailto:someone@example.com",
        "javascript:alert(1)",
        "http://",
        "https://",
        "file:",
        "http://[::1",
    ])
    def test_rejects_everything_else(self, url):
        assert validate_url(url) is False

    def test_none_is_rejected(self):
        assert validate_url(None) is False


class TestRemoteAndAbsolute:
    """Test URL classification helpers."""

    def test_is_remote_url(self):
        assert is_remote_url("https://example.com")
        assert not is_remote_url("file:///tmp/x")
        assert not is_remote_url("/img.png")

    def test_is_absolute_url(self):
        assert is_absolute_url("https://example.com/img.png")
        assert is_absolute_url("data:image/png;base64,AAAA")
        assert not is_absolute_url("/img.png")
        assert not is_absolute_url("//cdn.example.com/img.png")
        assert not is_absolute_url("https:///nohost")


class TestResolveUrl:
    """Test relative URL resolution."""

    def test_absolute_url_unchanged(self):
        url = "https://cdn.example.com/a/b.png?x=1"
        assert resolve_url(url, "https://example.com/page") == url

    def test_root_relative(self):
        assert resolve_url("/img.png", "https://ex.com/page") == "https://ex.com/img.png"

    def test_path_relative(self):
        assert resolve_url("img.png", "https://ex.com/a/page") == "https://ex.com/a/img.png"

    def test_protocol_relative(self):
        assert resolve_url("//cdn.ex.com/i.png", "https://ex.com/") == "https://cdn.ex.com/i.png"

    def test_unresolvable_against_bad_base(self):
        with pytest.raises(ResolveFailed):
            resolve_url("/img.png", "not a url")

    def test_empty_value(self):
        with pytest.raises(ResolveFailed):
            resolve_url("   ", "https://ex.com/")


class TestTextHelpers:
    """Test trimming and line handling."""

    def test_clean_text_trims(self):
        assert clean_text("  hi  ") == "hi"

    def test_clean_text_empty_is_none(self):
        assert clean_text("") is None
        assert clean_text(" \n\t ") is None
        assert clean_text(None) is None

    def test_split_lines_all_styles(self):
        assert split_lines("a\nb\r\nc\rd") == ["a", "b", "c", "d"]

    def test_split_lines_keeps_empty_segments(self):
        assert split_lines("a\n\nb") == ["a", "", "b"]

    def test_collapse_newlines(self):
        assert collapse_newlines("Hello\r\n\nWorld\n") == "Hello World"


class TestGenerateUniqueFilename:
    """Test image filename generation."""

    def test_keeps_extension(self):
        name = generate_unique_filename("https://ex.com/a/photo.jpg")
        assert name.endswith(".jpg")
        assert len(name) == 32 + len(".jpg")

    def test_default_extension(self):
        assert generate_unique_filename("https://ex.com/image").endswith(".png")

    def test_deterministic(self):
        url = "https://ex.com/photo.jpg"
        assert generate_unique_filename(url) == generate_unique_filename(url)
