"""
Unit tests for status codes and content-type classification.
"""

import pytest

from simplewebserver.http.status_codes import Status
from simplewebserver.http.mime_types import (
    ContentType,
    classify_content_type,
    is_image_type,
    is_text_type,
)


class TestStatus:

    def test_status_lines(self):
        assert Status.OK.status_line == "HTTP/1.1 200 OK"
        assert Status.NOT_FOUND.status_line == "HTTP/1.1 404 ERROR"

    def test_int_values(self):
        assert Status.OK == 200
        assert Status.NOT_FOUND == 404
        assert Status.OK.is_success
        assert not Status.NOT_FOUND.is_success


class TestClassifyContentType:
    """Tests for classify_content_type()."""

    @pytest.mark.parametrize("path, mime_type", [
        ("/index.html", "text/html"),
        ("/anim.gif", "image/gif"),
        ("/cat.jpeg", "image/jpeg"),
        ("/cat.jpg", "image/jpeg"),
        ("/photo.png", "image/png"),
        ("/notes.txt", "text/html"),
        ("/noextension", "text/html"),
    ])
    def test_known_types(self, path, mime_type):
        assert classify_content_type(path).mime_type == mime_type

    def test_favicon_flag(self):
        result = classify_content_type("/favicon.ico")

        assert result == ContentType("image/x-icon", is_favicon=True)
        assert not classify_content_type("/photo.png").is_favicon

    def test_substring_match(self):
        """Tokens match anywhere in the path, not only at the end."""
        assert classify_content_type("/a.html.bak").mime_type == "text/html"
        assert classify_content_type("/img.gif/readme").mime_type == "image/gif"

    def test_precedence(self):
        """First entry in the table wins when several tokens occur."""
        assert classify_content_type("/logo.png.html").mime_type == "text/html"
        assert classify_content_type("/a.gif.png").mime_type == "image/gif"
        assert classify_content_type("/a.jpg.ico").mime_type == "image/jpeg"

    def test_case_sensitive(self):
        assert classify_content_type("/photo.PNG").mime_type == "text/html"

    def test_not_found_forces_html(self):
        result = classify_content_type("/photo.png", Status.NOT_FOUND)

        assert result.mime_type == "text/html"
        assert result.is_favicon is False

    def test_type_helpers(self):
        assert is_text_type("text/html")
        assert not is_text_type("image/png")
        assert is_image_type("image/x-icon")
        assert not is_image_type("text/html")
