"""
=============================================================================
CONTENT-TYPE CLASSIFICATION
=============================================================================

Maps a request path to the MIME type sent in the Content-Type header.

=============================================================================
SUPPORTED TYPES
=============================================================================

    ┌────────────────────────────────────────────────────────────────────┐
    │  Precedence   Token in path       MIME type                        │
    ├────────────────────────────────────────────────────────────────────┤
    │  1            .html               text/html                        │
    │  2            .gif                image/gif                        │
    │  3            .jpeg / .jpg        image/jpeg                       │
    │  4            .png                image/png                        │
    │  5            .ico                image/x-icon  (favicon)          │
    │  -            anything else       text/html                        │
    └────────────────────────────────────────────────────────────────────┘

=============================================================================
SUBSTRING, NOT SUFFIX
=============================================================================

Tokens are matched ANYWHERE in the path, first match wins, and the
match is case-sensitive:

    /index.html          → text/html
    /a.html.bak          → text/html     (".html" occurs in the path)
    /logo.png.html       → text/html     (".html" checked before ".png")
    /img.gif/readme      → image/gif

    /photo.PNG           → text/html     (no lowercase ".png")

A 404 response is always text/html, whatever the path looked like.

=============================================================================
"""

from typing import NamedTuple

from .status_codes import Status


TEXT_HTML = "text/html"
FAVICON_TYPE = "image/x-icon"


# =============================================================================
# CLASSIFICATION TABLE
# =============================================================================
#
# Ordered. Each entry is (tokens, mime type); the first entry with any
# token present in the path wins.
#
# =============================================================================

CONTENT_TYPES = (
    ((".html",), TEXT_HTML),
    ((".gif",), "image/gif"),
    ((".jpeg", ".jpg"), "image/jpeg"),
    ((".png",), "image/png"),
    ((".ico",), FAVICON_TYPE),
)


class ContentType(NamedTuple):
    """Result of classification."""

    mime_type: str
    is_favicon: bool = False


def classify_content_type(path: str, status: Status = Status.OK) -> ContentType:
    """
    Classify a resolved request path.

    Args:
        path: The request path (e.g. "/images/cat.png").
        status: Outcome of path resolution. NOT_FOUND forces text/html.

    Returns:
        ContentType with the MIME string and the favicon flag.

    Example:
        >>> classify_content_type("/cat.jpg")
        ContentType(mime_type='image/jpeg', is_favicon=False)
        >>> classify_content_type("/cat.jpg", Status.NOT_FOUND)
        ContentType(mime_type='text/html', is_favicon=False)
    """
    if not status.is_success:
        return ContentType(TEXT_HTML)

    for tokens, mime_type in CONTENT_TYPES:
        if any(token in path for token in tokens):
            return ContentType(mime_type, is_favicon=mime_type == FAVICON_TYPE)

    return ContentType(TEXT_HTML)


def is_text_type(mime_type: str) -> bool:
    """True for content streamed line by line with tag substitution."""
    return TEXT_HTML in mime_type


def is_image_type(mime_type: str) -> bool:
    """True for content copied verbatim as bytes."""
    return mime_type.startswith("image")
