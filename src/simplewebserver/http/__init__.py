"""
=============================================================================
HTTP MODULE
=============================================================================

The small slice of HTTP/1.1 this server speaks:

    request.py       Find "GET <path>" among the request lines
    response.py      Write the six-line response header
    status_codes.py  OK (200) and NOT_FOUND (404)
    mime_types.py    Path → Content-Type

=============================================================================
"""

from .request import read_request_path, extract_get_path
from .response import build_header, write_header, format_timestamp
from .status_codes import Status
from .mime_types import ContentType, classify_content_type

__all__ = [
    "read_request_path",
    "extract_get_path",
    "build_header",
    "write_header",
    "format_timestamp",
    "Status",
    "ContentType",
    "classify_content_type",
]
