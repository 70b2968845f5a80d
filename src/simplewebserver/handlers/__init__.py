"""
=============================================================================
HANDLERS MODULE
=============================================================================

    ConnectionHandler    Serves one request on one connection
    RequestContext       What was requested and how it will be answered

=============================================================================
"""

from .worker import (
    ConnectionHandler,
    RequestContext,
    NotFoundDocumentError,
    resolve_path,
    substitute_tags,
)

__all__ = [
    "ConnectionHandler",
    "RequestContext",
    "NotFoundDocumentError",
    "resolve_path",
    "substitute_tags",
]
