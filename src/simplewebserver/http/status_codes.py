"""
=============================================================================
RESPONSE STATUS
=============================================================================

The server only ever answers with one of two outcomes:

    ┌──────────────┬──────┬─────────────────────────────────────────────┐
    │ Status       │ Code │ Status line                                 │
    ├──────────────┼──────┼─────────────────────────────────────────────┤
    │ OK           │ 200  │ HTTP/1.1 200 OK                             │
    │ NOT_FOUND    │ 404  │ HTTP/1.1 404 ERROR                          │
    └──────────────┴──────┴─────────────────────────────────────────────┘

A missing file is an expected outcome, not a failure, so it is modelled
as a value here instead of an exception. Real faults (socket errors, a
missing not-found page) are still raised as exceptions.

Note the reason phrase for 404 is "ERROR", not "Not Found". Clients
written against this server match on the exact status line.

=============================================================================
"""

from enum import IntEnum


class Status(IntEnum):
    """
    Outcome of resolving a request path.

    IntEnum, so the members compare equal to their codes:

        >>> Status.OK == 200
        True
        >>> Status.NOT_FOUND.status_line
        'HTTP/1.1 404 ERROR'
    """

    OK = 200
    NOT_FOUND = 404

    @property
    def phrase(self) -> str:
        """Reason phrase used in the status line."""
        return _PHRASES[self]

    @property
    def status_line(self) -> str:
        """Full status line, without the line terminator."""
        return f"HTTP/1.1 {self.value} {self.phrase}"

    @property
    def is_success(self) -> bool:
        """True when the request resolved to a servable file."""
        return self is Status.OK


_PHRASES = {
    Status.OK: "OK",
    Status.NOT_FOUND: "ERROR",
}
