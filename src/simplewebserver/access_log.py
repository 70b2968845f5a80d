"""
=============================================================================
ACCESS LOG
=============================================================================

One log record per handled connection, written to the
"simplewebserver.access" logger.

=============================================================================
LOG FORMATS
=============================================================================

    TEXT (default, Apache-style):
    ┌─────────────────────────────────────────────────────────────────────┐
    │ 127.0.0.1 - - [19/Oct/2026:11:36:02 +0000] "GET /cat.png" 200      │
    │ image/png 10342 1.84ms                                              │
    └─────────────────────────────────────────────────────────────────────┘

    JSON (for log aggregators):
    ┌─────────────────────────────────────────────────────────────────────┐
    │ {"connection_id": "a1b2c3d4", "path": "/cat.png",                  │
    │  "client_ip": "127.0.0.1", "status_code": 200,                     │
    │  "content_type": "image/png", "bytes_sent": 10342, ...}            │
    └─────────────────────────────────────────────────────────────────────┘

The logger is namespaced so it can be routed separately:

    logging.getLogger("simplewebserver.access").addHandler(file_handler)

=============================================================================
"""

import json
import logging
import time
from dataclasses import dataclass, asdict


logger = logging.getLogger("simplewebserver.access")


@dataclass
class RequestLog:
    """Structured log entry for one connection."""

    connection_id: str
    path: str
    client_ip: str
    status_code: int
    content_type: str
    bytes_sent: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        data = asdict(self)
        data["duration_ms"] = round(self.duration_ms, 2)
        return data

    def to_text(self) -> str:
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"GET {self.path or "-"}" {self.status_code} '
            f'{self.content_type} {self.bytes_sent} {self.duration_ms:.2f}ms'
        )


def log_request(entry: RequestLog, log_format: str = "text", level: int = logging.INFO) -> None:
    """Emit an access log record in the configured format."""
    if log_format == "json":
        logger.log(level, json.dumps(entry.to_dict()))
    else:
        logger.log(level, entry.to_text())


def now_clf() -> str:
    """Current time in common log format."""
    return time.strftime("%d/%b/%Y:%H:%M:%S %z")
