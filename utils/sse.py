"""Server-Sent Events formatting."""

from __future__ import annotations

import json
from typing import Any


def format_sse(data: dict | Any, event: str | None = None) -> str:
    """Format a payload as one SSE message."""
    msg = f"data: {json.dumps(data)}\n\n"
    if event:
        msg = f"event: {event}\n{msg}"
    return msg
