"""Shared output formatting helpers."""

from __future__ import annotations

import json
from typing import Any

from mcp.types import TextContent


# ---------------------------------------------------------------------------
# Shared error helper
# ---------------------------------------------------------------------------

class ToolError(list):
    """Sentinel list subclass returned by tool handlers to indicate an error.

    Wraps a ``list[TextContent]`` so handler return-type contracts are
    preserved while ``server.py`` can detect errors via ``isinstance()``.
    """


def _err(msg: str) -> list[TextContent]:
    """Return an error response that ``server.py`` will mark with ``isError=True``."""
    return ToolError([TextContent(type="text", text=f"Error: {msg}")])


def text(msg: str) -> list[TextContent]:
    return [TextContent(type="text", text=msg)]


def json_text(data: Any) -> list[TextContent]:
    """Pretty-print an upstream payload as a single text block."""
    return text(json.dumps(data, indent=2))


def section(title: str, body: str) -> str:
    """Format a titled section."""
    bar = "─" * len(title)
    return f"{title}\n{bar}\n{body}"
