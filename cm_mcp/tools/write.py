"""
Write tools — operations that change cluster state.

Every handler passes through _gate() before talking to Cloudera Manager:
  1. ALLOW_WRITES=true must be set in the server environment, and
  2. the call itself must carry confirm=true.
Either check failing returns an informational (non-error) message and makes no
upstream request.

Tools:
  cm_write_service_command  — start / stop / restart a service (RISK: HIGH for stop)
  cm_write_inspect_hosts    — run the Cloudera Manager host inspector (RISK: LOW)
"""

from __future__ import annotations

import os

from mcp.types import TextContent, ToolAnnotations

from cm_mcp.client import CLIENT_ERRORS, SERVICE_ACTIONS, describe_error, get_client
from cm_mcp.formatters import _err, json_text, text
from cm_mcp.registry import ToolDefinition

# ---------------------------------------------------------------------------
# Safety gate
# ---------------------------------------------------------------------------

ALLOW_WRITES = os.environ.get("ALLOW_WRITES", "false").lower() == "true"

WRITES_DISABLED = "Writes disabled. Set ALLOW_WRITES=true to enable."
CONFIRM_REQUIRED = "Refusing to run without confirm=true"


def _gate(args: dict, intent: str) -> list[TextContent] | None:
    """Return a refusal message, or None when the write may proceed."""
    if not ALLOW_WRITES:
        return text(WRITES_DISABLED)
    if args.get("confirm") is not True:
        return text(f"{CONFIRM_REQUIRED}\n\nThis would {intent}. Re-call with confirm=true to proceed.")
    return None


_CONFIRM_SCHEMA = {
    "type": "boolean",
    "default": False,
    "description": "Must be true for the operation to run.",
}


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

async def handle_service_command(args: dict) -> list[TextContent]:
    cluster = args.get("cluster", "")
    service = args.get("service", "")
    action = args.get("action", "")

    refusal = _gate(args, f"{action} service '{service}' on cluster '{cluster}'")
    if refusal is not None:
        return refusal

    try:
        c = get_client()
        await c.resolve_version()
        cmd = await c.service_command(cluster, service, action)
    except CLIENT_ERRORS as e:
        return _err(describe_error(e))
    return json_text(cmd)


async def handle_inspect_hosts(args: dict) -> list[TextContent]:
    host_ids = args.get("hostIds")
    target = f"hosts {', '.join(host_ids)}" if host_ids else "all hosts"

    refusal = _gate(args, f"run the host inspector on {target}")
    if refusal is not None:
        return refusal

    try:
        c = get_client()
        await c.resolve_version()
        cmd = await c.inspect_hosts(host_ids)
    except CLIENT_ERRORS as e:
        return _err(describe_error(e))
    return json_text(cmd)


# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------

WRITE_TOOLS: list[ToolDefinition] = [
    ToolDefinition(
        name="cm_write_service_command",
        description=(
            "[RISK: HIGH for stop] Run start/stop/restart on a service. Returns the "
            "Cloudera Manager command; poll it with cm_read_get_command. "
            "Requires confirm=true and ALLOW_WRITES=true on the server."
        ),
        input_schema={
            "type": "object",
            "required": ["cluster", "service", "action"],
            "properties": {
                "cluster": {"type": "string", "minLength": 1},
                "service": {"type": "string", "minLength": 1},
                "action": {"type": "string", "enum": list(SERVICE_ACTIONS)},
                "confirm": _CONFIRM_SCHEMA,
            },
            "additionalProperties": False,
        },
        handler=handle_service_command,
        write=True,
        annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True, openWorldHint=True),
    ),
    ToolDefinition(
        name="cm_write_inspect_hosts",
        description=(
            "[RISK: LOW] Run the Cloudera Manager host inspector, on all hosts or on the "
            "given hostIds. Returns the command to poll with cm_read_get_command. "
            "Requires confirm=true and ALLOW_WRITES=true on the server."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "hostIds": {"type": "array", "items": {"type": "string"}, "minItems": 1},
                "confirm": _CONFIRM_SCHEMA,
            },
            "additionalProperties": False,
        },
        handler=handle_inspect_hosts,
        write=True,
        annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False, openWorldHint=True),
    ),
]
