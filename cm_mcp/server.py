"""
Cloudera Manager MCP gateway

Exposes the Cloudera Manager REST API as MCP tools over stdio:
  • Read  (7) — API info, clusters, services, commands, parcels, parcel usage
  • Write (2) — service start/stop/restart, host inspector

Legacy dotted tool names (cm.read.*, cm.write.*) are still accepted for
invocation but are not listed.

Environment variables:
  CLDR_CM_BASE_URL / CLDR_CM_USERNAME / CLDR_CM_PASSWORD  — required
  CLDR_CM_API_VERSION   — pin the API version instead of discovering it
  CLDR_CM_VERIFY_SSL    — "false" accepts self-signed certificates
  CLDR_CM_TIMEOUT       — per-request timeout in seconds (default 30)
  ALLOW_WRITES=true     — enable write tools (each call still needs confirm=true)

Run with:
    python -m cm_mcp.server
"""

from __future__ import annotations

import asyncio
import sys
from datetime import datetime, timezone

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, TextContent, Tool

from cm_mcp.client import CLIENT_ERRORS, ClouderaManagerClient, describe_error, set_client
from cm_mcp.config import load_config_from_env
from cm_mcp.errors import ConfigError, ValidationError
from cm_mcp.formatters import ToolError, _err, text
from cm_mcp.registry import ToolRegistry
from cm_mcp.tools import write
from cm_mcp.tools.read import READ_TOOLS
from cm_mcp.tools.write import WRITE_TOOLS, WRITES_DISABLED

# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

LEGACY_ALIASES = {
    "cm.read.get_api_info": "cm_read_get_api_info",
    "cm.read.list_clusters": "cm_read_list_clusters",
    "cm.read.list_services": "cm_read_list_services",
    "cm.read.list_commands": "cm_read_list_commands",
    "cm.read.get_command": "cm_read_get_command",
    "cm.read.list_parcels": "cm_read_list_parcels",
    "cm.read.get_parcels_usage": "cm_read_get_parcels_usage",
    "cm.write.service_command": "cm_write_service_command",
    "cm.write.inspect_hosts": "cm_write_inspect_hosts",
}

REGISTRY = ToolRegistry(READ_TOOLS + WRITE_TOOLS, LEGACY_ALIASES)

# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def _audit(name: str, args: dict) -> None:
    ts = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    print(f"[AUDIT] {ts} {name} {args}", file=sys.stderr)


async def dispatch(
    name: str,
    arguments: dict | None,
    registry: ToolRegistry = REGISTRY,
) -> CallToolResult:
    """Resolve ``name``, run its handler and wrap the outcome; never raises.

    Write tools are audited and checked against ALLOW_WRITES before their
    arguments are validated, so a disabled server always answers with the
    informational refusal.
    """
    args = arguments or {}

    tool = registry.resolve(name)
    if tool is None:
        return CallToolResult(
            content=[TextContent(type="text", text=f"Unknown tool: {name}")],
            isError=True,
        )

    if tool.write:
        _audit(tool.name, args)
        if not write.ALLOW_WRITES:
            return CallToolResult(content=list(text(WRITES_DISABLED)), isError=False)

    try:
        registry.validate_arguments(tool, args)
    except ValidationError as exc:
        return CallToolResult(content=list(_err(str(exc))), isError=True)

    try:
        content = await tool.handler(args)
    except Exception as exc:  # noqa: BLE001
        return CallToolResult(
            content=[TextContent(type="text", text=f"Unexpected error: {exc}")],
            isError=True,
        )
    return CallToolResult(content=list(content), isError=isinstance(content, ToolError))


# ---------------------------------------------------------------------------
# Server setup
# ---------------------------------------------------------------------------

server = Server("cloudera-manager-mcp")


@server.list_tools()
async def list_tools() -> list[Tool]:
    return REGISTRY.list_tools()


# Arguments are validated by the registry so aliases and canonical names share one path.
@server.call_tool(validate_input=False)
async def call_tool(name: str, arguments: dict) -> CallToolResult:
    return await dispatch(name, arguments)


# ---------------------------------------------------------------------------
# Startup preflight
# ---------------------------------------------------------------------------

async def _preflight() -> None:
    """Load configuration and check that Cloudera Manager answers before serving."""
    try:
        cfg = load_config_from_env()
    except ConfigError as e:
        print(f"FATAL: {e}", file=sys.stderr)
        sys.exit(1)

    client = ClouderaManagerClient(cfg)
    set_client(client)

    try:
        version = await client.resolve_version()
        print(f"Cloudera Manager API {version} at {cfg.base_url}", file=sys.stderr)
    except CLIENT_ERRORS as e:
        print(
            f"WARNING: Cloudera Manager version check failed: {describe_error(e)}\n"
            "Tools will fail until the server is reachable.",
            file=sys.stderr,
        )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

async def _run() -> None:
    mode = "writes enabled" if write.ALLOW_WRITES else "read-only"
    print(
        f"cloudera-manager MCP server starting — {len(REGISTRY)} tools registered ({mode})",
        file=sys.stderr,
    )
    await _preflight()
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def main() -> None:
    asyncio.run(_run())


if __name__ == "__main__":
    main()
