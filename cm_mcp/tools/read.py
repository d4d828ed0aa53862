"""
Read-only tools — query Cloudera Manager without changing anything.

Tools:
  cm_read_get_api_info       — resolved API version and base URL
  cm_read_list_clusters      — clusters (summary or full view)
  cm_read_list_services      — services in a cluster
  cm_read_list_commands      — active commands for a cluster or one of its services
  cm_read_get_command        — command status by id
  cm_read_list_parcels       — parcels visible to a cluster (paged client-side)
  cm_read_get_parcels_usage  — parcel usage per host for a cluster
"""

from __future__ import annotations

from mcp.types import TextContent, ToolAnnotations

from cm_mcp.client import CLIENT_ERRORS, VIEWS, describe_error, get_client
from cm_mcp.formatters import _err, json_text
from cm_mcp.paging import DEFAULT_LIMIT, MAX_LIMIT, page
from cm_mcp.registry import ToolDefinition


# ---------------------------------------------------------------------------
# Shared schema fragments
# ---------------------------------------------------------------------------

VIEW_SCHEMA = {
    "type": "string",
    "enum": list(VIEWS),
    "description": "Level of detail returned by Cloudera Manager. Default: summary.",
}

_CLUSTER_SCHEMA = {"type": "string", "minLength": 1, "description": "Cluster name as shown by cm_read_list_clusters."}

_LIMIT_SCHEMA = {"type": "integer", "minimum": 1, "maximum": MAX_LIMIT}
_OFFSET_SCHEMA = {"type": "integer", "minimum": 0}

_RO_ANNOTATIONS = ToolAnnotations(readOnlyHint=True, destructiveHint=False, openWorldHint=True)


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

async def handle_get_api_info(_args: dict) -> list[TextContent]:
    try:
        info = await get_client().get_api_info()
    except CLIENT_ERRORS as e:
        return _err(describe_error(e))
    return json_text(info)


async def handle_list_clusters(args: dict) -> list[TextContent]:
    try:
        c = get_client()
        await c.resolve_version()
        data = await c.list_clusters(args.get("view"))
    except CLIENT_ERRORS as e:
        return _err(describe_error(e))
    return json_text(data)


async def handle_list_services(args: dict) -> list[TextContent]:
    try:
        c = get_client()
        await c.resolve_version()
        data = await c.list_services(args.get("cluster", ""), args.get("view"))
    except CLIENT_ERRORS as e:
        return _err(describe_error(e))
    return json_text(data)


async def handle_list_commands(args: dict) -> list[TextContent]:
    cluster = args.get("cluster", "")
    service = args.get("service")
    opts = {"view": args.get("view"), "limit": args.get("limit"), "offset": args.get("offset")}
    try:
        c = get_client()
        await c.resolve_version()
        if service:
            data = await c.list_service_commands(cluster, service, **opts)
        else:
            data = await c.list_cluster_commands(cluster, **opts)
    except CLIENT_ERRORS as e:
        return _err(describe_error(e))
    return json_text(data)


async def handle_get_command(args: dict) -> list[TextContent]:
    try:
        c = get_client()
        await c.resolve_version()
        cmd = await c.get_command(args.get("id"))
    except CLIENT_ERRORS as e:
        return _err(describe_error(e))
    return json_text(cmd)


async def handle_list_parcels(args: dict) -> list[TextContent]:
    # Cloudera Manager returns every parcel in one response; page it here.
    view = args.get("view") or "summary"
    limit = int(args.get("limit", DEFAULT_LIMIT))
    offset = int(args.get("offset", 0))
    try:
        c = get_client()
        await c.resolve_version()
        data = await c.list_parcels(args.get("cluster", ""), view)
    except CLIENT_ERRORS as e:
        return _err(describe_error(e))
    return json_text(page(data, limit, offset))


async def handle_get_parcels_usage(args: dict) -> list[TextContent]:
    try:
        c = get_client()
        await c.resolve_version()
        data = await c.get_parcels_usage(args.get("cluster", ""))
    except CLIENT_ERRORS as e:
        return _err(describe_error(e))
    return json_text(data)


# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------

READ_TOOLS: list[ToolDefinition] = [
    ToolDefinition(
        name="cm_read_get_api_info",
        description="Get the Cloudera Manager API version in use and the base URL the gateway talks to.",
        handler=handle_get_api_info,
        annotations=_RO_ANNOTATIONS,
    ),
    ToolDefinition(
        name="cm_read_list_clusters",
        description="List clusters managed by Cloudera Manager (summary or full view).",
        input_schema={
            "type": "object",
            "properties": {"view": VIEW_SCHEMA},
            "additionalProperties": False,
        },
        handler=handle_list_clusters,
        annotations=_RO_ANNOTATIONS,
    ),
    ToolDefinition(
        name="cm_read_list_services",
        description="List the services (HDFS, YARN, HIVE, ...) of a cluster with their state and health.",
        input_schema={
            "type": "object",
            "required": ["cluster"],
            "properties": {"cluster": _CLUSTER_SCHEMA, "view": VIEW_SCHEMA},
            "additionalProperties": False,
        },
        handler=handle_list_services,
        annotations=_RO_ANNOTATIONS,
    ),
    ToolDefinition(
        name="cm_read_list_commands",
        description=(
            "List recent commands for a cluster, or for one service when `service` is given. "
            "limit/offset are forwarded to Cloudera Manager."
        ),
        input_schema={
            "type": "object",
            "required": ["cluster"],
            "properties": {
                "cluster": _CLUSTER_SCHEMA,
                "service": {"type": "string", "description": "Restrict to commands of this service."},
                "view": VIEW_SCHEMA,
                "limit": _LIMIT_SCHEMA,
                "offset": _OFFSET_SCHEMA,
            },
            "additionalProperties": False,
        },
        handler=handle_list_commands,
        annotations=_RO_ANNOTATIONS,
    ),
    ToolDefinition(
        name="cm_read_get_command",
        description=(
            "Get a command's status by id. Use it to follow up on the command id returned "
            "by cm_write_service_command or cm_write_inspect_hosts."
        ),
        input_schema={
            "type": "object",
            "required": ["id"],
            "properties": {"id": {"type": "integer", "description": "Command id."}},
            "additionalProperties": False,
        },
        handler=handle_get_command,
        annotations=_RO_ANNOTATIONS,
    ),
    ToolDefinition(
        name="cm_read_list_parcels",
        description=(
            "List parcels that a cluster has access to (supports view; limit/offset are "
            f"applied client-side, default limit {DEFAULT_LIMIT})."
        ),
        input_schema={
            "type": "object",
            "required": ["cluster"],
            "properties": {
                "cluster": _CLUSTER_SCHEMA,
                "view": VIEW_SCHEMA,
                "limit": _LIMIT_SCHEMA,
                "offset": _OFFSET_SCHEMA,
            },
            "additionalProperties": False,
        },
        handler=handle_list_parcels,
        annotations=_RO_ANNOTATIONS,
    ),
    ToolDefinition(
        name="cm_read_get_parcels_usage",
        description="Get parcel usage details for a cluster (no paging supported by Cloudera Manager).",
        input_schema={
            "type": "object",
            "required": ["cluster"],
            "properties": {"cluster": _CLUSTER_SCHEMA, "view": VIEW_SCHEMA},
            "additionalProperties": False,
        },
        handler=handle_get_parcels_usage,
        annotations=_RO_ANNOTATIONS,
    ),
]
