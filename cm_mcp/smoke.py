"""
Read-only smoke check against a live Cloudera Manager.

Prints the API info, the clusters (summary view) and the services of the first
cluster. Exits non-zero on the first failure.

Run with:
    python -m cm_mcp.smoke
"""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Any

from cm_mcp.client import CLIENT_ERRORS, ClouderaManagerClient, describe_error
from cm_mcp.config import load_config_from_env
from cm_mcp.formatters import section
from cm_mcp.paging import collection_items


def _first_cluster_name(clusters: Any) -> str | None:
    items = collection_items(clusters)
    if items and isinstance(items[0], dict):
        return items[0].get("name")
    return None


async def run_smoke(client: ClouderaManagerClient) -> None:
    info = await client.get_api_info()
    print(section("API Info", json.dumps(info, indent=2)))

    clusters = await client.list_clusters("summary")
    print(section("Clusters", json.dumps(clusters, indent=2)))

    first = _first_cluster_name(clusters)
    if not first:
        print("No clusters found to list services.")
        return
    services = await client.list_services(first, "summary")
    print(section(f"Services for {first}", json.dumps(services, indent=2)))


def main() -> None:
    try:
        client = ClouderaManagerClient(load_config_from_env())
        asyncio.run(run_smoke(client))
    except CLIENT_ERRORS as e:
        print(f"Smoke test failed: {describe_error(e)}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
