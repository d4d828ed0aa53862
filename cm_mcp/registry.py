"""
Tool registry — one canonical table of tool definitions plus a legacy alias layer.

Legacy dotted names (``cm.read.list_clusters``) are resolved to their canonical
name before the table lookup, so an alias can never drift from the tool it
stands for. Aliases are accepted for invocation but never advertised.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Mapping

import jsonschema
from mcp.types import TextContent, Tool, ToolAnnotations

from cm_mcp.errors import ValidationError

Handler = Callable[[dict], Awaitable[list[TextContent]]]

EMPTY_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {},
    "additionalProperties": False,
}


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    handler: Handler
    input_schema: dict[str, Any] | None = None
    write: bool = False
    annotations: ToolAnnotations | None = None

    @property
    def schema(self) -> dict[str, Any]:
        """The advertised schema; tools without one accept no arguments."""
        return self.input_schema if self.input_schema is not None else EMPTY_SCHEMA

    def to_tool(self) -> Tool:
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.schema,
            annotations=self.annotations,
        )


class ToolRegistry:
    def __init__(
        self,
        tools: Iterable[ToolDefinition],
        aliases: Mapping[str, str] | None = None,
    ) -> None:
        self._tools: dict[str, ToolDefinition] = {}
        for tool in tools:
            if tool.name in self._tools:
                raise ValueError(f"Tool '{tool.name}' registered twice")
            self._tools[tool.name] = tool

        self._aliases: dict[str, str] = {}
        for legacy, canonical in (aliases or {}).items():
            if canonical not in self._tools:
                raise ValueError(f"Alias '{legacy}' points at unknown tool '{canonical}'")
            if legacy in self._tools:
                raise ValueError(f"Alias '{legacy}' shadows a canonical tool name")
            self._aliases[legacy] = canonical

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return self.resolve(name) is not None if isinstance(name, str) else False

    def list_tools(self) -> list[Tool]:
        """Canonical tools only, in registration order."""
        return [t.to_tool() for t in self._tools.values()]

    def resolve(self, name: str) -> ToolDefinition | None:
        return self._tools.get(self._aliases.get(name, name))

    @staticmethod
    def validate_arguments(tool: ToolDefinition, arguments: dict) -> None:
        """Raise ValidationError if ``arguments`` do not satisfy the tool schema."""
        validator = jsonschema.Draft202012Validator(tool.schema)
        errors = sorted(validator.iter_errors(arguments), key=lambda e: [str(p) for p in e.path])
        if not errors:
            return
        first = errors[0]
        where = ".".join(str(p) for p in first.path)
        prefix = f"{where}: " if where else ""
        raise ValidationError(f"Invalid arguments for {tool.name}: {prefix}{first.message}")
