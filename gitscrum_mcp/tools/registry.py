"""Tool registration and routing."""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from mcp.types import CallToolResult, Tool

from gitscrum_mcp.tools.dispatcher import ToolContext, error

logger = logging.getLogger(__name__)

ToolHandler = Callable[[ToolContext, str, dict[str, Any]], Awaitable[CallToolResult]]


@dataclass
class ToolModule:
    """A group of tools served by one handler."""

    tools: list[Tool]
    handler: ToolHandler
    handles: list[str]


_handlers: dict[str, ToolHandler] = {}
_tools: list[Tool] = []


def register_module(module: ToolModule) -> None:
    _tools.extend(module.tools)
    for name in module.handles:
        _handlers[name] = module.handler


def get_all_tools() -> list[Tool]:
    return list(_tools)


def is_tool_registered(name: str) -> bool:
    return name in _handlers


def clear_registry() -> None:
    """Forget all registered modules."""
    _handlers.clear()
    _tools.clear()


async def route_tool_call(
    ctx: ToolContext, name: str, arguments: dict[str, Any]
) -> CallToolResult:
    """
    Call the handler registered for a tool.

    Args:
        ctx: Context for the call
        name: Tool name
        arguments: Tool arguments

    Returns:
        Tool result, or an error result for unknown tools
    """
    handler = _handlers.get(name)
    if handler is None:
        return error(f"Unknown tool: {name}")
    return await handler(ctx, name, arguments)


def initialize_tool_modules() -> None:
    """Register every tool module once."""
    if _handlers:
        return

    from gitscrum_mcp.tools import (
        auth_tools,
        label_tools,
        project_tools,
        search_tools,
        sprint_tools,
        task_tools,
        task_type_tools,
        userstory_tools,
        workflow_tools,
    )

    for tool_module in (
        auth_tools,
        task_tools,
        project_tools,
        sprint_tools,
        userstory_tools,
        search_tools,
        workflow_tools,
        label_tools,
        task_type_tools,
    ):
        register_module(tool_module.MODULE)
    logger.debug(f"Registered {len(_tools)} tools")
