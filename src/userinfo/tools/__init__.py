"""Tool registry and the service methods it dispatches."""

from .attributes import (
    GetPermissionsTool,
    GetUserInfoTool,
    SetPermissionsTool,
    SetUserInfoTool,
    build_registry,
)
from .base import Tool, ToolResult
from .registry import ToolRegistry

__all__ = [
    "GetPermissionsTool",
    "GetUserInfoTool",
    "SetPermissionsTool",
    "SetUserInfoTool",
    "Tool",
    "ToolRegistry",
    "ToolResult",
    "build_registry",
]
