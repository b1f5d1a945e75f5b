"""Service methods over the attribute facade.

Method names match the ones other services already call: ``get``, ``set``,
``getPermissions`` and ``setPermissions``.
"""

import json
from typing import Any

from ..fields import FIELD_NAMES
from ..service import UserInformationService
from .base import Tool, ToolResult
from .registry import ToolRegistry

_FIELDS_SCHEMA = {
    "type": "array",
    "items": {"type": "string", "enum": sorted(FIELD_NAMES)},
    "description": "Requested field names, in order",
}


class GetUserInfoTool(Tool):
    """Read attributes of any identity."""

    def __init__(self, service: UserInformationService) -> None:
        self.service = service

    @property
    def name(self) -> str:
        return "get"

    @property
    def description(self) -> str:
        return (
            "Fetch user information fields for an identity. Private fields of "
            "other identities are left out."
        )

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "owner_id": {
                    "type": ["string", "integer"],
                    "description": "Identity whose information is requested",
                },
                "fields": _FIELDS_SCHEMA,
            },
            "required": ["owner_id", "fields"],
        }

    async def execute(self, **kwargs: Any) -> ToolResult:
        result = self.service.read(kwargs["owner_id"], kwargs["fields"])
        return ToolResult(
            success=True,
            output=json.dumps(result),
            metadata={"result": result},
        )


class SetUserInfoTool(Tool):
    """Write attributes of the calling identity."""

    def __init__(self, service: UserInformationService) -> None:
        self.service = service

    @property
    def name(self) -> str:
        return "set"

    @property
    def description(self) -> str:
        return (
            "Store user information fields for the calling identity. Stops at "
            "the first invalid entry; earlier entries stay stored."
        )

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "values": {
                    "type": "object",
                    "description": "Field name to text value",
                },
            },
            "required": ["values"],
        }

    async def execute(self, **kwargs: Any) -> ToolResult:
        ok = self.service.write(kwargs["values"])
        return ToolResult(
            success=ok,
            output=json.dumps(ok),
            error=None if ok else "Storing user information failed",
            metadata={"result": ok},
        )


class GetPermissionsTool(Tool):
    """Report which of the caller's attributes are public."""

    def __init__(self, service: UserInformationService) -> None:
        self.service = service

    @property
    def name(self) -> str:
        return "getPermissions"

    @property
    def description(self) -> str:
        return "Report for each field whether it is public (true) or private (false)."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {"fields": _FIELDS_SCHEMA},
            "required": ["fields"],
        }

    async def execute(self, **kwargs: Any) -> ToolResult:
        result = self.service.read_permissions(kwargs["fields"])
        if result is None:
            return ToolResult(
                success=False,
                output="null",
                error="Reading permissions failed",
                metadata={"result": None},
            )
        return ToolResult(
            success=True,
            output=json.dumps(result),
            metadata={"result": result},
        )


class SetPermissionsTool(Tool):
    """Make the caller's attributes public or private."""

    def __init__(self, service: UserInformationService) -> None:
        self.service = service

    @property
    def name(self) -> str:
        return "setPermissions"

    @property
    def description(self) -> str:
        return (
            "Set fields of the calling identity public (true) or private "
            "(false). Fields without a stored value are left alone."
        )

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "permissions": {
                    "type": "object",
                    "description": "Field name to public flag",
                },
            },
            "required": ["permissions"],
        }

    async def execute(self, **kwargs: Any) -> ToolResult:
        ok = self.service.write_permissions(kwargs["permissions"])
        return ToolResult(
            success=ok,
            output=json.dumps(ok),
            error=None if ok else "Setting permissions failed",
            metadata={"result": ok},
        )


def build_registry(service: UserInformationService) -> ToolRegistry:
    """Registry exposing the four service methods."""
    registry = ToolRegistry()
    registry.register(GetUserInfoTool(service))
    registry.register(SetUserInfoTool(service))
    registry.register(GetPermissionsTool(service))
    registry.register(SetPermissionsTool(service))
    return registry
