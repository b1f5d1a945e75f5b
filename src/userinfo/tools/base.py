"""Base interface for invocable service methods."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

_TYPE_CHECKS: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "integer": (int,),
    "boolean": (bool,),
    "array": (list, tuple),
    "object": (dict,),
}


@dataclass
class ToolResult:
    """Result from tool execution."""

    success: bool
    output: str
    error: str | None = None
    metadata: dict[str, Any] | None = None


class Tool(ABC):
    """Base interface for all tools."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique method name callers invoke."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """What the method does."""
        ...

    @property
    @abstractmethod
    def parameters(self) -> dict[str, Any]:
        """JSON Schema for tool parameters."""
        ...

    @abstractmethod
    async def execute(self, **kwargs: Any) -> ToolResult:
        """Execute the tool with given arguments."""
        ...

    def get_schema(self) -> dict[str, Any]:
        """Get the tool schema advertised to callers."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }

    def validate_args(self, args: dict[str, Any]) -> tuple[bool, str | None]:
        """Validate arguments against schema. Returns (valid, error_message)."""
        required = self.parameters.get("required", [])
        properties = self.parameters.get("properties", {})

        for field in required:
            if field not in args:
                return False, f"Missing required argument: {field}"

        for key, value in args.items():
            if key not in properties:
                return False, f"Unexpected argument: {key}"
            expected = properties[key].get("type")
            expected_types = expected if isinstance(expected, list) else [expected]
            known = [t for t in expected_types if t in _TYPE_CHECKS]
            if not known:
                continue
            if not any(_matches(value, t) for t in known):
                names = " or ".join(f"{'an' if t[0] in 'aeiou' else 'a'} {t}" for t in known)
                return False, f"Argument '{key}' must be {names}"

        return True, None


def _matches(value: Any, json_type: str) -> bool:
    if json_type == "integer" and isinstance(value, bool):
        return False
    return isinstance(value, _TYPE_CHECKS[json_type])
