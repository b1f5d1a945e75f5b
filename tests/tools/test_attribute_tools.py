"""Tests for the service methods exposed through the registry."""

import json
from pathlib import Path

import pytest

from userinfo import InMemoryRecordStore, SQLiteRecordStore, UserInformationService
from userinfo.tools import ToolRegistry, build_registry

ALL_FIELDS = ["firstName", "lastName", "userImage"]


@pytest.fixture
def registry() -> ToolRegistry:
    return build_registry(UserInformationService(InMemoryRecordStore()))


class TestBuildRegistry:
    """Tests for build_registry."""

    def test_registers_service_methods(self, registry: ToolRegistry):
        """All four methods are exposed under their call names."""
        assert sorted(registry.list_tools()) == [
            "get",
            "getPermissions",
            "set",
            "setPermissions",
        ]

    def test_fields_schema_lists_catalog(self, registry: ToolRegistry):
        """The fields parameter advertises the known names."""
        params = registry.get("get").parameters
        assert params["required"] == ["owner_id", "fields"]
        assert params["properties"]["fields"]["items"]["enum"] == sorted(ALL_FIELDS)


class TestAttributeTools:
    """Tests for get / set / getPermissions / setPermissions."""

    @pytest.mark.asyncio
    async def test_set_then_get(self, registry: ToolRegistry):
        """Values set by a caller are returned by get."""
        result = await registry.dispatch("set", {"values": {"firstName": "Bart"}}, caller="bart")
        assert result.success
        assert result.metadata["result"] is True

        result = await registry.dispatch(
            "get", {"owner_id": "bart", "fields": ["firstName"]}, caller="bart"
        )
        assert result.success
        assert json.loads(result.output) == {"firstName": "Bart"}

    @pytest.mark.asyncio
    async def test_numeric_owner_id(self, registry: ToolRegistry):
        """Integer ids address the same owner as their string form."""
        result = await registry.dispatch("set", {"values": {"firstName": "Bart"}}, caller=1234)
        assert result.success

        result = await registry.dispatch("get", {"owner_id": 1234, "fields": ["firstName"]}, caller=1234)
        assert result.success
        assert json.loads(result.output) == {"firstName": "Bart"}

        result = await registry.dispatch("get", {"owner_id": "1234", "fields": ["firstName"]}, caller="1234")
        assert json.loads(result.output) == {"firstName": "Bart"}

    @pytest.mark.asyncio
    async def test_set_invalid_field(self, registry: ToolRegistry):
        """Invalid entries make set fail."""
        result = await registry.dispatch("set", {"values": {"nickname": "B"}}, caller="bart")
        assert not result.success
        assert result.metadata["result"] is False
        assert "failed" in result.error

    @pytest.mark.asyncio
    async def test_set_as_anonymous_fails(self, registry: ToolRegistry):
        """Anonymous callers cannot set values."""
        result = await registry.dispatch("set", {"values": {"firstName": "B"}})
        assert not result.success

    @pytest.mark.asyncio
    async def test_get_rejects_non_list_fields(self, registry: ToolRegistry):
        """Argument types are checked before the service runs."""
        result = await registry.dispatch("get", {"owner_id": "bart", "fields": "firstName"})
        assert not result.success
        assert "must be an array" in result.error

    @pytest.mark.asyncio
    async def test_get_permissions_as_anonymous_fails(self, registry: ToolRegistry):
        """getPermissions reports failure as an unsuccessful result."""
        result = await registry.dispatch("getPermissions", {"fields": ["firstName"]})
        assert not result.success
        assert result.metadata["result"] is None

    @pytest.mark.asyncio
    async def test_simpson_profile(self, tmp_path: Path):
        """The profile scenario works through the registry on a SQLite store."""
        store = SQLiteRecordStore(tmp_path / "userinfo.db")
        store.init_db()
        registry = build_registry(UserInformationService(store))

        values = {"firstName": "Bart", "lastName": "Simpson", "userImage": "asdf"}
        assert (await registry.dispatch("set", {"values": values}, caller="adam")).success

        result = await registry.dispatch("get", {"owner_id": "adam", "fields": ALL_FIELDS}, caller="adam")
        assert result.metadata["result"] == values

        assert (await registry.dispatch("set", {"values": {"firstName": "Homer"}}, caller="adam")).success
        assert (
            await registry.dispatch("setPermissions", {"permissions": {"firstName": True}}, caller="adam")
        ).success

        result = await registry.dispatch("getPermissions", {"fields": ALL_FIELDS}, caller="adam")
        assert result.metadata["result"] == {
            "firstName": True,
            "lastName": False,
            "userImage": False,
        }

        result = await registry.dispatch("get", {"owner_id": "adam", "fields": ["firstName"]}, caller="eve")
        assert result.metadata["result"] == {"firstName": "Homer"}

        result = await registry.dispatch("get", {"owner_id": "adam", "fields": ["lastName", "firstName"]})
        assert result.metadata["result"] == {"firstName": "Homer"}
        assert "lastName" not in result.metadata["result"]

        store.close()
