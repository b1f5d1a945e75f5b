"""Tests for identities and the caller context."""

import asyncio

import pytest

from userinfo import ANONYMOUS, Anonymous, Owner, acting_as, as_identity, current_caller


class TestIdentity:
    """Tests for Owner and Anonymous."""

    def test_owner_equality(self):
        """Owners compare by id."""
        assert Owner("42") == Owner("42")
        assert Owner("42") != Owner("43")

    def test_owner_is_not_anonymous(self):
        """Owners never equal the anonymous identity."""
        assert Owner("anonymous") != ANONYMOUS
        assert not Owner("42").is_anonymous
        assert ANONYMOUS.is_anonymous

    def test_anonymous_singleton_equality(self):
        """Every Anonymous instance is equal."""
        assert Anonymous() == ANONYMOUS

    def test_empty_owner_id_rejected(self):
        """Owner ids must be non-empty."""
        with pytest.raises(ValueError):
            Owner("")

    def test_as_identity(self):
        """as_identity accepts ids, identities and None."""
        assert as_identity("bart") == Owner("bart")
        assert as_identity(1234) == Owner("1234")
        assert as_identity(None) is ANONYMOUS
        owner = Owner("x")
        assert as_identity(owner) is owner

    def test_as_identity_rejects_other_types(self):
        """Booleans and other objects are not identities."""
        with pytest.raises(TypeError):
            as_identity(True)
        with pytest.raises(TypeError):
            as_identity(3.5)


class TestCallerContext:
    """Tests for acting_as / current_caller."""

    def test_default_is_anonymous(self):
        """Nothing bound means anonymous."""
        assert current_caller() is ANONYMOUS

    def test_acting_as_binds_and_restores(self):
        """The caller is bound inside the block only."""
        with acting_as("bart") as caller:
            assert caller == Owner("bart")
            assert current_caller() == Owner("bart")
        assert current_caller() is ANONYMOUS

    def test_nested_binding(self):
        """Inner bindings restore the outer caller."""
        with acting_as("bart"):
            with acting_as("lisa"):
                assert current_caller() == Owner("lisa")
            assert current_caller() == Owner("bart")

    def test_restored_after_exception(self):
        """The binding is undone when the block raises."""
        with pytest.raises(RuntimeError):
            with acting_as("bart"):
                raise RuntimeError("boom")
        assert current_caller() is ANONYMOUS

    def test_tasks_are_independent(self):
        """Concurrent tasks see their own caller."""

        async def who(name: str) -> str:
            with acting_as(name):
                await asyncio.sleep(0)
                return str(current_caller())

        async def main() -> list[str]:
            return await asyncio.gather(who("bart"), who("lisa"))

        assert asyncio.run(main()) == ["bart", "lisa"]
