"""Tests for fixture store seeding, id generation, reset and copy isolation."""

from datetime import datetime, timezone

import pytest

from mortgage_sim.fixtures import FixtureStore


def _fixed_clock() -> datetime:
    return datetime(2024, 2, 1, 12, 0, tzinfo=timezone.utc)


def test_fixture_store_seeds_every_collection() -> None:
    """Verify a fresh store holds the seed records of every collection."""

    store = FixtureStore(clock=_fixed_clock)

    assert store.fixture_size("users") == 2
    assert store.fixture_size("clients") == 3
    assert store.fixture_size("applications") == 3
    assert store.fixture_size("notifications") == 5
    assert store.fixture_get("users", "1")["email"] == "demo@borrower.com"


def test_fixture_store_ids_are_monotonic_and_prefixed() -> None:
    """Verify generated ids share one sequence starting at the configured value."""

    store = FixtureStore(clock=_fixed_clock, id_start=1000)

    assert store.fixture_next_id("client") == "client-1000"
    assert store.fixture_next_id("doc") == "doc-1001"
    assert store.fixture_next_sequence() == 1002
    with pytest.raises(ValueError):
        store.fixture_next_id(" ")


def test_fixture_store_reset_restores_seeds_without_rewinding_ids() -> None:
    """Verify reset drops runtime records but ids issued earlier are never reissued."""

    store = FixtureStore(clock=_fixed_clock)
    store.fixture_append("clients", {"id": store.fixture_next_id("client"), "firstName": "New"})
    store.fixture_update("clients", "client-1", {"status": "closed"})
    store.fixture_set_preferences("user-1", {"email": {"enabled": False}})

    store.fixture_reset()

    assert store.fixture_size("clients") == 3
    assert store.fixture_get("clients", "client-1")["status"] == "active"
    assert store.fixture_get_preferences("user-1") is None
    assert store.fixture_next_id("client") == "client-1001"


def test_fixture_store_reads_return_isolated_copies() -> None:
    """Verify mutating returned records never changes stored state."""

    store = FixtureStore(clock=_fixed_clock)

    listed_clients = store.fixture_list("clients")
    listed_clients[0]["tags"].append("Mutated")
    fetched_client = store.fixture_get("clients", "client-1")
    fetched_client["status"] = "mutated"

    stored_client = store.fixture_get("clients", "client-1")
    assert "Mutated" not in stored_client["tags"]
    assert stored_client["status"] == "active"


def test_fixture_store_append_rejects_duplicate_and_missing_ids() -> None:
    """Verify append requires a unique non-blank id."""

    store = FixtureStore(clock=_fixed_clock)

    with pytest.raises(ValueError):
        store.fixture_append("clients", {"id": "client-1"})
    with pytest.raises(ValueError):
        store.fixture_append("clients", {"firstName": "No Id"})
    assert store.fixture_size("clients") == 3


def test_fixture_store_update_never_changes_id() -> None:
    """Verify updates merge fields but keep the record id."""

    store = FixtureStore(clock=_fixed_clock)

    updated_client = store.fixture_update("clients", "client-2", {"id": "hijack", "status": "closed"})

    assert updated_client["id"] == "client-2"
    assert updated_client["status"] == "closed"
    assert store.fixture_get("clients", "hijack") is None
    assert store.fixture_update("clients", "missing", {"status": "closed"}) is None


def test_fixture_store_unknown_collection_raises_key_error() -> None:
    """Verify unknown collection and reference names raise KeyError."""

    store = FixtureStore(clock=_fixed_clock)

    with pytest.raises(KeyError):
        store.fixture_list("loans")
    with pytest.raises(KeyError):
        store.fixture_reference("unknown")
