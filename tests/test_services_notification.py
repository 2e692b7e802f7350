"""Tests for virtual notification routes: read state, sending and preferences."""

from datetime import datetime, timezone

import pytest

from mortgage_sim.fixtures import FixtureStore
from mortgage_sim.routing import LatencySimulator, RequestDispatcher
from mortgage_sim.services import NotificationVirtualService, notification_count_by, notification_filter


def _fixed_clock() -> datetime:
    return datetime(2024, 2, 1, 12, 0, tzinfo=timezone.utc)


def _build_dispatcher(random_value: float = 0.0) -> tuple[RequestDispatcher, FixtureStore]:
    store = FixtureStore(clock=_fixed_clock)
    service = NotificationVirtualService(
        store=store,
        latency=LatencySimulator(scale=0),
        random_unit_interval_provider=lambda: random_value,
        clock=_fixed_clock,
    )
    return RequestDispatcher([service]), store


@pytest.mark.asyncio
async def test_notification_read_all_counts_only_matching_unread() -> None:
    """Verify read-all marks and counts unread notifications of one user."""

    dispatcher, _ = _build_dispatcher()

    marked = await dispatcher.dispatcher_dispatch("PUT", "/api/notifications/read-all?userId=user-1")
    stats = await dispatcher.dispatcher_dispatch("GET", "/api/notifications/stats", query={"userId": "user-1"})
    broker_stats = await dispatcher.dispatcher_dispatch(
        "GET",
        "/api/notifications/stats",
        query={"userId": "broker-1"},
    )

    assert marked.envelope["data"]["updatedCount"] == 2
    assert stats.envelope["data"]["stats"]["total"] == 3
    assert stats.envelope["data"]["stats"]["unread"] == 0
    assert broker_stats.envelope["data"]["stats"]["unread"] == 2


@pytest.mark.asyncio
async def test_notification_send_stores_unread_notification() -> None:
    """Verify sent notifications are stored unread and listed."""

    dispatcher, store = _build_dispatcher(random_value=0.9)

    sent = await dispatcher.dispatcher_dispatch(
        "POST",
        "/api/notifications/send",
        body={"userId": "user-7", "type": "rate_alert", "title": "Rates dropped", "status": "read"},
    )
    listed = await dispatcher.dispatcher_dispatch("GET", "/api/notifications?userId=user-7")

    notification = sent.envelope["data"]
    assert notification["id"] == "notif-1000"
    assert notification["status"] == "unread"
    assert notification["channels"] == ["in_app", "email", "sms"]
    assert store.fixture_size("notifications") == 6
    assert listed.envelope["data"]["total"] == 1
    assert listed.envelope["data"]["limit"] == 20


@pytest.mark.asyncio
async def test_notification_send_bulk_stores_one_per_recipient() -> None:
    """Verify bulk sends create one stored notification per recipient."""

    dispatcher, store = _build_dispatcher()

    result = await dispatcher.dispatcher_dispatch(
        "POST",
        "/api/notifications/send-bulk",
        body={"recipients": ["user-1", "user-2"], "type": "system", "title": "Maintenance"},
    )

    assert result.envelope["data"]["summary"] == {"total": 2, "delivered": 2, "failed": 0}
    assert store.fixture_size("notifications") == 7
    assert [entry["userId"] for entry in result.envelope["data"]["results"]] == ["user-1", "user-2"]


@pytest.mark.asyncio
async def test_notification_preferences_round_trip_per_user() -> None:
    """Verify saved preferences are returned for their user only."""

    dispatcher, _ = _build_dispatcher()

    await dispatcher.dispatcher_dispatch(
        "PUT",
        "/api/notifications/preferences",
        body={"userId": "user-1", "email": {"enabled": False}},
    )
    saved = await dispatcher.dispatcher_dispatch("GET", "/api/notifications/preferences?userId=user-1")
    default = await dispatcher.dispatcher_dispatch("GET", "/api/notifications/preferences?userId=user-2")

    assert saved.envelope["data"]["email"] == {"enabled": False}
    assert default.envelope["data"]["userId"] == "user-2"
    assert default.envelope["data"]["preferences"]["email"]["enabled"] is True


@pytest.mark.asyncio
async def test_notification_mark_read_and_unknown_ids() -> None:
    """Verify single read updates and 404 for unknown ids."""

    dispatcher, store = _build_dispatcher()

    marked = await dispatcher.dispatcher_dispatch("PUT", "/api/notifications/notif-1/read")
    missing = await dispatcher.dispatcher_dispatch("PUT", "/api/notifications/notif-999/read")
    missing_delete = await dispatcher.dispatcher_dispatch("DELETE", "/api/notifications/notif-999")

    assert marked.envelope["data"]["status"] == "read"
    assert store.fixture_get("notifications", "notif-1")["status"] == "read"
    assert missing.status_code == 404
    assert missing_delete.status_code == 404


def test_notification_filter_ignores_empty_criteria() -> None:
    """Verify blank filters do not narrow the list."""

    notifications = [
        {"id": "a", "type": "system", "status": "unread", "userId": "u1"},
        {"id": "b", "type": "rate_alert", "status": "read", "userId": "u1"},
    ]

    assert len(notification_filter(notifications, {"type": "", "userId": "u1"})) == 2
    assert [item["id"] for item in notification_filter(notifications, {"status": "read"})] == ["b"]


@pytest.mark.asyncio
async def test_notification_send_rejects_non_text_type_and_stats_stay_readable() -> None:
    """Verify a list-valued type is rejected and stats keep answering after valid sends."""

    dispatcher, store = _build_dispatcher()
    seeded_count = store.fixture_size("notifications")

    rejected = await dispatcher.dispatcher_dispatch(
        "POST",
        "/api/notifications/send",
        body={"userId": "1", "type": ["system"], "title": "Hi"},
    )
    rejected_bulk = await dispatcher.dispatcher_dispatch(
        "POST",
        "/api/notifications/send-bulk",
        body={"recipients": ["1"], "priority": {"level": "high"}},
    )
    stats = await dispatcher.dispatcher_dispatch("GET", "/api/notifications/stats")

    assert rejected.status_code == 401
    assert rejected.envelope == {"success": False, "data": None, "message": "type must be a string"}
    assert rejected_bulk.status_code == 401
    assert rejected_bulk.envelope["message"] == "priority must be a string"
    assert store.fixture_size("notifications") == seeded_count
    assert stats.status_code == 200


@pytest.mark.asyncio
async def test_notification_preferences_ignore_non_text_user_id() -> None:
    """Verify an object-valued userId falls back to the default preferences key."""

    dispatcher, store = _build_dispatcher()

    result = await dispatcher.dispatcher_dispatch(
        "PUT",
        "/api/notifications/preferences",
        body={"userId": {"id": "1"}, "email": {"enabled": False}},
    )

    assert result.status_code == 200
    assert result.envelope["data"]["userId"] == "default"
    assert store.fixture_get_preferences("default")["email"] == {"enabled": False}


def test_notification_count_by_groups_non_text_values() -> None:
    """Verify counting never fails on unhashable stored values."""

    notifications = [
        {"id": "a", "type": "system"},
        {"id": "b", "type": ["legacy"]},
        {"id": "c"},
    ]

    assert notification_count_by(notifications, "type") == {"system": 1, "other": 2}
