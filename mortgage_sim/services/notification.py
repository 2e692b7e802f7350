"""Virtual notification service for `/api/notifications`."""

from __future__ import annotations

from collections import Counter
from typing import Any, Final

from mortgage_sim.fixtures import Record
from mortgage_sim.routing import RouteRequest, RouteResponse

from .base import INVALID_INPUT_STATUS, BaseVirtualService

DELIVERY_CHANNELS: Final[tuple[str, ...]] = ("in_app", "email", "sms")
DEFAULT_PREFERENCES_USER: Final[str] = "default"
_PROTECTED_NOTIFICATION_FIELDS: Final[frozenset[str]] = frozenset({"id", "status", "createdAt"})
NOTIFICATION_TEXT_FIELDS: Final[tuple[str, ...]] = ("type", "priority")
OTHER_COUNT_KEY: Final[str] = "other"


def notification_find_non_text_field(fields: Record) -> str | None:
    """Return the first of `type` or `priority` present with a non-string value."""

    for field_name in NOTIFICATION_TEXT_FIELDS:
        if field_name in fields and not isinstance(fields[field_name], str):
            return field_name
    return None


def notification_count_by(notifications: list[Record], field_name: str) -> dict[str, int]:
    """Count notifications per text value of one field; other values share the `other` key."""

    counts: Counter[str] = Counter()
    for notification in notifications:
        value = notification.get(field_name)
        counts[value if isinstance(value, str) else OTHER_COUNT_KEY] += 1
    return dict(counts)


def notification_default_preferences() -> dict[str, Any]:
    """Return channel preferences reported for users who never saved any."""

    return {
        "email": {
            "enabled": True,
            "types": ["application_update", "document_required", "rate_alert"],
            "frequency": "immediate",
        },
        "sms": {"enabled": True, "types": ["urgent", "rate_alert"], "frequency": "immediate"},
        "push": {
            "enabled": True,
            "types": ["application_update", "document_required", "rate_alert", "ai_insight"],
            "frequency": "immediate",
        },
        "inApp": {"enabled": True, "types": ["all"], "frequency": "immediate"},
    }


def notification_filter(notifications: list[Record], query: dict[str, Any]) -> list[Record]:
    """Apply the optional `type`, `status` and `userId` equality filters."""

    filtered_notifications = notifications
    for field_name in ("type", "status", "userId"):
        expected_value = query.get(field_name)
        if expected_value:
            filtered_notifications = [
                notification
                for notification in filtered_notifications
                if notification.get(field_name) == expected_value
            ]
    return filtered_notifications


class NotificationVirtualService(BaseVirtualService):
    """Stored in-app notifications with read state and per-user preferences."""

    SERVICE_NAME = "notification"
    BASE_PATH = "/api/notifications"
    HEALTH_LABEL = "notification-service"
    HEALTH_DEPENDENCIES = {
        "email-provider": "healthy",
        "sms-provider": "healthy",
        "push-service": "healthy",
        "template-engine": "healthy",
    }
    HEALTH_METRICS = {
        "notificationsSent": 15847,
        "deliveryRate": "98.5%",
        "avgDeliveryTime": "1.2s",
        "unsubscribeRate": "0.8%",
    }

    def _service_register_routes(self) -> None:
        self._service_route("GET", "", self._notification_list)
        self._service_route("PUT", "/read-all", self._notification_mark_all_read)
        self._service_route("GET", "/preferences", self._notification_get_preferences)
        self._service_route("PUT", "/preferences", self._notification_update_preferences)
        self._service_route("GET", "/templates", self._notification_get_templates)
        self._service_route("GET", "/stats", self._notification_get_stats)
        self._service_route("POST", "/send", self._notification_send)
        self._service_route("POST", "/send-bulk", self._notification_send_bulk)
        self._service_route("PUT", "/:notification_id/read", self._notification_mark_read)
        self._service_route("DELETE", "/:notification_id", self._notification_delete)

    async def _notification_list(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(800)
        notifications = notification_filter(self._store.fixture_list("notifications"), request.query)
        return self._service_ok(self._service_paginate(request, notifications, default_limit=20))

    async def _notification_mark_all_read(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(600)
        user_id = request.query.get("userId") or request.request_body_field("userId")
        updated_at = self._service_now_iso()

        updated_count = 0
        for notification in self._store.fixture_list("notifications"):
            if notification.get("status") != "unread":
                continue
            if user_id and notification.get("userId") != user_id:
                continue
            self._store.fixture_update("notifications", notification["id"], {"status": "read", "readAt": updated_at})
            updated_count += 1

        return self._service_ok(
            {
                "message": "All notifications marked as read",
                "updatedCount": updated_count,
                "updatedAt": updated_at,
            }
        )

    async def _notification_get_preferences(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(600)
        user_id = request.query.get("userId") or DEFAULT_PREFERENCES_USER
        stored_preferences = self._store.fixture_get_preferences(user_id)
        if stored_preferences is not None:
            return self._service_ok(stored_preferences)
        return self._service_ok(
            {
                "userId": user_id,
                "preferences": notification_default_preferences(),
                "updatedAt": self._service_now_iso(),
            }
        )

    async def _notification_update_preferences(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(800)
        body = request.request_body_object()
        body_user_id = body.get("userId") if isinstance(body.get("userId"), str) else None
        user_id = body_user_id or request.query.get("userId") or DEFAULT_PREFERENCES_USER
        stored_preferences = self._store.fixture_set_preferences(
            user_id,
            {
                **body,
                "userId": user_id,
                "updatedAt": self._service_now_iso(),
            },
        )
        return self._service_ok(
            {**stored_preferences, "message": "Notification preferences updated successfully"}
        )

    async def _notification_get_templates(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(500)
        return self._service_ok(
            [
                {
                    "id": "template-app-update",
                    "name": "Application Update",
                    "type": "application_update",
                    "subject": "Your loan application status has been updated",
                    "body": "Your application {{applicationId}} has moved to {{newStatus}} stage.",
                    "channels": ["email", "sms", "push"],
                    "variables": ["applicationId", "newStatus", "estimatedCompletion"],
                },
                {
                    "id": "template-doc-required",
                    "name": "Document Required",
                    "type": "document_required",
                    "subject": "Document upload required for your loan application",
                    "body": "Please upload {{documentType}} to continue processing your application.",
                    "channels": ["email", "sms", "push"],
                    "variables": ["documentType", "dueDate", "applicationId"],
                },
                {
                    "id": "template-rate-alert",
                    "name": "Rate Alert",
                    "type": "rate_alert",
                    "subject": "Interest rate opportunity available",
                    "body": "Rates have {{changeDirection}} by {{changeAmount}}%. {{actionRecommendation}}",
                    "channels": ["email", "push"],
                    "variables": ["changeDirection", "changeAmount", "actionRecommendation"],
                },
            ]
        )

    async def _notification_get_stats(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1000)
        user_id = request.query.get("userId")
        notifications = notification_filter(self._store.fixture_list("notifications"), {"userId": user_id})
        return self._service_ok(
            {
                "period": request.query.get("period") or "30d",
                "userId": user_id,
                "stats": {
                    "total": len(notifications),
                    "unread": sum(1 for notification in notifications if notification.get("status") == "unread"),
                    "byType": notification_count_by(notifications, "type"),
                    "byPriority": notification_count_by(notifications, "priority"),
                    "deliveryStats": {
                        "email": {"sent": 127, "delivered": 125, "opened": 89, "clicked": 34},
                        "sms": {"sent": 45, "delivered": 44, "clicked": 12},
                        "push": {"sent": 127, "delivered": 120, "opened": 78},
                        "inApp": {"sent": 127, "delivered": 127, "read": 119},
                    },
                },
                "generatedAt": self._service_now_iso(),
            }
        )

    async def _notification_send(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1000)
        notification_fields = {
            key: value
            for key, value in request.request_body_object().items()
            if key not in _PROTECTED_NOTIFICATION_FIELDS
        }
        invalid_field = notification_find_non_text_field(notification_fields)
        if invalid_field is not None:
            return self._service_fail(INVALID_INPUT_STATUS, f"{invalid_field} must be a string")
        notification = self._store.fixture_append(
            "notifications",
            {
                "priority": "medium",
                **notification_fields,
                "id": self._store.fixture_next_id("notif"),
                "status": "unread",
                "createdAt": self._service_now_iso(),
                "deliveryStatus": "delivered",
                "channels": [channel for channel in DELIVERY_CHANNELS if self._service_random() > 0.3],
            },
        )
        return self._service_ok(notification)

    async def _notification_send_bulk(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(2000)
        invalid_field = notification_find_non_text_field(request.request_body_object())
        if invalid_field is not None:
            return self._service_fail(INVALID_INPUT_STATUS, f"{invalid_field} must be a string")
        recipients = request.request_body_field("recipients")
        if not isinstance(recipients, list):
            recipients = []
        delivered_at = self._service_now_iso()

        results = []
        for recipient in recipients:
            notification = self._store.fixture_append(
                "notifications",
                {
                    "id": self._store.fixture_next_id("notif"),
                    "userId": recipient,
                    "type": request.request_body_field("type", "system"),
                    "title": request.request_body_field("title", ""),
                    "message": request.request_body_field("message", ""),
                    "priority": request.request_body_field("priority", "medium"),
                    "status": "unread",
                    "createdAt": delivered_at,
                    "deliveryStatus": "delivered",
                },
            )
            results.append(
                {
                    "userId": recipient,
                    "notificationId": notification["id"],
                    "status": "delivered",
                    "deliveredAt": delivered_at,
                }
            )

        return self._service_ok(
            {
                "batchId": self._store.fixture_next_id("batch"),
                "results": results,
                "summary": {"total": len(recipients), "delivered": len(results), "failed": 0},
            }
        )

    async def _notification_mark_read(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(400)
        read_at = self._service_now_iso()
        notification = self._store.fixture_update(
            "notifications",
            request.path_params["notification_id"],
            {"status": "read", "readAt": read_at},
        )
        if notification is None:
            return self._service_fail(404, "Notification not found")
        return self._service_ok({"notificationId": notification["id"], "status": "read", "readAt": read_at})

    async def _notification_delete(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(500)
        if self._store.fixture_get("notifications", request.path_params["notification_id"]) is None:
            return self._service_fail(404, "Notification not found")
        return self._service_ok(
            {"message": "Notification deleted successfully", "deletedAt": self._service_now_iso()}
        )
