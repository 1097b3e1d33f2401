"""Announcement content value object."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from announcer.dispatch.errors import INVALID_FIELD, MISSING_CONTENT, AnnouncementValidationError

DEFAULT_PRIORITY = 1


def _optional_str(payload: Mapping[str, Any], key: str, default: str | None) -> str | None:
    value = payload.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise AnnouncementValidationError(INVALID_FIELD, f"{key} must be a string")
    return value


@dataclass(frozen=True)
class AnnouncementContent:
    title: str
    body: str
    priority: int = DEFAULT_PRIORITY
    color: str = "#f5872dff"
    icon: str = "paper"
    action_url: str | None = None

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, Any],
        default_color: str = "#f5872dff",
        default_icon: str = "paper",
    ) -> AnnouncementContent:
        """Validate the content fields of a dispatch request.

        ``title`` and ``body`` must be non-empty strings.  ``priority``,
        ``color``, ``icon`` and ``actionUrl`` fall back to defaults when
        absent or null.
        """
        title = payload.get("title")
        body = payload.get("body")
        if not isinstance(title, str) or not title.strip() or not isinstance(body, str) or not body.strip():
            raise AnnouncementValidationError(MISSING_CONTENT, "Title and body are required")

        priority = payload.get("priority")
        if priority is None:
            priority = DEFAULT_PRIORITY
        elif isinstance(priority, bool) or not isinstance(priority, int):
            raise AnnouncementValidationError(INVALID_FIELD, "priority must be an integer")

        return cls(
            title=title,
            body=body,
            priority=priority,
            color=_optional_str(payload, "color", default_color),
            icon=_optional_str(payload, "icon", default_icon),
            action_url=_optional_str(payload, "actionUrl", None),
        )

    def notification_fields(self) -> dict[str, Any]:
        """Column values shared by every notification written for this content."""
        return {
            "title": self.title,
            "body": self.body,
            "priority": self.priority,
            "color": self.color,
            "icon": self.icon,
            "action_url": self.action_url,
        }
