"""Notification Pydantic schemas."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from offmarket.models.notification import NotificationType
from offmarket.schemas.common import CamelModel


class NotificationOut(CamelModel):
    id: str
    user_id: str
    type: NotificationType
    title: str
    message: str
    data: Optional[Dict[str, Any]] = None
    is_read: bool
    created_at: datetime


class NotificationList(CamelModel):
    notifications: List[NotificationOut]
    total: int
    unread_count: int


class UnreadCount(CamelModel):
    count: int


class Marked(CamelModel):
    marked: bool = True


class Deleted(CamelModel):
    deleted: bool = True
