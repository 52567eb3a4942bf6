from .notification_center import Notification, NotificationCenter, NotificationLevel
from .pagination import PaginationState, goto_page, next_page, page_count, prev_page

__all__ = [
    "Notification",
    "NotificationCenter",
    "NotificationLevel",
    "PaginationState",
    "goto_page",
    "next_page",
    "page_count",
    "prev_page",
]
