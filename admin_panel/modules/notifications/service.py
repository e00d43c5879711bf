from admin_panel.core.collection import CollectionService
from admin_panel.modules.notifications.schemas import NotificationResponse


class NotificationService(CollectionService):
    """Create, list and delete only. Sent notifications are never edited."""
    table = "notifications"
    response_model = NotificationResponse
    label = "Notification"
