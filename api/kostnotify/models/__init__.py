from kostnotify.models.base import Base
from kostnotify.models.user import User
from kostnotify.models.telegram import UserTelegram
from kostnotify.models.notification import Notification

__all__ = ["Base", "User", "UserTelegram", "Notification"]
