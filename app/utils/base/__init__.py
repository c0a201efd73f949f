from app.utils.base.enums import BaseEnum, ErrorCode, NotificationBackend

__all__ = ["BaseEnum", "ErrorCode", "NotificationBackend"]
