"""Cleanup report notifications: report documents, chat platforms and email."""

from .errors import (
    ConfigurationError,
    DocumentAlreadyExistsError,
    DocumentNotFoundError,
    EmptyCredentialsError,
    InsecureAuthenticationError,
    InvalidReferenceError,
    InvalidSecretValueError,
    InvalidWebhookError,
    MissingFieldError,
    NotificationError,
    ReportSerializationError,
    SlackAPIError,
    UnsupportedNotificationTypeError,
)
from .main import configure_notifications, notification_dispatcher, send_notifications
from .report import ReportStore, generate_report_spec, serialize_report
from .schemas import (
    Cleaner,
    CleanerAction,
    CleanerSpec,
    Notification,
    NotificationType,
    ObjectReference,
    ReportSpec,
    ResourceInfo,
    ResourceResult,
)
from .services import NotificationDispatcher

__all__ = [
    "Cleaner",
    "CleanerAction",
    "CleanerSpec",
    "ConfigurationError",
    "DocumentAlreadyExistsError",
    "DocumentNotFoundError",
    "EmptyCredentialsError",
    "InsecureAuthenticationError",
    "InvalidReferenceError",
    "InvalidSecretValueError",
    "InvalidWebhookError",
    "MissingFieldError",
    "Notification",
    "NotificationDispatcher",
    "NotificationError",
    "NotificationType",
    "ObjectReference",
    "ReportSerializationError",
    "ReportSpec",
    "ReportStore",
    "ResourceInfo",
    "ResourceResult",
    "SlackAPIError",
    "UnsupportedNotificationTypeError",
    "configure_notifications",
    "generate_report_spec",
    "notification_dispatcher",
    "send_notifications",
    "serialize_report",
]
