"""Exceptions raised while delivering cleaner notifications."""

from __future__ import annotations


class NotificationError(Exception):
    """Base class for notification delivery failures."""


class ConfigurationError(NotificationError):
    """The user supplied notification configuration cannot be used."""


class InvalidReferenceError(ConfigurationError):
    """The notification does not reference a core/v1 Secret."""


class EmptyCredentialsError(ConfigurationError):
    """The referenced secret carries no data."""


class MissingFieldError(ConfigurationError):
    """The referenced secret lacks a key required by the destination."""

    def __init__(self, field: str) -> None:
        super().__init__(f"secret does not contain {field}")
        self.field = field


class InvalidSecretValueError(ConfigurationError):
    """A secret key is present but its value cannot be used."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"secret key {field} has invalid value {value!r}")
        self.field = field


class InvalidWebhookError(ConfigurationError):
    """The Teams webhook URL does not have a supported shape."""

    def __init__(self, url: str) -> None:
        super().__init__(f"invalid Teams webhook URL: {url}")
        self.url = url


class UnsupportedNotificationTypeError(ConfigurationError):
    """No provider is registered for the notification type."""

    def __init__(self, notification_type: object) -> None:
        super().__init__(f"no handler registered for notification type {notification_type!s}")
        self.notification_type = notification_type


class DocumentStoreError(NotificationError):
    """Base class for document store failures."""


class DocumentNotFoundError(DocumentStoreError):
    def __init__(self, kind: str, namespace: str, name: str) -> None:
        key = f"{namespace}/{name}" if namespace else name
        super().__init__(f"{kind} {key} not found")
        self.kind = kind
        self.namespace = namespace
        self.name = name


class DocumentAlreadyExistsError(DocumentStoreError):
    def __init__(self, kind: str, namespace: str, name: str) -> None:
        key = f"{namespace}/{name}" if namespace else name
        super().__init__(f"{kind} {key} already exists")
        self.kind = kind
        self.namespace = namespace
        self.name = name


class InsecureAuthenticationError(NotificationError):
    """Credentials would be sent to a remote SMTP server without TLS."""

    def __init__(self, host: str) -> None:
        super().__init__(f"refusing to authenticate to {host} over an unencrypted connection")
        self.host = host


class SlackAPIError(NotificationError):
    """Slack accepted the request but reported a failure."""

    def __init__(self, error: str) -> None:
        super().__init__(f"slack API error: {error}")
        self.error = error


class ReportSerializationError(NotificationError):
    """The report could not be encoded."""
