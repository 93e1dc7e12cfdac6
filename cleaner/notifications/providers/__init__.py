"""Notification destinations and the registry used by the dispatcher."""

from __future__ import annotations

import httpx

from cleaner.common.config import NotifierSettings

from ..credentials import CredentialResolver
from ..report import ReportStore
from ..repository import DocumentRepository
from ..schemas import NotificationType
from .base import ATTACHMENT_NAME, NotificationProvider
from .discord import DiscordProvider
from .report import ReportProvider
from .slack import SlackProvider
from .smtp import Mailer, SMTPInfo, SMTPProvider
from .teams import TeamsProvider, build_adaptive_card, validate_webhook_url
from .webex import WebexProvider

__all__ = [
    "ATTACHMENT_NAME",
    "DiscordProvider",
    "Mailer",
    "NotificationProvider",
    "ReportProvider",
    "SMTPInfo",
    "SMTPProvider",
    "SlackProvider",
    "TeamsProvider",
    "WebexProvider",
    "build_adaptive_card",
    "build_providers",
    "validate_webhook_url",
]


def build_providers(
    *,
    repository: DocumentRepository,
    client: httpx.AsyncClient,
    settings: NotifierSettings,
) -> dict[NotificationType, NotificationProvider]:
    """Return one provider per notification type."""

    resolver = CredentialResolver(repository)
    return {
        NotificationType.REPORT: ReportProvider(ReportStore(repository)),
        NotificationType.SLACK: SlackProvider(client, resolver, api_url=settings.slack_api_url),
        NotificationType.WEBEX: WebexProvider(client, resolver, api_url=settings.webex_api_url),
        NotificationType.DISCORD: DiscordProvider(client, resolver, api_url=settings.discord_api_url),
        NotificationType.TEAMS: TeamsProvider(client, resolver),
        NotificationType.SMTP: SMTPProvider(resolver, timeout=settings.smtp_timeout_seconds),
    }
