"""Microsoft Teams delivery through an incoming webhook.

Teams accepts two kinds of webhook: the legacy Office 365 connectors and
Power Automate / Logic Apps workflows. Both receive an Adaptive Card wrapped
in a ``message`` envelope.
"""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import urlsplit

import httpx

from cleaner.common.logging import bind_logger

from ..credentials import CredentialResolver
from ..errors import InvalidWebhookError
from ..schemas import Cleaner, Notification, ReportSpec
from .base import LoggerLike, report_text

_WEBHOOK_HOST_PATTERNS = (
    re.compile(r"outlook\.office(?:365)?\.com"),
    re.compile(r"(?:[a-z0-9-]+\.)+webhook\.office(?:365)?\.com"),
    re.compile(r"(?:[a-z0-9-]+\.)*(?:azure-api|logic\.azure|api\.powerplatform)\.(?:com|net)"),
)

ADAPTIVE_CARD_CONTENT_TYPE = "application/vnd.microsoft.card.adaptive"
ADAPTIVE_CARD_SCHEMA = "http://adaptivecards.io/schemas/adaptive-card.json"
ADAPTIVE_CARD_VERSION = "1.5"


def validate_webhook_url(url: str) -> str:
    """Return ``url`` if it looks like a Teams webhook, else raise."""

    parts = urlsplit(url)
    if parts.scheme != "https" or not parts.hostname:
        raise InvalidWebhookError(url)
    try:
        port = parts.port
    except ValueError:
        raise InvalidWebhookError(url) from None
    if port not in (None, 443):
        raise InvalidWebhookError(url)
    if not any(pattern.fullmatch(parts.hostname) for pattern in _WEBHOOK_HOST_PATTERNS):
        raise InvalidWebhookError(url)
    return url


def build_adaptive_card(title: str, text: str) -> dict[str, Any]:
    return {
        "type": "message",
        "attachments": [
            {
                "contentType": ADAPTIVE_CARD_CONTENT_TYPE,
                "contentUrl": None,
                "content": {
                    "$schema": ADAPTIVE_CARD_SCHEMA,
                    "type": "AdaptiveCard",
                    "version": ADAPTIVE_CARD_VERSION,
                    "msteams": {"width": "Full"},
                    "body": [
                        {
                            "type": "TextBlock",
                            "text": title,
                            "size": "Large",
                            "weight": "Bolder",
                            "style": "heading",
                            "wrap": True,
                        },
                        {"type": "TextBlock", "text": text, "wrap": True},
                    ],
                },
            }
        ],
    }


class TeamsProvider:
    def __init__(self, client: httpx.AsyncClient, resolver: CredentialResolver) -> None:
        self._client = client
        self._resolver = resolver

    async def send(
        self,
        *,
        cleaner: Cleaner,
        report: ReportSpec,
        message: str,
        notification: Notification,
        logger: LoggerLike,
    ) -> None:
        info = await self._resolver.teams_info(notification)
        log = bind_logger(logger, webhook=urlsplit(info.webhook_url).hostname or "-")
        try:
            webhook_url = validate_webhook_url(info.webhook_url)
        except InvalidWebhookError:
            log.info("failed to validate Teams webhook URL")
            raise

        log.info("send teams message")
        card = build_adaptive_card(message, report_text(report))
        response = await self._client.post(webhook_url, json=card)
        response.raise_for_status()
