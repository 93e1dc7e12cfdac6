"""Slack delivery through the Web API ``chat.postMessage`` method."""

from __future__ import annotations

import httpx

from cleaner.common.logging import bind_logger

from ..credentials import CredentialResolver
from ..errors import SlackAPIError
from ..schemas import Cleaner, Notification, ReportSpec
from .base import LoggerLike, report_text

DEFAULT_SLACK_API_URL = "https://slack.com/api"


class SlackProvider:
    """Posts the message with the report as an attachment to a channel."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        resolver: CredentialResolver,
        *,
        api_url: str = DEFAULT_SLACK_API_URL,
    ) -> None:
        self._client = client
        self._resolver = resolver
        self._api_url = api_url.rstrip("/")

    async def send(
        self,
        *,
        cleaner: Cleaner,
        report: ReportSpec,
        message: str,
        notification: Notification,
        logger: LoggerLike,
    ) -> None:
        info = await self._resolver.slack_info(notification)
        log = bind_logger(logger, channel=info.channel_id)
        log.info("send slack message")

        payload = {
            "channel": info.channel_id,
            "text": message,
            "attachments": [{"text": report_text(report)}],
        }
        response = await self._client.post(
            f"{self._api_url}/chat.postMessage",
            headers={"Authorization": f"Bearer {info.token}"},
            json=payload,
        )
        response.raise_for_status()
        try:
            body = response.json()
        except ValueError:
            log.info("failed to decode slack response")
            raise SlackAPIError("invalid_response") from None
        if not body.get("ok", False):
            log.info("failed to send slack message: %s", body.get("error"))
            raise SlackAPIError(str(body.get("error") or "unknown_error"))
