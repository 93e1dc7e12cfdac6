"""Discord delivery through the bot REST API."""

from __future__ import annotations

import json

import httpx

from cleaner.common.logging import bind_logger

from ..credentials import CredentialResolver
from ..schemas import Cleaner, Notification, ReportSpec
from .base import ATTACHMENT_NAME, LoggerLike, report_attachment

DEFAULT_DISCORD_API_URL = "https://discord.com/api/v10"


class DiscordProvider:
    """Sends the message to a channel with the report attached as a file."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        resolver: CredentialResolver,
        *,
        api_url: str = DEFAULT_DISCORD_API_URL,
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
        info = await self._resolver.discord_info(notification)
        log = bind_logger(logger, server=info.channel_id)
        log.info("send discord message")

        with report_attachment(report) as attachment:
            response = await self._client.post(
                f"{self._api_url}/channels/{info.channel_id}/messages",
                headers={"Authorization": f"Bot {info.token}"},
                data={"payload_json": json.dumps({"content": message})},
                files={"files[0]": (ATTACHMENT_NAME, attachment, "application/octet-stream")},
            )
        response.raise_for_status()
