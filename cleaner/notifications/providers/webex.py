"""Cisco Webex delivery through the messages REST API."""

from __future__ import annotations

import httpx

from cleaner.common.logging import bind_logger

from ..credentials import CredentialResolver
from ..schemas import Cleaner, Notification, ReportSpec
from .base import ATTACHMENT_NAME, LoggerLike, report_attachment

DEFAULT_WEBEX_API_URL = "https://webexapis.com/v1"
ATTACHMENT_CONTENT_TYPE = "multipart/form-data"


class WebexProvider:
    def __init__(
        self,
        client: httpx.AsyncClient,
        resolver: CredentialResolver,
        *,
        api_url: str = DEFAULT_WEBEX_API_URL,
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
        info = await self._resolver.webex_info(notification)
        log = bind_logger(logger, room=info.room_id)
        log.info("send webex message")

        with report_attachment(report) as attachment:
            response = await self._client.post(
                f"{self._api_url}/messages",
                headers={"Authorization": f"Bearer {info.token}"},
                data={"roomId": info.room_id, "markdown": message},
                files={"files": (ATTACHMENT_NAME, attachment, ATTACHMENT_CONTENT_TYPE)},
            )
        if response.is_error:
            log.info("failed to send webex message: status %s", response.status_code)
        response.raise_for_status()
        log.debug("response: %s", response.text)
