"""Resolve destination credentials from the secret a notification references.

Credentials are read on every delivery and never cached, so rotating a secret
takes effect on the next cleanup run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .errors import EmptyCredentialsError, InvalidReferenceError, MissingFieldError
from .repository import DocumentRepository
from .schemas import SECRET_API_VERSION, SECRET_KIND, Notification, Secret

SLACK_TOKEN = "SLACK_TOKEN"
SLACK_CHANNEL_ID = "SLACK_CHANNEL_ID"
TEAMS_WEBHOOK_URL = "TEAMS_WEBHOOK_URL"
DISCORD_TOKEN = "DISCORD_TOKEN"
DISCORD_CHANNEL_ID = "DISCORD_CHANNEL_ID"
WEBEX_TOKEN = "WEBEX_TOKEN"
WEBEX_ROOM_ID = "WEBEX_ROOM_ID"

_REFERENCE_MESSAGE = "notification must reference a v1 Secret containing destination credentials"


@dataclass(frozen=True, slots=True)
class SlackInfo:
    token: str
    channel_id: str


@dataclass(frozen=True, slots=True)
class TeamsInfo:
    webhook_url: str


@dataclass(frozen=True, slots=True)
class DiscordInfo:
    token: str
    channel_id: str


@dataclass(frozen=True, slots=True)
class WebexInfo:
    token: str
    room_id: str


def require(data: Mapping[str, str], key: str) -> str:
    """Return ``data[key]`` or raise ``MissingFieldError``."""

    if key not in data:
        raise MissingFieldError(key)
    return data[key]


class CredentialResolver:
    """Fetches and validates the secret behind a notification."""

    def __init__(self, repository: DocumentRepository) -> None:
        self.repository = repository

    async def get_secret(self, notification: Notification) -> Secret:
        reference = notification.notification_ref
        if reference is None:
            raise InvalidReferenceError(_REFERENCE_MESSAGE)
        if reference.kind != SECRET_KIND:
            raise InvalidReferenceError(_REFERENCE_MESSAGE)
        if reference.api_version != SECRET_API_VERSION:
            raise InvalidReferenceError(_REFERENCE_MESSAGE)

        namespace = reference.namespace or ""
        document = await self.repository.get_document(SECRET_KIND, reference.name or "", namespace=namespace)
        secret = Secret(name=document.name, namespace=document.namespace, data=document.body.get("data"))
        if not secret.data:
            raise EmptyCredentialsError(f"secret {namespace}/{document.name} has no data")
        return secret

    async def get_data(self, notification: Notification) -> dict[str, str]:
        secret = await self.get_secret(notification)
        return dict(secret.data or {})

    async def slack_info(self, notification: Notification) -> SlackInfo:
        data = await self.get_data(notification)
        return SlackInfo(token=require(data, SLACK_TOKEN), channel_id=require(data, SLACK_CHANNEL_ID))

    async def teams_info(self, notification: Notification) -> TeamsInfo:
        data = await self.get_data(notification)
        return TeamsInfo(webhook_url=require(data, TEAMS_WEBHOOK_URL))

    async def discord_info(self, notification: Notification) -> DiscordInfo:
        data = await self.get_data(notification)
        return DiscordInfo(token=require(data, DISCORD_TOKEN), channel_id=require(data, DISCORD_CHANNEL_ID))

    async def webex_info(self, notification: Notification) -> WebexInfo:
        data = await self.get_data(notification)
        return WebexInfo(token=require(data, WEBEX_TOKEN), room_id=require(data, WEBEX_ROOM_ID))
