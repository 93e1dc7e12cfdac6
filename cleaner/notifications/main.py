"""Wiring for the notification dispatcher.

The host process calls :func:`configure_notifications` once at startup. The
cleanup engine then calls :func:`send_notifications` once per run, or holds a
dispatcher open with :func:`notification_dispatcher` when it runs several
cleaners back to back. Neither touches logging or tracing configuration.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Sequence

import httpx

from cleaner.common import (
    NotifierSettings,
    configure_logging,
    configure_tracing,
    create_schema,
    get_session_factory,
    get_settings,
    session_scope,
)

from .models import Base
from .providers import build_providers
from .repository import DocumentRepository
from .schemas import Cleaner, ResourceResult
from .services import NotificationDispatcher

_CONFIGURED = False


def configure_notifications(settings: NotifierSettings | None = None) -> None:
    """Configure logging and tracing for the dispatcher; later calls are no-ops."""

    global _CONFIGURED
    if _CONFIGURED:
        return
    resolved_settings = settings or get_settings()
    configure_logging(resolved_settings)
    configure_tracing(resolved_settings)
    _CONFIGURED = True


def build_http_client(settings: NotifierSettings, **kwargs) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.http_timeout_seconds, **kwargs)


@asynccontextmanager
async def notification_dispatcher(
    settings: NotifierSettings | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> AsyncIterator[NotificationDispatcher]:
    """Yield a dispatcher bound to one database session and HTTP client."""

    resolved_settings = settings or get_settings()
    await create_schema(resolved_settings.database_url, Base)
    session_factory = get_session_factory(resolved_settings.database_url)

    owns_client = client is None
    http_client = client or build_http_client(resolved_settings)
    try:
        async with session_scope(session_factory) as session:
            providers = build_providers(
                repository=DocumentRepository(session),
                client=http_client,
                settings=resolved_settings,
            )
            yield NotificationDispatcher(providers)
    finally:
        if owns_client:
            await http_client.aclose()


async def send_notifications(
    resources: Sequence[ResourceResult],
    cleaner: Cleaner,
    settings: NotifierSettings | None = None,
) -> None:
    """Deliver the report of one cleanup run to every configured destination."""

    async with notification_dispatcher(settings) as dispatcher:
        await dispatcher.send_notifications(resources, cleaner)
