import json
import logging

import httpx
import pytest

import cleaner.notifications.main as notifications_main
from cleaner.common import NotifierSettings, create_schema, dispose_engines, get_session_factory, session_scope
from cleaner.notifications import (
    Cleaner,
    CleanerSpec,
    Notification,
    NotificationType,
    ObjectReference,
    ResourceResult,
    configure_notifications,
    notification_dispatcher,
)
from cleaner.notifications.models import Base
from cleaner.notifications.report import ReportStore
from cleaner.notifications.repository import DocumentRepository


async def _seed_secret(database_url: str) -> None:
    await create_schema(database_url, Base)
    async with session_scope(get_session_factory(database_url)) as session:
        await DocumentRepository(session).create_document(
            api_version="v1",
            kind="Secret",
            namespace="ops",
            name="slack-creds",
            body={"data": {"SLACK_TOKEN": "xoxb-token", "SLACK_CHANNEL_ID": "C123"}},
        )


async def _stored_report(database_url: str, name: str):
    async with session_scope(get_session_factory(database_url)) as session:
        return await ReportStore(DocumentRepository(session)).get(name)


def _cleaner() -> Cleaner:
    return Cleaner(
        name="stale-pods",
        spec=CleanerSpec(
            notifications=[
                Notification(name="report", type=NotificationType.REPORT),
                Notification(
                    name="ops-slack",
                    type=NotificationType.SLACK,
                    notification_ref=ObjectReference(
                        namespace="ops", name="slack-creds", kind="Secret", api_version="v1"
                    ),
                ),
            ]
        ),
    )


_RESOURCES = [
    ResourceResult(
        resource=ObjectReference(namespace="apps", name="web-1", kind="Pod", api_version="v1"),
        message="deleted",
    )
]


@pytest.mark.asyncio
async def test_dispatcher_stores_report_and_posts_to_slack(tmp_path) -> None:
    database_url = f"sqlite+aiosqlite:///{tmp_path / 'cleaner.db'}"
    settings = NotifierSettings(database_url=database_url, slack_api_url="https://slack.test/api")
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"ok": True})

    try:
        await _seed_secret(database_url)
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            async with notification_dispatcher(settings, client=client) as dispatcher:
                await dispatcher.send_notifications(_RESOURCES, _cleaner())
            assert not client.is_closed

        report = await _stored_report(database_url, "stale-pods")
    finally:
        await dispose_engines()

    assert report.action == "Delete"
    assert report.resource_info[0].resource.name == "web-1"
    (request,) = requests
    assert request.url == httpx.URL("https://slack.test/api/chat.postMessage")
    assert request.headers["Authorization"] == "Bearer xoxb-token"
    assert json.loads(request.content)["channel"] == "C123"


@pytest.mark.asyncio
async def test_report_survives_a_later_slack_failure(tmp_path) -> None:
    database_url = f"sqlite+aiosqlite:///{tmp_path / 'cleaner.db'}"
    settings = NotifierSettings(database_url=database_url, slack_api_url="https://slack.test/api")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"ok": False})

    try:
        await _seed_secret(database_url)
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(httpx.HTTPStatusError):
                async with notification_dispatcher(settings, client=client) as dispatcher:
                    await dispatcher.send_notifications(_RESOURCES, _cleaner())

        report = await _stored_report(database_url, "stale-pods")
    finally:
        await dispose_engines()

    assert report.resource_info[0].message.startswith("deleted. time: ")


@pytest.mark.asyncio
async def test_dispatcher_leaves_root_logging_alone(tmp_path) -> None:
    database_url = f"sqlite+aiosqlite:///{tmp_path / 'cleaner.db'}"
    settings = NotifierSettings(database_url=database_url, log_level="DEBUG")
    root_logger = logging.getLogger()
    handlers_before = list(root_logger.handlers)
    filters_before = list(root_logger.filters)
    level_before = root_logger.level

    try:
        async with httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(500))) as client:
            async with notification_dispatcher(settings, client=client) as dispatcher:
                await dispatcher.send_notifications(_RESOURCES, Cleaner(name="quiet"))
    finally:
        await dispose_engines()

    assert root_logger.handlers == handlers_before
    assert root_logger.filters == filters_before
    assert root_logger.level == level_before


def test_configure_notifications_runs_once(monkeypatch: pytest.MonkeyPatch) -> None:
    configured: list[str] = []
    monkeypatch.setattr(notifications_main, "_CONFIGURED", False)
    monkeypatch.setattr(notifications_main, "configure_logging", lambda settings: configured.append("logging"))
    monkeypatch.setattr(notifications_main, "configure_tracing", lambda settings: configured.append("tracing"))

    configure_notifications(NotifierSettings())
    configure_notifications(NotifierSettings())

    assert configured == ["logging", "tracing"]
