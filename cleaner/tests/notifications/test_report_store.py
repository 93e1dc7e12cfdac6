from types import SimpleNamespace
from typing import cast

import pytest
from prometheus_client import REGISTRY
from sqlalchemy import func, select

from cleaner.common import create_schema, dispose_engines, get_session_factory, session_scope
from cleaner.notifications.errors import DocumentAlreadyExistsError, DocumentNotFoundError
from cleaner.notifications.models import Base, Document
from cleaner.notifications.report import ReportStore
from cleaner.notifications.repository import DocumentRepository
from cleaner.notifications.schemas import ObjectReference, ReportSpec, ResourceInfo


class _MetricTracker:
    def __init__(self, name: str, labels: dict[str, str] | None = None) -> None:
        self.name = name
        self.labels = labels or {}
        baseline = REGISTRY.get_sample_value(name, self.labels)
        self._baseline = baseline if baseline is not None else 0.0

    def delta(self) -> float:
        current = REGISTRY.get_sample_value(self.name, self.labels)
        value = current if current is not None else 0.0
        return value - self._baseline


async def _prepare_store(tmp_path):
    database_url = f"sqlite+aiosqlite:///{tmp_path / 'documents.db'}"
    await create_schema(database_url, Base)
    return get_session_factory(database_url)


def _report(message: str) -> ReportSpec:
    return ReportSpec(
        action="Delete",
        resource_info=[
            ResourceInfo(
                resource=ObjectReference(namespace="apps", name="web", kind="Pod", api_version="v1"),
                message=message,
            )
        ],
    )


async def _count_documents(session) -> int:
    return (await session.execute(select(func.count(Document.id)))).scalar_one()


@pytest.mark.asyncio
async def test_upsert_creates_then_overwrites_single_document(tmp_path) -> None:
    session_factory = await _prepare_store(tmp_path)
    created_tracker = _MetricTracker("cleaner_report_upserts_total", {"operation": "create"})
    updated_tracker = _MetricTracker("cleaner_report_upserts_total", {"operation": "update"})

    try:
        async with session_scope(session_factory) as session:
            store = ReportStore(DocumentRepository(session))
            first = await store.upsert("stale-pods", _report("first"))
            assert first.resource_version == 1

        async with session_scope(session_factory) as session:
            store = ReportStore(DocumentRepository(session))
            second = await store.upsert("stale-pods", _report("second"))
            assert second.resource_version == 2

        async with session_scope(session_factory) as session:
            store = ReportStore(DocumentRepository(session))
            assert await _count_documents(session) == 1
            stored = await store.get("stale-pods")
            assert stored.resource_info[0].message == "second"
    finally:
        await dispose_engines()

    assert created_tracker.delta() == 1
    assert updated_tracker.delta() == 1


@pytest.mark.asyncio
async def test_upsert_with_same_content_twice_keeps_one_document(tmp_path) -> None:
    session_factory = await _prepare_store(tmp_path)
    report = _report("same")

    try:
        async with session_scope(session_factory) as session:
            store = ReportStore(DocumentRepository(session))
            await store.upsert("cleaner-a", report)
            await store.upsert("cleaner-a", report)
            await store.upsert("cleaner-b", report)

        async with session_scope(session_factory) as session:
            store = ReportStore(DocumentRepository(session))
            assert await _count_documents(session) == 2
            assert await store.get("cleaner-a") == report
    finally:
        await dispose_engines()


@pytest.mark.asyncio
async def test_upsert_survives_later_rollback(tmp_path) -> None:
    session_factory = await _prepare_store(tmp_path)

    try:
        with pytest.raises(RuntimeError):
            async with session_scope(session_factory) as session:
                await ReportStore(DocumentRepository(session)).upsert("kept", _report("kept"))
                raise RuntimeError("later destination failed")

        async with session_scope(session_factory) as session:
            stored = await ReportStore(DocumentRepository(session)).get("kept")
            assert stored.resource_info[0].message == "kept"
    finally:
        await dispose_engines()


@pytest.mark.asyncio
async def test_repository_rejects_duplicate_keys(tmp_path) -> None:
    session_factory = await _prepare_store(tmp_path)

    try:
        async with session_scope(session_factory) as session:
            repository = DocumentRepository(session)
            await repository.create_document(api_version="v1", kind="Secret", namespace="ops", name="slack", body={})
            await repository.commit()
            with pytest.raises(DocumentAlreadyExistsError):
                await repository.create_document(
                    api_version="v1", kind="Secret", namespace="ops", name="slack", body={}
                )
            other = await repository.create_document(
                api_version="v1", kind="Secret", namespace="dev", name="slack", body={}
            )
            assert other.namespace == "dev"
    finally:
        await dispose_engines()


@pytest.mark.asyncio
async def test_repository_lookup_raises_not_found(tmp_path) -> None:
    session_factory = await _prepare_store(tmp_path)

    try:
        async with session_scope(session_factory) as session:
            with pytest.raises(DocumentNotFoundError) as excinfo:
                await DocumentRepository(session).get_document("Report", "missing")
        assert excinfo.value.name == "missing"
    finally:
        await dispose_engines()


class _BrokenRepository:
    def __init__(self) -> None:
        self.created = False

    async def get_document(self, kind: str, name: str, *, namespace: str = "") -> Document:
        raise RuntimeError("store unavailable")

    async def create_document(self, **_: object) -> Document:  # pragma: no cover - must not be reached
        self.created = True
        return cast(Document, SimpleNamespace())


@pytest.mark.asyncio
async def test_upsert_propagates_lookup_errors_other_than_not_found() -> None:
    repository = _BrokenRepository()
    store = ReportStore(cast(DocumentRepository, repository))

    with pytest.raises(RuntimeError, match="store unavailable"):
        await store.upsert("stale-pods", _report("x"))

    assert repository.created is False