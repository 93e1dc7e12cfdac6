"""Report generation and persistence for cleaner runs."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Sequence

from pydantic_core import PydanticSerializationError

from .errors import DocumentNotFoundError, ReportSerializationError
from .metrics import REPORT_UPSERTS_TOTAL
from .models import Document
from .repository import DocumentRepository
from .schemas import (
    REPORT_API_VERSION,
    REPORT_KIND,
    Cleaner,
    ObjectReference,
    ReportSpec,
    ResourceInfo,
    ResourceResult,
)

LOGGER = logging.getLogger(__name__)


def generate_report_spec(
    resources: Sequence[ResourceResult],
    cleaner: Cleaner,
    *,
    now: datetime | None = None,
) -> ReportSpec:
    """Build the report for one cleanup run.

    Every entry keeps the identity of the affected resource and gets the
    build time appended to its message. All entries share one timestamp.
    """

    generated_at = (now or datetime.now(timezone.utc)).isoformat()
    suffix = f". time: {generated_at}"
    return ReportSpec(
        action=cleaner.spec.action.value,
        resource_info=[
            ResourceInfo(
                resource=ObjectReference(
                    namespace=result.resource.namespace,
                    name=result.resource.name,
                    kind=result.resource.kind,
                    api_version=result.resource.api_version,
                ),
                message=result.message + suffix,
            )
            for result in resources
        ],
    )


def serialize_report(report: ReportSpec) -> bytes:
    """Encode the report as the JSON payload shared by every destination."""

    try:
        return report.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")
    except PydanticSerializationError as exc:
        raise ReportSerializationError(f"failed to marshal report: {exc}") from exc


def _report_body(report: ReportSpec) -> dict:
    return {"spec": report.model_dump(mode="json", by_alias=True, exclude_none=True)}


class ReportStore:
    """Keeps the most recent report of each cleaner, keyed by cleaner name."""

    def __init__(self, repository: DocumentRepository) -> None:
        self.repository = repository

    async def upsert(
        self,
        name: str,
        report: ReportSpec,
        *,
        logger: logging.Logger | logging.LoggerAdapter = LOGGER,
    ) -> Document:
        body = _report_body(report)
        try:
            document = await self.repository.get_document(REPORT_KIND, name)
        except DocumentNotFoundError:
            logger.info("create report instance")
            created = await self.repository.create_document(
                api_version=REPORT_API_VERSION,
                kind=REPORT_KIND,
                name=name,
                body=body,
            )
            await self.repository.commit()
            REPORT_UPSERTS_TOTAL.labels(operation="create").inc()
            return created

        logger.info("update report instance")
        updated = await self.repository.update_document(document, body)
        await self.repository.commit()
        REPORT_UPSERTS_TOTAL.labels(operation="update").inc()
        return updated

    async def get(self, name: str) -> ReportSpec:
        document = await self.repository.get_document(REPORT_KIND, name)
        return ReportSpec.model_validate(document.body.get("spec", {}))
