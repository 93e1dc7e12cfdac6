"""Persistence helpers for reports and secrets."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .errors import DocumentAlreadyExistsError, DocumentNotFoundError
from .models import Document


class DocumentRepository:
    """Keyed document access: get by name, create, update."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_document(self, kind: str, name: str, *, namespace: str = "") -> Document:
        result = await self.session.execute(
            select(Document).where(
                Document.kind == kind,
                Document.namespace == namespace,
                Document.name == name,
            )
        )
        document = result.scalar_one_or_none()
        if document is None:
            raise DocumentNotFoundError(kind, namespace, name)
        return document

    async def create_document(
        self,
        *,
        api_version: str,
        kind: str,
        name: str,
        body: dict[str, Any],
        namespace: str = "",
    ) -> Document:
        document = Document(
            api_version=api_version,
            kind=kind,
            namespace=namespace,
            name=name,
            body=body,
            resource_version=1,
        )
        self.session.add(document)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            raise DocumentAlreadyExistsError(kind, namespace, name) from exc
        await self.session.refresh(document, attribute_names=["created_at", "updated_at"])
        return document

    async def update_document(self, document: Document, body: dict[str, Any]) -> Document:
        document.body = body
        document.resource_version = document.resource_version + 1
        await self.session.flush()
        await self.session.refresh(document, attribute_names=["updated_at"])
        return document

    async def commit(self) -> None:
        await self.session.commit()
