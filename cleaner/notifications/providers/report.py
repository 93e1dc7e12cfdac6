"""Persist the report as a document named after the cleaner."""

from __future__ import annotations

from ..report import ReportStore
from ..schemas import Cleaner, Notification, ReportSpec
from .base import LoggerLike


class ReportProvider:
    def __init__(self, store: ReportStore) -> None:
        self._store = store

    async def send(
        self,
        *,
        cleaner: Cleaner,
        report: ReportSpec,
        message: str,
        notification: Notification,
        logger: LoggerLike,
    ) -> None:
        await self._store.upsert(cleaner.name, report, logger=logger)
