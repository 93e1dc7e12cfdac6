"""Provider protocol shared by every notification destination."""

from __future__ import annotations

import io
import logging
from typing import Protocol

from ..report import serialize_report
from ..schemas import Cleaner, Notification, ReportSpec

ATTACHMENT_NAME = "k8s-cleaner-report"

LoggerLike = logging.Logger | logging.LoggerAdapter


class NotificationProvider(Protocol):
    async def send(
        self,
        *,
        cleaner: Cleaner,
        report: ReportSpec,
        message: str,
        notification: Notification,
        logger: LoggerLike,
    ) -> None: ...


def report_attachment(report: ReportSpec) -> io.BytesIO:
    """Return the serialized report as an in-memory readable stream."""

    return io.BytesIO(serialize_report(report))


def report_text(report: ReportSpec) -> str:
    return serialize_report(report).decode("utf-8")
