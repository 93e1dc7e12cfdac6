"""Dispatch cleanup reports to the destinations a cleaner declares."""

from __future__ import annotations

import logging
from time import monotonic
from typing import Mapping, Sequence

from cleaner.common.logging import bind_logger

from .errors import UnsupportedNotificationTypeError
from .metrics import (
    NOTIFICATION_FAILURE_TOTAL,
    NOTIFICATION_SEND_LATENCY_SECONDS,
    NOTIFICATION_SENT_TOTAL,
    type_label,
)
from .providers.base import NotificationProvider
from .report import generate_report_spec
from .schemas import Cleaner, NotificationType, ReportSpec, ResourceResult

LOGGER = logging.getLogger(__name__)


def instance_message(cleaner: Cleaner) -> str:
    return f"This report has been generated by k8s-cleaner for instance: {cleaner.name}"


class NotificationDispatcher:
    """Delivers one report per cleanup run, one destination at a time.

    Notifications are processed in declaration order. The first failure stops
    the run and is re-raised; destinations already served keep what they got.
    """

    def __init__(
        self,
        providers: Mapping[NotificationType, NotificationProvider],
        *,
        logger: logging.Logger = LOGGER,
    ) -> None:
        self._providers = dict(providers)
        self._logger = logger

    async def send_notifications(self, resources: Sequence[ResourceResult], cleaner: Cleaner) -> None:
        notifications = cleaner.spec.notifications
        report = generate_report_spec(resources, cleaner) if notifications else ReportSpec()
        message = instance_message(cleaner)

        for notification in notifications:
            log = bind_logger(self._logger, notification=notification.label)
            log.debug("deliver notification")
            label = type_label(notification.type)
            start_time = monotonic()
            try:
                provider = self._provider_for(notification.type)
                await provider.send(
                    cleaner=cleaner,
                    report=report,
                    message=message,
                    notification=notification,
                    logger=log,
                )
            except Exception as exc:
                log.info("failed to send notification: %s", exc)
                NOTIFICATION_FAILURE_TOTAL.labels(type=label).inc()
                raise
            NOTIFICATION_SENT_TOTAL.labels(type=label).inc()
            NOTIFICATION_SEND_LATENCY_SECONDS.labels(type=label).observe(monotonic() - start_time)
            log.debug("notification delivered")

    def _provider_for(self, notification_type: object) -> NotificationProvider:
        provider = self._providers.get(notification_type)  # type: ignore[call-overload]
        if provider is None:
            raise UnsupportedNotificationTypeError(notification_type)
        return provider
