"""Prometheus metrics for cleaner notifications."""

from __future__ import annotations

from typing import Final

from prometheus_client import Counter, Histogram

# Notification delivery ---------------------------------------------------------------------
NOTIFICATION_SENT_TOTAL: Final = Counter(
    "cleaner_notification_sent_total",
    "Total number of cleaner notifications successfully delivered.",
    labelnames=("type",),
)

NOTIFICATION_FAILURE_TOTAL: Final = Counter(
    "cleaner_notification_failure_total",
    "Total number of cleaner notifications that failed to deliver.",
    labelnames=("type",),
)

NOTIFICATION_SEND_LATENCY_SECONDS: Final = Histogram(
    "cleaner_notification_send_latency_seconds",
    "Time taken to hand a report off to a destination.",
    labelnames=("type",),
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10),
)

# Report persistence ------------------------------------------------------------------------
REPORT_UPSERTS_TOTAL: Final = Counter(
    "cleaner_report_upserts_total",
    "Report documents written, by create or update path.",
    labelnames=("operation",),
)


def type_label(notification_type: object) -> str:
    """Return the metric label value for a notification type."""

    value = getattr(notification_type, "value", notification_type)
    return str(value) if value else "unknown"
