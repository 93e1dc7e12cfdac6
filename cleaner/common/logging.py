import logging
from collections.abc import MutableMapping
from typing import Any, Literal

from opentelemetry import trace

from .config import NotifierSettings


_TRACE_PLACEHOLDER = "-"
_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | trace_id=%(trace_id)s span_id=%(span_id)s | %(message)s"


def _format_trace_id(value: int, length: int) -> str:
    return format(value, f"0{length}x")


class TraceContextFilter(logging.Filter):
    """Populate trace/span identifiers from the active OpenTelemetry span."""

    def filter(self, record: logging.LogRecord) -> bool:
        span = trace.get_current_span()
        span_context = span.get_span_context() if span is not None else None
        if span_context is not None and span_context.is_valid:
            record.trace_id = _format_trace_id(span_context.trace_id, 32)
            record.span_id = _format_trace_id(span_context.span_id, 16)
        else:
            record.trace_id = _TRACE_PLACEHOLDER
            record.span_id = _TRACE_PLACEHOLDER
        return True


class ContextLoggerAdapter(logging.LoggerAdapter):
    """Append bound ``key=value`` pairs to every message."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        context = self.extra or {}
        if not context:
            return msg, kwargs
        suffix = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{msg} [{suffix}]", kwargs

    def bind(self, **context: Any) -> "ContextLoggerAdapter":
        return ContextLoggerAdapter(self.logger, {**(self.extra or {}), **context})


def bind_logger(logger: logging.Logger | logging.LoggerAdapter, **context: Any) -> ContextLoggerAdapter:
    """Return an adapter carrying ``context`` on top of any context already bound."""

    if isinstance(logger, ContextLoggerAdapter):
        return logger.bind(**context)
    return ContextLoggerAdapter(logger, dict(context))


def configure_logging(settings: NotifierSettings) -> None:
    """Configure root logging level and format."""

    logging_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = settings.log_level
    logging.basicConfig(level=logging_level, format=_LOG_FORMAT)
    root_logger = logging.getLogger()
    existing_filter = next(
        (f for f in root_logger.filters if isinstance(f, TraceContextFilter)),
        None,
    )
    context_filter = existing_filter or TraceContextFilter()
    if existing_filter is None:
        root_logger.addFilter(context_filter)
    for handler in root_logger.handlers:
        if not any(isinstance(f, TraceContextFilter) for f in handler.filters):
            handler.addFilter(context_filter)
