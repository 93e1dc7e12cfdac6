"""Shared utilities for the cleaner notification dispatcher."""

from .config import DEFAULT_APP_NAME, DEFAULT_DATABASE_URL, NotifierSettings, get_settings
from .logging import ContextLoggerAdapter, bind_logger, configure_logging
from .tracing import configure_tracing
from .database import (
    create_engine,
    create_schema,
    dispose_engines,
    get_session_factory,
    session_scope,
)

__all__ = [
    "NotifierSettings",
    "get_settings",
    "configure_logging",
    "configure_tracing",
    "bind_logger",
    "ContextLoggerAdapter",
    "DEFAULT_APP_NAME",
    "DEFAULT_DATABASE_URL",
    "create_engine",
    "create_schema",
    "dispose_engines",
    "get_session_factory",
    "session_scope",
]
