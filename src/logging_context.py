"""Correlation ID logging context for tracing a conversation across modules.

Provides a conversation-aware logger that attaches the conversation id to
every log record, making it easy to follow one chat's turns through the
gate, the dialogue engine and the ledger.

Usage:
    from src.logging_context import get_conversation_logger, set_conversation_id

    set_conversation_id("5521999887766@s.whatsapp.net")
    logger = get_conversation_logger(__name__)
    logger.info("Processing turn")
"""

import logging
from contextvars import ContextVar
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(name)s] [%(conversation_id)s] %(levelname)s: %(message)s"

_conversation_id: ContextVar[str] = ContextVar("conversation_id", default="-")


def set_conversation_id(conversation_id: str) -> None:
    """Set the conversation id for the current async context."""
    _conversation_id.set(conversation_id)


def get_conversation_id() -> str:
    """Retrieve the current conversation id."""
    return _conversation_id.get()


class ConversationIdFilter(logging.Filter):
    """Injects conversation_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.conversation_id = _conversation_id.get()  # type: ignore[attr-defined]
        return True


def get_conversation_logger(name: str) -> logging.Logger:
    """Return a logger with the ConversationIdFilter attached.

    The filter adds ``conversation_id`` to each record so formatters can
    include ``%(conversation_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, ConversationIdFilter) for f in logger.filters):
        logger.addFilter(ConversationIdFilter())
    return logger


def install_conversation_filter(logger: Optional[logging.Logger] = None) -> None:
    """Attach a ConversationIdFilter to every handler of ``logger`` (root by default).

    Handler-level filters also see records propagated from third-party
    loggers, so ``LOG_FORMAT`` can be used on any of these handlers.
    """
    target = logger or logging.getLogger()
    for handler in target.handlers:
        if not any(isinstance(f, ConversationIdFilter) for f in handler.filters):
            handler.addFilter(ConversationIdFilter())
