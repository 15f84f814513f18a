"""Logging handler that stores log records in the ``system_log`` table.

Request details (client ip, culture, url) are read from the record, where
``LogContext`` puts them. Every record is written in its own short session,
independent of the session of the request being logged.

The root logger only gets a ``DbLogQueueHandler``, which enqueues records.
A ``QueueListener`` thread hands them to the ``DbLogHandler``, so a slow log
store never blocks the event loop.
"""
import logging
import queue
import threading
from logging.handlers import QueueHandler, QueueListener
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from core.settings import settings
from db.session import SessionLocal, db_context
from repositories.log_repository import LogRepository

INDENTATION = 2
SHORT_URL_MAX_LENGTH = 255

# Writing a log item logs SQL itself; those records must never come back here
IGNORED_LOGGER_PREFIXES = ("sqlalchemy",)


def format_log_values(values: Mapping | None, level: int = 1, bullet: bool = False) -> str:
    """Render structured log values as an indented, multi-line block.

    Every key starts a new line indented by ``level * 2`` spaces. Nested
    mappings are rendered one level deeper. Other iterables put each item on
    its own line; mapping items inside them are rendered as a bulleted block.
    """
    if not values:
        return ""

    parts = []
    for index, (key, value) in enumerate(values.items()):
        parts.append("\n")
        if bullet and index == 0:
            parts.append(" " * (level * INDENTATION - 1) + "-")
        else:
            parts.append(" " * (level * INDENTATION))
        parts.append(f"{key}: ")

        if isinstance(value, Mapping):
            parts.append(format_log_values(value, level + 1))
        elif isinstance(value, Iterable) and not isinstance(value, (str, bytes)):
            for item in value:
                if isinstance(item, Mapping):
                    parts.append(format_log_values(item, level + 1, bullet=True))
                else:
                    parts.append("\n" + " " * ((level + 1) * INDENTATION) + _text(item))
        else:
            parts.append(_text(value))

    return "".join(parts)


def short_url(url: str | None) -> str:
    url = url or ""
    if len(url) > SHORT_URL_MAX_LENGTH:
        return url[:SHORT_URL_MAX_LENGTH - 1]
    return url


def _text(value) -> str:
    return "" if value is None else str(value)


class DbLogHandler(logging.Handler):

    def __init__(
        self,
        level: int | str = logging.WARNING,
        session_factory: Callable[[], Session] = SessionLocal,
    ):
        super().__init__(level)
        self.session_factory = session_factory
        self._local = threading.local()
        self._exception_formatter = logging.Formatter()

    def is_emitting(self) -> bool:
        return getattr(self._local, "emitting", False)

    def is_enabled(self, record: logging.LogRecord) -> bool:
        if record.levelno < self.level:
            return False
        return not record.name.startswith(IGNORED_LOGGER_PREFIXES)

    def build_message(self, record: logging.LogRecord) -> str:
        if isinstance(record.msg, Mapping):
            message = format_log_values(record.msg)
        else:
            message = record.getMessage()

        if record.exc_info:
            message += "\n" + self._exception_formatter.formatException(record.exc_info)
        elif record.exc_text:
            message += "\n" + record.exc_text
        return message

    def emit(self, record: logging.LogRecord) -> None:
        if not self.is_enabled(record) or self.is_emitting():
            return

        self._local.emitting = True
        try:
            message = self.build_message(record)
            if not message:
                return

            url = getattr(record, "url", None) or getattr(record, "path", None) or ""
            with db_context(self.session_factory) as db:
                LogRepository(db).add_log_item(
                    log_date_utc=datetime.fromtimestamp(record.created, timezone.utc),
                    ip_address=getattr(record, "ip_address", None) or "",
                    culture=getattr(record, "culture", None) or "",
                    url=url,
                    short_url=short_url(url),
                    thread=record.threadName or "",
                    log_level=record.levelname,
                    logger=record.name,
                    message=message,
                )
        except Exception:
            self.handleError(record)
        finally:
            self._local.emitting = False


class DbLogQueueHandler(QueueHandler):
    """Root logger side of the database log: enqueue, never touch the database."""

    def __init__(self, db_handler: DbLogHandler):
        super().__init__(queue.SimpleQueue())
        self.setLevel(db_handler.level)
        self.db_handler = db_handler
        self.listener = QueueListener(self.queue, db_handler, respect_handler_level=True)

    def emit(self, record: logging.LogRecord) -> None:
        # Records logged while the listener thread is storing one would loop
        if self.db_handler.is_emitting() or not self.db_handler.is_enabled(record):
            return
        super().emit(record)

    def prepare(self, record: logging.LogRecord) -> logging.LogRecord:
        # Render now: mapping messages and tracebacks do not survive the default prepare
        record = logging.makeLogRecord(record.__dict__)
        record.msg = self.db_handler.build_message(record)
        record.args = None
        record.exc_info = None
        record.exc_text = None
        return record

    def start(self) -> None:
        self.listener.start()

    def stop(self) -> None:
        # Blocks until the records still queued have been stored
        self.listener.stop()


def install_db_log_handler(
    level: int | str | None = None,
    session_factory: Callable[[], Session] = SessionLocal,
) -> DbLogQueueHandler:
    """Attach the database log to the root logger, replacing one installed earlier.

    Starts the listener thread; ``remove_db_log_handler`` stops it.
    """
    root_logger = logging.getLogger()
    remove_db_log_handler()

    db_handler = DbLogHandler(level or settings.DB_LOG_MIN_LEVEL.upper(), session_factory=session_factory)
    handler = DbLogQueueHandler(db_handler)
    handler.start()
    root_logger.addHandler(handler)
    return handler


def remove_db_log_handler() -> None:
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        if isinstance(handler, DbLogQueueHandler):
            root_logger.removeHandler(handler)
            handler.stop()
            handler.db_handler.close()
            handler.close()
