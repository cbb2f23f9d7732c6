"""Structured JSON logging for the furniture prompt engine.

Call ``configure_logging()`` once at startup (the CLI does this). After that,
every ``logging.getLogger(__name__)`` call produces JSON lines on stderr,
keeping stdout free for CLI output.

``bind_generation_id()`` tags every record emitted inside it with a
``generation_id`` so the prompt build, vendor call and file writes of one
generation request can be correlated.
"""

import json
import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

_generation_id_var: ContextVar[str] = ContextVar("generation_id", default="")


def get_generation_id() -> str:
    """Return the generation ID for the current context (empty string if none)."""
    return _generation_id_var.get()


@contextmanager
def bind_generation_id(generation_id: Optional[str] = None) -> Iterator[str]:
    """Bind a generation ID (fresh UUID hex if not given) for the enclosed block."""
    value = generation_id or uuid.uuid4().hex
    token = _generation_id_var.set(value)
    try:
        yield value
    finally:
        _generation_id_var.reset(token)


# Attributes every LogRecord carries; anything else on a record came from extra=
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class _JsonFormatter(logging.Formatter):
    """One JSON object per record: level, logger, message, generation_id and extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        generation_id = get_generation_id()
        if generation_id:
            payload["generation_id"] = generation_id
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        )
        return json.dumps(payload, default=str)


def configure_logging(level: str = "INFO") -> None:
    """Route all logging through one JSON handler on stderr at ``level``."""
    handler = logging.StreamHandler()
    handler.setFormatter(_JsonFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
