from __future__ import annotations

import json
import logging
import os
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Tuple


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        data: dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)  # type: ignore[arg-type]
        tags = getattr(record, "tags", None) or current_tags()
        if tags:
            data["tags"] = list(tags)
        for key in ("pack", "manifest_path", "command", "returncode"):
            if hasattr(record, key):
                data[key] = str(getattr(record, key))
        return json.dumps(data, ensure_ascii=False)


class TagFilter(logging.Filter):
    """Stamp records with the tags active in the current scope."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "tags"):
            record.tags = current_tags()
        return True


def configure_json_logging(level: int = logging.INFO) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    handler.addFilter(TagFilter())
    # Remove other handlers to avoid duplicate logs
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)


def maybe_enable_json_logging() -> None:
    if (os.environ.get("JSON_LOGS") or "").strip().lower() in {"1", "true", "yes", "on"}:
        configure_json_logging()


# Tag scope helpers
_TAGS: ContextVar[Tuple[str, ...]] = ContextVar("log_tags", default=())


def current_tags() -> Tuple[str, ...]:
    return _TAGS.get()


@contextmanager
def tagged(*tags: str) -> Iterator[Tuple[str, ...]]:
    """Push ``tags`` onto the logging scope for the duration of the block.

    Nested scopes accumulate, so ``tagged("Packs")`` inside ``tagged("web")``
    yields ``("web", "Packs")``.
    """
    token = _TAGS.set(current_tags() + tuple(tags))
    try:
        yield current_tags()
    finally:
        _TAGS.reset(token)
