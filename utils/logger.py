import json
import logging
import sys
from typing import Any, Dict

from app.config import get_settings

_INITIALIZED = False


def _init_root_logger() -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return
    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)

    # uvicorn --reload re-imports modules; keep a single handler
    root.handlers.clear()

    handler = logging.StreamHandler(stream=sys.stdout)
    if settings.log_format.lower() == "json":
        formatter: logging.Formatter = _JsonFormatter()
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s - %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    handler.setFormatter(formatter)
    root.addHandler(handler)
    _INITIALIZED = True


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        props = getattr(record, "props", None)
        if isinstance(props, dict) and props:
            payload.update(props)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def get_logger(name: str) -> logging.Logger:
    _init_root_logger()
    return logging.getLogger(name)


def kv_message(message: str, **fields: Any) -> str:
    """Return message with appended JSON key-values for quick, readable context."""
    if not fields:
        return message
    return f"{message} | {json.dumps(fields, ensure_ascii=False, sort_keys=True, default=str)}"


def kv_extra(**fields: Any) -> Dict[str, Any]:
    """Build the ``extra`` mapping picked up by the JSON formatter."""
    return {"props": fields}
