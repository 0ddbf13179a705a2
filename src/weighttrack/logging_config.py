from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any

PACKAGE_LOGGER = "weighttrack"


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _truthy(value: str | None) -> bool:
    if not value:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def configure_logging(
    level: str = "INFO",
    fmt: str = "plain",
    verbose: bool = False,
) -> None:
    """Install a stderr handler on the root logger.

    Safe to call repeatedly: only the handler installed by a previous call
    is replaced, so external handlers (e.g. pytest's caplog) are untouched.
    """
    level_value = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level_value)

    for existing in list(root.handlers):
        if getattr(existing, "_wt_handler", False):
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    if fmt.lower() == "json":
        handler.setFormatter(JsonLogFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )
    setattr(handler, "_wt_handler", True)
    root.addHandler(handler)

    if verbose or _truthy(os.environ.get("VERBOSE")):
        logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG)
    else:
        logging.getLogger(PACKAGE_LOGGER).setLevel(logging.NOTSET)
