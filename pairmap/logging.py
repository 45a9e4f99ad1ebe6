"""Root logger configuration."""

import json
import logging

from pairmap.config import settings

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_HANDLER_NAME = "pairmap"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """Install a single stream handler on the root logger.

    Safe to call more than once; the handler is replaced, not duplicated.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    use_json = settings.log_json if json_output is None else json_output
    handler.setFormatter(JsonFormatter() if use_json else logging.Formatter(_FORMAT))
    root.addHandler(handler)
    root.setLevel((level or settings.log_level).upper())
