"""
Application logging

One JSON handler set is installed on the "assetverse" logger the first time
any module asks for a logger. Module loggers are children of it
("assetverse.domain.requests.workflow", ...) and propagate into its handlers.

Lines logged while a Flask request is active carry the HTTP method, path and
acting user so a workflow decision can be traced back to its caller.
"""

import json
import logging
import os
import threading
from pathlib import Path

ROOT_LOGGER_NAME = "assetverse"

DEFAULT_FIELDS = {
    "timestamp": "asctime",
    "level": "levelname",
    "logger": "name",
    "function": "funcName",
    "line": "lineno",
    "message": "message",
}


class SingletonLogger:
    """Installs the handler set on the root application logger exactly once"""
    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(SingletonLogger, cls).__new__(cls)
                    cls._instance._root = None
        return cls._instance

    def get_logger(self, name: str = ROOT_LOGGER_NAME) -> logging.Logger:
        """
        Args:
            name (str): Dotted name under "assetverse"

        Returns:
            logging.Logger: Logger propagating into the configured handlers
        """
        if self._root is None:
            with self._lock:
                if self._root is None:
                    self._root = self._configure_root()
        return self._root if name == ROOT_LOGGER_NAME else logging.getLogger(name)

    def _configure_root(self) -> logging.Logger:
        root = logging.getLogger(ROOT_LOGGER_NAME)
        level_name = os.environ.get("LOG_LEVEL", "DEBUG").upper()
        root.setLevel(getattr(logging, level_name, logging.DEBUG))
        root.handlers.clear()

        formatter = JsonFormatter(DEFAULT_FIELDS)
        context = RequestContextFilter()

        logs_dir = Path(os.environ.get("LOG_DIR", "logs"))
        logs_dir.mkdir(parents=True, exist_ok=True)

        handlers = [
            (logging.FileHandler(logs_dir / "assetverse.log", mode='a', encoding='utf-8'), logging.INFO),
            (logging.FileHandler(logs_dir / "errors.log", mode='a', encoding='utf-8'), logging.ERROR),
            (logging.StreamHandler(), logging.DEBUG),
        ]
        for handler, level in handlers:
            handler.setLevel(level)
            handler.setFormatter(formatter)
            handler.addFilter(context)
            root.addHandler(handler)

        return root


class RequestContextFilter(logging.Filter):
    """Copy the active HTTP request and principal onto the record"""

    def filter(self, record) -> bool:
        from flask import has_request_context, request

        record.http = None
        if has_request_context():
            record.http = {
                "method": request.method,
                "path": request.path,
                "user": _current_user_email(),
            }
        return True


def _current_user_email():
    from flask_login import current_user

    try:
        return current_user.email if current_user.is_authenticated else None
    except Exception:
        # Principal lookup can fail while the session is rolling back
        return None


class JsonFormatter(logging.Formatter):
    """
    Render a LogRecord as one JSON object.

    @param dict fmt_dict: Output key -> LogRecord attribute. Defaults to {"message": "message"}.
    @param str time_format: time.strftime() format string. Default: "%Y-%m-%dT%H:%M:%S"
    @param str msec_format: Millisecond suffix format. Default: "%s.%03dZ"
    """
    def __init__(self, fmt_dict: dict = None, time_format: str = "%Y-%m-%dT%H:%M:%S", msec_format: str = "%s.%03dZ"):
        super().__init__()
        self.fmt_dict = fmt_dict if fmt_dict is not None else {"message": "message"}
        self.default_time_format = time_format
        self.default_msec_format = msec_format
        self.datefmt = None

    def usesTime(self) -> bool:
        return "asctime" in self.fmt_dict.values()

    def format(self, record) -> str:
        record.message = record.getMessage()
        if self.usesTime():
            record.asctime = self.formatTime(record, self.datefmt)

        payload = {key: getattr(record, attr, None) for key, attr in self.fmt_dict.items()}
        if getattr(record, "http", None):
            payload["http"] = record.http

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            payload["exc_info"] = record.exc_text
        if record.stack_info:
            payload["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(payload, default=str)


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger under the "assetverse" root.

    Args:
        name (str): Logger name, e.g. "assetverse.domain.inventory"

    Returns:
        logging.Logger: Logger that propagates to the configured handlers
    """
    return SingletonLogger().get_logger(name)
