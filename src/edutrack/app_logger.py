import logging
import logging.config
import os

JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(process)d %(module)s"
_DEFAULT_LEVEL = os.getenv("EDUTRACK_LOG_LEVEL", os.getenv("LOG_LEVEL", "INFO")).upper()

# third-party loggers that only produce noise at INFO
QUIET_LOGGERS = ("watchfiles", "watchfiles.main", "watchfiles.watcher", "passlib")


def logging_config(level: str | None = None, *, fmt: str = JSON_FORMAT) -> dict:
    """dictConfig payload shared by the app and gunicorn: one JSON console handler."""
    level = (level or _DEFAULT_LEVEL).upper()
    console = {"handlers": ["console"], "propagate": False}
    loggers = {
        "edutrack":       {**console, "level": level},
        "uvicorn":        {**console, "level": "INFO"},
        "uvicorn.error":  {**console, "level": "INFO"},
        "uvicorn.access": {**console, "level": "INFO"},
        "startup":        {**console, "level": "DEBUG"},
    }
    for name in QUIET_LOGGERS:
        loggers[name] = {**console, "level": "ERROR"}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": "pythonjsonlogger.jsonlogger.JsonFormatter", "fmt": fmt},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {"level": "INFO", "handlers": ["console"]},
        "loggers": loggers,
    }


def setup_logging(level: str | None = None) -> logging.Logger:
    logging.config.dictConfig(logging_config(level))
    return logging.getLogger("edutrack")


def get_logger(name: str | None = None) -> logging.Logger:
    base = logging.getLogger("edutrack")
    if not name:
        return base
    if name.startswith("edutrack."):
        name = name[len("edutrack."):]
    return base.getChild(name)
