"""dictConfig logging for the API process.

Output goes through Uvicorn's formatters so application lines and server
lines share one layout. `app.*` and the cron module in `api` log to stdout.
"""

import sys
from logging.config import dictConfig

LOG_FORMAT = "%(levelprefix)s %(asctime)s [%(name)s] %(message)s"

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "()": "uvicorn.logging.DefaultFormatter",
            "fmt": LOG_FORMAT,
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "access": {
            "()": "uvicorn.logging.AccessFormatter",
            "fmt": '%(levelprefix)s %(asctime)s "%(request_line)s" %(status_code)s',
        },
    },
    "handlers": {
        "stderr": {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "stream": sys.stderr,
        },
        "stdout": {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "stream": sys.stdout,
        },
        "access": {
            "class": "logging.StreamHandler",
            "formatter": "access",
            "stream": sys.stdout,
        },
    },
    "root": {"handlers": ["stderr"], "level": "WARNING"},
    "loggers": {
        "uvicorn.error": {"handlers": ["stderr"], "level": "INFO", "propagate": False},
        "uvicorn.access": {"handlers": ["access"], "level": "INFO", "propagate": False},
        "app": {"handlers": ["stdout"], "level": "INFO", "propagate": False},
        "api": {"handlers": ["stdout"], "level": "INFO", "propagate": False},
    },
}


def setup_logging() -> None:
    """Apply LOGGING_CONFIG."""
    dictConfig(LOGGING_CONFIG)
