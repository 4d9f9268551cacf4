import logging
import logging.config
import os

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FILE = os.getenv("LOG_FILE")


def build_logging_config(verbose: bool = False, log_file=LOG_FILE):
    """
    Build a dictConfig mapping. Verbose mode forces DEBUG, otherwise LOG_LEVEL applies.
    """
    level = "DEBUG" if verbose else LOG_LEVEL.upper()
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "level": level,
            "stream": "ext://sys.stderr",
        },
    }
    if log_file:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "filename": log_file,
            "formatter": "default",
            "level": level,
        }
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": LOG_FORMAT,
            },
        },
        "handlers": handlers,
        "loggers": {
            # httpx logs every request at INFO; the probe already does that
            "httpx": {"level": "WARNING"},
            "httpcore": {"level": "WARNING"},
        },
        "root": {
            "handlers": list(handlers),
            "level": level,
        },
    }


def setup_logging(verbose: bool = False):
    logging.config.dictConfig(build_logging_config(verbose))
