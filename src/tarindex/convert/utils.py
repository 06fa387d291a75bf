from argparse import ArgumentTypeError
from logging.config import dictConfig
from pathlib import Path


def path_exists(arg: str) -> Path:
    try:
        return Path(arg).resolve(strict=True)
    except OSError as e:
        raise ArgumentTypeError(f"can't open '{arg}': {e.strerror}") from e


def dir_exists(arg: str) -> Path:
    path = Path(arg)
    try:
        return path.parent.resolve(strict=True) / path.name
    except OSError as e:
        raise ArgumentTypeError(f"can't write '{arg}': {e.strerror}") from e


def configure_debug_logging(verbosity: str = "DEBUG") -> None:
    dictConfig(
        {
            "version": 1,
            "formatters": {
                "detailed": {
                    "format": "[%(asctime)s] %(levelname)-8s - %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S%z",
                },
            },
            "handlers": {
                # stdout carries the index
                "console": {
                    "class": "logging.StreamHandler",
                    "level": "DEBUG",
                    "formatter": "detailed",
                    "stream": "ext://sys.stderr",
                },
            },
            "loggers": {
                "tarindex": {
                    "level": verbosity,
                    "handlers": ["console"],
                    "propagate": False,
                },
            },
            "root": {"level": "ERROR", "handlers": ["console"]},
            "disable_existing_loggers": False,
        }
    )
