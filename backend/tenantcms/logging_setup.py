from logging.config import dictConfig


def configure_logging(level="INFO"):
    """Route application and library logs through a single stream handler."""
    dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": "default",
            }
        },
        "root": {"level": level.upper(), "handlers": ["console"]},
        "loggers": {
            "botocore": {"level": "WARNING"},
            "httpx": {"level": "WARNING"},
        },
    })
