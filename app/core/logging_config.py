import logging
import logging.config
import os
from datetime import datetime
from app.core.config import settings

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 10 * 1024 * 1024

def _rotating_file(log_dir: str, name: str, level: str, formatter: str) -> dict:
    """Daily-named rotating file under ``<log_dir>/<name>/``"""
    os.makedirs(os.path.join(log_dir, name), exist_ok=True)
    current_date = datetime.now().strftime("%Y-%m-%d")
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": formatter,
        "filename": os.path.join(log_dir, name, f"{name}-{current_date}.log"),
        "maxBytes": MAX_LOG_BYTES,
        "backupCount": 10,
    }

def setup_logging():
    """Setup application logging configuration"""

    log_dir = settings.LOG_DIR
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": settings.LOG_LEVEL,
            "formatter": "default",
            "stream": "ext://sys.stdout",
        },
    }
    app_handlers = ["console"]
    access_handlers = ["console"]
    db_handlers = ["console"]

    if settings.LOG_TO_FILE:
        handlers["app_file"] = _rotating_file(log_dir, "app", settings.LOG_LEVEL, "detailed")
        handlers["error_file"] = _rotating_file(log_dir, "error", "ERROR", "detailed")
        handlers["access_file"] = _rotating_file(log_dir, "access", "INFO", "access")
        app_handlers = ["console", "app_file", "error_file"]
        access_handlers = ["access_file"]
        db_handlers = ["app_file"]

    def logger_entry(level, targets):
        return {"level": level, "handlers": targets, "propagate": False}

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": DATE_FORMAT,
            },
            "detailed": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(module)s - %(funcName)s:%(lineno)d - %(message)s",
                "datefmt": DATE_FORMAT,
            },
            "access": {"format": "%(asctime)s - %(message)s", "datefmt": DATE_FORMAT},
        },
        "handlers": handlers,
        "loggers": {
            "": logger_entry(settings.LOG_LEVEL, app_handlers),
            # chain calls stay visible even when the root level is raised
            "app.services.chain": logger_entry("INFO", app_handlers),
            "access": logger_entry("INFO", access_handlers),
            "uvicorn.access": logger_entry("INFO", access_handlers),
            "sqlalchemy.engine": logger_entry("WARNING", db_handlers),
        },
    })

    logger = logging.getLogger(__name__)
    logger.info(f"Delivery Tracker logging configured at {settings.LOG_LEVEL}")
    if settings.LOG_TO_FILE:
        logger.info(f"Logs directory: {log_dir}/")
