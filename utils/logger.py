import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "expense_tracker"


class JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    # keys from LogRecord we DON'T want to dump
    _skip_keys = {
        "name", "msg", "args", "levelname", "levelno",
        "pathname", "filename", "module", "exc_info",
        "exc_text", "stack_info", "lineno", "funcName",
        "created", "msecs", "relativeCreated", "thread",
        "threadName", "processName", "process", "asctime",
        "taskName",
    }

    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        # include any extra fields passed via logger.*(..., extra={...})
        for key, value in record.__dict__.items():
            if key not in self._skip_keys and key not in log_record:
                log_record[key] = value

        return json.dumps(log_record, ensure_ascii=False, default=str)


def setup_logging(
    level: str | int = logging.INFO,
    log_dir: str | Path | None = None,
    log_file: str = "app.jsonl",
    max_bytes: int = 5_000_000,  # 5 MB
    backup_count: int = 5,
) -> logging.Logger:
    """Attach console and (optionally) rotating JSON file handlers to the app's root logger.

    Every module logs through logging.getLogger(__name__); modules live in
    top-level packages, so handlers go on the root logger. Calling this twice
    is harmless.
    """
    root = logging.getLogger()
    root.setLevel(level)

    if getattr(root, "_expense_tracker_configured", False):
        return logging.getLogger(LOGGER_NAME)

    # --- Console handler (human-readable) ---
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    root.addHandler(console_handler)

    # --- File handler (JSON) ---
    if log_dir is not None:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            Path(log_dir) / log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(JsonFormatter())
        root.addHandler(file_handler)

    # matplotlib's font manager is chatty at DEBUG
    logging.getLogger("matplotlib").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)

    root._expense_tracker_configured = True
    return logging.getLogger(LOGGER_NAME)
