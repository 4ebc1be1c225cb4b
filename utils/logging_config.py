# utils/logging_config.py

import json
import logging
import logging.handlers
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

LOG_NAME = "photo_dedup"
CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'


def setup_logging(level: Union[str, int] = "INFO",
                  log_dir: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger for a run.

    Console output goes to stderr at `level`. When `log_dir` is given, a
    rotating plain-text log (DEBUG) and a rotating JSON log (INFO) are
    written there as well. Calling this again replaces the handlers.

    Raises:
        ValueError: `level` is not a known logging level name
    """
    if isinstance(level, str):
        name = level.upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {name}")

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.DEBUG if log_dir else level)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root.addHandler(console_handler)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        # File handler (rotating)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path / f"{LOG_NAME}.log",
            maxBytes=10*1024*1024,  # 10 MB
            backupCount=5
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))

        # JSON handler for structured logs
        json_handler = logging.handlers.RotatingFileHandler(
            log_path / f"{LOG_NAME}_structured.json",
            maxBytes=10*1024*1024,
            backupCount=5
        )
        json_handler.setLevel(logging.INFO)
        json_handler.setFormatter(JSONFormatter())

        root.addHandler(file_handler)
        root.addHandler(json_handler)

    # Pillow logs every plugin probe at DEBUG
    logging.getLogger("PIL").setLevel(logging.INFO)

    return logging.getLogger(LOG_NAME)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON"""

    def format(self, record):
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)
