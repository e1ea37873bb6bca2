"""Console and file logging setup for the stl.* logger tree."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from script_template_loader.l1_entities.config import LoggingConfig

LOG_FORMAT = '[%(asctime)s] [%(levelname)s] %(message)s'
DATE_FORMAT = '%H:%M:%S'

_HANDLER_MARK = '_stl_handler'


def setup_logging(config: LoggingConfig, log_path: Path | None = None) -> logging.Logger:
    """Attach a stderr handler at the configured level, plus a file handler when enabled.

    Safe to call repeatedly: handlers from an earlier call are replaced.
    """
    root = logging.getLogger('stl')
    for handler in [h for h in root.handlers if getattr(h, _HANDLER_MARK, False)]:
        root.removeHandler(handler)
        handler.close()
    root.setLevel(config.level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    _add(root, console)

    if config.log_to_file and log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setFormatter(formatter)
        _add(root, file_handler)
        root.debug('File logging started → %s', log_path)
    return root


def _add(root: logging.Logger, handler: logging.Handler) -> None:
    setattr(handler, _HANDLER_MARK, True)
    root.addHandler(handler)
