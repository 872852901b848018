# /controller/log_config.py
"""
Telescope Logging Configuration

Each logger category writes its own rotating file under the logs directory:
- map_debug.log     map.*     spatial index, viewport, visibility, engine
- data_debug.log    data.*    static-data reads, dataset builds, the loader
- ui_debug.log      ui.*      map panes, search box, main window
- system_debug.log  system.*  startup, the global error handler, Qt messages

On top of that, every category (and the root logger) also feeds:
- warning.log  WARNING records only
- error.log    ERROR and above
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Dict, Optional

# category -> file
CATEGORY_FILES: Dict[str, str] = {
    'map': 'map_debug.log',
    'data': 'data_debug.log',
    'ui': 'ui_debug.log',
    'system': 'system_debug.log',
}

_LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'
_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
_MAX_BYTES = 5_000_000
_BACKUPS = 3


class _LevelBand(logging.Filter):
    """Pass records whose level lies in [low, high]."""

    def __init__(self, low: int, high: Optional[int] = None) -> None:
        super().__init__()
        self.low = low
        self.high = high

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno < self.low:
            return False
        return self.high is None or record.levelno <= self.high


class TelescopeLogConfig:
    """Installs the category, warning and error handlers once per process."""

    def __init__(self, logs_dir: Path, level: int = logging.DEBUG, to_console: bool = False):
        self.logs_dir = Path(logs_dir)
        self.logs_dir.mkdir(parents=True, exist_ok=True)
        self.level = level
        self.to_console = to_console
        self.handlers: Dict[str, logging.Handler] = {}
        self._configured = False

    def setup_logging(self) -> None:
        if self._configured:
            return
        formatter = logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT)

        root = logging.getLogger()
        root.setLevel(self.level)
        root.handlers.clear()

        shared = [
            self._file_handler('warning.log', formatter, _LevelBand(logging.WARNING, logging.WARNING)),
            self._file_handler('error.log', formatter, _LevelBand(logging.ERROR)),
        ]
        if self.to_console:
            console = logging.StreamHandler(sys.stdout)
            console.setLevel(self.level)
            console.setFormatter(formatter)
            shared.append(console)

        for h in shared:
            root.addHandler(h)

        for category, filename in CATEGORY_FILES.items():
            # Component loggers ("map.engine") propagate into their category,
            # categories stop there so root files do not get everything twice
            logger = logging.getLogger(category)
            logger.setLevel(self.level)
            logger.propagate = False
            logger.handlers.clear()
            logger.addHandler(self._file_handler(filename, formatter))
            for h in shared:
                logger.addHandler(h)

        logging.getLogger('PySide6').setLevel(logging.WARNING)
        self._configured = True

    def _file_handler(self, filename: str, formatter: logging.Formatter,
                      band: Optional[logging.Filter] = None) -> logging.Handler:
        handler = logging.handlers.RotatingFileHandler(
            self.logs_dir / filename, maxBytes=_MAX_BYTES, backupCount=_BACKUPS, encoding='utf-8'
        )
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(formatter)
        if band is not None:
            handler.addFilter(band)
        self.handlers[filename] = handler
        return handler


def setup_telescope_logging(logs_dir: Path, level: int = logging.DEBUG,
                            to_console: bool = False) -> TelescopeLogConfig:
    config = TelescopeLogConfig(logs_dir, level=level, to_console=to_console)
    config.setup_logging()
    return config


def _category_logger(category: str, name: str) -> logging.Logger:
    if name == category or name.startswith(category + '.'):
        return logging.getLogger(name)
    return logging.getLogger(f'{category}.{name}')


def get_map_logger(name: str = 'map') -> logging.Logger:
    """Logger under 'map' (spatial index, viewport, engine)."""
    return _category_logger('map', name)


def get_data_logger(name: str = 'data') -> logging.Logger:
    """Logger under 'data' (static-data reads, loader)."""
    return _category_logger('data', name)


def get_ui_logger(name: str = 'ui') -> logging.Logger:
    return _category_logger('ui', name)


def get_system_logger(name: str = 'system') -> logging.Logger:
    return _category_logger('system', name)
