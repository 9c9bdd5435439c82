# termmax_tools/core/logging.py
"""
Centralized logging system for termmax_tools.

Provides:
- ToolsLogger: Global logging configuration
- LoggingMixin: Consistent logging behavior for classes
- Utility functions: Context logging helpers
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime

DEBUG = logging.DEBUG
INFO = logging.INFO
WARNING = logging.WARNING
ERROR = logging.ERROR
CRITICAL = logging.CRITICAL

ROOT_LOGGER_NAME = 'termmax_tools'


class ToolsFormatter(logging.Formatter):
    CONTEXT_ATTRS = ['order_address', 'contract_address', 'block_number', 'from_block', 'to_block',
                     'tx_hash', 'log_index', 'event_name', 'contract_name', 'function', 'attempt',
                     'record_index', 'schema', 'path', 'abi_path', 'url', 'total', 'count', 'incomplete',
                     'errors', 'error']

    def __init__(self, include_context: bool = False):
        self.include_context = include_context
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
        base_msg = f"{timestamp} - {record.name} - {record.levelname} - {record.getMessage()}"

        if not self.include_context:
            return base_msg

        context_parts = []
        for attr in self.CONTEXT_ATTRS:
            if hasattr(record, attr):
                context_parts.append(f"{attr}={getattr(record, attr)}")

        if context_parts:
            return f"{base_msg} | {' '.join(context_parts)}"

        return base_msg


class ToolsLogger:
    """Global logging configuration and management"""

    _configured = False
    _log_dir: Optional[Path] = None
    _log_level = logging.INFO

    @classmethod
    def configure(cls,
                  log_dir: Optional[Path] = None,
                  log_level: str = "INFO",
                  console_enabled: bool = True,
                  file_enabled: bool = True,
                  structured_format: bool = True,
                  force: bool = False) -> None:

        if cls._configured and not force:
            return

        cls._log_dir = log_dir
        cls._log_level = getattr(logging, log_level.upper(), logging.INFO)

        if file_enabled and log_dir:
            log_dir.mkdir(parents=True, exist_ok=True)

        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.setLevel(cls._log_level)
        root_logger.handlers.clear()
        root_logger.propagate = False

        if console_enabled:
            # stderr keeps log lines out of piped report output
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(cls._log_level)
            console_handler.setFormatter(ToolsFormatter(include_context=structured_format))
            root_logger.addHandler(console_handler)

        if file_enabled and log_dir:
            file_formatter = ToolsFormatter(include_context=True)

            file_handler = logging.FileHandler(log_dir / 'termmax_tools.log')
            file_handler.setLevel(cls._log_level)
            file_handler.setFormatter(file_formatter)
            root_logger.addHandler(file_handler)

            error_handler = logging.FileHandler(log_dir / 'termmax_tools_errors.log')
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(file_formatter)
            root_logger.addHandler(error_handler)

        cls._configured = True

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        if not name.startswith(ROOT_LOGGER_NAME):
            name = f'{ROOT_LOGGER_NAME}.{name}'

        return logging.getLogger(name)

    @classmethod
    def reset(cls) -> None:
        cls._configured = False


# === Utility Functions ===

def get_class_logger(cls_instance) -> logging.Logger:
    module = cls_instance.__class__.__module__
    class_name = cls_instance.__class__.__name__

    if module.startswith(f'{ROOT_LOGGER_NAME}.'):
        module = module[len(ROOT_LOGGER_NAME) + 1:]

    return ToolsLogger.get_logger(f"{module}.{class_name}")


def log_with_context(logger: logging.Logger, level: int, message: str, **context) -> None:
    if logger.isEnabledFor(level):
        record = logger.makeRecord(
            logger.name, level, "", 0, message, (), None
        )
        for key, value in context.items():
            setattr(record, key, value)
        logger.handle(record)


# === LoggingMixin for Classes ===

class LoggingMixin:
    """
    Mixin to add consistent logging behavior to any class.

    Provides convenient logging methods that automatically:
    - Create class-specific loggers
    - Support structured context logging
    """

    @property
    def logger(self) -> logging.Logger:
        if not hasattr(self, '_logger'):
            self._logger = get_class_logger(self)
        return self._logger

    def log_debug(self, message: str, **context) -> None:
        log_with_context(self.logger, logging.DEBUG, message, **context)

    def log_info(self, message: str, **context) -> None:
        log_with_context(self.logger, logging.INFO, message, **context)

    def log_warning(self, message: str, **context) -> None:
        log_with_context(self.logger, logging.WARNING, message, **context)

    def log_error(self, message: str, **context) -> None:
        log_with_context(self.logger, logging.ERROR, message, **context)
