# termmax_tools/core/config.py

from msgspec import Struct
from typing import Optional, Mapping
from pathlib import Path
import os
import logging

from dotenv import load_dotenv

from ..types import RpcConfig, LoggingConfig, TrackerSettings
from .logging import ToolsLogger, log_with_context


ENV_PREFIX = "TERMMAX_"


class ToolsConfig(Struct):
    rpc: Optional[RpcConfig]
    logging: LoggingConfig
    tracker: TrackerSettings

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None, **overrides) -> 'ToolsConfig':
        """
        Build configuration from the environment (after loading `.env`).

        Keyword overrides come from CLI arguments and win over environment
        values: rpc_url, rpc_timeout, log_level, log_dir, log_batch_size,
        timestamp_batch_size, display_limit.
        """
        logger = ToolsLogger.get_logger('core.config')

        if env is None:
            load_dotenv()
            env = os.environ

        rpc = cls._create_rpc_config(env, overrides)
        logging_config = cls._create_logging_config(env, overrides)
        tracker = cls._create_tracker_settings(env, overrides)

        log_with_context(logger, logging.DEBUG, "Configuration loaded",
                         rpc_configured=rpc is not None,
                         log_level=logging_config.level,
                         log_batch_size=tracker.log_batch_size)

        return cls(rpc=rpc, logging=logging_config, tracker=tracker)

    @staticmethod
    def _create_rpc_config(env: Mapping[str, str], overrides: dict) -> Optional[RpcConfig]:
        endpoint_url = overrides.get("rpc_url") or env.get(f"{ENV_PREFIX}RPC_URL")
        if not endpoint_url:
            return None

        timeout = overrides.get("rpc_timeout")
        if timeout is None:
            timeout = _read_int(env, f"{ENV_PREFIX}RPC_TIMEOUT", 30)

        return RpcConfig(
            endpoint_url=endpoint_url,
            timeout=timeout,
            max_retries=_read_int(env, f"{ENV_PREFIX}RPC_MAX_RETRIES", 3),
        )

    @staticmethod
    def _create_logging_config(env: Mapping[str, str], overrides: dict) -> LoggingConfig:
        level = overrides.get("log_level") or env.get(f"{ENV_PREFIX}LOG_LEVEL", "INFO")
        log_dir = overrides.get("log_dir") or env.get(f"{ENV_PREFIX}LOG_DIR")

        return LoggingConfig(
            level=level.upper(),
            log_dir=Path(log_dir) if log_dir else None,
            file_enabled=bool(log_dir),
        )

    @staticmethod
    def _create_tracker_settings(env: Mapping[str, str], overrides: dict) -> TrackerSettings:
        defaults = TrackerSettings()

        log_batch_size = overrides.get("log_batch_size")
        if log_batch_size is None:
            log_batch_size = _read_int(env, f"{ENV_PREFIX}LOG_BATCH_SIZE", defaults.log_batch_size)

        timestamp_batch_size = overrides.get("timestamp_batch_size")
        if timestamp_batch_size is None:
            timestamp_batch_size = _read_int(env, f"{ENV_PREFIX}TIMESTAMP_BATCH_SIZE",
                                             defaults.timestamp_batch_size)

        if log_batch_size < 1:
            raise ValueError(f"{ENV_PREFIX}LOG_BATCH_SIZE must be positive, got {log_batch_size}")
        if timestamp_batch_size < 1:
            raise ValueError(f"{ENV_PREFIX}TIMESTAMP_BATCH_SIZE must be positive, got {timestamp_batch_size}")

        return TrackerSettings(
            log_batch_size=log_batch_size,
            timestamp_batch_size=timestamp_batch_size,
            display_limit=overrides.get("display_limit") or defaults.display_limit,
            detail_count=defaults.detail_count,
        )

    def configure_logging(self, force: bool = False) -> None:
        ToolsLogger.configure(
            log_dir=self.logging.log_dir,
            log_level=self.logging.level,
            console_enabled=self.logging.console_enabled,
            file_enabled=self.logging.file_enabled,
            structured_format=self.logging.structured_format,
            force=force,
        )


def _read_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
