# termmax_tools/types/configs/config.py

from typing import Optional
from pathlib import Path

from msgspec import Struct


class RpcConfig(Struct):
    endpoint_url: str
    timeout: int = 30
    max_retries: int = 3

class LoggingConfig(Struct):
    level: str = "INFO"
    log_dir: Optional[Path] = None
    console_enabled: bool = True
    file_enabled: bool = False
    structured_format: bool = True

class TrackerSettings(Struct):
    log_batch_size: int = 10_000
    timestamp_batch_size: int = 50
    display_limit: int = 20
    detail_count: int = 5
