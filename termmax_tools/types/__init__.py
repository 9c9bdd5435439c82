# termmax_tools/types/__init__.py

from .constants import (
    SECONDS_PER_DAY,
    DAYS_PER_YEAR,
    DEFAULT_TOKEN_DECIMALS,
    UNKNOWN_TOKEN,
)

# New Types
from .new import (
    EvmHash,
    EvmAddress,
    DateTimeStr,
    ErrorId,
)

# EVM Types
from .evm import RawEventLog

# Configuration Types
from .configs.config import (
    RpcConfig,
    LoggingConfig,
    TrackerSettings,
)

# Model Types
from .model.errors import (
    ProcessingError,
    TermMaxToolsError,
    ConversionError,
    create_query_error,
    create_decode_error,
    create_classify_error,
    create_rpc_error,
)
from .model.events import (
    OperationType,
    Direction,
    OrderEvent,
    SwapEvent,
    UpdateOrderEvent,
    WithdrawAssetsEvent,
    OrderInitializedEvent,
    Event,
    BIG_INTEGER_FIELDS,
)
from .model.info import (
    TokenInfo,
    GearingTokenRef,
    MarketConfig,
    MarketTokens,
    MarketInfo,
    OrderConfig,
    OrderInfo,
    TokenBook,
)
from .model.collection import EventsCollection, CATEGORIES


__all__ = [
    # Constants
    'SECONDS_PER_DAY',
    'DAYS_PER_YEAR',
    'DEFAULT_TOKEN_DECIMALS',
    'UNKNOWN_TOKEN',

    # New Types
    'EvmHash',
    'EvmAddress',
    'DateTimeStr',
    'ErrorId',

    # EVM Types
    'RawEventLog',

    # Configuration Types
    'RpcConfig',
    'LoggingConfig',
    'TrackerSettings',

    # Errors
    'ProcessingError',
    'TermMaxToolsError',
    'ConversionError',
    'create_query_error',
    'create_decode_error',
    'create_classify_error',
    'create_rpc_error',

    # Events
    'OperationType',
    'Direction',
    'OrderEvent',
    'SwapEvent',
    'UpdateOrderEvent',
    'WithdrawAssetsEvent',
    'OrderInitializedEvent',
    'Event',
    'BIG_INTEGER_FIELDS',

    # Info
    'TokenInfo',
    'GearingTokenRef',
    'MarketConfig',
    'MarketTokens',
    'MarketInfo',
    'OrderConfig',
    'OrderInfo',
    'TokenBook',

    # Collection
    'EventsCollection',
    'CATEGORIES',
]
