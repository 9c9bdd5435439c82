# termmax_tools/deploy/__init__.py

from .schema import SCHEMA_V1, SCHEMA_V2, SCHEMAS, column_names, has_backup_feeds
from .converter import DeployConfigConverter, convert_market_configs, parse_number_with_commas

__all__ = [
    'SCHEMA_V1',
    'SCHEMA_V2',
    'SCHEMAS',
    'column_names',
    'has_backup_feeds',
    'DeployConfigConverter',
    'convert_market_configs',
    'parse_number_with_commas',
]
