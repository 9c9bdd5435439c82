# termmax_tools/export/__init__.py

from .report import render_history, render_summary, describe_event
from .json_export import build_json_document, event_to_json, order_info_to_json, write_json
from .csv_export import CSV_HEADER, csv_row, render_csv, write_csv

__all__ = [
    'render_history',
    'render_summary',
    'describe_event',
    'build_json_document',
    'event_to_json',
    'order_info_to_json',
    'write_json',
    'CSV_HEADER',
    'csv_row',
    'render_csv',
    'write_csv',
]
