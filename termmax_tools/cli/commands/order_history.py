# termmax_tools/cli/commands/order_history.py

"""
Order history CLI command

Rebuilds the event history of a single TermMax order from ledger logs and
prints it as a table, optionally saving JSON and CSV exports.
"""

import asyncio
from pathlib import Path

import click

from ...clients import AsyncRpcClient
from ...core.config import ToolsConfig
from ...export import render_history, render_summary, write_csv, write_json
from ...tracker import OrderHistoryTracker

DEFAULT_JSON_FILE = "order-history.json"
DEFAULT_CSV_FILE = "order-history.csv"


async def track_order(config: ToolsConfig, client_factory, order_address: str,
                      start_block: int, end_block):
    client = client_factory(config.rpc)
    try:
        tracker = OrderHistoryTracker(client, config.tracker)
        return await tracker.run(order_address, start_block, end_block)
    finally:
        await client.close()


@click.command('order-history')
@click.argument('order_address')
@click.argument('rpc_url')
@click.option('--start-block', type=int, default=0, show_default=True, help='Starting block number')
@click.option('--end-block', type=int, default=None, help='Ending block number (default: current)')
@click.option('--include-timestamps', is_flag=True, help='Include timestamps in output (always on)')
@click.option('--show-details', is_flag=True, help='Show detailed information for events')
@click.option('--limit', type=click.IntRange(min=1), default=None, help='Maximum number of events to display (default: 20)')
@click.option('--output-file', is_flag=False, flag_value=DEFAULT_JSON_FILE, default=None,
              help=f'Save results to JSON file (default name: {DEFAULT_JSON_FILE})')
@click.option('--csv-file', is_flag=False, flag_value=DEFAULT_CSV_FILE, default=None,
              help=f'Export order history to CSV file (default name: {DEFAULT_CSV_FILE})')
@click.pass_context
def order_history(ctx, order_address, rpc_url, start_block, end_block, include_timestamps,
                  show_details, limit, output_file, csv_file):
    """Track the event history of a TermMax order

    Examples:
        termmax-tools order-history 0xOrder... https://rpc.example --limit 50

        termmax-tools order-history 0xOrder... https://rpc.example \\
            --start-block 19000000 --show-details --output-file --csv-file history.csv
    """
    ctx.ensure_object(dict)
    client_factory = ctx.obj.get('client_factory', AsyncRpcClient)

    try:
        config = ToolsConfig.from_env(rpc_url=rpc_url, log_level=ctx.obj.get('log_level'),
                                      display_limit=limit)
        result = asyncio.run(track_order(config, client_factory, order_address, start_block, end_block))

        events = result.events
        click.echo(render_history(events, limit=config.tracker.display_limit, detailed=show_details,
                                  detail_count=config.tracker.detail_count))

        if output_file:
            write_json(Path(output_file), events, result.order_info)
            click.echo(f"\nResults saved to {output_file}")

        if csv_file:
            write_csv(Path(csv_file), events)
            click.echo(f"\nCSV order history exported to {csv_file}")

        click.echo(render_summary(result))
    except Exception as e:
        click.echo(f"Error tracking order history: {e}", err=True)
        ctx.exit(1)
