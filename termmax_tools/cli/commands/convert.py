# termmax_tools/cli/commands/convert.py

"""
Deployment config conversion CLI command
"""

from pathlib import Path

import click

from ...deploy import SCHEMAS, convert_market_configs
from ...types import ConversionError


@click.command('convert-configs')
@click.argument('input_csv', type=click.Path(dir_okay=False, path_type=Path))
@click.argument('output_json', type=click.Path(dir_okay=False, path_type=Path))
@click.option('--schema', type=click.Choice(list(SCHEMAS)), default='v1', show_default=True,
              help='Column layout of the input sheet')
def convert_configs(input_csv, output_json, schema):
    """Convert a market deployment sheet (CSV) to deployment JSON

    Example:
        termmax-tools convert-configs markets.csv deploy/mainnet-markets.json --schema v2
    """
    try:
        deploy_config = convert_market_configs(input_csv, output_json, schema)
    except ConversionError as e:
        raise click.ClickException(str(e))

    click.echo(f"Converted {len(deploy_config.configs)} market configs to {output_json}")
