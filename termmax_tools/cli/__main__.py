# termmax_tools/cli/__main__.py

"""
TermMax tools CLI

Usage: termmax-tools [command] [options]
       python -m termmax_tools.cli [command] [options]
"""

import sys

import click

from ..core.config import ToolsConfig


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx, verbose):
    """TermMax tools - order history, deployment configs and API load tests

    Command-line interface for:
    - Reconstructing the event history of a TermMax order
    - Converting market deployment sheets to deployment JSON
    - Extracting contract ABIs and event topics
    - Load testing the TermMax backend API
    """
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['log_level'] = "DEBUG" if verbose else None

    config = ToolsConfig.from_env(log_level=ctx.obj['log_level'])
    config.configure_logging(force=True)
    ctx.obj['config'] = config


from .commands.order_history import order_history
from .commands.convert import convert_configs
from .commands.abi import abi
from .commands.loadtest import loadtest

cli.add_command(order_history)
cli.add_command(convert_configs)
cli.add_command(abi)
cli.add_command(loadtest)


def main() -> None:
    """Console entry point; usage errors and unhandled failures exit with status 1"""
    try:
        result = cli.main(standalone_mode=False)
    except click.exceptions.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(1)
    except click.ClickException as e:
        e.show()
        sys.exit(1)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    sys.exit(result if isinstance(result, int) else 0)


if __name__ == '__main__':
    main()
