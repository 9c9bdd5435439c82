# termmax_tools/cli/commands/abi.py

"""
Contract ABI CLI commands
"""

from pathlib import Path

import click

from ...contracts import ABILoader, extract_abis, extract_event_signatures, extract_event_topics


@click.group()
def abi():
    """Extract contract ABIs and inspect event topics"""
    pass


@abi.command('extract')
@click.argument('artifacts', nargs=-1, required=True,
                type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--out-dir', type=click.Path(file_okay=False, path_type=Path), default=Path('abis'),
              show_default=True, help='Directory for the extracted ABI files')
def extract(artifacts, out_dir):
    """Write the ABI of each build artifact to OUT_DIR/<ContractName>.json

    Example:
        termmax-tools abi extract out/TermMaxOrder.sol/TermMaxOrder.json --out-dir abis
    """
    written = extract_abis(artifacts, out_dir)
    for path in written:
        click.echo(f"✓ {path}")

    skipped = len(artifacts) - len(written)
    if skipped:
        raise click.ClickException(f"{skipped} artifact(s) could not be read")


@abi.command('topics')
@click.argument('contract_name')
@click.option('--abi-dir', type=click.Path(exists=True, file_okay=False, path_type=Path),
              default=None, help='Directory to load the ABI from (default: bundled ABIs)')
def topics(contract_name, abi_dir):
    """Print name, signature and topic of every event of CONTRACT_NAME"""
    loader = ABILoader(abi_dir)
    contract_abi = loader.load_abi(contract_name)
    if contract_abi is None:
        available = ", ".join(loader.available())
        raise click.ClickException(f"ABI not found: {contract_name} (available: {available})")

    signatures = extract_event_signatures(contract_abi)
    event_topics = extract_event_topics(contract_abi)
    for name, signature in signatures.items():
        click.echo(f"{name} {signature} {event_topics.get(name, '')}")
