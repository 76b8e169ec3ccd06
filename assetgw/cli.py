# SPDX-License-Identifier: Apache-2.0
"""Command line entry point: resolves the configuration, connects and runs the menu."""
import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import GatewayConfig
from .dispatcher import Dispatcher
from .errors import GatewayError
from .gateway import COMMIT, ENDORSE, EVALUATE, SUBMIT, Gateway
from .msp.identity import load_identity, load_signer
from .peer import connect_peer

consoleHandler = logging.StreamHandler()
consoleHandler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s: %(message)s'))
_logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, help='Interactive client for the asset transfer chaincode.')

_console = Console()


def configure_logging(level):
    package_logger = logging.getLogger('assetgw')
    package_logger.setLevel(level.upper())
    if consoleHandler not in package_logger.handlers:
        package_logger.addHandler(consoleHandler)


def display_input_parameters(config, console):
    table = Table(title='Input parameters')
    table.add_column('Parameter', style='cyan', no_wrap=True)
    table.add_column('Value', style='white')

    for name, value in config.model_dump().items():
        table.add_row(name, escape(str(value)))

    console.print(table)


async def run_client(config, console, read_input=None, pause=True):
    """Connect, run the menu until the operator exits, then release everything.

    The session is closed before the peer connection, on every exit path.
    """
    method = 'run_client'
    _logger.debug(f'{method} - start')

    peer = connect_peer(config)
    try:
        await peer.wait_for_ready(config.connect_timeout)

        identity = load_identity(config.cert_path, config.msp_id)
        signer = load_signer(config.key_directory_path)

        gateway = Gateway(peer, identity, signer, config.channel_name, config.chaincode_name, {
            EVALUATE: config.evaluate_timeout,
            ENDORSE: config.endorse_timeout,
            SUBMIT: config.submit_timeout,
            COMMIT: config.commit_status_timeout,
        })
        try:
            dispatcher = Dispatcher(gateway, console=console, read_input=read_input, pause=pause)
            await dispatcher.run()
        finally:
            gateway.close()
    finally:
        await peer.close()

    _logger.debug(f'{method} - done')


@app.command()
def main(
        config_file: Optional[Path] = typer.Option(
            None, '--config', envvar='ASSETGW_CONFIG', help='YAML file with connection settings.'),
        log_level: str = typer.Option(
            'WARNING', '--log-level', envvar='LOG_LEVEL', help='Logging level of the client.'),
        pause: bool = typer.Option(
            True, '--pause/--no-pause', help='Wait for Enter after each transaction.'),
) -> None:
    """Connect to the gateway peer and invoke chaincode transactions from a menu."""
    try:
        configure_logging(log_level)
    except ValueError:
        raise typer.BadParameter(f'Unknown log level: {log_level}', param_hint='--log-level')

    try:
        config = GatewayConfig.load(config_file=config_file)
    except ValueError as e:
        _console.print(f'[bold red]******** Invalid configuration:[/] {escape(str(e))}')
        raise typer.Exit(code=1)

    display_input_parameters(config, _console)

    try:
        asyncio.run(run_client(config, _console, pause=pause))
    except (GatewayError, ValueError) as e:
        _logger.error(f'main - failed to run the application: {e!r}')
        _console.print(f'[bold red]******** FAILED to run the application:[/] {escape(str(e))}')
        raise typer.Exit(code=1)
