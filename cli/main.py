#!/usr/bin/env python3
"""
Counterparty Wallet Validation - Command Line Interface

Validate addresses, scripts, asset names, amounts, memos and fee rates from the
shell. Every validation command exits 0 for a valid verdict and 1 otherwise.
"""

import functools
import sys
from typing import Optional

import click

from . import __version__
from .context import CLIContext, pass_context


@click.group(context_settings={'help_option_names': ['-h', '--help']})
@click.option('--config-file', '-c',
              type=click.Path(dir_okay=False),
              help='Path to configuration file (YAML or JSON)')
@click.option('--output-format', '-o',
              type=click.Choice(['table', 'json', 'yaml']),
              default=None,
              help='Output format (defaults to cli.output_format)')
@click.option('--verbose', '-v',
              count=True,
              help='Increase verbosity (-v for INFO, -vv for DEBUG)')
@click.option('--profile',
              type=click.Choice(['mainnet', 'testnet', 'regtest']),
              help='Configuration profile to apply')
@click.version_option(version=__version__, prog_name='xcpv',
                      message='%(prog)s v%(version)s')
@pass_context
def cli(ctx: CLIContext, config_file: Optional[str], output_format: Optional[str],
        verbose: int, profile: Optional[str]):
    """
    Counterparty wallet validation tools.

    Examples:
        xcpv address bc1qw508d6qejxtdg4y5r3zarvary0c5xw7kv8f3t4
        xcpv --profile testnet amount 0.5
        xcpv -o json asset PEPECASH
    """
    ctx.config_file = config_file
    ctx.profile = profile
    ctx.verbose = verbose

    ctx.setup_logging()
    ctx.load_config()

    ctx.output_format = output_format or ctx.config_manager.get('cli.output_format', 'table')
    ctx.logger.debug("CLI initialized with context")


def handle_cli_error(func):
    """Decorator to handle CLI errors gracefully."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            click.echo("\nOperation cancelled by user.", err=True)
            sys.exit(130)
        except Exception as e:
            ctx = None
            current = click.get_current_context(silent=True)
            if current is not None:
                ctx = current.find_object(CLIContext)

            click.echo(f"Error: {e}", err=True)
            if ctx and ctx.verbose >= 2:
                import traceback
                click.echo(traceback.format_exc(), err=True)
            else:
                click.echo("Use -vv for detailed error information.", err=True)

            sys.exit(1)

    return wrapper


def register_commands():
    """Register all command modules with the main CLI."""
    from cli.commands.validate import COMMANDS
    from cli.commands.config import config

    for command in COMMANDS:
        cli.add_command(command)
    cli.add_command(config)


register_commands()


def main():
    """Console script entry point."""
    handle_cli_error(cli)()


if __name__ == '__main__':
    main()
