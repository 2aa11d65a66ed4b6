#!/usr/bin/env python3
"""
Configuration Management Commands for the xcpv CLI

Inspect the merged configuration, check it against the settings models, and
generate a starting configuration file.
"""

import copy
import json
import sys
from pathlib import Path
from typing import Optional

import click
import yaml

from cli.config import DEFAULT_CONFIG, PROFILES
from cli.context import CLIContext, pass_context


@click.group()
@pass_context
def config(ctx: CLIContext):
    """
    Configuration management commands.

    Inspect configuration sources, values and profiles.
    """
    ctx.logger.debug("Config command group invoked")


@config.command('show')
@click.option('--key', help='Specific configuration key to show (dot notation)')
@pass_context
def show_config(ctx: CLIContext, key: Optional[str]):
    """
    Show the merged configuration.

    Examples:
        xcpv config show
        xcpv --profile testnet config show --key network
    """
    manager = ctx.config_manager
    if key:
        value = manager.get(key)
        if value is None:
            raise click.ClickException(f"Configuration key not found: {key}")
        ctx.output({key: value} if not isinstance(value, dict) else value)
    else:
        ctx.output(manager.load())


@config.command('get')
@click.argument('key')
@click.option('--default', help='Default value if key not found')
@pass_context
def get_config(ctx: CLIContext, key: str, default: Optional[str]):
    """Print a single configuration value."""
    value = ctx.config_manager.get(key, default)
    if value is None:
        raise click.ClickException(f"Configuration key not found: {key}")

    if isinstance(value, (dict, list)):
        ctx.output(value)
    else:
        click.echo(json.dumps(value) if isinstance(value, bool) else str(value))


@config.command('sources')
@pass_context
def config_sources(ctx: CLIContext):
    """List the configuration sources in the order they were merged."""
    ctx.output(ctx.config_manager.get_sources())


@config.command('validate')
@pass_context
def validate_config(ctx: CLIContext):
    """Check the merged configuration against the settings models."""
    errors = ctx.config_manager.validate()
    if errors:
        for error in errors:
            click.echo(f"  - {error}", err=True)
        click.echo(f"Configuration has {len(errors)} error(s)", err=True)
        sys.exit(1)

    click.echo("Configuration is valid")


@config.command('list-profiles')
@pass_context
def list_profiles(ctx: CLIContext):
    """List the built-in configuration profiles."""
    ctx.output({name: profile for name, profile in PROFILES.items()})


@config.command('init')
@click.option('--profile', 'profile_name', type=click.Choice(sorted(PROFILES)),
              help='Configuration profile to use as base')
@click.option('--output', type=click.Path(dir_okay=False), help='Output file path')
@click.option('--format', 'file_format', type=click.Choice(['yaml', 'json']),
              default='yaml', help='Configuration file format')
@click.option('--force', is_flag=True, help='Overwrite existing configuration')
@pass_context
def init_config(ctx: CLIContext, profile_name: Optional[str], output: Optional[str],
                file_format: str, force: bool):
    """
    Generate a configuration file from the defaults.

    Examples:
        xcpv config init
        xcpv config init --profile testnet --output testnet.yml
    """
    output_path = Path(output or ('.xcpv.yml' if file_format == 'yaml' else '.xcpv.json'))
    if output_path.exists() and not force:
        raise click.ClickException(
            f"Configuration file already exists: {output_path}. Use --force to overwrite."
        )

    config_data = copy.deepcopy(DEFAULT_CONFIG)
    if profile_name:
        config_data = ctx.config_manager._deep_merge(config_data, PROFILES[profile_name])

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w') as f:
        if file_format == 'yaml':
            yaml.safe_dump(config_data, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(config_data, f, indent=2)

    ctx.logger.info(f"Wrote configuration to {output_path}")
    click.echo(f"Configuration written to {output_path}")
