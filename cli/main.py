#!/usr/bin/env python3
"""
Fabric Registry - Command Line Interface

A read-only CLI for inspecting registered environments, their nodes and
organizations, and the wallets and gateways known to the registries.
"""

import sys
import json
import logging
from functools import wraps
from typing import Optional, Any, List

import click
import yaml

from environments.base import FabricEnvironmentError
from network.microfab_client import MicrofabClientError
from registry.context import RegistryContext
from registry.exceptions import RegistryError
from registry.schema import EnvironmentFlags

from . import __version__
from .config import ConfigurationError, ConfigurationManager


FLAG_NAMES = [flag.name.lower() for flag in EnvironmentFlags if flag.name != 'NONE']


class CLIContext:
    """Global CLI context for sharing state across commands."""

    def __init__(self):
        self.config_file: Optional[str] = None
        self.output_format: str = "table"
        self.verbose: int = 0
        self.config: Optional[ConfigurationManager] = None
        self.logger: logging.Logger = logging.getLogger('fabric-registry')
        self._registries: Optional[RegistryContext] = None

    def setup_logging(self):
        """Configure logging based on verbosity level."""
        log_levels = {
            0: logging.WARNING,
            1: logging.INFO,
            2: logging.DEBUG
        }

        if self.verbose:
            level = log_levels.get(min(self.verbose, 2), logging.DEBUG)
        else:
            level = getattr(logging, str(self.config.get('logging.level', 'WARNING')).upper(),
                            logging.WARNING)

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)

        root = logging.getLogger()
        root.setLevel(level)
        if not root.handlers:
            root.addHandler(handler)

        # Suppress verbose third-party logs unless in debug mode
        if self.verbose < 2:
            logging.getLogger('requests').setLevel(logging.WARNING)
            logging.getLogger('urllib3').setLevel(logging.WARNING)

    def load_config(self):
        """Load the hierarchical configuration."""
        self.config = ConfigurationManager(self.config_file)
        self.config.load()

    @property
    def registries(self) -> RegistryContext:
        if self._registries is None:
            self._registries = RegistryContext.from_config(self.config)
        return self._registries

    def output(self, data: Any):
        """Output data in the selected format."""
        if self.output_format == "json":
            click.echo(json.dumps(data, indent=2, default=str))
        elif self.output_format == "yaml":
            click.echo(yaml.safe_dump(data, default_flow_style=False, sort_keys=False), nl=False)
        else:
            self._output_table(data)

    def _output_table(self, data: Any):
        """Output data in table format."""
        if isinstance(data, list) and data and isinstance(data[0], dict):
            headers: List[str] = []
            for item in data:
                headers.extend(h for h in item.keys() if h not in headers)
            widths = {h: max(len(h), *(len(str(item.get(h, ""))) for item in data)) for h in headers}
            click.echo(" | ".join(f"{h:{widths[h]}}" for h in headers))
            click.echo("-+-".join("-" * widths[h] for h in headers))
            for item in data:
                click.echo(" | ".join(f"{str(item.get(h, '')):{widths[h]}}" for h in headers))
        elif isinstance(data, list):
            for item in data:
                click.echo(item)
        else:
            click.echo(str(data))


pass_context = click.make_pass_decorator(CLIContext, ensure=True)


def handle_cli_error(func):
    """Report registry, environment and HTTP failures as CLI errors."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (RegistryError, FabricEnvironmentError, MicrofabClientError, ConfigurationError) as e:
            ctx = click.get_current_context().find_object(CLIContext)
            if ctx is not None:
                ctx.logger.debug("Command failed", exc_info=True)
            raise click.ClickException(str(e))

    return wrapper


def parse_flags(names) -> List[EnvironmentFlags]:
    return [EnvironmentFlags[name.upper()] for name in names]


@click.group(context_settings={'help_option_names': ['-h', '--help']})
@click.option('--config-file', '-c',
              type=click.Path(dir_okay=False),
              help='Path to configuration file')
@click.option('--output-format', '-o',
              type=click.Choice(['table', 'json', 'yaml']),
              default=None,
              help='Output format')
@click.option('--verbose', '-v',
              count=True,
              help='Increase verbosity (-v for INFO, -vv for DEBUG)')
@click.version_option(version=__version__, message='fabric-registry v%(version)s')
@pass_context
def cli(ctx: CLIContext, config_file: Optional[str], output_format: Optional[str], verbose: int):
    """
    Fabric Registry Command Line Interface

    Inspect environments, wallets and gateways registered under the storage
    directory.

    Examples:
        fabric-registry environments list --exclude ansible
        fabric-registry environments nodes myFabric --all
        fabric-registry wallets list --hide-local
    """
    ctx.config_file = config_file
    ctx.verbose = verbose

    try:
        ctx.load_config()
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    ctx.output_format = output_format or ctx.config.get('cli.output_format', 'table')
    ctx.setup_logging()

    ctx.logger.debug(f"CLI initialized from {', '.join(ctx.config.get_sources())}")


@cli.group()
def environments():
    """Registered environments and their nodes."""


@environments.command('list')
@click.option('--include', multiple=True, type=click.Choice(FLAG_NAMES),
              help='Only environments with this tag (repeatable)')
@click.option('--exclude', multiple=True, type=click.Choice(FLAG_NAMES),
              help='Skip environments with this tag (repeatable)')
@pass_context
@handle_cli_error
def list_environments(ctx: CLIContext, include, exclude):
    """List registered environments."""
    entries = ctx.registries.environments.get_all(parse_flags(include), parse_flags(exclude))
    ctx.output([
        {
            'name': entry.name,
            'tags': ','.join(flag.name.lower() for flag in EnvironmentFlags
                             if flag.name != 'NONE' and entry.has_flag(flag)),
            'directory': entry.environment_directory or '',
            'url': entry.url or '',
        }
        for entry in entries
    ])


@environments.command('nodes')
@click.argument('name')
@click.option('--all', 'show_all', is_flag=True, help='Include hidden nodes')
@click.option('--without-identities', is_flag=True,
              help='Only nodes missing a wallet or identity')
@pass_context
@handle_cli_error
def list_nodes(ctx: CLIContext, name: str, show_all: bool, without_identities: bool):
    """List the nodes of environment NAME."""
    environment = ctx.registries.environments.get_environment(name)
    nodes = environment.get_nodes(without_identities=without_identities, show_all=show_all)
    if ctx.output_format == 'table':
        ctx.output([
            {
                'name': node.name,
                'type': node.type.value if node.type else '',
                'msp_id': node.msp_id or '',
                'api_url': node.api_url or '',
                'wallet': node.wallet or '',
                'identity': node.identity or '',
            }
            for node in nodes
        ])
    else:
        ctx.output([node.to_dict() for node in nodes])


@environments.command('orgs')
@click.argument('name')
@click.option('--no-orderer', is_flag=True, help='Leave out orderer organizations')
@pass_context
@handle_cli_error
def list_organizations(ctx: CLIContext, name: str, no_orderer: bool):
    """List the organization (MSP) ids of environment NAME."""
    environment = ctx.registries.environments.get_environment(name)
    ctx.output(environment.get_all_organization_names(show_orderer=not no_orderer))


@cli.group()
def wallets():
    """Registered and environment-owned wallets."""


@wallets.command('list')
@click.option('--hide-local', is_flag=True, help='Leave out wallets of local environments')
@pass_context
@handle_cli_error
def list_wallets(ctx: CLIContext, hide_local: bool):
    """List wallets."""
    entries = ctx.registries.wallets.get_all(show_local=not hide_local)
    ctx.output([
        {
            'name': entry.name,
            'display_name': entry.display_name or '',
            'from_environment': entry.from_environment or '',
            'wallet_path': entry.wallet_path or '',
        }
        for entry in entries
    ])


@cli.group()
def gateways():
    """Registered and environment-defined gateways."""


@gateways.command('list')
@click.option('--hide-local', is_flag=True, help='Leave out gateways of local environments')
@pass_context
@handle_cli_error
def list_gateways(ctx: CLIContext, hide_local: bool):
    """List gateways."""
    entries = ctx.registries.gateways.get_all(show_local=not hide_local)
    ctx.output([
        {
            'name': entry.name,
            'display_name': entry.display_name or '',
            'from_environment': entry.from_environment or '',
            'associated_wallet': entry.associated_wallet or '',
        }
        for entry in entries
    ])


if __name__ == '__main__':
    cli()
