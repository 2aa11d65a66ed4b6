"""
Shared CLI context passed to every xcpv command.
"""

import json
import logging
import sys
from typing import Any, Optional

import click
import yaml
from tabulate import tabulate

from validator.core import ValidationEngine
from validator.settings import ValidationSettings
from .config import ConfigurationManager

_log_handler: Optional[logging.Handler] = None


class CLIContext:
    """Global CLI context for sharing state across commands."""

    def __init__(self):
        self.config_file: Optional[str] = None
        self.profile: Optional[str] = None
        self.output_format: str = "table"
        self.verbose: int = 0
        self.config_manager: Optional[ConfigurationManager] = None
        self.logger: logging.Logger = logging.getLogger('xcpv')
        self._engine: Optional[ValidationEngine] = None

    def setup_logging(self):
        """Configure logging based on verbosity level."""
        log_levels = {
            0: logging.WARNING,
            1: logging.INFO,
            2: logging.DEBUG
        }

        level = log_levels.get(min(self.verbose, 2), logging.DEBUG)

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        # Replace the handler on re-entry so it follows the current stderr
        global _log_handler
        root = logging.getLogger()
        if _log_handler is not None:
            root.removeHandler(_log_handler)

        _log_handler = logging.StreamHandler(sys.stderr)
        _log_handler.setFormatter(formatter)
        root.addHandler(_log_handler)
        root.setLevel(level)

    def load_config(self):
        """Load configuration from defaults, profile, file and environment."""
        self.config_manager = ConfigurationManager(
            config_file=self.config_file, profile=self.profile
        )
        self.config_manager.load()
        self.logger.info(f"Configuration sources: {', '.join(self.config_manager.get_sources())}")

    @property
    def settings(self) -> ValidationSettings:
        if self.config_manager is None:
            self.load_config()
        return self.config_manager.settings()

    @property
    def engine(self) -> ValidationEngine:
        """Validation engine built from the loaded configuration."""
        if self._engine is None:
            self._engine = ValidationEngine(settings=self.settings)
        return self._engine

    def output(self, data: Any, format_override: Optional[str] = None):
        """Output data in specified format."""
        format_type = format_override or self.output_format

        if format_type == "json":
            click.echo(json.dumps(data, indent=2, default=str))
        elif format_type == "yaml":
            click.echo(yaml.safe_dump(json.loads(json.dumps(data, default=str)),
                                      default_flow_style=False, sort_keys=False).rstrip())
        else:
            self._output_table(data)

    def _output_table(self, data: Any):
        """Output data in table format."""
        if isinstance(data, dict):
            rows = [[key, self._format_value(value)] for key, value in data.items()]
            click.echo(tabulate(rows, tablefmt='plain', disable_numparse=True))
        elif isinstance(data, list):
            for item in data:
                click.echo(self._format_value(item))
        else:
            click.echo(str(data))

    def _format_value(self, value: Any) -> str:
        if isinstance(value, (list, tuple)):
            return "; ".join(str(v) for v in value)
        if isinstance(value, dict):
            return json.dumps(value, default=str)
        return str(value)


pass_context = click.make_pass_decorator(CLIContext, ensure=True)

