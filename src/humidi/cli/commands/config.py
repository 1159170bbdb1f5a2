"""
Config command implementations.

Commands:
    - config show [--field FIELD]   # Display configuration
    - config path                   # Print the config file location
    - config validate               # Validate config file
    - config reset                  # Reset to defaults
"""

import sys
from pathlib import Path
from typing import Optional

import click

from humidi.exceptions import HuMidiError, format_error_for_display
from humidi.models import DEFAULT_CONFIG_PATH, HuMidiConfig

config_path_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.humidi/config.json)",
)


@click.group(name="config")
def config_group():
    """Configure humidi settings."""
    pass


@config_group.command(name="show")
@config_path_option
@click.option("--field", "-f", type=str, default=None, help="Show a single field")
def show_config(config_path: Optional[Path], field: Optional[str]):
    """Display configuration values."""
    config = _load(config_path)
    values = config.model_dump(mode="json")

    if field is not None:
        if field not in values:
            click.echo(f"Unknown field: {field}", err=True)
            click.echo(f"Available fields: {', '.join(values)}", err=True)
            sys.exit(1)
        click.echo(f"{field}: {values[field]}")
        return

    click.echo(f"Configuration ({config_path or DEFAULT_CONFIG_PATH}):\n")
    for name, value in values.items():
        description = HuMidiConfig.model_fields[name].description or ""
        click.echo(f"  {name}: {value}")
        click.echo(f"      {description}")


@config_group.command(name="path")
def config_path_cmd():
    """Print the default config file location."""
    click.echo(str(DEFAULT_CONFIG_PATH))


@config_group.command(name="validate")
@config_path_option
def validate_config(config_path: Optional[Path]):
    """Validate the config file."""
    path = config_path or DEFAULT_CONFIG_PATH
    if not path.exists():
        click.echo(f"[FAIL] Config file not found: {path}", err=True)
        sys.exit(1)
    try:
        HuMidiConfig.load(path)
    except HuMidiError as e:
        click.echo(f"[FAIL] {e.user_message}", err=True)
        if e.recovery_hint:
            click.echo(f"\n{e.recovery_hint}", err=True)
        sys.exit(1)
    click.echo(f"[OK] {path}")


@config_group.command(name="reset")
@config_path_option
@click.confirmation_option(prompt="Reset configuration to defaults?")
def reset_config(config_path: Optional[Path]):
    """Reset the config file to defaults."""
    path = config_path or DEFAULT_CONFIG_PATH
    HuMidiConfig().save(path)
    click.echo(f"Configuration reset: {path}")


def _load(config_path: Optional[Path]) -> HuMidiConfig:
    try:
        return HuMidiConfig.load_or_default(config_path)
    except HuMidiError as e:
        user_message, recovery_hint = format_error_for_display(e)
        click.echo(f"ERROR: {user_message}", err=True)
        if recovery_hint:
            click.echo(f"\n{recovery_hint}", err=True)
        sys.exit(1)
