"""
Command line interface: emit records and validate log files.
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click

from slog import __version__
from slog.config import logger_from_config
from slog.errors import ConfigurationError
from slog.levels import LEVEL_NAMES
from slog.logger import JsonLog
from slog.record import validate_record


def parse_field(raw: str) -> Tuple[str, Any]:
    """Parse key=value; the value is decoded as JSON when possible"""
    if '=' not in raw:
        raise click.BadParameter(f'expected key=value, got {raw!r}', param_hint='--field')

    key, value = raw.split('=', 1)
    try:
        return key, json.loads(value)
    except json.JSONDecodeError:
        return key, value


@click.group()
@click.version_option(version=__version__)
def cli():
    """slog structured logging CLI"""
    pass


@cli.command()
@click.argument('message')
@click.argument('args', nargs=-1)
@click.option('--level', type=click.Choice(LEVEL_NAMES), default='INFO', help='Record level')
@click.option('--min-level', type=click.Choice(LEVEL_NAMES), default=None, help='Minimum level to emit')
@click.option('--field', 'fields', multiple=True, help='Extra field as key=value (repeatable)')
@click.option('--config', type=click.Path(exists=True), default=None, help='Path to a YAML logger config')
def emit(message: str, args: Tuple[str, ...], level: str, min_level: Optional[str],
         fields: Tuple[str, ...], config: Optional[str]):
    """Emit one record"""
    try:
        log = logger_from_config(config) if config else JsonLog()
    except ConfigurationError as e:
        click.echo(click.style(f'❌ {e}', fg='red'), err=True)
        sys.exit(1)

    if min_level:
        log = JsonLog(
            level=min_level,
            init=log.fields,
            func=log.config.func,
            throw_on_error=log.config.throw_on_error
        )

    extra: Dict[str, Any] = dict(parse_field(raw) for raw in fields)
    if extra:
        log = log.child(extra)

    log.log(level, message, *args)


@cli.command()
@click.argument('log_file', type=click.Path(exists=True, dir_okay=False))
def validate(log_file: str):
    """
    Validate a file of JSON log records

    LOG_FILE: Path to a file with one record per line
    """
    invalid = 0
    checked = 0

    with Path(log_file).open() as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            checked += 1
            if not validate_record(line):
                invalid += 1
                click.echo(click.style(f'⚠ Line {lineno}: invalid record', fg='yellow'))

    if invalid:
        click.echo(click.style(f'❌ {invalid} of {checked} records invalid', fg='red'))
        sys.exit(1)

    click.echo(click.style(f'✓ {checked} records valid', fg='green'))

