"""
YAML configuration for loggers.

Example slog.yml:

    level: DEBUG
    throw_on_error: false
    log_file: /var/log/my-app/app.jsonl
    init:
      service: my-app
      env: production
"""

import os
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from slog.errors import ConfigurationError
from slog.logger import JsonLog
from slog.sinks import file_sink

KNOWN_KEYS = ('level', 'init', 'prefix', 'throw_on_error', 'throwOnError', 'log_file')


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Parse a logger configuration file

    Args:
        config_path: Path to a YAML file

    Returns:
        dict: Logger options (level, init, throw_on_error, log_file)

    Raises:
        ConfigurationError: If the file is missing or not a YAML mapping
    """
    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(f'Config file not found: {config_path}', kind='file')
    except yaml.YAMLError as e:
        raise ConfigurationError(f'Invalid YAML: {e}', kind='file')

    # An empty file means defaults
    if config is None:
        return {}

    if not isinstance(config, dict):
        raise ConfigurationError(
            f'Config must be a mapping, got {type(config).__name__}',
            kind='file'
        )

    options = {key: config[key] for key in KNOWN_KEYS if key in config}

    if options.get('log_file'):
        options['log_file'] = os.path.expandvars(str(options['log_file']))

    return options


def logger_from_config(config_path: Union[str, Path]) -> JsonLog:
    """
    Build a JsonLog from a YAML configuration file

    Args:
        config_path: Path to a YAML file

    Returns:
        JsonLog: Logger writing to log_file if configured, else the console
    """
    options = load_config(config_path)
    log_file = options.pop('log_file', None)
    if log_file:
        options['func'] = file_sink(log_file)
    return JsonLog.from_options(options)
