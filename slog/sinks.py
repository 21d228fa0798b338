"""
Output sinks: functions that receive one serialized record.
"""

from pathlib import Path
from typing import Callable, Union

import click


def console_sink(line: str) -> None:
    """Default sink: one line on standard output"""
    click.echo(line)


def file_sink(path: Union[str, Path]) -> Callable[[str], None]:
    """
    Build a sink that appends each record to a file.

    The file is opened and closed per write, so external rotation or
    truncation needs no coordination with the logger.

    Args:
        path: Target file; parent directories are created

    Returns:
        Sink function
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    def write(line: str) -> None:
        with open(path, 'a') as f:
            f.write(line + '\n')

    return write
