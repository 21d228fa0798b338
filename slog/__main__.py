"""
Allow running the CLI as a module: python -m slog
"""
from slog.cli import cli


if __name__ == '__main__':
    cli()
