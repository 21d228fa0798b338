"""
Tests for the slog CLI.
"""

import json

import pytest
from click.testing import CliRunner

from slog import __version__
from slog.cli import cli, parse_field


@pytest.fixture
def runner():
    """CLI test runner fixture"""
    return CliRunner()


def test_cli_help(runner):
    """Test CLI displays help"""
    result = runner.invoke(cli, ['--help'])
    assert result.exit_code == 0
    assert 'slog structured logging CLI' in result.output


def test_cli_version(runner):
    """Test CLI displays version"""
    result = runner.invoke(cli, ['--version'])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_parse_field():
    """Test key=value parsing with JSON values"""
    assert parse_field('user=42') == ('user', 42)
    assert parse_field('name=bob') == ('name', 'bob')
    assert parse_field('expr=a=b') == ('expr', 'a=b')
    assert parse_field('tags=["a"]') == ('tags', ['a'])


def test_emit(runner):
    """Test emit writes one record"""
    result = runner.invoke(cli, ['emit', 'hello', '--field', 'user=42', '--field', 'name=bob'])

    assert result.exit_code == 0
    record = json.loads(result.output)
    assert record['msg'] == 'hello'
    assert record['level'] == 'INFO'
    assert record['user'] == 42
    assert record['name'] == 'bob'
    assert 'args' not in record


def test_emit_with_args_and_level(runner):
    """Test emit passes positional args and level"""
    result = runner.invoke(cli, ['emit', 'hello', 'a', 'b', '--level', 'ERROR'])

    assert result.exit_code == 0
    record = json.loads(result.output)
    assert record['level'] == 'ERROR'
    assert record['args'] == ['a', 'b']


def test_emit_filtered(runner):
    """Test emit respects --min-level"""
    result = runner.invoke(cli, ['emit', 'hello', '--level', 'INFO', '--min-level', 'ERROR'])

    assert result.exit_code == 0
    assert result.output == ''


def test_emit_bad_field(runner):
    """Test emit rejects a field without ="""
    result = runner.invoke(cli, ['emit', 'hello', '--field', 'nokey'])

    assert result.exit_code == 2
    assert 'key=value' in result.output


def test_emit_with_config(runner):
    """Test emit builds the logger from a config file"""
    with runner.isolated_filesystem():
        with open('slog.yml', 'w') as f:
            f.write('log_file: out/app.jsonl\ninit:\n  service: cli\n')

        result = runner.invoke(cli, ['emit', 'to file', '--config', 'slog.yml'])

        assert result.exit_code == 0
        with open('out/app.jsonl') as f:
            record = json.loads(f.read())
        assert record['service'] == 'cli'
        assert record['msg'] == 'to file'


def test_emit_with_bad_config(runner):
    """Test emit fails on an invalid config file"""
    with runner.isolated_filesystem():
        with open('slog.yml', 'w') as f:
            f.write('- not\n- a mapping\n')

        result = runner.invoke(cli, ['emit', 'x', '--config', 'slog.yml'])

        assert result.exit_code == 1


def test_validate_valid_file(runner):
    """Test validate accepts well-formed records"""
    with runner.isolated_filesystem():
        with open('app.jsonl', 'w') as f:
            f.write(json.dumps({'ts': 1, 'level': 'INFO', 'msg': 'a'}) + '\n\n')
            f.write(json.dumps({'ts': 2, 'level': 'ERROR'}) + '\n')

        result = runner.invoke(cli, ['validate', 'app.jsonl'])

        assert result.exit_code == 0
        assert '2 records valid' in result.output


def test_validate_invalid_file(runner):
    """Test validate reports invalid lines"""
    with runner.isolated_filesystem():
        with open('app.jsonl', 'w') as f:
            f.write(json.dumps({'ts': 1, 'level': 'INFO'}) + '\n')
            f.write('Plain text log entry\n')

        result = runner.invoke(cli, ['validate', 'app.jsonl'])

        assert result.exit_code == 1
        assert 'Line 2' in result.output
        assert '1 of 2 records invalid' in result.output
