import json

import pytest

from oxistore.cli import main, parse_value


@pytest.fixture
def cli(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    base = ['--backend', 'single_file', '--data-dir', str(tmp_path / 'data')]

    def run(*args):
        return main(base + list(args))

    return run


def test_parse_value():
    assert parse_value('{"a": [1]}') == {'a': [1]}
    assert parse_value('3') == 3
    assert parse_value('null') is None
    assert parse_value('plain words') == 'plain words'


def test_set_get_dump(cli, capsys):
    assert cli('set', 'settings', '{"theme": "dark", "n": [1, 2]}') == 0
    capsys.readouterr()

    assert cli('get', 'settings.theme') == 0
    assert json.loads(capsys.readouterr().out) == 'dark'

    assert cli('get', 'settings.n', '--shallow') == 0
    assert json.loads(capsys.readouterr().out) == {'type': 'array', 'length': 2}

    assert cli('dump') == 0
    assert json.loads(capsys.readouterr().out) == {'settings': {'theme': 'dark', 'n': [1, 2]}}


def test_delete(cli, capsys):
    cli('set', 'a', '{"b": 1}')
    assert cli('delete', 'a') == 0
    capsys.readouterr()
    cli('dump')
    assert json.loads(capsys.readouterr().out) == {}


def test_errors_exit_non_zero(cli, capsys):
    assert cli('get', 'missing.child') == 1
    assert 'parent container does not exist' in capsys.readouterr().err


def test_config_file(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    cfg = tmp_path / 'oxistore.yml'
    cfg.write_text(f'backend: file\nserializer: yaml\ndata_dir: {tmp_path / "records"}\n', encoding='utf-8')
    assert main(['--config', str(cfg), 'set', 'x', '1']) == 0
    assert (tmp_path / 'records' / '%2Ex.yml').exists()
    assert main(['--config', str(cfg), 'get', 'x']) == 0
    assert json.loads(capsys.readouterr().out) == 1


def test_encrypted_without_password_exits_non_zero(cli, capsys):
    assert cli('--serializer', 'encrypted', 'dump') == 1
    assert 'requires either `key` or `password`' in capsys.readouterr().err


def test_broken_config_file_exits_non_zero(tmp_path, capsys):
    cfg = tmp_path / 'bad.yml'
    cfg.write_text('- just\n- a list\n', encoding='utf-8')
    assert main(['--config', str(cfg), 'dump']) == 1
    assert 'expected mapping' in capsys.readouterr().err
