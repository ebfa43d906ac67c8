import importlib

import pytest

import config


@pytest.fixture()
def reload_config(monkeypatch):
    yield lambda: importlib.reload(config).Config
    monkeypatch.undo()
    importlib.reload(config)


def test_dev_server_flags_default_off(monkeypatch, reload_config):
    monkeypatch.delenv('FLASK_DEBUG', raising=False)
    monkeypatch.delenv('ALLOW_UNSAFE_WERKZEUG', raising=False)
    cfg = reload_config()
    assert cfg.DEBUG is False
    assert cfg.ALLOW_UNSAFE_WERKZEUG is False


def test_dev_server_flags_from_env(monkeypatch, reload_config):
    monkeypatch.setenv('FLASK_DEBUG', '1')
    monkeypatch.setenv('ALLOW_UNSAFE_WERKZEUG', 'yes')
    cfg = reload_config()
    assert cfg.DEBUG is True
    assert cfg.ALLOW_UNSAFE_WERKZEUG is True


@pytest.mark.parametrize('raw, expected', [
    ('true', True), ('On', True), ('0', False), ('no', False), ('', False),
])
def test_env_flag_parsing(monkeypatch, raw, expected):
    monkeypatch.setenv('SOME_FLAG', raw)
    assert config._env_flag('SOME_FLAG') is expected
