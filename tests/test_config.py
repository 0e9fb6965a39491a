"""Tests of configuration loading."""

import importlib

import pytest
from sentry_sdk.integrations.flask import FlaskIntegration

import mirror_webhooks
import mirror_webhooks.config


@pytest.fixture
def reload_config(monkeypatch):
    """Re-read the environment into the config classes, and restore them after."""
    yield lambda: importlib.reload(mirror_webhooks.config)
    monkeypatch.undo()
    importlib.reload(mirror_webhooks.config)


def test_defaults(monkeypatch, reload_config):
    for name in ["WEBHOOK_SECRET", "MIRROR_BIN", "MIRROR_SYNC_BIN", "REPO_ROOT", "PORT",
                 "MIRROR_COMMAND_TIMEOUT", "STRICT_REPO_NAMES"]:
        monkeypatch.delenv(name, raising=False)
    config = reload_config().DefaultConfig()
    assert config.WEBHOOK_SECRET == "DOYOUREALLYTHINKIEXPOSESECRETS?"
    assert config.MIRROR_BIN == "/usr/local/bin/mirror"
    assert config.MIRROR_SYNC_BIN == "/usr/local/bin/mirror-sync"
    assert config.REPO_ROOT == "/root/shifoogit/repos"
    assert config.PORT == 53981
    assert config.MIRROR_COMMAND_TIMEOUT is None
    assert config.STRICT_REPO_NAMES is False


def test_from_environment(monkeypatch, reload_config):
    monkeypatch.setenv("WEBHOOK_SECRET", "shh")
    monkeypatch.setenv("MIRROR_BIN", "/bin/mirror")
    monkeypatch.setenv("MIRROR_SYNC_BIN", "/bin/mirror-sync")
    monkeypatch.setenv("REPO_ROOT", "/srv/mirrors/")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("MIRROR_COMMAND_TIMEOUT", "90")
    monkeypatch.setenv("STRICT_REPO_NAMES", "yes")
    config_module = reload_config()
    config = config_module.DefaultConfig()
    settings = config_module.MirrorSettings.from_mapping(
        {name: getattr(config, name) for name in dir(config) if name.isupper()}
    )
    assert settings == config_module.MirrorSettings(
        secret="shh",
        mirror_bin="/bin/mirror",
        mirror_sync_bin="/bin/mirror-sync",
        repo_root="/srv/mirrors",
        command_timeout=90.0,
        strict_repo_names=True,
    )
    assert config.PORT == 8080


def test_empty_variables_use_defaults(monkeypatch, reload_config):
    monkeypatch.setenv("MIRROR_BIN", "")
    monkeypatch.setenv("MIRROR_COMMAND_TIMEOUT", "0")
    config = reload_config().DefaultConfig()
    assert config.MIRROR_BIN == "/usr/local/bin/mirror"
    assert config.MIRROR_COMMAND_TIMEOUT is None


def test_app_settings_are_frozen():
    app = mirror_webhooks.create_app(config="testing")
    settings = app.extensions["mirror_settings"]
    assert settings.repo_root == "/srv/test-mirrors"
    assert settings.secret == "testing secret"
    with pytest.raises(AttributeError):
        settings.secret = "changed"


def test_expand_config():
    assert mirror_webhooks.expand_config() == "mirror_webhooks.config.DefaultConfig"
    assert mirror_webhooks.expand_config("development") == "mirror_webhooks.config.DevelopmentConfig"


def test_sentry_enabled_by_dsn(monkeypatch, mocker):
    monkeypatch.setenv("SENTRY_DSN", "https://key@sentry.example.com/1")
    init = mocker.patch("mirror_webhooks.sentry_sdk.init")
    mirror_webhooks.create_app(config="development")
    init.assert_called_once()
    (integration,) = init.call_args.kwargs["integrations"]
    assert isinstance(integration, FlaskIntegration)


def test_sentry_off_without_dsn(monkeypatch, mocker):
    monkeypatch.delenv("SENTRY_DSN", raising=False)
    init = mocker.patch("mirror_webhooks.sentry_sdk.init")
    mirror_webhooks.create_app(config="development")
    assert init.call_count == 0


def test_sentry_off_when_testing(monkeypatch, mocker):
    monkeypatch.setenv("SENTRY_DSN", "https://key@sentry.example.com/1")
    init = mocker.patch("mirror_webhooks.sentry_sdk.init")
    mirror_webhooks.create_app(config="testing")
    assert init.call_count == 0
