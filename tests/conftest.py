"""Automatically run by pytest to set up test infrastructure."""

import dataclasses
import hmac
import json
import logging
from hashlib import sha256

import pytest

import mirror_webhooks
from mirror_webhooks.config import MirrorSettings
from mirror_webhooks.types import Outcome

SECRET = "testing secret"


def make_signature(payload, secret=SECRET):
    """Compute a signature from a secret and a payload."""
    return 'sha256=' + hmac.new(secret.encode(), msg=payload, digestmod=sha256).hexdigest()


def make_body(payload):
    return json.dumps(payload).encode("utf8")


@pytest.fixture
def settings(tmp_path):
    """Settings with the mirrors kept in a temporary directory."""
    return MirrorSettings(
        secret=SECRET,
        mirror_bin="/opt/test/bin/mirror",
        mirror_sync_bin="/opt/test/bin/mirror-sync",
        repo_root=str(tmp_path),
    )


@pytest.fixture
def app(settings):
    app = mirror_webhooks.create_app(config="testing")
    app.extensions["mirror_settings"] = settings
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def run_command(mocker):
    """Stand in for the external programs, recording how they were run."""
    return mocker.patch("mirror_webhooks.dispatcher.run_command", return_value=Outcome.OK)


@pytest.fixture
def deliver(client):
    """Post a signed webhook delivery, the way GitHub would."""
    def _deliver(event_type, payload=None, body=None, signature=None, path="/"):
        if body is None:
            body = make_body(payload if payload is not None else {})
        headers = {
            "X-GitHub-Event": event_type,
            "X-Hub-Signature-256": signature if signature is not None else make_signature(body),
            "Content-Type": "application/json",
        }
        return client.post(path, data=body, headers=headers)
    return _deliver


def repository_payload(action, name="widgets", clone_url="https://example.com/widgets.git", **extra):
    repo = {
        "name": name,
        "full_name": f"acme/{name}",
        "clone_url": clone_url,
        "private": False,
    }
    repo.update(extra)
    return {"action": action, "repository": repo}


@pytest.fixture
def with_settings(settings):
    """Make variants of the test settings."""
    def _with_settings(**changes):
        return dataclasses.replace(settings, **changes)
    return _with_settings


@pytest.fixture(autouse=True)
def info_logging(caplog):
    """Capture our INFO logs whatever LOGLEVEL says."""
    caplog.set_level(logging.INFO, logger="mirror_webhooks")
