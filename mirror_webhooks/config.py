"""Settings for where the mirrors live and how to maintain them."""

from __future__ import annotations

import dataclasses
import os
from typing import Mapping, Optional


def env_flag(name: str, default: bool = False) -> bool:
    """Read a yes/no environment variable."""
    value = os.environ.get(name)
    if not value:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def env_float(name: str) -> Optional[float]:
    value = os.environ.get(name)
    if not value:
        return None
    return float(value)


class DefaultConfig:
    WEBHOOK_SECRET = os.environ.get("WEBHOOK_SECRET") or "DOYOUREALLYTHINKIEXPOSESECRETS?"
    MIRROR_BIN = os.environ.get("MIRROR_BIN") or "/usr/local/bin/mirror"
    MIRROR_SYNC_BIN = os.environ.get("MIRROR_SYNC_BIN") or "/usr/local/bin/mirror-sync"
    REPO_ROOT = os.environ.get("REPO_ROOT") or "/root/shifoogit/repos"
    HOST = os.environ.get("HOST") or "0.0.0.0"
    PORT = int(os.environ.get("PORT") or 53981)
    MIRROR_COMMAND_TIMEOUT = env_float("MIRROR_COMMAND_TIMEOUT")
    STRICT_REPO_NAMES = env_flag("STRICT_REPO_NAMES")

    def __init__(self):
        # A trailing slash would double up when repository names are joined on.
        if len(self.REPO_ROOT) > 1:
            self.REPO_ROOT = self.REPO_ROOT.rstrip("/")
        if self.MIRROR_COMMAND_TIMEOUT is not None and self.MIRROR_COMMAND_TIMEOUT <= 0:
            self.MIRROR_COMMAND_TIMEOUT = None


class DevelopmentConfig(DefaultConfig):
    DEBUG = True


class TestingConfig(DefaultConfig):
    TESTING = True
    WEBHOOK_SECRET = "testing secret"
    MIRROR_BIN = "/opt/test/bin/mirror"
    MIRROR_SYNC_BIN = "/opt/test/bin/mirror-sync"
    REPO_ROOT = "/srv/test-mirrors"
    HOST = "127.0.0.1"
    PORT = 53981
    MIRROR_COMMAND_TIMEOUT = None
    STRICT_REPO_NAMES = False


@dataclasses.dataclass(frozen=True)
class MirrorSettings:
    """Everything a request handler needs, fixed at startup."""
    # The shared secret GitHub signs deliveries with.
    secret: str

    # External programs: one clones a new mirror, one refreshes them all.
    mirror_bin: str
    mirror_sync_bin: str

    # The directory holding one mirror directory per repository name.
    repo_root: str

    # Seconds to let an external program run, or None to wait forever.
    command_timeout: Optional[float] = None

    # Reject repository names that would escape repo_root, instead of
    # only logging them.
    strict_repo_names: bool = False

    @classmethod
    def from_mapping(cls, config: Mapping) -> MirrorSettings:
        return cls(
            secret=config["WEBHOOK_SECRET"],
            mirror_bin=config["MIRROR_BIN"],
            mirror_sync_bin=config["MIRROR_SYNC_BIN"],
            repo_root=config["REPO_ROOT"],
            command_timeout=config.get("MIRROR_COMMAND_TIMEOUT"),
            strict_repo_names=bool(config.get("STRICT_REPO_NAMES", False)),
        )
