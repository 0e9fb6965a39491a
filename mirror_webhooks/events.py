"""
Decode incoming webhook deliveries into the one operation each calls for.

The event type comes from the ``X-GitHub-Event`` header and the action
from the payload.  Together they select exactly one `Operation`.
"""

from __future__ import annotations

import dataclasses
import enum
import json
import logging
from typing import Union

from mirror_webhooks.config import MirrorSettings
from mirror_webhooks.exceptions import PayloadError
from mirror_webhooks.types import InstallationRepoEvent, PayloadDict, RepoEvent
from mirror_webhooks.utils import sentry_extra_context

logger = logging.getLogger(__name__)


class EventKind(enum.Enum):
    REPOSITORY = "repository"
    INSTALLATION_REPOSITORIES = "installation_repositories"
    SYNC = "sync"
    UNKNOWN = "unknown"

    @classmethod
    def from_event_type(cls, event_type: str) -> EventKind:
        if event_type in SYNC_EVENT_TYPES:
            return cls.SYNC
        if event_type == "sync":
            # Not a GitHub event name.
            return cls.UNKNOWN
        try:
            return cls(event_type)
        except ValueError:
            return cls.UNKNOWN


# Events after which the mirrors should be brought up to date.
SYNC_EVENT_TYPES = frozenset({"push", "create", "delete", "release"})


class RepoAction(enum.Enum):
    CREATED = "created"
    PUBLICIZED = "publicized"
    DELETED = "deleted"
    PRIVATIZED = "privatized"
    RENAMED = "renamed"
    OTHER = "other"

    @classmethod
    def from_action(cls, action: str) -> RepoAction:
        try:
            return cls(action)
        except ValueError:
            return cls.OTHER


@dataclasses.dataclass(frozen=True)
class MirrorCreate:
    clone_url: str


@dataclasses.dataclass(frozen=True)
class RemoveMirror:
    path: str


@dataclasses.dataclass(frozen=True)
class RenameMirror:
    old_path: str
    new_path: str


@dataclasses.dataclass(frozen=True)
class SyncMirrors:
    event_type: str


@dataclasses.dataclass(frozen=True)
class NoteInstallation:
    action: str
    added: int
    removed: int


@dataclasses.dataclass(frozen=True)
class Ignore:
    event_type: str
    reason: str


Operation = Union[MirrorCreate, RemoveMirror, RenameMirror, SyncMirrors, NoteInstallation, Ignore]


def is_suspicious_name(name: str) -> bool:
    """Could `name` point somewhere other than a directory right under the root?"""
    return "/" in name or "\\" in name or name in {".", ".."}


def mirror_path(settings: MirrorSettings, name: str) -> str:
    """
    Where the mirror of repository `name` lives.

    The name comes straight from the payload and is not sanitized.  Names
    that could escape the root are logged, and refused outright when
    strict_repo_names is set.
    """
    if is_suspicious_name(name):
        if settings.strict_repo_names:
            raise PayloadError(f"refusing suspicious repository name {name!r}")
        logger.warning(f"Suspicious repository name {name!r} used as a path under {settings.repo_root}")
    return settings.repo_root + "/" + name


def load_payload(body: bytes) -> PayloadDict:
    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise PayloadError(f"payload is not JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise PayloadError("payload is not a JSON object")
    return payload


def decode_event(settings: MirrorSettings, event_type: str, body: bytes) -> Operation:
    """
    Work out what a delivery asks us to do.

    Raises:
        PayloadError: the body doesn't hold the event the header claims.
    """
    match EventKind.from_event_type(event_type):
        case EventKind.REPOSITORY:
            ev = RepoEvent.from_payload(load_payload(body))
            sentry_extra_context({"action": ev.action})
            return decode_repository_event(settings, ev)

        case EventKind.INSTALLATION_REPOSITORIES:
            ev = InstallationRepoEvent.from_payload(load_payload(body))
            sentry_extra_context({"action": ev.action})
            return NoteInstallation(ev.action, len(ev.repositories_added), len(ev.repositories_removed))

        case EventKind.SYNC:
            # The contents don't matter: every mirror gets refreshed.
            return SyncMirrors(event_type)

        case _:
            return Ignore(event_type, "unhandled event type")


def decode_repository_event(settings: MirrorSettings, ev: RepoEvent) -> Operation:
    repo = ev.repository
    logger.info(f"repository action={ev.action} repo={repo.name} private={repo.private}")

    match RepoAction.from_action(ev.action):
        case RepoAction.CREATED | RepoAction.PUBLICIZED:
            if not repo.clone_url:
                raise PayloadError(f"repository {repo.name!r} has no clone_url")
            return MirrorCreate(repo.clone_url)

        case RepoAction.DELETED | RepoAction.PRIVATIZED:
            return RemoveMirror(mirror_path(settings, repo.name))

        case RepoAction.RENAMED:
            if not ev.previous_name:
                raise PayloadError(f"rename of {repo.name!r} has no previous name")
            return RenameMirror(
                mirror_path(settings, ev.previous_name),
                mirror_path(settings, repo.name),
            )

        case _:
            return Ignore("repository", f"unhandled action {ev.action!r}")
