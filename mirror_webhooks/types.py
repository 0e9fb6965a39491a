"""Types specific to mirror_webhooks."""

from __future__ import annotations

import dataclasses
import enum
from typing import Any, Dict, Tuple

from mirror_webhooks.exceptions import PayloadError

# An event payload as described by a JSON object.
PayloadDict = Dict[str, Any]


class Outcome(enum.Enum):
    """What became of one webhook delivery."""
    OK = "ok"
    IGNORED = "ignored"
    INVALID_SIGNATURE = "invalid-signature"
    BAD_PAYLOAD = "bad-payload"
    COMMAND_FAILED = "command-failed"


def check_text(key: str, value: str) -> str:
    """Refuse strings that can't become a path or a command argument."""
    if "\x00" in value:
        raise PayloadError(f"{key!r} contains a NUL character")
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise PayloadError(f"{key!r} is not valid text") from exc
    return value


def _field(obj: PayloadDict, key: str, kind: type, default: Any = None) -> Any:
    """
    Get `key` from `obj`, insisting on its type.

    Missing keys and JSON nulls get `default`, if there is one.
    """
    value = obj.get(key)
    if value is None:
        if default is None:
            raise PayloadError(f"missing {key!r}")
        return default
    if not isinstance(value, kind):
        raise PayloadError(f"{key!r} should be {kind.__name__}, not {type(value).__name__}")
    if isinstance(value, str):
        check_text(key, value)
    return value


@dataclasses.dataclass(frozen=True)
class Repo:
    """The parts of a GitHub repository object we look at."""
    name: str
    full_name: str = ""
    clone_url: str = ""
    private: bool = False

    @classmethod
    def from_dict(cls, repo: Any) -> Repo:
        if not isinstance(repo, dict):
            raise PayloadError("repository should be an object")
        name = _field(repo, "name", str)
        if not name:
            raise PayloadError("repository has an empty name")
        return cls(
            name=name,
            full_name=_field(repo, "full_name", str, ""),
            clone_url=_field(repo, "clone_url", str, ""),
            private=_field(repo, "private", bool, False),
        )


@dataclasses.dataclass(frozen=True)
class RepoEvent:
    """A `repository` event: something happened to one repository."""
    action: str
    repository: Repo

    # Only present for action "renamed".
    previous_name: str = ""

    @classmethod
    def from_payload(cls, payload: PayloadDict) -> RepoEvent:
        repo = payload.get("repository")
        previous_name = ""
        if isinstance(repo, dict):
            previous_name = repo.get("previous_name") or ""
            match payload:
                case {"changes": {"repository": {"name": {"from": str(old_name)}}}} if not previous_name:
                    # GitHub itself reports renames as a change record.
                    previous_name = old_name
            if not isinstance(previous_name, str):
                raise PayloadError("previous name should be a string")
            check_text("previous_name", previous_name)
        return cls(
            action=_field(payload, "action", str),
            repository=Repo.from_dict(repo),
            previous_name=previous_name,
        )


@dataclasses.dataclass(frozen=True)
class InstallationRepoEvent:
    """An `installation_repositories` event: a GitHub App gained or lost repos."""
    action: str
    repositories_added: Tuple[PayloadDict, ...] = ()
    repositories_removed: Tuple[PayloadDict, ...] = ()

    @classmethod
    def from_payload(cls, payload: PayloadDict) -> InstallationRepoEvent:
        return cls(
            action=_field(payload, "action", str),
            repositories_added=tuple(_field(payload, "repositories_added", list, [])),
            repositories_removed=tuple(_field(payload, "repositories_removed", list, [])),
        )
