"""
Dispatch incoming webhook events to the side effect they call for.
"""

import logging
from typing import Optional

from mirror_webhooks.commands import move_tree, remove_tree, run_command
from mirror_webhooks.config import MirrorSettings
from mirror_webhooks.events import (
    Ignore, MirrorCreate, NoteInstallation, Operation, RemoveMirror,
    RenameMirror, SyncMirrors, decode_event,
)
from mirror_webhooks.exceptions import PayloadError
from mirror_webhooks.types import Outcome
from mirror_webhooks.utils import is_valid_payload

logger = logging.getLogger(__name__)


def handle_event(
    settings: MirrorSettings,
    signature: Optional[str],
    event_type: str,
    body: bytes,
) -> Outcome:
    """
    Authenticate a delivery, then carry out what it asks for.

    1.  Make sure the payload hashes to the signature.  If not, do nothing.
    2.  Decode the event type and payload into one operation.
    3.  Perform that operation synchronously.

    Arguments:
        settings: where the mirrors are and how to maintain them.
        signature: the ``X-Hub-Signature-256`` header, if there was one.
        event_type: the ``X-GitHub-Event`` header.
        body: the raw request body, exactly as signed.
    """
    if not is_valid_payload(settings.secret, signature, body):
        logger.warning("Invalid signature")
        return Outcome.INVALID_SIGNATURE

    logger.info(f"Received event: {event_type}")
    try:
        operation = decode_event(settings, event_type, body)
    except PayloadError as exc:
        logger.error(f"Rejecting {event_type} event: {exc}")
        return Outcome.BAD_PAYLOAD

    return perform(settings, operation)


def perform(settings: MirrorSettings, operation: Operation) -> Outcome:
    """Carry out one operation.  Each performs at most one side effect."""
    timeout = settings.command_timeout

    match operation:
        case MirrorCreate(clone_url=clone_url):
            return run_command(settings.mirror_bin, clone_url, timeout=timeout)

        case RemoveMirror(path=path):
            return remove_tree(path)

        case RenameMirror(old_path=old_path, new_path=new_path):
            return move_tree(old_path, new_path)

        case SyncMirrors(event_type=event_type):
            logger.info(f"triggering mirror-sync for event: {event_type}")
            return run_command(settings.mirror_sync_bin, timeout=timeout)

        case NoteInstallation(action=action, added=added, removed=removed):
            # Mirrors follow repository events, not app installations.
            logger.info(f"installation_repositories action={action} added={added} removed={removed}, ignored")
            return Outcome.IGNORED

        case Ignore(event_type=event_type, reason=reason):
            logger.info(f"Ignoring event: {event_type} ({reason})")
            return Outcome.IGNORED

    raise TypeError(f"Unknown operation: {operation!r}")
