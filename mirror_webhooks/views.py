"""
These are the views that receive webhook deliveries from GitHub.
"""

import logging

from flask import current_app as app
from flask import Blueprint, request

from mirror_webhooks.dispatcher import handle_event
from mirror_webhooks.utils import sentry_extra_context

hook_bp = Blueprint('hook_views', __name__)
logger = logging.getLogger(__name__)


@hook_bp.route('/', defaults={'path': ''}, methods=('POST',))
@hook_bp.route('/<path:path>', methods=('POST',))
def hook_receiver(path):
    """
    Process incoming GitHub webhook events, on any path.

    GitHub only needs to know we got the delivery, so this always answers
    200 "OK", whether or not the signature matched or the mirroring
    worked.  What actually happened is in the log.
    """
    event_type = request.headers.get("X-GitHub-Event", "")
    sentry_extra_context({"event_type": event_type, "path": path})

    outcome = handle_event(
        app.extensions["mirror_settings"],
        request.headers.get("X-Hub-Signature-256"),
        event_type,
        request.get_data(),
    )
    logger.info(
        f"Handled {event_type or 'unnamed'} event: {outcome.value}",
        extra={"event_type": event_type, "outcome": outcome},
    )
    return "OK\n", 200


@hook_bp.route('/health', methods=('GET',))
def health():
    return "OK\n", 200
