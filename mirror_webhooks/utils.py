"""
Generic utilities.
"""

import hmac
from hashlib import sha256
from typing import Optional

import sentry_sdk


SIGNATURE_PREFIX = "sha256="


def make_signature(secret: str, payload: bytes) -> str:
    """Compute the X-Hub-Signature-256 header value for a payload."""
    mac = hmac.new(secret.encode(), msg=payload, digestmod=sha256)
    return SIGNATURE_PREFIX + mac.hexdigest()


def is_valid_payload(secret: str, signature: Optional[str], payload: bytes) -> bool:
    """
    Ensure payload is valid according to signature.

    Make sure the payload hashes to the signature as calculated using
    the shared secret.  The comparison doesn't stop at the first
    differing character, so it leaks nothing through timing.

    Arguments:
        secret (str): The shared secret
        signature (str): Signature as calculated by the server, sent in
            the request as ``sha256=<hex>``.  May be None if the header
            was missing.
        payload (bytes): The request payload

    Returns:
        bool: Is the payload legit?
    """
    if not signature:
        return False
    digest = make_signature(secret, payload)
    return hmac.compare_digest(digest.encode(), signature.strip().encode())


def sentry_extra_context(data_dict):
    """Apply the keys and values from data_dict to the Sentry extra context."""
    for key, value in data_dict.items():
        sentry_sdk.set_extra(key, value)
