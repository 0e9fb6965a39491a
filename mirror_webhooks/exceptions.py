"""
Exceptions raised while reading webhook deliveries.
"""


class PayloadError(Exception):
    """The request body can't be read as the event it claims to be."""
