"""HMAC utilities for Trello webhook signature validation."""

import base64
import hashlib
import hmac
import logging

logger = logging.getLogger(__name__)


def compute_trello_digest(body: bytes, callback_url: str, secret: str) -> str:
    """Compute the base64 HMAC-SHA1 digest Trello sends in x-trello-webhook.

    Trello signs the request body followed by the callback URL the webhook
    was registered with.
    """
    try:
        content = body + callback_url.encode('utf-8')
        digest = hmac.new(
            secret.encode('utf-8'),
            content,
            hashlib.sha1
        ).digest()
        return base64.b64encode(digest).decode('ascii')
    except Exception as e:
        logger.error(f"Error computing webhook digest: {e}")
        raise


def verify_trello_signature(body: bytes, signature_header: str, callback_url: str, secret: str) -> bool:
    """Verify the x-trello-webhook header for a webhook request."""
    if not signature_header or not secret:
        return False

    try:
        computed_signature = compute_trello_digest(body, callback_url, secret)

        # Compare signatures (constant-time comparison)
        return hmac.compare_digest(computed_signature, signature_header.strip())

    except Exception as e:
        logger.error(f"Error verifying webhook signature: {e}")
        return False
