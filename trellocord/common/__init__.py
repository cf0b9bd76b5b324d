"""Common utilities and shared functionality."""

from .hmac_utils import (
    compute_trello_digest,
    verify_trello_signature,
)

from .logging_utils import (
    setup_logging,
    log_server_message,
    log_webhook_request,
    log_error,
)

__all__ = [
    # HMAC utilities
    "compute_trello_digest",
    "verify_trello_signature",
    # Logging utilities
    "setup_logging",
    "log_server_message",
    "log_webhook_request",
    "log_error",
]
