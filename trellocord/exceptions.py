"""Custom exceptions for the relay pipeline"""


class RelayError(Exception):
    """Base exception for relay operations"""
    pass


class PayloadError(RelayError):
    """Raised when a webhook payload does not have the expected shape"""
    pass


class ConfigurationError(RelayError):
    """Raised when no Discord destination is configured for a board"""
    pass


class DeliveryError(RelayError):
    """Raised when Discord does not confirm a sent message"""
    pass
