"""
Errors raised on sequencing misuse.

Business outcomes (insufficient balance, cash bin full, mechanical faults)
are reported as result codes and never raised.
"""


class ATMError(Exception):
    """Base class for errors raised by this package."""
    default_message = "ATM error"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)


class AuthorizationError(ATMError):
    """A financial operation was requested without a valid access token."""
    default_message = "invalid access token"


class NoCardError(ATMError):
    """PIN validation was requested while the card slot is empty."""
    default_message = "no card in ATM"


class CardSlotOccupiedError(ATMError):
    default_message = "there is already a card in ATM"


class ConfigError(ATMError):
    default_message = "invalid configuration"
