"""
Error types raised while preparing and signing transactions.
"""

from typing import Any


class OneMoneyException(Exception):
    """
    Base class for all exceptions _expected_ to be thrown while building,
    encoding, or signing a transaction.
    """


class FieldValidationError(OneMoneyException, ValueError):
    """
    Thrown when a payload field fails validation before it can be encoded.
    """

    field: str
    value: Any

    def __init__(self, field: str, value: Any, reason: str = "") -> None:
        self.field = field
        self.value = value
        message = f"invalid {field}: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class EncodingError(FieldValidationError):
    """
    Thrown when a typed value cannot be canonically encoded.
    """


class DigestFormatError(OneMoneyException, ValueError):
    """
    Thrown by a signer when the digest is not a `0x` prefixed 32 byte hex
    string.
    """


class InvalidSignatureError(OneMoneyException):
    """
    Thrown when a signature is malformed and cannot be attached.
    """


class MalleabilityError(InvalidSignatureError):
    """
    Thrown when a signature is not in canonical low-S form.
    """


class RLPEncodingError(OneMoneyException):
    """
    Thrown when a value that is not bytes or a sequence reaches the
    canonical encoder.
    """


class RLPDecodingError(OneMoneyException):
    """
    Thrown when canonical bytes are malformed and cannot be decoded.
    """
