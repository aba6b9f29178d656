"""
Checks applied to unsigned payloads before they are encoded.

The encoder already rejects malformed values. These checks cover rules the
encoder cannot see, such as a chain id of zero, and coerce action strings
into their enumerations.
"""

from enum import Enum
from typing import Any, Type, TypeVar

from onemoney.exceptions import FieldValidationError
from onemoney.utils.hexadecimal import is_address

from .values import UINT_STRING_RE

E = TypeVar("E", bound=Enum)


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def assert_positive_integer(name: str, value: Any) -> None:
    if not _is_integer(value) or value <= 0:
        raise FieldValidationError(name, value, "expected a positive integer")


def assert_non_negative_integer(name: str, value: Any) -> None:
    if not _is_integer(value) or value < 0:
        raise FieldValidationError(
            name, value, "expected a non-negative integer"
        )


def assert_uint_string(name: str, value: Any) -> None:
    if not isinstance(value, str) or UINT_STRING_RE.fullmatch(value) is None:
        raise FieldValidationError(name, value, "expected decimal digits")


def assert_address(name: str, value: Any) -> None:
    if not is_address(value):
        raise FieldValidationError(
            name, value, "expected 0x and 40 hex digits"
        )


def coerce_enum(name: str, enum_class: Type[E], value: Any) -> E:
    """
    Return the member of `enum_class` whose value is `value`.

    Members pass through unchanged; plain strings are looked up by value.
    """
    try:
        return enum_class(value)
    except ValueError as e:
        allowed = ", ".join(member.value for member in enum_class)
        raise FieldValidationError(
            name, value, f"expected one of {allowed}"
        ) from e


def validate_chain_and_nonce(unsigned: Any) -> None:
    """
    Every kind must target a positive chain id with a non-negative nonce.
    """
    assert_positive_integer("chain_id", unsigned.chain_id)
    assert_non_negative_integer("nonce", unsigned.nonce)


def validate_recipient_value_token(unsigned: Any) -> None:
    assert_address("recipient", unsigned.recipient)
    assert_uint_string("value", unsigned.value)
    assert_address("token", unsigned.token)
