"""
Typed Values
^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Every field that is signed is first wrapped in one of a closed set of
typed values. The type decides how the field is turned into bytes:

- `AddressValue`: the 20 raw bytes of a `0x` prefixed address.
- `HexValue`: the raw bytes of a `0x` prefixed, even length, hex string.
  `0x` on its own is the empty byte string.
- `BytesValue`: raw bytes, used as is.
- `StrValue`: the UTF-8 bytes of the string.
- `UintValue`: the minimal big endian bytes of a non-negative integer.
  Zero is the empty byte string. Decimal digit strings are accepted.
- `BoolValue`: `0x01` for true, the empty byte string for false.
- `ListValue`: an ordered list of typed values, encoded as an RLP list.

Lowering the whole tree happens before any byte is framed, so a bad field
fails the encoding without producing partial output.
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple, Union

from ethereum_types.bytes import Bytes
from ethereum_types.numeric import Uint, Unsigned

from onemoney import rlp
from onemoney.exceptions import EncodingError
from onemoney.utils.hexadecimal import (
    hex_to_bytes,
    hex_to_bytes20,
    is_address,
    is_hex_bytes,
)

UINT_STRING_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class AddressValue:
    """
    A 20 byte account or token address.
    """

    value: str
    name: Optional[str] = None


@dataclass(frozen=True)
class HexValue:
    """
    An arbitrary byte string given as `0x` prefixed hex.
    """

    value: str
    name: Optional[str] = None


@dataclass(frozen=True)
class BytesValue:
    """
    An arbitrary byte string given as raw bytes.
    """

    value: bytes
    name: Optional[str] = None


@dataclass(frozen=True)
class StrValue:
    """
    A UTF-8 string.
    """

    value: str
    name: Optional[str] = None


@dataclass(frozen=True)
class UintValue:
    """
    A non-negative integer of arbitrary size.
    """

    value: Union[int, str, Unsigned]
    name: Optional[str] = None


@dataclass(frozen=True)
class BoolValue:
    """
    A boolean flag.
    """

    value: bool
    name: Optional[str] = None


@dataclass(frozen=True)
class ListValue:
    """
    An ordered list of typed values.
    """

    items: Tuple["TypedValue", ...] = field(default_factory=tuple)
    name: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))


TypedValue = Union[
    AddressValue,
    HexValue,
    BytesValue,
    StrValue,
    UintValue,
    BoolValue,
    ListValue,
]


def uint_to_bytes(number: Union[int, str, Unsigned], name: str) -> Bytes:
    """
    Convert `number` to its minimal big endian representation.

    Parameters
    ----------
    number :
        A native integer, an `ethereum_types` unsigned integer, or a string
        of decimal digits.
    name :
        Field name reported if `number` is not a valid unsigned integer.

    Returns
    -------
    encoded : `Bytes`
        Big endian bytes with no leading zero byte; empty for zero.
    """
    if isinstance(number, bool):
        raise EncodingError(name, number, "expected an integer, not a bool")
    if isinstance(number, str):
        if UINT_STRING_RE.fullmatch(number) is None:
            raise EncodingError(name, number, "expected decimal digits")
        int_value = int(number)
    elif isinstance(number, (int, Unsigned)):
        int_value = int(number)
    else:
        raise EncodingError(name, number, "expected an unsigned integer")

    if int_value < 0:
        raise EncodingError(name, number, "must not be negative")

    return Uint(int_value).to_be_bytes()


def lower(value: TypedValue, path: str = "payload") -> rlp.Simple:
    """
    Turn a typed value tree into the bytes and lists understood by
    `onemoney.rlp.encode`.

    Parameters
    ----------
    value :
        The typed value to lower.
    path :
        Path of `value` inside the payload, used in error messages when
        `value` carries no name of its own.

    Returns
    -------
    lowered : `onemoney.rlp.Simple`
        A byte string, or a list of lowered children.
    """
    name = getattr(value, "name", None) or path

    match value:
        case AddressValue(value=text):
            if not is_address(text):
                raise EncodingError(
                    name, text, "expected 0x and 40 hex digits"
                )
            return bytes(hex_to_bytes20(text))

        case HexValue(value=text):
            if not is_hex_bytes(text):
                raise EncodingError(
                    name, text, "expected 0x and an even number of hex digits"
                )
            return hex_to_bytes(text)

        case BytesValue(value=raw):
            if not isinstance(raw, (bytes, bytearray)):
                raise EncodingError(name, raw, "expected bytes")
            return bytes(raw)

        case StrValue(value=text):
            if not isinstance(text, str):
                raise EncodingError(name, text, "expected a string")
            return text.encode("utf-8")

        case UintValue(value=number):
            return uint_to_bytes(number, name)

        case BoolValue(value=flag):
            if not isinstance(flag, bool):
                raise EncodingError(name, flag, "expected a bool")
            return b"\x01" if flag else b""

        case ListValue(items=items):
            return [
                lower(item, f"{name}[{index}]")
                for index, item in enumerate(items)
            ]

        case _:
            raise EncodingError(name, value, "not a typed value")


def encode_value(value: TypedValue) -> Bytes:
    """
    Canonically encode a typed value.

    Parameters
    ----------
    value :
        The typed value to encode.

    Returns
    -------
    encoded : `Bytes`
        The RLP encoding of `value`.
    """
    return rlp.encode(lower(value))


def encode_payload(fields: Sequence[TypedValue]) -> Bytes:
    """
    Canonically encode an ordered list of payload fields as a single list.
    """
    return encode_value(ListValue(tuple(fields)))
