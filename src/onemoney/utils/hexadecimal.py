"""
Utility Functions For Hexadecimal Strings
^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Every address, hash and signature component crosses the API boundary as a
`0x` prefixed hexadecimal string. These helpers check and convert them.
"""
import re

from ethereum_types.bytes import Bytes, Bytes20, Bytes32

ADDRESS_HEX_RE = re.compile(r"0x[0-9a-fA-F]{40}")
BYTES_HEX_RE = re.compile(r"0x(?:[0-9a-fA-F]{2})*")
BYTES32_HEX_RE = re.compile(r"0x[0-9a-fA-F]{64}")


def has_hex_prefix(hex_string: str) -> bool:
    """
    Check if a hex string starts with hex prefix (0x).
    """
    return hex_string.startswith("0x")


def remove_hex_prefix(hex_string: str) -> str:
    """
    Remove 0x prefix from a hex string if present. This function returns the
    passed hex string if it isn't prefixed with 0x.
    """
    if has_hex_prefix(hex_string):
        return hex_string[len("0x") :]

    return hex_string


def is_address(value: object) -> bool:
    """
    Check that `value` is `0x` followed by exactly 40 hex digits.
    """
    if not isinstance(value, str):
        return False
    return ADDRESS_HEX_RE.fullmatch(value) is not None


def is_hex_bytes(value: object) -> bool:
    """
    Check that `value` is `0x` followed by an even number of hex digits.
    The bare prefix `0x` is a valid, empty, byte string.
    """
    if not isinstance(value, str):
        return False
    return BYTES_HEX_RE.fullmatch(value) is not None


def is_bytes32(value: object) -> bool:
    """
    Check that `value` is `0x` followed by exactly 64 hex digits.
    """
    if not isinstance(value, str):
        return False
    return BYTES32_HEX_RE.fullmatch(value) is not None


def hex_to_bytes(hex_string: str) -> Bytes:
    """
    Decode a hex string, with or without `0x`. `0x` alone decodes to the
    empty byte string.
    """
    return bytes.fromhex(remove_hex_prefix(hex_string))


def hex_to_bytes20(hex_string: str) -> Bytes20:
    """
    Convert hex string to 20 bytes.

    Unlike `hex_to_bytes32`, no left padding is applied: an address must
    already be exactly 20 bytes long.
    """
    return Bytes20(bytes.fromhex(remove_hex_prefix(hex_string)))


def hex_to_bytes32(hex_string: str) -> Bytes32:
    """
    Decode a hex string into 32 bytes, left padding with zeros. Used for
    digests and signature components.
    """
    return Bytes32(bytes.fromhex(remove_hex_prefix(hex_string).rjust(64, "0")))


def bytes_to_hex(buffer: Bytes) -> str:
    """
    Convert bytes to a lowercase, `0x` prefixed, hex string.
    """
    return "0x" + bytes(buffer).hex()
