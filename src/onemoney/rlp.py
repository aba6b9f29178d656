"""
.. _rlp:

Recursive Length Prefix (RLP) Encoding
^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Defines the canonical serialization used for signing. Only two shapes are
understood here: byte strings and (possibly nested) sequences of them.
Domain values are lowered to these shapes by `onemoney.signing.values`
before they reach the encoder.

Encoding is done by `ethereum_rlp`. This module adds `wrap_sequence`, for
splicing an existing encoding into a list, and a decoder that also rejects
trailing bytes after the item.

Every item starts with a header. A single byte below `0x80` is its own
encoding. Otherwise the header byte is an offset (`0x80` for byte strings,
`0xC0` for lists) plus either the payload length, when it is below 56, or
55 plus the length of the big endian payload length that follows.
"""

from typing import List, Sequence, Tuple, TypeAlias, Union

from ethereum_rlp import rlp as eth_rlp
from ethereum_rlp.exceptions import EncodingError
from ethereum_types.bytes import Bytes
from ethereum_types.numeric import Uint

from onemoney.crypto.hash import Hash32, keccak256
from onemoney.exceptions import RLPDecodingError, RLPEncodingError

Simple: TypeAlias = Union[Sequence["Simple"], bytes]

BYTES_OFFSET = 0x80
LIST_OFFSET = 0xC0
SHORT_LENGTH_LIMIT = 56


#
# RLP Encode
#


def _header(payload_length: int, offset: int) -> Bytes:
    if payload_length < SHORT_LENGTH_LIMIT:
        return bytes([offset + payload_length])
    # long form: the header byte counts the bytes of the big endian length
    length_as_be = Uint(payload_length).to_be_bytes()
    long_form = offset + SHORT_LENGTH_LIMIT - 1 + len(length_as_be)
    return bytes([long_form]) + length_as_be


def encode(raw_data: Simple) -> Bytes:
    """
    Encodes `raw_data` into a sequence of bytes using RLP.

    The top level value must be a byte string or a sequence. Domain values
    are lowered to bytes by `onemoney.signing.values` first, which decides
    how each of them is encoded.

    Parameters
    ----------
    raw_data :
        A byte string or a sequence of RLP encodable objects.

    Returns
    -------
    encoded : `Bytes`
        The RLP encoded bytes representing `raw_data`.
    """
    if not isinstance(raw_data, (bytearray, bytes, list, tuple)):
        raise RLPEncodingError(
            f"RLP encoding of type {type(raw_data).__name__} "
            "is not supported"
        )
    if isinstance(raw_data, bytearray):
        raw_data = bytes(raw_data)
    try:
        return eth_rlp.encode(raw_data)
    except EncodingError as e:
        raise RLPEncodingError(str(e)) from e


def wrap_sequence(joined_encodings: Bytes) -> Bytes:
    """
    Prefix `joined_encodings`, the concatenation of already encoded items,
    with a list header.

    This lets callers splice an existing encoding into a new list as a
    single opaque item without decoding and re-encoding it.

    Parameters
    ----------
    joined_encodings :
        Concatenated RLP encodings of the list items.

    Returns
    -------
    encoded : `Bytes`
        The RLP encoding of the list.
    """
    return _header(len(joined_encodings), LIST_OFFSET) + joined_encodings


def join_encodings(raw_sequence: Sequence[Simple]) -> Bytes:
    """
    Concatenate the encodings of every item of `raw_sequence`.
    """
    return eth_rlp.join_encodings(raw_sequence)


#
# RLP Decode
#


def _read_header(encoded_data: Bytes, start: int) -> Tuple[bool, int, int]:
    """
    Parse the header of the item at `start`.

    Returns whether the item is a list, and the start and end of its
    payload. Non-canonical headers are rejected.
    """
    if start >= len(encoded_data):
        raise RLPDecodingError("unexpected end of data")

    first = encoded_data[start]
    if first < BYTES_OFFSET:
        return False, start, start + 1

    is_list = first >= LIST_OFFSET
    prefix = first - (LIST_OFFSET if is_list else BYTES_OFFSET)

    if prefix < SHORT_LENGTH_LIMIT:
        payload_start = start + 1
        payload_length = prefix
    else:
        length_length = prefix - (SHORT_LENGTH_LIMIT - 1)
        payload_start = start + 1 + length_length
        if payload_start > len(encoded_data):
            raise RLPDecodingError("truncated length prefix")
        length_bytes = encoded_data[start + 1 : payload_start]
        if length_bytes[0] == 0:
            raise RLPDecodingError("length prefix has leading zeros")
        payload_length = int(Uint.from_be_bytes(length_bytes))
        if payload_length < SHORT_LENGTH_LIMIT:
            raise RLPDecodingError("long form used for a short payload")

    payload_end = payload_start + payload_length
    if payload_end > len(encoded_data):
        raise RLPDecodingError("payload runs past the end of the data")

    if (
        not is_list
        and payload_length == 1
        and encoded_data[payload_start] < BYTES_OFFSET
    ):
        raise RLPDecodingError("single byte below 0x80 was prefixed")

    return is_list, payload_start, payload_end


def _decode_item(encoded_data: Bytes, start: int) -> Tuple[Simple, int]:
    is_list, payload_start, payload_end = _read_header(encoded_data, start)

    if not is_list:
        return encoded_data[payload_start:payload_end], payload_end

    items: List[Simple] = []
    position = payload_start
    while position < payload_end:
        item, position = _decode_item(
            encoded_data[:payload_end], position
        )
        items.append(item)
    return items, payload_end


def decode(encoded_data: Bytes) -> Simple:
    """
    Decodes a byte sequence, or list of RLP encodable objects from the byte
    sequence `encoded_data`, using RLP.

    Parameters
    ----------
    encoded_data :
        A sequence of bytes, in RLP form.

    Returns
    -------
    decoded_data : `Simple`
        Object decoded from `encoded_data`.
    """
    if len(encoded_data) == 0:
        raise RLPDecodingError("cannot decode empty bytestring")

    decoded, end = _decode_item(bytes(encoded_data), 0)
    if end != len(encoded_data):
        raise RLPDecodingError("trailing bytes after the encoded item")
    return decoded


def decode_item_length(encoded_data: Bytes) -> int:
    """
    Find the length of the encoding of the first item in `encoded_data`,
    header included.
    """
    _, _, payload_end = _read_header(bytes(encoded_data), 0)
    return payload_end


def rlp_hash(data: Simple) -> Hash32:
    """
    Obtain the keccak-256 hash of the rlp encoding of the passed in data.
    """
    return keccak256(encode(data))
