"""
Cryptographic Hash Functions
^^^^^^^^^^^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Keccak-256 is the digest behind both the signature hash and the
transaction hash.
"""

from Crypto.Hash import keccak
from ethereum_types.bytes import Bytes, Bytes32

Hash32 = Bytes32


def keccak256(buffer: Bytes) -> Hash32:
    """
    Computes the keccak256 hash of the input `buffer`.

    Parameters
    ----------
    buffer :
        Input for the hashing function.

    Returns
    -------
    hash : `onemoney.crypto.hash.Hash32`
        Output of the hash function.
    """
    k = keccak.new(digest_bits=256)
    return Hash32(k.update(bytes(buffer)).digest())
