"""
Elliptic Curves
^^^^^^^^^^^^^^^
"""

from typing import Tuple

import coincurve
from ethereum_types.bytes import Bytes, Bytes32
from ethereum_types.numeric import U256

from onemoney.exceptions import InvalidSignatureError

from .hash import Hash32

SECP256K1N = U256(
    0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
)
SECP256K1N_HALF = SECP256K1N // U256(2)


def secp256k1_sign(
    msg_hash: Hash32, secret: Bytes32
) -> Tuple[U256, U256, U256]:
    """
    Signs a message hash with a private key.

    The nonce is derived deterministically (RFC 6979), so signing the same
    hash with the same key always yields the same signature.

    Parameters
    ----------
    msg_hash :
        Hash of the message being signed.
    secret :
        The 32 byte private key.

    Returns
    -------
    signature : `Tuple[U256, U256, U256]`
        The `r`, `s` and recovery id `v` of the signature, with `s` in the
        lower half of the curve order.
    """
    try:
        private_key = coincurve.PrivateKey(bytes(secret))
    except ValueError as e:
        raise ValueError("private key is not a valid secp256k1 scalar") from e

    signature = private_key.sign_recoverable(bytes(msg_hash), hasher=None)

    r = U256.from_be_bytes(signature[0:32])
    s = U256.from_be_bytes(signature[32:64])
    v = U256(signature[64])

    if s > SECP256K1N_HALF:
        s = SECP256K1N - s
        v = U256(1) - v

    return r, s, v


def secp256k1_recover(r: U256, s: U256, v: U256, msg_hash: Hash32) -> Bytes:
    """
    Recovers the public key from a given signature.

    Parameters
    ----------
    r :
        The `r` component of the signature.
    s :
        The `s` component of the signature.
    v :
        The recovery id, either 0 or 1.
    msg_hash :
        Hash of the message being recovered.

    Returns
    -------
    public_key : `Bytes`
        Recovered public key, uncompressed and without the `0x04` prefix.
    """
    signature = bytearray([0] * 65)
    signature[0:32] = r.to_be_bytes32()
    signature[32:64] = s.to_be_bytes32()
    signature[64] = int(v)

    try:
        public_key = coincurve.PublicKey.from_signature_and_message(
            bytes(signature), bytes(msg_hash), hasher=None
        )
    except ValueError as e:
        raise InvalidSignatureError("unable to recover public key") from e

    return public_key.format(compressed=False)[1:]


def secp256k1_public_key(secret: Bytes32) -> Bytes:
    """
    Derives the uncompressed public key (without the `0x04` prefix) of a
    private key.
    """
    try:
        private_key = coincurve.PrivateKey(bytes(secret))
    except ValueError as e:
        raise ValueError("private key is not a valid secp256k1 scalar") from e
    return private_key.public_key.format(compressed=False)[1:]
