"""
Signers produce a `Signature` over a signature hash.

Anything with an awaitable `sign_digest` method can sign a prepared
transaction: a local key, a hardware wallet, or a remote key management
service. `PrivateKeySigner` is the built-in local implementation.
"""

import logging
from typing import TYPE_CHECKING, Protocol, Union, runtime_checkable

from ethereum_types.bytes import Bytes32

from onemoney.crypto.elliptic_curve import (
    secp256k1_public_key,
    secp256k1_sign,
)
from onemoney.crypto.hash import keccak256
from onemoney.exceptions import DigestFormatError
from onemoney.utils.hexadecimal import (
    bytes_to_hex,
    hex_to_bytes32,
    is_bytes32,
)

from .core import Signature

if TYPE_CHECKING:
    from onemoney.config import SigningConfig

logger = logging.getLogger(__name__)


@runtime_checkable
class SignerAdapter(Protocol):
    """
    Interface for anything that can sign a signature hash.

    Implementations keep their key material to themselves; they only ever
    see the `0x` prefixed 32 byte digest.
    """

    async def sign_digest(self, digest: str) -> Signature:
        """
        Sign `digest` and return the signature, with `s` in low-S form.
        """
        ...


class PrivateKeySigner:
    """
    Signs digests with a secp256k1 private key held in memory.

    Signatures are deterministic (RFC 6979) and always low-S.
    """

    def __init__(self, private_key: Union[str, bytes]) -> None:
        if isinstance(private_key, str):
            if not is_bytes32(private_key):
                raise ValueError(
                    "private key must be 0x followed by 64 hex digits"
                )
            secret = hex_to_bytes32(private_key)
        elif isinstance(private_key, (bytes, bytearray)):
            if len(private_key) != 32:
                raise ValueError("private key must be 32 bytes long")
            secret = Bytes32(private_key)
        else:
            raise TypeError("private key must be a hex string or bytes")

        public_key = secp256k1_public_key(secret)
        self._secret = secret
        self._address = bytes_to_hex(keccak256(public_key)[12:32])

    @classmethod
    def from_config(cls, config: "SigningConfig") -> "PrivateKeySigner":
        """
        Build a signer from the `private_key` of a `SigningConfig`.
        """
        if config.private_key is None:
            raise ValueError("signing config has no private_key")
        return cls(config.private_key.get_secret_value())

    @property
    def address(self) -> str:
        """
        The `0x` address controlled by this signer's key.
        """
        return self._address

    async def sign_digest(self, digest: str) -> Signature:
        """
        Sign a `0x` prefixed 32 byte hex digest.

        Parameters
        ----------
        digest :
            The signature hash of a prepared transaction.

        Returns
        -------
        signature : `Signature`
            The low-S signature, with `v` as the recovery id `0` or `1`.
        """
        if not is_bytes32(digest):
            raise DigestFormatError(
                f"invalid digest {digest!r}: "
                "expected 0x followed by 64 hex digits"
            )

        r, s, v = secp256k1_sign(hex_to_bytes32(digest), self._secret)
        logger.debug("signed digest %s with %s", digest, self._address)

        return Signature(
            r=bytes_to_hex(r.to_be_bytes32()),
            s=bytes_to_hex(s.to_be_bytes32()),
            v=int(v),
        )

    def __repr__(self) -> str:
        return f"PrivateKeySigner(address={self._address!r})"
