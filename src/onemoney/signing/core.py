"""
Prepared and Signed Transactions
^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

A transaction moves through three immutable stages:

1. An unsigned payload, built by the caller.
2. A `PreparedTransaction`, holding the canonical encoding of the payload
   fields and the keccak-256 signature hash of that encoding.
3. A `SignedTransaction`, holding a validated low-S signature over the
   signature hash and the resulting transaction hash.

The transaction hash is the keccak-256 of `[[fields], v, r, s]`, where the
first item is the prepared encoding spliced in unchanged.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Mapping, Sequence, Union

from ethereum_types.bytes import Bytes
from ethereum_types.frozen import slotted_freezable
from ethereum_types.numeric import U256

from onemoney import rlp
from onemoney.crypto.elliptic_curve import SECP256K1N_HALF, secp256k1_recover
from onemoney.crypto.hash import keccak256
from onemoney.exceptions import (
    InvalidSignatureError,
    MalleabilityError,
    RLPDecodingError,
)
from onemoney.utils.hexadecimal import (
    bytes_to_hex,
    hex_to_bytes,
    hex_to_bytes32,
    is_bytes32,
)

from .payloads import UnsignedPayload
from .values import BoolValue, BytesValue, UintValue, lower

if TYPE_CHECKING:
    from .signer import SignerAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Signature:
    """
    An ECDSA signature over a signature hash.

    `r` and `s` are `0x` prefixed 32 byte hex strings. `v` is the recovery
    id, either as `0`/`1` or as the equivalent boolean.
    """

    r: str
    s: str
    v: Union[int, bool]

    def to_dict(self) -> Dict[str, Any]:
        """
        The `{r, s, v}` object expected in request bodies.
        """
        return {"r": self.r, "s": self.s, "v": self.v}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Signature":
        if not isinstance(data, Mapping):
            raise InvalidSignatureError(
                "expected a signature or an r, s, v mapping, "
                f"got {type(data).__name__}"
            )
        try:
            return cls(r=data["r"], s=data["s"], v=data["v"])
        except KeyError as e:
            raise InvalidSignatureError(
                f"signature is missing `{e.args[0]}`"
            ) from e


SignatureLike = Union[Signature, Mapping[str, Any]]


def validate_signature(signature: Signature) -> None:
    """
    Ensure `signature` is well formed and in canonical low-S form.

    Parameters
    ----------
    signature :
        The signature to check.

    Raises
    ------
    InvalidSignatureError
        If `r` or `s` is not 32 bytes of hex or `v` is not a recovery id.
    MalleabilityError
        If `s` is above half the secp256k1 curve order.
    """
    for name in ("r", "s"):
        value = getattr(signature, name)
        if not is_bytes32(value):
            raise InvalidSignatureError(
                f"invalid signature `{name}`: {value!r} "
                "(expected 0x and 64 hex digits)"
            )

    v = signature.v
    if not isinstance(v, (bool, int)) or v not in (0, 1):
        raise InvalidSignatureError(
            f"invalid signature `v`: {v!r} (expected 0, 1 or a bool)"
        )

    if U256(int(signature.s, 16)) > SECP256K1N_HALF:
        raise MalleabilityError(
            f"invalid signature `s`: {signature.s} "
            "- high S value detected (potential malleability)"
        )


def _recovery_id_value(v: Union[int, bool]) -> Union[BoolValue, UintValue]:
    if isinstance(v, bool):
        return BoolValue(v, name="v")
    return UintValue(v, name="v")


def encode_signed_transaction(
    payload_rlp_bytes: Bytes, signature: Signature
) -> Bytes:
    """
    Build the outer encoding `[[fields], v, r, s]` of a signed transaction.

    Parameters
    ----------
    payload_rlp_bytes :
        The canonical encoding of the payload field list. It is used as the
        first list item exactly as given.
    signature :
        The signature attached to the payload.

    Returns
    -------
    encoded : `Bytes`
        The canonical encoding of the signed transaction.
    """
    if (
        not payload_rlp_bytes
        or payload_rlp_bytes[0] < 0xC0
        or rlp.decode_item_length(payload_rlp_bytes) != len(payload_rlp_bytes)
    ):
        raise RLPDecodingError("payload encoding is not a single RLP list")

    signature_items: Sequence[rlp.Simple] = [
        lower(_recovery_id_value(signature.v)),
        lower(BytesValue(hex_to_bytes(signature.r), name="r")),
        lower(BytesValue(hex_to_bytes(signature.s), name="s")),
    ]
    return rlp.wrap_sequence(
        bytes(payload_rlp_bytes) + rlp.join_encodings(signature_items)
    )


def calc_signed_tx_hash(payload_rlp_bytes: Bytes, signature: Signature) -> str:
    """
    Compute the transaction hash of a signed transaction.

    Parameters
    ----------
    payload_rlp_bytes :
        The canonical encoding of the payload field list.
    signature :
        The signature attached to the payload.

    Returns
    -------
    tx_hash : `str`
        The `0x` prefixed keccak-256 of the signed transaction encoding.
    """
    encoded = encode_signed_transaction(payload_rlp_bytes, signature)
    return bytes_to_hex(keccak256(encoded))


@slotted_freezable
@dataclass
class PreparedTransaction:
    """
    An encoded, unsigned, transaction.

    `signature_hash` is derived from `rlp_bytes` when the value is created,
    so a prepared transaction is never observed without its digest.
    """

    unsigned: UnsignedPayload
    rlp_bytes: Bytes
    kind: str = field(init=False)
    signature_hash: str = field(init=False)

    def __post_init__(self) -> None:
        self.rlp_bytes = bytes(self.rlp_bytes)
        self.kind = self.unsigned.kind
        self.signature_hash = bytes_to_hex(keccak256(self.rlp_bytes))

    @property
    def fields(self) -> rlp.Simple:
        """
        The encoded payload fields, decoded back to bytes and lists.
        """
        return rlp.decode(self.rlp_bytes)

    def attach_signature(
        self, signature: SignatureLike
    ) -> "SignedTransaction":
        """
        Attach an already produced signature.

        Parameters
        ----------
        signature :
            A `Signature`, or a mapping with `r`, `s` and `v`.

        Returns
        -------
        signed : `SignedTransaction`
            The signed transaction. This prepared transaction is unchanged
            and may be signed again, even if attaching fails.
        """
        if not isinstance(signature, Signature):
            signature = Signature.from_dict(signature)
        return SignedTransaction(prepared=self, signature=signature)

    async def sign(self, signer: "SignerAdapter") -> "SignedTransaction":
        """
        Ask `signer` to sign the signature hash and attach the result.

        Exceptions raised by the signer propagate unchanged.
        """
        logger.debug(
            "requesting signature for %s transaction %s",
            self.kind,
            self.signature_hash,
        )
        signature = await signer.sign_digest(self.signature_hash)
        return self.attach_signature(signature)


@slotted_freezable
@dataclass
class SignedTransaction:
    """
    A prepared transaction with a validated signature attached.
    """

    prepared: PreparedTransaction
    signature: Signature
    encoded: Bytes = field(init=False)
    tx_hash: str = field(init=False)

    def __post_init__(self) -> None:
        validate_signature(self.signature)
        self.encoded = encode_signed_transaction(
            self.prepared.rlp_bytes, self.signature
        )
        self.tx_hash = bytes_to_hex(keccak256(self.encoded))
        logger.debug(
            "signed %s transaction %s (signature hash %s)",
            self.prepared.kind,
            self.tx_hash,
            self.prepared.signature_hash,
        )

    @property
    def kind(self) -> str:
        return self.prepared.kind

    @property
    def unsigned(self) -> UnsignedPayload:
        return self.prepared.unsigned

    @property
    def rlp_bytes(self) -> Bytes:
        return self.prepared.rlp_bytes

    @property
    def signature_hash(self) -> str:
        return self.prepared.signature_hash

    def to_request(self) -> Dict[str, Any]:
        """
        Build the request body submitted to the API: the payload fields
        plus `signature`. A new dictionary is returned on every call.
        """
        request = self.unsigned.to_dict()
        request["signature"] = self.signature.to_dict()
        return request

    def recover_signer(self) -> str:
        """
        Recover the `0x` address of the key that produced the signature.
        """
        public_key = secp256k1_recover(
            U256(int(self.signature.r, 16)),
            U256(int(self.signature.s, 16)),
            U256(int(self.signature.v)),
            hex_to_bytes32(self.signature_hash),
        )
        return bytes_to_hex(keccak256(public_key)[12:32])


def create_prepared_transaction(
    unsigned: UnsignedPayload, rlp_bytes: Bytes
) -> PreparedTransaction:
    """
    Wrap an unsigned payload and its canonical encoding.

    Parameters
    ----------
    unsigned :
        The payload, with any schema defaults already applied.
    rlp_bytes :
        The canonical encoding of the payload fields.

    Returns
    -------
    prepared : `PreparedTransaction`
        The prepared transaction, with its signature hash computed.
    """
    prepared = PreparedTransaction(unsigned=unsigned, rlp_bytes=rlp_bytes)
    logger.debug(
        "prepared %s transaction with signature hash %s",
        prepared.kind,
        prepared.signature_hash,
    )
    return prepared
