import re
from typing import Any, Dict

import pytest
from ethereum_rlp import rlp as reference_rlp

from onemoney.crypto.hash import keccak256
from onemoney.exceptions import (
    InvalidSignatureError,
    MalleabilityError,
    RLPDecodingError,
)
from onemoney.signing import (
    DEFAULT_BUILDER,
    PreparedTransaction,
    PrivateKeySigner,
    Signature,
    SignedTransaction,
    calc_signed_tx_hash,
    create_prepared_transaction,
    validate_signature,
)
from onemoney.utils.hexadecimal import bytes_to_hex, hex_to_bytes
from tests.helpers import SECP256K1N, signing_vectors_as_pytest_fixtures

SIGNING_VECTORS = signing_vectors_as_pytest_fixtures()

TX_HASH_RE = re.compile(r"0x[0-9a-f]{64}")

PAYMENT_SIGNATURE = Signature(
    r="0x41e1e158803da19ef1fc9ab35d86776cb02ac493265b948ff18b2c57a4e52432",
    s="0x21f42bb02796a424b0961af374a71e0b948e8fadb58f1e5c6ac861be656265e1",
    v=0,
)

HIGH_S_SIGNATURE = Signature(
    r=PAYMENT_SIGNATURE.r,
    s="0x" + "F" * 64,
    v=0,
)


class StaticSigner:
    """Signer returning a fixed signature, standing in for a remote one."""

    def __init__(self, signature: Any) -> None:
        self.signature = signature
        self.digests = []

    async def sign_digest(self, digest: str) -> Any:
        self.digests.append(digest)
        return self.signature


class FailingSigner:
    async def sign_digest(self, digest: str) -> Signature:
        raise ConnectionError("remote signer unavailable")


def reference_tx_hash(rlp_bytes: bytes, signature: Signature) -> str:
    v = signature.v
    if isinstance(v, bool):
        v_bytes = b"\x01" if v else b""
    else:
        v_bytes = v.to_bytes(1, "big") if v else b""
    encoded = reference_rlp.encode(
        [
            reference_rlp.decode(rlp_bytes),
            v_bytes,
            hex_to_bytes(signature.r),
            hex_to_bytes(signature.s),
        ]
    )
    return bytes_to_hex(keccak256(encoded))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "vector",
    [vector for _, vector in SIGNING_VECTORS],
    ids=[name for name, _ in SIGNING_VECTORS],
)
async def test_sign_matches_reference_signature(
    vector: Dict[str, Any], signer: PrivateKeySigner
) -> None:
    prepared = DEFAULT_BUILDER.prepare_from_dict(
        vector["kind"], vector["payload"]
    )
    signed = await prepared.sign(signer)

    assert signed.signature.to_dict() == vector["signature"]
    assert signed.signature_hash == vector["signature_hash"]
    assert TX_HASH_RE.fullmatch(signed.tx_hash)
    assert signed.tx_hash == reference_tx_hash(
        prepared.rlp_bytes, signed.signature
    )


@pytest.mark.asyncio
async def test_sign_and_attach_agree(
    prepared_payment: PreparedTransaction, signer: PrivateKeySigner
) -> None:
    signed = await prepared_payment.sign(signer)
    attached = prepared_payment.attach_signature(signed.signature)

    assert signed.signature == PAYMENT_SIGNATURE
    assert attached.tx_hash == signed.tx_hash
    assert attached.encoded == signed.encoded


@pytest.mark.asyncio
async def test_signing_is_repeatable(
    prepared_payment: PreparedTransaction, signer: PrivateKeySigner
) -> None:
    first = await prepared_payment.sign(signer)
    second = await prepared_payment.sign(signer)
    assert first.tx_hash == second.tx_hash


def test_signed_encoding_nests_payload_list(
    prepared_payment: PreparedTransaction,
) -> None:
    signed = prepared_payment.attach_signature(PAYMENT_SIGNATURE)
    rlp_bytes = prepared_payment.rlp_bytes

    # 49 byte payload, empty v, two 33 byte signature components
    assert signed.encoded == (
        b"\xf8\x74"
        + rlp_bytes
        + b"\x80"
        + b"\xa0"
        + hex_to_bytes(PAYMENT_SIGNATURE.r)
        + b"\xa0"
        + hex_to_bytes(PAYMENT_SIGNATURE.s)
    )
    assert signed.tx_hash == bytes_to_hex(keccak256(signed.encoded))
    assert signed.tx_hash == calc_signed_tx_hash(rlp_bytes, PAYMENT_SIGNATURE)


def test_signature_components_keep_leading_zeros(
    prepared_payment: PreparedTransaction,
) -> None:
    signature = Signature(
        r="0x00" + PAYMENT_SIGNATURE.r[4:],
        s="0x00" + PAYMENT_SIGNATURE.s[4:],
        v=1,
    )
    signed = prepared_payment.attach_signature(signature)
    decoded = reference_rlp.decode(signed.encoded)

    assert len(decoded[2]) == 32
    assert len(decoded[3]) == 32
    assert decoded[1] == b"\x01"


@pytest.mark.asyncio
async def test_custom_signer_receives_signature_hash(
    prepared_payment: PreparedTransaction,
) -> None:
    signer = StaticSigner(PAYMENT_SIGNATURE)
    signed = await prepared_payment.sign(signer)

    assert signer.digests == [prepared_payment.signature_hash]
    assert signed.signature == PAYMENT_SIGNATURE


@pytest.mark.asyncio
async def test_custom_signer_may_return_mapping(
    prepared_payment: PreparedTransaction,
) -> None:
    signed = await prepared_payment.sign(
        StaticSigner(PAYMENT_SIGNATURE.to_dict())
    )
    assert signed.signature == PAYMENT_SIGNATURE


@pytest.mark.asyncio
async def test_boolean_recovery_id(
    prepared_payment: PreparedTransaction,
) -> None:
    signature = Signature(
        r=PAYMENT_SIGNATURE.r, s=PAYMENT_SIGNATURE.s, v=False
    )
    signed = await prepared_payment.sign(StaticSigner(signature))

    assert signed.signature.v is False
    assert signed.to_request()["signature"]["v"] is False
    assert TX_HASH_RE.fullmatch(signed.tx_hash)
    assert signed.tx_hash == prepared_payment.attach_signature(
        PAYMENT_SIGNATURE
    ).tx_hash


@pytest.mark.asyncio
async def test_sign_rejects_high_s(
    prepared_payment: PreparedTransaction,
) -> None:
    with pytest.raises(MalleabilityError, match="high S value"):
        await prepared_payment.sign(StaticSigner(HIGH_S_SIGNATURE))


def test_attach_rejects_high_s(prepared_payment: PreparedTransaction) -> None:
    with pytest.raises(MalleabilityError, match="malleability"):
        prepared_payment.attach_signature(HIGH_S_SIGNATURE)

    # The prepared transaction is still usable
    signed = prepared_payment.attach_signature(PAYMENT_SIGNATURE)
    assert signed.signature_hash == prepared_payment.signature_hash


def test_malleability_threshold() -> None:
    half = SECP256K1N // 2
    at_half = Signature(
        r=PAYMENT_SIGNATURE.r, s="0x" + format(half, "064x"), v=0
    )
    above_half = Signature(
        r=PAYMENT_SIGNATURE.r, s="0x" + format(half + 1, "064x"), v=0
    )
    validate_signature(at_half)
    with pytest.raises(MalleabilityError):
        validate_signature(above_half)


@pytest.mark.parametrize(
    "signature",
    [
        Signature(r="0x1234", s=PAYMENT_SIGNATURE.s, v=0),
        Signature(r=PAYMENT_SIGNATURE.r, s=PAYMENT_SIGNATURE.s[2:], v=0),
        Signature(r=PAYMENT_SIGNATURE.r, s="0x" + "zz" * 32, v=0),
        Signature(r=PAYMENT_SIGNATURE.r, s=PAYMENT_SIGNATURE.s, v=2),
        Signature(r=PAYMENT_SIGNATURE.r, s=PAYMENT_SIGNATURE.s, v=27),
        Signature(r=PAYMENT_SIGNATURE.r, s=PAYMENT_SIGNATURE.s, v="0"),
    ],
)
def test_attach_rejects_malformed_signature(
    prepared_payment: PreparedTransaction, signature: Signature
) -> None:
    with pytest.raises(InvalidSignatureError):
        prepared_payment.attach_signature(signature)


def test_attach_rejects_incomplete_mapping(
    prepared_payment: PreparedTransaction,
) -> None:
    with pytest.raises(InvalidSignatureError):
        prepared_payment.attach_signature(
            {"r": PAYMENT_SIGNATURE.r, "s": PAYMENT_SIGNATURE.s}
        )


@pytest.mark.parametrize(
    "signature",
    [
        (PAYMENT_SIGNATURE.r, PAYMENT_SIGNATURE.s, 0),
        [PAYMENT_SIGNATURE.r, PAYMENT_SIGNATURE.s, 0],
        None,
    ],
)
def test_attach_rejects_non_mapping_signature(
    prepared_payment: PreparedTransaction, signature: Any
) -> None:
    with pytest.raises(InvalidSignatureError):
        prepared_payment.attach_signature(signature)


@pytest.mark.asyncio
async def test_sign_rejects_tuple_from_signer(
    prepared_payment: PreparedTransaction,
) -> None:
    signer = StaticSigner((PAYMENT_SIGNATURE.r, PAYMENT_SIGNATURE.s, 0))
    with pytest.raises(InvalidSignatureError):
        await prepared_payment.sign(signer)


@pytest.mark.asyncio
async def test_signer_errors_propagate(
    prepared_payment: PreparedTransaction, signer: PrivateKeySigner
) -> None:
    with pytest.raises(ConnectionError):
        await prepared_payment.sign(FailingSigner())

    signed = await prepared_payment.sign(signer)
    assert signed.signature == PAYMENT_SIGNATURE


def test_to_request(prepared_payment: PreparedTransaction) -> None:
    signed = prepared_payment.attach_signature(PAYMENT_SIGNATURE)
    request = signed.to_request()

    assert request == {
        "chain_id": 1212101,
        "nonce": 0,
        "recipient": "0xa634dfba8c7550550817898bc4820cd10888aac5",
        "value": "10",
        "token": "0x5458747a0efb9ebeb8696fcac1479278c0872fbe",
        "signature": PAYMENT_SIGNATURE.to_dict(),
    }

    request["nonce"] = 99
    assert signed.to_request()["nonce"] == 0


def test_recover_signer(
    prepared_payment: PreparedTransaction, signer: PrivateKeySigner
) -> None:
    signed = prepared_payment.attach_signature(PAYMENT_SIGNATURE)
    assert signed.recover_signer() == signer.address


def test_transactions_are_immutable(
    prepared_payment: PreparedTransaction,
) -> None:
    signed = prepared_payment.attach_signature(PAYMENT_SIGNATURE)

    with pytest.raises(AttributeError):
        prepared_payment.signature_hash = "0x" + "00" * 32
    with pytest.raises(AttributeError):
        signed.tx_hash = "0x" + "00" * 32
    assert isinstance(signed, SignedTransaction)


def test_calc_signed_tx_hash_rejects_non_list_payload() -> None:
    with pytest.raises(RLPDecodingError):
        calc_signed_tx_hash(b"\x83dog", PAYMENT_SIGNATURE)
    with pytest.raises(RLPDecodingError):
        calc_signed_tx_hash(b"", PAYMENT_SIGNATURE)


def test_prepared_transaction_copies_rlp_bytes(
    prepared_payment: PreparedTransaction,
) -> None:
    buffer = bytearray(prepared_payment.rlp_bytes)
    prepared = create_prepared_transaction(prepared_payment.unsigned, buffer)
    buffer[-1] ^= 0xFF

    assert isinstance(prepared.rlp_bytes, bytes)
    assert prepared.rlp_bytes == prepared_payment.rlp_bytes
    assert prepared.signature_hash == bytes_to_hex(
        keccak256(prepared.rlp_bytes)
    )
    signed = prepared.attach_signature(PAYMENT_SIGNATURE)
    assert signed.tx_hash == prepared_payment.attach_signature(
        PAYMENT_SIGNATURE
    ).tx_hash
