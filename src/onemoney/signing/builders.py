"""
Transaction Builders
^^^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Each transaction kind has a schema function listing exactly which fields
are signed and in which order, and a `prepare_*` function that validates
the payload, applies schema defaults, encodes the fields, and returns a
`PreparedTransaction`.

Field order is part of the signed bytes. It is spelled out by hand for
every kind rather than derived from the payload dataclasses.
"""

from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Type

from .core import PreparedTransaction, create_prepared_transaction
from .payloads import (
    AuthorityAction,
    AuthorityType,
    ManageListAction,
    PauseAction,
    PaymentPayload,
    TokenAuthorityPayload,
    TokenBridgeAndMintPayload,
    TokenBurnAndBridgePayload,
    TokenBurnPayload,
    TokenClawbackPayload,
    TokenIssuePayload,
    TokenManageListPayload,
    TokenMetadataPayload,
    TokenMintPayload,
    TokenPausePayload,
    UnsignedPayload,
)
from .validate import (
    assert_address,
    coerce_enum,
    validate_chain_and_nonce,
    validate_recipient_value_token,
)
from .values import (
    AddressValue,
    BoolValue,
    HexValue,
    ListValue,
    StrValue,
    TypedValue,
    UintValue,
    encode_payload,
)

Schema = Callable[[Any], List[TypedValue]]
Normalizer = Callable[[Any], Any]


#
# Schemas
#


def _common_fields(unsigned: UnsignedPayload) -> List[TypedValue]:
    return [
        UintValue(unsigned.chain_id, name="chain_id"),
        UintValue(unsigned.nonce, name="nonce"),
    ]


def payment_fields(unsigned: PaymentPayload) -> List[TypedValue]:
    return _common_fields(unsigned) + [
        AddressValue(unsigned.recipient, name="recipient"),
        UintValue(unsigned.value, name="value"),
        AddressValue(unsigned.token, name="token"),
    ]


def token_issue_fields(unsigned: TokenIssuePayload) -> List[TypedValue]:
    """
    A missing `clawback_enabled` is signed as `True`.
    """
    clawback_enabled = unsigned.clawback_enabled
    if clawback_enabled is None:
        clawback_enabled = True
    return _common_fields(unsigned) + [
        StrValue(unsigned.symbol, name="symbol"),
        StrValue(unsigned.name, name="name"),
        UintValue(unsigned.decimals, name="decimals"),
        AddressValue(unsigned.master_authority, name="master_authority"),
        BoolValue(unsigned.is_private, name="is_private"),
        BoolValue(clawback_enabled, name="clawback_enabled"),
    ]


def token_mint_fields(unsigned: TokenMintPayload) -> List[TypedValue]:
    return _common_fields(unsigned) + [
        AddressValue(unsigned.recipient, name="recipient"),
        UintValue(unsigned.value, name="value"),
        AddressValue(unsigned.token, name="token"),
    ]


def token_burn_fields(unsigned: TokenBurnPayload) -> List[TypedValue]:
    return _common_fields(unsigned) + [
        UintValue(unsigned.value, name="value"),
        AddressValue(unsigned.token, name="token"),
    ]


def token_authority_fields(
    unsigned: TokenAuthorityPayload,
) -> List[TypedValue]:
    """
    `value` is appended only when it is given, so leaving it out and
    passing `"0"` produce different signature hashes.
    """
    action = coerce_enum("action", AuthorityAction, unsigned.action)
    authority_type = coerce_enum(
        "authority_type", AuthorityType, unsigned.authority_type
    )
    values = _common_fields(unsigned) + [
        StrValue(action.value, name="action"),
        StrValue(authority_type.value, name="authority_type"),
        AddressValue(unsigned.authority_address, name="authority_address"),
        AddressValue(unsigned.token, name="token"),
    ]
    if unsigned.value is not None:
        values.append(UintValue(unsigned.value, name="value"))
    return values


def token_pause_fields(unsigned: TokenPausePayload) -> List[TypedValue]:
    action = coerce_enum("action", PauseAction, unsigned.action)
    return _common_fields(unsigned) + [
        StrValue(action.value, name="action"),
        AddressValue(unsigned.token, name="token"),
    ]


def token_manage_list_fields(
    unsigned: TokenManageListPayload,
) -> List[TypedValue]:
    action = coerce_enum("action", ManageListAction, unsigned.action)
    return _common_fields(unsigned) + [
        StrValue(action.value, name="action"),
        AddressValue(unsigned.address, name="address"),
        AddressValue(unsigned.token, name="token"),
    ]


def token_metadata_fields(
    unsigned: TokenMetadataPayload,
) -> List[TypedValue]:
    """
    `additional_metadata` is signed as a list of `[key, value]` pairs.
    """
    pairs = tuple(
        ListValue(
            (
                StrValue(pair.key, name=f"additional_metadata[{i}].key"),
                StrValue(pair.value, name=f"additional_metadata[{i}].value"),
            )
        )
        for i, pair in enumerate(unsigned.additional_metadata)
    )
    return _common_fields(unsigned) + [
        StrValue(unsigned.name, name="name"),
        StrValue(unsigned.uri, name="uri"),
        AddressValue(unsigned.token, name="token"),
        ListValue(pairs, name="additional_metadata"),
    ]


def token_bridge_and_mint_fields(
    unsigned: TokenBridgeAndMintPayload,
) -> List[TypedValue]:
    return _common_fields(unsigned) + [
        AddressValue(unsigned.recipient, name="recipient"),
        UintValue(unsigned.value, name="value"),
        AddressValue(unsigned.token, name="token"),
        UintValue(unsigned.source_chain_id, name="source_chain_id"),
        StrValue(unsigned.source_tx_hash, name="source_tx_hash"),
        StrValue(unsigned.bridge_metadata, name="bridge_metadata"),
    ]


def token_burn_and_bridge_fields(
    unsigned: TokenBurnAndBridgePayload,
) -> List[TypedValue]:
    return _common_fields(unsigned) + [
        AddressValue(unsigned.sender, name="sender"),
        UintValue(unsigned.value, name="value"),
        AddressValue(unsigned.token, name="token"),
        UintValue(unsigned.destination_chain_id, name="destination_chain_id"),
        StrValue(unsigned.destination_address, name="destination_address"),
        UintValue(unsigned.escrow_fee, name="escrow_fee"),
        StrValue(unsigned.bridge_metadata, name="bridge_metadata"),
        HexValue(unsigned.bridge_param, name="bridge_param"),
    ]


def token_clawback_fields(
    unsigned: TokenClawbackPayload,
) -> List[TypedValue]:
    return _common_fields(unsigned) + [
        AddressValue(unsigned.token, name="token"),
        AddressValue(unsigned.from_, name="from"),
        AddressValue(unsigned.recipient, name="recipient"),
        UintValue(unsigned.value, name="value"),
    ]


#
# Normalization
#


def _normalize_token_issue(unsigned: TokenIssuePayload) -> TokenIssuePayload:
    if unsigned.clawback_enabled is None:
        return replace(unsigned, clawback_enabled=True)
    return unsigned


def _normalize_token_authority(
    unsigned: TokenAuthorityPayload,
) -> TokenAuthorityPayload:
    return replace(
        unsigned,
        action=coerce_enum("action", AuthorityAction, unsigned.action),
        authority_type=coerce_enum(
            "authority_type", AuthorityType, unsigned.authority_type
        ),
    )


def _normalize_token_pause(unsigned: TokenPausePayload) -> TokenPausePayload:
    return replace(
        unsigned, action=coerce_enum("action", PauseAction, unsigned.action)
    )


def _normalize_token_manage_list(
    unsigned: TokenManageListPayload,
) -> TokenManageListPayload:
    assert_address("address", unsigned.address)
    assert_address("token", unsigned.token)
    return replace(
        unsigned,
        action=coerce_enum("action", ManageListAction, unsigned.action),
    )


def _normalize_token_clawback(
    unsigned: TokenClawbackPayload,
) -> TokenClawbackPayload:
    validate_recipient_value_token(unsigned)
    assert_address("from", unsigned.from_)
    return unsigned


#
# Registry
#


@dataclass(frozen=True)
class TransactionSchema:
    """
    How one transaction kind is validated and encoded.
    """

    payload_class: Type[UnsignedPayload]
    fields: Schema
    normalize: Optional[Normalizer] = None


TRANSACTION_SCHEMAS: Dict[str, TransactionSchema] = {
    schema.payload_class.kind: schema
    for schema in (
        TransactionSchema(PaymentPayload, payment_fields),
        TransactionSchema(
            TokenIssuePayload, token_issue_fields, _normalize_token_issue
        ),
        TransactionSchema(TokenMintPayload, token_mint_fields),
        TransactionSchema(TokenBurnPayload, token_burn_fields),
        TransactionSchema(
            TokenAuthorityPayload,
            token_authority_fields,
            _normalize_token_authority,
        ),
        TransactionSchema(
            TokenPausePayload, token_pause_fields, _normalize_token_pause
        ),
        TransactionSchema(
            TokenManageListPayload,
            token_manage_list_fields,
            _normalize_token_manage_list,
        ),
        TransactionSchema(TokenMetadataPayload, token_metadata_fields),
        TransactionSchema(
            TokenBridgeAndMintPayload, token_bridge_and_mint_fields
        ),
        TransactionSchema(
            TokenBurnAndBridgePayload, token_burn_and_bridge_fields
        ),
        TransactionSchema(
            TokenClawbackPayload,
            token_clawback_fields,
            _normalize_token_clawback,
        ),
    )
}


class TransactionBuilder:
    """
    Prepares unsigned payloads of any registered kind.

    Parameters
    ----------
    schemas :
        Mapping from kind to schema. Defaults to every built-in kind.
    """

    def __init__(
        self, schemas: Optional[Mapping[str, TransactionSchema]] = None
    ) -> None:
        if schemas is None:
            schemas = TRANSACTION_SCHEMAS
        self._schemas = dict(schemas)

    @property
    def kinds(self) -> List[str]:
        return list(self._schemas)

    def schema(self, kind: str) -> TransactionSchema:
        try:
            return self._schemas[kind]
        except KeyError:
            raise KeyError(f"unknown transaction kind {kind!r}") from None

    def prepare(self, unsigned: UnsignedPayload) -> PreparedTransaction:
        """
        Validate, encode, and hash `unsigned`.

        Parameters
        ----------
        unsigned :
            An unsigned payload of a registered kind.

        Returns
        -------
        prepared : `PreparedTransaction`
            The prepared transaction. Its `unsigned` payload carries any
            defaults applied before encoding.
        """
        schema = self.schema(unsigned.kind)
        if not isinstance(unsigned, schema.payload_class):
            raise TypeError(
                f"expected {schema.payload_class.__name__}, "
                f"got {type(unsigned).__name__}"
            )

        validate_chain_and_nonce(unsigned)
        if schema.normalize is not None:
            unsigned = schema.normalize(unsigned)

        rlp_bytes = encode_payload(schema.fields(unsigned))
        return create_prepared_transaction(unsigned, rlp_bytes)

    def prepare_from_dict(
        self, kind: str, data: Mapping[str, Any]
    ) -> PreparedTransaction:
        """
        Build the payload for `kind` from a request shaped mapping and
        prepare it.
        """
        payload_class = self.schema(kind).payload_class
        return self.prepare(payload_class.from_dict(data))


DEFAULT_BUILDER = TransactionBuilder()


def _prepare(
    payload_class: Type[UnsignedPayload], unsigned: UnsignedPayload
) -> PreparedTransaction:
    if not isinstance(unsigned, payload_class):
        raise TypeError(
            f"expected {payload_class.__name__}, "
            f"got {type(unsigned).__name__}"
        )
    return DEFAULT_BUILDER.prepare(unsigned)


def prepare_payment(unsigned: PaymentPayload) -> PreparedTransaction:
    return _prepare(PaymentPayload, unsigned)


def prepare_token_issue(unsigned: TokenIssuePayload) -> PreparedTransaction:
    """
    Prepare a token issue. The returned transaction's payload carries
    `clawback_enabled=True` when it was left out.
    """
    return _prepare(TokenIssuePayload, unsigned)


def prepare_token_mint(unsigned: TokenMintPayload) -> PreparedTransaction:
    return _prepare(TokenMintPayload, unsigned)


def prepare_token_burn(unsigned: TokenBurnPayload) -> PreparedTransaction:
    return _prepare(TokenBurnPayload, unsigned)


def prepare_token_authority(
    unsigned: TokenAuthorityPayload,
) -> PreparedTransaction:
    return _prepare(TokenAuthorityPayload, unsigned)


def prepare_token_pause(unsigned: TokenPausePayload) -> PreparedTransaction:
    return _prepare(TokenPausePayload, unsigned)


def prepare_token_manage_list(
    unsigned: TokenManageListPayload,
) -> PreparedTransaction:
    return _prepare(TokenManageListPayload, unsigned)


def prepare_token_metadata(
    unsigned: TokenMetadataPayload,
) -> PreparedTransaction:
    return _prepare(TokenMetadataPayload, unsigned)


def prepare_token_bridge_and_mint(
    unsigned: TokenBridgeAndMintPayload,
) -> PreparedTransaction:
    return _prepare(TokenBridgeAndMintPayload, unsigned)


def prepare_token_burn_and_bridge(
    unsigned: TokenBurnAndBridgePayload,
) -> PreparedTransaction:
    return _prepare(TokenBurnAndBridgePayload, unsigned)


def prepare_token_clawback(
    unsigned: TokenClawbackPayload,
) -> PreparedTransaction:
    return _prepare(TokenClawbackPayload, unsigned)
