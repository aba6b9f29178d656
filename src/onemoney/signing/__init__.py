"""
Preparing and signing transactions.
"""

from .builders import (
    DEFAULT_BUILDER,
    TRANSACTION_SCHEMAS,
    TransactionBuilder,
    TransactionSchema,
    prepare_payment,
    prepare_token_authority,
    prepare_token_bridge_and_mint,
    prepare_token_burn,
    prepare_token_burn_and_bridge,
    prepare_token_clawback,
    prepare_token_issue,
    prepare_token_manage_list,
    prepare_token_metadata,
    prepare_token_mint,
    prepare_token_pause,
)
from .core import (
    PreparedTransaction,
    Signature,
    SignedTransaction,
    calc_signed_tx_hash,
    create_prepared_transaction,
    encode_signed_transaction,
    validate_signature,
)
from .payloads import (
    AuthorityAction,
    AuthorityType,
    KeyValuePair,
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
from .signer import PrivateKeySigner, SignerAdapter

__all__ = (
    "AuthorityAction",
    "AuthorityType",
    "DEFAULT_BUILDER",
    "KeyValuePair",
    "ManageListAction",
    "PauseAction",
    "PaymentPayload",
    "PreparedTransaction",
    "PrivateKeySigner",
    "Signature",
    "SignedTransaction",
    "SignerAdapter",
    "TRANSACTION_SCHEMAS",
    "TokenAuthorityPayload",
    "TokenBridgeAndMintPayload",
    "TokenBurnAndBridgePayload",
    "TokenBurnPayload",
    "TokenClawbackPayload",
    "TokenIssuePayload",
    "TokenManageListPayload",
    "TokenMetadataPayload",
    "TokenMintPayload",
    "TokenPausePayload",
    "TransactionBuilder",
    "TransactionSchema",
    "UnsignedPayload",
    "calc_signed_tx_hash",
    "create_prepared_transaction",
    "encode_signed_transaction",
    "prepare_payment",
    "prepare_token_authority",
    "prepare_token_bridge_and_mint",
    "prepare_token_burn",
    "prepare_token_burn_and_bridge",
    "prepare_token_clawback",
    "prepare_token_issue",
    "prepare_token_manage_list",
    "prepare_token_metadata",
    "prepare_token_mint",
    "prepare_token_pause",
    "validate_signature",
)
