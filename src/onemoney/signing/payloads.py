"""
Unsigned payloads, one per transaction kind.

Field names match the request bodies accepted by the API, so a payload can
be projected into a request without renaming anything except `from`, which
is a Python keyword and is spelled `from_` here.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import (
    Any,
    ClassVar,
    Dict,
    Mapping,
    Optional,
    Tuple,
    Type,
    TypeVar,
    Union,
)

from onemoney.exceptions import FieldValidationError


class AuthorityAction(str, Enum):
    """Whether an authority is granted or revoked."""

    GRANT = "Grant"
    REVOKE = "Revoke"


class AuthorityType(str, Enum):
    """Authorities that can be granted on a token."""

    MASTER_MINT_BURN = "MasterMintBurn"
    MINT_BURN_TOKENS = "MintBurnTokens"
    PAUSE = "Pause"
    MANAGE_LIST = "ManageList"
    UPDATE_METADATA = "UpdateMetadata"
    BRIDGE = "Bridge"
    CLAWBACK = "Clawback"


class ManageListAction(str, Enum):
    """Whether an address is added to or removed from a token list."""

    ADD = "Add"
    REMOVE = "Remove"


class PauseAction(str, Enum):
    """Whether a token is paused or unpaused."""

    PAUSE = "Pause"
    UNPAUSE = "Unpause"


UintLike = Union[int, str]

P = TypeVar("P", bound="UnsignedPayload")


def _request_name(payload_field: Any) -> str:
    return payload_field.metadata.get("request_name", payload_field.name)


def _to_request_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, KeyValuePair):
        return {"key": value.key, "value": value.value}
    if isinstance(value, tuple):
        return [_to_request_value(item) for item in value]
    return value


@dataclass(frozen=True)
class KeyValuePair:
    """
    One entry of a token's additional metadata.
    """

    key: str
    value: str


@dataclass(frozen=True)
class UnsignedPayload:
    """
    Fields shared by every transaction kind.

    Subclasses set `kind`, the tag identifying the transaction family.
    Optional fields left as `None` are omitted from the request body.
    """

    kind: ClassVar[str]

    chain_id: int
    nonce: int

    def to_dict(self) -> Dict[str, Any]:
        """
        Project the payload into a plain request field map.
        """
        result: Dict[str, Any] = {}
        for payload_field in fields(self):
            value = getattr(self, payload_field.name)
            if value is None:
                continue
            result[_request_name(payload_field)] = _to_request_value(value)
        return result

    @classmethod
    def from_dict(cls: Type[P], data: Mapping[str, Any]) -> P:
        """
        Build a payload from a request shaped mapping. A `signature` entry,
        if present, is ignored.
        """
        by_request_name = {_request_name(f): f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            if key == "signature":
                continue
            if key not in by_request_name:
                raise FieldValidationError(
                    key, value, f"unknown {cls.kind} field"
                )
            kwargs[by_request_name[key]] = value
        try:
            return cls(**kwargs)
        except TypeError as e:
            raise FieldValidationError(cls.kind, dict(data), str(e)) from e


@dataclass(frozen=True)
class PaymentPayload(UnsignedPayload):
    """Transfer of `value` units of `token` to `recipient`."""

    kind: ClassVar[str] = "payment"

    recipient: str
    value: UintLike
    token: str


@dataclass(frozen=True)
class TokenIssuePayload(UnsignedPayload):
    """Creation of a new token."""

    kind: ClassVar[str] = "tokenIssue"

    symbol: str
    name: str
    decimals: int
    master_authority: str
    is_private: bool
    clawback_enabled: Optional[bool] = None


@dataclass(frozen=True)
class TokenMintPayload(UnsignedPayload):
    kind: ClassVar[str] = "tokenMint"

    recipient: str
    value: UintLike
    token: str


@dataclass(frozen=True)
class TokenBurnPayload(UnsignedPayload):
    kind: ClassVar[str] = "tokenBurn"

    value: UintLike
    token: str


@dataclass(frozen=True)
class TokenAuthorityPayload(UnsignedPayload):
    """
    Grant or revoke of an authority on a token.

    `value` is the mint allowance and is only part of the signed payload
    when it is given; `None` and `"0"` sign differently.
    """

    kind: ClassVar[str] = "tokenAuthority"

    action: Union[AuthorityAction, str]
    authority_type: Union[AuthorityType, str]
    authority_address: str
    token: str
    value: Optional[UintLike] = None


@dataclass(frozen=True)
class TokenPausePayload(UnsignedPayload):
    kind: ClassVar[str] = "tokenPause"

    action: Union[PauseAction, str]
    token: str


@dataclass(frozen=True)
class TokenManageListPayload(UnsignedPayload):
    kind: ClassVar[str] = "tokenManageList"

    action: Union[ManageListAction, str]
    address: str
    token: str


@dataclass(frozen=True)
class TokenMetadataPayload(UnsignedPayload):
    """Update of a token's name, uri, and additional key/value metadata."""

    kind: ClassVar[str] = "tokenMetadata"

    name: str
    uri: str
    token: str
    additional_metadata: Tuple[KeyValuePair, ...] = ()

    def __post_init__(self) -> None:
        pairs = []
        for index, item in enumerate(self.additional_metadata):
            if isinstance(item, KeyValuePair):
                pairs.append(item)
            elif isinstance(item, Mapping):
                try:
                    pairs.append(
                        KeyValuePair(key=item["key"], value=item["value"])
                    )
                except KeyError as e:
                    raise FieldValidationError(
                        f"additional_metadata[{index}]",
                        item,
                        "expected key and value",
                    ) from e
            else:
                raise FieldValidationError(
                    "additional_metadata", item, "expected a key/value pair"
                )
        object.__setattr__(self, "additional_metadata", tuple(pairs))


@dataclass(frozen=True)
class TokenBridgeAndMintPayload(UnsignedPayload):
    """Mint on this chain backed by a transaction on `source_chain_id`."""

    kind: ClassVar[str] = "tokenBridgeAndMint"

    recipient: str
    value: UintLike
    token: str
    source_chain_id: int
    source_tx_hash: str
    bridge_metadata: str


@dataclass(frozen=True)
class TokenBurnAndBridgePayload(UnsignedPayload):
    """Burn on this chain, to be released on `destination_chain_id`."""

    kind: ClassVar[str] = "tokenBurnAndBridge"

    sender: str
    value: UintLike
    token: str
    destination_chain_id: int
    destination_address: str
    escrow_fee: UintLike
    bridge_metadata: str
    bridge_param: str


@dataclass(frozen=True)
class TokenClawbackPayload(UnsignedPayload):
    """Forced transfer of `value` from `from_` to `recipient`."""

    kind: ClassVar[str] = "tokenClawback"

    token: str
    from_: str = field(metadata={"request_name": "from"})
    recipient: str
    value: UintLike
