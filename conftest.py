"""Local pytest configuration shared by the signing tests."""

from typing import Any, Dict

import pytest

from onemoney.signing import (
    PaymentPayload,
    PreparedTransaction,
    PrivateKeySigner,
    prepare_payment,
)
from tests.helpers import TEST_PRIVATE_KEY, load_signing_vectors


@pytest.fixture(scope="session")
def signing_vectors() -> Dict[str, Dict[str, Any]]:
    return load_signing_vectors()


@pytest.fixture
def signer() -> PrivateKeySigner:
    return PrivateKeySigner(TEST_PRIVATE_KEY)


@pytest.fixture
def payment_payload(
    signing_vectors: Dict[str, Dict[str, Any]]
) -> PaymentPayload:
    return PaymentPayload.from_dict(signing_vectors["payment"]["payload"])


@pytest.fixture
def prepared_payment(payment_payload: PaymentPayload) -> PreparedTransaction:
    return prepare_payment(payment_payload)
