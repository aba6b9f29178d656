import json
import os
from typing import Any, Dict, List, Tuple

FIXTURES_PATH = os.path.join(os.path.dirname(__file__), "..", "fixtures")

SIGNING_VECTORS_PATH = os.path.join(FIXTURES_PATH, "signing_vectors.json")

# Key used to produce the reference signatures in signing_vectors.json
TEST_PRIVATE_KEY = (
    "0x01833a126ec45d0191519748146b9e35647aab7fed28de1c8e17824970f964a3"
)

SECP256K1N = int(
    "FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141", 16
)


def load_signing_vectors() -> Dict[str, Dict[str, Any]]:
    with open(SIGNING_VECTORS_PATH, "r") as fp:
        return json.load(fp)


def signing_vectors_as_pytest_fixtures() -> List[Tuple[str, Dict[str, Any]]]:
    return list(load_signing_vectors().items())
