# -------------------------------------------------------------------
#  🧪  tests/test_signing.py – unit tests for the Bybit signing helper
#       and for the auth headers BybitClient attaches.
# -------------------------------------------------------------------
"""pytest-style tests.  Run with `pytest -q tests/test_signing.py`."""

import hashlib
import hmac
import time

import pytest

from modules.bybit_client import BybitClient
from utils.signing import RECV_WINDOW, generate_signature, signature_payload, stamp

KNOWN_VECTORS = [
    # (secret, timestamp, api_key, recv_window, params, expected hex)
    (
        "test-secret", "1700000000000", "test-key", "20000", "accountType=UNIFIED",
        "36ea6deaa7c9a4a811fba646112f0bd1c7d141686fc68507b76dd83fc52865b0",
    ),
    (
        "test-secret", "1700000000000", "test-key", "20000", "",
        "47a4955210e28e392ff366ba8c0e15996a49ea4f521e951307bb8f691d260f94",
    ),
    (
        "YYYYYYYYYY", "1658384314791", "XXXXXXXXXX", "5000",
        "category=option&symbol=BTC-29JUL22-25000-C",
        "37813c67fafb3017e92354eb88f218e7e52a98f9f5eb74cfcf0b21f17edb143b",
    ),
]


@pytest.mark.parametrize("secret,ts,key,window,params,expected", KNOWN_VECTORS)
def test_generate_signature_known_vectors(secret, ts, key, window, params, expected):
    assert generate_signature(secret, ts, key, params, recv_window=window) == expected


def test_generate_signature_against_manual():
    secret, ts, key, params = "s3cr3t", "1712345678901", "k3y", "category=linear&limit=100"

    # ---- manual reference implementation (independent) ----
    payload = f"{ts}{key}{RECV_WINDOW}{params}"
    expected = hmac.new(secret.encode(), payload.encode(), hashlib.sha256).hexdigest()

    assert generate_signature(secret, ts, key, params) == expected
    assert generate_signature(secret.encode(), ts, key, params) == expected


def test_signature_is_deterministic_and_lowercase_hex():
    first = generate_signature("secret", "1", "key", "a=b")
    second = generate_signature("secret", "1", "key", "a=b")
    assert first == second
    assert len(first) == 64
    assert first == first.lower()
    int(first, 16)


@pytest.mark.parametrize(
    "changed",
    [
        {"secret_key": "secreT"},
        {"timestamp": "2"},
        {"api_key": "kez"},
        {"params": "a=c"},
        {"recv_window": "20001"},
    ],
)
def test_any_input_change_changes_signature(changed):
    base = {"secret_key": "secret", "timestamp": "1", "api_key": "key", "params": "a=b", "recv_window": "20000"}
    args = {**base, **changed}
    assert generate_signature(**base) != generate_signature(**args)


def test_payload_order():
    assert signature_payload("1", "key", "20000", "x=1") == "1key20000x=1"


def test_stamp_is_epoch_millis():
    now_ms = int(time.time() * 1000)
    assert abs(stamp() - now_ms) < 5_000


def test_client_headers_carry_signature():
    client = BybitClient(api_key="test-key", api_secret="test-secret")
    headers = client.build_headers("accountType=UNIFIED", timestamp="1700000000000")

    assert headers == {
        "X-BAPI-API-KEY": "test-key",
        "X-BAPI-TIMESTAMP": "1700000000000",
        "X-BAPI-RECV-WINDOW": "20000",
        "X-BAPI-SIGN": KNOWN_VECTORS[0][-1],
    }


def test_client_headers_use_fresh_timestamp(monkeypatch):
    monkeypatch.setattr("utils.signing.stamp", lambda: 1700000000000)
    client = BybitClient(api_key="test-key", api_secret="test-secret")
    headers = client.build_headers("accountType=UNIFIED")
    assert headers["X-BAPI-TIMESTAMP"] == "1700000000000"
    assert headers["X-BAPI-SIGN"] == KNOWN_VECTORS[0][-1]
