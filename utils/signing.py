# -------------------------------------------------------------------
#  🔐  utils/signing.py  – helper to generate the `X-BAPI-SIGN` value
#  required by every authenticated Bybit v5 REST call.
# -------------------------------------------------------------------
"""Bybit v5 signing, as described in the official "Authentication" docs:
   1. Take the millisecond timestamp, the API key and the recv window.
   2. Append the exact query string that goes on the URL (GET) or the
      raw JSON body (POST).
   3. HmacSHA256(secret_key, payload) → hex digest (lower-case)."""
from __future__ import annotations
import hashlib, hmac, time

RECV_WINDOW = "20000"
__all__ = ["RECV_WINDOW", "generate_signature", "signature_payload", "stamp"]


def stamp() -> int:
    """Server-accepted millisecond timestamp."""
    return int(time.time() * 1000)


def signature_payload(timestamp: str, api_key: str, recv_window: str, params: str) -> str:
    return f"{timestamp}{api_key}{recv_window}{params}"


def generate_signature(
    secret_key: str | bytes,
    timestamp: str,
    api_key: str,
    params: str = "",
    *,
    recv_window: str = RECV_WINDOW,
) -> str:
    """Return the `X-BAPI-SIGN` header value.

    Parameters
    ----------
    secret_key  : str | bytes – your Bybit API secret.
    timestamp   : str         – epoch milliseconds, decimal string.
    api_key     : str         – your Bybit API key.
    params      : str         – query string exactly as it is sent.
    recv_window : str         – must match the `X-BAPI-RECV-WINDOW` header.
    """
    key = secret_key if isinstance(secret_key, bytes) else secret_key.encode()
    payload = signature_payload(timestamp, api_key, recv_window, params)
    return hmac.new(key, payload.encode(), hashlib.sha256).hexdigest()


# -------------------------------------------------------------------
#  ↓ Example usage inside BybitClient.request() ↓
# -------------------------------------------------------------------
#     ts = str(signing.stamp())
#     headers = {
#         "X-BAPI-API-KEY": self._api_key,
#         "X-BAPI-TIMESTAMP": ts,
#         "X-BAPI-RECV-WINDOW": signing.RECV_WINDOW,
#         "X-BAPI-SIGN": signing.generate_signature(self._api_secret, ts, self._api_key, query),
#     }
