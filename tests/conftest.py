import json
from unittest.mock import AsyncMock, MagicMock

import pytest


def _response(status, body):
    resp = MagicMock()
    resp.status = status
    resp.text = AsyncMock(return_value=body if isinstance(body, str) else json.dumps(body))
    return resp


def _session(status=200, body="", exc=None):
    """aiohttp.ClientSession stand-in for `async with session.get/post(...)`."""
    session = MagicMock()
    resp = _response(status, body)
    for method in (session.get, session.post):
        ctx = method.return_value
        ctx.__aenter__.return_value = resp
        ctx.__aexit__.return_value = False
        if exc is not None:
            method.side_effect = exc
    session.response = resp
    return session


@pytest.fixture
def make_session():
    return _session
