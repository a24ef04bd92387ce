import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from core.errors import ApiError, ParseError
from modules.account_service import AccountDataService
from modules.bybit_client import BybitClient

# ------------------------- Fixtures ------------------------- #

@pytest.fixture
def fake_client():
    client = MagicMock()
    client.request = AsyncMock()
    return client


@pytest.fixture
def service(fake_client):
    return AccountDataService(fake_client, "UNIFIED")


def _envelope(items):
    return {"retCode": 0, "retMsg": "OK", "result": {"list": items}}

# ------------------------- get_balance ------------------------- #

@pytest.mark.asyncio
async def test_get_balance_end_to_end(make_session):
    session = make_session(body={"retCode": 0, "result": {"list": [{"totalEquity": "1234.56"}]}})
    client = BybitClient("key", "secret", session=session)

    balance = await AccountDataService(client, "UNIFIED").get_balance()

    assert balance == 1234.56
    assert str(session.get.call_args[0][0]).endswith("/account/wallet-balance?accountType=UNIFIED")


@pytest.mark.asyncio
async def test_get_balance_api_error(make_session):
    session = make_session(body={"retCode": 10001, "retMsg": "invalid signature"})
    client = BybitClient("key", "secret", session=session)

    with pytest.raises(ApiError) as info:
        await AccountDataService(client, "UNIFIED").get_balance()

    assert info.value == ApiError(10001, "invalid signature")


@pytest.mark.asyncio
async def test_get_balance_query(service, fake_client):
    fake_client.request.return_value = _envelope([{"totalEquity": "10"}])
    assert await service.get_balance() == 10.0
    fake_client.request.assert_awaited_once_with("account/wallet-balance", "accountType=UNIFIED")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "data",
    [
        {"retCode": 0, "result": {"list": []}},
        {"retCode": 0, "result": {}},
        {"retCode": 0},
    ],
)
async def test_get_balance_no_data(service, fake_client, data):
    fake_client.request.return_value = data
    with pytest.raises(ParseError, match="no data"):
        await service.get_balance()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "item",
    [{}, {"totalEquity": ""}, {"totalEquity": "abc"}, {"totalEquity": None}, "not-a-dict"],
)
async def test_get_balance_malformed_data(service, fake_client, item):
    fake_client.request.return_value = _envelope([item])
    with pytest.raises(ParseError, match="malformed data"):
        await service.get_balance()


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", ['{"totalEquity": 1' + "0" * 400 + "}", '{"totalEquity": "1e400"}'])
async def test_get_balance_out_of_range_is_malformed(service, fake_client, raw):
    fake_client.request.return_value = _envelope([json.loads(raw)])
    with pytest.raises(ParseError, match="malformed data"):
        await service.get_balance()

# ------------------------- positions / closed pnl ------------------------- #

@pytest.mark.asyncio
async def test_get_positions_returns_raw_items(service, fake_client):
    items = [
        {"symbol": "BTCUSDT", "side": "Buy", "size": "0.01", "unrealisedPnl": "1.5"},
        {"symbol": "ETHUSDT", "side": "", "size": "0", "unrealisedPnl": ""},
    ]
    fake_client.request.return_value = _envelope(items)

    result = await service.get_positions(10)

    assert result == items
    fake_client.request.assert_awaited_once_with(
        "position/list", "category=linear&settleCoin=USDT&limit=10"
    )


@pytest.mark.asyncio
async def test_get_closed_pnl_query_and_items(service, fake_client):
    items = [{"closedPnl": "10.5"}, {"closedPnl": "bad"}]
    fake_client.request.return_value = _envelope(items)

    result = await service.get_closed_pnl(100)

    assert result == items
    fake_client.request.assert_awaited_once_with("position/closed-pnl", "category=linear&limit=100")


@pytest.mark.asyncio
async def test_default_limits(service, fake_client):
    fake_client.request.return_value = _envelope([])
    await service.get_positions()
    await service.get_closed_pnl()
    queries = [call.args[1] for call in fake_client.request.await_args_list]
    assert queries == ["category=linear&settleCoin=USDT&limit=10", "category=linear&limit=100"]


@pytest.mark.asyncio
async def test_list_missing_is_parse_error(service, fake_client):
    fake_client.request.return_value = {"retCode": 0, "result": {"nextPageCursor": ""}}
    with pytest.raises(ParseError):
        await service.get_positions(5)


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", [0, -1, True, "10"])
async def test_invalid_limit(service, fake_client, limit):
    with pytest.raises(ValueError):
        await service.get_closed_pnl(limit)
    fake_client.request.assert_not_awaited()
