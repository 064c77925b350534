import asyncio

import aiohttp
import pytest

from meteobot.weather import NotFoundError, ProviderError

from conftest import make_client, utc


CURRENT_OK = {
    "name": "Київ",
    "main": {"temp": 4.6, "humidity": 81},
    "weather": [{"main": "Clouds", "description": "хмарно"}],
}

GEO_OK = [{"name": "Kyiv", "lat": 50.45, "lon": 30.52}]

FORECAST_OK = {
    "list": [
        {"dt": 1792303200, "main": {"temp": 5.0}, "weather": [{"description": "дощ"}]},
        {"dt": 1792314000, "main": {"temp": 6.5}, "weather": [{"description": "хмарно"}]},
    ]
}


async def test_fetch_current_parses_snapshot():
    client = make_client((200, CURRENT_OK))

    snapshot = await client.fetch_current("Kyiv")

    assert snapshot.city == "Київ"
    assert snapshot.temperature == 4.6
    assert snapshot.humidity == 81
    assert snapshot.condition == "Clouds"
    assert snapshot.description == "хмарно"


async def test_fetch_current_sends_city_units_and_language():
    client = make_client((200, CURRENT_OK))

    await client.fetch_current("Kyiv")

    url, params = client._session.requests[0]
    assert url.endswith("/data/2.5/weather")
    assert params == {"q": "Kyiv", "appid": "test-key", "units": "metric", "lang": "ua"}


async def test_fetch_current_empty_conditions_raises():
    client = make_client((200, {"name": "Kyiv", "main": {"temp": 1}, "weather": []}))

    with pytest.raises(ProviderError):
        await client.fetch_current("Kyiv")


async def test_fetch_current_bad_json_raises():
    client = make_client((200, "<html>oops</html>"))

    with pytest.raises(ProviderError):
        await client.fetch_current("Kyiv")


async def test_fetch_current_not_found_status_raises():
    client = make_client((404, {"cod": "404", "message": "city not found"}))

    with pytest.raises(ProviderError):
        await client.fetch_current("Atlantis")


async def test_fetch_current_transport_error_raises():
    client = make_client(aiohttp.ClientConnectionError("refused"))

    with pytest.raises(ProviderError):
        await client.fetch_current("Kyiv")


async def test_fetch_current_timeout_raises():
    client = make_client(asyncio.TimeoutError())

    with pytest.raises(ProviderError):
        await client.fetch_current("Kyiv")


async def test_fetch_current_timeout_while_reading_body_raises():
    client = make_client((200, asyncio.TimeoutError()))

    with pytest.raises(ProviderError):
        await client.fetch_current("Kyiv")


async def test_fetch_current_undecodable_body_raises():
    client = make_client((200, b'{"name": "\xff"}'))

    with pytest.raises(ProviderError):
        await client.fetch_current("Kyiv")


async def test_fetch_forecast_geocodes_then_fetches():
    client = make_client((200, GEO_OK), (200, FORECAST_OK))

    entries = await client.fetch_forecast("Kyiv")

    geo_url, geo_params = client._session.requests[0]
    forecast_url, forecast_params = client._session.requests[1]
    assert geo_url.endswith("/geo/1.0/direct")
    assert geo_params["q"] == "Kyiv"
    assert geo_params["limit"] == 1
    assert forecast_url.endswith("/data/2.5/forecast")
    assert (forecast_params["lat"], forecast_params["lon"]) == (50.45, 30.52)

    assert [e.temperature for e in entries] == [5.0, 6.5]
    assert entries[0].timestamp == utc(2026, 10, 18, 6, 0)
    assert entries[0].description == "дощ"


async def test_fetch_forecast_unknown_city_raises_not_found():
    client = make_client((200, []))

    with pytest.raises(NotFoundError):
        await client.fetch_forecast("Atlantis")

    assert len(client._session.requests) == 1


async def test_fetch_forecast_bad_json_is_empty():
    client = make_client((200, GEO_OK), (200, "not json"))

    assert await client.fetch_forecast("Kyiv") == []


async def test_fetch_forecast_skips_malformed_items():
    body = {"list": [
        {"dt": 1792303200, "main": {"temp": 5.0}, "weather": []},
        {"main": {"temp": 5.0}, "weather": [{"description": "дощ"}]},
        FORECAST_OK["list"][1],
    ]}
    client = make_client((200, GEO_OK), (200, body))

    entries = await client.fetch_forecast("Kyiv")

    assert [e.description for e in entries] == ["хмарно"]


async def test_fetch_forecast_error_status_raises():
    client = make_client((200, GEO_OK), (500, "server error"))

    with pytest.raises(ProviderError):
        await client.fetch_forecast("Kyiv")


async def test_close_closes_session():
    client = make_client()
    session = client._session

    await client.close()

    assert session.closed


async def test_fetch_forecast_timeout_raises():
    client = make_client((200, GEO_OK), asyncio.TimeoutError())

    with pytest.raises(ProviderError):
        await client.fetch_forecast("Kyiv")


async def test_geocode_timeout_raises():
    client = make_client(asyncio.TimeoutError())

    with pytest.raises(ProviderError):
        await client.fetch_forecast("Kyiv")


async def test_geocode_undecodable_body_is_not_found():
    client = make_client((200, b"\xff\xfe"))

    with pytest.raises(NotFoundError):
        await client.fetch_forecast("Kyiv")


async def test_fetch_forecast_undecodable_body_is_empty():
    client = make_client((200, GEO_OK), (200, b"\xff\xfe"))

    assert await client.fetch_forecast("Kyiv") == []
