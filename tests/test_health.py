from aiohttp.test_utils import make_mocked_request

from meteobot.health import HEALTH_RESPONSE, create_health_app, handle_health


async def test_health_handler_returns_static_text():
    response = await handle_health(make_mocked_request("GET", "/"))

    assert response.status == 200
    assert response.text == HEALTH_RESPONSE


async def test_health_app_matches_any_path():
    app = create_health_app()

    for path in ("/", "/healthz", "/some/deep/path"):
        match = await app.router.resolve(make_mocked_request("GET", path))
        assert match.handler is handle_health
