import pytest

from livesales.app import create_app


async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert (await resp.get_json())["status"] == "ok"
    assert resp.headers["X-Instance-ID"] == "test-1"
    assert resp.headers["Access-Control-Allow-Origin"] == "*"


async def test_index(client):
    resp = await client.get("/")
    assert await resp.get_json() == {"message": "Live Sales Platform API"}


async def test_metrics_exposed(client):
    await client.get("/health")
    resp = await client.get("/metrics")
    assert resp.status_code == 200
    text = await resp.get_data(as_text=True)
    assert "http_requests_total" in text
    assert "orders_placed_total" in text


async def test_unknown_route_is_json(client):
    resp = await client.get("/api/nope")
    assert resp.status_code == 404
    assert "error" in await resp.get_json()


async def test_wrong_method_is_json(client):
    resp = await client.patch("/api/orders")
    assert resp.status_code == 405
    assert "error" in await resp.get_json()


@pytest.mark.parametrize("env, has_stack", [("development", True), ("production", False)])
async def test_unexpected_error(settings, env, has_stack):
    settings.APP_ENV = env
    app = create_app(settings, redis=None)

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    async with app.test_app():
        resp = await app.test_client().get("/boom")
    assert resp.status_code == 500
    body = await resp.get_json()
    assert body["error"] == "Internal server error"
    assert ("stack" in body) is has_stack
    if has_stack:
        assert "kaboom" in body["stack"]


async def test_events_disabled_without_redis(settings):
    app = create_app(settings, redis=None)
    async with app.test_app():
        resp = await app.test_client().get("/api/events")
    assert resp.status_code == 503
