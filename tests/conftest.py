import fakeredis.aioredis
import pytest

from livesales.app import create_app
from livesales.common.config import Settings


@pytest.fixture
def settings(tmp_path):
    return Settings(
        APP_ENV="testing",
        DB_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        JWT_SECRET="test-secret",
        JWT_EXPIRES_SECONDS=3600,
        UPLOAD_DIR=str(tmp_path / "uploads"),
        MAX_IMAGE_BYTES=4096,
        REDIS_ENABLED=False,
        INSTANCE_ID="test-1",
    )


@pytest.fixture
def redis():
    return fakeredis.aioredis.FakeRedis(decode_responses=True)


@pytest.fixture
async def app(settings, redis):
    app = create_app(settings, redis=redis)
    async with app.test_app():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    """Register a merchant over HTTP and return its bearer headers."""

    async def _register(email="owner@shop.io", password="s3cret", **extra):
        body = {"firstName": "Asha", "lastName": "Rao", "email": email, "password": password}
        body.update(extra)
        resp = await client.post("/api/auth/register", json=body)
        assert resp.status_code == 200, await resp.get_data(as_text=True)
        return bearer((await resp.get_json())["token"])

    return _register


@pytest.fixture
def create_product(client):
    async def _create(headers, **fields):
        body = {"name": "Mug", "price": 100, "stock_quantity": 2}
        body.update(fields)
        resp = await client.post("/api/products", json=body, headers=headers)
        assert resp.status_code == 200, await resp.get_data(as_text=True)
        return await resp.get_json()

    return _create


@pytest.fixture
def place_order(client):
    async def _place(product_id, **fields):
        body = {
            "product_id": product_id,
            "customer_name": "Meera",
            "customer_phone": "9876543210",
            "delivery_address": "12 MG Road, Pune",
        }
        body.update(fields)
        return await client.post("/api/orders", json=body)

    return _place
