async def test_create_then_read_back(client, register, create_product):
    headers = await register()
    created = await create_product(
        headers,
        name="Silk Scarf",
        description="Hand-dyed",
        price=450.5,
        size="Free",
        color="Teal",
        image="/images/scarf.png",
        stock_quantity=7,
    )
    resp = await client.get("/api/products", headers=headers)
    [listed] = await resp.get_json()
    for key in ("name", "description", "price", "size", "color", "image", "stock_quantity"):
        assert listed[key] == created[key]
    assert listed["name"] == "Silk Scarf"
    assert listed["price"] == 450.5
    assert listed["stock_quantity"] == 7
    assert listed["id"] == created["id"]


async def test_create_defaults_stock_to_zero(register, create_product):
    headers = await register()
    product = await create_product(headers, stock_quantity=None, size="", color=None)
    assert product["stock_quantity"] == 0
    assert product["size"] is None
    assert product["color"] is None


async def test_create_requires_name_and_price(client, register):
    headers = await register()
    resp = await client.post("/api/products", json={"name": "No price"}, headers=headers)
    assert resp.status_code == 400
    assert await resp.get_json() == {"error": "Name and price are required"}


async def test_create_rejects_negative_price(client, register):
    headers = await register()
    resp = await client.post("/api/products", json={"name": "Bad", "price": -1}, headers=headers)
    assert resp.status_code == 400
    assert (await resp.get_json())["error"].startswith("price")


async def test_create_rejects_negative_stock(client, register):
    headers = await register()
    resp = await client.post(
        "/api/products", json={"name": "Bad", "price": 1, "stock_quantity": -3}, headers=headers
    )
    assert resp.status_code == 400


async def test_create_rejects_unstorable_stock(client, register):
    headers = await register()
    resp = await client.post(
        "/api/products", json={"name": "Bad", "price": 1, "stock_quantity": 10**20}, headers=headers
    )
    assert resp.status_code == 400
    assert (await resp.get_json())["error"].startswith("stock_quantity")


async def test_free_product_allowed(register, create_product):
    headers = await register()
    product = await create_product(headers, price=0)
    assert product["price"] == 0


async def test_products_require_auth(client):
    resp = await client.get("/api/products")
    assert resp.status_code == 401
    resp = await client.post("/api/products", json={"name": "x", "price": 1})
    assert resp.status_code == 401


async def test_list_newest_first(client, register, create_product):
    headers = await register()
    first = await create_product(headers, name="First")
    second = await create_product(headers, name="Second")
    resp = await client.get("/api/products", headers=headers)
    ids = [p["id"] for p in await resp.get_json()]
    assert ids == [second["id"], first["id"]]


async def test_public_product_page_rewrites_image(client, register, create_product):
    headers = await register()
    product = await create_product(headers, image="/images/mug.png")
    resp = await client.get(f"/api/products/{product['id']}")
    assert resp.status_code == 200
    body = await resp.get_json()
    assert body["image"] == "http://localhost/images/mug.png"


async def test_public_product_keeps_absolute_image(client, register, create_product):
    headers = await register()
    product = await create_product(headers, image="https://cdn.example.org/mug.png")
    body = await (await client.get(f"/api/products/{product['id']}")).get_json()
    assert body["image"] == "https://cdn.example.org/mug.png"


async def test_public_product_not_found(client):
    resp = await client.get("/api/products/4242")
    assert resp.status_code == 404
    assert await resp.get_json() == {"error": "Product not found"}


async def test_update_replaces_every_field(client, register, create_product):
    headers = await register()
    product = await create_product(headers, description="old", size="L", color="Red", stock_quantity=5)
    resp = await client.put(
        f"/api/products/{product['id']}", json={"name": "Mug v2", "price": 120}, headers=headers
    )
    assert resp.status_code == 200
    body = await resp.get_json()
    assert body["name"] == "Mug v2"
    assert body["price"] == 120
    # omitted fields are reset, not kept
    assert body["description"] is None
    assert body["size"] is None
    assert body["color"] is None
    assert body["stock_quantity"] == 0
    assert body["updated_at"] >= product["updated_at"]


async def test_update_requires_name_and_price(client, register, create_product):
    headers = await register()
    product = await create_product(headers)
    resp = await client.put(f"/api/products/{product['id']}", json={"name": "x"}, headers=headers)
    assert resp.status_code == 400


async def test_ownership_isolation(client, register, create_product):
    alice = await register(email="alice@shop.io")
    bob = await register(email="bob@shop.io")
    product = await create_product(alice)

    resp = await client.put(f"/api/products/{product['id']}", json={"name": "Mine", "price": 1}, headers=bob)
    assert resp.status_code == 404
    assert await resp.get_json() == {"error": "Product not found or unauthorized"}

    resp = await client.delete(f"/api/products/{product['id']}", headers=bob)
    assert resp.status_code == 404
    assert await resp.get_json() == {"error": "Product not found or unauthorized"}

    resp = await client.get("/api/products", headers=bob)
    assert await resp.get_json() == []

    resp = await client.get("/api/products", headers=alice)
    [still_there] = await resp.get_json()
    assert still_there["name"] == "Mug"


async def test_missing_product_looks_like_foreign_product(client, register):
    headers = await register()
    resp = await client.delete("/api/products/999", headers=headers)
    assert resp.status_code == 404
    assert await resp.get_json() == {"error": "Product not found or unauthorized"}


async def test_out_of_range_product_ids_are_not_found(client, register):
    headers = await register()
    huge = 10**20

    resp = await client.get(f"/api/products/{huge}")
    assert resp.status_code == 404
    assert await resp.get_json() == {"error": "Product not found"}

    resp = await client.put(f"/api/products/{huge}", json={"name": "Mug", "price": 1}, headers=headers)
    assert resp.status_code == 404
    assert await resp.get_json() == {"error": "Product not found or unauthorized"}

    resp = await client.delete(f"/api/products/{huge}", headers=headers)
    assert resp.status_code == 404
    assert await resp.get_json() == {"error": "Product not found or unauthorized"}


async def test_delete_cascades_orders_and_removes_image(client, app, register, create_product, place_order):
    headers = await register()
    media = app.extensions["media"]
    media.ensure_dir()
    (media.upload_dir / "mug.png").write_bytes(b"png")
    product = await create_product(headers, image="/images/mug.png")
    resp = await place_order(product["id"])
    assert resp.status_code == 200

    resp = await client.delete(f"/api/products/{product['id']}", headers=headers)
    assert resp.status_code == 200
    assert await resp.get_json() == {"success": True, "message": "Product deleted successfully"}

    assert not (media.upload_dir / "mug.png").exists()
    assert await (await client.get("/api/orders", headers=headers)).get_json() == []
    assert (await client.get(f"/api/products/{product['id']}")).status_code == 404


async def test_delete_succeeds_when_image_file_missing(client, register, create_product):
    headers = await register()
    product = await create_product(headers, image="/images/never-uploaded.png")
    resp = await client.delete(f"/api/products/{product['id']}", headers=headers)
    assert resp.status_code == 200
