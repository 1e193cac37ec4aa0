import io

from werkzeug.datastructures import FileStorage

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _image(data=PNG_BYTES, filename="photo.png", content_type="image/png"):
    return {"image": FileStorage(io.BytesIO(data), filename=filename, content_type=content_type)}


async def test_upload_and_serve(client, app, register):
    headers = await register()
    resp = await client.post("/api/upload/image", files=_image(), headers=headers)
    assert resp.status_code == 200
    body = await resp.get_json()
    assert body["success"] is True
    assert body["filename"].endswith(".png")
    assert body["imagePath"] == f"/images/{body['filename']}"
    assert (app.extensions["media"].upload_dir / body["filename"]).read_bytes() == PNG_BYTES

    served = await client.get(body["imagePath"])
    assert served.status_code == 200
    assert await served.get_data() == PNG_BYTES


async def test_upload_requires_auth(client):
    resp = await client.post("/api/upload/image", files=_image())
    assert resp.status_code == 401


async def test_upload_without_file(client, register):
    headers = await register()
    resp = await client.post("/api/upload/image", form={"note": "nothing"}, headers=headers)
    assert resp.status_code == 400
    assert await resp.get_json() == {"error": "No image file provided"}


async def test_upload_rejects_non_images(client, register):
    headers = await register()
    resp = await client.post(
        "/api/upload/image", files=_image(b"%PDF-1.4", "doc.pdf", "application/pdf"), headers=headers
    )
    assert resp.status_code == 400
    assert await resp.get_json() == {"error": "Only image files are allowed!"}


async def test_upload_size_limit(client, register, settings):
    headers = await register()
    too_big = b"\x00" * (settings.MAX_IMAGE_BYTES + 1)
    resp = await client.post("/api/upload/image", files=_image(too_big), headers=headers)
    assert resp.status_code == 400
    assert await resp.get_json() == {"error": "File too large"}


async def test_upload_past_request_limit(client, register, settings):
    headers = await register()
    # larger than the whole request body allowance, not just the image limit
    oversized = b"\x00" * (settings.MAX_IMAGE_BYTES + 2 * 1024 * 1024)
    resp = await client.post("/api/upload/image", files=_image(oversized), headers=headers)
    assert resp.status_code == 400
    assert await resp.get_json() == {"error": "File too large"}


async def test_delete_image(client, app, register):
    headers = await register()
    body = await (await client.post("/api/upload/image", files=_image(), headers=headers)).get_json()

    resp = await client.delete(f"/api/upload/image/{body['filename']}", headers=headers)
    assert resp.status_code == 200
    assert await resp.get_json() == {"success": True}
    assert not (app.extensions["media"].upload_dir / body["filename"]).exists()

    resp = await client.delete(f"/api/upload/image/{body['filename']}", headers=headers)
    assert resp.status_code == 404
    assert await resp.get_json() == {"error": "Image not found"}


async def test_delete_image_rejects_unsafe_names(client, register):
    headers = await register()
    # sanitising ".hidden.png" drops the leading dot, so the name no longer matches
    resp = await client.delete("/api/upload/image/.hidden.png", headers=headers)
    assert resp.status_code == 400
    assert await resp.get_json() == {"error": "Invalid filename"}
