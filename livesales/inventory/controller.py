from quart import Blueprint, current_app, g, jsonify, request

from .schemas import ProductRequest
from ..auth.security import require_auth
from ..common.validation import parse_body

bp = Blueprint("inventory", __name__, url_prefix="/api/products")


def _catalog():
    return current_app.extensions["catalog"]


def absolute_image_url(image):
    if image and not image.startswith("http"):
        return f"{request.scheme}://{request.host}{image}"
    return image


@bp.get("")
@require_auth
async def products_list():
    return jsonify(await _catalog().list_products(g.merchant_id))


@bp.post("")
@require_auth
async def product_create():
    data = await request.get_json(force=True, silent=True)
    payload = parse_body(ProductRequest, data, "Name and price are required")
    return jsonify(await _catalog().create_product(g.merchant_id, payload))


@bp.get("/<int:product_id>")
async def product_detail(product_id: int):
    # public: backs the shareable product page
    product = await _catalog().get_product(product_id)
    product["image"] = absolute_image_url(product["image"])
    return jsonify(product)


@bp.put("/<int:product_id>")
@require_auth
async def product_update(product_id: int):
    data = await request.get_json(force=True, silent=True)
    payload = parse_body(ProductRequest, data, "Name and price are required")
    return jsonify(await _catalog().update_product(g.merchant_id, product_id, payload))


@bp.delete("/<int:product_id>")
@require_auth
async def product_delete(product_id: int):
    await _catalog().delete_product(g.merchant_id, product_id)
    return jsonify({"success": True, "message": "Product deleted successfully"})
