from datetime import date

from quart import Blueprint, Response, current_app, g, jsonify, request

from .schemas import OrderRequest, OrderStatusRequest
from ..auth.security import require_auth
from ..common.validation import parse_body

bp = Blueprint("orders", __name__, url_prefix="/api/orders")


def _orders():
    return current_app.extensions["orders"]


@bp.post("")
async def order_create():
    # public: customers are not logged in
    data = await request.get_json(force=True, silent=True)
    payload = parse_body(OrderRequest, data, "All fields are required")
    order_id = await _orders().place_order(payload)
    return jsonify({"message": "Order placed successfully", "orderId": order_id})


@bp.get("")
@require_auth
async def orders_list():
    status = None
    if request.args.get("status"):
        query = {"order_status": request.args["status"]}
        status = parse_body(OrderStatusRequest, query, "Order status is required").order_status
    return jsonify(await _orders().list_orders(g.merchant_id, status=status))


@bp.get("/stats")
@require_auth
async def orders_stats():
    return jsonify(await _orders().stats(g.merchant_id))


@bp.get("/export")
@require_auth
async def orders_export():
    body = await _orders().export_csv(g.merchant_id)
    filename = f"orders_{date.today().isoformat()}.csv"
    return Response(
        body,
        mimetype="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@bp.put("/<int:order_id>/status")
@require_auth
async def order_status_update(order_id: int):
    data = await request.get_json(force=True, silent=True)
    payload = parse_body(OrderStatusRequest, data, "Order status is required")
    return jsonify(await _orders().update_status(g.merchant_id, order_id, payload.order_status))
