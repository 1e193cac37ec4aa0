from quart import Blueprint, current_app, g, jsonify, request

from .schemas import LoginRequest, RegisterRequest
from .security import require_auth
from ..common.validation import parse_body

bp = Blueprint("auth", __name__, url_prefix="/api")


def _auth():
    return current_app.extensions["auth"]


@bp.post("/auth/register")
async def register():
    data = await request.get_json(force=True, silent=True)
    payload = parse_body(RegisterRequest, data, "All fields are required")
    return jsonify(await _auth().register(payload))


@bp.post("/auth/login")
async def login():
    data = await request.get_json(force=True, silent=True)
    payload = parse_body(LoginRequest, data, "Email and password are required")
    return jsonify(await _auth().login(payload))


@bp.get("/profile")
@require_auth
async def profile():
    return jsonify(await _auth().profile(g.merchant_id))
