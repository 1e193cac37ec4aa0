from quart import Blueprint, current_app, jsonify, request, send_from_directory
from werkzeug.exceptions import RequestEntityTooLarge

from ..auth.security import require_auth
from ..common.errors import ValidationError

bp = Blueprint("media", __name__)


def _media():
    return current_app.extensions["media"]


@bp.errorhandler(RequestEntityTooLarge)
async def upload_too_large(err):
    # bodies past MAX_CONTENT_LENGTH never reach MediaStore.save
    too_large = ValidationError("File too large")
    return jsonify(too_large.to_dict()), too_large.status_code


@bp.post("/api/upload/image")
@require_auth
async def upload_image():
    files = await request.files
    result = _media().save(files.get("image"))
    return jsonify(result)


@bp.delete("/api/upload/image/<filename>")
@require_auth
async def delete_image(filename: str):
    _media().delete(filename)
    return jsonify({"success": True})


@bp.get("/images/<path:filename>")
async def serve_image(filename: str):
    return await send_from_directory(_media().upload_dir, filename)
