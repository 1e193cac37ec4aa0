import logging
import time
import traceback
from typing import Optional

from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from quart import Quart, jsonify, request
from redis.asyncio import Redis
from werkzeug.exceptions import HTTPException

from .auth.controller import bp as auth_bp
from .auth.service import AuthService
from .common.config import Settings, settings as default_settings
from .common.database import Database
from .common.errors import AppError
from .common.metrics import REQUEST_COUNT, REQUEST_LATENCY, endpoint_label
from .common.redis_client import close_redis, create_redis
from .inventory.controller import bp as inventory_bp
from .inventory.service import CatalogService
from .media.controller import bp as media_bp
from .media.service import MediaStore
from .orders.controller import bp as orders_bp
from .orders.service import OrderService
from .realtime.controller import bp as realtime_bp
from .realtime.events import StockEvents

log = logging.getLogger(__name__)

_REDIS_FROM_SETTINGS = object()


def create_app(settings: Optional[Settings] = None, redis: Optional[Redis] = _REDIS_FROM_SETTINGS) -> Quart:
    """Build the API app.

    ``redis`` overrides the client built from settings; pass ``None`` to run
    without stock events.
    """
    settings = settings or default_settings
    settings.warn_insecure_defaults()
    if redis is _REDIS_FROM_SETTINGS:
        redis = create_redis(settings)

    app = Quart(__name__)
    app.config["MAX_CONTENT_LENGTH"] = settings.MAX_IMAGE_BYTES + 1024 * 1024

    db = Database(settings.DB_URL)
    media = MediaStore(settings.UPLOAD_DIR, settings.MAX_IMAGE_BYTES)
    events = StockEvents(redis, settings.REDIS_STOCK_CHANNEL)
    app.extensions["settings"] = settings
    app.extensions["db"] = db
    app.extensions["media"] = media
    app.extensions["events"] = events
    app.extensions["auth"] = AuthService(db, settings)
    app.extensions["catalog"] = CatalogService(db, media, events)
    app.extensions["orders"] = OrderService(db, events)

    # Blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(inventory_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(media_bp)
    app.register_blueprint(realtime_bp)

    @app.before_request
    async def before_request():
        request._start_time = time.time()
        log.info(f"[Instance {settings.INSTANCE_ID}] {request.method} {request.path}")

    @app.after_request
    async def after_request(response):
        response.headers["Access-Control-Allow-Origin"] = settings.CORS_ORIGIN
        response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, PUT, DELETE, OPTIONS"
        response.headers["X-Instance-ID"] = settings.INSTANCE_ID
        try:
            if hasattr(request, "_start_time"):
                duration = time.time() - request._start_time
                endpoint = endpoint_label(request.path)
                REQUEST_LATENCY.labels(endpoint=endpoint).observe(duration)
                REQUEST_COUNT.labels(
                    method=request.method,
                    endpoint=endpoint,
                    status=str(response.status_code)
                ).inc()
        except Exception as e:
            log.error(f"Error recording metrics: {e}")
        return response

    @app.errorhandler(AppError)
    async def handle_app_error(err: AppError):
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    async def handle_http_error(err: HTTPException):
        return jsonify({"error": err.description}), err.code

    @app.errorhandler(Exception)
    async def handle_unexpected(err: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.path)
        body = {"error": "Internal server error"}
        if not settings.is_production:
            body["stack"] = "".join(traceback.format_exception(type(err), err, err.__traceback__))
        return jsonify(body), 500

    @app.get("/metrics")
    async def metrics():
        data = generate_latest()
        return app.response_class(data, mimetype=CONTENT_TYPE_LATEST)

    @app.get("/health")
    async def health():
        return jsonify({"status": "ok", "message": "Server is running"})

    @app.get("/")
    async def index():
        return jsonify({"message": "Live Sales Platform API"})

    @app.before_serving
    async def startup():
        logging.basicConfig(level=logging.INFO)
        log.info("Initializing database...")
        await db.init()
        media.ensure_dir()
        log.info("Database ready. Environment: %s", settings.APP_ENV)

    @app.after_serving
    async def shutdown():
        await close_redis(events.redis)
        await db.dispose()
        log.info("Shutdown complete.")

    return app
