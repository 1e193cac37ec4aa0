import json
from contextlib import aclosing

from quart import Blueprint, Response, current_app, jsonify

bp = Blueprint("realtime", __name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
    "Connection": "keep-alive",
}


@bp.get("/api/events")
async def sse_events():
    events = current_app.extensions["events"]
    if not events.enabled:
        return jsonify({"error": "Live stock updates are disabled"}), 503

    async def frames():
        # Advise client on retry
        yield "retry: 3000\n\n"
        async with aclosing(events.listen()) as updates:
            async for update in updates:
                if update is None:
                    # Keep-alive to prevent closes by proxies
                    yield ": keep-alive\n\n"
                else:
                    yield f"event: stock\ndata: {json.dumps(update)}\n\n"

    return Response(frames(), mimetype="text/event-stream", headers=SSE_HEADERS)
