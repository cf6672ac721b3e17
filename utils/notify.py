from flask import current_app, jsonify


def notice(message: str, kind: str = "success", ttl_seconds=None) -> dict:
    """Transient toast payload; the client hides it after ttl_seconds."""
    if ttl_seconds is None:
        ttl_seconds = current_app.config.get("NOTICE_TTL_SECONDS", 5)
    return {"type": kind, "message": message, "ttl_seconds": ttl_seconds}


def error_response(message: str, status: int, **extra):
    return jsonify(error=message, notice=notice(message, kind="error"), **extra), status
