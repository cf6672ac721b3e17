import json
from flask import current_app, g, has_request_context, request


def _client_ip():
    if not has_request_context():
        return None
    return request.headers.get("X-Forwarded-For", request.remote_addr)


def log_event(action: str, entity=None, entity_id=None, metadata=None, user=None, level="info"):
    """
    Emit one structured line per domain event on the app logger.

    Occupant details never go in metadata; callers pass ids only.
    """
    if user is None and has_request_context():
        admin = getattr(g, "admin", None)
        user = admin.username if admin else None

    record = {
        "action": action,
        "user": user,
        "entity": entity,
        "entity_id": str(entity_id) if entity_id is not None else None,
        "ip": _client_ip(),
    }
    if metadata:
        record["metadata"] = metadata

    getattr(current_app.logger, level)("%s %s", action, json.dumps(record, sort_keys=True, default=str))
