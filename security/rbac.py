from functools import wraps
from flask import g

from utils.notify import error_response


def require_admin(fn):
    """
    Usage: @require_admin
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if getattr(g, "admin", None) is None:
            return error_response("Admin login required", 401)
        return fn(*args, **kwargs)
    return wrapper
