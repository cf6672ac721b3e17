from flask import g
from security.session import get_session_from_request


def load_current_admin():
    # g.admin is the live AdminSession, or None for anonymous visitors
    g.admin = get_session_from_request()
