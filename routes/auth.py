from flask import Blueprint, request, jsonify, current_app, g

from security.credentials import Credentials
from security.csrf import clear_csrf_token, issue_csrf_token
from security.rbac import require_admin
from security.session import create_session, revoke_all_sessions, revoke_session
from utils.audit import log_event
from utils.notify import error_response, notice

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


def _set_cookie(resp, name, value, max_age):
    resp.set_cookie(
        name,
        value,
        httponly=True,
        secure=current_app.config.get("SESSION_COOKIE_SECURE", False),
        samesite=current_app.config.get("SESSION_COOKIE_SAMESITE", "Lax"),
        max_age=max_age,
        path="/",
    )


# ---------- Stage 1: sign in ----------
@auth_bp.post("/signin")
def signin():
    creds = Credentials.from_payload(request.get_json(silent=True))
    if not creds.complete:
        return error_response("Please enter both username and password", 400)

    ttl = current_app.config.get("SIGNIN_TICKET_SECONDS", 300)
    ticket = current_app.extensions["signin_tickets"].issue(creds, ttl)

    log_event("SIGNIN_COMPLETE", user=creds.username)
    resp = jsonify(
        next="login",
        notice=notice("Sign in is completed", ttl_seconds=current_app.config.get("SIGNIN_NOTICE_TTL_SECONDS", 2)),
    )
    _set_cookie(resp, current_app.config.get("SIGNIN_COOKIE_NAME", "slotdesk_signin"), ticket, ttl)
    return resp, 200


# ---------- Stage 2: login ----------
@auth_bp.post("/login")
def login():
    signin_cookie = current_app.config.get("SIGNIN_COOKIE_NAME", "slotdesk_signin")
    tickets = current_app.extensions["signin_tickets"]
    raw_ticket = request.cookies.get(signin_cookie)

    pending = tickets.peek(raw_ticket)
    if pending is None:
        return error_response("Sign in first", 409)

    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return error_response("Request body must be a JSON object", 400)
    # Credentials may be re-entered; otherwise the signed-in pair is reused
    creds = Credentials.from_payload(data) if (data.get("username") or data.get("password")) else pending

    verifier = current_app.extensions["credential_verifier"]
    if not verifier.verify(creds):
        log_event("LOGIN_FAIL", user=creds.username or None, level="warning")
        return error_response("Invalid credentials", 401)

    tickets.consume(raw_ticket)

    # Rotate: one live session per admin name
    revoked_count = revoke_all_sessions(creds.username)
    raw_token = create_session(creds.username)

    resp = jsonify(
        username=creds.username,
        is_admin=True,
        notice=notice(f"Welcome back, {creds.username}!"),
    )
    _set_cookie(
        resp,
        current_app.config.get("AUTH_COOKIE_NAME", "slotdesk_session"),
        raw_token,
        current_app.config.get("SESSION_LIFETIME_SECONDS", 8 * 60 * 60),
    )
    resp.delete_cookie(signin_cookie, path="/")
    resp = issue_csrf_token(resp)

    log_event("LOGIN_SUCCESS", user=creds.username, metadata={"revoked_sessions": revoked_count})
    return resp, 200


@auth_bp.get("/me")
@require_admin
def me():
    return jsonify(username=g.admin.username, is_admin=True), 200


@auth_bp.post("/logout")
@require_admin
def logout():
    cookie_name = current_app.config.get("AUTH_COOKIE_NAME", "slotdesk_session")
    revoke_session(request.cookies.get(cookie_name))
    log_event("LOGOUT")

    resp = jsonify(notice=notice("Logged out successfully"))
    resp.delete_cookie(cookie_name, path="/")
    return clear_csrf_token(resp), 200
