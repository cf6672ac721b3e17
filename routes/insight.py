import secrets

from flask import Blueprint, current_app, jsonify, request

from models import current_store

insight_bp = Blueprint("insight", __name__, url_prefix="/insight")

VIEWER_ID_MAX_LENGTH = 64


def _panel():
    return current_app.extensions["insight_panel"]


def _cookie_name():
    return current_app.config.get("VIEWER_COOKIE_NAME", "slotdesk_viewer")


def _viewer_id():
    raw = request.cookies.get(_cookie_name()) or ""
    if 0 < len(raw) <= VIEWER_ID_MAX_LENGTH:
        return raw
    return None


def _remember_viewer(resp, viewer):
    resp.set_cookie(
        _cookie_name(),
        viewer,
        httponly=True,
        secure=current_app.config.get("SESSION_COOKIE_SECURE", False),
        samesite=current_app.config.get("SESSION_COOKIE_SAMESITE", "Lax"),
        path="/",
    )
    return resp


@insight_bp.post("/select/<company_id>")
def select_company(company_id: str):
    company = current_store().snapshot.get(company_id)
    viewer = _viewer_id()
    is_new_viewer = viewer is None
    if is_new_viewer:
        viewer = secrets.token_urlsafe(16)

    panel = _panel()
    # fire and forget; GET /insight polls for the text
    panel.select(company.id, company.name, company.industry, viewer=viewer)
    resp = jsonify(panel.state(viewer))
    if is_new_viewer:
        _remember_viewer(resp, viewer)
    return resp, 202


@insight_bp.delete("/select")
def clear_selection():
    viewer = _viewer_id()
    panel = _panel()
    if viewer:
        panel.clear(viewer)
    return jsonify(panel.state(viewer)), 200


@insight_bp.get("")
def current_insight():
    return jsonify(_panel().state(_viewer_id())), 200
