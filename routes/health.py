from flask import Blueprint, jsonify

from models import current_store

health_bp = Blueprint("health", __name__)


@health_bp.get("/health")
def health():
    return jsonify(status="ok", companies=len(current_store().snapshot)), 200
