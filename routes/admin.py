from flask import Blueprint, jsonify, g, request

from models import current_store
from security.rbac import require_admin
from utils.audit import log_event
from utils.notify import notice

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")


@admin_bp.get("/dashboard")
@require_admin
def dashboard():
    ledger = current_store().snapshot
    total_slots = sum(len(c.slots) for c in ledger)
    log_event("ADMIN_DASHBOARD_VIEW")
    return jsonify(
        admin=g.admin.username,
        stats={
            "companies": len(ledger),
            "slots": total_slots,
            "bookings": ledger.total_booked,
            "available": total_slots - ledger.total_booked,
        },
    ), 200


# ---------- ADMIN: add / edit companies ----------
@admin_bp.post("/companies")
@require_admin
def create_company():
    data = request.get_json(silent=True) or {}
    _, company = current_store().upsert(data)

    log_event("COMPANY_CREATE", entity="company", entity_id=company.id)
    return jsonify(
        company=company.to_dict(),
        notice=notice("Company added successfully"),
    ), 201


@admin_bp.route("/companies/<company_id>", methods=["PUT", "PATCH"])
@require_admin
def update_company(company_id: str):
    data = request.get_json(silent=True) or {}
    _, company = current_store().upsert(data, company_id=company_id)

    log_event("COMPANY_UPDATE", entity="company", entity_id=company.id, metadata={"fields": sorted(data)})
    return jsonify(
        company=company.to_dict(),
        notice=notice("Company updated successfully"),
    ), 200


# ---------- ADMIN: bookings with registration details ----------
@admin_bp.get("/bookings")
@require_admin
def admin_bookings():
    ledger = current_store().snapshot
    log_event("ADMIN_BOOKINGS_VIEW")
    return jsonify([
        {
            "company_id": row.company.id,
            "company_name": row.company.name,
            "slot_id": row.slot.id,
            "slot_number": row.slot_number,
            "occupant": row.slot.occupant.to_dict(),
        }
        for row in ledger.bookings()
    ]), 200
