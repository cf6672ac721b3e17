from flask import Blueprint, request, jsonify

from models import Occupant, SlotAlreadyBooked, current_store
from utils.audit import log_event
from utils.notify import notice

booking_bp = Blueprint("booking", __name__)


def _company_summary(company):
    return company.to_dict(include_slots=False)


# ---------- PUBLIC: directory & search ----------
@booking_bp.get("/companies")
def list_companies():
    query = request.args.get("q", "")
    ledger = current_store().snapshot
    rows = [_company_summary(c) for c in ledger.filter(query)]
    return jsonify(
        query=query,
        count=len(rows),
        companies=rows,
        total_booked=ledger.total_booked,
    ), 200


@booking_bp.get("/companies/<company_id>")
def get_company(company_id: str):
    company = current_store().snapshot.get(company_id)
    # occupant details stay out of the public detail view
    return jsonify(company.to_dict(include_occupants=False)), 200


# ---------- PUBLIC: book slot (DOUBLE-BOOKING SAFE) ----------
@booking_bp.post("/companies/<company_id>/slots/<slot_id>/book")
def book_slot(company_id: str, slot_id: str):
    data = request.get_json(silent=True) or {}
    store = current_store()

    company = store.snapshot.get(company_id)
    occupant = Occupant.from_payload(data, company_name=company.name)

    try:
        ledger = store.book(company_id, slot_id, occupant)
    except SlotAlreadyBooked:
        log_event("BOOKING_FAIL_ALREADY_BOOKED", entity="slot", entity_id=slot_id, level="warning")
        raise
    company = ledger.get(company_id)
    _, slot = company.find_slot(slot_id)

    log_event("BOOKING_CREATE", entity="slot", entity_id=slot_id, metadata={"company_id": company_id})
    return jsonify(
        company_id=company_id,
        slot=slot.to_dict(include_occupant=False),
        available_slots=company.available_slots,
        total_booked=ledger.total_booked,
        notice=notice(f"Successfully booked a slot at {company.name} for {occupant.name}!"),
    ), 201


# ---------- PUBLIC: cancel booking ----------
@booking_bp.post("/companies/<company_id>/slots/<slot_id>/cancel")
def cancel_slot(company_id: str, slot_id: str):
    ledger = current_store().cancel(company_id, slot_id)
    company = ledger.get(company_id)

    log_event("BOOKING_CANCEL", entity="slot", entity_id=slot_id, metadata={"company_id": company_id})
    return jsonify(
        company_id=company_id,
        slot_id=slot_id,
        available_slots=company.available_slots,
        total_booked=ledger.total_booked,
        notice=notice("Booking cancelled successfully."),
    ), 200


# ---------- PUBLIC: booking history ----------
@booking_bp.get("/bookings")
def list_bookings():
    ledger = current_store().snapshot
    rows = [
        {
            "company_id": row.company.id,
            "company_name": row.company.name,
            "company_industry": row.company.industry,
            "slot_id": row.slot.id,
            "slot_number": row.slot_number,
            "occupant": row.slot.occupant.to_dict(include_details=False),
            "status": "CONFIRMED",
        }
        for row in ledger.bookings()
    ]
    return jsonify(total=len(rows), bookings=rows), 200


@booking_bp.get("/bookings/count")
def booking_count():
    return jsonify(total_booked=current_store().snapshot.total_booked), 200
