from dataclasses import dataclass, replace
from typing import Mapping, Optional, Tuple
from urllib.parse import quote_plus

from models.errors import InvalidCompany, SlotNotFound
from models.slot import Slot

# Editable descriptive fields, all required when a company is created
COMPANY_FIELDS = ("name", "industry", "location", "website", "established", "description")

# Fields matched by the directory search box
SEARCH_FIELDS = ("name", "industry", "location", "website", "description")


def clean_company_fields(data: Mapping, partial: bool = False) -> dict:
    """
    Pick the descriptive fields out of a request payload.

    A new company needs every field; an edit (partial=True) only needs the
    fields it sends. Either way a field that is sent must not be blank.
    """
    data = data or {}
    if not isinstance(data, Mapping):
        raise InvalidCompany("Company details must be a JSON object")
    fields = {}
    missing = []
    for key in COMPANY_FIELDS:
        if key not in data or data.get(key) is None:
            if not partial:
                missing.append(key)
            continue
        value = str(data.get(key)).strip()
        if not value:
            missing.append(key)
            continue
        fields[key] = value

    if missing:
        raise InvalidCompany(f"Required fields missing: {', '.join(missing)}", fields=missing)
    return fields


@dataclass(frozen=True)
class Company:
    id: str
    name: str
    industry: str
    location: str
    website: str
    established: str
    description: str
    slots: Tuple[Slot, ...] = ()

    @property
    def available_slots(self) -> int:
        return sum(1 for s in self.slots if not s.is_booked)

    @property
    def website_url(self) -> str:
        url = (self.website or "").strip()
        if not url:
            return "#"
        return url if url.startswith("http") else f"https://{url}"

    @property
    def maps_url(self) -> str:
        return f"https://www.google.com/maps/search/?api=1&query={quote_plus(self.location)}"

    def find_slot(self, slot_id: str) -> Tuple[int, Slot]:
        for index, slot in enumerate(self.slots):
            if slot.id == slot_id:
                return index, slot
        raise SlotNotFound(company_id=self.id, slot_id=slot_id)

    def with_slot(self, index: int, slot: Slot) -> "Company":
        slots = self.slots[:index] + (slot,) + self.slots[index + 1:]
        return replace(self, slots=slots)

    def merged(self, fields: Mapping) -> "Company":
        # slots are never part of an edit
        return replace(self, **{k: v for k, v in fields.items() if k in COMPANY_FIELDS})

    def matches(self, query: Optional[str]) -> bool:
        if not query:
            return True
        needle = query.lower()
        return any(needle in (getattr(self, f) or "").lower() for f in SEARCH_FIELDS)

    def to_dict(self, include_slots: bool = True, include_occupants: bool = True) -> dict:
        out = {
            "id": self.id,
            "name": self.name,
            "industry": self.industry,
            "location": self.location,
            "website": self.website,
            "website_url": self.website_url,
            "maps_url": self.maps_url,
            "established": self.established,
            "description": self.description,
            "total_slots": len(self.slots),
            "available_slots": self.available_slots,
        }
        if include_slots:
            out["slots"] = [s.to_dict(include_occupant=include_occupants) for s in self.slots]
        return out
