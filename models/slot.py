from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, Optional

from models.errors import InvalidOccupant

# Registration form captured when a slot is booked
REGISTRATION_FIELDS = (
    "companyName",
    "fullName",
    "fatherName",
    "motherName",
    "panNumber",
    "dob",
    "uanNumber",
    "permanentAddress",
    "offerDate",
    "joiningDate",
    "joiningCTC",
    "joiningDesignation",
    "hikeDate",
    "currentCTC",
    "currentDesignation",
    "resignationDate",
    "relivingDate",
    "pfRequired",
    "highestQualification",
    "yearOfPass",
    "technology",
    "bankName",
    "bankAccountNumber",
    "bankBranch",
    "bankIFSCCode",
    "gender",
    "marriageStatus",
)


def _clean(value) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@dataclass(frozen=True, eq=False)
class Occupant:
    """
    Who holds a booked slot. Compared by identity: two bookings never share
    an occupant record even when the submitted details are equal.
    """
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    details: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_payload(cls, data: Mapping, company_name: Optional[str] = None) -> "Occupant":
        data = data or {}
        if not isinstance(data, Mapping):
            raise InvalidOccupant("Booking details must be a JSON object")
        raw_details = data.get("registration") if isinstance(data.get("registration"), Mapping) else data

        details = {}
        for key in REGISTRATION_FIELDS:
            value = _clean(raw_details.get(key))
            if value is not None:
                details[key] = value
        if details and company_name and "companyName" not in details:
            details["companyName"] = company_name

        name = _clean(data.get("name")) or details.get("fullName")
        if not name:
            raise InvalidOccupant()

        return cls(
            name=name,
            email=_clean(data.get("email")),
            phone=_clean(data.get("phone")),
            details=MappingProxyType(details),
        )

    def to_dict(self, include_details: bool = True) -> dict:
        out = {"name": self.name, "email": self.email, "phone": self.phone}
        if include_details:
            out["registration"] = dict(self.details) or None
        return out


@dataclass(frozen=True)
class Slot:
    id: str
    is_booked: bool = False
    occupant: Optional[Occupant] = None

    def __post_init__(self):
        if self.is_booked != (self.occupant is not None):
            raise ValueError("occupant must be set exactly when the slot is booked")

    def booked_by(self, occupant: Occupant) -> "Slot":
        return replace(self, is_booked=True, occupant=occupant)

    def released(self) -> "Slot":
        return replace(self, is_booked=False, occupant=None)

    def to_dict(self, include_occupant: bool = True) -> dict:
        out = {"id": self.id, "is_booked": self.is_booked}
        if include_occupant:
            out["occupant"] = self.occupant.to_dict() if self.occupant else None
        return out
