"""
Booking ledger: an immutable snapshot of every company and its slots.

Operations never edit a snapshot in place. Each one returns a new Ledger
that shares every untouched Company and Slot with the old one, or raises a
LedgerError and leaves the caller holding the unchanged snapshot.
"""
import time
from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping, NamedTuple, Optional, Tuple

from models.company import Company, clean_company_fields
from models.errors import CompanyNotFound, SlotAlreadyBooked, SlotNotBooked
from models.slot import Occupant, Slot

SLOTS_PER_COMPANY = 3


class BookingRow(NamedTuple):
    company: Company
    slot: Slot
    slot_number: int


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Ledger:
    companies: Tuple[Company, ...] = ()

    def __post_init__(self):
        ids = [c.id for c in self.companies]
        if len(ids) != len(set(ids)):
            raise ValueError("company ids must be unique")

    @classmethod
    def from_companies(cls, companies: Iterable[Company]) -> "Ledger":
        return cls(tuple(companies))

    def __len__(self):
        return len(self.companies)

    def __iter__(self):
        return iter(self.companies)

    def get(self, company_id: str) -> Company:
        return self.companies[self._index(company_id)]

    def _index(self, company_id: str) -> int:
        for index, company in enumerate(self.companies):
            if company.id == company_id:
                return index
        raise CompanyNotFound(company_id=company_id)

    def _with_company(self, index: int, company: Company) -> "Ledger":
        return Ledger(self.companies[:index] + (company,) + self.companies[index + 1:])

    # ---------- queries ----------
    def filter(self, query: Optional[str] = "") -> Iterator[Company]:
        """Companies whose name, industry, location, website or description contain query."""
        return (c for c in self.companies if c.matches(query))

    @property
    def total_booked(self) -> int:
        return sum(1 for c in self.companies for s in c.slots if s.is_booked)

    def bookings(self) -> Iterator[BookingRow]:
        for company in self.companies:
            for number, slot in enumerate(company.slots, start=1):
                if slot.is_booked:
                    yield BookingRow(company, slot, number)

    # ---------- mutations (return a new snapshot) ----------
    def book_slot(self, company_id: str, slot_id: str, occupant: Occupant) -> "Ledger":
        index = self._index(company_id)
        company = self.companies[index]
        slot_index, slot = company.find_slot(slot_id)
        if slot.is_booked:
            raise SlotAlreadyBooked(company_id=company_id, slot_id=slot_id)
        return self._with_company(index, company.with_slot(slot_index, slot.booked_by(occupant)))

    def cancel_slot(self, company_id: str, slot_id: str) -> "Ledger":
        index = self._index(company_id)
        company = self.companies[index]
        slot_index, slot = company.find_slot(slot_id)
        if not slot.is_booked:
            raise SlotNotBooked(company_id=company_id, slot_id=slot_id)
        return self._with_company(index, company.with_slot(slot_index, slot.released()))

    def upsert_company(
        self,
        data: Mapping,
        company_id: Optional[str] = None,
        now_ms: Optional[int] = None,
        slot_count: int = SLOTS_PER_COMPANY,
    ) -> Tuple["Ledger", Company]:
        if company_id:
            index = self._index(company_id)
            updated = self.companies[index].merged(clean_company_fields(data, partial=True))
            return self._with_company(index, updated), updated

        fields = clean_company_fields(data)
        stamp = now_ms if now_ms is not None else _now_ms()
        taken = {c.id for c in self.companies}
        while f"c-{stamp}" in taken:
            stamp += 1

        company = Company(
            id=f"c-{stamp}",
            slots=tuple(Slot(id=f"s-{stamp}-{n}") for n in range(1, slot_count + 1)),
            **fields,
        )
        return Ledger(self.companies + (company,)), company

    def to_dict(self) -> dict:
        return {
            "companies": [c.to_dict() for c in self.companies],
            "total_booked": self.total_booked,
        }
