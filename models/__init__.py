from .errors import (
    LedgerError,
    CompanyNotFound,
    SlotNotFound,
    SlotAlreadyBooked,
    SlotNotBooked,
    InvalidCompany,
    InvalidOccupant,
)
from .slot import Occupant, Slot, REGISTRATION_FIELDS
from .company import Company, COMPANY_FIELDS
from .ledger import Ledger, BookingRow, SLOTS_PER_COMPANY
from .store import LedgerStore, current_store
