class LedgerError(Exception):
    """Base for every rejected ledger operation. The snapshot is left untouched."""

    status = 400
    message = "Ledger operation rejected"

    def __init__(self, message=None, **context):
        self.message = message or self.message
        self.context = context
        super().__init__(self.message)


class CompanyNotFound(LedgerError, LookupError):
    status = 404
    message = "Company not found"


class SlotNotFound(LedgerError, LookupError):
    status = 404
    message = "Slot not found"


class SlotAlreadyBooked(LedgerError):
    status = 409
    message = "Slot already booked"


class SlotNotBooked(LedgerError):
    status = 409
    message = "Slot is not booked"


class InvalidCompany(LedgerError, ValueError):
    message = "Company details incomplete"


class InvalidOccupant(LedgerError, ValueError):
    message = "Name is required to book a slot"
