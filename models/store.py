import threading
from typing import Iterable, Optional

from flask import current_app

from models.company import Company
from models.ledger import SLOTS_PER_COMPANY, Ledger
from models.slot import Occupant


class LedgerStore:
    """
    Owns the current ledger snapshot for one app.

    Every mutation runs the pure ledger operation under a lock and swaps the
    snapshot only if it succeeds, so booking is a check-and-set even when
    requests are served from several threads.
    """

    def __init__(self, app=None):
        self._lock = threading.Lock()
        self._ledger = Ledger()
        self.slot_count = SLOTS_PER_COMPANY
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        from utils.seed import seed_companies

        self.slot_count = app.config.get("SLOTS_PER_COMPANY", SLOTS_PER_COMPANY)
        app.extensions["ledger_store"] = self
        seed_companies(self)

    @property
    def snapshot(self) -> Ledger:
        return self._ledger

    def reset(self, companies: Iterable[Company] = ()) -> Ledger:
        with self._lock:
            self._ledger = Ledger.from_companies(companies)
            return self._ledger

    def book(self, company_id: str, slot_id: str, occupant: Occupant) -> Ledger:
        with self._lock:
            self._ledger = self._ledger.book_slot(company_id, slot_id, occupant)
            return self._ledger

    def cancel(self, company_id: str, slot_id: str) -> Ledger:
        with self._lock:
            self._ledger = self._ledger.cancel_slot(company_id, slot_id)
            return self._ledger

    def upsert(self, data, company_id: Optional[str] = None, now_ms: Optional[int] = None):
        with self._lock:
            self._ledger, company = self._ledger.upsert_company(
                data, company_id=company_id, now_ms=now_ms, slot_count=self.slot_count
            )
            return self._ledger, company


def current_store() -> LedgerStore:
    return current_app.extensions["ledger_store"]
