"""
Two-stage admin gate.

Stage one ("sign in") captures a username/password pair and hands back a
short-lived ticket. Stage two ("login") re-accepts the pair, or reuses the
one captured by the ticket, and asks a CredentialVerifier whether it grants
admin access.

The default DemoVerifier accepts any non-empty pair. It is a demo-mode
switch, not a security boundary; plug in a real verifier through the
CREDENTIAL_VERIFIER app config key.
"""
import hashlib
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Mapping, Optional, Protocol


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str

    @classmethod
    def from_payload(cls, data) -> "Credentials":
        data = data or {}
        if not isinstance(data, Mapping):
            # not a JSON object: treated as nothing entered
            data = {}
        return cls(
            username=(data.get("username") or "").strip(),
            password=data.get("password") or "",
        )

    @property
    def complete(self) -> bool:
        return bool(self.username and self.password.strip())


class CredentialVerifier(Protocol):
    def verify(self, credentials: Credentials) -> bool:
        ...


class DemoVerifier:
    """Any non-empty username/password pair is an admin."""

    def verify(self, credentials: Credentials) -> bool:
        return credentials.complete


@dataclass
class _Ticket:
    credentials: Credentials
    expires_at: datetime


class SignInTickets:
    """Pending sign-ins waiting for the login stage. Tickets are single use."""

    def __init__(self):
        self._lock = threading.Lock()
        self._tickets: Dict[str, _Ticket] = {}

    @staticmethod
    def _key(raw: str) -> str:
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()

    def issue(self, credentials: Credentials, ttl_seconds: int) -> str:
        raw = secrets.token_urlsafe(24)
        now = datetime.now(timezone.utc)
        with self._lock:
            # drop expired tickets while we hold the lock
            self._tickets = {k: t for k, t in self._tickets.items() if t.expires_at > now}
            self._tickets[self._key(raw)] = _Ticket(credentials, now + timedelta(seconds=ttl_seconds))
        return raw

    def peek(self, raw: Optional[str]) -> Optional[Credentials]:
        if not raw:
            return None
        with self._lock:
            ticket = self._tickets.get(self._key(raw))
            if not ticket or ticket.expires_at <= datetime.now(timezone.utc):
                return None
            return ticket.credentials

    def consume(self, raw: Optional[str]) -> None:
        if not raw:
            return
        with self._lock:
            self._tickets.pop(self._key(raw), None)
