import hashlib
import secrets
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from flask import current_app, request


def _hash_token(token: str) -> str:
    # SHA-256 is fine for hashing random session tokens
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AdminSession:
    username: str
    token_hash: str
    expires_at: datetime
    ip: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)
    last_seen_at: Optional[datetime] = None
    revoked: bool = False


class SessionStore:
    """
    Server-side admin sessions. Only token hashes are kept. Revoked sessions
    are removed at once; expired ones are pruned whenever a session is created.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._sessions: Dict[str, AdminSession] = {}

    @property
    def size(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(self, username: str, lifetime_seconds: int, ip=None, user_agent=None) -> str:
        raw_token = secrets.token_urlsafe(32)
        now = _utcnow()
        row = AdminSession(
            username=username,
            token_hash=_hash_token(raw_token),
            expires_at=now + timedelta(seconds=lifetime_seconds),
            ip=ip,
            user_agent=user_agent,
            created_at=now,
        )
        with self._lock:
            self._sessions = {h: s for h, s in self._sessions.items() if s.expires_at > now}
            self._sessions[row.token_hash] = row
        return raw_token

    def lookup(self, raw_token: str, idle_seconds: int, now: Optional[datetime] = None) -> Optional[AdminSession]:
        if not raw_token:
            return None
        now = now or _utcnow()
        with self._lock:
            sess = self._sessions.get(_hash_token(raw_token))
            if not sess or sess.revoked:
                return None

            # Absolute expiry
            if sess.expires_at <= now:
                return None

            # Idle timeout
            last_seen = sess.last_seen_at or sess.created_at
            if (last_seen + timedelta(seconds=idle_seconds)) <= now:
                return None

            sess.last_seen_at = now
            return sess

    def revoke(self, raw_token: str) -> bool:
        if not raw_token:
            return False
        with self._lock:
            sess = self._sessions.pop(_hash_token(raw_token), None)
            if not sess:
                return False
            sess.revoked = True
            return True

    def revoke_all(self, username: str) -> int:
        with self._lock:
            doomed = [h for h, s in self._sessions.items() if s.username == username]
            for token_hash in doomed:
                self._sessions.pop(token_hash).revoked = True
        return len(doomed)


def _sessions() -> SessionStore:
    return current_app.extensions["admin_sessions"]


def create_session(username: str) -> str:
    """
    Creates a server-side session and returns the RAW token (to set as cookie).
    """
    lifetime = current_app.config.get("SESSION_LIFETIME_SECONDS", 28800)
    ip = request.headers.get("X-Forwarded-For", request.remote_addr)
    user_agent = (request.headers.get("User-Agent") or "")[:255]
    return _sessions().create(username, lifetime, ip=ip, user_agent=user_agent)


def get_session_from_request() -> Optional[AdminSession]:
    cookie_name = current_app.config.get("AUTH_COOKIE_NAME", "slotdesk_session")
    idle_seconds = current_app.config.get("IDLE_TIMEOUT_SECONDS", 1200)
    return _sessions().lookup(request.cookies.get(cookie_name), idle_seconds)


def revoke_session(raw_token: str) -> bool:
    return _sessions().revoke(raw_token)


def revoke_all_sessions(username: str) -> int:
    return _sessions().revoke_all(username)
