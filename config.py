import os


class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # Cookie names for the admin session and the pending sign-in ticket
    AUTH_COOKIE_NAME = "slotdesk_session"
    SIGNIN_COOKIE_NAME = "slotdesk_signin"
    # Per-browser key for the insight panel state
    VIEWER_COOKIE_NAME = "slotdesk_viewer"

    # 8 hours session lifetime
    SESSION_LIFETIME_SECONDS = int(os.getenv("SESSION_LIFETIME_SECONDS", 8 * 60 * 60))

    # Idle timeout: 20 minutes
    IDLE_TIMEOUT_SECONDS = int(os.getenv("IDLE_TIMEOUT_SECONDS", 20 * 60))

    # Time allowed between the sign-in and login stages
    SIGNIN_TICKET_SECONDS = int(os.getenv("SIGNIN_TICKET_SECONDS", 5 * 60))

    # Session/cookie security defaults
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "false").lower() == "true"

    # Ledger
    SLOTS_PER_COMPANY = 3

    # Toasts
    NOTICE_TTL_SECONDS = int(os.getenv("NOTICE_TTL_SECONDS", "5"))
    SIGNIN_NOTICE_TTL_SECONDS = 2

    # Insight generation (OpenAI)
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
    INSIGHT_MODEL = os.getenv("INSIGHT_MODEL", "gpt-4o-mini")
    INSIGHT_TIMEOUT_SECONDS = float(os.getenv("INSIGHT_TIMEOUT_SECONDS", "15"))
    INSIGHT_MAX_WORKERS = int(os.getenv("INSIGHT_MAX_WORKERS", "2"))
    # Oldest viewer states are dropped past this many browsers
    INSIGHT_MAX_VIEWERS = int(os.getenv("INSIGHT_MAX_VIEWERS", "1000"))
    # Optional callable(name, industry) -> str replacing the OpenAI generator
    INSIGHT_GENERATOR = None

    # Optional CredentialVerifier instance; defaults to the demo verifier
    CREDENTIAL_VERIFIER = None

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Basic app settings
    DEBUG = False
