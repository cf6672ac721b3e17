from concurrent.futures import TimeoutError as FuturesTimeout

import click
from flask import Flask, request, g

from config import Config
from routes import health_bp, auth_bp, admin_bp, booking_bp, insight_bp

from models import LedgerError, LedgerStore, current_store
from security.credentials import DemoVerifier, SignInTickets
from security.csrf import require_csrf
from security.session import SessionStore
from services.insight import InsightPanel, OpenAIInsightGenerator
from utils.audit import log_event
from utils.auth_context import load_current_admin
from utils.notify import error_response


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(booking_bp)
    app.register_blueprint(insight_bp)

    # In-memory state: seeded at startup, gone on exit
    LedgerStore(app)
    app.extensions["admin_sessions"] = SessionStore()
    app.extensions["signin_tickets"] = SignInTickets()
    app.extensions["credential_verifier"] = app.config.get("CREDENTIAL_VERIFIER") or DemoVerifier()

    generator = app.config.get("INSIGHT_GENERATOR") or OpenAIInsightGenerator(
        api_key=app.config.get("OPENAI_API_KEY"),
        model=app.config.get("INSIGHT_MODEL", "gpt-4o-mini"),
        timeout=app.config.get("INSIGHT_TIMEOUT_SECONDS", 15.0),
    )
    app.extensions["insight_panel"] = InsightPanel(
        generator,
        max_workers=app.config.get("INSIGHT_MAX_WORKERS", 2),
        max_viewers=app.config.get("INSIGHT_MAX_VIEWERS", 1000),
        log=app.logger,
    )

    @app.before_request
    def _load_admin():
        load_current_admin()

    CSRF_EXEMPT_PATHS = {
        "/auth/signin",
        "/auth/login",
        "/health",
    }

    @app.before_request
    def _csrf_protect():
        # Only protect state-changing requests
        if request.method in ("POST", "PUT", "PATCH", "DELETE"):
            if request.path in CSRF_EXEMPT_PATHS:
                return None

            # Only enforce CSRF once an admin session cookie is in play
            if getattr(g, "admin", None) is not None:
                failure = require_csrf()
                if failure:
                    return failure

    @app.errorhandler(LedgerError)
    def _ledger_error(err):
        log_event(
            "LEDGER_REJECT",
            metadata={"error": type(err).__name__, **err.context},
            level="warning",
        )
        return error_response(err.message, err.status)

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    register_cli(app)

    return app


#-------------------------

def register_cli(app):
    @app.cli.command("companies")
    @click.argument("query", required=False, default="")
    def list_companies(query):
        """Print the company directory, optionally filtered by QUERY."""
        for company in current_store().snapshot.filter(query):
            click.echo(
                f"{company.id}\t{company.name}\t{company.industry}\t"
                f"{company.available_slots}/{len(company.slots)} open"
            )

    @app.cli.command("insight")
    @click.argument("company_id")
    @click.option("--timeout", default=30.0, show_default=True, help="Seconds to wait for the text.")
    def insight(company_id, timeout):
        """Generate the insight blurb for COMPANY_ID and print it."""
        try:
            company = current_store().snapshot.get(company_id)
        except LedgerError as err:
            raise click.ClickException(err.message)
        panel = app.extensions["insight_panel"]
        panel.select(company.id, company.name, company.industry)
        try:
            state = panel.wait(timeout=timeout)
        except FuturesTimeout:
            raise click.ClickException("Timed out waiting for insight")
        click.echo(state["text"])

#-------------------------


if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5002)
