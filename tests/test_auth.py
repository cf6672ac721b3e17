from datetime import timedelta

from app import create_app
from security.credentials import Credentials, DemoVerifier
from security.session import SessionStore

from conftest import csrf_headers, fake_insight


def test_signin_requires_both_fields(client):
    resp = client.post("/auth/signin", json={"username": "priya"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Please enter both username and password"


def test_signin_then_login_grants_admin(client):
    resp = client.post("/auth/signin", json={"username": "priya", "password": "pw"})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["next"] == "login"
    assert body["notice"] == {"type": "success", "message": "Sign in is completed", "ttl_seconds": 2}

    assert client.get("/auth/me").status_code == 401

    resp = client.post("/auth/login", json={"username": "priya", "password": "pw"})
    assert resp.status_code == 200
    assert resp.get_json()["notice"]["message"] == "Welcome back, priya!"
    assert client.get_cookie("csrf_token") is not None

    me = client.get("/auth/me").get_json()
    assert me == {"username": "priya", "is_admin": True}


def test_login_reuses_signin_credentials(client):
    client.post("/auth/signin", json={"username": "ravi", "password": "secret"})
    resp = client.post("/auth/login")
    assert resp.status_code == 200
    assert resp.get_json()["username"] == "ravi"


def test_login_carries_reentered_username(client):
    client.post("/auth/signin", json={"username": "ravi", "password": "secret"})
    resp = client.post("/auth/login", json={"username": "meera", "password": "other"})
    assert resp.get_json()["username"] == "meera"


def test_login_without_signin_is_rejected(client):
    resp = client.post("/auth/login", json={"username": "priya", "password": "pw"})
    assert resp.status_code == 409
    assert client.get("/auth/me").status_code == 401


def test_login_with_blank_password_fails(client):
    client.post("/auth/signin", json={"username": "priya", "password": "pw"})
    resp = client.post("/auth/login", json={"username": "priya", "password": "   "})
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "Invalid credentials"


def test_signin_ticket_is_single_use(admin_client):
    resp = admin_client.post("/auth/login", json={}, headers=csrf_headers(admin_client))
    assert resp.status_code == 409


def test_logout_revokes_session(admin_client):
    resp = admin_client.post("/auth/logout", headers=csrf_headers(admin_client))
    assert resp.status_code == 200
    assert resp.get_json()["notice"]["message"] == "Logged out successfully"
    assert admin_client.get("/auth/me").status_code == 401


def test_logout_needs_csrf(admin_client):
    resp = admin_client.post("/auth/logout")
    assert resp.status_code == 403
    assert admin_client.get("/auth/me").status_code == 200


def test_custom_verifier_is_used():
    class OnlyAlice:
        def verify(self, credentials):
            return credentials.username == "alice" and credentials.password == "wonderland"

    app = create_app({"TESTING": True, "CREDENTIAL_VERIFIER": OnlyAlice(), "INSIGHT_GENERATOR": fake_insight})
    client = app.test_client()
    client.post("/auth/signin", json={"username": "bob", "password": "x"})
    assert client.post("/auth/login").status_code == 401

    client.post("/auth/signin", json={"username": "alice", "password": "wonderland"})
    assert client.post("/auth/login").status_code == 200
    app.extensions["insight_panel"].shutdown()


def test_demo_verifier_accepts_any_non_empty_pair():
    verifier = DemoVerifier()
    assert verifier.verify(Credentials("x", "y"))
    assert not verifier.verify(Credentials("", "y"))
    assert not verifier.verify(Credentials("x", ""))


def test_session_store_expiry_and_rotation():
    sessions = SessionStore()
    token = sessions.create("priya", lifetime_seconds=3600)
    sess = sessions.lookup(token, idle_seconds=60)
    assert sess.username == "priya"

    later = sess.last_seen_at + timedelta(seconds=61)
    assert sessions.lookup(token, idle_seconds=60, now=later) is None
    assert sessions.lookup(token, idle_seconds=7200, now=sess.created_at + timedelta(hours=2)) is None

    assert sessions.revoke_all("priya") == 1
    assert sessions.lookup(token, idle_seconds=60) is None
    assert sessions.lookup("not-a-token", idle_seconds=60) is None


def test_signin_body_must_be_an_object(client):
    resp = client.post("/auth/signin", json=["priya", "pw"])
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Please enter both username and password"


def test_login_body_must_be_an_object(client):
    client.post("/auth/signin", json={"username": "priya", "password": "pw"})
    resp = client.post("/auth/login", json=["priya", "pw"])
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Request body must be a JSON object"
    # the ticket survives, so a proper retry still works
    assert client.post("/auth/login").status_code == 200


def test_repeated_logins_keep_one_session(app, client):
    for _ in range(50):
        client.post("/auth/signin", json={"username": "u", "password": "pw"})
        assert client.post("/auth/login").status_code == 200
    assert app.extensions["admin_sessions"].size == 1


def test_logout_removes_the_session(app, admin_client):
    assert app.extensions["admin_sessions"].size == 1
    admin_client.post("/auth/logout", headers=csrf_headers(admin_client))
    assert app.extensions["admin_sessions"].size == 0


def test_expired_sessions_are_pruned_on_create():
    sessions = SessionStore()
    stale = sessions.create("old", lifetime_seconds=-1)
    sessions.create("new", lifetime_seconds=3600)
    assert sessions.size == 1
    assert sessions.lookup(stale, idle_seconds=60) is None
