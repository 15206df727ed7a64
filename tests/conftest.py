"""Shared fixtures: an app on a throwaway SQLite file plus in-memory fakes for external services."""
from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from app.mbs import create_app
from app.mbs.auth_provider import AuthProvider, AuthResult, AuthSession
from app.mbs.extensions import AUTH_KEY, GATEWAY_KEY, MAILER_KEY
from app.mbs.gateway import GatewayResult, PersistenceGateway
from app.mbs.models import Base
from app.mbs.notify import Mailer, SendResult

_EXTERNAL_ENV = (
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "RESEND_API_KEY",
    "EMAIL_FROM",
    "CONTACT_NOTIFY_TO",
    "CONTACT_REQUIRE_NAME",
    "CONTACT_MESSAGE_MIN_LENGTH",
    "CONTACT_REQUIRE_SUBJECT",
)


@dataclass
class FakeMailer(Mailer):
    succeed: bool = True
    raise_error: bool = False
    configured: bool = True
    sent: list[dict] = field(default_factory=list)

    def send(self, to, subject, body, *, from_addr=None, reply_to=None) -> SendResult:
        self.sent.append({"to": to, "subject": subject, "body": body, "from": from_addr, "reply_to": reply_to})
        if self.raise_error:
            raise RuntimeError("mail backend exploded")
        if self.succeed:
            return SendResult(success=True, message="Email sent.", message_id="msg_1")
        return SendResult(success=False, message="Email failed to send.")


@dataclass
class FakeAuthProvider(AuthProvider):
    email: str = "admin@example.com"
    password: str = "secret123"
    configured: bool = True
    expires_at: int = 4_102_444_800  # 2100-01-01
    signed_out: list[str] = field(default_factory=list)
    password_updates: list[tuple[str, str]] = field(default_factory=list)

    def sign_in(self, email: str, password: str) -> AuthResult:
        if email == self.email and password == self.password:
            return AuthResult(True, "Signed in.", AuthSession("tok-123", self.expires_at, email))
        return AuthResult(False, "Invalid credentials. Please try again.")

    def sign_out(self, access_token: str) -> AuthResult:
        self.signed_out.append(access_token)
        return AuthResult(True, "Signed out.")

    def update_password(self, access_token: str, password: str) -> AuthResult:
        if access_token != "recovery-token":
            return AuthResult(False, "Failed to update password. Please try again.")
        self.password_updates.append((access_token, password))
        return AuthResult(True, "Password updated successfully!")


@dataclass
class RecordingGateway(PersistenceGateway):
    """In-memory gateway; `fail_inserts` simulates a datastore outage on writes."""

    rows: dict[str, list[dict]] = field(default_factory=dict)
    fail_inserts: bool = False
    fail_selects: bool = False
    configured: bool = True

    def insert(self, table, record):
        if self.fail_inserts:
            return GatewayResult.failed("connection refused")
        row = dict(record)
        row.setdefault("id", f"{table}-{len(self.rows.get(table, [])) + 1}")
        self.rows.setdefault(table, []).append(row)
        return GatewayResult(ok=True, rows=[row])

    def select(self, table, filters=None, order=(), limit=None):
        if self.fail_selects:
            return GatewayResult.failed("connection refused")
        rows = [r for r in self.rows.get(table, []) if all(r.get(k) == v for k, v in (filters or {}).items())]
        return GatewayResult(ok=True, rows=rows[:limit] if limit is not None else rows)


@pytest.fixture()
def env(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("CSRF_ENABLED", "0")
    for k in _EXTERNAL_ENV:
        monkeypatch.delenv(k, raising=False)
    return monkeypatch


@pytest.fixture()
def app(env):
    app = create_app()
    engine = app.extensions["sqlalchemy_engine"]
    Base.metadata.create_all(bind=engine)
    app.config["CONTACT_NOTIFY_TO"] = "office@example.com"
    app.extensions[MAILER_KEY] = FakeMailer()
    app.extensions[AUTH_KEY] = FakeAuthProvider()
    return app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def mailer(app) -> FakeMailer:
    return app.extensions[MAILER_KEY]


@pytest.fixture()
def auth_provider(app) -> FakeAuthProvider:
    return app.extensions[AUTH_KEY]


@pytest.fixture()
def memory_gateway(app) -> RecordingGateway:
    gw = RecordingGateway()
    app.extensions[GATEWAY_KEY] = gw
    return gw


def login(client, email="admin@example.com", password="secret123"):
    return client.post("/admin/login", data={"email": email, "password": password}, follow_redirects=False)
