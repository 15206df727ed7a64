from __future__ import annotations

import uuid

from flask import Blueprint, current_app, flash, g, redirect, render_template, request, session, url_for

from app.mbs.auth_provider import UNAVAILABLE, AuthSession
from app.mbs.extensions import get_auth_provider
from app.mbs.guard import LOGIN_PATH
from app.mbs.pipeline import FormResult
from app.mbs.validation import validate_credentials, validate_password_change

bp = Blueprint("auth", __name__)

_SESSION_KEYS = ("auth_token", "auth_expires_at", "auth_email")


def store_auth_session(auth_session: AuthSession) -> None:
    session["auth_token"] = auth_session.access_token
    session["auth_expires_at"] = int(auth_session.expires_at)
    session["auth_email"] = auth_session.email


def clear_auth_session() -> None:
    for key in _SESSION_KEYS:
        session.pop(key, None)


def load_auth_session() -> None:
    """
    Loads g.auth_session from the signed session cookie, dropping expired tokens.
    Also assigns a simple per-request request_id (for log correlation).
    """
    if not getattr(g, "request_id", None):
        g.request_id = uuid.uuid4().hex
    g.auth_session = None
    if request.path.startswith(("/static/", "/health", "/healthz")):
        return

    token = session.get("auth_token")
    if not token:
        return
    try:
        expires_at = int(session.get("auth_expires_at") or 0)
    except (TypeError, ValueError):
        expires_at = 0
    auth_session = AuthSession(access_token=token, expires_at=expires_at, email=session.get("auth_email"))
    if not auth_session.is_valid():
        current_app.logger.info("Admin session expired (request_id=%s); clearing.", g.request_id)
        clear_auth_session()
        return
    g.auth_session = auth_session


def _safe_next(nxt: str) -> str | None:
    # Only local paths, to avoid open redirects.
    if nxt.startswith("/") and not nxt.startswith("//"):
        return nxt
    return None


@bp.get("/login")
def login_get():
    nxt = (request.args.get("next") or "").strip()
    return render_template("auth/login.html", next=nxt, result=None, form={})


@bp.post("/login")
def login_post():
    nxt = (request.form.get("next") or "").strip()
    form = {"email": (request.form.get("email") or "").strip()}
    provider = get_auth_provider()

    if not provider.configured:
        result = FormResult.unavailable(UNAVAILABLE)
        return render_template("auth/login.html", next=nxt, result=result, form=form)

    creds, errors = validate_credentials(request.form)
    if creds is None:
        result = FormResult.invalid(errors, "Invalid email or password format.")
        return render_template("auth/login.html", next=nxt, result=result, form=form)

    auth = provider.sign_in(creds.email, creds.password)
    if not auth.success or auth.session is None:
        current_app.logger.warning("Admin sign-in failed (email=%s request_id=%s)", creds.email, g.request_id)
        result = FormResult(success=False, message=auth.message)
        return render_template("auth/login.html", next=nxt, result=result, form=form)

    session.permanent = True
    store_auth_session(auth.session)
    current_app.logger.info("Admin signed in (email=%s)", auth.session.email)
    return redirect(_safe_next(nxt) or url_for("admin.dashboard"))


@bp.post("/logout")
def logout():
    token = session.get("auth_token")
    provider = get_auth_provider()
    if token and provider.configured:
        provider.sign_out(token)
    clear_auth_session()
    return redirect(url_for("admin.index"))


@bp.get("/reset-password")
def reset_password_get():
    token = (request.args.get("access_token") or "").strip()
    return render_template("auth/reset_password.html", access_token=token, result=None)


@bp.post("/reset-password")
def reset_password_post():
    token = (request.form.get("access_token") or "").strip()
    provider = get_auth_provider()

    if not provider.configured:
        result = FormResult.unavailable(UNAVAILABLE)
        return render_template("auth/reset_password.html", access_token=token, result=result)

    change, errors = validate_password_change(request.form)
    if change is None:
        result = FormResult.invalid(errors, "Please check your password entries.")
        return render_template("auth/reset_password.html", access_token=token, result=result)

    if not token:
        result = FormResult(success=False, message="Your password reset link is invalid or has expired.")
        return render_template("auth/reset_password.html", access_token=token, result=result)

    auth = provider.update_password(token, change.password)
    if not auth.success:
        result = FormResult(success=False, message=auth.message)
        return render_template("auth/reset_password.html", access_token=token, result=result)

    flash(auth.message, "success")
    return redirect(LOGIN_PATH)
