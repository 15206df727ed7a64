"""
Admin boundary check.

`decide` is a pure function of (path, has_session); `install_admin_guard` wires it
into the Flask request cycle so it runs before any admin view.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass

from flask import Flask, g, redirect, request

ADMIN_PREFIX = "/admin"
LOGIN_PATH = "/admin/login"
RESET_PASSWORD_PATH = "/admin/reset-password"
DASHBOARD_PATH = "/admin/dashboard"

# Reachable without a session; bounced to the dashboard with one.
SESSIONLESS_PATHS = frozenset({LOGIN_PATH, RESET_PASSWORD_PATH})


class GuardAction(enum.Enum):
    PASS = "pass"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class GuardDecision:
    action: GuardAction
    location: str | None = None

    @property
    def is_redirect(self) -> bool:
        return self.action is GuardAction.REDIRECT


PASS = GuardDecision(GuardAction.PASS)


def _normalize(path: str) -> str:
    path = path or "/"
    if len(path) > 1:
        path = path.rstrip("/") or "/"
    return path


def is_admin_path(path: str) -> bool:
    p = _normalize(path)
    return p == ADMIN_PREFIX or p.startswith(ADMIN_PREFIX + "/")


def decide(path: str, has_session: bool) -> GuardDecision:
    p = _normalize(path)
    if not is_admin_path(p):
        return PASS
    sessionless = p in SESSIONLESS_PATHS
    if not has_session and not sessionless:
        return GuardDecision(GuardAction.REDIRECT, LOGIN_PATH)
    if has_session and sessionless:
        return GuardDecision(GuardAction.REDIRECT, DASHBOARD_PATH)
    return PASS


def install_admin_guard(app: Flask) -> None:
    @app.before_request
    def _admin_guard():
        if not is_admin_path(request.path):
            return None
        decision = decide(request.path, bool(getattr(g, "auth_session", None)))
        if decision.is_redirect:
            return redirect(decision.location)
        return None
