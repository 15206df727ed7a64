from __future__ import annotations

import http.client
import json
import logging
import time
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from typing import Any

from app.mbs.errors import AuthProviderError, InvalidCredentials

logger = logging.getLogger(__name__)

UNAVAILABLE = "Authentication service unavailable."


@dataclass(frozen=True)
class AuthSession:
    """Opaque proof of authentication issued by the provider."""

    access_token: str
    expires_at: int  # unix seconds
    email: str | None = None

    def is_valid(self, now: float | None = None) -> bool:
        now = time.time() if now is None else now
        return bool(self.access_token) and self.expires_at > now


@dataclass(frozen=True)
class AuthResult:
    success: bool
    message: str
    session: AuthSession | None = None


class AuthProvider:
    configured: bool = False

    def sign_in(self, email: str, password: str) -> AuthResult:
        raise NotImplementedError

    def sign_out(self, access_token: str) -> AuthResult:
        raise NotImplementedError

    def update_password(self, access_token: str, password: str) -> AuthResult:
        raise NotImplementedError


@dataclass(frozen=True)
class UnavailableAuthProvider(AuthProvider):
    configured: bool = False

    def sign_in(self, email: str, password: str) -> AuthResult:
        return AuthResult(success=False, message=UNAVAILABLE)

    def sign_out(self, access_token: str) -> AuthResult:
        return AuthResult(success=False, message=UNAVAILABLE)

    def update_password(self, access_token: str, password: str) -> AuthResult:
        return AuthResult(success=False, message=UNAVAILABLE)


@dataclass(frozen=True)
class SupabaseAuthClient(AuthProvider):
    """Minimal client for the Supabase Auth (GoTrue) REST API."""

    url: str
    anon_key: str
    timeout_seconds: int = 10
    configured: bool = True

    def request_json(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        url = self.url.rstrip("/") + "/auth/v1" + path
        if params:
            url += "?" + urllib.parse.urlencode(params)
        data = json.dumps(payload).encode("utf-8") if payload is not None else None
        try:
            # Request() rejects a URL without a scheme with ValueError
            req = urllib.request.Request(url, data=data, method=method)
            req.add_header("apikey", self.anon_key)
            req.add_header("Authorization", f"Bearer {access_token or self.anon_key}")
            req.add_header("Accept", "application/json")
            if data is not None:
                req.add_header("Content-Type", "application/json")
            with urllib.request.urlopen(req, timeout=self.timeout_seconds) as resp:
                raw = resp.read()
        except urllib.error.HTTPError as e:
            try:
                body = e.read().decode("utf-8", errors="ignore")
            except Exception:
                body = ""
            if e.code in (400, 401, 403, 422):
                raise InvalidCredentials(f"HTTP {e.code} from auth provider: {body[:300]}") from e
            raise AuthProviderError(f"HTTP {e.code} from auth provider: {body[:300]}") from e
        except (urllib.error.URLError, http.client.HTTPException, TimeoutError, OSError, ValueError) as e:
            raise AuthProviderError(f"Auth provider request failed: {e}") from e
        if not raw:
            return {}
        try:
            j = json.loads(raw.decode("utf-8"))
        except ValueError as e:
            raise AuthProviderError(f"Invalid JSON from auth provider ({path})") from e
        return j if isinstance(j, dict) else {}

    def sign_in(self, email: str, password: str) -> AuthResult:
        try:
            j = self.request_json(
                "POST",
                "/token",
                params={"grant_type": "password"},
                payload={"email": email, "password": password},
            )
        except InvalidCredentials as e:
            logger.warning("Sign-in rejected for %s: %s", email, e)
            return AuthResult(success=False, message="Invalid credentials. Please try again.")
        except AuthProviderError as e:
            logger.error("Sign-in error: %s", e)
            return AuthResult(success=False, message="An unexpected error occurred during login.")

        token = j.get("access_token") or ""
        if not token:
            logger.error("Sign-in response for %s carried no access token.", email)
            return AuthResult(success=False, message="An unexpected error occurred during login.")
        expires_at = j.get("expires_at")
        if not expires_at:
            expires_at = int(time.time()) + int(j.get("expires_in") or 3600)
        user = j.get("user")
        if not isinstance(user, dict):
            user = {}
        return AuthResult(
            success=True,
            message="Signed in.",
            session=AuthSession(access_token=token, expires_at=int(expires_at), email=user.get("email") or email),
        )

    def sign_out(self, access_token: str) -> AuthResult:
        try:
            self.request_json("POST", "/logout", access_token=access_token)
        except AuthProviderError as e:
            # The local session is dropped regardless; the token expires on its own.
            logger.warning("Sign-out call failed: %s", e)
            return AuthResult(success=False, message="Sign-out could not be confirmed.")
        return AuthResult(success=True, message="Signed out.")

    def update_password(self, access_token: str, password: str) -> AuthResult:
        try:
            self.request_json("PUT", "/user", payload={"password": password}, access_token=access_token)
        except AuthProviderError as e:
            logger.error("Password update error: %s", e)
            return AuthResult(success=False, message="Failed to update password. Please try again.")
        return AuthResult(success=True, message="Password updated successfully!")


def auth_provider_from_config(config: dict) -> AuthProvider:
    url = (config.get("SUPABASE_URL") or "").strip()
    key = (config.get("SUPABASE_ANON_KEY") or "").strip()
    if not (url and key):
        return UnavailableAuthProvider()
    return SupabaseAuthClient(url=url, anon_key=key, timeout_seconds=int(config.get("HTTP_TIMEOUT_SECONDS") or 10))
