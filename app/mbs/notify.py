from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any

from app.mbs.errors import MailerError

logger = logging.getLogger(__name__)

DEFAULT_FROM = "onboarding@resend.dev"


@dataclass(frozen=True)
class SendResult:
    success: bool
    message: str
    message_id: str | None = None


class Mailer:
    """
    Transactional email sender. `send` reports every outcome as a SendResult;
    nothing is retried.
    """

    configured: bool = False

    def send(
        self,
        to: str | list[str],
        subject: str,
        body: str,
        *,
        from_addr: str | None = None,
        reply_to: str | None = None,
    ) -> SendResult:
        raise NotImplementedError


@dataclass(frozen=True)
class UnavailableMailer(Mailer):
    configured: bool = False

    def send(
        self,
        to: str | list[str],
        subject: str,
        body: str,
        *,
        from_addr: str | None = None,
        reply_to: str | None = None,
    ) -> SendResult:
        logger.error("RESEND_API_KEY not set; email not sent (subject=%r).", subject)
        return SendResult(success=False, message="Email service not configured.")


@dataclass(frozen=True)
class ResendMailer(Mailer):
    api_key: str
    default_from: str = DEFAULT_FROM
    base_url: str = "https://api.resend.com"
    timeout_seconds: int = 10
    configured: bool = True

    def post_json(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = self.base_url.rstrip("/") + path
        data = json.dumps(payload).encode("utf-8")
        try:
            req = urllib.request.Request(url, data=data, method="POST")
            req.add_header("Authorization", f"Bearer {self.api_key}")
            req.add_header("Content-Type", "application/json")
            req.add_header("Accept", "application/json")
            with urllib.request.urlopen(req, timeout=self.timeout_seconds) as resp:
                raw = resp.read()
        except urllib.error.HTTPError as e:
            try:
                body = e.read().decode("utf-8", errors="ignore")
            except Exception:
                body = ""
            raise MailerError(f"HTTP {e.code} from Resend: {body[:300]}") from e
        except (urllib.error.URLError, http.client.HTTPException, TimeoutError, OSError, ValueError) as e:
            raise MailerError(f"Resend request failed: {e}") from e
        if not raw:
            return {}
        try:
            j = json.loads(raw.decode("utf-8"))
        except ValueError as e:
            raise MailerError(f"Invalid JSON from Resend ({path})") from e
        return j if isinstance(j, dict) else {}

    def send(
        self,
        to: str | list[str],
        subject: str,
        body: str,
        *,
        from_addr: str | None = None,
        reply_to: str | None = None,
    ) -> SendResult:
        payload: dict[str, Any] = {
            "from": from_addr or self.default_from,
            "to": to if isinstance(to, list) else [to],
            "subject": subject,
            "text": body,
        }
        if reply_to:
            payload["reply_to"] = reply_to
        try:
            j = self.post_json("/emails", payload)
        except MailerError as e:
            logger.error("Resend error: %s", e)
            return SendResult(success=False, message="Email failed to send.")
        return SendResult(success=True, message="Email sent.", message_id=j.get("id"))


def mailer_from_config(config: dict) -> Mailer:
    api_key = (config.get("RESEND_API_KEY") or "").strip()
    if not api_key:
        return UnavailableMailer()
    return ResendMailer(
        api_key=api_key,
        default_from=(config.get("EMAIL_FROM") or DEFAULT_FROM).strip(),
        timeout_seconds=int(config.get("HTTP_TIMEOUT_SECONDS") or 10),
    )
