from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from app.mbs.gateway import PersistenceGateway
from app.mbs.models import CONTACT_SUBMISSIONS
from app.mbs.moderation import submit_new
from app.mbs.notify import Mailer
from app.mbs.validation import ContactInput, ContactRules, FieldErrors, validate_contact, validate_testimonial

logger = logging.getLogger(__name__)

CHECK_ENTRIES = "Please check your form entries and try again."
SERVICE_UNAVAILABLE = "Service unavailable. Please try again later."


@dataclass(frozen=True)
class FormResult:
    """Outcome of a form action; the only thing views and templates look at."""

    success: bool
    message: str
    errors: FieldErrors | None = None

    @classmethod
    def invalid(cls, errors: FieldErrors, message: str = CHECK_ENTRIES) -> "FormResult":
        return cls(success=False, message=message, errors=errors)

    @classmethod
    def unavailable(cls, message: str = SERVICE_UNAVAILABLE) -> "FormResult":
        return cls(success=False, message=message)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"success": self.success, "message": self.message}
        if self.errors:
            out["errors"] = self.errors
        return out


def _contact_email_body(data: ContactInput) -> str:
    lines = [
        "A new message was submitted through the website contact form.",
        "",
        f"Name: {data.name or '(not provided)'}",
        f"Email: {data.email}",
    ]
    if data.subject:
        lines.append(f"Subject: {data.subject}")
    lines += ["", data.message]
    return "\n".join(lines)


def notify_contact(mailer: Mailer, data: ContactInput, *, notify_to: str | None, notify_from: str | None = None) -> bool:
    """Best-effort notification; returns whether the email went out. Never raises."""
    if not notify_to:
        logger.info("CONTACT_NOTIFY_TO not set; skipping contact notification.")
        return False
    subject = data.subject or f"New contact form submission from {data.name or data.email}"
    try:
        res = mailer.send(
            notify_to,
            subject,
            _contact_email_body(data),
            from_addr=notify_from,
            reply_to=data.email,
        )
    except Exception:
        logger.exception("Contact notification raised unexpectedly")
        return False
    if not res.success:
        logger.warning("Contact notification not sent: %s", res.message)
    return res.success


def submit_contact(
    gateway: PersistenceGateway,
    mailer: Mailer,
    raw: Mapping[str, Any],
    *,
    rules: ContactRules | None = None,
    notify_to: str | None = None,
    notify_from: str | None = None,
) -> FormResult:
    data, errors = validate_contact(raw, rules)
    if data is None:
        return FormResult.invalid(errors)

    if not gateway.configured:
        logger.error("Contact submission rejected: datastore not configured.")
        return FormResult.unavailable()

    res = gateway.insert(CONTACT_SUBMISSIONS, {"name": data.name, "email": data.email, "message": data.message})
    if not res.ok:
        logger.error("Contact submission insert failed: %s", res.error)
        return FormResult(success=False, message="Failed to send your message. Please try again later.")

    # Persisted; the visitor's outcome no longer depends on the email.
    notify_contact(mailer, data, notify_to=notify_to, notify_from=notify_from)

    return FormResult(success=True, message="Thank you for your message! We will get back to you shortly.")


def submit_testimonial(gateway: PersistenceGateway, raw: Mapping[str, Any]) -> FormResult:
    data, errors = validate_testimonial(raw)
    if data is None:
        return FormResult.invalid(errors)

    if not gateway.configured:
        logger.error("Testimonial submission rejected: datastore not configured.")
        return FormResult.unavailable()

    res = submit_new(gateway, {"client_name": data.client_name, "comment": data.comment, "rating": data.rating})
    if not res.ok:
        logger.error("Testimonial insert failed: %s", res.error)
        return FormResult(success=False, message="Failed to submit testimonial. Please try again later.")

    return FormResult(
        success=True,
        message="Thank you for your feedback! Your testimonial will be reviewed and published shortly.",
    )
