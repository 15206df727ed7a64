from __future__ import annotations

from flask import Blueprint, abort, current_app, flash, jsonify, redirect, render_template, request, url_for

from app.mbs.content import get_team_member, list_services, list_team_members
from app.mbs.extensions import get_gateway, get_mailer, service_status
from app.mbs.moderation import list_approved
from app.mbs.pipeline import FormResult, submit_contact, submit_testimonial
from app.mbs.validation import ContactRules

bp = Blueprint("routes", __name__)


def _wants_json() -> bool:
    if request.is_json:
        return True
    best = request.accept_mimetypes.best_match(["application/json", "text/html"])
    return best == "application/json" and request.accept_mimetypes[best] > request.accept_mimetypes["text/html"]


def _payload() -> dict:
    if request.is_json:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}
    return request.form.to_dict()


def _render_index(**forms):
    gateway = get_gateway()
    return render_template(
        "public/index.html",
        services=list_services(gateway),
        team=list_team_members(gateway),
        testimonials=list_approved(gateway),
        contact_result=forms.get("contact_result"),
        contact_form=forms.get("contact_form") or {},
        testimonial_result=forms.get("testimonial_result"),
        testimonial_form=forms.get("testimonial_form") or {},
    )


def _respond(result: FormResult, anchor: str, form_key: str, raw: dict):
    if _wants_json():
        return jsonify(result.to_dict()), 200
    if result.success:
        flash(result.message, "success")
        return redirect(url_for("routes.index") + f"#{anchor}")
    return _render_index(**{f"{form_key}_result": result, f"{form_key}_form": raw}), 200


@bp.get("/")
def index():
    return _render_index()


@bp.post("/contact")
def contact_post():
    raw = _payload()
    result = submit_contact(
        get_gateway(),
        get_mailer(),
        raw,
        rules=ContactRules.from_config(current_app.config),
        notify_to=current_app.config.get("CONTACT_NOTIFY_TO"),
        notify_from=current_app.config.get("EMAIL_FROM"),
    )
    return _respond(result, "contact", "contact", raw)


@bp.post("/testimonials")
def testimonial_post():
    raw = _payload()
    result = submit_testimonial(get_gateway(), raw)
    return _respond(result, "testimonials", "testimonial", raw)


@bp.get("/team/<member_id>")
def team_member_detail(member_id: str):
    member = get_team_member(get_gateway(), member_id)
    if not member:
        abort(404)
    return render_template("public/team_member.html", member=member)


@bp.get("/health")
def health():
    """Health check endpoint. Returns JSON with external service availability."""
    return {"ok": True, "services": service_status()}


@bp.get("/healthz")
def healthz():
    """
    Fast health check for container probes. No external calls.
    """
    return "ok", 200
