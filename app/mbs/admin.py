from flask import Blueprint, current_app, g, redirect, render_template, url_for

from app.mbs.content import list_contact_submissions, list_services, list_team_members
from app.mbs.extensions import get_gateway, service_status
from app.mbs.moderation import list_all

bp = Blueprint("admin", __name__)

# Every view here sits behind the admin guard (see guard.install_admin_guard).


@bp.get("/")
def index():
    return redirect(url_for("admin.dashboard"))


@bp.get("/dashboard")
def dashboard():
    status = service_status()
    status["env"] = (current_app.config.get("ENV") or "development").strip().lower()
    status["notify_to_set"] = bool(current_app.config.get("CONTACT_NOTIFY_TO"))
    auth_session = getattr(g, "auth_session", None)
    return render_template(
        "admin/dashboard.html",
        status=status,
        admin_email=auth_session.email if auth_session else None,
    )


@bp.get("/testimonials")
def testimonials():
    result = list_all(get_gateway())
    pending = sum(1 for t in result.data if not t.get("approved"))
    return render_template("admin/testimonials.html", result=result, pending=pending)


@bp.get("/contact-submissions")
def contact_submissions():
    return render_template("admin/contact_submissions.html", result=list_contact_submissions(get_gateway()))


@bp.get("/team")
def team():
    return render_template("admin/team.html", result=list_team_members(get_gateway()))


@bp.get("/services")
def services():
    return render_template("admin/services.html", result=list_services(get_gateway()))
