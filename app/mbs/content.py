from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from app.mbs.gateway import PersistenceGateway
from app.mbs.models import CONTACT_SUBMISSIONS, SERVICES, TEAM_MEMBERS

logger = logging.getLogger(__name__)

# Custom order first, newest first among equals.
LISTING_ORDER = (("order", "asc"), ("created_at", "desc"))
NEWEST_FIRST = (("created_at", "desc"),)


@dataclass(frozen=True)
class ReadResult:
    success: bool
    data: list[dict[str, Any]] = field(default_factory=list)
    message: str | None = None


def _read(gateway: PersistenceGateway, table: str, order, failure_message: str, filters=None) -> ReadResult:
    res = gateway.select(table, filters=filters, order=order)
    if not res.ok:
        logger.error("Failed to read %s: %s", table, res.error)
        return ReadResult(success=False, data=[], message=failure_message)
    if not res.rows:
        logger.info("No rows found in %s.", table)
    return ReadResult(success=True, data=res.rows)


def list_team_members(gateway: PersistenceGateway) -> ReadResult:
    return _read(gateway, TEAM_MEMBERS, LISTING_ORDER, "Failed to load team members.")


def list_services(gateway: PersistenceGateway) -> ReadResult:
    return _read(gateway, SERVICES, LISTING_ORDER, "Failed to load services.")


def list_contact_submissions(gateway: PersistenceGateway) -> ReadResult:
    return _read(gateway, CONTACT_SUBMISSIONS, NEWEST_FIRST, "Failed to load contact submissions.")


def get_team_member(gateway: PersistenceGateway, member_id: str) -> dict[str, Any] | None:
    """Return the team member row, or None when missing or the datastore is unreachable."""
    member_id = (member_id or "").strip()
    if not member_id:
        return None
    res = gateway.select(TEAM_MEMBERS, filters={"id": member_id}, limit=1)
    if not res.ok:
        logger.error("Failed to fetch team member %s: %s", member_id, res.error)
        return None
    return res.first
