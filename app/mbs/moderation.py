from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from app.mbs.content import NEWEST_FIRST, ReadResult
from app.mbs.gateway import GatewayResult, PersistenceGateway
from app.mbs.models import TESTIMONIALS

logger = logging.getLogger(__name__)

SUBMITTABLE_FIELDS = ("client_name", "comment", "rating")


def submit_new(gateway: PersistenceGateway, record: Mapping[str, Any]) -> GatewayResult:
    """
    Insert a visitor testimonial. Whatever the caller sent, it starts unapproved;
    only a moderator flipping the flag in the datastore publishes it.
    """
    row: dict[str, Any] = {k: record.get(k) for k in SUBMITTABLE_FIELDS}
    row["approved"] = False
    return gateway.insert(TESTIMONIALS, row)


def list_approved(gateway: PersistenceGateway) -> ReadResult:
    res = gateway.select(TESTIMONIALS, filters={"approved": True}, order=NEWEST_FIRST)
    if not res.ok:
        logger.error("Failed to load approved testimonials: %s", res.error)
        return ReadResult(success=False, data=[], message="Failed to load testimonials.")
    approved = [r for r in res.rows if r.get("approved") is True]
    if len(approved) != len(res.rows):
        logger.warning("Dropped %d unapproved testimonial(s) from public listing.", len(res.rows) - len(approved))
    return ReadResult(success=True, data=approved)


def list_all(gateway: PersistenceGateway) -> ReadResult:
    """Every testimonial, pending and approved, newest first. Admin use only."""
    res = gateway.select(TESTIMONIALS, order=NEWEST_FIRST)
    if not res.ok:
        logger.error("Failed to load testimonials: %s", res.error)
        return ReadResult(success=False, data=[], message="Failed to load testimonials.")
    return ReadResult(success=True, data=res.rows)
