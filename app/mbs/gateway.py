from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import Table, insert, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from app.mbs.errors import DatastoreError
from app.mbs.models import Base

logger = logging.getLogger(__name__)

NOT_CONFIGURED = "Database not configured."

# (column, "asc" | "desc")
OrderSpec = Sequence[tuple[str, str]]


@dataclass(frozen=True)
class GatewayResult:
    ok: bool
    rows: list[dict[str, Any]] = field(default_factory=list)
    error: str | None = None

    @classmethod
    def failed(cls, error: str) -> "GatewayResult":
        return cls(ok=False, rows=[], error=error)

    @property
    def first(self) -> dict[str, Any] | None:
        return self.rows[0] if self.rows else None


class PersistenceGateway:
    """
    Thin insert/select wrapper over the hosted datastore. Implementations report
    failures through GatewayResult and never raise past this boundary.
    """

    configured: bool = False

    def insert(self, table: str, record: Mapping[str, Any]) -> GatewayResult:
        raise NotImplementedError

    def select(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        order: OrderSpec = (),
        limit: int | None = None,
    ) -> GatewayResult:
        raise NotImplementedError


@dataclass(frozen=True)
class UnavailableGateway(PersistenceGateway):
    reason: str = NOT_CONFIGURED
    configured: bool = False

    def insert(self, table: str, record: Mapping[str, Any]) -> GatewayResult:
        logger.error("Datastore unavailable; insert into %s skipped: %s", table, self.reason)
        return GatewayResult.failed(self.reason)

    def select(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        order: OrderSpec = (),
        limit: int | None = None,
    ) -> GatewayResult:
        logger.error("Datastore unavailable; select from %s skipped: %s", table, self.reason)
        return GatewayResult.failed(self.reason)


@dataclass(frozen=True)
class SqlGateway(PersistenceGateway):
    engine: Engine
    configured: bool = True

    def _table(self, name: str) -> Table:
        table = Base.metadata.tables.get(name)
        if table is None:
            raise DatastoreError(f"Unknown table: {name}")
        return table

    def _columns(self, table: Table, names: Sequence[str]) -> list[str]:
        unknown = [n for n in names if n not in table.c]
        if unknown:
            raise DatastoreError(f"Unknown column(s) on {table.name}: {', '.join(unknown)}")
        return list(names)

    def insert(self, table: str, record: Mapping[str, Any]) -> GatewayResult:
        try:
            t = self._table(table)
            self._columns(t, list(record.keys()))
            with self.engine.begin() as conn:
                res = conn.execute(insert(t).values(**record))
                pk = res.inserted_primary_key
            row = dict(record)
            if pk:
                row["id"] = pk[0]
            return GatewayResult(ok=True, rows=[row])
        except (SQLAlchemyError, DatastoreError) as e:
            logger.exception("Insert into %s failed: %s", table, e)
            return GatewayResult.failed(str(e))

    def select(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        order: OrderSpec = (),
        limit: int | None = None,
    ) -> GatewayResult:
        try:
            t = self._table(table)
            filters = filters or {}
            self._columns(t, list(filters.keys()) + [col for col, _ in order])

            stmt = select(t)
            for col, value in filters.items():
                stmt = stmt.where(t.c[col] == value)
            for col, direction in order:
                direction = (direction or "asc").lower()
                if direction not in ("asc", "desc"):
                    raise DatastoreError(f"Invalid sort direction: {direction}")
                stmt = stmt.order_by(t.c[col].desc() if direction == "desc" else t.c[col].asc())
            if limit is not None:
                stmt = stmt.limit(limit)

            with self.engine.connect() as conn:
                rows = [dict(r) for r in conn.execute(stmt).mappings()]
            return GatewayResult(ok=True, rows=rows)
        except (SQLAlchemyError, DatastoreError) as e:
            logger.exception("Select from %s failed: %s", table, e)
            return GatewayResult.failed(str(e))


def gateway_from_engine(engine: Engine | None) -> PersistenceGateway:
    if engine is None:
        return UnavailableGateway()
    return SqlGateway(engine=engine)
