"""SQLAlchemy gateway for a directly reachable database (self-hosted Postgres, SQLite)."""
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy import MetaData, Table, delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from vendhub.core.exceptions import BackendError
from vendhub.gateway.base import Embed, Filters, Gateway, Row, foreign_key
from vendhub.models import Base  # registers the catalog tables on Base.metadata

logger = logging.getLogger(__name__)


def _backend_error(exc: SQLAlchemyError) -> BackendError:
    orig = getattr(exc, "orig", None) or exc
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return BackendError(str(orig), code=code)


class SqlGateway(Gateway):
    """
    Gateway over SQLAlchemy async Core.

    Every call checks out its own connection, so independent reads may run
    concurrently (asyncio.gather) without sharing a session.
    """

    def __init__(self, engine: AsyncEngine, metadata: Optional[MetaData] = None):
        self._engine = engine
        self._metadata = metadata if metadata is not None else Base.metadata

    def _table(self, name: str) -> Table:
        try:
            return self._metadata.tables[name]
        except KeyError:
            raise BackendError(f'relation "{name}" does not exist', code="42P01") from None

    @staticmethod
    def _check_columns(table: Table, names) -> None:
        for name in names:
            if name not in table.c:
                raise BackendError(
                    f"Could not find the '{name}' column of '{table.name}'", code="PGRST204"
                )

    def _where(self, table: Table, filters: Optional[Filters]):
        conditions = []
        if filters:
            self._check_columns(table, filters.keys())
            for name, value in filters.items():
                col = table.c[name]
                conditions.append(col.is_(None) if value is None else col == value)
        return conditions

    async def _attach(self, conn: AsyncConnection, table_name: str, rows: List[Row], embeds: Tuple[Embed, ...]) -> None:
        for emb in embeds:
            fk = foreign_key(table_name, emb.table)
            related = self._table(emb.table)
            ids = {r[fk] for r in rows if r.get(fk) is not None}
            by_id: Dict[Any, Row] = {}
            if ids:
                result = await conn.execute(select(related).where(related.c.id.in_(ids)))
                related_rows = [dict(r._mapping) for r in result]
                if emb.embed:
                    await self._attach(conn, emb.table, related_rows, emb.embed)
                for rr in related_rows:
                    by_id[rr["id"]] = rr
            for r in rows:
                rr = by_id.get(r.get(fk))
                if rr is not None and emb.columns:
                    self._check_columns(related, emb.columns)
                    rr = {c: rr[c] for c in emb.columns}
                r[emb.table] = rr

    async def select(
        self,
        table: str,
        filters: Optional[Filters] = None,
        order: Optional[str] = None,
        descending: bool = False,
        embed: Tuple[Embed, ...] = (),
    ) -> List[Row]:
        t = self._table(table)
        stmt = select(t).where(*self._where(t, filters))
        if order:
            self._check_columns(t, [order])
            stmt = stmt.order_by(t.c[order].desc() if descending else t.c[order].asc())
        try:
            async with self._engine.connect() as conn:
                result = await conn.execute(stmt)
                rows = [dict(r._mapping) for r in result]
                if embed and rows:
                    await self._attach(conn, table, rows, embed)
        except SQLAlchemyError as e:
            logger.error("Select on %s failed: %s", table, e)
            raise _backend_error(e) from e
        return rows

    async def get(self, table: str, row_id: str, embed: Tuple[Embed, ...] = ()) -> Optional[Row]:
        rows = await self.select(table, {"id": row_id}, embed=embed)
        return rows[0] if rows else None

    async def count(self, table: str, filters: Optional[Filters] = None) -> int:
        t = self._table(table)
        stmt = select(func.count()).select_from(t).where(*self._where(t, filters))
        try:
            async with self._engine.connect() as conn:
                return int((await conn.execute(stmt)).scalar_one())
        except SQLAlchemyError as e:
            logger.error("Count on %s failed: %s", table, e)
            raise _backend_error(e) from e

    async def insert(self, table: str, values: Mapping[str, Any]) -> Row:
        t = self._table(table)
        self._check_columns(t, values.keys())
        stmt = insert(t).values(**values).returning(*t.c)
        try:
            async with self._engine.begin() as conn:
                row = (await conn.execute(stmt)).one()
        except SQLAlchemyError as e:
            logger.error("Insert into %s failed: %s", table, e)
            raise _backend_error(e) from e
        return dict(row._mapping)

    async def update(self, table: str, row_id: str, values: Mapping[str, Any]) -> Optional[Row]:
        t = self._table(table)
        if not values:
            return await self.get(table, row_id)
        self._check_columns(t, values.keys())
        stmt = update(t).where(t.c.id == row_id).values(**values).returning(*t.c)
        try:
            async with self._engine.begin() as conn:
                row = (await conn.execute(stmt)).first()
        except SQLAlchemyError as e:
            logger.error("Update of %s %s failed: %s", table, row_id, e)
            raise _backend_error(e) from e
        return dict(row._mapping) if row is not None else None

    async def delete(self, table: str, row_id: str) -> int:
        t = self._table(table)
        try:
            async with self._engine.begin() as conn:
                result = await conn.execute(delete(t).where(t.c.id == row_id))
        except SQLAlchemyError as e:
            logger.error("Delete of %s %s failed: %s", table, row_id, e)
            raise _backend_error(e) from e
        return result.rowcount or 0

    async def ping(self) -> None:
        try:
            async with self._engine.connect() as conn:
                await conn.execute(select(1))
        except (SQLAlchemyError, OSError) as e:
            raise BackendError(f"Database connection failed: {e}", code="NETWORK_ERROR") from e

    async def close(self) -> None:
        await self._engine.dispose()
