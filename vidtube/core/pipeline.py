"""Declarative read pipelines for denormalized views.

A pipeline starts at a root entity and is extended stage by stage; every
stage returns a new pipeline, so partially built pipelines can be shared:

    match         WHERE criteria
    join          inner join, the parent row disappears when nothing matches
    lookup        left outer join projected into a nested object, ``None`` when absent
    count         correlated COUNT(*) over a related table, 0 when nothing matches
    flag          correlated EXISTS rendered as a boolean
    project       output fields; ``owner__username`` nests as {"owner": {"username": ...}}
    embed         one-to-many lookup: a child pipeline grouped into a list field
    replace_root  promote a nested object to be the whole row
    sort          ORDER BY
    paginate      OFFSET/LIMIT from a PageQuery

Rows come back as plain dicts ready for pydantic validation.
"""

from __future__ import annotations

import copy
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import Boolean, ColumnElement, Select, func, literal, select, type_coerce
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.pagination import PageQuery

NEST = "__"
_EMBED_KEY = "embed_key_"

Row = dict[str, Any]


@dataclass(frozen=True)
class _Join:
    target: Any
    onclause: ColumnElement[bool]
    outer: bool


@dataclass(frozen=True)
class _Embed:
    name: str
    pipeline: Pipeline
    parent_key: str
    child_key: ColumnElement[Any]


class Pipeline:
    def __init__(self, root: Any) -> None:
        self._root = root
        self._fields: list[tuple[str, ColumnElement[Any]]] = []
        self._criteria: list[ColumnElement[bool]] = []
        self._joins: list[_Join] = []
        self._order_by: list[ColumnElement[Any]] = []
        self._page: Optional[PageQuery] = None
        self._optional: list[str] = []
        self._embeds: list[_Embed] = []
        self._root_key: Optional[str] = None

    def _clone(self) -> Pipeline:
        clone = copy.copy(self)
        clone._fields = list(self._fields)
        clone._criteria = list(self._criteria)
        clone._joins = list(self._joins)
        clone._order_by = list(self._order_by)
        clone._optional = list(self._optional)
        clone._embeds = list(self._embeds)
        return clone

    # stages

    def match(self, *criteria: ColumnElement[bool]) -> Pipeline:
        clone = self._clone()
        clone._criteria.extend(criteria)
        return clone

    def join(self, target: Any, onclause: ColumnElement[bool]) -> Pipeline:
        clone = self._clone()
        clone._joins.append(_Join(target, onclause, outer=False))
        return clone

    def lookup(
        self,
        name: str,
        target: Any,
        onclause: ColumnElement[bool],
        **fields: ColumnElement[Any],
    ) -> Pipeline:
        clone = self._clone()
        clone._joins.append(_Join(target, onclause, outer=True))
        clone._fields.extend((f"{name}{NEST}{key}", column) for key, column in fields.items())
        clone._optional.append(name)
        return clone

    def project(self, **fields: ColumnElement[Any]) -> Pipeline:
        clone = self._clone()
        clone._fields.extend(fields.items())
        return clone

    def count(self, name: str, model: Any, *criteria: ColumnElement[bool]) -> Pipeline:
        counted = (
            select(func.count())
            .select_from(model)
            .where(*criteria)
            .correlate_except(model)
            .scalar_subquery()
        )
        return self.project(**{name: counted})

    def flag(
        self,
        name: str,
        model: Any,
        *criteria: ColumnElement[bool],
        enabled: bool = True,
    ) -> Pipeline:
        if not enabled:
            return self.project(**{name: literal(False, Boolean)})
        found = (
            select(literal(1))
            .select_from(model)
            .where(*criteria)
            .correlate_except(model)
            .exists()
        )
        return self.project(**{name: type_coerce(found, Boolean)})

    def embed(
        self,
        name: str,
        pipeline: Pipeline,
        parent_key: str,
        child_key: ColumnElement[Any],
    ) -> Pipeline:
        clone = self._clone()
        clone._embeds.append(_Embed(name, pipeline, parent_key, child_key))
        return clone

    def replace_root(self, name: str) -> Pipeline:
        clone = self._clone()
        clone._root_key = name
        return clone

    def sort(self, *order_by: ColumnElement[Any]) -> Pipeline:
        clone = self._clone()
        clone._order_by.extend(order_by)
        return clone

    def paginate(self, page: PageQuery) -> Pipeline:
        clone = self._clone()
        clone._page = page
        return clone

    # compilation

    def _from(self, stmt: Select[Any]) -> Select[Any]:
        stmt = stmt.select_from(self._root)
        for join in self._joins:
            stmt = stmt.join(join.target, join.onclause, isouter=join.outer)
        if self._criteria:
            stmt = stmt.where(*self._criteria)
        return stmt

    def statement(self) -> Select[Any]:
        if not self._fields:
            raise ValueError("pipeline has no projected fields")
        stmt = self._from(select(*(column.label(key) for key, column in self._fields)))
        if self._order_by:
            stmt = stmt.order_by(*self._order_by)
        if self._page is not None:
            stmt = stmt.offset(self._page.offset).limit(self._page.limit)
        return stmt

    def count_statement(self) -> Select[Any]:
        return self._from(select(func.count()))

    # execution

    async def total(self, db: AsyncSession) -> int:
        return int(await db.scalar(self.count_statement()) or 0)

    async def all(self, db: AsyncSession) -> list[Row]:
        result = await db.execute(self.statement())
        rows = [self._shape(dict(row._mapping)) for row in result]
        for embed in self._embeds:
            await self._attach(db, rows, embed)
        if self._root_key is not None:
            rows = [row[self._root_key] for row in rows if row.get(self._root_key) is not None]
        return rows

    async def first(self, db: AsyncSession) -> Optional[Row]:
        rows = await self.all(db)
        return rows[0] if rows else None

    def _shape(self, flat: Row) -> Row:
        row: Row = {}
        for key, value in flat.items():
            *parents, leaf = key.split(NEST)
            target = row
            for part in parents:
                target = target.setdefault(part, {})
            target[leaf] = value
        for name in self._optional:
            nested = row.get(name)
            if isinstance(nested, dict) and all(value is None for value in nested.values()):
                row[name] = None
        return row

    async def _attach(self, db: AsyncSession, rows: list[Row], embed: _Embed) -> None:
        keys = {row[embed.parent_key] for row in rows if row.get(embed.parent_key) is not None}
        grouped: dict[Any, list[Row]] = defaultdict(list)
        if keys:
            child = embed.pipeline.match(embed.child_key.in_(list(keys))).project(
                **{_EMBED_KEY: embed.child_key}
            )
            for child_row in await child.all(db):
                grouped[child_row.pop(_EMBED_KEY)].append(child_row)
        for row in rows:
            row[embed.name] = list(grouped.get(row.get(embed.parent_key), []))
