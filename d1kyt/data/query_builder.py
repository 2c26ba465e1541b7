"""Compile-only query builder for SQLite.

Builds SELECT / INSERT / UPDATE / DELETE statements with sqlglot and
returns SQL text plus positional parameters. Nothing here touches a
database; run compiled queries with ``d1kyt.data.executor``.
"""

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional, Sequence, Union

from sqlglot import exp

from d1kyt.domain.exceptions import QueryBuilderError
from d1kyt.domain.value_objects import Table

TableRef = Union[Table, str]

DIALECT = "sqlite"

_COMPARISONS = {
    "=": exp.EQ,
    "!=": exp.NEQ,
    "<>": exp.NEQ,
    "<": exp.LT,
    "<=": exp.LTE,
    ">": exp.GT,
    ">=": exp.GTE,
    "like": exp.Like,
}
_OPERATORS = frozenset(_COMPARISONS) | {"in", "is", "is not"}


@dataclass(frozen=True)
class CompiledQuery:
    """SQL text with its positional bind parameters.

    Attributes:
        sql: Statement using ``?`` placeholders.
        parameters: Values in placeholder order.
    """

    sql: str
    parameters: tuple = ()


@dataclass(frozen=True)
class Condition:
    """One ``<column> <op> <value>`` filter."""

    column: str
    op: str
    value: Any

    def to_expression(self, params: list) -> exp.Expression:
        """Build the sqlglot condition, appending bound values to ``params``."""
        column = exp.column(self.column)
        if self.op in _COMPARISONS:
            params.append(self.value)
            return _COMPARISONS[self.op](this=column, expression=exp.Placeholder())
        if self.op == "in":
            values = list(self.value)
            if not values:
                raise QueryBuilderError(f"Empty IN list for column {self.column}")
            params.extend(values)
            return exp.In(
                this=column, expressions=[exp.Placeholder() for _ in values]
            )
        is_null = exp.Is(this=column, expression=exp.Null())
        return exp.Not(this=is_null) if self.op == "is not" else is_null


def _table(table: TableRef) -> exp.Table:
    name = table.name if isinstance(table, Table) else table
    return exp.Table(this=exp.to_identifier(name))


def _render(expression: exp.Expression) -> str:
    return expression.sql(dialect=DIALECT, identify=True)


def _make_condition(column: str, op: str, value: Any) -> Condition:
    op = op.lower()
    if op not in _OPERATORS:
        raise QueryBuilderError(f"Unsupported operator: {op!r}")
    if op in ("is", "is not") and value is not None:
        raise QueryBuilderError(f"{op.upper()} only compares against None")
    return Condition(column, op, value)


def _where(conditions: Sequence[Condition], params: list) -> Optional[exp.Where]:
    if not conditions:
        return None
    return exp.Where(
        this=exp.and_(*(c.to_expression(params) for c in conditions))
    )


@dataclass(frozen=True)
class SelectQuery:
    table: TableRef
    columns: tuple[str, ...] = ()
    conditions: tuple[Condition, ...] = ()
    ordering: tuple[tuple[str, bool], ...] = ()
    limit_value: Optional[int] = None

    def select(self, *columns: str) -> "SelectQuery":
        return replace(self, columns=self.columns + columns)

    def select_all(self) -> "SelectQuery":
        return replace(self, columns=())

    def where(self, column: str, op: str, value: Any = None) -> "SelectQuery":
        condition = _make_condition(column, op, value)
        return replace(self, conditions=self.conditions + (condition,))

    def order_by(self, column: str, desc: bool = False) -> "SelectQuery":
        return replace(self, ordering=self.ordering + ((column, desc),))

    def limit(self, count: int) -> "SelectQuery":
        return replace(self, limit_value=count)

    def compile(self) -> CompiledQuery:
        params: list = []
        projections = [exp.column(c) for c in self.columns] or [exp.Star()]
        query = exp.select(*projections).from_(_table(self.table))
        where = _where(self.conditions, params)
        if where is not None:
            query.set("where", where)
        for column, desc in self.ordering:
            # Explicit null placement keeps SQLite's natural order, so no
            # NULLS FIRST/LAST clause is generated.
            query = query.order_by(
                exp.Ordered(
                    this=exp.column(column),
                    desc=True if desc else None,
                    nulls_first=not desc,
                )
            )
        if self.limit_value is not None:
            query = query.limit(self.limit_value)
        return CompiledQuery(_render(query), tuple(params))


@dataclass(frozen=True)
class InsertQuery:
    table: TableRef
    rows: tuple[Mapping[str, Any], ...] = ()

    def values(
        self, rows: Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]
    ) -> "InsertQuery":
        if isinstance(rows, Mapping):
            rows = [rows]
        return replace(self, rows=self.rows + tuple(dict(r) for r in rows))

    def compile(self) -> CompiledQuery:
        if not self.rows:
            raise QueryBuilderError("INSERT requires at least one row of values")
        columns = list(self.rows[0])
        if not columns:
            raise QueryBuilderError("INSERT rows must name at least one column")
        params: list = []
        tuples = []
        for row in self.rows:
            if list(row) != columns:
                raise QueryBuilderError(
                    f"All INSERT rows must have columns {columns}, got {list(row)}"
                )
            params.extend(row[c] for c in columns)
            tuples.append(
                exp.Tuple(expressions=[exp.Placeholder() for _ in columns])
            )
        query = exp.Insert(
            this=exp.Schema(
                this=_table(self.table),
                expressions=[exp.to_identifier(c) for c in columns],
            ),
            expression=exp.Values(expressions=tuples),
        )
        return CompiledQuery(_render(query), tuple(params))


@dataclass(frozen=True)
class UpdateQuery:
    table: TableRef
    assignments: tuple[tuple[str, Any], ...] = ()
    conditions: tuple[Condition, ...] = ()

    def set(self, values: Mapping[str, Any]) -> "UpdateQuery":
        return replace(self, assignments=self.assignments + tuple(values.items()))

    def where(self, column: str, op: str, value: Any = None) -> "UpdateQuery":
        condition = _make_condition(column, op, value)
        return replace(self, conditions=self.conditions + (condition,))

    def compile(self) -> CompiledQuery:
        if not self.assignments:
            raise QueryBuilderError("UPDATE requires at least one SET value")
        params: list = []
        setters = []
        for column, value in self.assignments:
            params.append(value)
            setters.append(
                exp.EQ(this=exp.column(column), expression=exp.Placeholder())
            )
        query = exp.Update(
            this=_table(self.table),
            expressions=setters,
            where=_where(self.conditions, params),
        )
        return CompiledQuery(_render(query), tuple(params))


@dataclass(frozen=True)
class DeleteQuery:
    table: TableRef
    conditions: tuple[Condition, ...] = ()

    def where(self, column: str, op: str, value: Any = None) -> "DeleteQuery":
        condition = _make_condition(column, op, value)
        return replace(self, conditions=self.conditions + (condition,))

    def compile(self) -> CompiledQuery:
        params: list = []
        query = exp.Delete(
            this=_table(self.table), where=_where(self.conditions, params)
        )
        return CompiledQuery(_render(query), tuple(params))


class QueryBuilder:
    """Entry point for building compiled SQLite queries.

    Example::

        qb = create_query_builder()
        query = qb.select_from("User").select_all().where("id", "=", 1).compile()
        query.sql         # 'SELECT * FROM "User" WHERE "id" = ?'
        query.parameters  # (1,)
    """

    def select_from(self, table: TableRef) -> SelectQuery:
        return SelectQuery(table)

    def insert_into(self, table: TableRef) -> InsertQuery:
        return InsertQuery(table)

    def update_table(self, table: TableRef) -> UpdateQuery:
        return UpdateQuery(table)

    def delete_from(self, table: TableRef) -> DeleteQuery:
        return DeleteQuery(table)


def create_query_builder() -> QueryBuilder:
    return QueryBuilder()
