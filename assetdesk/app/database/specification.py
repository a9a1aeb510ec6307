"""Query specifications and their evaluation.

A ``QuerySpecification`` describes one list query as data: mandatory scope
clauses, optional user criteria, a sort field with direction, and a
skip/take window. The same specification can be evaluated against an
in-memory sequence or compiled onto an SQLAlchemy ``Select``; both paths
apply the steps in the same order:

    scope -> criteria -> sort -> skip -> take

Counts are always taken over the filtered set before paging.

Example:
    spec = QuerySpecification(
        criteria=CriteriaBuilder().search("jo", UserFields.username).build(),
        order_by=UserFields.first_name,
        default_order=UserFields.first_name,
        tiebreaker=UserFields.id,
        skip=0,
        take=10,
    )
    page = SpecificationEvaluator.evaluate(users, spec)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Generic, Iterable, List, Mapping, Optional, Sequence, Tuple, TypeVar

from sqlalchemy import and_, func, or_, select
from sqlalchemy.sql import ColumnElement, Select

T = TypeVar("T")


@dataclass(frozen=True)
class EntityField:
    """A named attribute of an entity, usable in memory and in SQL.

    Attributes:
        path: Dotted attribute path, e.g. ``"asset.asset_code"``
        column: SQLAlchemy column expression for the same value
        case_insensitive: Compare and sort on the lowercased value

    In memory the value is lowercased with ``str.lower`` (full Unicode); in
    SQL it goes through the database's ``lower()``. SQLite only folds ASCII,
    so in-memory and SQL ordering agree for ASCII text but may differ for
    other letters such as Vietnamese ``Đ``. PostgreSQL folds per its collation.
    """

    path: str
    column: Any = field(default=None, compare=False)
    case_insensitive: bool = False

    def resolve(self, entity: Any) -> Any:
        """Follow ``path`` on ``entity``; a ``None`` hop resolves to ``None``."""
        value = entity
        for part in self.path.split("."):
            if value is None:
                return None
            value = getattr(value, part)
        return value

    def sort_value(self, entity: Any) -> Any:
        value = self.resolve(entity)
        if self.case_insensitive and isinstance(value, str):
            return value.lower()
        return value

    def expression(self) -> ColumnElement:
        if self.column is None:
            raise ValueError(f"Field '{self.path}' has no SQL column")
        return self.column

    def sort_expression(self) -> ColumnElement:
        column = self.expression()
        return func.lower(column) if self.case_insensitive else column


class Clause(ABC):
    """One boolean condition over an entity."""

    @abstractmethod
    def matches(self, entity: Any) -> bool:
        """Evaluate the condition against a loaded entity."""

    @abstractmethod
    def to_expression(self) -> ColumnElement:
        """Compile the condition to an SQL boolean expression."""


@dataclass(frozen=True)
class Contains(Clause):
    """Case-insensitive substring match against any of ``fields``."""

    text: str
    fields: Tuple[EntityField, ...]

    def matches(self, entity: Any) -> bool:
        needle = self.text.lower()
        for entity_field in self.fields:
            value = entity_field.resolve(entity)
            if value is not None and needle in str(value).lower():
                return True
        return False

    def to_expression(self) -> ColumnElement:
        # autoescape keeps % and _ in the search text literal
        return or_(*[
            entity_field.expression().icontains(self.text, autoescape=True)
            for entity_field in self.fields
        ])


@dataclass(frozen=True)
class Equals(Clause):
    """Exact match of one field against a value."""

    field: EntityField
    value: Any

    def matches(self, entity: Any) -> bool:
        return self.field.resolve(entity) == self.value

    def to_expression(self) -> ColumnElement:
        return self.field.expression() == self.value


class CriteriaBuilder:
    """Collect clauses, skipping every clause whose input is absent."""

    def __init__(self):
        self._clauses: List[Clause] = []

    def search(self, text: Optional[str], *fields: EntityField) -> "CriteriaBuilder":
        if text is not None and text.strip():
            self._clauses.append(Contains(text.strip(), tuple(fields)))
        return self

    def equals(self, entity_field: EntityField, value: Any) -> "CriteriaBuilder":
        if value is not None:
            self._clauses.append(Equals(entity_field, value))
        return self

    def build(self) -> Tuple[Clause, ...]:
        return tuple(self._clauses)


def _normalize_sort_name(name: str) -> str:
    return name.strip().replace("_", "").lower()


class SortTable:
    """Closed mapping from accepted sort names to fields.

    Names are matched case-insensitively with underscores ignored, so
    ``assetCode``, ``asset_code`` and ``ASSETCODE`` are the same key.
    Unknown names resolve to the default entry.
    """

    def __init__(self, entries: Mapping[str, EntityField], default: str):
        self._entries = {_normalize_sort_name(name): value for name, value in entries.items()}
        default_key = _normalize_sort_name(default)
        if default_key not in self._entries:
            raise ValueError(f"Default sort key '{default}' is not in the table")
        self.default = self._entries[default_key]

    def resolve(self, name: Optional[str]) -> EntityField:
        if not name:
            return self.default
        return self._entries.get(_normalize_sort_name(name), self.default)


@dataclass(frozen=True)
class QuerySpecification(Generic[T]):
    """Immutable filter + sort + page description for one query.

    ``order_by`` and ``order_by_descending`` are mutually exclusive. When
    neither is set the query is sorted ascending on ``default_order``.
    ``tiebreaker`` (normally the id) is appended to every ordering. A
    ``take`` of 0 disables paging.
    """

    default_order: EntityField
    tiebreaker: EntityField
    scope: Tuple[Clause, ...] = ()
    criteria: Tuple[Clause, ...] = ()
    order_by: Optional[EntityField] = None
    order_by_descending: Optional[EntityField] = None
    skip: int = 0
    take: int = 0

    def __post_init__(self):
        if self.order_by is not None and self.order_by_descending is not None:
            raise ValueError("order_by and order_by_descending are mutually exclusive")
        if self.skip < 0 or self.take < 0:
            raise ValueError("skip and take must be non-negative")

    @property
    def is_paging_enabled(self) -> bool:
        return self.take > 0

    @property
    def sort_field(self) -> EntityField:
        return self.order_by_descending or self.order_by or self.default_order

    @property
    def is_descending(self) -> bool:
        return self.order_by_descending is not None

    @property
    def clauses(self) -> Tuple[Clause, ...]:
        """Scope first, then user criteria."""
        return self.scope + self.criteria

    @classmethod
    def build(
        cls,
        sort_table: SortTable,
        tiebreaker: EntityField,
        *,
        scope: Sequence[Clause] = (),
        criteria: Sequence[Clause] = (),
        order_by: Optional[str] = None,
        is_descending: bool = False,
        skip: int = 0,
        take: int = 0
    ) -> "QuerySpecification":
        """Build a specification from raw list parameters.

        Without an ``order_by`` name the default field is used ascending,
        whatever ``is_descending`` says. An unrecognized name still honours
        the direction flag on the default field.
        """
        sort_field = sort_table.resolve(order_by)
        descending = bool(order_by) and bool(is_descending)
        return cls(
            default_order=sort_table.default,
            tiebreaker=tiebreaker,
            scope=tuple(scope),
            criteria=tuple(criteria),
            order_by=None if descending else sort_field,
            order_by_descending=sort_field if descending else None,
            skip=skip,
            take=take,
        )


class SpecificationEvaluator:
    """Apply a ``QuerySpecification`` to a sequence or an SQL query."""

    @staticmethod
    def filter(items: Iterable[T], spec: QuerySpecification) -> List[T]:
        result = list(items)
        for clause in spec.clauses:
            result = [item for item in result if clause.matches(item)]
        return result

    @staticmethod
    def sort(items: Iterable[T], spec: QuerySpecification) -> List[T]:
        """Sort on the spec's field; ties keep tiebreaker order, ``None`` goes last."""
        ordered = sorted(items, key=spec.tiebreaker.sort_value)
        sort_field = spec.sort_field

        present = [item for item in ordered if sort_field.sort_value(item) is not None]
        missing = [item for item in ordered if sort_field.sort_value(item) is None]
        # list.sort is stable for reverse=True as well
        present.sort(key=sort_field.sort_value, reverse=spec.is_descending)
        return present + missing

    @staticmethod
    def page(items: Sequence[T], spec: QuerySpecification) -> List[T]:
        window = list(items)[spec.skip:]
        if spec.is_paging_enabled:
            window = window[:spec.take]
        return window

    @classmethod
    def evaluate(cls, items: Iterable[T], spec: QuerySpecification) -> List[T]:
        """Filter, sort and page an in-memory collection."""
        return cls.page(cls.sort(cls.filter(items, spec), spec), spec)

    @classmethod
    def count(cls, items: Iterable[T], spec: QuerySpecification) -> int:
        """Number of matching items, ignoring skip/take."""
        return len(cls.filter(items, spec))

    @staticmethod
    def where(query: Select, spec: QuerySpecification) -> Select:
        if spec.clauses:
            query = query.where(and_(*[clause.to_expression() for clause in spec.clauses]))
        return query

    @classmethod
    def get_query(cls, query: Select, spec: QuerySpecification) -> Select:
        """Compile the specification onto ``query``."""
        query = cls.where(query, spec)

        sort_column = spec.sort_field.sort_expression()
        ordering = sort_column.desc() if spec.is_descending else sort_column.asc()
        query = query.order_by(ordering.nulls_last(), spec.tiebreaker.expression().asc())

        if spec.skip:
            query = query.offset(spec.skip)
        if spec.is_paging_enabled:
            query = query.limit(spec.take)
        return query

    @classmethod
    def count_query(cls, query: Select, spec: QuerySpecification) -> Select:
        """Count of the filtered, unpaged rows of ``query``."""
        filtered = cls.where(query, spec).order_by(None)
        return select(func.count()).select_from(filtered.subquery())
