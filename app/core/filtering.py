"""Query-string filter resolution.

Turns a flat query map such as ``{"initial_date": "{gteq}2025-01-01"}`` into a
:data:`PredicateSet` a repository can apply. Values may carry an operator
marker prefix::

    field=value          equality
    field={neq}value     not equal
    field={gt}value      greater than
    field={gteq}value    greater than or equal
    field={lt}value      less than
    field={lteq}value    less than or equal
    field={like}value    case-insensitive contains; surrounding % are optional

Unless the caller filters on ``deleted`` explicitly, ``deleted = false`` is
added so soft-deleted rows stay hidden.
"""
import re
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

from app.schemas.filtering import CoercionRule, FilterOperator, Predicate, PredicateSet

SOFT_DELETE_FIELD = "deleted"

OPERATOR_MARKER = re.compile(r"\{(\w+)\}(.*)")

DEFAULT_OPERATOR_MARKERS: Mapping[str, FilterOperator] = MappingProxyType({
    "neq": FilterOperator.NEQ,
    "gt": FilterOperator.GT,
    "gteq": FilterOperator.GTEQ,
    "lt": FilterOperator.LT,
    "lteq": FilterOperator.LTEQ,
    "like": FilterOperator.LIKE,
})


def coerce_date(value: str) -> date | str:
    # Unparseable dates are handed on as-is; the query validator rejects them first.
    try:
        return date.fromisoformat(value)
    except ValueError:
        return value


def coerce_boolean(value: str) -> bool:
    return value.lower() == "true"


def coerce_number(value: str) -> float | str:
    try:
        return float(value)
    except ValueError:
        return value


def passthrough(value: str) -> str:
    return value


DEFAULT_COERCERS: Mapping[CoercionRule, Callable[[str], Any]] = MappingProxyType({
    CoercionRule.DATE: coerce_date,
    CoercionRule.BOOLEAN: coerce_boolean,
    CoercionRule.NUMBER: coerce_number,
    CoercionRule.ID: passthrough,
    CoercionRule.TEXT: passthrough,
})


def like_pattern(value: str) -> str:
    """Normalize ``%term%``, ``term`` and ``%term`` to ``%term%``."""
    if value.startswith("%"):
        value = value[1:]
    if value.endswith("%"):
        value = value[:-1]
    return f"%{value}%"


@dataclass(frozen=True)
class EntityFields:
    """Per-entity field table.

    ``types`` drives both query coercion and update merging; ``protected``
    names the fields callers may filter on but never write.
    """
    types: Mapping[str, CoercionRule]
    protected: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        object.__setattr__(self, "types", MappingProxyType(dict(self.types)))
        object.__setattr__(self, "protected", frozenset(self.protected))

    @property
    def writable(self) -> frozenset[str]:
        return frozenset(name for name in self.types if name not in self.protected)


class FilterResolver:
    """Resolve raw query maps into predicate sets for one entity schema.

    The resolver holds only read-only tables, so a single instance can be
    shared between concurrent requests.
    """

    def __init__(
        self,
        field_types: Mapping[str, CoercionRule],
        operators: Mapping[str, FilterOperator] = DEFAULT_OPERATOR_MARKERS,
        coercers: Mapping[CoercionRule, Callable[[str], Any]] = DEFAULT_COERCERS,
        soft_delete_field: str = SOFT_DELETE_FIELD,
    ):
        self._field_types = MappingProxyType(dict(field_types))
        self._operators = MappingProxyType(dict(operators))
        self._coercers = MappingProxyType(dict(coercers))
        self._soft_delete_field = soft_delete_field

    @property
    def field_types(self) -> Mapping[str, CoercionRule]:
        return self._field_types

    def coerce(self, key: str, value: str) -> Any:
        rule = self._field_types.get(key)
        if rule is None:
            return value
        return self._coercers.get(rule, passthrough)(value)

    def resolve_token(self, key: str, value: str | None) -> Predicate | None:
        """Resolve one query token, or ``None`` when it yields no predicate."""
        if not value:
            return None

        match = OPERATOR_MARKER.fullmatch(value)
        if match is None:
            # Also covers values that merely start with "{", e.g. "{bogus".
            return Predicate(field=key, operator=FilterOperator.EQ, value=self.coerce(key, value))

        marker, rest = match.groups()
        operator = self._operators.get(marker)
        if operator is None:
            return None
        if operator is FilterOperator.LIKE:
            return Predicate(field=key, operator=operator, value=like_pattern(rest))
        return Predicate(field=key, operator=operator, value=self.coerce(key, rest))

    def resolve(
        self,
        raw_query: Mapping[str, str | None] | Iterable[tuple[str, str | None]],
    ) -> PredicateSet:
        """Resolve every token; a repeated key keeps its last predicate."""
        pairs = raw_query.items() if isinstance(raw_query, Mapping) else raw_query
        predicates: PredicateSet = {}
        for key, value in pairs:
            predicate = self.resolve_token(key, value)
            if predicate is not None:
                predicates[key] = predicate

        if self._soft_delete_field not in predicates:
            predicates[self._soft_delete_field] = Predicate(
                field=self._soft_delete_field,
                operator=FilterOperator.EQ,
                value=False,
            )
        return predicates
