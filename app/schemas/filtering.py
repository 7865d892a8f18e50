from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class FilterOperator(str, Enum):
    EQ = "eq"
    NEQ = "neq"
    GT = "gt"
    GTEQ = "gteq"
    LT = "lt"
    LTEQ = "lteq"
    LIKE = "like"


class CoercionRule(str, Enum):
    """How a raw query-string value becomes a typed value for a field."""
    DATE = "date"
    BOOLEAN = "boolean"
    NUMBER = "number"
    ID = "id"
    TEXT = "text"


class Predicate(BaseModel):
    """A single field comparison; all predicates of a query are ANDed."""
    model_config = ConfigDict(frozen=True)

    field: str
    operator: FilterOperator = FilterOperator.EQ
    value: Any


PredicateSet = dict[str, Predicate]
