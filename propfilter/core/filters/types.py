"""Operator and value-type codes used in filter names."""

from datetime import datetime
from enum import Enum


class MatchType(str, Enum):
    """Comparison operators, keyed by their filter-name mnemonic."""
    EQ = "EQ"
    NE = "NE"
    LIKE = "LIKE"
    LLIKE = "LLIKE"
    RLIKE = "RLIKE"
    LT = "LT"
    GT = "GT"
    LE = "LE"
    GE = "GE"
    NN = "NN"  # is not null
    IN = "IN"  # is null
    BTD = "BTD"  # between, date range

    @property
    def requires_value(self) -> bool:
        """Whether a comparison value is coerced for this operator."""
        return self not in NULL_CHECK_MATCH_TYPES

    @property
    def sql_operator(self) -> str | None:
        """Comparison symbol for textual predicates, or None when there is none."""
        return SQL_OPERATORS.get(self)


class PropertyType(str, Enum):
    """Value types, keyed by their one-character filter-name code."""
    S = "S"
    I = "I"  # noqa: E741
    L = "L"
    F = "F"
    N = "N"
    D = "D"
    B = "B"
    W = "W"

    @property
    def python_type(self) -> type:
        """Python type a raw value of this code is converted to."""
        return PROPERTY_TYPE_CLASSES[self]


NULL_CHECK_MATCH_TYPES = frozenset({MatchType.IN, MatchType.NN})

SQL_OPERATORS: dict[MatchType, str] = {
    MatchType.EQ: "=",
    MatchType.NE: "!=",
    MatchType.GT: ">",
    MatchType.LT: "<",
    MatchType.GE: ">=",
    MatchType.LE: "<=",
    MatchType.IN: "is null",
    MatchType.NN: "is not null",
}

# W is a second string type; only downstream consumers tell it apart from S.
PROPERTY_TYPE_CLASSES: dict[PropertyType, type] = {
    PropertyType.S: str,
    PropertyType.I: int,
    PropertyType.L: int,
    PropertyType.F: float,
    PropertyType.N: float,
    PropertyType.D: datetime,
    PropertyType.B: bool,
    PropertyType.W: str,
}
