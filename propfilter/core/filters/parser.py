"""Filter parser for applying property filters to SQLAlchemy queries."""

import logging
from datetime import date, datetime, timedelta
from typing import Any

from sqlalchemy import and_, or_
from sqlalchemy.orm import Query
from sqlalchemy.sql.elements import ColumnElement

from propfilter.core.filters.property_filter import PropertyFilter
from propfilter.core.filters.types import MatchType, PropertyType

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value matches literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class FilterParser:
    """Parser for turning property filters into SQLAlchemy criteria.

    Supports every filter operator:
    - Comparison: EQ, NE, GT, GE, LT, LE
    - String: LIKE (contains), LLIKE (wildcard on the left), RLIKE (wildcard on the right)
    - Range: BTD (the whole day of a date)
    - Null checks: IN (is null), NN (is not null)

    Filters on several properties are combined with OR. S values have their
    LIKE wildcards escaped; W values keep them.
    """

    @staticmethod
    def apply_property_filters(
        query: Query, model_class: type, filters: list[PropertyFilter]
    ) -> Query:
        """Apply property filters to a SQLAlchemy query.

        Args:
            query: SQLAlchemy query object
            model_class: SQLAlchemy model class
            filters: Property filters, e.g. from build_property_filters()

        Returns:
            Query with filters applied
        """
        for property_filter in filters:
            criterion = FilterParser.to_criterion(model_class, property_filter)
            if criterion is None:
                continue
            query = query.filter(criterion)

        return query

    @staticmethod
    def to_criterion(model_class: type, property_filter: PropertyFilter) -> ColumnElement[Any] | None:
        """Build the criterion for one property filter.

        Returns:
            The criterion, or None when no filtered property exists in the model.
        """
        criteria = []
        for property_name in property_filter.property_names:
            # Skip if field doesn't exist in model
            if not hasattr(model_class, property_name):
                logger.warning(f"Field '{property_name}' not found in model {model_class.__name__}")
                continue
            column = getattr(model_class, property_name)
            criterion = FilterParser._column_criterion(column, property_filter)
            if criterion is not None:
                criteria.append(criterion)

        if not criteria:
            return None
        if len(criteria) == 1:
            return criteria[0]
        return or_(*criteria)

    @staticmethod
    def _column_criterion(column: Any, property_filter: PropertyFilter) -> ColumnElement[Any] | None:
        match_type = property_filter.match_type
        value = property_filter.match_value

        if match_type == MatchType.EQ:
            return column == value
        if match_type == MatchType.NE:
            return column != value
        if match_type == MatchType.GT:
            return column > value
        if match_type == MatchType.GE:
            return column >= value
        if match_type == MatchType.LT:
            return column < value
        if match_type == MatchType.LE:
            return column <= value
        if match_type == MatchType.IN:
            return column.is_(None)
        if match_type == MatchType.NN:
            return column.isnot(None)
        if match_type == MatchType.BTD:
            if not isinstance(value, date):
                logger.warning(f"Operator 'BTD' requires a date, got {type(value)}")
                return None
            day = value.date() if isinstance(value, datetime) else value
            start = datetime.combine(day, datetime.min.time())
            return and_(column >= start, column < start + timedelta(days=1))

        # LIKE family
        text = str(value)
        if property_filter.property_type == PropertyType.W:
            escape = None
        else:
            text = escape_like(text)
            escape = LIKE_ESCAPE
        if match_type == MatchType.LLIKE:
            pattern = f"%{text}"
        elif match_type == MatchType.RLIKE:
            pattern = f"{text}%"
        else:
            pattern = f"%{text}%"
        return column.like(pattern, escape=escape)
