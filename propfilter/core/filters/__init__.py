"""Property filters parsed from request parameter names."""

from propfilter.core.filters.errors import (
    FilterDecodeError,
    InvalidFilterName,
    MultiplePropertiesError,
    PropertyFilterError,
    ValueCoercionError,
)
from propfilter.core.filters.parser import FilterParser
from propfilter.core.filters.property_filter import (
    OR_SEPARATOR,
    PropertyFilter,
    build_property_filters,
    parse_filter_name,
)
from propfilter.core.filters.request import (
    build_from_request,
    get_parameters_starting_with,
    get_property_filters,
)
from propfilter.core.filters.types import MatchType, PropertyType

__all__ = [
    "FilterDecodeError",
    "FilterParser",
    "InvalidFilterName",
    "MatchType",
    "MultiplePropertiesError",
    "OR_SEPARATOR",
    "PropertyFilter",
    "PropertyFilterError",
    "PropertyType",
    "ValueCoercionError",
    "build_from_request",
    "build_property_filters",
    "get_parameters_starting_with",
    "get_property_filters",
    "parse_filter_name",
]
