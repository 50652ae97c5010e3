"""Property filters parsed from request parameter names.

A filter name encodes the comparison operator, the value type and the
properties to compare, e.g. ``LIKES_name_OR_login_name`` compares ``name``
or ``login_name`` against a string with LIKE. In a request the name carries
a prefix: ``filter_LIKES_name_OR_login_name``.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Any
from urllib.parse import unquote_plus

from propfilter.core.config import get_settings
from propfilter.core.filters.convert import convert_string
from propfilter.core.filters.errors import (
    FilterDecodeError,
    InvalidFilterName,
    MultiplePropertiesError,
    PropertyFilterError,
)
from propfilter.core.filters.types import MatchType, PropertyType
from propfilter.core.logging import log_filter_decode_failure

logger = logging.getLogger(__name__)

# Separator between properties compared with OR
OR_SEPARATOR = "_OR_"
NAME_SEPARATOR = "_"

_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def split_filter_name(filter_name: str) -> tuple[str, str, str]:
    """Split a filter name into operator mnemonic, type code and property segment.

    Examples:
        >>> split_filter_name("LIKES_name_OR_email")
        ('LIKE', 'S', 'name_OR_email')
    """
    head, _, property_segment = filter_name.partition(NAME_SEPARATOR)
    return head[:-1], head[-1:], property_segment


def parse_filter_name(filter_name: str) -> tuple[MatchType, PropertyType, tuple[str, ...]]:
    """Parse a filter name into its operator, value type and property names.

    Args:
        filter_name: Filter name without request prefix, e.g. ``EQS_name``.

    Returns:
        Tuple of (match type, property type, property names).

    Raises:
        InvalidFilterName: If the operator or type code is unknown, or no
            property name can be read.
    """
    match_code, type_code, property_segment = split_filter_name(filter_name)

    try:
        match_type = MatchType(match_code)
    except ValueError as e:
        raise InvalidFilterName(filter_name, f"unknown operator '{match_code}'") from e

    try:
        property_type = PropertyType(type_code)
    except ValueError as e:
        raise InvalidFilterName(filter_name, f"unknown value type '{type_code}'") from e

    if not property_segment.strip():
        raise InvalidFilterName(filter_name, "no property name")

    property_names = tuple(property_segment.split(OR_SEPARATOR))
    if not all(property_names):
        raise InvalidFilterName(filter_name, "empty property name")

    return match_type, property_type, property_names


@dataclass(frozen=True)
class PropertyFilter:
    """One filter condition, independent of the persistence layer.

    ``match_value`` holds the converted value, or None for IN and NN.
    ``origin_value`` keeps the decoded string as it was received.
    """

    match_type: MatchType
    property_type: PropertyType
    property_names: tuple[str, ...]
    origin_value: str | None = None
    match_value: Any = None

    def __post_init__(self) -> None:
        if not self.property_names:
            raise PropertyFilterError("A property filter needs at least one property name")
        object.__setattr__(self, "property_names", tuple(self.property_names))
        if not self.match_type.requires_value:
            object.__setattr__(self, "match_value", None)

    @classmethod
    def from_filter_name(cls, filter_name: str, value: str | None) -> "PropertyFilter":
        """Build a filter from a filter name and its raw value.

        Args:
            filter_name: Filter name without request prefix, e.g. ``LIKES_name_OR_email``.
            value: Decoded value. Ignored for IN and NN apart from ``origin_value``.

        Raises:
            InvalidFilterName: If the filter name is malformed.
            ValueCoercionError: If the value cannot be converted to the value type.
        """
        match_type, property_type, property_names = parse_filter_name(filter_name)
        if value is None:
            value = ""

        match_value = None
        if match_type.requires_value:
            match_value = convert_string(value, property_type)

        return cls(
            match_type=match_type,
            property_type=property_type,
            property_names=property_names,
            origin_value=value,
            match_value=match_value,
        )

    @property
    def property_type_code(self) -> str:
        return self.property_type.value

    @property
    def property_class(self) -> type:
        return self.property_type.python_type

    @property
    def property_name(self) -> str:
        """The only compared property.

        Raises:
            MultiplePropertiesError: If the filter compares several properties.
        """
        if len(self.property_names) != 1:
            raise MultiplePropertiesError(self.property_names)
        return self.property_names[0]

    @property
    def has_multi_properties(self) -> bool:
        return len(self.property_names) > 1

    @property
    def sql_operator(self) -> str | None:
        """SQL comparison symbol; None for LIKE, LLIKE, RLIKE and BTD."""
        return self.match_type.sql_operator

    def with_changes(self, **changes: Any) -> "PropertyFilter":
        """Return a copy with the given fields replaced.

        The filter name is not parsed again, so ``match_value`` is not
        converted from a new ``origin_value``.
        """
        return replace(self, **changes)


def decode_filter_value(filter_name: str, value: Any, strict: bool = False) -> str:
    """Percent-decode a raw filter value as UTF-8.

    Invalid input is logged and decoded as an empty string, unless ``strict``.

    Raises:
        FilterDecodeError: If the value is invalid and ``strict`` is set.
    """
    raw = "" if value is None else str(value)
    try:
        if _MALFORMED_ESCAPE.search(raw):
            raise ValueError("incomplete percent escape")
        return unquote_plus(raw, encoding="utf-8", errors="strict")
    except ValueError as e:
        if strict:
            raise FilterDecodeError(filter_name, raw) from e
        log_filter_decode_failure(filter_name, raw, e)
        return ""


def strip_prefix(params: Mapping[str, Any], prefix: str) -> dict[str, Any]:
    """Select parameters named ``<prefix>_...`` and drop the prefix from their names."""
    start = f"{prefix}{NAME_SEPARATOR}"
    return {name[len(start):]: value for name, value in params.items() if name.startswith(start)}


def build_property_filters(
    params: Mapping[str, Any],
    prefix: str | None = None,
    strict_decoding: bool | None = None,
) -> list[PropertyFilter]:
    """Build property filters from request parameters.

    Parameters are selected by the ``<prefix>_`` name prefix. Blank values
    are skipped, except for IN filters, which take no value.

    Args:
        params: Parameter names mapped to raw values.
        prefix: Filter parameter prefix. Defaults to FILTER_PARAM_PREFIX.
        strict_decoding: Fail on undecodable values. Defaults to FILTER_STRICT_DECODING.

    Returns:
        Filters in the iteration order of ``params``.

    Raises:
        InvalidFilterName: If any selected filter name is malformed.
        ValueCoercionError: If any selected value cannot be converted.
        FilterDecodeError: If a value cannot be decoded and decoding is strict.
    """
    settings = get_settings()
    if prefix is None:
        prefix = settings.FILTER_PARAM_PREFIX
    if strict_decoding is None:
        strict_decoding = settings.FILTER_STRICT_DECODING

    return list(_iter_filters(strip_prefix(params, prefix), strict_decoding))


def _iter_filters(filter_params: Mapping[str, Any], strict_decoding: bool) -> Iterable[PropertyFilter]:
    for filter_name, raw_value in filter_params.items():
        value = decode_filter_value(filter_name, raw_value, strict=strict_decoding)

        match_code, _, _ = split_filter_name(filter_name)
        if match_code != MatchType.IN.value and not value.strip():
            logger.debug(f"Skipping filter with blank value - filter={filter_name}")
            continue

        yield PropertyFilter.from_filter_name(filter_name, value)
