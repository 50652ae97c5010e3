"""String to typed value conversion for filter values."""

from collections.abc import Sequence
from datetime import datetime
from typing import Annotated, Any

from pydantic import Field, TypeAdapter, ValidationError

from propfilter.core.config import get_settings
from propfilter.core.filters.errors import ValueCoercionError
from propfilter.core.filters.types import PropertyType

INT32_MIN, INT32_MAX = -(2**31), 2**31 - 1
INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1

_ADAPTERS: dict[PropertyType, TypeAdapter[Any]] = {
    PropertyType.I: TypeAdapter(Annotated[int, Field(ge=INT32_MIN, le=INT32_MAX)]),
    PropertyType.L: TypeAdapter(Annotated[int, Field(ge=INT64_MIN, le=INT64_MAX)]),
    PropertyType.F: TypeAdapter(float),
    PropertyType.N: TypeAdapter(float),
    PropertyType.B: TypeAdapter(bool),
}


def parse_date(value: str, date_formats: Sequence[str]) -> datetime:
    """Parse a date string against each layout in turn.

    Raises:
        ValueError: If no layout matches.
    """
    text = value.strip()
    for date_format in date_formats:
        try:
            return datetime.strptime(text, date_format)
        except ValueError:
            continue
    raise ValueError(f"'{value}' does not match any of {list(date_formats)}")


def convert_string(
    value: str,
    property_type: PropertyType,
    date_formats: Sequence[str] | None = None,
) -> Any:
    """Convert a raw filter value to the Python type of its type code.

    Args:
        value: Decoded string value from the request.
        property_type: Target value type.
        date_formats: Layouts accepted for D values. Defaults to the
            FILTER_DATE_FORMATS setting.

    Returns:
        The typed value. S and W values are returned unchanged.

    Raises:
        ValueCoercionError: If the value cannot be converted.
    """
    if property_type in (PropertyType.S, PropertyType.W):
        return value

    try:
        if property_type is PropertyType.D:
            if date_formats is None:
                date_formats = get_settings().FILTER_DATE_FORMATS
            return parse_date(value, date_formats)
        return _ADAPTERS[property_type].validate_python(value)
    except (ValidationError, ValueError) as e:
        raise ValueCoercionError(value, property_type.value) from e
