"""Custom exceptions for property filter parsing."""


class PropertyFilterError(ValueError):
    """Base exception for property filter errors."""

    pass


class InvalidFilterName(PropertyFilterError):
    """Raised when a filter name does not follow the naming convention."""

    def __init__(self, filter_name: str, reason: str) -> None:
        super().__init__(f"Filter name '{filter_name}' is malformed: {reason}")
        self.filter_name = filter_name
        self.reason = reason


class ValueCoercionError(PropertyFilterError):
    """Raised when a raw filter value cannot be converted to its target type."""

    def __init__(self, value: str, type_code: str) -> None:
        super().__init__(f"Value {value!r} cannot be converted to filter type '{type_code}'")
        self.value = value
        self.type_code = type_code


class MultiplePropertiesError(PropertyFilterError):
    """Raised when a single property is requested from a multi-property filter."""

    def __init__(self, property_names: tuple[str, ...]) -> None:
        super().__init__(
            f"Filter compares {len(property_names)} properties, not one: {', '.join(property_names)}"
        )
        self.property_names = property_names


class FilterDecodeError(PropertyFilterError):
    """Raised when a filter value is not valid percent-encoded UTF-8 and decoding is strict."""

    def __init__(self, filter_name: str, value: str) -> None:
        super().__init__(f"Value of filter '{filter_name}' is not valid percent-encoded UTF-8")
        self.filter_name = filter_name
        self.value = value
