"""Request integration: reading filter parameters from FastAPI requests."""

from collections.abc import Mapping
from typing import Any

from fastapi import Request

from propfilter.core.config import get_settings
from propfilter.core.exceptions import raise_bad_request
from propfilter.core.filters.errors import FilterDecodeError, InvalidFilterName, ValueCoercionError
from propfilter.core.filters.property_filter import NAME_SEPARATOR, PropertyFilter, build_property_filters

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_parameters_starting_with(
    request: Request,
    prefix: str,
    form: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Collect request parameters whose name starts with a prefix.

    Query parameters are read first, then form fields. A repeated name keeps
    its last value.

    Args:
        request: FastAPI Request object.
        prefix: Name prefix, e.g. ``filter_``.
        form: Form fields already read from the request body (optional).

    Returns:
        Full parameter names mapped to their values.
    """
    params: dict[str, Any] = {}
    for name, value in request.query_params.multi_items():
        if name.startswith(prefix):
            params[name] = value

    if form is not None:
        items = form.multi_items() if hasattr(form, "multi_items") else form.items()
        for name, value in items:
            if name.startswith(prefix):
                params[name] = value

    return params


def build_from_request(
    request: Request,
    prefix: str | None = None,
    form: Mapping[str, Any] | None = None,
) -> list[PropertyFilter]:
    """
    Build property filters from a request's ``<prefix>_`` parameters.

    Args:
        request: FastAPI Request object.
        prefix: Filter parameter prefix. Defaults to FILTER_PARAM_PREFIX.
        form: Form fields already read from the request body (optional).

    Returns:
        Property filters in parameter order.

    Raises:
        InvalidFilterName: If a filter name is malformed.
        ValueCoercionError: If a filter value cannot be converted.
    """
    if prefix is None:
        prefix = get_settings().FILTER_PARAM_PREFIX
    params = get_parameters_starting_with(request, prefix + NAME_SEPARATOR, form=form)
    return build_property_filters(params, prefix=prefix)


async def get_property_filters(request: Request) -> list[PropertyFilter]:
    """
    FastAPI dependency providing the request's property filters.

    Usage:
        @router.get("/users")
        async def list_users(
            filters: Annotated[list[PropertyFilter], Depends(get_property_filters)],
        ):
            ...

    Raises:
        APIException: 400 when a filter name or value is invalid.
    """
    form = None
    if request.headers.get("content-type", "").startswith(FORM_CONTENT_TYPES):
        form = await request.form()

    try:
        return build_from_request(request, form=form)
    except InvalidFilterName as e:
        raise_bad_request(
            "FILTER_INVALID_NAME", str(e), details={"filter_name": e.filter_name}
        )
    except ValueCoercionError as e:
        raise_bad_request(
            "FILTER_INVALID_VALUE",
            str(e),
            details={"value": e.value, "type_code": e.type_code},
        )
    except FilterDecodeError as e:
        raise_bad_request(
            "FILTER_INVALID_ENCODING", str(e), details={"filter_name": e.filter_name}
        )
