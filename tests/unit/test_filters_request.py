"""Unit tests for reading property filters from FastAPI requests."""

from typing import Annotated

import pytest
from fastapi import Depends, FastAPI, Request, status
from fastapi.testclient import TestClient

from propfilter.core.filters import (
    PropertyFilter,
    build_from_request,
    get_parameters_starting_with,
    get_property_filters,
)


def serialize(filters: list[PropertyFilter]) -> list[dict]:
    return [
        {
            "match_type": f.match_type.value,
            "type_code": f.property_type_code,
            "property_names": list(f.property_names),
            "origin_value": f.origin_value,
            "match_value": f.match_value,
        }
        for f in filters
    ]


@pytest.fixture
def client() -> TestClient:
    """Create a test app exposing the filter dependency."""
    app = FastAPI()

    @app.get("/items")
    async def list_items(
        filters: Annotated[list[PropertyFilter], Depends(get_property_filters)],
    ) -> list[dict]:
        return serialize(filters)

    @app.post("/items/search")
    async def search_items(
        filters: Annotated[list[PropertyFilter], Depends(get_property_filters)],
    ) -> list[dict]:
        return serialize(filters)

    @app.get("/params")
    async def list_params(request: Request) -> dict:
        return get_parameters_starting_with(request, "search_")

    @app.get("/search")
    async def search(request: Request) -> list[dict]:
        return serialize(build_from_request(request, prefix="search"))

    return TestClient(app)


class TestGetPropertyFilters:
    """Tests for the get_property_filters dependency."""

    def test_query_filters(self, client: TestClient) -> None:
        """Test filters read from the query string."""
        response = client.get(
            "/items",
            params={
                "filter_EQS_name": "Alice",
                "filter_LIKES_email": "",
                "filter_GEI_age": "30",
                "page": "2",
            },
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == [
            {
                "match_type": "EQ",
                "type_code": "S",
                "property_names": ["name"],
                "origin_value": "Alice",
                "match_value": "Alice",
            },
            {
                "match_type": "GE",
                "type_code": "I",
                "property_names": ["age"],
                "origin_value": "30",
                "match_value": 30,
            },
        ]

    def test_is_null_filter(self, client: TestClient) -> None:
        """Test that IN filters need no value."""
        response = client.get("/items", params={"filter_INS_deletedAt": ""})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()[0]["match_type"] == "IN"
        assert response.json()[0]["match_value"] is None

    def test_or_properties(self, client: TestClient) -> None:
        """Test OR-ed property names in the query string."""
        response = client.get("/items", params={"filter_LIKES_name_OR_login_name": "ann"})
        assert response.json()[0]["property_names"] == ["name", "login_name"]

    def test_no_filters(self, client: TestClient) -> None:
        """Test a request without filter parameters."""
        response = client.get("/items")
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []

    def test_form_filters(self, client: TestClient) -> None:
        """Test filters read from a submitted form."""
        response = client.post("/items/search", data={"filter_EQS_city": "Paris", "filter_EQS_name": ""})
        assert response.status_code == status.HTTP_200_OK
        assert [f["property_names"] for f in response.json()] == [["city"]]

    def test_invalid_filter_name(self, client: TestClient) -> None:
        """Test that a malformed filter name is a 400 error."""
        response = client.get("/items", params={"filter_BADNAME": "x"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        error = response.json()["detail"]["error"]
        assert error["code"] == "FILTER_INVALID_NAME"
        assert error["details"] == {"filter_name": "BADNAME"}

    def test_invalid_filter_value(self, client: TestClient) -> None:
        """Test that an unconvertible value is a 400 error."""
        response = client.get("/items", params={"filter_EQI_age": "old"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        error = response.json()["detail"]["error"]
        assert error["code"] == "FILTER_INVALID_VALUE"
        assert error["details"] == {"value": "old", "type_code": "I"}

    def test_invalid_encoding_strict(self, client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that undecodable values are a 400 error with strict decoding."""
        from propfilter.core.config import get_settings

        monkeypatch.setenv("FILTER_STRICT_DECODING", "true")
        get_settings.cache_clear()
        response = client.get("/items", params={"filter_EQS_name": "100%"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"]["error"]["code"] == "FILTER_INVALID_ENCODING"


class TestRequestHelpers:
    """Tests for the request parameter helpers."""

    def test_parameters_starting_with(self, client: TestClient) -> None:
        """Test prefix selection keeps full names and the last repeated value."""
        response = client.get("/params?search_EQS_a=1&search_EQS_a=2&other=3")
        assert response.json() == {"search_EQS_a": "2"}

    def test_build_from_request_with_prefix(self, client: TestClient) -> None:
        """Test building filters with a custom prefix."""
        response = client.get(
            "/search", params={"search_NES_status": "archived", "filter_EQS_name": "x"}
        )
        assert [f["property_names"] for f in response.json()] == [["status"]]
