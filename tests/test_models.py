"""Tests for data models.

This module tests the Pydantic models of the catalog: service entities,
availability, layer details and the catalog document.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import ValidationError
import pytest

from portal_catalog.models import (
    Availability,
    CatalogRow,
    LayerDetail,
    ServiceCatalog,
    ServiceEntity,
)


class TestServiceEntity:
    """Tests for ServiceEntity."""

    def test_none_description_becomes_empty(self) -> None:
        """Test that a missing description is treated as empty."""
        entity = ServiceEntity(name="Roads", type="MapServer", description=None)

        assert entity.description == ""
        assert entity.text == "Roads "

    def test_text_joins_name_and_description(self) -> None:
        """Test the text used for keyword extraction."""
        entity = ServiceEntity(name="Roads", type="MapServer", description="State roads")

        assert entity.text == "Roads State roads"

    def test_is_frozen(self) -> None:
        """Test that entities cannot be modified after creation."""
        entity = ServiceEntity(name="Roads", type="MapServer")

        with pytest.raises(ValidationError):
            entity.name = "Rail"  # type: ignore[misc]

    def test_requires_name_and_type(self) -> None:
        """Test that name and type are mandatory."""
        with pytest.raises(ValidationError):
            ServiceEntity(name="Roads")  # type: ignore[call-arg]

    @pytest.mark.parametrize(
        ("spatial_reference", "expected"),
        [
            ({"wkid": 102100, "latestWkid": 3857}, 102100),
            ({"latestWkid": 3857}, 3857),
            ({}, None),
            (None, None),
        ],
    )
    def test_wkid(self, spatial_reference: dict | None, expected: int | None) -> None:
        """Test wkid lookup with latestWkid fallback."""
        entity = ServiceEntity(
            name="A", type="MapServer", spatial_reference=spatial_reference
        )

        assert entity.wkid == expected


class TestAvailability:
    """Tests for Availability."""

    def test_computed_fields(self) -> None:
        """Test color and status derived from the response time."""
        availability = Availability(is_available=True, response_time=750)

        assert availability.color == "orange"
        assert availability.status == "Warning"
        assert availability.model_dump()["color"] == "orange"

    def test_unavailable_status(self) -> None:
        """Test that an unavailable service reports Unavailable."""
        availability = Availability(is_available=False, error="timeout")

        assert availability.status == "Unavailable"
        assert availability.color == "black"


class TestLayerDetail:
    """Tests for LayerDetail."""

    def test_defaults(self) -> None:
        """Test placeholder values for missing layer information."""
        layer = LayerDetail(id=0, name="Hydrants")

        assert layer.description == "N/A"
        assert layer.geometry_type == "N/A"
        assert layer.fields == []
        assert layer.field_names == []


class TestServiceCatalog:
    """Tests for ServiceCatalog."""

    @pytest.fixture
    def catalog(self) -> ServiceCatalog:
        """Provide a catalog with three tagged rows."""
        rows = [
            CatalogRow(
                service=ServiceEntity(name="Roads", type="MapServer"),
                keywords=["road"],
            ),
            CatalogRow(
                service=ServiceEntity(name="Hydrants", type="FeatureServer"),
                keywords=["hydrant", "fire"],
            ),
            CatalogRow(
                service=ServiceEntity(name="Fire stations", type="MapServer"),
                keywords=["fire", "station"],
            ),
        ]
        return ServiceCatalog(
            portal_url="https://gis.example.com/arcgis/rest/services",
            generated_at=datetime(2024, 1, 1, tzinfo=UTC),
            rows=rows,
        )

    def test_service_count(self, catalog: ServiceCatalog) -> None:
        """Test the computed service count."""
        assert catalog.service_count == 3
        assert catalog.model_dump()["service_count"] == 3

    def test_filter_by_type(self, catalog: ServiceCatalog) -> None:
        """Test filtering rows by exact type."""
        names = [r.service.name for r in catalog.filter_rows(service_type="MapServer")]

        assert names == ["Roads", "Fire stations"]

    def test_filter_by_keyword(self, catalog: ServiceCatalog) -> None:
        """Test filtering rows by keyword tag."""
        names = [r.service.name for r in catalog.filter_rows(keyword="fire")]

        assert names == ["Hydrants", "Fire stations"]

    def test_filter_by_partial_keyword(self, catalog: ServiceCatalog) -> None:
        """Test that the keyword filter matches inside tags."""
        names = [r.service.name for r in catalog.filter_rows(keyword="stat")]

        assert names == ["Fire stations"]

    def test_filter_keyword_ignores_case(self, catalog: ServiceCatalog) -> None:
        """Test that a capitalized keyword matches lower-case tags."""
        names = [r.service.name for r in catalog.filter_rows(keyword="Hydrant")]

        assert names == ["Hydrants"]

    def test_filter_combined(self, catalog: ServiceCatalog) -> None:
        """Test that type and keyword filters both apply."""
        rows = catalog.filter_rows(service_type="MapServer", keyword="fire")

        assert [r.service.name for r in rows] == ["Fire stations"]

    def test_no_filter(self, catalog: ServiceCatalog) -> None:
        """Test that no filter returns every row."""
        assert catalog.filter_rows() == catalog.rows

    def test_json_round_trip(self, catalog: ServiceCatalog) -> None:
        """Test that the catalog document validates from its own JSON."""
        restored = ServiceCatalog.model_validate_json(catalog.model_dump_json())

        assert restored.rows == catalog.rows
        assert restored.generated_at == catalog.generated_at
