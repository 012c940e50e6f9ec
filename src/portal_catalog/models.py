"""Pydantic models for the portal catalog.

This module defines:
- ServiceEntity: A discovered portal service, the unit of keyword extraction
- MetadataSummary: Enrichment results for a single service
- LayerDetail: A layer of a service, loaded on demand
- CatalogRow / ServiceCatalog: The JSON document served to front ends
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from .availability import availability_color, availability_status


class MetadataChecks(BaseModel):
    """Completeness checks on a service's metadata document."""

    has_description: bool = False
    has_tags: bool = False
    has_spatial_reference: bool = False


class Availability(BaseModel):
    """Result of probing a service endpoint.

    Attributes:
        is_available: Whether the metadata request succeeded.
        response_time: Round-trip time of the metadata request in milliseconds.
        error: Error message when the service is unavailable.
    """

    is_available: bool = Field(description="Whether the service answered")
    response_time: float | None = Field(default=None, description="Round trip in ms")
    error: str | None = Field(default=None, description="Failure description")

    @computed_field
    @property
    def color(self) -> str:
        """Traffic-light color for the response time."""
        return availability_color(self.response_time)

    @computed_field
    @property
    def status(self) -> str:
        """Human-readable status label for the response time."""
        if not self.is_available:
            return "Unavailable"
        return availability_status(self.response_time)


class MetadataSummary(BaseModel):
    """Enrichment results for one service URL."""

    metadata: dict[str, Any] | None = None
    checks: MetadataChecks | None = None
    availability: Availability
    spatial_reference: dict[str, Any] | None = None
    extent: dict[str, Any] | None = None


class ServiceEntity(BaseModel):
    """A service discovered on the portal.

    Only ``name``, ``type`` and ``description`` take part in keyword
    extraction; the remaining fields pass through to the catalog output.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Service name, including any folder prefix")
    type: str = Field(description="Service type, e.g. MapServer or FeatureServer")
    description: str = Field(default="", description="Free-text description")
    url: str | None = Field(default=None, description="Service endpoint URL")
    metadata_checks: MetadataChecks | None = None
    availability: Availability | None = None
    spatial_reference: dict[str, Any] | None = None
    extent: dict[str, Any] | None = None

    @field_validator("description", mode="before")
    @classmethod
    def _missing_description_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def text(self) -> str:
        """Text that keywords are extracted from."""
        return f"{self.name} {self.description}"

    @property
    def wkid(self) -> int | None:
        """Well-known ID of the service's spatial reference, if any."""
        if not self.spatial_reference:
            return None
        return self.spatial_reference.get("wkid") or self.spatial_reference.get(
            "latestWkid"
        )


class LayerDetail(BaseModel):
    """A single layer of a MapServer or FeatureServer."""

    id: int
    name: str
    description: str = "N/A"
    spatial_reference: dict[str, Any] | None = None
    geometry_type: str = "N/A"
    fields: list[dict[str, Any]] = Field(default_factory=list)

    @computed_field
    @property
    def field_names(self) -> list[str]:
        """Names of the layer's attribute fields."""
        return [f.get("name", "") for f in self.fields]


class CatalogRow(BaseModel):
    """A catalog table row: one service plus its keyword tags."""

    service: ServiceEntity
    keywords: list[str] = Field(default_factory=list)


class ServiceCatalog(BaseModel):
    """The catalog document for one portal.

    Attributes:
        portal_url: Services directory the catalog was built from.
        generated_at: When the catalog was built.
        rows: One row per service, in directory order.
        types: Service type to the names of services of that type.
        keywords: Keyword to the names of services it was extracted from.
    """

    portal_url: str
    generated_at: datetime
    rows: list[CatalogRow] = Field(default_factory=list)
    types: dict[str, list[str]] = Field(default_factory=dict)
    keywords: dict[str, list[str]] = Field(default_factory=dict)

    @computed_field
    @property
    def service_count(self) -> int:
        """Number of services in the catalog."""
        return len(self.rows)

    def filter_rows(
        self,
        service_type: str | None = None,
        keyword: str | None = None,
    ) -> list[CatalogRow]:
        """Return rows matching a type and keyword filter.

        The type must match exactly; the keyword matches as a substring of
        the row's joined tags, ignoring case, so "Hyd" selects rows tagged
        "hydrant". ``None`` disables a filter.
        """
        return [
            row
            for row in self.rows
            if (service_type is None or row.service.type == service_type)
            and (keyword is None or keyword.lower() in " ".join(row.keywords))
        ]
