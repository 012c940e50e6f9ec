"""Pytest configuration and shared test fixtures.

This module provides fixtures for testing the portal catalog, including a
deterministic tokenizer, sample services, and a mock ArcGIS portal served
through ``httpx.MockTransport``.
"""

from __future__ import annotations

import re
from typing import Any

import httpx
import pytest

from portal_catalog.keywords import TextNormalizer
from portal_catalog.models import ServiceEntity

PORTAL_URL = "https://gis.example.com/arcgis/rest/services"

# =============================================================================
# KEYWORD FIXTURES
# =============================================================================


class WordTokenizer:
    """Deterministic tokenizer treating every content word as a noun.

    Splits on whitespace and drops a few function words, which is enough
    to exercise the normalizer and extractor without a language model.
    """

    FUNCTION_WORDS = frozenset({"and", "the", "for", "with", "from", "of", "in"})

    def extract_candidate_words(self, text: str) -> list[str]:
        return [w for w in text.split() if w.lower() not in self.FUNCTION_WORDS]


class SuffixSingularizer:
    """English plural stripping by suffix rules."""

    def singularize(self, word: str) -> str:
        if word.endswith("ies") and len(word) > 4:
            return word[:-3] + "y"
        if re.search(r"(ch|sh|x)es$", word):
            return word[:-2]
        if word.endswith("s") and not word.endswith("ss"):
            return word[:-1]
        return ""


class CountingTokenizer(WordTokenizer):
    """WordTokenizer that records the texts it was given."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def extract_candidate_words(self, text: str) -> list[str]:
        self.calls.append(text)
        return super().extract_candidate_words(text)


@pytest.fixture
def normalizer() -> TextNormalizer:
    """Provide a TextNormalizer backed by the deterministic test tokenizer."""
    return TextNormalizer(WordTokenizer(), SuffixSingularizer())


@pytest.fixture
def road_services() -> list[ServiceEntity]:
    """Provide two services that share the keyword "road"."""
    return [
        ServiceEntity(
            name="Road Network", type="FeatureServer", description="roads and highways"
        ),
        ServiceEntity(name="Road Assets", type="FeatureServer", description="road maintenance"),
    ]


@pytest.fixture
def mixed_services() -> list[ServiceEntity]:
    """Provide services of several types with overlapping vocabulary."""
    return [
        ServiceEntity(
            name="Water/Hydrants",
            type="FeatureServer",
            description="Fire hydrants and water valves",
        ),
        ServiceEntity(
            name="Water/Mains",
            type="MapServer",
            description="Water mains pipe network",
        ),
        ServiceEntity(
            name="Transport/Roads",
            type="MapServer",
            description="State roads and bridges",
        ),
        ServiceEntity(
            name="Cadastre/Parcels",
            type="FeatureServer",
            description="Property parcels and lots",
        ),
        ServiceEntity(
            name="Imagery/Aerial",
            type="ImageServer",
            description=None,
        ),
    ]


# =============================================================================
# MOCK PORTAL
# =============================================================================


def service_metadata(
    description: str = "",
    *,
    extent: bool = True,
    wkid: int = 3857,
    tags: list[str] | None = None,
) -> dict[str, Any]:
    """Build an ArcGIS service metadata document."""
    document: dict[str, Any] = {
        "currentVersion": 11.1,
        "description": description,
        "spatialReference": {"wkid": wkid, "latestWkid": wkid},
        "tags": tags or [],
    }
    if extent:
        document["initialExtent"] = {
            "xmin": 150.0,
            "ymin": -34.0,
            "xmax": 151.5,
            "ymax": -33.0,
            "spatialReference": {"wkid": wkid},
        }
    return document


class MockPortal:
    """In-memory ArcGIS REST portal keyed by URL path.

    Routes map a request path to a JSON payload, an HTTP status code, or a
    callable producing an ``httpx.Response``. Every request is recorded.
    """

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes: dict[str, Any] = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def add(self, path: str, response: Any) -> None:
        self.routes[path] = response

    def requested_paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"detail": "not found"})
        if callable(route):
            return route(request)
        if isinstance(route, int):
            return httpx.Response(route)
        return httpx.Response(200, json=route)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def mock_portal() -> MockPortal:
    """Provide a portal with one MapServer and one FeatureServer.

    The FeatureServer has no initialExtent, so its extent comes from a
    query against layer 0.
    """
    base = "/arcgis/rest/services"
    return MockPortal(
        {
            base: {
                "currentVersion": 11.1,
                "folders": ["Water"],
                "services": [
                    {"name": "Water/Mains", "type": "MapServer"},
                    {"name": "Water/Hydrants", "type": "FeatureServer"},
                ],
            },
            f"{base}/Water/Mains/MapServer": service_metadata(
                "Water mains pipe network", tags=["water"]
            ),
            f"{base}/Water/Hydrants/FeatureServer": service_metadata(
                "Fire hydrants", extent=False, wkid=4326
            ),
            f"{base}/Water/Hydrants/FeatureServer/0/query": {
                "extent": {
                    "xmin": 150.1,
                    "ymin": -33.9,
                    "xmax": 150.9,
                    "ymax": -33.1,
                    "spatialReference": {"wkid": 4326},
                }
            },
            f"{base}/Water/Hydrants/FeatureServer/layers": {
                "layers": [
                    {
                        "id": 0,
                        "name": "Hydrants",
                        "geometryType": "esriGeometryPoint",
                        "extent": {"spatialReference": {"wkid": 4326}},
                        "fields": [
                            {"name": "OBJECTID", "type": "esriFieldTypeOID"},
                            {"name": "STATUS", "type": "esriFieldTypeString"},
                        ],
                    },
                    {"id": 1, "name": "Valves"},
                ]
            },
        }
    )

