"""Unit tests for geolocation payload reduction."""

from __future__ import annotations

import pytest

from reliable_proxy.models.geo import GeoResult


class TestGeoLabel:
    def test_paris_example(self) -> None:
        result = GeoResult.model_validate({"city": "Paris", "region": "", "country_name": "France"})

        assert result.label() == "Paris, France"

    def test_all_fields(self) -> None:
        result = GeoResult(city="Austin", region="Texas", country_name="United States", country_code="US")

        assert result.label() == "Austin, Texas, United States"

    def test_country_code_fallback(self) -> None:
        result = GeoResult(city="Austin", region="Texas", country_name="", country_code="US")

        assert result.label() == "Austin, Texas, US"

    @pytest.mark.parametrize("payload", [{}, {"city": None, "region": None}, {"city": "", "country_code": ""}])
    def test_nothing_known_is_empty(self, payload: dict) -> None:
        assert GeoResult.model_validate(payload).label() == ""

    def test_unknown_fields_ignored(self) -> None:
        payload = {"ip": "203.0.113.9", "city": "Lyon", "country": "FR", "loc": "45.7,4.8"}

        assert GeoResult.model_validate(payload).label() == "Lyon"
