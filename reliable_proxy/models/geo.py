"""Geolocation service payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

LABEL_SEPARATOR = ", "


class GeoResult(BaseModel):
    """Fields shared by the supported geolocation services.

    Every field is optional and may be ``null``; unknown fields are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    region: str | None = None
    country_code: str | None = None
    country_name: str | None = None
    city: str | None = None

    def label(self) -> str:
        """Reduce to ``"City, Region, Country"``, skipping empty parts.

        The country code stands in for the country name when the name is empty.
        Returns an empty string when nothing is known.
        """
        parts = [part for part in (self.city, self.region) if part]
        country = self.country_name or self.country_code
        if country:
            parts.append(country)
        return LABEL_SEPARATOR.join(parts)
