"""Brand tracking endpoints (Pro)."""

from typing import Any

from urlscan.constants import Endpoints
from urlscan.models import BrandStatistics

from .base import BaseApi, unwrap_key


class BrandsApi(BaseApi):
    """Brands tracked by urlscan's phishing detection."""

    async def get_available_brands(self) -> list[dict[str, Any]]:
        payload = await self._get_json(Endpoints.AVAILABLE_BRANDS)
        return list(unwrap_key(payload, "kits", []))

    async def get_brand_summaries(self) -> list[dict[str, Any]]:
        """Brands with detection statistics."""
        return list(await self._get_json(Endpoints.BRANDS) or [])

    async def get_brand_statistics(self) -> BrandStatistics:
        """Aggregate counts computed from the available brands."""
        brands = await self.get_available_brands()

        verticals: set[str] = set()
        countries: set[str] = set()
        with_domains = 0
        with_asns = 0
        for brand in brands:
            verticals.update(brand.get("vertical") or [])
            countries.update(brand.get("country") or [])
            terms = brand.get("terms") or {}
            if terms.get("domains"):
                with_domains += 1
            if terms.get("asns"):
                with_asns += 1

        return BrandStatistics(
            total_brands=len(brands),
            total_verticals=len(verticals),
            total_countries=len(countries),
            brands_with_legitimate_domains=with_domains,
            brands_with_asn_terms=with_asns,
        )
