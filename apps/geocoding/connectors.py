"""
Geocoding connector.
NominatimConnector — address → coordinates via the Nominatim search API.
Agents use it to turn a typed address into a location for status updates;
the route view uses it for pickup and delivery points.
"""

import logging
import requests
from django.conf import settings

logger = logging.getLogger("shiptrack.geocoding")


class NominatimConnector:
    """
    Thin client over GET /search.
    Returns {"latitude", "longitude", "display_name"} for the best match, or
    None when nothing matches or the service is unreachable (location unknown).
    """

    def __init__(self, base_url=None, user_agent=None, country_hint=None, timeout=None):
        self.base_url     = (base_url or settings.NOMINATIM_BASE_URL).rstrip("/")
        self.user_agent   = user_agent or settings.NOMINATIM_USER_AGENT
        self.country_hint = country_hint if country_hint is not None else settings.GEOCODING_COUNTRY_HINT
        self.timeout      = timeout or getattr(settings, "GEOCODING_TIMEOUT", 5)

    def build_query(self, address: str) -> str:
        """Append the country hint unless the address already names it."""
        address = address.strip()
        if self.country_hint and self.country_hint.lower() not in address.lower():
            return f"{address}, {self.country_hint}"
        return address

    def geocode(self, address: str):
        if not address or not address.strip():
            return None
        query = self.build_query(address)
        try:
            resp = requests.get(
                f"{self.base_url}/search",
                params={"q": query, "format": "json", "limit": 1, "addressdetails": 1},
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            results = resp.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error("Geocoding failed for %r: %s", query, exc)
            return None

        if not results:
            logger.info("No geocoding match for %r", query)
            return None
        best = results[0]
        return {
            "latitude":     float(best["lat"]),
            "longitude":    float(best["lon"]),
            "display_name": best.get("display_name", ""),
        }
