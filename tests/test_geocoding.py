"""Geocoding connector and proxy view tests (Nominatim is mocked)."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from apps.geocoding.connectors import NominatimConnector


def _response(payload, status_code=200):
    resp = MagicMock(status_code=status_code)
    resp.json.return_value = payload
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status_code}")
    return resp


MATCH = [{"lat": "12.9716", "lon": "77.5946", "display_name": "MG Road, Bengaluru, Karnataka, India"}]


class TestNominatimConnector:

    def setup_method(self):
        self.connector = NominatimConnector(base_url="http://nominatim-mock/", user_agent="tests",
                                            country_hint="India", timeout=3)

    def test_country_hint_appended(self):
        assert self.connector.build_query("MG Road, Bengaluru") == "MG Road, Bengaluru, India"

    def test_country_hint_not_duplicated(self):
        assert self.connector.build_query("MG Road, Bengaluru, india") == "MG Road, Bengaluru, india"

    @patch("apps.geocoding.connectors.requests.get")
    def test_geocode_match(self, mock_get):
        mock_get.return_value = _response(MATCH)
        result = self.connector.geocode("MG Road, Bengaluru")

        assert result == {"latitude": 12.9716, "longitude": 77.5946,
                          "display_name": "MG Road, Bengaluru, Karnataka, India"}
        args, kwargs = mock_get.call_args
        assert args[0] == "http://nominatim-mock/search"
        assert kwargs["params"]["q"] == "MG Road, Bengaluru, India"
        assert kwargs["params"]["limit"] == 1
        assert kwargs["headers"]["User-Agent"] == "tests"
        assert kwargs["timeout"] == 3

    @patch("apps.geocoding.connectors.requests.get")
    def test_no_match_returns_none(self, mock_get):
        mock_get.return_value = _response([])
        assert self.connector.geocode("Nowhere Lane") is None

    @patch("apps.geocoding.connectors.requests.get")
    def test_network_error_returns_none(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("offline")
        assert self.connector.geocode("MG Road") is None

    @patch("apps.geocoding.connectors.requests.get")
    def test_http_error_returns_none(self, mock_get):
        mock_get.return_value = _response({}, status_code=503)
        assert self.connector.geocode("MG Road") is None

    @patch("apps.geocoding.connectors.requests.get")
    def test_blank_address_skips_request(self, mock_get):
        assert self.connector.geocode("   ") is None
        mock_get.assert_not_called()


@pytest.mark.django_db
class TestGeocodeSearchView:

    @patch("apps.geocoding.connectors.requests.get")
    def test_search(self, mock_get, agent_client):
        mock_get.return_value = _response(MATCH)
        resp = agent_client.get("/api/geo/search/", {"q": "MG Road, Bengaluru"})
        assert resp.status_code == 200
        assert resp.data["latitude"] == 12.9716

    @patch("apps.geocoding.connectors.requests.get")
    def test_not_found(self, mock_get, agent_client):
        mock_get.return_value = _response([])
        assert agent_client.get("/api/geo/search/", {"q": "Atlantis"}).status_code == 404

    def test_missing_query(self, agent_client):
        assert agent_client.get("/api/geo/search/").status_code == 400

    def test_requires_auth(self, api_client):
        assert api_client.get("/api/geo/search/", {"q": "Pune"}).status_code == 401
