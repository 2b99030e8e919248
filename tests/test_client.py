from __future__ import annotations

import pytest
import requests

from app.config import Settings
from third_party.safety_api.client import SafetyApiClient, SafetyApiError


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _client(*responses):
    settings = Settings(safety_api_base_url="http://backend/api/", safety_api_timeout=5)
    session = FakeSession(list(responses))
    return SafetyApiClient(settings=settings, session=session), session


def test_fetch_year_summary_hits_year_path():
    client, session = _client(FakeResponse({"ltir": 1.5}))
    assert client.fetch_year_summary(2024) == {"ltir": 1.5}
    assert session.calls[0]["url"] == "http://backend/api/lagging/v2/summary/2024"
    assert session.calls[0]["timeout"] == 5


def test_list_accident_codes_skips_missing_codes():
    payload = {"reports": [{"global_accident_no": "HHI-2024-001"}, {"global_accident_no": None}, {}, "junk"]}
    client, session = _client(FakeResponse(payload))
    assert client.list_accident_codes() == ["HHI-2024-001"]
    assert session.calls[0]["params"] == {"page": 1, "limit": 10000}


def test_list_accident_codes_without_reports_key():
    client, _ = _client(FakeResponse({"total": 0}))
    assert client.list_accident_codes() == []


def test_http_error_is_wrapped_with_status():
    client, _ = _client(FakeResponse({}, status_code=503))
    with pytest.raises(SafetyApiError) as excinfo:
        client.fetch_year_summary(2024)
    assert excinfo.value.status_code == 503


def test_transport_error_is_wrapped():
    client, _ = _client(requests.ConnectionError("refused"))
    with pytest.raises(SafetyApiError):
        client.fetch_year_summary(2024)


def test_invalid_json_is_wrapped():
    client, _ = _client(FakeResponse(None))
    with pytest.raises(SafetyApiError):
        client.fetch_year_summary(2024)
