import math
from typing import Any

import pytest
import requests

from btc_dynamics.core.errors import UpstreamFetchError
from btc_dynamics.core.sources.brk_client import BrkClient


class FakeResponse:
    def __init__(self, payload: Any, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self) -> Any:
        return self._payload


class FakeSession:
    def __init__(self, response: FakeResponse) -> None:
        self.response = response
        self.calls: list[tuple[str, dict | None, float]] = []

    def get(self, url: str, params: dict | None = None, timeout: float = 0.0) -> FakeResponse:
        self.calls.append((url, params, timeout))
        return self.response


def test_fetch_series_builds_query() -> None:
    session = FakeSession(FakeResponse([1, 2.5, None]))
    client = BrkClient(base_url="http://brk.test/", timeout=5.0, session=session)

    values = client.fetch_series("realized-cap", 3)

    url, params, timeout = session.calls[0]
    assert url == "http://brk.test/api/query"
    assert params == {"index": "dateindex", "values": "realized-cap", "from": "-3"}
    assert timeout == 5.0
    assert values[:2] == [1.0, 2.5]
    assert math.isnan(values[2])


def test_http_error_becomes_upstream_error() -> None:
    client = BrkClient(base_url="http://brk.test", session=FakeSession(FakeResponse({}, status_code=503)))

    with pytest.raises(UpstreamFetchError):
        client.fetch_series("close", 10)


def test_unexpected_payload_is_rejected() -> None:
    client = BrkClient(base_url="http://brk.test", session=FakeSession(FakeResponse({"error": "nope"})))

    with pytest.raises(UpstreamFetchError):
        client.fetch_series("close", 10)


def test_non_positive_lookback_is_invalid() -> None:
    client = BrkClient(base_url="http://brk.test", session=FakeSession(FakeResponse([])))

    with pytest.raises(ValueError):
        client.fetch_series("close", 0)


@pytest.mark.parametrize("bad_value", ["n/a", {"v": 1}, [1.0]])
def test_non_numeric_element_becomes_upstream_error(bad_value: Any) -> None:
    client = BrkClient(base_url="http://brk.test", session=FakeSession(FakeResponse([1.0, bad_value, 2.0])))

    with pytest.raises(UpstreamFetchError, match="Non-numeric value in 'lth-supply'"):
        client.fetch_series("lth-supply", 3)
