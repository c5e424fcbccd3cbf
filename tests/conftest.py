import json
from datetime import datetime, timezone

import pytest
import requests


class FakeResponse:
    """Minimal stand-in for :class:`requests.Response`."""

    def __init__(self, text="", status_code=200):
        self.text = text
        self.status_code = status_code

    def json(self):
        return json.loads(self.text)

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """Routes GET requests to canned responses by URL substring.

    Routes for the ERA5 archive are keyed by the requested ``daily``
    variable, since every archive call shares the same URL.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        key = params.get("daily") if params else None
        if key is not None and key in self.routes:
            return self._resolve(self.routes[key])
        for pattern, response in self.routes.items():
            if pattern in url:
                return self._resolve(response)
        raise requests.ConnectionError(f"no route for {url}")

    @staticmethod
    def _resolve(response):
        if isinstance(response, Exception):
            raise response
        if isinstance(response, FakeResponse):
            return response
        if isinstance(response, (dict, list)):
            return FakeResponse(json.dumps(response))
        return FakeResponse(response)

    def close(self):
        self.closed = True


def archive_payload(variable, values):
    return {
        "latitude": 40.0,
        "longitude": 135.0,
        "daily": {
            "time": [f"2024-10-{d:02d}" for d in range(1, len(values) + 1)],
            variable: values,
        },
    }


@pytest.fixture
def fixed_now():
    """An instant on 2024-10-10 in both UTC and Asia/Tokyo."""
    return datetime(2024, 10, 10, 3, 0, tzinfo=timezone.utc)


@pytest.fixture
def upstream():
    """Realistic responses for all four sources."""
    return {
        "ao.sprd2.txt": (
            "Title: ao.sprd2.txt\n\n"
            "Markdown Content:\n"
            " 2024  10   7  -0.512\n"
            " 2024  10   8   0.104\n"
            " 2024  10   9   1.237\n"
        ),
        "oni.ascii.txt": (
            "SEAS  YR   TOTAL   ANOM\n"
            "  MJJ 2024  27.97   0.20\n"
            "  JJA 2024  27.45   0.03\n"
            "  JAS 2024  26.98  -0.12\n"
        ),
        "sea_surface_temperature": archive_payload(
            "sea_surface_temperature", [22.1, 22.4, None, 22.9, 23.0, 22.6, 22.5]
        ),
        "mean_sea_level_pressure": archive_payload(
            "mean_sea_level_pressure", [102500.0, 102650.0, 102400.0, None, 102300.0, 102550.0, 102600.0]
        ),
    }
