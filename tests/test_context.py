"""
tests/test_context.py
Location / time resolvers used in the persona prompt.
"""

from datetime import datetime
from itertools import product

import pytest

from app.services.context_service import format_time, resolve_location, resolve_time

GEO = {
    "x-vercel-ip-country": "US",
    "x-vercel-ip-country-region": "CA",
    "x-vercel-ip-city": "San%20Francisco",
}


def test_full_location():
    assert resolve_location(GEO) == "San Francisco, CA, US"


@pytest.mark.parametrize("present", [
    combo for combo in product([True, False], repeat=3) if not all(combo)
])
def test_partial_location_is_unknown(present):
    headers = {k: v for (k, v), keep in zip(GEO.items(), present) if keep}
    assert resolve_location(headers) == "unknown"


def test_blank_header_counts_as_missing():
    headers = {**GEO, "x-vercel-ip-country-region": ""}
    assert resolve_location(headers) == "unknown"


def test_custom_header_names():
    headers = {"cf-ipcountry": "DE", "cf-region": "BE", "cf-ipcity": "Berlin"}
    location = resolve_location(
        headers,
        country_header="cf-ipcountry",
        region_header="cf-region",
        city_header="cf-ipcity",
    )
    assert location == "Berlin, BE, DE"


@pytest.mark.parametrize("now,expected", [
    (datetime(2026, 10, 19, 16, 5, 9), "10/19/2026, 4:05:09 PM"),
    (datetime(2026, 1, 2, 0, 30, 0), "1/2/2026, 12:30:00 AM"),
    (datetime(2026, 7, 4, 12, 0, 0), "7/4/2026, 12:00:00 PM"),
    (datetime(2026, 12, 31, 9, 59, 59), "12/31/2026, 9:59:59 AM"),
])
def test_format_time(now, expected):
    assert format_time(now) == expected


def test_time_uses_timezone_header(clock):
    assert resolve_time({"x-vercel-ip-timezone": "Asia/Taipei"}, clock=clock) == (
        "10/20/2026, 12:05:09 AM"
    )


@pytest.mark.parametrize("headers", [
    {},
    {"x-vercel-ip-timezone": ""},
    {"x-vercel-ip-timezone": "Mars/Olympus_Mons"},
    {"x-vercel-ip-timezone": "../../etc/passwd"},
])
def test_time_falls_back_to_server_local(clock, headers):
    assert resolve_time(headers, clock=clock) == "10/19/2026, 4:05:09 PM"


def test_broken_clock_degrades_to_unknown():
    def broken(tz=None):
        raise OSError("clock unavailable")

    assert resolve_time({}, clock=broken) == "unknown"
