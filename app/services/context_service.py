"""
services/context_service.py

Per-request context for the persona prompt: where the user is and what time
it is there. Both read hosting-platform headers and never fail the request.
"""

from datetime import datetime, tzinfo
from typing import Callable, Mapping, Optional
from urllib.parse import unquote
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.core.logger import get_logger

logger = get_logger(__name__)

UNKNOWN = "unknown"

Clock = Callable[[Optional[tzinfo]], datetime]


def system_clock(tz: Optional[tzinfo] = None) -> datetime:
    return datetime.now(tz)


def resolve_location(
    headers: Mapping[str, str],
    country_header: str = "x-vercel-ip-country",
    region_header: str = "x-vercel-ip-country-region",
    city_header: str = "x-vercel-ip-city",
) -> str:
    country = headers.get(country_header)
    region = headers.get(region_header)
    city = headers.get(city_header)

    # all three or nothing
    if not country or not region or not city:
        return UNKNOWN

    return f"{unquote(city)}, {region}, {country}"


def format_time(now: datetime) -> str:
    """en-US locale style: 10/19/2026, 4:05:09 PM"""
    hour = now.hour % 12 or 12
    meridiem = "AM" if now.hour < 12 else "PM"
    return (
        f"{now.month}/{now.day}/{now.year}, "
        f"{hour}:{now.minute:02d}:{now.second:02d} {meridiem}"
    )


def _zone(name: Optional[str]) -> Optional[tzinfo]:
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        logger.debug(f"Unknown timezone header '{name}', using server local time")
        return None


def resolve_time(
    headers: Mapping[str, str],
    timezone_header: str = "x-vercel-ip-timezone",
    clock: Clock = system_clock,
) -> str:
    try:
        return format_time(clock(_zone(headers.get(timezone_header))))
    except Exception as e:
        logger.warning(f"Time resolution failed: {e}")
        return UNKNOWN
