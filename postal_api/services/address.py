# postal_api/services/address.py
from __future__ import annotations

import math
from typing import Any, Iterable, List, Sequence, Tuple

from postal_api.types import AppResponse, Location

EARTH_RADIUS_KM = 6371.0

# Tokyo Station, (longitude, latitude)
TOKYO_STATION: Tuple[float, float] = (139.7673068, 35.6809591)

EMPTY_PREFIX_SENTINEL = "Error: func commonPrefix"
NO_COMMON_PREFIX = "None"


def common_prefix(strings: Sequence[str]) -> str:
    """
    Longest run of leading characters shared by every string.

    Returns the sentinel ``"Error: func commonPrefix"`` for no input and ``"None"``
    when nothing is shared; both are part of the public response format.
    """
    if not strings:
        return EMPTY_PREFIX_SENTINEL

    prefix = strings[0]
    for s in strings[1:]:
        n = min(len(prefix), len(s))
        i = 0
        while i < n and prefix[i] == s[i]:
            i += 1
        prefix = prefix[:i]
        if not prefix:
            break

    return prefix or NO_COMMON_PREFIX


def location_addresses(locations: Iterable[Location]) -> List[str]:
    return [loc["prefecture"] + loc["city"] + loc["town"] for loc in locations]


def haversine_km(lon1: float, lat1: float, lon2: float, lat2: float) -> float:
    """Great-circle distance in km between two (lon, lat) points."""
    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(a)))


def parse_coordinate(value: Any) -> float:
    # lenient: anything unparsable counts as 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def round_distance(km: float) -> float:
    """Round to 0.1, halves away from zero."""
    return math.copysign(math.floor(abs(km) * 10 + 0.5), km) / 10


def max_distance_km(
    locations: Iterable[Location],
    origin: Tuple[float, float] = TOKYO_STATION,
) -> float:
    origin_lon, origin_lat = origin
    best = 0.0
    for loc in locations:
        lon, lat = parse_coordinate(loc["x"]), parse_coordinate(loc["y"])
        # nan/inf coordinates have no distance; the candidate is skipped
        if not (math.isfinite(lon) and math.isfinite(lat)):
            continue
        km = haversine_km(origin_lon, origin_lat, lon, lat)
        if km > best:
            best = km
    return round_distance(best)


def summarize(postal_code: str, locations: Sequence[Location]) -> AppResponse:
    return {
        "postal_code": postal_code,
        "hit_count": len(locations),
        "address": common_prefix(location_addresses(locations)),
        "tokyo_sta_distance": max_distance_km(locations),
    }
