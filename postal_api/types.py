from typing import List, TypedDict


class Location(TypedDict):
    city: str
    town: str
    x: str  # longitude
    y: str  # latitude
    prefecture: str
    postal: str


GeocodeResult = List[Location]


class AccessLogSummary(TypedDict):
    postal_code: str
    request_count: int


class AppResponse(TypedDict):
    postal_code: str
    hit_count: int
    address: str
    tokyo_sta_distance: float
