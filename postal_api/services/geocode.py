# postal_api/services/geocode.py
from __future__ import annotations

import logging
from typing import Any, Optional

import requests
from flask import current_app

from postal_api.errors import GeocodeError
from postal_api.types import GeocodeResult, Location

log = logging.getLogger(__name__)

_FIELDS = ("city", "town", "x", "y", "prefecture", "postal")


def build_url(postal_code: str, base_url: str) -> str:
    # postal code goes in as-is, unescaped
    return f"{base_url}?method=searchByPostal&postal={postal_code}"


def _parse_location(raw: Any) -> Location:
    if not isinstance(raw, dict):
        raise GeocodeError(f"unexpected location entry: {raw!r}")
    out = {}
    for field in _FIELDS:
        value = raw.get(field)
        if value is None:
            value = ""
        elif not isinstance(value, str):
            raise GeocodeError(f"field {field!r} is not a string: {value!r}")
        out[field] = value
    return Location(**out)


def parse_envelope(payload: Any) -> GeocodeResult:
    """
    Decode ``{"response": {"location": [...]}}``.

    The API answers an unknown postal code with ``{"response": {"error": "..."}}``,
    which has no ``location`` key and therefore yields an empty list.
    """
    if payload is None:
        return []
    if not isinstance(payload, dict):
        raise GeocodeError("geocoder response is not a JSON object")
    response = payload.get("response")
    if response is None:
        return []
    if not isinstance(response, dict):
        raise GeocodeError("geocoder 'response' is not a JSON object")
    locations = response.get("location")
    if locations is None:
        return []
    if not isinstance(locations, list):
        raise GeocodeError("geocoder 'location' is not a JSON array")
    return [_parse_location(item) for item in locations]


def fetch_locations(
    postal_code: str,
    *,
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
) -> GeocodeResult:
    """One GET against the geocoder. Any failure raises GeocodeError; nothing is retried."""
    if base_url is None:
        base_url = current_app.config["GEOCODER_URL"]
    if timeout is None:
        timeout = current_app.config.get("GEOCODER_TIMEOUT")

    url = build_url(postal_code, base_url)
    log.debug("Geocoding postal code %r via %s", postal_code, url)
    try:
        r = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise GeocodeError(str(e)) from e

    # status is not checked; whatever came back must parse
    try:
        payload = r.json()
    except ValueError as e:
        raise GeocodeError(f"invalid JSON from geocoder (HTTP {r.status_code}): {e}") from e

    locations = parse_envelope(payload)
    log.debug("Geocoder returned %d location(s) for %r", len(locations), postal_code)
    return locations
