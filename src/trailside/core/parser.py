"""Parsing of Overpass amenity responses into Facility values."""

import json
import logging
from typing import Optional, Union

from pydantic import ValidationError

from ..models import Coordinate, Facility, FacilityType

logger = logging.getLogger(__name__)


class FacilityParseError(ValueError):
    """The response body could not be read as an Overpass JSON document."""


def _parse_element(element) -> Optional[Facility]:
    """Return the Facility for one element, or None if it should be skipped."""
    if not isinstance(element, dict):
        return None
    lat = element.get("lat")
    lon = element.get("lon")
    # bool is an int subclass but never a coordinate
    for value in (lat, lon):
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            return None

    tags = element.get("tags")
    if not isinstance(tags, dict):
        return None
    amenity = tags.get("amenity")
    facility_type = FacilityType.from_amenity(amenity) if isinstance(amenity, str) else None
    if facility_type is None:
        return None

    try:
        coordinates = Coordinate(lat=lat, lon=lon)
    except ValidationError:
        return None
    return Facility(type=facility_type, coordinates=coordinates)


def parse_amenities(payload: Union[str, bytes, dict]) -> list[Facility]:
    """Parse an Overpass JSON payload into facilities.

    Elements missing coordinates, with out-of-range coordinates, or with an
    amenity outside FacilityType are dropped. A payload that is empty, not
    JSON, or not a JSON object raises FacilityParseError.
    """
    if isinstance(payload, (str, bytes)):
        if not payload or not payload.strip():
            raise FacilityParseError("Empty response body")
        try:
            data = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise FacilityParseError(f"Malformed JSON response: {exc}") from exc
    else:
        data = payload

    if not isinstance(data, dict):
        raise FacilityParseError(f"Expected a JSON object at the root, got {type(data).__name__}")

    elements = data.get("elements", [])
    if not isinstance(elements, list):
        raise FacilityParseError("'elements' must be a JSON array")

    facilities = []
    for element in elements:
        facility = _parse_element(element)
        if facility is not None:
            facilities.append(facility)

    skipped = len(elements) - len(facilities)
    if skipped:
        logger.debug("Skipped %d of %d Overpass elements", skipped, len(elements))
    return facilities
