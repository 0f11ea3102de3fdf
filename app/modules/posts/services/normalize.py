"""
Input coercion shared by post create and update.

Tags arrive either as a sequence (JSON body, repeated form fields) or as
one comma-joined string; coordinates arrive as numbers or numeric strings.
Both are coerced here so the models only ever see canonical values.
"""
import math
from typing import Any, List, Optional, Tuple, Union

MAX_TAG_LENGTH = 20
TAGS_TYPE_MESSAGE = "Tags must be a list of strings or a comma separated string"
LATITUDE_RANGE = (-90.0, 90.0)
LONGITUDE_RANGE = (-180.0, 180.0)


def normalize_tags(value: Union[None, str, List[Any], Tuple[Any, ...]]) -> List[str]:
    """Trim every tag and drop the empty ones, keeping the original order"""
    if value is None:
        return []
    if isinstance(value, str):
        raw = value.split(",")
    elif isinstance(value, (list, tuple)):
        raw = []
        for item in value:
            if item is None:
                continue
            if not isinstance(item, str):
                raise ValueError(TAGS_TYPE_MESSAGE)
            # a repeated form field may itself hold a comma-joined string
            raw.extend(item.split(","))
    else:
        raise ValueError(TAGS_TYPE_MESSAGE)

    tags = [tag.strip() for tag in raw]
    tags = [tag for tag in tags if tag]
    for tag in tags:
        if len(tag) > MAX_TAG_LENGTH:
            raise ValueError(f"Tag '{tag}' is longer than {MAX_TAG_LENGTH} characters")
    return tags


def parse_coordinate(value: Any, bounds: tuple) -> Optional[float]:
    """Return value as a finite float inside bounds, or None"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    low, high = bounds
    if number < low or number > high:
        return None
    return number


def build_point(latitude: Any, longitude: Any) -> Optional[dict]:
    """GeoJSON Point for a coordinate pair, or None if either value is unusable"""
    lat = parse_coordinate(latitude, LATITUDE_RANGE)
    lng = parse_coordinate(longitude, LONGITUDE_RANGE)
    if lat is None or lng is None:
        return None
    # GeoJSON axis order is longitude first
    return {"type": "Point", "coordinates": [lng, lat]}


def point_to_wire(point: Optional[dict], address: Optional[str]) -> Optional[dict]:
    """Flatten a stored GeoJSON Point into {latitude, longitude, address}"""
    if not point:
        return None
    coordinates = point.get("coordinates") or []
    if len(coordinates) != 2:
        return None
    longitude, latitude = coordinates
    return {"latitude": latitude, "longitude": longitude, "address": address}
