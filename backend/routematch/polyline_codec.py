from functools import lru_cache
from typing import List, Optional, Sequence, Tuple

import polyline

from .geo import Point

PRECISION = 1e5

def _read_varint(encoded: str, index: int) -> Tuple[Optional[int], int]:
    """
    Reads one zig-zag encoded value starting at index.
    Returns (value, next_index), value is None when the string ends mid-value.
    """
    shift = 0
    result = 0
    n = len(encoded)
    while index < n:
        byte = ord(encoded[index]) - 63
        index += 1
        result |= (byte & 0x1F) << shift
        shift += 5
        if byte < 0x20:
            value = ~(result >> 1) if result & 1 else result >> 1
            return value, index
    return None, index

def decode(encoded: str) -> List[Point]:
    """
    Decode an encoded polyline into (lat, lng) points.

    Truncated input is not an error: decoding stops at the last point
    whose lat and lng were both read completely.
    """
    if not isinstance(encoded, str):
        raise TypeError(f"Encoded polyline must be a string, got {type(encoded).__name__}")

    points: List[Point] = []
    index = 0
    lat = 0
    lng = 0
    while index < len(encoded):
        dlat, index = _read_varint(encoded, index)
        if dlat is None:
            break
        dlng, index = _read_varint(encoded, index)
        if dlng is None:
            break
        lat += dlat
        lng += dlng
        points.append(Point(lat / PRECISION, lng / PRECISION))
    return points

def encode(points: Sequence[Point]) -> str:
    return polyline.encode([(p[0], p[1]) for p in points], 5)

@lru_cache(maxsize=500)
def get_route_points(encoded: Optional[str]) -> Tuple[Point, ...]:
    """
    Decoded route for a stored polyline; empty for a missing one.
    Cached because decode is a pure function of the string.
    """
    if not encoded:
        return ()
    return tuple(decode(encoded))
