from typing import Iterator, Mapping, Optional

from freezer.core.constants import POSITION_COUNT, POSITION_NAMES, TRACK_COUNT, TRACK_NAMES
from freezer.core.result import ValidationResult


def generate_location_label(track: int, position: int) -> str:
    return "T{}-P{}".format(track, position)


def _name_for(names, index) -> str:
    if isinstance(index, int) and 1 <= index <= len(names):
        return names[index - 1]
    return str(index)


def generate_location_description(track: int, position: int) -> str:
    return "Track {} ({}), Position {} ({})".format(
        track,
        _name_for(TRACK_NAMES, track),
        position,
        _name_for(POSITION_NAMES, position),
    )


def iter_slots() -> Iterator[tuple[int, int]]:
    for track in range(1, TRACK_COUNT + 1):
        for position in range(1, POSITION_COUNT + 1):
            yield track, position


def _coordinate(location, key):
    if location is None:
        return None
    if isinstance(location, Mapping):
        return location.get(key)
    return getattr(location, key, None)


def _in_range(value, upper: int) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return 1 <= value <= upper and float(value).is_integer()


def validate_location(location) -> ValidationResult:
    """Check a ``{track, position}`` pair against the 3x2 freezer grid.

    Both coordinates are checked; errors are keyed by ``track`` and
    ``position``.
    """
    result = ValidationResult()
    track = _coordinate(location, "track")
    position = _coordinate(location, "position")

    if not track:
        result.errors["track"] = "Track is required"
    elif not _in_range(track, TRACK_COUNT):
        result.errors["track"] = "Track must be between 1 and {}".format(TRACK_COUNT)

    if not position:
        result.errors["position"] = "Position is required"
    elif not _in_range(position, POSITION_COUNT):
        result.errors["position"] = "Position must be 1 or 2"

    return result


def build_location(track, position) -> Optional[dict]:
    if not track or not position:
        return None
    track = int(track)
    position = int(position)
    return {
        "track": track,
        "position": position,
        "label": generate_location_label(track, position),
        "description": generate_location_description(track, position),
    }


__all__ = [
    "build_location",
    "generate_location_description",
    "generate_location_label",
    "iter_slots",
    "validate_location",
]
