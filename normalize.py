import datetime
import logging
import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import List

from pydantic import BaseModel

_LOG = logging.getLogger(__name__)

UNKNOWN = "Unknown"

# Maximum diameter (km) above which an asteroid counts as large
SIZE_THRESHOLD_KM = 1
# Speed (km/h) above which an asteroid counts as fast
SPEED_THRESHOLD_KPH = 50000

SIZE_LABELS = {
    "large": "a city block",
    "small": "a bus",
}

SPEED_LABELS = {
    "fast": "Zooming through space 🚀",
    "slow": "Steady and slow 🛸",
}


class MalformedAsteroidError(ValueError):
    """Upstream data does not have the shape the pipeline needs."""


class AsteroidView(BaseModel):
    name: str
    id: str
    size: str
    size_category: str
    size_label: str
    date: str
    speed: str
    speed_comment: str
    speed_label: str
    distance: str


# ============================================================================
# DATES
# ============================================================================

def parse_as_of(value=None):
    """
    Turn a caller supplied reference point into a date.

    Parameters:
        value: None (today), a date/datetime, or an ISO 8601 string
               ("2024-01-01" or "2024-01-01T12:00:00Z").

    Returns:
        datetime.date

    Raises:
        ValueError: if a string cannot be parsed.
    """
    if value is None:
        return datetime.date.today()
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    try:
        return datetime.date.fromisoformat(value)
    except ValueError:
        return datetime.datetime.fromisoformat(value.replace("Z", "+00:00")).date()


def _mapping(value, what):
    # None means "absent"; anything else must be an object
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise MalformedAsteroidError(f"{what} is not an object: {value!r}")
    return value


def _approach_date(approach):
    try:
        return datetime.date.fromisoformat(approach["close_approach_date"])
    except (KeyError, TypeError, ValueError):
        # an unreadable date never counts as upcoming
        return None


def next_approach(asteroid, as_of):
    """
    Return the first close approach (in upstream order) dated on or after as_of.
    This is the first match, not necessarily the soonest one.

    Raises:
        MalformedAsteroidError: if the approach list or one of its entries has the wrong shape.
    """
    approaches = asteroid.get("close_approach_data") or []
    if not isinstance(approaches, list):
        raise MalformedAsteroidError(f"Asteroid {asteroid.get('id', '?')} close_approach_data is not a list")
    for approach in approaches:
        if not isinstance(approach, dict):
            raise MalformedAsteroidError(f"Asteroid {asteroid.get('id', '?')} has a close approach that is not an object")
        approach_date = _approach_date(approach)
        if approach_date is not None and approach_date >= as_of:
            return approach
    return None


def has_future_approach(asteroid, as_of):
    return next_approach(asteroid, as_of) is not None


def filter_upcoming(raw_asteroids, as_of):
    """
    Keep the raw asteroid dicts that have at least one approach on or after as_of.
    Records are returned untouched and in their original order.
    """
    return [asteroid for asteroid in raw_asteroids if has_future_approach(asteroid, as_of)]


def browse_objects(payload):
    """
    Extract the asteroid list from a /neo/browse response.
    """
    asteroids = payload.get("near_earth_objects") if isinstance(payload, dict) else None
    if not isinstance(asteroids, list):
        raise MalformedAsteroidError("Browse payload has no near_earth_objects list")
    if not all(isinstance(asteroid, dict) for asteroid in asteroids):
        raise MalformedAsteroidError("Browse payload has a near_earth_objects entry that is not an object")
    return asteroids


# ============================================================================
# FORMATTING
# ============================================================================

def _fixed(value, places):
    # half-up on the exact binary value, like toFixed()
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def _number(value):
    try:
        return float(value)
    except (TypeError, ValueError):
        return float("nan")


def _non_finite(value, infinity):
    if math.isnan(value):
        return "NaN"
    return infinity if value > 0 else "-" + infinity


def _reparse(text):
    try:
        return float(text)
    except ValueError:
        return float("nan")


def _format_speed(approach):
    kph = _mapping(approach.get("relative_velocity"), "relative_velocity").get("kilometers_per_hour")
    if not kph:
        return UNKNOWN
    value = _number(kph)
    if not math.isfinite(value):
        return _non_finite(value, "Infinity")
    return _fixed(value, 0)


def _format_distance(approach):
    km = _mapping(approach.get("miss_distance"), "miss_distance").get("kilometers")
    if not km:
        return UNKNOWN
    value = _number(km)
    if not math.isfinite(value):
        return _non_finite(value, "∞")
    text = f"{Decimal(str(value)).quantize(Decimal('0.001'), rounding=ROUND_HALF_UP):,.3f}"
    return text.rstrip("0").rstrip(".")


def _size_range(asteroid):
    try:
        kilometers = asteroid["estimated_diameter"]["kilometers"]
        size_min = _fixed(kilometers["estimated_diameter_min"], 2)
        size_max = _fixed(kilometers["estimated_diameter_max"], 2)
    except (KeyError, TypeError, ValueError, InvalidOperation) as e:
        raise MalformedAsteroidError(
            f"Asteroid {asteroid.get('id', '?')} has no usable kilometre diameter: {e!r}"
        ) from e
    return size_min, size_max


def format_asteroid(asteroid, as_of):
    """
    Build the display record for one raw asteroid.

    Parameters:
        asteroid (dict): raw asteroid from the NASA API.
        as_of (date): approaches before this day are ignored.

    Returns:
        AsteroidView, or None when the asteroid has no upcoming approach.

    Raises:
        MalformedAsteroidError: if the diameter data is missing or invalid, or the
            approach data does not have the expected shape.
    """
    approach = next_approach(asteroid, as_of)
    if approach is None:
        return None

    size_min, size_max = _size_range(asteroid)
    # category is decided on the rounded text, so 1.004 -> "1.00" -> small
    size_category = "large" if _reparse(size_max) > SIZE_THRESHOLD_KM else "small"

    speed = _format_speed(approach)
    # "Unknown" reparses to NaN, which never exceeds the threshold
    speed_comment = "fast" if _reparse(speed) > SPEED_THRESHOLD_KPH else "slow"

    return AsteroidView(
        name=str(asteroid.get("name")),
        id=str(asteroid.get("id")),
        size=f"{size_min} - {size_max}",
        size_category=size_category,
        size_label=SIZE_LABELS[size_category],
        date=approach["close_approach_date"],
        speed=speed,
        speed_comment=speed_comment,
        speed_label=SPEED_LABELS[speed_comment],
        distance=_format_distance(approach),
    )


def normalize_asteroids(raw_asteroids, as_of, isolate_errors=False) -> List[AsteroidView]:
    """
    Normalize a list of raw asteroids into display records.

    Parameters:
        raw_asteroids (list): raw asteroid dicts, e.g. from browse_objects().
        as_of (date): reference day for "upcoming".
        isolate_errors (bool): skip and log malformed records instead of
            failing the whole batch.

    Returns:
        list: AsteroidView per asteroid with an upcoming approach, input order kept.
    """
    views = []
    for asteroid in raw_asteroids:
        try:
            view = format_asteroid(asteroid, as_of)
        except MalformedAsteroidError as e:
            if not isolate_errors:
                raise
            _LOG.warning("Skipping malformed asteroid: %s", e)
            continue
        if view is not None:
            views.append(view)
    return views
