import logging
import requests

import config

_LOG = logging.getLogger(__name__)


class TransportError(Exception):
    """Raised when the NASA API cannot be reached or answers with an error."""


def _get(url, params):
    """
    Issue a single GET against the NASA API and return the decoded JSON body.
    Any failure (connection, timeout, non-2xx status, bad JSON) becomes a TransportError.
    """
    query = {"api_key": config.NASA_API_KEY, **params}
    _LOG.debug("GET %s params=%s", url, params)
    try:
        response = requests.get(url, params=query, timeout=config.REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.json()
    except requests.RequestException as e:
        raise TransportError(str(e)) from e


def fetch_feed(date):
    """
    Fetch the NEO feed for a single day
    Args:
        date: day as passed by the caller, e.g. "2024-01-01"
    Returns: raw feed payload (near_earth_objects keyed by date)
    """
    return _get(config.NASA_FEED_URL, {"start_date": date, "end_date": date})


def fetch_browse_page(page=config.BROWSE_PAGE, size=config.BROWSE_PAGE_SIZE):
    """
    Fetch one page of the NEO browse listing
    Returns: raw browse payload (near_earth_objects as a list)
    """
    return _get(config.NASA_BROWSE_URL, {"page": page, "size": size})
