"""
Error types shared by the search and flight services.

Everything raised on the remote prediction lane derives from PredictorError and
is absorbed by the suggestion controller; callers only ever see Locations.
"""


class PredictorError(Exception):
    """Base class for external predictor failures."""


class PredictorUnavailable(PredictorError):
    """No external predictor is configured."""


class PredictorRequestFailed(PredictorError):
    """A prediction request failed (network, HTTP status or payload)."""


class ResolveFailed(PredictorError):
    """A chosen prediction could not be resolved to coordinates."""


class NearestLookupEmpty(LookupError):
    """The place dataset has no entries to compare against."""


class InvalidDestination(ValueError):
    """Destination coordinates are outside the valid lat/lng ranges."""
