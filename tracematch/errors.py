"""Exception hierarchy for route matching operations."""

from __future__ import annotations


class RouteMatchError(Exception):
    """Base class for every error raised by tracematch."""


class InsufficientPointsError(RouteMatchError):
    """A route has too few points to be processed."""

    def __init__(self, activity_id: str, point_count: int, minimum_required: int) -> None:
        self.activity_id = activity_id
        self.point_count = point_count
        self.minimum_required = minimum_required
        super().__init__(
            f"Route '{activity_id}' has {point_count} points, "
            f"minimum {minimum_required} required"
        )


class InvalidCoordinatesError(RouteMatchError):
    """A route holds coordinates that are not valid GPS positions."""

    def __init__(self, activity_id: str, message: str) -> None:
        self.activity_id = activity_id
        self.message = message
        super().__init__(f"Route '{activity_id}' has invalid coordinates: {message}")


class RouteTooShortError(RouteMatchError):
    """A route is shorter than an operation requires."""

    def __init__(self, activity_id: str, distance: float, minimum_required: float) -> None:
        self.activity_id = activity_id
        self.distance = distance
        self.minimum_required = minimum_required
        super().__init__(
            f"Route '{activity_id}' is {distance:.0f}m, "
            f"minimum {minimum_required:.0f}m required"
        )


class _MessageError(RouteMatchError):
    """An error described by a message behind a fixed prefix."""

    prefix = "Error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"{self.prefix}: {message}")


class SectionDetectionError(_MessageError):
    """Section detection failed."""

    prefix = "Section detection failed"


class OverlapDetectionError(_MessageError):
    """Overlap detection failed."""

    prefix = "Overlap detection failed"


class PersistenceError(_MessageError):
    """Reading from or writing to storage failed."""

    prefix = "Persistence error"


class ConfigError(_MessageError):
    """A configuration value is not acceptable."""

    prefix = "Configuration error"


class SpatialIndexError(_MessageError):
    """The spatial index could not serve a request."""

    prefix = "Spatial index error"


class InternalError(_MessageError):
    """An unexpected internal failure."""

    prefix = "Internal error"


class HttpError(RouteMatchError):
    """An HTTP request or remote API call failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        if status_code is None:
            text = f"HTTP error: {message}"
        else:
            text = f"HTTP error ({status_code}): {message}"
        super().__init__(text)