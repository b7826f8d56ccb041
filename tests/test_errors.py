import pytest

from tracematch.errors import (
    ConfigError,
    HttpError,
    InsufficientPointsError,
    InternalError,
    InvalidCoordinatesError,
    OverlapDetectionError,
    PersistenceError,
    RouteMatchError,
    RouteTooShortError,
    SectionDetectionError,
    SpatialIndexError,
)


def test_insufficient_points_message_and_fields():
    err = InsufficientPointsError("run-1", 1, 2)
    assert str(err) == "Route 'run-1' has 1 points, minimum 2 required"
    assert err.activity_id == "run-1"
    assert err.point_count == 1
    assert err.minimum_required == 2


def test_invalid_coordinates_message():
    err = InvalidCoordinatesError("ride", "latitude out of range")
    assert str(err) == "Route 'ride' has invalid coordinates: latitude out of range"
    assert err.message == "latitude out of range"


def test_route_too_short_rounds_distances():
    err = RouteTooShortError("walk", 123.4, 500.0)
    assert str(err) == "Route 'walk' is 123m, minimum 500m required"
    assert err.distance == 123.4


@pytest.mark.parametrize(
    ("cls", "prefix"),
    [
        (SectionDetectionError, "Section detection failed"),
        (OverlapDetectionError, "Overlap detection failed"),
        (PersistenceError, "Persistence error"),
        (ConfigError, "Configuration error"),
        (SpatialIndexError, "Spatial index error"),
        (InternalError, "Internal error"),
    ],
)
def test_message_errors(cls, prefix):
    err = cls("boom")
    assert str(err) == f"{prefix}: boom"
    assert err.message == "boom"
    assert isinstance(err, RouteMatchError)


def test_http_error_with_status():
    err = HttpError("rate limited", 429)
    assert str(err) == "HTTP error (429): rate limited"
    assert err.status_code == 429


def test_http_error_without_status():
    err = HttpError("connection reset")
    assert str(err) == "HTTP error: connection reset"
    assert err.status_code is None


def test_errors_can_be_caught_as_base():
    err = InsufficientPointsError("x", 0, 2)
    assert isinstance(err, RouteMatchError)
    assert str(err) == "Route 'x' has 0 points, minimum 2 required"
    with pytest.raises(RouteMatchError, match="has 0 points, minimum 2 required"):
        raise err