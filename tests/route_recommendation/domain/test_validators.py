# tests/route_recommendation/domain/test_validators.py

from dataclasses import replace

import pytest

from route_recommendation.domain.entities import GeoPoint, RouteParams, ScoringWeights
from route_recommendation.domain.validators import validate_params


def test_defaults_are_valid():
    params = RouteParams()
    assert validate_params(params) is params


@pytest.mark.parametrize(
    "campo,valor",
    [
        ("min_cluster_size", 0),
        ("min_cluster_size", -2),
        ("cluster_radius_km", 0),
        ("cluster_radius_km", -5.0),
        ("cluster_radius_km", float("nan")),
        ("days_ahead", -1),
        ("max_customers_per_route", 1),
        ("max_driving_time_minutes", 0),
        ("service_time_minutes_per_stop", -10),
        ("dispatch_origin", GeoPoint(float("nan"), 10.0)),
        ("max_distance_checks", 0),
    ],
)
def test_invalid_params_are_rejected(campo, valor):
    with pytest.raises(ValueError, match=campo):
        validate_params(replace(RouteParams(), **{campo: valor}))


def test_invalid_weights_are_rejected():
    params = replace(RouteParams(), weights=replace(ScoringWeights(), travel_speed_kmh=0))
    with pytest.raises(ValueError, match="travel_speed_kmh"):
        validate_params(params)


def test_distance_cap_can_be_disabled():
    validate_params(replace(RouteParams(), max_distance_checks=None))
