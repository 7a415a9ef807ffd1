# tests/conftest.py

import math
from datetime import date, timedelta

import pytest

from route_recommendation.domain.entities import GeoPoint, ServiceCandidate

TODAY = date(2026, 1, 15)
KM_PER_DEG_LAT = 6371.0 * math.pi / 180  # ~111.195 km


def offset(lat, lng, north_km=0.0, east_km=0.0):
    """Desloca (lat, lng) em km para norte/leste."""
    dlat = north_km / KM_PER_DEG_LAT
    dlng = east_km / (KM_PER_DEG_LAT * math.cos(math.radians(lat)))
    return lat + dlat, lng + dlng


def make_candidate(cid, lat, lng, due_in_days=10, area="Oslo", tags=("El-Kontroll",)):
    due = None if due_in_days is None else TODAY + timedelta(days=due_in_days)
    return ServiceCandidate(
        id=cid,
        point=GeoPoint(lat, lng),
        next_due_date=due,
        area_label=area,
        category_tags=frozenset(tags),
    )


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def candidate():
    return make_candidate


@pytest.fixture
def oslo():
    return (59.9139, 10.7522)


@pytest.fixture
def tight_group(oslo):
    """5 clientes a menos de 1 km uns dos outros, perto do ponto de partida."""
    lat, lng = oslo
    desloc = [(0, 0), (0.2, 0.1), (-0.2, 0.3), (0.3, -0.2), (-0.1, -0.3)]
    return [
        make_candidate(f"c{i}", *offset(lat, lng, n, e))
        for i, (n, e) in enumerate(desloc)
    ]
