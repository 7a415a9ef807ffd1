# tests/route_recommendation/domain/test_cluster_splitter.py

from conftest import make_candidate, offset
from route_recommendation.domain.cluster_splitter import split_by_proximity, trim_to_nearest
from route_recommendation.domain.efficiency_scorer import centroid_of
from route_recommendation.domain.haversine_utils import distance_km


def _grid(lat, lng, n, step_km=0.4):
    return [
        make_candidate(f"g{i}", *offset(lat, lng, (i // 5) * step_km, (i % 5) * step_km))
        for i in range(n)
    ]


def test_trim_keeps_exactly_the_nearest_members(oslo):
    cluster = _grid(*oslo, 20)
    centro = centroid_of(cluster)

    mantidos = trim_to_nearest(cluster, centro, 15)

    assert len(mantidos) == 15
    dist = lambda c: distance_km(c.lat, c.lng, centro.lat, centro.lng)
    descartados = [c for c in cluster if c not in mantidos]
    assert max(dist(c) for c in mantidos) <= min(dist(c) for c in descartados)


def test_trim_is_noop_when_small_enough(oslo):
    cluster = _grid(*oslo, 5)
    assert trim_to_nearest(cluster, centroid_of(cluster), 15) == cluster


def test_split_small_cluster_returns_single_part(oslo):
    cluster = _grid(*oslo, 10)
    assert split_by_proximity(cluster, 15) == [cluster]


def test_split_separates_blobs(oslo):
    lat, lng = oslo
    blobs = []
    for b in range(3):
        blobs.append([
            make_candidate(f"b{b}-{i}", *offset(lat, lng, b * 3.0 + i * 0.02, i * 0.02))
            for i in range(10)
        ])
    cluster = [c for blob in blobs for c in blob]

    partes = split_by_proximity(cluster, 10)

    assert sorted(sorted(c.id for c in p) for p in partes) == sorted(sorted(c.id for c in b) for b in blobs)


def test_split_covers_every_member_once(oslo):
    cluster = _grid(*oslo, 37)

    partes = split_by_proximity(cluster, 8)

    assert all(1 <= len(p) <= 8 for p in partes)
    ids = [c.id for p in partes for c in p]
    assert sorted(ids) == sorted(c.id for c in cluster)


def test_split_coincident_points_falls_back_to_chunks(oslo):
    cluster = [make_candidate(f"d{i}", *oslo) for i in range(20)]

    partes = split_by_proximity(cluster, 15)

    assert sorted(len(p) for p in partes) == [5, 15]


def test_split_uses_km_not_degrees_at_high_latitude():
    # retângulo 4 km (N-S) x 2.5 km (L-O) a 70°N: em graus a largura L-O parece maior
    lat, lng = 70.0, 25.0
    cantos = {"SW": (0, 0), "SE": (0, 2.5), "NW": (4, 0), "NE": (4, 2.5)}
    cluster = [
        make_candidate(f"{nome}-{i}", *offset(lat, lng, n + i * 0.02, e + i * 0.02))
        for nome, (n, e) in cantos.items()
        for i in range(5)
    ]

    partes = split_by_proximity(cluster, 10)

    grupos = sorted(sorted({c.id.split("-")[0] for c in p}) for p in partes)
    assert grupos == [["NE", "NW"], ["SE", "SW"]]
    for p in partes:
        diametro = max(distance_km(a.lat, a.lng, b.lat, b.lng) for a in p for b in p)
        assert diametro < 3.0
