# ============================================================
# 📦 src/route_recommendation/domain/boundary_hull.py
# ============================================================

from typing import Any, Dict, List, Sequence, Tuple

Point = Tuple[float, float]  # (lat, lng)


def _cross(o: Point, a: Point, b: Point) -> float:
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def _dist2(a: Point, b: Point) -> float:
    return (a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2


# ============================================================
# 🧭 Envoltória convexa (gift wrapping / Jarvis march)
# ============================================================
def compute_hull(points: Sequence[Sequence[float]]) -> List[Point]:
    """
    Retorna os vértices da envoltória convexa em ordem (laço aberto, sem repetir o início).
    - Menos de 3 pontos: devolve a entrada sem alteração
    - Início: menor latitude, desempate pela menor longitude
    - Colineares: segue para o mais distante (vértices intermediários ficam de fora)
    - Pontos coincidentes são ignorados; conjunto degenerado gera polígono de área zero
    """
    if len(points) < 3:
        return list(points)

    pts = [(float(p[0]), float(p[1])) for p in points]
    n = len(pts)
    start = min(range(n), key=lambda i: (pts[i][0], pts[i][1]))

    hull: List[Point] = []
    current = start

    while True:
        hull.append(pts[current])
        nxt = None

        for i in range(n):
            if pts[i] == pts[current]:
                continue
            if nxt is None:
                nxt = i
                continue
            turn = _cross(pts[current], pts[nxt], pts[i])
            if turn < 0 or (turn == 0 and _dist2(pts[current], pts[i]) > _dist2(pts[current], pts[nxt])):
                nxt = i

        if nxt is None:
            break  # todos os pontos coincidem
        current = nxt
        if pts[current] == pts[start] or len(hull) >= n:
            break

    return hull


def hull_to_geojson(hull: Sequence[Point], properties: Dict[str, Any] = None) -> Dict[str, Any]:
    """Feature GeoJSON com anel fechado em [lng, lat]."""
    ring = [[lng, lat] for lat, lng in hull]
    if ring:
        ring.append(list(ring[0]))
    return {
        "type": "Feature",
        "geometry": {"type": "Polygon", "coordinates": [ring]},
        "properties": properties or {},
    }
