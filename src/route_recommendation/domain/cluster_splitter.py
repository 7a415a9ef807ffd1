# ============================================================
# 📦 src/route_recommendation/domain/cluster_splitter.py
# ============================================================

import math
from typing import List, Sequence

import numpy as np
from loguru import logger
from sklearn.cluster import KMeans

from .entities import GeoPoint, ServiceCandidate
from .efficiency_scorer import centroid_of
from .haversine_utils import distance_km
from .spatial_index import KM_PER_DEGREE

RANDOM_STATE = 42  # 🔒 garante reprodutibilidade entre execuções


def _projected_km(cluster: Sequence[ServiceCandidate]) -> np.ndarray:
    """Projeção local em km (longitude escalada por cos da latitude do centroide)."""
    centro = centroid_of(cluster)
    cos_lat = math.cos(math.radians(centro.lat))
    return np.array(
        [[c.lat * KM_PER_DEGREE, c.lng * KM_PER_DEGREE * cos_lat] for c in cluster],
        dtype=np.float64,
    )


def _sorted_by_distance(cluster: Sequence[ServiceCandidate], centro: GeoPoint) -> List[ServiceCandidate]:
    return sorted(cluster, key=lambda c: distance_km(c.lat, c.lng, centro.lat, centro.lng))


# ============================================================
# ✂️ Corte pelos mais próximos do centroide
# ============================================================
def trim_to_nearest(
    cluster: Sequence[ServiceCandidate], centroid: GeoPoint, limit: int
) -> List[ServiceCandidate]:
    """Mantém os `limit` membros mais próximos do centroide (empate: ordem original)."""
    if len(cluster) <= limit:
        return list(cluster)
    return _sorted_by_distance(cluster, centroid)[:limit]


# ============================================================
# ♻️ Divisão recursiva por proximidade (KMeans)
# ============================================================
def _chunk_by_distance(cluster: Sequence[ServiceCandidate], max_size: int) -> List[List[ServiceCandidate]]:
    ordenados = _sorted_by_distance(cluster, centroid_of(cluster))
    return [ordenados[i:i + max_size] for i in range(0, len(ordenados), max_size)]


def split_by_proximity(cluster: Sequence[ServiceCandidate], max_size: int) -> List[List[ServiceCandidate]]:
    """
    Divide um cluster grande demais em partes com no máximo `max_size` membros.
    - k = ceil(n / max_size), KMeans com random_state fixo sobre coordenadas em km
    - Partes que ainda excedem o teto são subdivididas recursivamente
    - Poucas coordenadas distintas (duplicatas) → fatias por distância ao centroide
    """
    cluster = list(cluster)
    n = len(cluster)
    if n <= max_size:
        return [cluster]

    k = math.ceil(n / max_size)
    coords = _projected_km(cluster)
    distintos = len({(c.lat, c.lng) for c in cluster})

    if distintos < k:
        logger.debug(f"⚙️ Apenas {distintos} coordenadas distintas para k={k} — fatiando por distância")
        return _chunk_by_distance(cluster, max_size)

    km = KMeans(n_clusters=k, random_state=RANDOM_STATE, n_init=10)
    labels = km.fit_predict(coords)

    partes: List[List[ServiceCandidate]] = []
    for cid in range(k):
        sub = [cluster[i] for i in np.where(labels == cid)[0]]
        if not sub:
            continue
        if len(sub) >= n:
            # KMeans não separou nada; evita recursão infinita
            partes.extend(_chunk_by_distance(sub, max_size))
        elif len(sub) > max_size:
            partes.extend(split_by_proximity(sub, max_size))
        else:
            partes.append(sub)

    logger.info(f"✂️ Cluster de {n} clientes dividido em {len(partes)} partes (teto={max_size})")
    return partes
