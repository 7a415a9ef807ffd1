# ==========================================================
# 📦 src/route_recommendation/domain/dbscan_clustering.py
# ==========================================================

import time
from collections import deque
from typing import List, Optional, Sequence

from loguru import logger

from .entities import ServiceCandidate
from .haversine_utils import distance_km
from .spatial_index import SpatialIndex

NOISE = -1


class ClusteringLimitExceeded(RuntimeError):
    """Orçamento de cálculos de distância esgotado (epsilon próximo da extensão total da base)."""


# ==========================================================
# 🧠 DBSCAN com índice espacial em grade
# ==========================================================
def dbscan_clusters(
    candidates: Sequence[ServiceCandidate],
    eps_km: float,
    min_points: int,
    max_distance_checks: Optional[int] = None,
) -> List[List[ServiceCandidate]]:
    """
    Agrupa candidatos por densidade (DBSCAN clássico).
    - Ponto núcleo: >= min_points vizinhos (sem contar ele mesmo) dentro de eps_km
    - Pontos de borda entram no primeiro cluster que os alcança
    - Ruído é omitido do resultado
    - Clusters com menos de min_points membros são descartados
    """
    n = len(candidates)
    if n == 0:
        return []

    start = time.time()
    coords = [(c.lat, c.lng) for c in candidates]
    index = SpatialIndex.build(coords, eps_km)

    visited = [False] * n
    cluster_ids = [NOISE] * n
    checks = 0

    def region_query(point_index: int) -> List[int]:
        nonlocal checks
        lat, lng = coords[point_index]
        vizinhos = []
        for i in index.neighbors_of(point_index):
            checks += 1
            if distance_km(lat, lng, coords[i][0], coords[i][1]) <= eps_km:
                vizinhos.append(i)

        if max_distance_checks is not None and checks > max_distance_checks:
            raise ClusteringLimitExceeded(
                f"limite de {max_distance_checks} cálculos de distância excedido (n={n}, eps={eps_km} km)"
            )
        return vizinhos

    def expand_cluster(point_index: int, neighbors: List[int], cluster_id: int):
        cluster_ids[point_index] = cluster_id
        queue = deque(neighbors)
        queued = set(neighbors)

        while queue:
            current = queue.popleft()

            if not visited[current]:
                visited[current] = True
                current_neighbors = region_query(current)

                if len(current_neighbors) >= min_points:
                    for nb in current_neighbors:
                        if nb not in queued and cluster_ids[nb] == NOISE:
                            queue.append(nb)
                            queued.add(nb)

            if cluster_ids[current] == NOISE:
                cluster_ids[current] = cluster_id

    # ------------------------------------------------------
    # 🔁 Laço principal
    # ------------------------------------------------------
    n_clusters = 0
    for i in range(n):
        if visited[i]:
            continue
        visited[i] = True

        neighbors = region_query(i)
        if len(neighbors) < min_points:
            continue  # ruído por enquanto; pode virar borda depois

        expand_cluster(i, neighbors, n_clusters)
        n_clusters += 1

    grupos: List[List[ServiceCandidate]] = [[] for _ in range(n_clusters)]
    for idx, cid in enumerate(cluster_ids):
        if cid != NOISE:
            grupos[cid].append(candidates[idx])

    clusters = [g for g in grupos if len(g) >= min_points]
    ruido = n - sum(len(g) for g in clusters)

    elapsed = round(time.time() - start, 3)
    logger.info(
        f"📊 DBSCAN (eps={eps_km} km, min_points={min_points}): {len(clusters)} clusters | "
        f"{ruido} pontos de ruído | {checks} distâncias | {index.cell_count} células | {elapsed}s"
    )
    return clusters
