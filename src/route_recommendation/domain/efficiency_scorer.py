# ============================================================
# 📦 src/route_recommendation/domain/efficiency_scorer.py
# ============================================================

import math
from collections import Counter
from datetime import date
from typing import List, Optional, Sequence

import numpy as np
from loguru import logger

from .entities import ClusterScore, GeoPoint, ScoringWeights, ServiceCandidate, UNKNOWN_AREA
from .haversine_utils import distance_km


# ============================================================
# 🔹 Funções auxiliares
# ============================================================
def centroid_of(cluster: Sequence[ServiceCandidate]) -> Optional[GeoPoint]:
    if not cluster:
        return None
    coords = np.array([[c.lat, c.lng] for c in cluster], dtype=np.float64)
    lat, lng = coords.mean(axis=0)
    return GeoPoint(float(lat), float(lng))


def primary_area_of(cluster: Sequence[ServiceCandidate]) -> str:
    """Área mais frequente; empate fica com a que apareceu primeiro."""
    contagem = Counter((c.area_label or UNKNOWN_AREA) for c in cluster)
    if not contagem:
        return UNKNOWN_AREA
    return contagem.most_common(1)[0][0]


def categories_of(cluster: Sequence[ServiceCandidate]) -> List[str]:
    tags = set()
    for c in cluster:
        tags.update(t for t in c.category_tags if t)
    return sorted(tags)


# ============================================================
# ⚙️ Classe principal
# ============================================================
class EfficiencyScorer:
    """
    Converte um cluster em métricas de custo/valor e num score único (0-100).
    - Tempo e distância são estimativas baratas (não é TSP)
    - Clusters com menos de 2 membros não são pontuados
    """

    def __init__(
        self,
        origin: GeoPoint,
        service_time_minutes: float,
        weights: ScoringWeights = None,
    ):
        self.origin = origin
        self.service_time_minutes = service_time_minutes
        self.weights = weights or ScoringWeights()

    def bounding_box_area_km2(self, cluster: Sequence[ServiceCandidate], centroid: GeoPoint) -> float:
        w = self.weights
        lats = [c.lat for c in cluster]
        lngs = [c.lng for c in cluster]
        lat_km = (max(lats) - min(lats)) * w.km_per_degree
        lng_km = (max(lngs) - min(lngs)) * w.km_per_degree * math.cos(math.radians(centroid.lat))
        return max(lat_km * lng_km, w.min_area_km2)

    def score(self, cluster: Sequence[ServiceCandidate], current_date: date) -> Optional[ClusterScore]:
        n = len(cluster)
        if n < 2:
            return None

        w = self.weights
        centroid = centroid_of(cluster)

        distance_to_start = distance_km(self.origin.lat, self.origin.lng, centroid.lat, centroid.lng)
        avg_from_centroid = float(np.mean([
            distance_km(c.lat, c.lng, centroid.lat, centroid.lng) for c in cluster
        ]))

        density = n / self.bounding_box_area_km2(cluster, centroid)

        overdue = sum(1 for c in cluster if c.next_due_date is not None and c.next_due_date < current_date)

        # ida/volta + deslocamento intra-cluster + tempo de serviço
        travel_to_cluster = (distance_to_start * 2 / w.travel_speed_kmh) * 60
        intra_cluster = (avg_from_centroid * n * w.routing_factor / w.intra_speed_kmh) * 60
        service = n * self.service_time_minutes
        estimated_minutes = round(travel_to_cluster + intra_cluster + service)

        estimated_km = round(distance_to_start * 2 + avg_from_centroid * n * w.routing_factor)

        raw = (density * n * w.density_weight) / (
            1 + distance_to_start * w.distance_penalty + avg_from_centroid * w.compactness_penalty
        )
        efficiency_score = int(min(100, max(0, round(raw * w.score_multiplier))))

        resultado = ClusterScore(
            centroid=centroid,
            primary_area=primary_area_of(cluster),
            categories=categories_of(cluster),
            overdue_count=overdue,
            upcoming_count=n - overdue,
            efficiency_score=efficiency_score,
            estimated_minutes=int(estimated_minutes),
            estimated_km=int(estimated_km),
            density=round(density, 1),
            avg_distance_from_centroid=round(avg_from_centroid, 1),
            distance_to_start=int(round(distance_to_start)),
        )

        logger.debug(
            f"📍 Cluster {resultado.primary_area}: {n} clientes | score={efficiency_score} | "
            f"{estimated_minutes} min | {estimated_km} km | densidade={density:.2f}/km² | "
            f"start={distance_to_start:.1f} km"
        )
        return resultado
