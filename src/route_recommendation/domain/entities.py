# ==========================================================
# 📦 src/route_recommendation/domain/entities.py
# ==========================================================

import math
from dataclasses import dataclass, field, asdict
from datetime import date
from typing import Optional, Dict, List, FrozenSet, Any

from .due_dates import parse_date

UNKNOWN_AREA = "unknown"


@dataclass(frozen=True)
class GeoPoint:
    """Coordenada (lat, lng) em graus decimais."""
    lat: float
    lng: float

    @property
    def is_valid(self) -> bool:
        try:
            return math.isfinite(self.lat) and math.isfinite(self.lng)
        except TypeError:
            return False

    def as_tuple(self):
        return (self.lat, self.lng)


@dataclass(frozen=True)
class ServiceCandidate:
    """Cliente georreferenciado com visita de serviço pendente ou vencida."""
    id: Any
    point: GeoPoint
    next_due_date: Optional[date] = None
    area_label: str = UNKNOWN_AREA
    category_tags: FrozenSet[str] = frozenset()

    def __post_init__(self):
        # datetime/Timestamp/texto viram date (inválido vira None)
        if self.next_due_date is not None and type(self.next_due_date) is not date:
            object.__setattr__(self, "next_due_date", parse_date(self.next_due_date))

    @property
    def lat(self) -> float:
        return self.point.lat

    @property
    def lng(self) -> float:
        return self.point.lng


# ==========================================================
# ⚙️ Parâmetros do motor
# ==========================================================
@dataclass(frozen=True)
class ScoringWeights:
    """
    Pesos heurísticos do cálculo de eficiência.
    Valores empíricos herdados do planejador de campo; não são constantes físicas.
    """
    travel_speed_kmh: float = 50.0     # ida/volta até o cluster
    intra_speed_kmh: float = 30.0      # deslocamento dentro do cluster
    routing_factor: float = 1.5        # ineficiência de roteamento intra-cluster
    density_weight: float = 10.0
    score_multiplier: float = 10.0
    distance_penalty: float = 0.05
    compactness_penalty: float = 0.3
    km_per_degree: float = 111.0
    min_area_km2: float = 0.1


@dataclass(frozen=True)
class RouteParams:
    days_ahead: int = 60
    max_customers_per_route: int = 15
    max_driving_time_minutes: float = 480
    min_cluster_size: int = 3
    cluster_radius_km: float = 5.0
    service_time_minutes_per_stop: float = 30
    dispatch_origin: GeoPoint = GeoPoint(59.9139, 10.7522)
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    max_distance_checks: Optional[int] = 5_000_000


# ==========================================================
# 📊 Resultado
# ==========================================================
@dataclass
class ClusterScore:
    centroid: GeoPoint
    primary_area: str
    categories: List[str]
    overdue_count: int
    upcoming_count: int
    efficiency_score: int
    estimated_minutes: int
    estimated_km: int
    density: float
    avg_distance_from_centroid: float
    distance_to_start: int

    @property
    def efficiency_class(self) -> str:
        if self.efficiency_score >= 70:
            return "high"
        if self.efficiency_score >= 40:
            return "medium"
        return "low"


@dataclass
class Recommendation:
    id: int
    customer_ids: List[Any]
    score: ClusterScore
    is_area_based: bool = False

    @property
    def customer_count(self) -> int:
        return len(self.customer_ids)

    def to_dict(self) -> Dict[str, Any]:
        s = self.score
        return {
            "id": self.id,
            "customerIds": list(self.customer_ids),
            "customerCount": self.customer_count,
            "centroid": {"lat": s.centroid.lat, "lng": s.centroid.lng},
            "primaryArea": s.primary_area,
            "categories": list(s.categories),
            "overdueCount": s.overdue_count,
            "upcomingCount": s.upcoming_count,
            "efficiencyScore": s.efficiency_score,
            "efficiencyClass": s.efficiency_class,
            "estimatedMinutes": s.estimated_minutes,
            "estimatedKm": s.estimated_km,
            "density": s.density,
            "avgDistanceFromCentroid": s.avg_distance_from_centroid,
            "distanceToStart": s.distance_to_start,
            "isAreaBased": self.is_area_based,
        }


@dataclass
class RecommendationDiagnostics:
    """Contadores para explicar ao usuário por que a lista veio vazia (ou curta)."""
    total_candidates: int = 0
    missing_coordinates: int = 0
    missing_due_date: int = 0
    with_due_date: int = 0
    outside_window: int = 0
    eligible: int = 0
    unclustered: int = 0
    clusters_found: int = 0
    trimmed_clusters: int = 0
    split_clusters: int = 0
    dropped_clusters: int = 0
    used_expanded_radius: bool = False
    used_area_fallback: bool = False
    clustering_capped: bool = False
    empty_reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class RecommendationResult:
    recommendations: List[Recommendation]
    diagnostics: RecommendationDiagnostics

    def __len__(self):
        return len(self.recommendations)

    def __iter__(self):
        return iter(self.recommendations)
