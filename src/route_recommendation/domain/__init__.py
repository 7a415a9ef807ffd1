from .entities import (
    GeoPoint,
    ServiceCandidate,
    ScoringWeights,
    RouteParams,
    ClusterScore,
    Recommendation,
    RecommendationDiagnostics,
    RecommendationResult,
)
from .haversine_utils import distance_km
from .boundary_hull import compute_hull
