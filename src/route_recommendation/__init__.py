from route_recommendation.domain.entities import (
    GeoPoint,
    ServiceCandidate,
    ScoringWeights,
    RouteParams,
    Recommendation,
    RecommendationResult,
)
from route_recommendation.domain.boundary_hull import compute_hull, hull_to_geojson
from route_recommendation.application.recommendation_use_case import (
    RecommendationPipeline,
    run_recommendations,
    explain_empty,
)

__version__ = "1.0.0"
