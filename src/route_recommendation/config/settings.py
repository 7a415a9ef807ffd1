# =====================================================
# 📦 src/route_recommendation/config/settings.py
# =====================================================

import os
from dataclasses import replace

from route_recommendation.domain.entities import GeoPoint, RouteParams


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


# =====================================================
# ⚙️ Padrões do motor (sobrescritos por variáveis de ambiente)
# =====================================================
def route_defaults() -> dict:
    checks = os.getenv("ROUTE_MAX_DISTANCE_CHECKS", "5000000")
    return {
        "days_ahead": _env_int("ROUTE_DAYS_AHEAD", 60),
        "max_customers_per_route": _env_int("ROUTE_MAX_CUSTOMERS", 15),
        "max_driving_time_minutes": _env_float("ROUTE_MAX_DRIVING_MIN", 480),
        "min_cluster_size": _env_int("ROUTE_MIN_CLUSTER_SIZE", 3),
        "cluster_radius_km": _env_float("ROUTE_CLUSTER_RADIUS_KM", 5.0),
        "service_time_minutes_per_stop": _env_float("ROUTE_SERVICE_MIN", 30),
        "dispatch_origin": GeoPoint(
            _env_float("ROUTE_START_LAT", 59.9139),
            _env_float("ROUTE_START_LNG", 10.7522),
        ),
        "max_distance_checks": None if checks.strip().lower() in ("", "none", "0") else int(checks),
    }


def load_route_params(**overrides) -> RouteParams:
    """RouteParams com padrões do ambiente; overrides com valor None são ignorados."""
    base = RouteParams(**route_defaults())
    valores = {k: v for k, v in overrides.items() if v is not None}
    return replace(base, **valores)
