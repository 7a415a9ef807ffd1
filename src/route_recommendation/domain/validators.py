# route_recommendation/domain/validators.py

import math

from .entities import RouteParams


def _finite(value) -> bool:
    try:
        return math.isfinite(value)
    except TypeError:
        return False


def validate_params(params: RouteParams) -> RouteParams:
    """Rejeita configuração que levaria o DBSCAN/score a comportamento indefinido."""
    erros = []

    if params.min_cluster_size is None or params.min_cluster_size < 1:
        erros.append(f"min_cluster_size deve ser >= 1 (recebido {params.min_cluster_size})")
    if not _finite(params.cluster_radius_km) or params.cluster_radius_km <= 0:
        erros.append(f"cluster_radius_km deve ser > 0 (recebido {params.cluster_radius_km})")
    if params.days_ahead is None or params.days_ahead < 0:
        erros.append(f"days_ahead deve ser >= 0 (recebido {params.days_ahead})")
    if params.max_customers_per_route is None or params.max_customers_per_route < 2:
        erros.append(f"max_customers_per_route deve ser >= 2 (recebido {params.max_customers_per_route})")
    if not _finite(params.max_driving_time_minutes) or params.max_driving_time_minutes <= 0:
        erros.append(f"max_driving_time_minutes deve ser > 0 (recebido {params.max_driving_time_minutes})")
    if not _finite(params.service_time_minutes_per_stop) or params.service_time_minutes_per_stop < 0:
        erros.append(f"service_time_minutes_per_stop deve ser >= 0 (recebido {params.service_time_minutes_per_stop})")
    if params.dispatch_origin is None or not params.dispatch_origin.is_valid:
        erros.append(f"dispatch_origin inválida: {params.dispatch_origin}")
    if params.max_distance_checks is not None and params.max_distance_checks < 1:
        erros.append(f"max_distance_checks deve ser >= 1 ou None (recebido {params.max_distance_checks})")

    w = params.weights
    for nome in ("travel_speed_kmh", "intra_speed_kmh", "km_per_degree", "min_area_km2"):
        valor = getattr(w, nome)
        if not _finite(valor) or valor <= 0:
            erros.append(f"weights.{nome} deve ser > 0 (recebido {valor})")

    if erros:
        raise ValueError("Parâmetros inválidos: " + "; ".join(erros))
    return params
