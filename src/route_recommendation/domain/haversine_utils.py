# ============================================================
# 📦 src/route_recommendation/domain/haversine_utils.py
# ============================================================

import math

EARTH_RADIUS_KM = 6371.0  # raio médio da Terra em km


def is_valid_coordinate(lat, lng) -> bool:
    """True se ambas as coordenadas são números finitos."""
    try:
        return math.isfinite(lat) and math.isfinite(lng)
    except TypeError:
        return False


def distance_km(lat1, lng1, lat2, lng2) -> float:
    """
    Calcula a distância Haversine entre dois pontos em quilômetros.
    Qualquer coordenada não finita retorna infinito: o ponto fica fora
    de qualquer raio epsilon sem tratamento especial.
    """
    if not (is_valid_coordinate(lat1, lng1) and is_valid_coordinate(lat2, lng2)):
        return math.inf

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lng2 - lng1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c
