# ============================================================
# 📦 src/route_recommendation/domain/spatial_index.py
# ============================================================

import math
from collections import defaultdict
from typing import Dict, List, Sequence, Tuple

KM_PER_DEGREE = 111.0
MIN_COS_LAT = 0.01  # evita células infinitas perto dos polos


class SpatialIndex:
    """
    Grade de células para busca de vizinhos em ~O(1).
    - Célula com lado = cell_size_km (na prática, o epsilon do DBSCAN)
    - Largura em longitude corrigida por cos(lat) usando a maior |lat| do conjunto,
      então a vizinhança 3x3 cobre o raio em qualquer ponto indexado
    - neighbors_of() devolve candidatos; a distância exata fica com quem chama
    """

    def __init__(self, points: Sequence[Tuple[float, float]], cell_lat_deg: float, cell_lng_deg: float):
        self.points = list(points)
        self.cell_lat_deg = cell_lat_deg
        self.cell_lng_deg = cell_lng_deg
        self._grid: Dict[Tuple[int, int], List[int]] = defaultdict(list)

        for idx, (lat, lng) in enumerate(self.points):
            self._grid[self._cell_of(lat, lng)].append(idx)

    # ============================================================
    # 🏗️ Construção
    # ============================================================
    @classmethod
    def build(cls, points: Sequence[Tuple[float, float]], cell_size_km: float) -> "SpatialIndex":
        if cell_size_km <= 0 or not math.isfinite(cell_size_km):
            raise ValueError(f"cell_size_km inválido: {cell_size_km}")

        max_abs_lat = max((abs(lat) for lat, _ in points), default=0.0)
        cos_lat = max(math.cos(math.radians(min(max_abs_lat, 90.0))), MIN_COS_LAT)

        cell_lat_deg = cell_size_km / KM_PER_DEGREE
        cell_lng_deg = cell_size_km / (KM_PER_DEGREE * cos_lat)
        return cls(points, cell_lat_deg, cell_lng_deg)

    def _cell_of(self, lat: float, lng: float) -> Tuple[int, int]:
        return (math.floor(lng / self.cell_lng_deg), math.floor(lat / self.cell_lat_deg))

    @property
    def cell_count(self) -> int:
        return len(self._grid)

    # ============================================================
    # 🔍 Vizinhança 3x3
    # ============================================================
    def neighbors_of(self, point_index: int) -> List[int]:
        """Índices dos pontos nas 9 células ao redor (exclui o próprio ponto)."""
        lat, lng = self.points[point_index]
        cell_x, cell_y = self._cell_of(lat, lng)

        candidatos = []
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                for i in self._grid.get((cell_x + dx, cell_y + dy), ()):
                    if i != point_index:
                        candidatos.append(i)
        return candidatos
