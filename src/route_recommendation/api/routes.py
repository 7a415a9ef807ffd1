# ============================================================
# 📦 src/route_recommendation/api/routes.py
# ============================================================

from datetime import date

from fastapi import APIRouter, HTTPException
from loguru import logger

from route_recommendation.api.schemas import HullRequest, ParamsSchema, RecommendationRequest
from route_recommendation.application.recommendation_use_case import (
    RecommendationPipeline,
    explain_empty,
)
from route_recommendation.domain.boundary_hull import compute_hull, hull_to_geojson

router = APIRouter()


# ============================================================
# 🧠 Health
# ============================================================
@router.get("/health", tags=["Status"])
def health():
    return {"status": "ok", "message": "Route recommendation API saudável 🧩"}


# ============================================================
# 🚀 Gerar recomendações
# ============================================================
@router.post("/run")
def gerar_recomendacoes(payload: RecommendationRequest):
    candidatos = [c.to_domain() for c in payload.candidates]
    current_date = payload.currentDate or date.today()

    try:
        params = (payload.params or ParamsSchema()).to_domain()
        result = RecommendationPipeline().run(candidatos, params, current_date)
    except ValueError as e:
        logger.warning(f"⚠️ Parâmetros rejeitados: {e}")
        raise HTTPException(status_code=422, detail=str(e))

    return {
        "recommendations": [r.to_dict() for r in result.recommendations],
        "diagnostics": result.diagnostics.to_dict(),
        "message": explain_empty(result.diagnostics, params),
    }


# ============================================================
# 🧭 Envoltória convexa para o mapa
# ============================================================
@router.post("/hull")
def calcular_envoltoria(payload: HullRequest):
    hull = compute_hull(payload.points)
    return {
        "hull": [[lat, lng] for lat, lng in hull],
        "geojson": hull_to_geojson(hull),
    }
