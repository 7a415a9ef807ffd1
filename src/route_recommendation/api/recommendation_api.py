# ============================================================
# 📦 src/route_recommendation/api/recommendation_api.py
# ============================================================

import json

import numpy as np
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from route_recommendation.api.routes import router as recommendation_router

# ============================================================
# 🚀 App
# ============================================================

app = FastAPI(
    title="Route Recommendation API",
    description="Clusterização geográfica e recomendação de rotas de serviço",
    version="1.0.0",
    openapi_url="/openapi.json",
    docs_url="/docs",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================
# 🧹 Middleware: sanitizar JSON (NaN / Infinity)
# ============================================================
def _clean(obj):
    if isinstance(obj, dict):
        return {k: _clean(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_clean(i) for i in obj]
    if isinstance(obj, float) and (np.isnan(obj) or np.isinf(obj)):
        return None
    return obj


@app.middleware("http")
async def sanitize_json_response(request: Request, call_next):
    response = await call_next(request)

    if "application/json" not in response.headers.get("content-type", ""):
        return response

    raw_body = b"".join([chunk async for chunk in response.body_iterator])
    try:
        content = json.loads(raw_body)
    except ValueError:
        return Response(
            content=raw_body,
            status_code=response.status_code,
            media_type=response.headers.get("content-type"),
        )

    return JSONResponse(content=_clean(content), status_code=response.status_code)


app.include_router(
    recommendation_router,
    prefix="/recommendations",
    tags=["Recomendações"],
)


@app.get("/")
def root():
    return {"status": "Route Recommendation API online 🚀"}


if __name__ == "__main__":
    uvicorn.run(
        "route_recommendation.api.recommendation_api:app",
        host="0.0.0.0",
        port=8010,
        reload=True,
    )
