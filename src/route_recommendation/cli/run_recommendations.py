# ============================================================
# 📦 src/route_recommendation/cli/run_recommendations.py
# ============================================================

import argparse
import json
import sys
from datetime import date
from pathlib import Path
from typing import List

import pandas as pd
from loguru import logger

from route_recommendation.application.recommendation_use_case import (
    RecommendationPipeline,
    explain_empty,
)
from route_recommendation.config.settings import load_route_params
from route_recommendation.domain.due_dates import next_due_date, parse_date
from route_recommendation.domain.entities import GeoPoint, ServiceCandidate, UNKNOWN_AREA


def _texto(valor) -> str:
    if valor is None or (isinstance(valor, float) and pd.isna(valor)):
        return ""
    return str(valor).strip()


COLUMN_ALIASES = {
    "nextDueDate": "next_due_date",
    "areaLabel": "area_label",
    "categoryTags": "category_tags",
    "lastServiceDate": "last_service_date",
    "intervalMonths": "interval_months",
}
KNOWN_COLUMNS = {"id", "lat", "lng", *COLUMN_ALIASES.values()}


def _tags(valor) -> List[str]:
    if isinstance(valor, (list, tuple, set)):
        return [str(t).strip() for t in valor if str(t).strip()]
    return [t.strip() for t in _texto(valor).split(";") if t.strip()]


# ============================================================
# 📥 Leitura dos candidatos (CSV ou JSON)
# ============================================================
def load_candidates(path: str) -> List[ServiceCandidate]:
    """
    Colunas: id, lat, lng, next_due_date, area_label, category_tags (separadas por ';').
    Aceita também os nomes camelCase da API (nextDueDate, areaLabel, categoryTags, ...).
    Sem next_due_date, usa last_service_date + interval_months.
    Coordenadas/datas inválidas viram NaN/None e aparecem nos diagnósticos.
    """
    arquivo = Path(path)
    if arquivo.suffix.lower() == ".json":
        df = pd.read_json(arquivo, dtype={"id": str})
    else:
        df = pd.read_csv(arquivo, dtype={"id": str})

    df = df.rename(columns=COLUMN_ALIASES)
    desconhecidas = sorted(str(c) for c in df.columns if c not in KNOWN_COLUMNS)
    if desconhecidas:
        logger.warning(f"⚠️ Colunas ignoradas em {arquivo.name}: {desconhecidas}")

    if "id" not in df.columns:
        raise ValueError(f"Arquivo {path} sem coluna 'id'.")

    for col in ("lat", "lng"):
        df[col] = pd.to_numeric(df[col], errors="coerce") if col in df.columns else float("nan")

    candidatos = []
    for row in df.to_dict(orient="records"):
        due = parse_date(row.get("next_due_date"))
        if due is None and row.get("last_service_date") is not None:
            intervalo = row.get("interval_months")
            due = next_due_date([{
                "last_date": row.get("last_service_date"),
                "interval_months": None if intervalo is None or pd.isna(intervalo) else int(intervalo),
            }])

        tags = _tags(row.get("category_tags"))
        candidatos.append(
            ServiceCandidate(
                id=row["id"],
                point=GeoPoint(float(row["lat"]), float(row["lng"])),
                next_due_date=due,
                area_label=_texto(row.get("area_label")) or UNKNOWN_AREA,
                category_tags=frozenset(tags),
            )
        )

    logger.info(f"📦 {len(candidatos)} candidatos carregados de {arquivo.name}")
    return candidatos


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Recomendação de rotas por clusterização geográfica (DBSCAN)"
    )

    # ======================================================
    # 📥 Parâmetros obrigatórios
    # ======================================================
    parser.add_argument("--input", required=True, help="CSV ou JSON com os candidatos")

    # ======================================================
    # ⚙️ Parâmetros opcionais (padrão: variáveis de ambiente)
    # ======================================================
    parser.add_argument("--date", type=str, default=None, help="Data de referência (YYYY-MM-DD), padrão hoje")
    parser.add_argument("--days_ahead", type=int, default=None)
    parser.add_argument("--max_customers", type=int, default=None)
    parser.add_argument("--max_driving_min", type=float, default=None)
    parser.add_argument("--min_cluster_size", type=int, default=None)
    parser.add_argument("--radius_km", type=float, default=None)
    parser.add_argument("--service_min", type=float, default=None)
    parser.add_argument("--start_lat", type=float, default=None)
    parser.add_argument("--start_lng", type=float, default=None)
    parser.add_argument("--output", type=str, default=None, help="Salvar JSON do resultado neste arquivo")
    parser.add_argument("--verbose", action="store_true")

    args = parser.parse_args(argv)

    # ======================================================
    # 🔧 Configuração de log (stdout fica livre para o JSON)
    # ======================================================
    logger.remove()
    logger.add(
        sys.stderr,
        colorize=True,
        level="DEBUG" if args.verbose else "INFO",
        format="<green>{time:HH:mm:ss}</green> | <level>{message}</level>",
    )

    if (args.start_lat is None) != (args.start_lng is None):
        parser.error("--start_lat e --start_lng devem ser informados juntos")

    current_date = parse_date(args.date) if args.date else date.today()
    if current_date is None:
        parser.error(f"--date inválida: {args.date}")

    try:
        params = load_route_params(
            days_ahead=args.days_ahead,
            max_customers_per_route=args.max_customers,
            max_driving_time_minutes=args.max_driving_min,
            min_cluster_size=args.min_cluster_size,
            cluster_radius_km=args.radius_km,
            service_time_minutes_per_stop=args.service_min,
            dispatch_origin=GeoPoint(args.start_lat, args.start_lng) if args.start_lat is not None else None,
        )
        candidatos = load_candidates(args.input)
        result = RecommendationPipeline().run(candidatos, params, current_date)
    except ValueError as e:
        logger.error(f"❌ {e}")
        return 2

    saida = {
        "currentDate": current_date.isoformat(),
        "recommendations": [r.to_dict() for r in result.recommendations],
        "diagnostics": result.diagnostics.to_dict(),
        "message": explain_empty(result.diagnostics, params),
    }
    texto = json.dumps(saida, ensure_ascii=False, indent=2, default=str)

    if args.output:
        Path(args.output).write_text(texto, encoding="utf-8")
        logger.success(f"💾 Resultado salvo em: {args.output}")

    print(texto)
    return 0


if __name__ == "__main__":
    sys.exit(main())
