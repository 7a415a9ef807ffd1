# ============================================================
# 📦 src/route_recommendation/application/recommendation_use_case.py
# ============================================================

from collections import OrderedDict
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence

from loguru import logger

from route_recommendation.domain.cluster_splitter import split_by_proximity, trim_to_nearest
from route_recommendation.domain.dbscan_clustering import ClusteringLimitExceeded, dbscan_clusters
from route_recommendation.domain.efficiency_scorer import EfficiencyScorer
from route_recommendation.domain.entities import (
    Recommendation,
    RecommendationDiagnostics,
    RecommendationResult,
    RouteParams,
    ServiceCandidate,
    UNKNOWN_AREA,
)
from route_recommendation.domain.validators import validate_params


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"current_date deve ser date/datetime (recebido {type(value).__name__})")


# ============================================================
# 🚀 Pipeline de recomendação
# ============================================================
class RecommendationPipeline:
    """
    Filtra → clusteriza (DBSCAN) → fallback → pontua → corta/divide → ordena.
    Função pura: mesma entrada (incluindo current_date) gera a mesma saída, na mesma ordem.
    Não guarda estado entre execuções.
    """

    def run(
        self,
        candidates: Sequence[ServiceCandidate],
        params: RouteParams,
        current_date,
    ) -> RecommendationResult:
        validate_params(params)
        current_date = _as_date(current_date)

        diag = RecommendationDiagnostics(total_candidates=len(candidates))
        logger.info(
            f"🏁 Iniciando recomendação de rotas | {len(candidates)} candidatos | "
            f"data={current_date} | janela={params.days_ahead} dias"
        )

        # ============================================================
        # 1) Elegíveis
        # ============================================================
        eligible = self._filter_eligible(candidates, params, current_date, diag)
        scorer = EfficiencyScorer(
            origin=params.dispatch_origin,
            service_time_minutes=params.service_time_minutes_per_stop,
            weights=params.weights,
        )

        # ============================================================
        # 2-4) Clusterização com fallback
        # ============================================================
        if len(eligible) < params.min_cluster_size:
            logger.warning(
                f"⚠️ Apenas {len(eligible)} elegíveis (< {params.min_cluster_size}) — usando agrupamento por área."
            )
            recommendations = self._area_based(eligible, scorer, current_date, diag)
        else:
            clusters = self._cluster(eligible, params, diag)
            if clusters:
                recommendations = self._score_clusters(clusters, params, scorer, current_date, diag)
            else:
                recommendations = self._area_based(eligible, scorer, current_date, diag)

        # ============================================================
        # 6) Ordenação e ids sequenciais
        # ============================================================
        ranked = sorted(recommendations, key=lambda r: r.score.efficiency_score, reverse=True)
        for idx, rec in enumerate(ranked):
            rec.id = idx

        covered = sum(r.customer_count for r in ranked)
        diag.unclustered = max(0, diag.eligible - covered)
        diag.empty_reason = None if ranked else self._empty_reason(diag, params)

        if ranked:
            logger.success(
                f"✅ {len(ranked)} recomendações | melhor score={ranked[0].score.efficiency_score} | "
                f"{diag.unclustered} elegíveis sem rota"
            )
        else:
            logger.info(f"ℹ️ Nenhuma recomendação gerada (motivo={diag.empty_reason})")

        return RecommendationResult(recommendations=ranked, diagnostics=diag)

    # ============================================================
    # 🔍 Filtro de elegibilidade
    # ============================================================
    def _filter_eligible(
        self,
        candidates: Sequence[ServiceCandidate],
        params: RouteParams,
        current_date: date,
        diag: RecommendationDiagnostics,
    ) -> List[ServiceCandidate]:
        limite = current_date + timedelta(days=params.days_ahead)
        eligible = []

        for c in candidates:
            if c is not None and c.next_due_date is not None:
                diag.with_due_date += 1

            if c is None or c.point is None or not c.point.is_valid:
                diag.missing_coordinates += 1
            elif c.next_due_date is None:
                diag.missing_due_date += 1
            elif c.next_due_date > limite:
                diag.outside_window += 1
            else:
                eligible.append(c)

        diag.eligible = len(eligible)
        logger.info(
            f"📦 {diag.eligible} elegíveis | sem coordenadas={diag.missing_coordinates} | "
            f"sem data={diag.missing_due_date} | fora da janela={diag.outside_window}"
        )
        return eligible

    # ============================================================
    # 🧠 DBSCAN (raio normal → raio dobrado)
    # ============================================================
    def _cluster(
        self,
        eligible: List[ServiceCandidate],
        params: RouteParams,
        diag: RecommendationDiagnostics,
    ) -> List[List[ServiceCandidate]]:
        try:
            clusters = dbscan_clusters(
                eligible, params.cluster_radius_km, params.min_cluster_size, params.max_distance_checks
            )
            if not clusters:
                raio = params.cluster_radius_km * 2
                logger.warning(f"⚠️ Nenhum cluster DBSCAN — tentando raio dobrado ({raio} km).")
                diag.used_expanded_radius = True
                clusters = dbscan_clusters(
                    eligible, raio, params.min_cluster_size, params.max_distance_checks
                )
        except ClusteringLimitExceeded as e:
            logger.warning(f"🚨 Clusterização interrompida: {e} — usando agrupamento por área.")
            diag.clustering_capped = True
            return []

        diag.clusters_found = len(clusters)
        if not clusters:
            logger.warning("⚠️ DBSCAN não formou clusters nem com raio dobrado — usando agrupamento por área.")
        return clusters

    # ============================================================
    # 📊 Pontuação com teto de clientes/tempo
    # ============================================================
    def _score_clusters(
        self,
        clusters: List[List[ServiceCandidate]],
        params: RouteParams,
        scorer: EfficiencyScorer,
        current_date: date,
        diag: RecommendationDiagnostics,
    ) -> List[Recommendation]:
        max_clientes = params.max_customers_per_route
        resultado = []

        for cluster in clusters:
            score = scorer.score(cluster, current_date)
            if score is None:
                diag.dropped_clusters += 1
                continue

            grande = len(cluster) > max_clientes
            lento = score.estimated_minutes > params.max_driving_time_minutes

            if grande and lento:
                diag.split_clusters += 1
                logger.warning(
                    f"⚠️ Cluster {score.primary_area} excede limites ({len(cluster)} clientes / "
                    f"{score.estimated_minutes} min) → dividindo"
                )
                for parte in split_by_proximity(cluster, max_clientes):
                    parte_score = scorer.score(parte, current_date)
                    if parte_score is None:
                        diag.dropped_clusters += 1
                        continue
                    resultado.append(Recommendation(-1, [c.id for c in parte], parte_score))

            elif grande:
                diag.trimmed_clusters += 1
                cortado = trim_to_nearest(cluster, score.centroid, max_clientes)
                logger.debug(f"✂️ Cluster {score.primary_area}: {len(cluster)} → {len(cortado)} clientes")
                resultado.append(Recommendation(-1, [c.id for c in cortado], scorer.score(cortado, current_date)))

            else:
                resultado.append(Recommendation(-1, [c.id for c in cluster], score))

        return resultado

    # ============================================================
    # 🗺️ Fallback: agrupamento por área
    # ============================================================
    def _area_based(
        self,
        eligible: List[ServiceCandidate],
        scorer: EfficiencyScorer,
        current_date: date,
        diag: RecommendationDiagnostics,
    ) -> List[Recommendation]:
        diag.used_area_fallback = True

        por_area = OrderedDict()
        for c in eligible:
            por_area.setdefault(c.area_label or UNKNOWN_AREA, []).append(c)

        resultado = []
        for area, membros in por_area.items():
            if len(membros) < 2:
                continue
            score = scorer.score(membros, current_date)
            if score is None:
                continue
            resultado.append(Recommendation(-1, [c.id for c in membros], score, is_area_based=True))

        logger.info(f"🗺️ Agrupamento por área: {len(resultado)} grupos de {len(por_area)} áreas")
        return resultado

    # ============================================================
    # ℹ️ Motivo de lista vazia
    # ============================================================
    @staticmethod
    def _empty_reason(diag: RecommendationDiagnostics, params: RouteParams) -> str:
        if diag.total_candidates == 0:
            return "no_candidates"
        if diag.missing_coordinates == diag.total_candidates:
            return "no_coordinates"
        if diag.with_due_date == 0:
            return "no_due_dates"
        if diag.eligible == 0:
            return "none_due_in_window"
        if diag.eligible < params.min_cluster_size:
            return "too_few_eligible"
        return "no_groups"


EMPTY_MESSAGES = {
    "no_candidates": "Nenhum cliente cadastrado.",
    "no_coordinates": "Nenhum cliente possui coordenadas.",
    "no_due_dates": "Nenhum cliente possui data de próxima visita.",
    "none_due_in_window": "Nenhuma visita vence nos próximos {days_ahead} dias.",
    "too_few_eligible": "Apenas {eligible} cliente(s) precisam de visita.",
    "no_groups": "Nenhum agrupamento de rota encontrado.",
}


def explain_empty(diagnostics: RecommendationDiagnostics, params: RouteParams) -> Optional[str]:
    """Mensagem legível para uma lista vazia; None se houve recomendações."""
    if diagnostics.empty_reason is None:
        return None
    template = EMPTY_MESSAGES.get(diagnostics.empty_reason, EMPTY_MESSAGES["no_groups"])
    return template.format(days_ahead=params.days_ahead, eligible=diagnostics.eligible)


def run_recommendations(
    candidates: Sequence[ServiceCandidate],
    params: RouteParams = None,
    current_date=None,
) -> RecommendationResult:
    """Atalho: usa parâmetros padrão e a data de hoje quando não informados."""
    return RecommendationPipeline().run(
        candidates,
        params or RouteParams(),
        current_date if current_date is not None else date.today(),
    )
