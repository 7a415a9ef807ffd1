# route_recommendation/api/schemas.py

from datetime import date
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel

from route_recommendation.config.settings import load_route_params
from route_recommendation.domain.due_dates import next_due_date, parse_date
from route_recommendation.domain.entities import (
    GeoPoint,
    RouteParams,
    ServiceCandidate,
    UNKNOWN_AREA,
)


class PointSchema(BaseModel):
    lat: float
    lng: float


class ServiceSchema(BaseModel):
    nextDate: Optional[str] = None
    lastDate: Optional[str] = None
    intervalMonths: Optional[int] = None


class CandidateSchema(BaseModel):
    id: Union[int, str]
    lat: Optional[float] = None
    lng: Optional[float] = None
    # texto livre: data inválida conta como "sem data" nos diagnósticos
    nextDueDate: Optional[str] = None
    areaLabel: Optional[str] = None
    categoryTags: Optional[List[str]] = None
    services: Optional[List[ServiceSchema]] = None

    def to_domain(self) -> ServiceCandidate:
        due = parse_date(self.nextDueDate)
        if due is None and self.services:
            due = next_due_date(
                {"next_date": s.nextDate, "last_date": s.lastDate, "interval_months": s.intervalMonths}
                for s in self.services
            )
        return ServiceCandidate(
            id=self.id,
            point=GeoPoint(
                self.lat if self.lat is not None else float("nan"),
                self.lng if self.lng is not None else float("nan"),
            ),
            next_due_date=due,
            area_label=(self.areaLabel or "").strip() or UNKNOWN_AREA,
            category_tags=frozenset(self.categoryTags or ()),
        )


class ParamsSchema(BaseModel):
    daysAhead: Optional[int] = None
    maxCustomersPerRoute: Optional[int] = None
    maxDrivingTimeMinutes: Optional[float] = None
    minClusterSize: Optional[int] = None
    clusterRadiusKm: Optional[float] = None
    serviceTimeMinutesPerStop: Optional[float] = None
    dispatchOrigin: Optional[PointSchema] = None

    def to_domain(self) -> RouteParams:
        origem = self.dispatchOrigin
        return load_route_params(
            days_ahead=self.daysAhead,
            max_customers_per_route=self.maxCustomersPerRoute,
            max_driving_time_minutes=self.maxDrivingTimeMinutes,
            min_cluster_size=self.minClusterSize,
            cluster_radius_km=self.clusterRadiusKm,
            service_time_minutes_per_stop=self.serviceTimeMinutesPerStop,
            dispatch_origin=GeoPoint(origem.lat, origem.lng) if origem else None,
        )


class RecommendationRequest(BaseModel):
    candidates: List[CandidateSchema]
    params: Optional[ParamsSchema] = None
    currentDate: Optional[date] = None


class HullRequest(BaseModel):
    points: List[Tuple[float, float]]
