# ============================================================
# 📦 src/route_recommendation/domain/due_dates.py
# ============================================================

from datetime import date, datetime
from typing import Iterable, Mapping, Optional

import pandas as pd

DEFAULT_INTERVAL_MONTHS = 12


def parse_date(value) -> Optional[date]:
    """Converte str/datetime/date/Timestamp em date; valores inválidos viram None."""
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        ts = pd.to_datetime(value, errors="coerce")
    except (TypeError, ValueError):
        return None
    if ts is None or pd.isna(ts):
        return None
    return ts.date()


def _service_due_date(service: Mapping) -> Optional[date]:
    proxima = parse_date(service.get("next_date"))
    if proxima is not None:
        return proxima

    ultima = parse_date(service.get("last_date"))
    if ultima is None:
        return None

    intervalo = service.get("interval_months") or DEFAULT_INTERVAL_MONTHS
    return (pd.Timestamp(ultima) + pd.DateOffset(months=int(intervalo))).date()


def next_due_date(services: Iterable[Mapping]) -> Optional[date]:
    """
    Próxima data de serviço de um cliente com vários serviços contratados.
    - Usa next_date quando informada
    - Senão, last_date + interval_months (padrão 12 meses)
    - Retorna a mais cedo entre os serviços, ou None
    """
    datas = [d for d in (_service_due_date(s) for s in services or []) if d is not None]
    return min(datas) if datas else None
