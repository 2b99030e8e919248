from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.config import get_settings
from lagging.models import InvalidConstantError, SeriesBundle
from lagging.schemas import SummaryCard, YearsResponse
from lagging.services import get_available_years, get_chart_series, get_summary_card
from third_party.safety_api.client import SafetyApiClient, SafetyApiError
from third_party.safety_api.transforms import MalformedSummaryError
from utils.logger import get_logger, kv_message as kv

logger = get_logger(__name__)

router = APIRouter(prefix="/lagging", tags=["lagging"])


def get_client() -> SafetyApiClient:
    return SafetyApiClient(get_settings())


def _constant_or_default(constant: Optional[int]) -> int:
    return constant if constant is not None else get_settings().default_constant


@router.get("/years", response_model=YearsResponse)
def available_years(client: SafetyApiClient = Depends(get_client)):
    try:
        return YearsResponse(years=get_available_years(client))
    except SafetyApiError as exc:
        logger.error(kv("years_failed", error=str(exc)))
        raise HTTPException(status_code=502, detail=str(exc))


@router.get("/summary/{year}", response_model=SummaryCard)
def summary(
    year: int,
    constant: Optional[int] = Query(None),
    client: SafetyApiClient = Depends(get_client),
):
    try:
        return get_summary_card(client, year, _constant_or_default(constant))
    except InvalidConstantError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except (SafetyApiError, MalformedSummaryError) as exc:
        logger.error(kv("summary_failed", year=year, error=str(exc)))
        raise HTTPException(status_code=502, detail=str(exc))


@router.get("/charts", response_model=SeriesBundle)
def charts(
    years: Optional[List[int]] = Query(None),
    constant: Optional[int] = Query(None),
    limit: Optional[int] = Query(None, ge=1),
    client: SafetyApiClient = Depends(get_client),
):
    try:
        return get_chart_series(client, _constant_or_default(constant), years=years, limit=limit)
    except InvalidConstantError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except SafetyApiError as exc:
        # only reachable while listing years; per-year failures are degraded
        logger.error(kv("charts_failed", error=str(exc)))
        raise HTTPException(status_code=502, detail=str(exc))
