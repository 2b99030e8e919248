from typing import Dict, Iterable, List, Optional

from app.config import get_settings
from lagging.aggregation import MultiYearAggregator
from lagging.calculations import ConstantLike, recalculate
from lagging.formatting import format_currency, format_number
from lagging.models import NormalizationConstant, SeriesBundle, YearSummary
from lagging.schemas import SummaryCard
from third_party.safety_api.client import SafetyApiClient
from third_party.safety_api.transforms import collect_years, normalize_summary
from utils.logger import get_logger, kv_message as kv

logger = get_logger(__name__)


def get_available_years(client: SafetyApiClient) -> List[int]:
    settings = get_settings()
    codes = client.list_accident_codes()
    years = collect_years(codes, settings.year_min, settings.year_max)
    logger.info(kv("available_years", codes=len(codes), years=years))
    return years


def format_card(summary: YearSummary) -> Dict[str, str]:
    currency = get_settings().currency
    return {
        "ltir": format_number(summary.ltir.total),
        "trir": format_number(summary.trir.total),
        "severityRate": format_number(summary.severity_rate.total),
        "propertyDamage": format_currency(summary.property_damage.total, currency),
    }


def build_summary_card(summary: YearSummary, constant: ConstantLike) -> SummaryCard:
    """Card payload from an already-normalized summary; no I/O."""
    basis = NormalizationConstant.parse(constant)
    adjusted = recalculate(summary, basis)
    return SummaryCard(
        year=summary.year,
        constant=int(basis),
        summary=summary,
        adjusted=adjusted,
        formatted=format_card(adjusted),
    )


def get_summary_card(client: SafetyApiClient, year: int, constant: ConstantLike) -> SummaryCard:
    basis = NormalizationConstant.parse(constant)
    raw = client.fetch_year_summary(year)
    return build_summary_card(normalize_summary(raw, year), basis)


def get_chart_series(
    client: SafetyApiClient,
    constant: ConstantLike,
    years: Optional[Iterable[int]] = None,
    limit: Optional[int] = None,
) -> SeriesBundle:
    basis = NormalizationConstant.parse(constant)
    requested = list(years or [])
    if not requested:
        requested = get_available_years(client)
    aggregator = MultiYearAggregator(client.fetch_year_summary, max_workers=get_settings().fetch_max_workers)
    return aggregator.build(requested, basis, limit=limit)
