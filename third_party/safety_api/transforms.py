import math
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from lagging.models import (
    BASE_UNIT_MARKER,
    CountTriple,
    InjuryTypeCounts,
    PropertyDamage,
    Triple,
    YearSummary,
)
from utils.logger import get_logger, kv_message as kv

logger = get_logger(__name__)

# Upstream reports property damage in thousands of the base currency unit.
PROPERTY_DAMAGE_UNIT_FACTOR = 1000

YEAR_MIN = 1900
YEAR_MAX = 2100

_YEAR_RUN = re.compile(r"(?<!\d)(\d{4})(?!\d)")

INJURY_LABELS: Dict[str, str] = {
    "사망": "death",
    "중상": "serious",
    "경상": "minor",
    "병원치료": "hospital",
    "응급처치": "first_aid",
    "기타": "other",
    # internal keys, so serialized summaries normalize back to themselves
    "death": "death",
    "serious": "serious",
    "minor": "minor",
    "hospital": "hospital",
    "firstAid": "first_aid",
    "first_aid": "first_aid",
    "other": "other",
}


class MalformedSummaryError(TypeError):
    """Raised when a summary payload is not a JSON object."""


def extract_year(code: Any, year_min: int = YEAR_MIN, year_max: int = YEAR_MAX) -> Optional[int]:
    """Return the first 4-digit run of a business code if it is a plausible year.

    Codes come as ``COMPANY-SITE-YYYY-NNN`` or ``COMPANY-YYYY-NNN``. Only the
    first run is considered; an out-of-range first run yields None.
    """
    if not isinstance(code, str) or not code:
        return None
    match = _YEAR_RUN.search(code)
    if not match:
        return None
    year = int(match.group(1))
    if year < year_min or year > year_max:
        return None
    return year


def collect_years(codes: Iterable[Any], year_min: int = YEAR_MIN, year_max: int = YEAR_MAX) -> List[int]:
    """Distinct valid years found across the codes, most recent first."""
    years = set()
    for code in codes:
        year = extract_year(code, year_min, year_max)
        if year is None:
            logger.debug(kv("no_year", code=code))
            continue
        years.add(year)
    return sorted(years, reverse=True)


def _to_float(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def _to_int(value: Any) -> int:
    return int(_to_float(value))


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    return value if isinstance(value, Mapping) else {}


def _count_triple(data: Mapping[str, Any], key: str) -> CountTriple:
    section = _section(data, key)
    return CountTriple(
        total=_to_int(section.get("total")),
        employee=_to_int(section.get("employee")),
        contractor=_to_int(section.get("contractor")),
    )


def _measure_triple(data: Mapping[str, Any], key: str) -> Triple:
    section = _section(data, key)
    return Triple(
        total=_to_float(section.get("total")),
        employee=_to_float(section.get("employee")),
        contractor=_to_float(section.get("contractor")),
    )


def _rate_triple(data: Mapping[str, Any], key: str) -> Triple:
    """Rates come nested (``ltir: {total, ...}``) or flat (``ltir``, ``employeeLtir``, ...)."""
    value = data.get(key)
    suffix = key[0].upper() + key[1:]
    nested = value if isinstance(value, Mapping) else {}
    flat_total = None if isinstance(value, Mapping) else value

    def pick(field: str, flat: Any) -> float:
        if field in nested:
            return _to_float(nested.get(field))
        return _to_float(flat)

    return Triple(
        total=pick("total", flat_total),
        employee=pick("employee", data.get(f"employee{suffix}")),
        contractor=pick("contractor", data.get(f"contractor{suffix}")),
    )


def _property_damage(data: Mapping[str, Any], year: int) -> PropertyDamage:
    section = _section(data, "propertyDamage")
    factor = 1 if data.get("propertyDamageUnit") == BASE_UNIT_MARKER else PROPERTY_DAMAGE_UNIT_FACTOR
    direct = _to_float(section.get("direct")) * factor
    indirect = _to_float(section.get("indirect")) * factor
    total = direct + indirect
    if "total" in section:
        reported = _to_float(section.get("total")) * factor
        if reported != total:
            logger.warning(kv("property_damage_total_mismatch", year=year, reported=reported, derived=total))
    return PropertyDamage(direct=direct, indirect=indirect, total=total)


def _injury_type_counts(data: Mapping[str, Any], year: int) -> InjuryTypeCounts:
    counts: Dict[str, int] = {}
    for label, value in _section(data, "injuryTypeCounts").items():
        key = INJURY_LABELS.get(label)
        if key is None:
            logger.warning(kv("unmapped_injury_label", label=label, year=year))
            continue
        counts[key] = counts.get(key, 0) + _to_int(value)
    return InjuryTypeCounts(**counts)


def _site_accident_counts(data: Mapping[str, Any]) -> Dict[str, int]:
    return {str(site): _to_int(count) for site, count in _section(data, "siteAccidentCounts").items()}


def normalize_summary(data: Any, year: Optional[int] = None) -> YearSummary:
    """Turn a raw, partially-populated year summary payload into a `YearSummary`.

    Missing leaves default to 0 and missing objects to all-zero shapes. Only a
    non-object payload is rejected.
    """
    if isinstance(data, YearSummary):
        return data
    if not isinstance(data, Mapping):
        raise MalformedSummaryError(f"Summary payload must be an object, got {type(data).__name__}")

    resolved_year = year if year is not None else _to_int(data.get("year"))
    return YearSummary(
        year=resolved_year,
        accident_count=_count_triple(data, "accidentCount"),
        victim_count=_count_triple(data, "victimCount"),
        property_damage=_property_damage(data, resolved_year),
        working_hours=_measure_triple(data, "workingHours"),
        loss_days=_measure_triple(data, "lossDays"),
        injury_type_counts=_injury_type_counts(data, resolved_year),
        site_accident_counts=_site_accident_counts(data),
        ltir=_rate_triple(data, "ltir"),
        trir=_rate_triple(data, "trir"),
        severity_rate=_rate_triple(data, "severityRate"),
    )
