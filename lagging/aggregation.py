from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from lagging.calculations import ConstantLike, recalculate
from lagging.models import (
    DegradedYear,
    DetailedPoint,
    NormalizationConstant,
    SafetyIndexPoint,
    SeriesBundle,
    TrendPoint,
    YearSummary,
)
from third_party.safety_api.transforms import normalize_summary
from utils.logger import get_logger, kv_extra, kv_message as kv

logger = get_logger(__name__)

FetchFn = Callable[[int], Any]

CANCELLED = "cancelled"


@dataclass(frozen=True)
class YearResult:
    """Outcome of one year's fetch: a summary, or the reason it is missing."""

    year: int
    summary: Optional[YearSummary] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.summary is not None

    def resolved(self) -> YearSummary:
        return self.summary if self.summary is not None else YearSummary.empty(self.year)


def _load_year(fetch: FetchFn, year: int) -> YearResult:
    try:
        raw = fetch(year)
        return YearResult(year=year, summary=normalize_summary(raw, year))
    except Exception as exc:  # any per-year failure degrades only that year
        return YearResult(year=year, error=f"{type(exc).__name__}: {exc}")


class PendingSeries:
    """In-flight per-year fetches. Years can be cancelled one at a time."""

    def __init__(self, futures: Dict[int, "Future[YearResult]"]) -> None:
        self._futures = futures
        self._cancelled: Set[int] = set()
        self._lock = Lock()

    @property
    def years(self) -> List[int]:
        return sorted(self._futures)

    def cancel(self, year: int) -> None:
        future = self._futures.get(year)
        if future is None:
            return
        with self._lock:
            self._cancelled.add(year)
        # a fetch already running cannot be interrupted; its result is discarded
        future.cancel()

    def cancel_all(self) -> None:
        for year in self._futures:
            self.cancel(year)

    def results(self) -> List[YearResult]:
        """Wait for every year and return results ascending by year."""
        out: List[YearResult] = []
        for year in self.years:
            future = self._futures[year]
            with self._lock:
                cancelled = year in self._cancelled
            if cancelled:
                out.append(YearResult(year=year, error=CANCELLED))
                continue
            try:
                out.append(future.result())
            except CancelledError:
                out.append(YearResult(year=year, error=CANCELLED))
        degraded = [r for r in out if not r.ok]
        for r in degraded:
            logger.warning(kv("year_degraded", year=r.year, reason=r.error), extra=kv_extra(year=r.year, reason=r.error))
        logger.info(kv("fan_in", years=self.years, degraded=len(degraded)))
        return out


class MultiYearAggregator:
    """Fetches years concurrently; series are composed after every year settles, ascending by year.

    A failed, malformed or cancelled year is rendered as an all-zero summary.
    """

    def __init__(self, fetch: FetchFn, max_workers: int = 8) -> None:
        self.fetch = fetch
        self.max_workers = max(1, max_workers)

    def submit(self, years: Iterable[int]) -> PendingSeries:
        unique = sorted({int(y) for y in years})
        futures: Dict[int, "Future[YearResult]"] = {}
        if not unique:
            return PendingSeries(futures)
        logger.info(kv("fan_out", years=unique))
        executor = ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(unique)),
            thread_name_prefix="lagging-fetch",
        )
        for year in unique:
            futures[year] = executor.submit(_load_year, self.fetch, year)
        # queued fetches still run; the pool winds down once they finish
        executor.shutdown(wait=False)
        return PendingSeries(futures)

    def collect(self, years: Iterable[int]) -> List[YearResult]:
        return self.submit(years).results()

    def build(self, years: Iterable[int], constant: ConstantLike, limit: Optional[int] = None) -> SeriesBundle:
        basis = NormalizationConstant.parse(constant)
        return assemble_series(self.collect(years), basis, limit=limit)


def build_trend_series(summaries: Iterable[YearSummary]) -> List[TrendPoint]:
    return [
        TrendPoint(
            year=s.year,
            accident_count=s.accident_count.total,
            victim_count=s.victim_count.total,
            property_damage=s.property_damage.total,
        )
        for s in sorted(summaries, key=lambda s: s.year)
    ]


def build_safety_index_series(summaries: Iterable[YearSummary]) -> List[SafetyIndexPoint]:
    """Project already-recalculated summaries onto the safety index chart."""
    return [
        SafetyIndexPoint(
            year=s.year,
            ltir=s.ltir.total,
            trir=s.trir.total,
            severity_rate=s.severity_rate.total,
        )
        for s in sorted(summaries, key=lambda s: s.year)
    ]


def build_detailed_series(summaries: Iterable[YearSummary]) -> List[DetailedPoint]:
    return [
        DetailedPoint(
            year=s.year,
            accident_count=s.accident_count,
            victim_count=s.victim_count,
            ltir=s.ltir,
            trir=s.trir,
            severity_rate=s.severity_rate,
            loss_days=s.loss_days,
            by_site=dict(s.site_accident_counts),
        )
        for s in sorted(summaries, key=lambda s: s.year)
    ]


def assemble_series(results: Iterable[YearResult], constant: ConstantLike, limit: Optional[int] = None) -> SeriesBundle:
    """Compose the three chart series from per-year results.

    Degraded years become all-zero summaries here, at the last moment, and are
    listed in `degraded`. `limit` keeps only the most recent N years.
    """
    basis = NormalizationConstant.parse(constant)
    ordered = sorted(results, key=lambda r: r.year)
    if limit is not None and limit > 0:
        ordered = ordered[-limit:]
    summaries = [recalculate(r.resolved(), basis) for r in ordered]
    return SeriesBundle(
        constant=int(basis),
        years=[r.year for r in ordered],
        trend=build_trend_series(summaries),
        safety_index=build_safety_index_series(summaries),
        detailed=build_detailed_series(summaries),
        degraded=[DegradedYear(year=r.year, reason=r.error or "unknown") for r in ordered if not r.ok],
    )
