from enum import IntEnum
from typing import Any, Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class InvalidConstantError(ValueError):
    """Raised when a normalization constant is not one of the admissible values."""


class NormalizationConstant(IntEnum):
    """Exposure-hours basis for LTIR/TRIR."""

    HOURS_200K = 200_000
    HOURS_1M = 1_000_000

    @classmethod
    def parse(cls, value: Union[int, str, "NormalizationConstant"]) -> "NormalizationConstant":
        admissible = ", ".join(str(c.value) for c in cls)
        if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
            raise InvalidConstantError(f"Invalid normalization constant {value!r}; expected one of {admissible}")
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            raise InvalidConstantError(f"Invalid normalization constant {value!r}; expected one of {admissible}") from None


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class CountTriple(_Frozen):
    total: int = 0
    employee: int = 0
    contractor: int = 0


class Triple(_Frozen):
    total: float = 0.0
    employee: float = 0.0
    contractor: float = 0.0

    def scaled(self, ratio: float) -> "Triple":
        return Triple(total=self.total * ratio, employee=self.employee * ratio, contractor=self.contractor * ratio)


class PropertyDamage(_Frozen):
    # base currency units
    direct: float = 0.0
    indirect: float = 0.0
    total: float = 0.0


class InjuryTypeCounts(_Frozen):
    death: int = 0
    serious: int = 0
    minor: int = 0
    hospital: int = 0
    first_aid: int = 0
    other: int = 0


# Marker carried by serialized summaries: property damage already in base units.
BASE_UNIT_MARKER = "base"


class YearSummary(_Frozen):
    year: int
    accident_count: CountTriple = Field(default_factory=CountTriple)
    victim_count: CountTriple = Field(default_factory=CountTriple)
    property_damage: PropertyDamage = Field(default_factory=PropertyDamage)
    working_hours: Triple = Field(default_factory=Triple)
    loss_days: Triple = Field(default_factory=Triple)
    injury_type_counts: InjuryTypeCounts = Field(default_factory=InjuryTypeCounts)
    site_accident_counts: Dict[str, int] = Field(default_factory=dict)
    ltir: Triple = Field(default_factory=Triple)
    trir: Triple = Field(default_factory=Triple)
    severity_rate: Triple = Field(default_factory=Triple)

    @classmethod
    def empty(cls, year: int) -> "YearSummary":
        """All-zero summary, used for years whose fetch failed."""
        return cls(year=year)

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the camelCase payload shape the normalizer accepts."""
        payload = self.model_dump(by_alias=True)
        payload["propertyDamageUnit"] = BASE_UNIT_MARKER
        return payload


class TrendPoint(_Frozen):
    year: int
    accident_count: int
    victim_count: int
    property_damage: float


class SafetyIndexPoint(_Frozen):
    year: int
    ltir: float
    trir: float
    severity_rate: float


class DetailedPoint(_Frozen):
    year: int
    accident_count: CountTriple
    victim_count: CountTriple
    ltir: Triple
    trir: Triple
    severity_rate: Triple
    loss_days: Triple
    by_site: Dict[str, int]


class DegradedYear(_Frozen):
    year: int
    reason: str


class SeriesBundle(_Frozen):
    """Chart-ready series, all ascending by year."""

    constant: int
    years: List[int]
    trend: List[TrendPoint]
    safety_index: List[SafetyIndexPoint]
    detailed: List[DetailedPoint]
    degraded: List[DegradedYear] = Field(default_factory=list)

    @property
    def partial(self) -> bool:
        return bool(self.degraded)
