"""Industrial safety rate formulas and constant rescaling of LTIR/TRIR."""

from typing import Union

from lagging.models import NormalizationConstant, YearSummary

# Upstream computes LTIR/TRIR per 200,000 exposure hours.
REFERENCE_CONSTANT = NormalizationConstant.HOURS_200K
# Severity rate is always lost days per 1,000 hours.
SEVERITY_UNIT_HOURS = 1000
INDIRECT_DAMAGE_MULTIPLIER = 4

ConstantLike = Union[int, str, NormalizationConstant]


def rescale_ratio(constant: ConstantLike) -> float:
    return NormalizationConstant.parse(constant) / REFERENCE_CONSTANT


def recalculate(summary: YearSummary, constant: ConstantLike) -> YearSummary:
    """Return a copy of `summary` with LTIR/TRIR expressed under `constant`.

    Each of total/employee/contractor is scaled on its own. Severity rate does
    not depend on the LTIR/TRIR basis and is carried over unchanged.
    """
    ratio = rescale_ratio(constant)
    return summary.model_copy(
        update={
            "ltir": summary.ltir.scaled(ratio),
            "trir": summary.trir.scaled(ratio),
            "site_accident_counts": dict(summary.site_accident_counts),
        }
    )


def calculate_rate(incidents: float, working_hours: float, constant: ConstantLike = REFERENCE_CONSTANT) -> float:
    """LTIR/TRIR from raw counts: incidents per `constant` exposure hours."""
    if not working_hours:
        return 0.0
    return incidents / working_hours * NormalizationConstant.parse(constant)


def calculate_severity_rate(loss_days: float, working_hours: float) -> float:
    if not working_hours:
        return 0.0
    return loss_days / working_hours * SEVERITY_UNIT_HOURS


def estimate_indirect_damage(direct_damage: float) -> float:
    # Heinrich 1:4 direct/indirect cost ratio
    return direct_damage * INDIRECT_DAMAGE_MULTIPLIER
