from __future__ import annotations

import pytest


@pytest.fixture
def raw_summary():
    """Year summary payload as the backend sends it (damage in thousands)."""
    return {
        "accidentCount": {"total": 5, "employee": 3, "contractor": 2},
        "victimCount": {"total": 6, "employee": 4, "contractor": 2},
        "propertyDamage": {"direct": 500, "indirect": 2000, "total": 2500},
        "workingHours": {"total": 400000, "employee": 250000, "contractor": 150000},
        "lossDays": {"total": 120, "employee": 80, "contractor": 40},
        "injuryTypeCounts": {"사망": 0, "중상": 2, "경상": 3, "병원치료": 1},
        "siteAccidentCounts": {"Ulsan": 3, "Pohang": 2},
        "ltir": 2.5,
        "employeeLtir": 2.4,
        "contractorLtir": 2.6667,
        "trir": 3.0,
        "employeeTrir": 3.2,
        "contractorTrir": 2.6667,
        "severityRate": 0.3,
        "employeeSeverityRate": 0.32,
        "contractorSeverityRate": 0.2667,
    }
