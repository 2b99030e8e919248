from typing import Dict, List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from lagging.models import YearSummary


class _Response(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class YearsResponse(_Response):
    years: List[int]


class SummaryCard(_Response):
    year: int
    constant: int
    summary: YearSummary
    adjusted: YearSummary
    formatted: Dict[str, str]
