from dataclasses import dataclass, fields
from datetime import date
from functools import cached_property


@dataclass(frozen=True)
class ProjectRecord:
    """One flood-control project row, immutable after ingestion.

    ``cost_savings`` and ``completion_delay_days`` are derived on first read
    and cached on the instance; later reads return the same value.
    """
    main_island: str
    region: str
    province: str
    legislative_district: str
    municipality: str
    district_engineering_office: str
    project_id: str
    project_name: str
    type_of_work: str
    funding_year: int
    contract_id: str
    approved_budget_for_contract: float
    contract_cost: float
    actual_completion_date: date
    contractor: str
    start_date: date
    project_latitude: float
    project_longitude: float
    provincial_capital: str
    provincial_capital_latitude: float
    provincial_capital_longitude: float

    @cached_property
    def cost_savings(self) -> float:
        # negative means overrun
        return self.approved_budget_for_contract - self.contract_cost

    @cached_property
    def completion_delay_days(self) -> int:
        return (self.actual_completion_date - self.start_date).days


COLUMNS = [f.name for f in fields(ProjectRecord)]

INT_FIELDS = ['funding_year']
# money columns must also be non-negative
MONEY_FIELDS = ['approved_budget_for_contract', 'contract_cost']
FLOAT_FIELDS = MONEY_FIELDS + [
    'project_latitude', 'project_longitude',
    'provincial_capital_latitude', 'provincial_capital_longitude',
]
DATE_FIELDS = ['actual_completion_date', 'start_date']
STRING_FIELDS = [c for c in COLUMNS if c not in INT_FIELDS + FLOAT_FIELDS + DATE_FIELDS]
