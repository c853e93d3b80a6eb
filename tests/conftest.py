import csv
from datetime import date, timedelta
from pathlib import Path

import pytest

from dpwh_reports.records import COLUMNS, ProjectRecord

HEADER = ["".join(w.capitalize() for w in c.split("_")) for c in COLUMNS]


def _project(delay=None, savings=None, **overrides) -> ProjectRecord:
    base = dict(
        main_island="Luzon",
        region="Region I",
        province="Ilocos Norte",
        legislative_district="1st District",
        municipality="Laoag City",
        district_engineering_office="Ilocos Norte DEO",
        project_id="P-0001",
        project_name="Construction of Flood Control Structure",
        type_of_work="Construction of Flood Mitigation Structure",
        funding_year=2022,
        contract_id="C-0001",
        approved_budget_for_contract=1_000_000.0,
        contract_cost=900_000.0,
        actual_completion_date=date(2022, 3, 31),
        contractor="ACME BUILDERS",
        start_date=date(2022, 1, 1),
        project_latitude=18.19,
        project_longitude=120.59,
        provincial_capital="Laoag City",
        provincial_capital_latitude=18.20,
        provincial_capital_longitude=120.59,
    )
    base.update(overrides)
    if delay is not None:
        base["actual_completion_date"] = base["start_date"] + timedelta(days=delay)
    if savings is not None:
        base["contract_cost"] = base["approved_budget_for_contract"] - savings
    return ProjectRecord(**base)


def _row(**overrides) -> dict:
    """One CSV row (header -> text) for a valid project."""
    row = {
        "MainIsland": "Luzon",
        "Region": "Region I",
        "Province": "Ilocos Norte",
        "LegislativeDistrict": "1st District",
        "Municipality": "Laoag City",
        "DistrictEngineeringOffice": "Ilocos Norte DEO",
        "ProjectId": "P-0001",
        "ProjectName": "Construction of Flood Control Structure",
        "TypeOfWork": "Construction of Flood Mitigation Structure",
        "FundingYear": "2022",
        "ContractId": "C-0001",
        "ApprovedBudgetForContract": "1000000.00",
        "ContractCost": "900000.00",
        "ActualCompletionDate": "2022-03-31",
        "Contractor": "ACME BUILDERS",
        "StartDate": "2022-01-01",
        "ProjectLatitude": "18.19",
        "ProjectLongitude": "120.59",
        "ProvincialCapital": "Laoag City",
        "ProvincialCapitalLatitude": "18.20",
        "ProvincialCapitalLongitude": "120.59",
    }
    row.update(overrides)
    return row


def _write_csv(path: Path, rows) -> Path:
    with open(path, "w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=HEADER)
        w.writeheader()
        for r in rows:
            w.writerow(r)
    return path


@pytest.fixture
def make_project():
    return _project


@pytest.fixture
def make_row():
    return _row


@pytest.fixture
def write_projects_csv(tmp_path):
    def _write(rows, name="dpwh_flood_control_projects.csv"):
        return _write_csv(tmp_path / name, rows)
    return _write
