from typing import Any, Dict, List, Sequence

import pandas as pd

from .aggregate import (count, distinct, first, group_and_summarize, mean, median,
                        percent, ratio, safe_div, total)
from .config import (HIGH_DELAY_DAYS, HIGH_RISK_THRESHOLD, MIN_CONTRACTOR_PROJECTS,
                     RELIABILITY_HORIZON_DAYS, TOP_CONTRACTORS, YOY_MAX_YEAR)
from .records import ProjectRecord

REGIONAL_COLUMNS = ['Region', 'MainIsland', 'TotalBudget', 'MedianSavings',
                    'AvgDelay', 'HighDelayPct', 'EfficiencyScore']
CONTRACTOR_COLUMNS = ['Rank', 'Contractor', 'TotalCost', 'NumProjects', 'AvgDelay',
                      'TotalSavings', 'ReliabilityIndex', 'RiskFlag']
TREND_COLUMNS = ['FundingYear', 'TypeOfWork', 'TotalProjects', 'AvgSavings',
                 'OverrunRate', 'YoYChange']
SUMMARY_KEYS = ['TotalProjects', 'TotalContractors', 'GlobalAvgDelay', 'TotalSavings']


def regional_efficiency(projects: Sequence[ProjectRecord]) -> pd.DataFrame:
    groups = group_and_summarize(projects, lambda p: p.region, {
        'MainIsland': first('main_island'),
        'TotalBudget': total('approved_budget_for_contract'),
        'MedianSavings': median('cost_savings'),
        'AvgDelay': mean('completion_delay_days'),
        'HighDelayPct': percent('completion_delay_days', lambda d: d > HIGH_DELAY_DAYS),
        'EfficiencyScore': ratio('MedianSavings', 'AvgDelay', scale=100),
    })
    df = pd.DataFrame([{'Region': region, **g} for region, g in groups.items()],
                      columns=REGIONAL_COLUMNS)
    # stable: equal scores keep region encounter order
    return df.sort_values('EfficiencyScore', ascending=False, kind='stable').reset_index(drop=True)


def reliability_index(avg_delay: float, savings_ratio: float) -> float:
    score = (1 - avg_delay / RELIABILITY_HORIZON_DAYS) * savings_ratio * 100
    # clamp first, then abs (turns -0.0 into 0.0)
    return abs(min(max(score, 0.0), 100.0))


def contractor_ranking(projects: Sequence[ProjectRecord]) -> pd.DataFrame:
    """Contractors with at least 5 projects, the 15 lowest by total cost.

    The kept rows are shown highest cost first and ranked in that order.
    """
    groups = group_and_summarize(projects, lambda p: p.contractor, {
        'TotalCost': total('contract_cost'),
        'NumProjects': count(),
        'AvgDelay': mean('completion_delay_days'),
        'TotalSavings': total('cost_savings'),
        'SavingsRatio': ratio('TotalSavings', 'TotalCost'),
    })
    rows = []
    for contractor, g in groups.items():
        if g['NumProjects'] < MIN_CONTRACTOR_PROJECTS:
            continue
        idx = reliability_index(g['AvgDelay'], g['SavingsRatio'])
        rows.append({
            'Rank': 0,
            'Contractor': contractor,
            'TotalCost': g['TotalCost'],
            'NumProjects': g['NumProjects'],
            'AvgDelay': g['AvgDelay'],
            'TotalSavings': g['TotalSavings'],
            'ReliabilityIndex': idx,
            'RiskFlag': 'High Risk' if idx < HIGH_RISK_THRESHOLD else 'Low Risk',
        })
    df = pd.DataFrame(rows, columns=CONTRACTOR_COLUMNS)
    df = df.sort_values('TotalCost', kind='stable').head(TOP_CONTRACTORS)
    df = df.iloc[::-1].reset_index(drop=True)
    df['Rank'] = range(1, len(df) + 1)
    return df


def year_over_year(trends: pd.DataFrame) -> List[float]:
    """YoY change of AvgSavings for each (sorted) trend row.

    Only rows up to YOY_MAX_YEAR with a same type-of-work group in the
    previous year get a value; the baseline is that year's entry in a
    year -> AvgSavings map where the last row of each year wins.
    """
    baseline = {int(y): s for y, s in zip(trends['FundingYear'], trends['AvgSavings'])}
    present = {(int(y), w) for y, w in zip(trends['FundingYear'], trends['TypeOfWork'])}
    changes = []
    for year, work, avg in zip(trends['FundingYear'], trends['TypeOfWork'], trends['AvgSavings']):
        prev = int(year) - 1
        if year <= YOY_MAX_YEAR and (prev, work) in present:
            changes.append(safe_div(avg - baseline[prev], baseline[prev]) * 100)
        else:
            changes.append(0.0)
    return changes


def annual_trends(projects: Sequence[ProjectRecord]) -> pd.DataFrame:
    groups = group_and_summarize(projects, lambda p: (p.funding_year, p.type_of_work), {
        'TotalProjects': count(),
        'AvgSavings': mean('cost_savings'),
        'OverrunRate': percent('cost_savings', lambda s: s < 0),
    })
    df = pd.DataFrame([{'FundingYear': year, 'TypeOfWork': work, **g, 'YoYChange': 0.0}
                       for (year, work), g in groups.items()], columns=TREND_COLUMNS)
    df = df.sort_values(['FundingYear', 'AvgSavings'], ascending=[True, False],
                        kind='stable').reset_index(drop=True)
    df['YoYChange'] = year_over_year(df)
    return df


def global_summary(projects: Sequence[ProjectRecord]) -> Dict[str, Any]:
    groups = group_and_summarize(projects, lambda p: 'all', {
        'TotalProjects': count(),
        'TotalContractors': distinct('contractor'),
        'GlobalAvgDelay': mean('completion_delay_days'),
        'TotalSavings': total('cost_savings'),
    })
    return groups.get('all', {'TotalProjects': 0, 'TotalContractors': 0,
                              'GlobalAvgDelay': 0.0, 'TotalSavings': 0.0})
