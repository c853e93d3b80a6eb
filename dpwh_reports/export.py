from pathlib import Path
from typing import Any, Dict

import numpy as np
import pandas as pd

from .io_utils import write_csv_atomic, write_json_atomic

AMOUNT_COLUMNS = ['TotalBudget', 'MedianSavings', 'AvgDelay', 'HighDelayPct', 'EfficiencyScore',
                  'TotalCost', 'TotalSavings', 'ReliabilityIndex',
                  'AvgSavings', 'OverrunRate', 'YoYChange', 'GlobalAvgDelay']
COUNT_COLUMNS = ['NumProjects', 'TotalProjects', 'TotalContractors']


def round_half_away(x):
    """Round to cents, halves away from zero (works on scalars and arrays)."""
    cents = np.asarray(x, dtype=float) * 100
    whole = np.trunc(cents)
    # cents - whole is exact, so the .5 test sees the true fraction
    rounded = whole + np.sign(cents) * (np.abs(cents - whole) >= 0.5)
    # + 0.0 drops the sign of negative zero
    out = rounded / 100 + 0.0
    return out.item() if out.ndim == 0 else out


def format_amount(x: float) -> str:
    """Comma-grouped, at most two decimals, no trailing zeros: 1234.5 -> '1,234.5'."""
    s = f"{float(round_half_away(x)):,.2f}"
    return s.rstrip("0").rstrip(".") if "." in s else s


def format_count(n: int) -> str:
    return f"{int(n):,}"


def render_table(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    for c in out.columns:
        if c in AMOUNT_COLUMNS:
            out[c] = out[c].map(format_amount)
        elif c in COUNT_COLUMNS:
            out[c] = out[c].map(format_count)
    return out


def render_summary(summary: Dict[str, Any]) -> Dict[str, Any]:
    out = {}
    for k, v in summary.items():
        if k in AMOUNT_COLUMNS:
            out[k] = float(round_half_away(v))
        elif k in COUNT_COLUMNS:
            out[k] = int(v)
        else:
            out[k] = v
    return out


def export_table(df: pd.DataFrame, path: Path) -> Path:
    return write_csv_atomic(render_table(df), path)


def export_summary(summary: Dict[str, Any], path: Path) -> Path:
    return write_json_atomic(render_summary(summary), path)
