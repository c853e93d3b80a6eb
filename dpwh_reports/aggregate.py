"""
Generic group-by-and-summarize used by every report.

A report supplies a key function (one value or a tuple per record) and an
ordered mapping of metric name -> reducer. Column reducers run on each
pandas group; ``ratio`` metrics read metrics already in the summary, so they
must come after the ones they use.

Zero denominators (ratios, percentages, means) yield 0.0 instead of raising.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Iterable, Mapping, Optional, Union

import numpy as np
import pandas as pd

from .records import ProjectRecord


def safe_div(num, den) -> float:
    if den == 0:
        return 0.0
    return num / den


@dataclass(frozen=True)
class Metric:
    field: Optional[str]
    reduce: Callable[[pd.Series], Any]


@dataclass(frozen=True)
class Ratio:
    numerator: str
    denominator: str
    scale: float = 1.0

    def __call__(self, summary: Mapping[str, Any]) -> float:
        return safe_div(summary[self.numerator], summary[self.denominator]) * self.scale


Reducer = Union[Metric, Ratio]


def _native(x):
    return x.item() if isinstance(x, np.generic) else x


def count() -> Metric:
    return Metric(None, len)


def first(field: str) -> Metric:
    return Metric(field, lambda s: s.iloc[0])


def total(field: str) -> Metric:
    return Metric(field, lambda s: _native(s.sum()))


def mean(field: str) -> Metric:
    return Metric(field, lambda s: safe_div(float(s.sum()), len(s)))


def median(field: str) -> Metric:
    """Lower-middle element for even sizes: [10, 20, 30, 40] -> 20."""
    def _median(s: pd.Series):
        v = np.sort(s.to_numpy())
        return _native(v[(len(v) - 1) // 2])
    return Metric(field, _median)


def percent(field: str, predicate: Callable[[pd.Series], Any]) -> Metric:
    """Share of members where ``predicate`` (applied to the column) holds, x100."""
    def _percent(s: pd.Series) -> float:
        hits = int(np.asarray(predicate(s), dtype=bool).sum())
        return safe_div(hits, len(s)) * 100
    return Metric(field, _percent)


def distinct(field: str) -> Metric:
    return Metric(field, lambda s: int(s.nunique()))


def ratio(numerator: str, denominator: str, scale: float = 1.0) -> Ratio:
    return Ratio(numerator, denominator, scale)


def group_and_summarize(
    records: Iterable[ProjectRecord],
    key_fn: Callable[[ProjectRecord], Hashable],
    metric_fns: Mapping[str, Reducer],
) -> Dict[Hashable, Dict[str, Any]]:
    """Group records by ``key_fn`` and summarize each group.

    Returns ``{group_key: {metric: value}}`` in first-encounter order of the
    group keys; metrics keep the order of ``metric_fns``.
    """
    records = list(records)
    if not records:
        return {}

    # integer codes keep tuple keys out of pandas' index handling
    codes: Dict[Hashable, int] = {}
    labels = [codes.setdefault(key_fn(p), len(codes)) for p in records]
    keys = list(codes)

    columns = {m.field for m in metric_fns.values() if isinstance(m, Metric) and m.field}
    frame = pd.DataFrame({c: [getattr(p, c) for p in records] for c in sorted(columns)},
                         index=range(len(records)))

    summaries = {}
    for code, group in frame.groupby(np.asarray(labels), sort=False):
        summary = {}
        for name, m in metric_fns.items():
            if isinstance(m, Ratio):
                summary[name] = m(summary)
            else:
                summary[name] = _native(m.reduce(group[m.field] if m.field else group))
        summaries[keys[int(code)]] = summary
    return summaries
