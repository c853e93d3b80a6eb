from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Mapping, Tuple

import pandas as pd

from .config import DATE_FORMAT, INPUT_CSV, YEARS
from .io_utils import read_csv_text, slug_col
from .records import (COLUMNS, DATE_FIELDS, FLOAT_FIELDS, INT_FIELDS, MONEY_FIELDS,
                      STRING_FIELDS, ProjectRecord)

_INT_RE = r"^\d+$"
# plain decimal notation only: no exponents, no inf/nan
_FLOAT_RE = r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$"


@dataclass(frozen=True)
class IngestResult:
    records: Tuple[ProjectRecord, ...]
    total_rows: int
    total_parsed: int

    @property
    def total_retained(self) -> int:
        return len(self.records)

    @property
    def dropped(self) -> int:
        return self.total_rows - self.total_parsed

    @property
    def is_empty(self) -> bool:
        return not self.records


def to_int(series: pd.Series) -> pd.Series:
    s = series.where(series.str.match(_INT_RE, na=False))
    return pd.to_numeric(s, errors="coerce")


def to_float(series: pd.Series) -> pd.Series:
    s = series.where(series.str.match(_FLOAT_RE, na=False))
    return pd.to_numeric(s, errors="coerce")


def to_date(series: pd.Series) -> pd.Series:
    return pd.to_datetime(series, format=DATE_FORMAT, errors="coerce")


def parse_frame(raw: pd.DataFrame) -> List[ProjectRecord]:
    """Coerce a text frame (slugged headers) into records, dropping bad rows."""
    missing = [c for c in COLUMNS if c not in raw.columns]
    if missing:
        if len(raw):
            print(f"[warn] missing columns: {', '.join(missing)}")
        return []

    raw = pd.DataFrame({c: raw[c].astype(object).str.strip() for c in COLUMNS}, index=raw.index)
    parsed = pd.DataFrame(index=raw.index)
    for c in STRING_FIELDS:
        parsed[c] = raw[c]
    for c in INT_FIELDS:
        parsed[c] = to_int(raw[c])
    for c in FLOAT_FIELDS:
        parsed[c] = to_float(raw[c])
    for c in DATE_FIELDS:
        parsed[c] = to_date(raw[c])

    ok = parsed.notna().all(axis=1)
    for c in MONEY_FIELDS:
        ok &= parsed[c] >= 0
    good = parsed.loc[ok].copy()

    for c in INT_FIELDS:
        good[c] = good[c].astype("int64")
    for c in DATE_FIELDS:
        good[c] = good[c].dt.date
    return [ProjectRecord(**row) for row in good[COLUMNS].to_dict("records")]


def parse_rows(rows: Iterable[Mapping[str, str]]) -> List[ProjectRecord]:
    """Parse already-read rows keyed by the CSV header names."""
    raw = pd.DataFrame(list(rows), dtype=object)
    raw = raw.where(raw.isna(), raw.astype(str))
    raw.columns = [slug_col(str(c)) for c in raw.columns]
    return parse_frame(raw)


def filter_years(records: Iterable[ProjectRecord], start: int = YEARS[0],
                 end: int = YEARS[-1]) -> Tuple[ProjectRecord, ...]:
    return tuple(p for p in records if start <= p.funding_year <= end)


def load_projects(path: Path = INPUT_CSV, start: int = YEARS[0], end: int = YEARS[-1]) -> IngestResult:
    raw = read_csv_text(path)
    bad_lines = raw.attrs.get("bad_lines", 0)
    projects = parse_frame(raw)
    filtered = filter_years(projects, start, end)
    result = IngestResult(records=filtered, total_rows=len(raw) + bad_lines,
                          total_parsed=len(projects))

    print(f"Processing dataset...  ({result.total_parsed:,} rows loaded, "
          f"{result.total_retained:,} filtered for {start}-{end})")
    if result.dropped:
        print(f"[warn] {result.dropped:,} malformed rows dropped")
    return result
