import json
import re
import unicodedata
from pathlib import Path
from typing import Any, Dict

import pandas as pd


class SourceUnreadableError(RuntimeError):
    """The input file could not be opened or decoded."""


class ExportError(RuntimeError):
    """A report file could not be written."""


def slug_col(name: str) -> str:
    name = unicodedata.normalize("NFKD", name)
    name = "".join([c for c in name if not unicodedata.combining(c)])
    # ApprovedBudgetForContract -> Approved_Budget_For_Contract
    name = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", name)
    name = re.sub(r"[^0-9a-zA-Z]+", "_", name)
    name = re.sub(r"_+", "_", name).strip("_")
    return name.lower()


def read_csv_text(path: Path) -> pd.DataFrame:
    """Read every column as text, headers slugged. Raises SourceUnreadableError.

    Lines with too many fields are skipped; their count is kept in
    ``df.attrs["bad_lines"]``. Short lines are padded with NaN.
    """
    path = Path(path)
    if not path.is_file():
        raise SourceUnreadableError(f"Input file not found: {path}")
    last_err = None
    for enc in ("utf-8-sig", "cp1252"):
        bad = []
        try:
            df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding=enc,
                             engine="python", on_bad_lines=lambda line: bad.append(line))
        except pd.errors.EmptyDataError:
            return pd.DataFrame()
        except (UnicodeDecodeError, pd.errors.ParserError) as e:
            last_err = e
            continue
        except OSError as e:
            raise SourceUnreadableError(f"Cannot read {path}: {e}") from e
        df.columns = [slug_col(c) for c in df.columns]
        df.attrs["bad_lines"] = len(bad)
        return df
    raise SourceUnreadableError(f"Failed reading {path.name} (encodings tried). Last error: {last_err}")


def _replace_atomic(path: Path, write) -> Path:
    path = Path(path)
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        write(tmp)
        tmp.replace(path)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        raise ExportError(f"Cannot write {path}: {e}") from e
    return path


def write_csv_atomic(df: pd.DataFrame, path: Path) -> Path:
    return _replace_atomic(path, lambda tmp: df.to_csv(tmp, index=False, encoding="utf-8"))


def write_json_atomic(obj: Dict[str, Any], path: Path) -> Path:
    def _dump(tmp: Path):
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(obj, f, ensure_ascii=False, indent=2)
    return _replace_atomic(path, _dump)
