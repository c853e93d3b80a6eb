import argparse
import json
from pathlib import Path
from typing import Dict, Optional

from .config import (INPUT_CSV, OUTPUT_DIR, REPORT_CONTRACTORS, REPORT_REGIONAL,
                     REPORT_SUMMARY, REPORT_TRENDS, YEARS)
from .data_ingest import load_projects
from .export import export_summary, export_table
from .io_utils import ExportError, SourceUnreadableError
from .reports import annual_trends, contractor_ranking, global_summary, regional_efficiency

REPORTS = [
    ("Flood Mitigation Efficiency Summary", REPORT_REGIONAL, regional_efficiency),
    ("Top Contractors Performance Ranking", REPORT_CONTRACTORS, contractor_ranking),
    ("Annual Project Type Cost Overrun Trends", REPORT_TRENDS, annual_trends),
]


def run_reports(input_csv: Path = INPUT_CSV, out_dir: Path = OUTPUT_DIR,
                start: int = YEARS[0], end: int = YEARS[-1]) -> Dict[str, Optional[object]]:
    """Load the project list once and write the three CSV reports and the summary.

    Returns paths and row counts. With no projects in range nothing is written
    and the path entries are None.
    """
    ingest = load_projects(Path(input_csv), start, end)
    info = {
        "rows": ingest.total_rows,
        "parsed": ingest.total_parsed,
        "retained": ingest.total_retained,
        "dropped": ingest.dropped,
        "reports": None,
        "summary_json": None,
    }
    if ingest.is_empty:
        print(f"[ok] no projects in {start}-{end}; nothing to report")
        return info

    projects = ingest.records
    out_dir = Path(out_dir)

    print()
    print("Generating reports...")
    written = {}
    for i, (title, file_name, build) in enumerate(REPORTS, start=1):
        path = export_table(build(projects), out_dir / file_name)
        written[file_name] = str(path)
        print(f"{i}. {title} (exported to {file_name})")
    info["reports"] = written

    print()
    summary_path = export_summary(global_summary(projects), out_dir / REPORT_SUMMARY)
    print(f"Generating summary...  (exported to {REPORT_SUMMARY})")
    info["summary_json"] = str(summary_path)
    return info


def main(argv=None):
    ap = argparse.ArgumentParser(description="Flood-control project reports (regional, contractor, trend, summary).")
    ap.add_argument("--input", default=str(INPUT_CSV), help="project list CSV")
    ap.add_argument("--out_dir", default=str(OUTPUT_DIR))
    ap.add_argument("--year-start", type=int, default=YEARS[0])
    ap.add_argument("--year-end", type=int, default=YEARS[-1])
    args = ap.parse_args(argv)

    try:
        info = run_reports(Path(args.input), Path(args.out_dir), args.year_start, args.year_end)
    except (SourceUnreadableError, ExportError) as e:
        raise SystemExit(f"[error] {e}")
    print(json.dumps(info, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
