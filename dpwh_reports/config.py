from pathlib import Path
import os

ROOT = Path(__file__).resolve().parents[1]
DATA_RAW = ROOT / 'data' / 'raw'
DATA_REPORTS = ROOT / 'data' / 'reports'

_input_env = os.environ.get('DPWH_INPUT_CSV')
INPUT_CSV = Path(_input_env) if _input_env else DATA_RAW / 'dpwh_flood_control_projects.csv'
_output_env = os.environ.get('DPWH_OUTPUT_DIR')
OUTPUT_DIR = Path(_output_env) if _output_env else DATA_REPORTS

YEARS = [2021, 2022, 2023]
DATE_FORMAT = '%Y-%m-%d'

# Regional efficiency
HIGH_DELAY_DAYS = 30

# Contractor ranking
MIN_CONTRACTOR_PROJECTS = 5
TOP_CONTRACTORS = 15
RELIABILITY_HORIZON_DAYS = 90
HIGH_RISK_THRESHOLD = 50

# Annual trends: YoY change only filled for years up to this one
YOY_MAX_YEAR = 2021

REPORT_REGIONAL = 'report1_regional_summary.csv'
REPORT_CONTRACTORS = 'report2_contractor_ranking.csv'
REPORT_TRENDS = 'report3_annual_trends.csv'
REPORT_SUMMARY = 'summary.json'
