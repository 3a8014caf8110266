#!/usr/bin/env python3
"""
Experiment 02: Detect Surges

Runs the outbreak signal pipeline on a case-count CSV:
- trailing moving average (window from config)
- simplified Rt = cases / cases `lag` periods earlier
- residual-based SURGE flags (mean + z * sd of residuals)

The baseline is the moving average unless `baseline.method` is
`holt_winters`. Files with a unit column are processed one unit at a time.

Output:
    data/processed/surge_table.csv    (one row per period [and unit])
    data/processed/surge_summary.json (thresholds and surge periods)

Usage:
    python experiments/02_detect_surges.py
    python experiments/02_detect_surges.py --input my_cases.csv --window 7 --lag 7
    python experiments/02_detect_surges.py --baseline holt_winters
"""
import sys
import json
import argparse
from pathlib import Path

# Add project root to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from outbreak_signal.common.errors import SignalError
from outbreak_signal.config import PipelineConfig, configure_logging, get_data_path, load_config
from outbreak_signal.data.loader import complete_periods, frame_to_series, load_case_counts
from outbreak_signal.pipeline import run_configured, run_panel


def main():
    parser = argparse.ArgumentParser(description="Detect surges in weekly case counts")
    parser.add_argument("--config", type=str, default=None, help="Path to config file")
    parser.add_argument("--input", type=str, default=None, help="Case-count CSV")
    parser.add_argument("--window", type=int, default=None, help="Override moving-average window")
    parser.add_argument("--lag", type=int, default=None, help="Override Rt lag")
    parser.add_argument("--z", type=float, default=None, help="Override z threshold")
    parser.add_argument(
        "--baseline",
        type=str,
        default=None,
        choices=["moving_average", "holt_winters"],
        help="Override baseline method"
    )
    args = parser.parse_args()

    cfg = load_config(args.config)
    configure_logging(cfg)

    signal = dict(cfg['signal'])
    for key in ("window", "lag", "z"):
        if getattr(args, key) is not None:
            signal[key] = getattr(args, key)

    baseline_method = args.baseline or cfg['baseline']['method']
    baseline_config = cfg['baseline'].get(baseline_method) or {}

    columns = cfg['data']['columns']
    period_col, count_col, unit_col = columns['period'], columns['count'], columns.get('unit')

    input_path = get_data_path(args.input or cfg['data']['raw']['weekly_cases'])
    table_path = get_data_path(cfg['data']['processed']['surge_table'])
    summary_path = get_data_path(cfg['data']['processed']['surge_summary'])

    print("=" * 60)
    print("OUTBREAK SIGNAL - DETECT SURGES")
    print("=" * 60)

    try:
        pipeline_cfg = PipelineConfig.from_mapping(signal)

        df = load_case_counts(
            str(input_path),
            period_col=period_col,
            count_col=count_col,
            unit_col=unit_col,
            imputation_strategy=cfg['data'].get('imputation_strategy', 'zero_fill'),
        )
        if cfg['data'].get('complete_periods', False):
            df = complete_periods(df, period_col, count_col, cfg['data'].get('freq', 'W'), unit_col)

        if unit_col:
            table = run_panel(
                df, pipeline_cfg,
                unit_col=unit_col, period_col=period_col, count_col=count_col,
                baseline_method=baseline_method, baseline_config=baseline_config,
            )
            summary = {
                "units": int(table[unit_col].nunique()),
                "n_periods": int(len(table)),
                "n_surges": int((table["anomaly"] == "surge").sum()),
                "baseline": baseline_method,
                "config": pipeline_cfg.to_dict(),
            }
        else:
            series = frame_to_series(df, period_col, count_col)
            report = run_configured(series, pipeline_cfg, baseline_method, baseline_config)
            table = report.to_frame()
            summary = report.summary()
    except SignalError as exc:
        raise SystemExit(f"✗ {type(exc).__name__}: {exc}")

    table_path.parent.mkdir(parents=True, exist_ok=True)
    table.to_csv(table_path, index=False)
    with open(summary_path, 'w') as f:
        json.dump(summary, f, indent=2)

    print(f"Periods: {summary['n_periods']}")
    print(f"Baseline: {summary['baseline']}")
    print(f"Surges flagged: {summary['n_surges']}")
    if "surge_periods" in summary:
        for p in summary["surge_periods"]:
            print(f"  - {p}")
    print(f"\n✓ Saved table to {table_path}")
    print(f"✓ Saved summary to {summary_path}")

    return table


if __name__ == "__main__":
    main()
