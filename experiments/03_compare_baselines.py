#!/usr/bin/env python3
"""
Experiment 03: Compare Baselines

Compares surge baselines on a simulated series with known surges:
1. Moving average (window from config)
2. Holt-Winters with trend, no seasonality
3. Holt-Winters with trend and seasonality (only if the series covers two
   full seasons)

For each baseline reports fit metrics (MAE, RMSE, MAPE) and detection
metrics of the SURGE flags against the injected surges, plus a 12-period
Holt-Winters forecast.

Output: data/processed/baseline_comparison.json

Usage:
    python experiments/03_compare_baselines.py
    python experiments/03_compare_baselines.py --input data/raw/weekly_cases.csv --horizon 12
    python experiments/03_compare_baselines.py --unit B   (panel CSV from 01 --units)
"""
import sys
import json
import argparse
from pathlib import Path

import pandas as pd

# Add project root to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from outbreak_signal.common.errors import InputError, SignalError
from outbreak_signal.config import PipelineConfig, configure_logging, get_data_path, load_config
from outbreak_signal.data.loader import frame_to_series
from outbreak_signal.evaluation.metrics import compute_detection_metrics, compute_fit_metrics
from outbreak_signal.models.baselines import HoltWintersBaseline, MovingAverageBaseline
from outbreak_signal.pipeline import run_pipeline


def load_labelled_series(path, period_col, count_col, unit_col=None, unit=None):
    """Simulated series plus the periods where a surge was injected."""
    df = pd.read_csv(path)
    required = [period_col, count_col, 'is_injected_surge'] + ([unit_col] if unit_col else [])
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise InputError(f"Missing required columns in {path}: {missing}")

    if unit_col:
        unit = unit if unit is not None else sorted(df[unit_col].unique())[0]
        df = df[df[unit_col].astype(str) == str(unit)]
        if df.empty:
            raise InputError(f"unit {unit!r} not found in {path}")
        print(f"Unit: {unit}")

    if not pd.api.types.is_integer_dtype(df[period_col]):
        try:
            df = df.assign(**{period_col: pd.to_datetime(df[period_col])})
        except (TypeError, ValueError) as exc:
            raise InputError(f"column '{period_col}' has an unparseable period: {exc}") from exc

    series = frame_to_series(df, period_col, count_col)
    true_surges = list(df.loc[df['is_injected_surge'].astype(bool), period_col])
    return series, true_surges


def main():
    parser = argparse.ArgumentParser(description="Compare moving-average and Holt-Winters baselines")
    parser.add_argument("--config", type=str, default=None, help="Path to config file")
    parser.add_argument("--input", type=str, default=None, help="Simulated CSV with is_injected_surge")
    parser.add_argument("--unit", type=str, default=None, help="Unit to analyse in a panel CSV (default: first)")
    parser.add_argument("--horizon", type=int, default=12, help="Holt-Winters forecast horizon")
    args = parser.parse_args()

    cfg = load_config(args.config)
    configure_logging(cfg)
    hw_cfg = dict(cfg['baseline'].get('holt_winters') or {})

    columns = cfg['data']['columns']
    period_col, count_col, unit_col = columns['period'], columns['count'], columns.get('unit')
    if args.unit is not None and not unit_col:
        unit_col = "unit"

    input_path = get_data_path(args.input or cfg['data']['raw']['weekly_cases'])
    output_path = get_data_path("data/processed/baseline_comparison.json")

    print("=" * 60)
    print("OUTBREAK SIGNAL - COMPARE BASELINES")
    print("=" * 60)

    try:
        pipeline_cfg = PipelineConfig.from_mapping(cfg['signal'])
        series, true_surges = load_labelled_series(
            input_path, period_col, count_col, unit_col, args.unit
        )
        candidates = {
            "moving_average": MovingAverageBaseline({'window': pipeline_cfg.window}),
            "holt_winters": HoltWintersBaseline({**hw_cfg, 'seasonal': False}),
            "holt_winters_seasonal": HoltWintersBaseline({**hw_cfg, 'seasonal': True}),
        }
    except SignalError as exc:
        raise SystemExit(f"✗ {type(exc).__name__}: {exc}")

    print(f"Periods: {len(series)} | injected surges: {len(true_surges)}")

    results = {}
    for name, model in candidates.items():
        print(f"\n{name}")
        try:
            baseline = model.fit_baseline(series)
        except InputError as exc:
            print(f"  skipped: {exc}")
            results[name] = {"skipped": str(exc)}
            continue

        fit = compute_fit_metrics(series, baseline)
        report = run_pipeline(series, pipeline_cfg.window, pipeline_cfg.lag, pipeline_cfg.z, baseline=baseline)
        detection = compute_detection_metrics(report, true_surges)

        mape = f"{fit['mape_pct']:.2f}%" if fit['mape_pct'] is not None else "n/a"
        print(f"  MAE: {fit['mae']:.2f} | RMSE: {fit['rmse']:.2f} | MAPE: {mape}")
        print(f"  Surges flagged: {len(report.surge_periods)} | "
              f"sensitivity: {detection['sensitivity']:.2f} | precision: {detection['precision']:.2f}")

        entry = {
            "params": model.get_params(),
            "fit": fit,
            "detection": detection,
            "surge_periods": [str(p) for p in report.surge_periods],
        }
        if isinstance(model, HoltWintersBaseline):
            fc = model.forecast(args.horizon)
            entry["forecast"] = [
                {"horizon": int(r.horizon), "period": str(r.period), "y_forecast": float(r.y_forecast)}
                for r in fc.itertuples()
            ]
        results[name] = entry

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w') as f:
        json.dump(results, f, indent=2)
    print(f"\n✓ Saved to {output_path}")

    return results


if __name__ == "__main__":
    main()
