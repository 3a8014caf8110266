#!/usr/bin/env python3
"""
Experiment 01: Simulate Weekly Cases

Builds the toy weekly surveillance series used by the outbreak detection
exercise: trend + cyclic variation + noise, with artificial surges injected
at configured weeks.

Output: data/raw/weekly_cases.csv (columns: week, cases, is_injected_surge)

Usage:
    python experiments/01_simulate_cases.py
    python experiments/01_simulate_cases.py --seed 7 --units A B C
"""
import sys
import argparse
from pathlib import Path

# Add project root to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from outbreak_signal.config import configure_logging, get_data_path, load_config
from outbreak_signal.data.simulate import simulate_panel, simulate_weekly_cases


def main():
    parser = argparse.ArgumentParser(description="Simulate weekly case counts")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config file (default: config/config_default.yaml)"
    )
    parser.add_argument("--seed", type=int, default=None, help="Override simulation seed")
    parser.add_argument(
        "--units",
        nargs="*",
        default=None,
        help="Simulate one series per unit (adds a 'unit' column)"
    )
    parser.add_argument("--output", type=str, default=None, help="Output CSV path")
    args = parser.parse_args()

    cfg = load_config(args.config)
    configure_logging(cfg)
    sim = dict(cfg['simulation'])
    if args.seed is not None:
        sim['seed'] = args.seed

    output_path = get_data_path(args.output or cfg['data']['raw']['weekly_cases'])

    print("=" * 60)
    print("OUTBREAK SIGNAL - SIMULATE WEEKLY CASES")
    print("=" * 60)

    if args.units:
        df = simulate_panel(args.units, **sim)
    else:
        df = simulate_weekly_cases(**sim)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_path, index=False)

    print(f"Rows: {len(df)}")
    print(f"Weeks: {df['week'].min().date()} -> {df['week'].max().date()}")
    print(f"Injected surges: {int(df['is_injected_surge'].sum())}")
    print(f"\n✓ Saved to {output_path}")

    return df


if __name__ == "__main__":
    main()
