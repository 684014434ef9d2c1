#!/usr/bin/env python
"""
Analysis runner script for the credit card spend insights

Loads the transactions CSV, prints a profile of the data and answers the
nine problem statements, optionally exporting each result set to CSV.

Usage:
    python scripts/run_analysis.py                                  # Run all problem statements
    python scripts/run_analysis.py --profile-only                   # Profile the dataset only
    python scripts/run_analysis.py --problem q1_top_cities          # Run selected problems
    python scripts/run_analysis.py --output-dir results             # Export result sets
"""

import sys
import argparse
from pathlib import Path
from datetime import datetime

import pandas as pd

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from card_insights.orchestrator.analysis_runner import AnalysisRunner
from card_insights.orchestrator.problem_statements import PROBLEM_STATEMENTS
from card_insights.tools.dataset_client import get_dataset
from card_insights.tools.exploration_tools import profile_dataset, preview_transactions
from card_insights.tools.export_tools import export_results
from card_insights.utils.config_loader import load_config
from card_insights.utils.errors import CardInsightsError
from card_insights.utils.logging import get_logger

logger = get_logger(__name__)


def print_header(title: str):
    """Print formatted section header"""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def show_data_summary(df: pd.DataFrame):
    """Display profile and first rows of the dataset"""
    print_header("Dataset Profile")

    profile = profile_dataset(df)
    print(f"Transactions: {profile.row_count:,}")
    print(f"Date range:   {profile.first_transaction_date} to {profile.last_transaction_date}")
    print(f"Total spend:  {profile.total_spend:,.2f}")
    print(f"Cities:       {profile.city_count:,}")
    print(f"Card types:   {', '.join(profile.card_types)}")
    print(f"Expense types: {', '.join(profile.exp_types)}")
    print(f"Genders:      {', '.join(profile.genders)}")

    print("\nFirst transactions:")
    print(preview_transactions(df, 5).to_string(index=False))


def run_problems(runner: AnalysisRunner, problem_ids=None):
    """Run problem statements and print every result set"""
    print_header("Problem Statements")
    print(f"Start time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    results = runner.run(problem_ids)

    for problem in results['problems']:
        print(f"\n[{problem.problem_id}] {problem.title}")
        frame = results['results'][problem.problem_id]
        if frame.empty:
            print("  (no rows)")
        else:
            print(frame.to_string(index=False))

    print(f"\nRun ID: {results['run_id']} ({results['duration_seconds']:.2f}s)")
    return results


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description="Answer the credit card spend problem statements",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        '--dataset',
        help="Path to the transactions CSV (default: dataset.path from the config)"
    )

    parser.add_argument(
        '--config',
        help="Path to the analysis config (default: config/analysis.yaml)"
    )

    parser.add_argument(
        '--problem',
        action='append',
        choices=sorted(PROBLEM_STATEMENTS),
        help="Problem statement to run (repeatable, default: all)"
    )

    parser.add_argument(
        '--output-dir',
        help="Directory to export result CSVs and summary.json into"
    )

    parser.add_argument(
        '--profile-only',
        action='store_true',
        help="Profile the dataset without running the problem statements"
    )

    args = parser.parse_args()

    try:
        config = load_config(args.config)
        dataset = get_dataset(config, data_path=args.dataset)
    except CardInsightsError as e:
        print(f"\nFailed to load dataset: {e}")
        sys.exit(1)

    show_data_summary(dataset)

    if args.profile_only:
        return

    try:
        runner = AnalysisRunner(config=config, dataset=dataset)
        results = run_problems(runner, args.problem)
    except CardInsightsError as e:
        print(f"\nAnalysis failed: {e}")
        logger.error(f"Analysis failed: {e}")
        sys.exit(1)

    if args.output_dir:
        written = export_results(results, args.output_dir)
        print(f"\nExported {len(written)} files to {args.output_dir}")


if __name__ == "__main__":
    main()
