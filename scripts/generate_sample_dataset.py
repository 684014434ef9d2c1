#!/usr/bin/env python3
"""
Generate a synthetic credit card transactions CSV.

The file mirrors the layout of the public dataset the analysis was built
for (header ``index,City,Date,Card Type,Exp Type,Gender,Amount`` and dates
like ``29-Oct-14``), so the loader and every problem statement can be run
without the original download.

Usage:
    python scripts/generate_sample_dataset.py
    python scripts/generate_sample_dataset.py --rows 5000 --output data/sample.csv
"""

import sys
import argparse
from pathlib import Path

import pandas as pd
import numpy as np

# Add parent directory to path for imports
sys.path.append(str(Path(__file__).parent.parent))

from card_insights.constants import CardType, ExpenseType, Gender

# Configuration
RANDOM_SEED = 42
DEFAULT_ROWS = 26052
DEFAULT_OUTPUT = Path(__file__).parent.parent / "data" / "credit_card_transcations.csv"

START_DATE = "2013-10-04"
END_DATE = "2015-05-26"

# A few large cities carry most of the volume, the long tail gets the rest
CITIES = [
    ("Bengaluru, India", 0.14),
    ("Greater Mumbai, India", 0.14),
    ("Ahmedabad, India", 0.14),
    ("Delhi, India", 0.13),
    ("Kolkata, India", 0.05),
    ("Hyderabad, India", 0.05),
    ("Chennai, India", 0.05),
    ("Lucknow, India", 0.04),
    ("Kanpur, India", 0.04),
    ("Pune, India", 0.04),
    ("Surat, India", 0.04),
    ("Jaipur, India", 0.04),
    ("Bhopal, India", 0.03),
    ("Indore, India", 0.03),
    ("Dhamtari, India", 0.02),
    ("Bahraich, India", 0.02),
]


def generate_transactions(rows: int, seed: int = RANDOM_SEED) -> pd.DataFrame:
    """
    Build a raw-format transactions frame

    Args:
        rows: Number of transactions
        seed: RNG seed

    Returns:
        DataFrame with the public dataset's raw headers
    """
    rng = np.random.default_rng(seed)

    city_names = [name for name, _ in CITIES]
    city_weights = np.array([weight for _, weight in CITIES])
    city_weights = city_weights / city_weights.sum()

    days = pd.date_range(START_DATE, END_DATE, freq="D")
    dates = days[rng.integers(0, len(days), size=rows)]

    df = pd.DataFrame({
        "index": np.arange(rows),
        "City": rng.choice(city_names, size=rows, p=city_weights),
        "Date": dates.strftime("%d-%b-%y"),
        "Card Type": rng.choice([c.value for c in CardType], size=rows),
        "Exp Type": rng.choice([e.value for e in ExpenseType], size=rows),
        "Gender": rng.choice([g.value for g in Gender], size=rows, p=[0.53, 0.47]),
        "Amount": rng.integers(1_000, 1_000_000, size=rows),
    })
    return df


def main():
    parser = argparse.ArgumentParser(description="Generate a synthetic transactions CSV")
    parser.add_argument('--rows', type=int, default=DEFAULT_ROWS, help="Number of transactions")
    parser.add_argument('--seed', type=int, default=RANDOM_SEED, help="Random seed")
    parser.add_argument('--output', default=str(DEFAULT_OUTPUT), help="Output CSV path")
    args = parser.parse_args()

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)

    df = generate_transactions(args.rows, args.seed)
    df.to_csv(output, index=False)
    print(f"✅ Wrote {len(df):,} transactions to {output}")


if __name__ == "__main__":
    main()
