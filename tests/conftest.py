"""Shared fixtures for the card spend analysis tests"""

import pytest
import pandas as pd
from pathlib import Path

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir():
    return FIXTURES_DIR


@pytest.fixture
def sample_csv_path():
    """Nine transactions in the public dataset's raw format"""
    return FIXTURES_DIR / "sample_transactions.csv"


@pytest.fixture
def sample_transactions(sample_csv_path):
    """Prepared frame of the sample CSV"""
    from card_insights.loaders.csv_data_loader import load_transactions

    return load_transactions(str(sample_csv_path))


@pytest.fixture
def test_config():
    """Analysis config with thresholds scaled down to the sample data"""
    from card_insights.utils.config_loader import load_config

    return load_config(str(FIXTURES_DIR / "test_config.yaml"))


@pytest.fixture
def three_transactions():
    """The worked example: two city A rows, one city B row"""
    return pd.DataFrame({
        'transaction_id': [1, 2, 3],
        'city': ['A', 'A', 'B'],
        'transaction_date': pd.to_datetime(['2014-01-05', '2014-02-10', '2014-01-15']),
        'card_type': ['Gold', 'Silver', 'Gold'],
        'exp_type': ['Bills', 'Food', 'Bills'],
        'gender': ['F', 'M', 'F'],
        'amount': [100.0, 200.0, 50.0],
    })


@pytest.fixture
def make_transactions():
    """
    Factory building a transactions frame from
    (city, date, card_type, exp_type, gender, amount) tuples.
    Ids follow list order starting at 1.
    """
    def _make(rows):
        df = pd.DataFrame(rows, columns=['city', 'transaction_date', 'card_type', 'exp_type', 'gender', 'amount'])
        df.insert(0, 'transaction_id', range(1, len(df) + 1))
        df['transaction_date'] = pd.to_datetime(df['transaction_date'])
        df['amount'] = df['amount'].astype(float)
        return df

    return _make
