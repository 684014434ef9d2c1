"""CSV loader for the credit card transactions dataset - the data preparation steps"""

import pandas as pd
from pathlib import Path
from typing import Optional, Dict
import os
import time
from card_insights.constants import (
    TRANSACTION_COLUMNS,
    CATEGORICAL_COLUMNS,
    DEFAULT_COLUMN_ALIASES,
    DEFAULT_DATE_FORMAT,
    TRANSACTION_ID,
    TRANSACTION_DATE,
    AMOUNT,
)
from card_insights.utils.errors import DatasetLoadError, DatasetValidationError
from card_insights.utils.logging import get_logger
from card_insights.utils.metrics import dataset_rows_loaded, dataset_load_time

logger = get_logger(__name__)

DEFAULT_DATA_PATH = "data/credit_card_transcations.csv"


class TransactionDataLoader:
    """
    Loads the raw transactions CSV and prepares it for analysis.

    The public release ships with headers like ``index, City, Date, Card Type``
    and dates like ``29-Oct-14``; the loader renames them to the canonical
    snake_case columns, coerces types and validates the table once so every
    query template can rely on a clean frame.
    """

    def __init__(
        self,
        data_path: Optional[str] = None,
        date_format: Optional[str] = DEFAULT_DATE_FORMAT,
        column_aliases: Optional[Dict[str, str]] = None
    ):
        """
        Initialize transaction data loader

        Args:
            data_path: Path to the CSV file (defaults to DATASET_PATH or data/credit_card_transcations.csv)
            date_format: strptime format of the raw date column
            column_aliases: Extra raw header -> canonical column mappings
        """
        if data_path is None:
            data_path = os.getenv("DATASET_PATH", DEFAULT_DATA_PATH)

        self.data_path = Path(data_path)
        self.date_format = date_format
        self.column_aliases = {**DEFAULT_COLUMN_ALIASES, **(column_aliases or {})}
        self._transactions = None

        logger.info(f"Transaction data loader initialized for: {self.data_path}")

    def _load_csv(self) -> pd.DataFrame:
        """Load CSV file with error handling"""
        if not self.data_path.exists():
            raise DatasetLoadError(f"Dataset file not found: {self.data_path}")

        try:
            df = pd.read_csv(self.data_path)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise DatasetLoadError(f"Error reading {self.data_path}: {e}")

        logger.info(f"Loaded {len(df)} raw records from {self.data_path.name}")
        return df

    @property
    def transactions(self) -> pd.DataFrame:
        """Load, prepare and cache the transactions table"""
        if self._transactions is None:
            start = time.time()
            raw = self._load_csv()
            df = prepare_transactions(raw, self.date_format, self.column_aliases)
            dataset_load_time.observe(time.time() - start)
            dataset_rows_loaded.set(len(df))
            self._transactions = df
        return self._transactions

    def get_summary_stats(self) -> dict:
        """Get summary statistics of the loaded data"""
        df = self.transactions
        return {
            'transactions': len(df),
            'columns': list(df.columns),
            'data_path': str(self.data_path.absolute())
        }


def normalize_columns(df: pd.DataFrame, column_aliases: Optional[Dict[str, str]] = None) -> pd.DataFrame:
    """
    Rename raw headers to canonical column names.

    Headers are stripped, lower-cased and have spaces replaced by
    underscores before the alias table is applied.
    """
    aliases = {**DEFAULT_COLUMN_ALIASES, **(column_aliases or {})}
    renamed = {}
    for column in df.columns:
        key = str(column).strip().lower().replace(' ', '_')
        renamed[column] = aliases.get(key, key)
    return df.rename(columns=renamed)


def _parse_dates(series: pd.Series, date_format: Optional[str]) -> pd.Series:
    """Parse the date column, falling back to pandas inference"""
    if pd.api.types.is_datetime64_any_dtype(series):
        return series

    if date_format:
        try:
            return pd.to_datetime(series, format=date_format)
        except (ValueError, TypeError):
            logger.warning(f"Dates do not match format {date_format}, falling back to inference")

    return pd.to_datetime(series, errors='coerce')


def prepare_transactions(
    raw: pd.DataFrame,
    date_format: Optional[str] = DEFAULT_DATE_FORMAT,
    column_aliases: Optional[Dict[str, str]] = None
) -> pd.DataFrame:
    """
    Normalize, coerce and validate a raw transactions frame.

    Args:
        raw: Frame as read from the CSV (not modified)
        date_format: strptime format of the raw date column
        column_aliases: Extra raw header -> canonical column mappings

    Returns:
        Clean frame with the canonical columns, ordered by transaction_id

    Raises:
        DatasetValidationError: If columns are missing or values invalid
    """
    df = normalize_columns(raw, column_aliases)

    missing = [col for col in TRANSACTION_COLUMNS if col not in df.columns]
    if missing:
        raise DatasetValidationError(f"Missing required columns: {missing}")

    df = df[TRANSACTION_COLUMNS].copy()

    df[TRANSACTION_DATE] = _parse_dates(df[TRANSACTION_DATE], date_format)
    df[AMOUNT] = pd.to_numeric(df[AMOUNT], errors='coerce')
    df[TRANSACTION_ID] = pd.to_numeric(df[TRANSACTION_ID], errors='coerce')
    for col in CATEGORICAL_COLUMNS:
        df[col] = df[col].astype('string').str.strip().astype(object)

    validate_transactions(df)

    df[TRANSACTION_ID] = df[TRANSACTION_ID].astype('int64')
    df[AMOUNT] = df[AMOUNT].astype('float64')
    df = df.sort_values(TRANSACTION_ID).reset_index(drop=True)

    logger.info(f"Prepared {len(df)} transactions",
                first_date=str(df[TRANSACTION_DATE].min().date()) if len(df) else None,
                last_date=str(df[TRANSACTION_DATE].max().date()) if len(df) else None)
    return df


def validate_transactions(df: pd.DataFrame) -> None:
    """
    Validate a normalized transactions frame

    Raises:
        DatasetValidationError: On nulls, duplicate ids, fractional ids or negative amounts
    """
    null_counts = {col: int(df[col].isnull().sum()) for col in TRANSACTION_COLUMNS}
    null_counts = {col: count for col, count in null_counts.items() if count}
    if null_counts:
        raise DatasetValidationError(f"Null or unparseable values in columns: {null_counts}")

    if (df[TRANSACTION_ID] % 1 != 0).any():
        raise DatasetValidationError("transaction_id must be integral")

    duplicates = df[df[TRANSACTION_ID].duplicated(keep=False)]
    if not duplicates.empty:
        ids = sorted(duplicates[TRANSACTION_ID].unique().tolist())[:5]
        raise DatasetValidationError(f"Duplicate transaction_id values: {ids}")

    negative = int((df[AMOUNT] < 0).sum())
    if negative:
        raise DatasetValidationError(f"{negative} transactions have a negative amount")


def load_transactions(
    data_path: Optional[str] = None,
    date_format: Optional[str] = DEFAULT_DATE_FORMAT,
    column_aliases: Optional[Dict[str, str]] = None
) -> pd.DataFrame:
    """Read and prepare the transactions CSV in one call"""
    return TransactionDataLoader(data_path, date_format, column_aliases).transactions
