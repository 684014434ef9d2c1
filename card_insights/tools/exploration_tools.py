"""Exploratory statements run before the problem statements"""

import pandas as pd
from typing import List
from card_insights.constants import (
    TRANSACTION_ID,
    TRANSACTION_DATE,
    AMOUNT,
    CITY,
    CARD_TYPE,
    EXP_TYPE,
    GENDER,
)
from card_insights.models.results import DatasetProfile
from card_insights.utils.errors import AnalysisError
from card_insights.utils.logging import get_logger

logger = get_logger(__name__)


def count_transactions(df: pd.DataFrame) -> int:
    """SELECT COUNT(*)"""
    return int(len(df))


def preview_transactions(df: pd.DataFrame, n: int = 5) -> pd.DataFrame:
    """
    First n transactions by id (SELECT TOP n *)

    Args:
        df: Transactions table
        n: Number of rows

    Returns:
        DataFrame with at most n rows
    """
    if n < 0:
        raise AnalysisError(f"n must not be negative, got {n}")
    return df.sort_values(TRANSACTION_ID).head(n).reset_index(drop=True)


def distinct_values(df: pd.DataFrame, column: str) -> List[str]:
    """Sorted distinct values of a categorical column"""
    if column not in df.columns:
        raise AnalysisError(f"Unknown column: {column}")
    return sorted(str(value) for value in df[column].dropna().unique())


def profile_dataset(df: pd.DataFrame) -> DatasetProfile:
    """
    Summarize the transactions table

    Returns:
        DatasetProfile with row count, date range, total spend and
        the distinct values of the grouping columns
    """
    if df.empty:
        logger.warning("Profiling an empty dataset")
        return DatasetProfile(row_count=0)

    dates = pd.to_datetime(df[TRANSACTION_DATE])
    profile = DatasetProfile(
        row_count=count_transactions(df),
        first_transaction_date=dates.min().date(),
        last_transaction_date=dates.max().date(),
        total_spend=float(df[AMOUNT].sum()),
        city_count=int(df[CITY].nunique()),
        card_types=distinct_values(df, CARD_TYPE),
        exp_types=distinct_values(df, EXP_TYPE),
        genders=distinct_values(df, GENDER),
    )

    logger.info("Dataset profile", **profile.model_dump(mode='json'))
    return profile
