"""Query templates over the transactions table.

Each template is a pure function of a transactions DataFrame: it groups,
aggregates and ranks with explicit sort-and-partition logic and never
modifies the frame it is given. Ratios never divide by an empty group;
such groups are filtered out before the division.
"""

import pandas as pd
from typing import List, Optional, Sequence, Union
from card_insights.constants import (
    AMOUNT,
    TRANSACTION_DATE,
    TRANSACTION_ID,
    TRANSACTION_YEAR,
    TRANSACTION_MONTH,
    TOTAL_SPEND,
    CUMULATIVE_SPEND,
    PERCENTAGE_CONTRIBUTION,
    PERCENT_DECIMALS,
    Extreme,
)
from card_insights.utils.errors import AnalysisError
from card_insights.utils.logging import get_logger

logger = get_logger(__name__)

SUBSET_SPEND = "subset_spend"
SPEND_RATIO = "spend_ratio"
PREVIOUS_SPEND = "previous_spend"
MOM_GROWTH = "mom_growth"
TRANSACTION_COUNT = "transaction_count"
SPEND_PER_TRANSACTION = "spend_per_transaction"
FIRST_TRANSACTION_DATE = "first_transaction_date"
NTH_TRANSACTION_DATE = "nth_transaction_date"
DAYS_TO_NTH = "days_to_nth"

DEFAULT_ORDER = (TRANSACTION_DATE, TRANSACTION_ID)


def _as_list(keys: Union[str, Sequence[str]]) -> List[str]:
    if isinstance(keys, str):
        return [keys]
    return list(keys)


def _require_columns(df: pd.DataFrame, columns: Sequence[str]) -> None:
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise AnalysisError(f"Missing columns for query: {missing}")


def _is_ascending(extreme: Union[str, Extreme]) -> bool:
    """min -> ascending sort, max -> descending sort"""
    try:
        return Extreme(extreme) == Extreme.MIN
    except ValueError:
        raise AnalysisError(f"extreme must be 'min' or 'max', got {extreme!r}")


def _check_limit(limit: Optional[int], name: str = "limit") -> None:
    if limit is not None and limit < 1:
        raise AnalysisError(f"{name} must be a positive integer, got {limit}")


def _empty(columns: Sequence[str]) -> pd.DataFrame:
    return pd.DataFrame(columns=list(columns))


def _with_month_bucket(df: pd.DataFrame, date_column: str) -> pd.DataFrame:
    """Copy of df with transaction_year / transaction_month columns"""
    dates = pd.to_datetime(df[date_column])
    return df.assign(**{
        TRANSACTION_YEAR: dates.dt.year,
        TRANSACTION_MONTH: dates.dt.month,
    })


def _take_extreme(
    df: pd.DataFrame,
    value_column: str,
    key_columns: List[str],
    extreme: Union[str, Extreme],
    limit: Optional[int]
) -> pd.DataFrame:
    """Order by value (min or max first), ties by key ascending, keep `limit` rows"""
    ascending = _is_ascending(extreme)
    ordered = df.sort_values(
        [value_column] + key_columns,
        ascending=[ascending] + [True] * len(key_columns),
        kind='mergesort'
    )
    if limit is not None:
        ordered = ordered.head(limit)
    return ordered.reset_index(drop=True)


def share_of_total(
    df: pd.DataFrame,
    group_key: str,
    measure: str = AMOUNT,
    top_n: Optional[int] = None
) -> pd.DataFrame:
    """
    Share-of-total ranking.

    Sums the measure per group and expresses each group as a percentage of
    the grand total over all groups, then keeps the top N by total.

    Args:
        df: Transactions table
        group_key: Grouping column (e.g. 'city')
        measure: Column to sum
        top_n: Number of groups to return (None for all)

    Returns:
        DataFrame[group_key, total_spend, percentage_contribution]
    """
    columns = [group_key, TOTAL_SPEND, PERCENTAGE_CONTRIBUTION]
    _require_columns(df, [group_key, measure])
    _check_limit(top_n, "top_n")

    totals = (
        df.groupby(group_key, as_index=False)[measure].sum()
        .rename(columns={measure: TOTAL_SPEND})
    )
    grand_total = totals[TOTAL_SPEND].sum()

    if totals.empty or grand_total == 0:
        logger.warning(f"No spend to share across {group_key}, returning empty result")
        return _empty(columns)

    totals[PERCENTAGE_CONTRIBUTION] = (totals[TOTAL_SPEND] * 100.0 / grand_total).round(PERCENT_DECIMALS)
    result = _take_extreme(totals, TOTAL_SPEND, [group_key], Extreme.MAX, top_n)
    return result[columns]


def best_period_per_group(
    df: pd.DataFrame,
    group_key: str,
    measure: str = AMOUNT,
    date_column: str = TRANSACTION_DATE
) -> pd.DataFrame:
    """
    Best-period-per-group.

    Sums the measure per (group, year, month) and keeps the month(s) ranked
    first inside each group. Rank is with ties, so a group appears more than
    once only when two months have exactly the same total.

    Returns:
        DataFrame[group_key, transaction_year, transaction_month, total_spend]
    """
    columns = [group_key, TRANSACTION_YEAR, TRANSACTION_MONTH, TOTAL_SPEND]
    _require_columns(df, [group_key, measure, date_column])

    if df.empty:
        return _empty(columns)

    monthly = _with_month_bucket(df[[group_key, date_column, measure]], date_column)
    totals = (
        monthly.groupby([group_key, TRANSACTION_YEAR, TRANSACTION_MONTH], as_index=False)[measure].sum()
        .rename(columns={measure: TOTAL_SPEND})
    )
    ranks = totals.groupby(group_key)[TOTAL_SPEND].rank(method='min', ascending=False)

    result = totals[ranks == 1].sort_values([group_key, TRANSACTION_YEAR, TRANSACTION_MONTH])
    return result[columns].reset_index(drop=True)


def threshold_crossing(
    df: pd.DataFrame,
    group_key: str,
    threshold: float,
    measure: str = AMOUNT,
    order_by: Sequence[str] = DEFAULT_ORDER
) -> pd.DataFrame:
    """
    Threshold-crossing detection.

    Runs a cumulative sum of the measure inside each group in `order_by`
    order (date, then id by default) and returns, per group, the first row
    whose cumulative sum reaches the threshold. Groups that never reach it
    are absent from the result.

    Returns:
        The matching transaction rows with an extra cumulative_spend column
    """
    order_by = _as_list(order_by)
    _require_columns(df, [group_key, measure] + order_by)

    if threshold is None:
        raise AnalysisError("threshold is required")

    columns = list(df.columns) + [CUMULATIVE_SPEND]
    if df.empty:
        return _empty(columns)

    ordered = df.sort_values([group_key] + order_by, kind='mergesort')
    ordered = ordered.assign(**{CUMULATIVE_SPEND: ordered.groupby(group_key)[measure].cumsum()})

    crossed = ordered[ordered[CUMULATIVE_SPEND] >= threshold]
    result = crossed.groupby(group_key, sort=False).head(1)

    logger.debug(
        f"{result[group_key].nunique()} of {ordered[group_key].nunique()} groups reached {threshold}"
    )
    return result[columns].reset_index(drop=True)


def conditional_ratio_extremum(
    df: pd.DataFrame,
    group_key: str,
    condition_column: str,
    condition_value,
    measure: str = AMOUNT,
    extreme: Union[str, Extreme] = Extreme.MIN,
    limit: Optional[int] = 1
) -> pd.DataFrame:
    """
    Conditional-ratio extremum.

    For each group computes (measure where condition holds) / (measure) and
    returns the group(s) with the extreme ratio. Groups whose conditional
    subset sums to zero are never candidates.

    Returns:
        DataFrame[group_key, subset_spend, total_spend, spend_ratio]
    """
    columns = [group_key, SUBSET_SPEND, TOTAL_SPEND, SPEND_RATIO]
    _require_columns(df, [group_key, condition_column, measure])
    _is_ascending(extreme)
    _check_limit(limit)

    subset = df[measure].where(df[condition_column] == condition_value, 0)
    grouped = (
        df.assign(_subset=subset)
        .groupby(group_key, as_index=False)
        .agg(**{SUBSET_SPEND: ('_subset', 'sum'), TOTAL_SPEND: (measure, 'sum')})
    )

    candidates = grouped[(grouped[SUBSET_SPEND] != 0) & (grouped[TOTAL_SPEND] != 0)].copy()
    excluded = len(grouped) - len(candidates)
    if excluded:
        logger.debug(f"Excluded {excluded} groups with no {condition_column}={condition_value} spend")

    if candidates.empty:
        return _empty(columns)

    candidates[SPEND_RATIO] = candidates[SUBSET_SPEND] / candidates[TOTAL_SPEND]
    return _take_extreme(candidates, SPEND_RATIO, [group_key], extreme, limit)[columns]


def dual_extremum_pivot(
    df: pd.DataFrame,
    group_key: str,
    sub_key: str,
    measure: str = AMOUNT
) -> pd.DataFrame:
    """
    Dual-extremum-per-group pivot.

    Ranks the sub-categories of each group by total measure in both
    directions and puts the highest and the lowest side by side. When
    several sub-categories tie for a position the lexically greatest name
    is shown.

    Returns:
        DataFrame[group_key, highest_<sub_key>, lowest_<sub_key>]
    """
    highest_column = f"highest_{sub_key}"
    lowest_column = f"lowest_{sub_key}"
    columns = [group_key, highest_column, lowest_column]
    _require_columns(df, [group_key, sub_key, measure])

    if df.empty:
        return _empty(columns)

    totals = (
        df.groupby([group_key, sub_key], as_index=False)[measure].sum()
        .rename(columns={measure: TOTAL_SPEND})
    )
    by_group = totals.groupby(group_key)[TOTAL_SPEND]
    rank_desc = by_group.rank(method='min', ascending=False)
    rank_asc = by_group.rank(method='min', ascending=True)

    highest = totals[rank_desc == 1].groupby(group_key)[sub_key].max().rename(highest_column)
    lowest = totals[rank_asc == 1].groupby(group_key)[sub_key].max().rename(lowest_column)

    result = pd.concat([highest, lowest], axis=1).rename_axis(group_key).reset_index()
    return result[columns].sort_values(group_key).reset_index(drop=True)


def conditional_percentage(
    df: pd.DataFrame,
    group_key: str,
    condition_column: str,
    condition_value,
    measure: str = AMOUNT
) -> pd.DataFrame:
    """
    Conditional percentage contribution.

    For each category, the share (in percent) of its total measure that
    comes from rows matching the condition. Categories with no spend at all
    are excluded; a category with no matching rows contributes 0.0.

    Returns:
        DataFrame[group_key, subset_spend, total_spend, percentage_contribution]
    """
    columns = [group_key, SUBSET_SPEND, TOTAL_SPEND, PERCENTAGE_CONTRIBUTION]
    _require_columns(df, [group_key, condition_column, measure])

    subset = df[measure].where(df[condition_column] == condition_value, 0)
    grouped = (
        df.assign(_subset=subset)
        .groupby(group_key, as_index=False)
        .agg(**{SUBSET_SPEND: ('_subset', 'sum'), TOTAL_SPEND: (measure, 'sum')})
    )
    grouped = grouped[grouped[TOTAL_SPEND] != 0].copy()

    if grouped.empty:
        return _empty(columns)

    grouped[PERCENTAGE_CONTRIBUTION] = (
        grouped[SUBSET_SPEND] * 100.0 / grouped[TOTAL_SPEND]
    ).round(PERCENT_DECIMALS)
    return grouped.sort_values(group_key)[columns].reset_index(drop=True)


def period_over_period_delta(
    df: pd.DataFrame,
    group_keys: Union[str, Sequence[str]],
    year: int,
    month: int,
    measure: str = AMOUNT,
    extreme: Union[str, Extreme] = Extreme.MAX,
    limit: Optional[int] = 1,
    date_column: str = TRANSACTION_DATE,
    consecutive_only: bool = False
) -> pd.DataFrame:
    """
    Period-over-period delta with lag.

    Totals the measure per (groups, year, month), orders the months inside
    each group and takes the total of the previous month present in the
    group as previous_spend. Only the target month is kept, rows without a
    previous month are dropped and the extreme growth is returned.

    Args:
        df: Transactions table
        group_keys: One or more grouping columns
        year: Target year
        month: Target month (1-12)
        measure: Column to sum
        extreme: 'max' for the highest growth, 'min' for the lowest
        limit: Number of rows to return (None for all)
        date_column: Date column used for bucketing
        consecutive_only: Require the previous bucket to be the calendar month before

    Returns:
        DataFrame[group_keys..., transaction_year, transaction_month,
                  total_spend, previous_spend, mom_growth]
    """
    keys = _as_list(group_keys)
    columns = keys + [TRANSACTION_YEAR, TRANSACTION_MONTH, TOTAL_SPEND, PREVIOUS_SPEND, MOM_GROWTH]
    _require_columns(df, keys + [measure, date_column])
    _is_ascending(extreme)
    _check_limit(limit)
    if not 1 <= int(month) <= 12:
        raise AnalysisError(f"month must be between 1 and 12, got {month}")

    if df.empty:
        return _empty(columns)

    monthly = _with_month_bucket(df[keys + [date_column, measure]], date_column)
    totals = (
        monthly.groupby(keys + [TRANSACTION_YEAR, TRANSACTION_MONTH], as_index=False)[measure].sum()
        .rename(columns={measure: TOTAL_SPEND})
        .sort_values(keys + [TRANSACTION_YEAR, TRANSACTION_MONTH], kind='mergesort')
    )
    totals['_period'] = totals[TRANSACTION_YEAR] * 12 + totals[TRANSACTION_MONTH]

    by_group = totals.groupby(keys, sort=False)
    totals[PREVIOUS_SPEND] = by_group[TOTAL_SPEND].shift(1)
    if consecutive_only:
        previous_period = by_group['_period'].shift(1)
        totals.loc[totals['_period'] - previous_period != 1, PREVIOUS_SPEND] = float('nan')

    target = totals[
        (totals[TRANSACTION_YEAR] == year)
        & (totals[TRANSACTION_MONTH] == month)
        & totals[PREVIOUS_SPEND].notna()
    ].copy()

    if target.empty:
        logger.warning(f"No groups with a previous period for {year}-{int(month):02d}")
        return _empty(columns)

    target[MOM_GROWTH] = target[TOTAL_SPEND] - target[PREVIOUS_SPEND]
    return _take_extreme(target, MOM_GROWTH, keys, extreme, limit)[columns]


def filtered_efficiency_ratio(
    df: pd.DataFrame,
    group_key: str,
    days_of_week: Sequence[int],
    measure: str = AMOUNT,
    extreme: Union[str, Extreme] = Extreme.MAX,
    limit: Optional[int] = 1,
    date_column: str = TRANSACTION_DATE
) -> pd.DataFrame:
    """
    Filtered-subset efficiency ratio.

    Keeps transactions dated on the given weekdays (Monday=0 ... Sunday=6),
    then computes spend per transaction for each group.

    Returns:
        DataFrame[group_key, total_spend, transaction_count, spend_per_transaction]
    """
    columns = [group_key, TOTAL_SPEND, TRANSACTION_COUNT, SPEND_PER_TRANSACTION]
    _require_columns(df, [group_key, measure, date_column])
    _is_ascending(extreme)
    _check_limit(limit)

    days = sorted(set(int(d) for d in days_of_week))
    if not days or any(d < 0 or d > 6 for d in days):
        raise AnalysisError(f"days_of_week must be weekday numbers 0-6, got {list(days_of_week)}")

    subset = df[pd.to_datetime(df[date_column]).dt.dayofweek.isin(days)]
    grouped = subset.groupby(group_key, as_index=False).agg(
        **{TOTAL_SPEND: (measure, 'sum'), TRANSACTION_COUNT: (measure, 'count')}
    )
    grouped = grouped[grouped[TRANSACTION_COUNT] > 0].copy()

    if grouped.empty:
        return _empty(columns)

    grouped[SPEND_PER_TRANSACTION] = grouped[TOTAL_SPEND] / grouped[TRANSACTION_COUNT]
    return _take_extreme(grouped, SPEND_PER_TRANSACTION, [group_key], extreme, limit)[columns]


def first_n_span(
    df: pd.DataFrame,
    group_key: str,
    n: int,
    order_by: Sequence[str] = DEFAULT_ORDER,
    extreme: Union[str, Extreme] = Extreme.MIN,
    limit: Optional[int] = 1,
    date_column: str = TRANSACTION_DATE
) -> pd.DataFrame:
    """
    First-N-occurrences span.

    Numbers the rows of each group in arrival order and measures the days
    between the 1st and the Nth row. Groups with fewer than N rows are
    dropped before the extreme is taken.

    Returns:
        DataFrame[group_key, first_transaction_date, nth_transaction_date, days_to_nth]
    """
    order_by = _as_list(order_by)
    columns = [group_key, FIRST_TRANSACTION_DATE, NTH_TRANSACTION_DATE, DAYS_TO_NTH]
    _require_columns(df, [group_key, date_column] + order_by)
    _is_ascending(extreme)
    _check_limit(limit)
    _check_limit(n, "n")

    if df.empty:
        return _empty(columns)

    ordered = df.sort_values([group_key] + order_by, kind='mergesort')
    row_number = ordered.groupby(group_key).cumcount() + 1
    dates = pd.to_datetime(ordered[date_column])

    first = dates[row_number == 1].set_axis(ordered.loc[row_number == 1, group_key]).rename(FIRST_TRANSACTION_DATE)
    nth = dates[row_number == n].set_axis(ordered.loc[row_number == n, group_key]).rename(NTH_TRANSACTION_DATE)

    spans = pd.concat([first, nth], axis=1, join='inner').rename_axis(group_key).reset_index()
    if spans.empty:
        logger.warning(f"No {group_key} reached {n} transactions")
        return _empty(columns)

    spans[DAYS_TO_NTH] = (spans[NTH_TRANSACTION_DATE] - spans[FIRST_TRANSACTION_DATE]).dt.days
    return _take_extreme(spans, DAYS_TO_NTH, [group_key], extreme, limit)[columns]
