"""The nine problem statements answered over the transactions table"""

from dataclasses import dataclass
from typing import Callable, Dict, Sequence
import pandas as pd
from card_insights.constants import (
    CITY,
    CARD_TYPE,
    EXP_TYPE,
    GENDER,
    CardType,
    Gender,
    DEFAULT_TOP_N,
    DEFAULT_CUMULATIVE_THRESHOLD,
    DEFAULT_NTH_TRANSACTION,
    DEFAULT_GROWTH_YEAR,
    DEFAULT_GROWTH_MONTH,
    WEEKEND_DAYS,
)
from card_insights.tools.aggregation_tools import (
    share_of_total,
    best_period_per_group,
    threshold_crossing,
    conditional_ratio_extremum,
    dual_extremum_pivot,
    conditional_percentage,
    period_over_period_delta,
    filtered_efficiency_ratio,
    first_n_span,
)
from card_insights.utils.errors import AnalysisError


@dataclass(frozen=True)
class ProblemStatement:
    """A question and the query that answers it"""
    problem_id: str
    title: str
    func: Callable[..., pd.DataFrame]


def top_cities_by_spend(df: pd.DataFrame, top_n: int = DEFAULT_TOP_N) -> pd.DataFrame:
    return share_of_total(df, CITY, top_n=top_n)


def peak_month_by_card_type(df: pd.DataFrame) -> pd.DataFrame:
    # rank with ties: a card type shows twice only if two months tie exactly
    return best_period_per_group(df, CARD_TYPE)


def card_type_cumulative_milestone(
    df: pd.DataFrame,
    threshold: float = DEFAULT_CUMULATIVE_THRESHOLD
) -> pd.DataFrame:
    return threshold_crossing(df, CARD_TYPE, threshold)


def lowest_gold_share_city(df: pd.DataFrame, card_type: str = CardType.GOLD.value) -> pd.DataFrame:
    return conditional_ratio_extremum(df, CITY, CARD_TYPE, card_type, extreme="min", limit=1)


def city_expense_extremes(df: pd.DataFrame) -> pd.DataFrame:
    return dual_extremum_pivot(df, CITY, EXP_TYPE)


def female_share_by_expense_type(df: pd.DataFrame, gender: str = Gender.FEMALE.value) -> pd.DataFrame:
    return conditional_percentage(df, EXP_TYPE, GENDER, gender)


def top_month_over_month_growth(
    df: pd.DataFrame,
    year: int = DEFAULT_GROWTH_YEAR,
    month: int = DEFAULT_GROWTH_MONTH
) -> pd.DataFrame:
    return period_over_period_delta(df, [CARD_TYPE, EXP_TYPE], year, month, extreme="max", limit=1)


def weekend_spend_per_transaction(
    df: pd.DataFrame,
    days_of_week: Sequence[int] = tuple(WEEKEND_DAYS)
) -> pd.DataFrame:
    return filtered_efficiency_ratio(df, CITY, days_of_week, extreme="max", limit=1)


def fastest_city_to_nth_transaction(df: pd.DataFrame, n: int = DEFAULT_NTH_TRANSACTION) -> pd.DataFrame:
    return first_n_span(df, CITY, n, extreme="min", limit=1)


PROBLEM_STATEMENTS: Dict[str, ProblemStatement] = {
    statement.problem_id: statement
    for statement in [
        ProblemStatement(
            "q1_top_cities",
            "Top 5 cities with the highest spend and their percentage contribution of total spend",
            top_cities_by_spend,
        ),
        ProblemStatement(
            "q2_peak_month_by_card_type",
            "Highest spend month and the amount spent in that month for each card type",
            peak_month_by_card_type,
        ),
        ProblemStatement(
            "q3_card_type_cumulative_milestone",
            "Transaction at which each card type reaches a cumulative 1,000,000 spend",
            card_type_cumulative_milestone,
        ),
        ProblemStatement(
            "q4_lowest_gold_share_city",
            "City with the lowest percentage spend on Gold cards",
            lowest_gold_share_city,
        ),
        ProblemStatement(
            "q5_city_expense_extremes",
            "Highest and lowest expense type for each city",
            city_expense_extremes,
        ),
        ProblemStatement(
            "q6_female_share_by_expense_type",
            "Percentage contribution of spend by females for each expense type",
            female_share_by_expense_type,
        ),
        ProblemStatement(
            "q7_top_mom_growth",
            "Card and expense type combination with the highest month-over-month growth in Jan-2014",
            top_month_over_month_growth,
        ),
        ProblemStatement(
            "q8_weekend_spend_per_transaction",
            "City with the highest spend per transaction during weekends",
            weekend_spend_per_transaction,
        ),
        ProblemStatement(
            "q9_fastest_to_nth_transaction",
            "City that took the fewest days to reach its 500th transaction after its first",
            fastest_city_to_nth_transaction,
        ),
    ]
}


def get_problem_statement(problem_id: str) -> ProblemStatement:
    """Look up a problem statement by id"""
    try:
        return PROBLEM_STATEMENTS[problem_id]
    except KeyError:
        raise AnalysisError(
            f"Unknown problem statement {problem_id!r}, expected one of {sorted(PROBLEM_STATEMENTS)}"
        )
