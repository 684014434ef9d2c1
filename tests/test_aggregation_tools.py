"""Unit tests for the query templates"""

import pytest
import pandas as pd
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


class TestShareOfTotal:

    def test_worked_example(self, three_transactions):
        result = share_of_total(three_transactions, 'city')

        assert list(result.columns) == ['city', 'total_spend', 'percentage_contribution']
        assert result['city'].tolist() == ['A', 'B']
        assert result['total_spend'].tolist() == [300.0, 50.0]
        assert result['percentage_contribution'].tolist() == [85.71, 14.29]
        assert result['percentage_contribution'].sum() == pytest.approx(100.0)

    def test_percentages_use_grand_total_of_all_groups(self, three_transactions):
        result = share_of_total(three_transactions, 'city', top_n=1)

        assert len(result) == 1
        assert result.iloc[0]['city'] == 'A'
        assert result.iloc[0]['percentage_contribution'] == 85.71

    def test_all_groups_sum_to_hundred(self, sample_transactions):
        result = share_of_total(sample_transactions, 'exp_type')
        assert result['percentage_contribution'].sum() == pytest.approx(100.0, abs=0.05)

    def test_zero_grand_total_returns_empty(self, make_transactions):
        df = make_transactions([('A', '2014-01-01', 'Gold', 'Bills', 'F', 0)])
        result = share_of_total(df, 'city')

        assert result.empty
        assert list(result.columns) == ['city', 'total_spend', 'percentage_contribution']

    def test_invalid_top_n(self, three_transactions):
        with pytest.raises(AnalysisError):
            share_of_total(three_transactions, 'city', top_n=0)

    def test_missing_column(self, three_transactions):
        with pytest.raises(AnalysisError):
            share_of_total(three_transactions, 'region')


class TestBestPeriodPerGroup:

    def test_one_row_per_group(self, sample_transactions):
        result = best_period_per_group(sample_transactions, 'card_type')

        assert result['card_type'].tolist() == ['Gold', 'Platinum', 'Silver']
        peaks = result.set_index('card_type')
        assert peaks.loc['Gold', 'transaction_year'] == 2013
        assert peaks.loc['Gold', 'transaction_month'] == 12
        assert peaks.loc['Gold', 'total_spend'] == 300.0
        assert peaks.loc['Silver', 'transaction_month'] == 1
        assert peaks.loc['Silver', 'total_spend'] == 1400.0

    def test_exact_tie_keeps_both_months(self, make_transactions):
        df = make_transactions([
            ('A', '2014-01-03', 'Gold', 'Bills', 'F', 100),
            ('A', '2014-02-03', 'Gold', 'Bills', 'F', 100),
            ('A', '2014-03-03', 'Gold', 'Bills', 'F', 40),
            ('A', '2014-03-04', 'Silver', 'Bills', 'F', 10),
        ])
        result = best_period_per_group(df, 'card_type')

        gold = result[result['card_type'] == 'Gold']
        assert gold['transaction_month'].tolist() == [1, 2]
        assert result[result['card_type'] == 'Silver']['transaction_month'].tolist() == [3]

    def test_empty_input(self, three_transactions):
        result = best_period_per_group(three_transactions.iloc[0:0], 'card_type')
        assert result.empty


class TestThresholdCrossing:

    def test_worked_example(self, three_transactions):
        a_rows = three_transactions[three_transactions['city'] == 'A']
        result = threshold_crossing(a_rows, 'city', 250)

        assert len(result) == 1
        row = result.iloc[0]
        assert row['transaction_date'] == pd.Timestamp('2014-02-10')
        assert row['cumulative_spend'] == 300.0

    def test_first_qualifying_row_is_minimal_prefix(self, sample_transactions):
        threshold = 500
        result = threshold_crossing(sample_transactions, 'card_type', threshold)

        for _, row in result.iterrows():
            group = sample_transactions[sample_transactions['card_type'] == row['card_type']]
            group = group.sort_values(['transaction_date', 'transaction_id'])
            cumulative = group['amount'].cumsum()
            position = group['transaction_id'].tolist().index(row['transaction_id'])

            assert cumulative.iloc[position] >= threshold
            assert (cumulative.iloc[:position] < threshold).all()

    def test_groups_below_threshold_are_absent(self, sample_transactions):
        result = threshold_crossing(sample_transactions, 'card_type', 500)

        assert result['card_type'].tolist() == ['Gold', 'Silver']
        assert result['transaction_id'].tolist() == [2, 1]
        assert result['cumulative_spend'].tolist() == [500.0, 900.0]

    def test_ties_on_date_ordered_by_id(self, make_transactions):
        df = make_transactions([
            ('A', '2014-01-01', 'Gold', 'Bills', 'F', 100),
            ('A', '2014-01-01', 'Gold', 'Bills', 'F', 100),
        ])
        result = threshold_crossing(df, 'card_type', 150)
        assert result['transaction_id'].tolist() == [2]

    def test_keeps_all_columns(self, three_transactions):
        result = threshold_crossing(three_transactions, 'city', 10)
        assert list(result.columns) == list(three_transactions.columns) + ['cumulative_spend']


class TestConditionalRatioExtremum:

    def test_zero_subset_groups_excluded(self, sample_transactions):
        result = conditional_ratio_extremum(sample_transactions, 'city', 'card_type', 'Gold', extreme='min', limit=None)

        assert 'Mumbai, India' not in result['city'].tolist()
        assert (result['subset_spend'] > 0).all()

    def test_lowest_ratio(self, sample_transactions):
        result = conditional_ratio_extremum(sample_transactions, 'city', 'card_type', 'Gold')

        assert len(result) == 1
        assert result.iloc[0]['city'] == 'Pune, India'
        assert result.iloc[0]['spend_ratio'] == pytest.approx(50 / 450)

    def test_highest_ratio(self, sample_transactions):
        result = conditional_ratio_extremum(sample_transactions, 'city', 'card_type', 'Gold', extreme='max')
        assert result.iloc[0]['city'] == 'Delhi, India'
        assert result.iloc[0]['spend_ratio'] == pytest.approx(0.5)

    def test_no_candidates(self, three_transactions):
        result = conditional_ratio_extremum(three_transactions, 'city', 'card_type', 'Platinum')
        assert result.empty

    def test_invalid_extreme(self, three_transactions):
        with pytest.raises(AnalysisError):
            conditional_ratio_extremum(three_transactions, 'city', 'card_type', 'Gold', extreme='median')


class TestDualExtremumPivot:

    def test_highest_and_lowest_side_by_side(self, sample_transactions):
        result = dual_extremum_pivot(sample_transactions, 'city', 'exp_type')

        assert list(result.columns) == ['city', 'highest_exp_type', 'lowest_exp_type']
        rows = result.set_index('city')
        assert rows.loc['Delhi, India'].tolist() == ['Food', 'Bills']
        assert rows.loc['Mumbai, India'].tolist() == ['Bills', 'Travel']
        assert rows.loc['Pune, India'].tolist() == ['Fuel', 'Food']

    def test_tie_resolves_to_greatest_name(self, make_transactions):
        df = make_transactions([
            ('A', '2014-01-01', 'Gold', 'Bills', 'F', 100),
            ('A', '2014-01-02', 'Gold', 'Food', 'F', 100),
            ('A', '2014-01-03', 'Gold', 'Travel', 'F', 10),
        ])
        result = dual_extremum_pivot(df, 'city', 'exp_type')

        assert result.iloc[0]['highest_exp_type'] == 'Food'
        assert result.iloc[0]['lowest_exp_type'] == 'Travel'

    def test_single_category_is_both(self, three_transactions):
        result = dual_extremum_pivot(three_transactions, 'city', 'exp_type')
        b_row = result[result['city'] == 'B'].iloc[0]
        assert b_row['highest_exp_type'] == b_row['lowest_exp_type'] == 'Bills'


class TestConditionalPercentage:

    def test_female_share(self, sample_transactions):
        result = conditional_percentage(sample_transactions, 'exp_type', 'gender', 'F')

        shares = dict(zip(result['exp_type'], result['percentage_contribution']))
        assert shares == {'Bills': 75.0, 'Food': 41.18, 'Fuel': 16.67, 'Travel': 0.0}

    def test_zero_total_category_excluded(self, make_transactions):
        df = make_transactions([
            ('A', '2014-01-01', 'Gold', 'Bills', 'F', 100),
            ('A', '2014-01-02', 'Gold', 'Food', 'F', 0),
        ])
        result = conditional_percentage(df, 'exp_type', 'gender', 'F')
        assert result['exp_type'].tolist() == ['Bills']


class TestPeriodOverPeriodDelta:

    def test_highest_growth(self, sample_transactions):
        result = period_over_period_delta(sample_transactions, ['card_type', 'exp_type'], 2014, 1)

        assert len(result) == 1
        row = result.iloc[0]
        assert (row['card_type'], row['exp_type']) == ('Silver', 'Bills')
        assert row['total_spend'] == 900.0
        assert row['previous_spend'] == 400.0
        assert row['mom_growth'] == 500.0

    def test_delta_is_current_minus_previous(self, sample_transactions):
        result = period_over_period_delta(
            sample_transactions, ['card_type', 'exp_type'], 2014, 1, limit=None
        )
        assert (result['mom_growth'] == result['total_spend'] - result['previous_spend']).all()

    def test_groups_without_previous_period_excluded(self, make_transactions):
        df = make_transactions([
            ('A', '2014-01-10', 'Gold', 'Bills', 'F', 1000),
            ('B', '2013-12-10', 'Gold', 'Bills', 'F', 10),
            ('B', '2014-01-10', 'Gold', 'Bills', 'F', 20),
        ])
        result = period_over_period_delta(df, 'city', 2014, 1, limit=None)
        assert result['city'].tolist() == ['B']

    def test_lag_uses_previous_bucket_present(self, make_transactions):
        df = make_transactions([
            ('A', '2013-10-10', 'Gold', 'Bills', 'F', 100),
            ('A', '2014-01-10', 'Gold', 'Bills', 'F', 400),
        ])
        lagged = period_over_period_delta(df, 'city', 2014, 1)
        assert lagged.iloc[0]['previous_spend'] == 100.0

        consecutive = period_over_period_delta(df, 'city', 2014, 1, consecutive_only=True)
        assert consecutive.empty

    def test_year_boundary_is_consecutive(self, make_transactions):
        df = make_transactions([
            ('A', '2013-12-31', 'Gold', 'Bills', 'F', 100),
            ('A', '2014-01-01', 'Gold', 'Bills', 'F', 250),
        ])
        result = period_over_period_delta(df, 'city', 2014, 1, consecutive_only=True)
        assert result.iloc[0]['mom_growth'] == 150.0

    def test_invalid_month(self, three_transactions):
        with pytest.raises(AnalysisError):
            period_over_period_delta(three_transactions, 'city', 2014, 13)


class TestFilteredEfficiencyRatio:

    def test_weekend_spend_per_transaction(self, sample_transactions):
        result = filtered_efficiency_ratio(sample_transactions, 'city', [5, 6], limit=None)

        ratios = dict(zip(result['city'], result['spend_per_transaction']))
        assert ratios == {'Mumbai, India': 900.0, 'Delhi, India': 400.0, 'Pune, India': 150.0}
        assert result.iloc[0]['city'] == 'Mumbai, India'
        assert result.iloc[0]['transaction_count'] == 1

    def test_weekday_filter_excludes_other_days(self, sample_transactions):
        # 2014-01-20 is the only Monday
        result = filtered_efficiency_ratio(sample_transactions, 'city', [0], limit=None)
        assert result['city'].tolist() == ['Mumbai, India']
        assert result.iloc[0]['total_spend'] == 100.0

    def test_invalid_days(self, three_transactions):
        with pytest.raises(AnalysisError):
            filtered_efficiency_ratio(three_transactions, 'city', [7])
        with pytest.raises(AnalysisError):
            filtered_efficiency_ratio(three_transactions, 'city', [])


class TestFirstNSpan:

    def test_shortest_span(self, sample_transactions):
        result = first_n_span(sample_transactions, 'city', 3)

        assert len(result) == 1
        assert result.iloc[0]['city'] == 'Mumbai, India'
        assert result.iloc[0]['days_to_nth'] == 31

    def test_all_spans(self, sample_transactions):
        result = first_n_span(sample_transactions, 'city', 3, limit=None)
        spans = dict(zip(result['city'], result['days_to_nth']))
        assert spans == {'Mumbai, India': 31, 'Delhi, India': 39, 'Pune, India': 49}

    def test_groups_short_of_n_excluded(self, three_transactions):
        result = first_n_span(three_transactions, 'city', 2, limit=None)

        assert result['city'].tolist() == ['A']
        assert result.iloc[0]['days_to_nth'] == 36

    def test_nobody_reaches_n(self, three_transactions):
        assert first_n_span(three_transactions, 'city', 500).empty

    def test_invalid_n(self, three_transactions):
        with pytest.raises(AnalysisError):
            first_n_span(three_transactions, 'city', 0)


def test_templates_do_not_mutate_input(sample_transactions):
    """Every template leaves its input frame untouched"""
    before = sample_transactions.copy()

    share_of_total(sample_transactions, 'city', top_n=2)
    best_period_per_group(sample_transactions, 'card_type')
    threshold_crossing(sample_transactions, 'card_type', 500)
    conditional_ratio_extremum(sample_transactions, 'city', 'card_type', 'Gold')
    dual_extremum_pivot(sample_transactions, 'city', 'exp_type')
    conditional_percentage(sample_transactions, 'exp_type', 'gender', 'F')
    period_over_period_delta(sample_transactions, ['card_type', 'exp_type'], 2014, 1)
    filtered_efficiency_ratio(sample_transactions, 'city', [5, 6])
    first_n_span(sample_transactions, 'city', 2)

    pd.testing.assert_frame_equal(sample_transactions, before)
