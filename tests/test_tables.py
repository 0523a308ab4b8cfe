# ========================
# tests/test_tables.py
# ========================

import unittest
import sys
import os

import numpy as np
import pandas as pd

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from promotion_analysis.src.analysis.tables import (
    MISSING_LABEL,
    SummaryMetric,
    correlation_matrix,
    cross_tabulation,
    descriptive_table,
    format_percent,
    format_percent_columns,
    frequency_table,
    grouped_summary,
    numeric_summary,
)
from promotion_analysis.src.data.prepare import prepare_frame
from promotion_analysis.src.exceptions import SchemaError


def _prepared_frame():
    raw = pd.DataFrame({
        'employee_id': range(1, 9),
        'department': ['HR', 'HR', 'HR', 'Technology', 'Technology', 'Technology', 'Technology', 'Finance'],
        'gender': ['f', 'm', 'f', 'm', 'm', 'f', 'm', 'f'],
        'education': ["Bachelor's", "Bachelor's", '', "Master's & above", "Bachelor's", None,
                      "Master's & above", "Bachelor's"],
        'age': [25, 31, 44, 29, 38, 52, 35, 41],
        'length_of_service': [2, 5, 12, 3, 7, 20, 6, 9],
        'no_of_trainings': [1, 1, 2, 1, 1, 3, 1, 2],
        'avg_training_score': [50.0, 55.0, 60.0, 80.0, 84.0, 78.0, 90.0, 65.0],
        'previous_year_rating': [3, 4, np.nan, 5, 4, 3, 5, 4],
        'awards_won': [0, 0, 0, 1, 0, 0, 1, 0],
        'is_promoted': [0, 0, 1, 1, 0, 1, 1, 0],
    })
    return prepare_frame(raw, report_missing=False)


class TestFormatting(unittest.TestCase):

    def test_format_percent(self):
        self.assertEqual(format_percent(12.345), '12.3%')
        self.assertEqual(format_percent(12.3456, digits=2), '12.35%')
        self.assertEqual(format_percent(float('nan')), 'NA')

    def test_format_percent_columns_detects_percent_columns(self):
        table = pd.DataFrame({'n': [1, 3], 'percent': [25.0, 75.0], 'pct_promoted': [10.0, np.nan]})
        out = format_percent_columns(table)
        self.assertEqual(out['percent'].tolist(), ['25.0%', '75.0%'])
        self.assertEqual(out['pct_promoted'].tolist(), ['10.0%', 'NA'])
        self.assertEqual(out['n'].tolist(), [1, 3])


class TestFrequencyTable(unittest.TestCase):

    def setUp(self):
        self.df = _prepared_frame()

    def test_counts_and_percentages_with_missing_group(self):
        table = frequency_table(self.df, 'education')
        self.assertEqual(table['education'].tolist(), ["Bachelor's", "Master's & above", MISSING_LABEL])
        self.assertEqual(table['n'].tolist(), [4, 2, 2])
        self.assertAlmostEqual(table['percent'].sum(), 100.0)
        self.assertAlmostEqual(table['valid_percent'].iloc[0], 100.0 * 4 / 6)
        self.assertTrue(pd.isna(table['valid_percent'].iloc[2]))

    def test_valid_percent_sums_to_100(self):
        table = frequency_table(self.df, 'department', digits=1)
        self.assertAlmostEqual(table['valid_percent'].sum(), 100.0, delta=0.2)

    def test_exclude_missing_and_totals(self):
        table = frequency_table(self.df, 'education', include_missing=False, totals=True)
        self.assertNotIn(MISSING_LABEL, table['education'].tolist())
        self.assertEqual(table['education'].iloc[-1], 'Total')
        self.assertEqual(table['n'].iloc[-1], 6)
        self.assertAlmostEqual(table['percent'].iloc[-1], 100.0)

    def test_categorical_keeps_unobserved_levels(self):
        table = frequency_table(self.df, 'performance_cat', include_missing=False)
        self.assertEqual(table['performance_cat'].tolist(), ['Low', 'Average', 'High'])
        self.assertEqual(table['n'].tolist(), [0, 2, 5])

    def test_unknown_field(self):
        with self.assertRaises(SchemaError):
            frequency_table(self.df, 'salary')


class TestCrossTabulation(unittest.TestCase):

    def setUp(self):
        self.df = _prepared_frame()

    def test_row_percentages_sum_to_100(self):
        xtab = cross_tabulation(self.df, 'department', 'is_promoted_label')
        sums = xtab.percentages.sum(axis=1)
        for value in sums:
            self.assertAlmostEqual(value, 100.0)
        self.assertEqual(xtab.counts.loc['Technology', 'Promoted'], 3)
        self.assertEqual(xtab.row_totals.loc['HR'], 3)

    def test_empty_row_has_missing_percentages(self):
        xtab = cross_tabulation(self.df, 'performance_cat', 'is_promoted_label')
        self.assertEqual(xtab.counts.loc['Low'].sum(), 0)
        self.assertTrue(xtab.percentages.loc['Low'].isna().all())

    def test_formatted_cells(self):
        xtab = cross_tabulation(self.df, 'gender', 'is_promoted_label')
        cell = xtab.formatted(digits=1).loc['f', 'Promoted']
        self.assertEqual(cell, '50.0% (2)')

    def test_include_missing_rows(self):
        xtab = cross_tabulation(self.df, 'education', 'is_promoted_label', include_missing=True)
        self.assertIn(MISSING_LABEL, xtab.counts.index)
        self.assertEqual(int(xtab.counts.loc[MISSING_LABEL].sum()), 2)

    def test_to_long(self):
        xtab = cross_tabulation(self.df, 'gender', 'is_promoted_label')
        long = xtab.to_long()
        self.assertEqual(list(long.columns), ['gender', 'is_promoted_label', 'n', 'row_percent'])
        self.assertEqual(int(long['n'].sum()), len(self.df))


class TestGroupedSummary(unittest.TestCase):

    def setUp(self):
        self.df = _prepared_frame()

    def test_department_summary(self):
        table = grouped_summary(self.df, 'department')
        self.assertEqual(
            list(table.columns),
            ['department', 'n', 'avg_training_score', 'avg_rating', 'pct_promoted'],
        )
        hr = table.set_index('department').loc['HR']
        self.assertEqual(hr['n'], 3)
        self.assertAlmostEqual(hr['avg_training_score'], 55.0)
        # the missing rating is skipped, not counted as zero
        self.assertAlmostEqual(hr['avg_rating'], 3.5)
        self.assertAlmostEqual(hr['pct_promoted'], 33.3)

    def test_two_keys(self):
        table = grouped_summary(self.df, ['department', 'gender'])
        self.assertEqual(int(table['n'].sum()), len(self.df))
        row = table[(table['department'] == 'Technology') & (table['gender'] == 'm')]
        self.assertEqual(int(row['n'].iloc[0]), 3)

    def test_custom_metrics(self):
        metrics = [SummaryMetric('median_age', 'age', 'median'), SummaryMetric('sd_score', 'avg_training_score', 'std')]
        table = grouped_summary(self.df, 'gender', metrics, digits=2)
        female = table.set_index('gender').loc['f']
        self.assertAlmostEqual(female['median_age'], 42.5)

    def test_invalid_metric(self):
        with self.assertRaises(ValueError):
            SummaryMetric('x', 'age', 'mode')

    def test_empty_dataset(self):
        table = grouped_summary(self.df.iloc[0:0], 'department')
        self.assertTrue(table.empty)
        self.assertEqual(
            list(table.columns),
            ['department', 'n', 'avg_training_score', 'avg_rating', 'pct_promoted'],
        )

    def test_descriptive_table(self):
        table = descriptive_table(self.df).set_index('department')
        self.assertEqual(table.loc['Technology', 'N'], 4)
        self.assertAlmostEqual(table.loc['Technology', '% Award Won'], 50.0)
        self.assertAlmostEqual(table.loc['Technology', 'Avg Years of Service'], 9.0)
        self.assertTrue(pd.isna(table.loc['Finance', 'SD Training Score']))


class TestNumericSummaries(unittest.TestCase):

    def setUp(self):
        self.df = _prepared_frame()

    def test_correlation_matrix(self):
        corr = correlation_matrix(self.df, ['avg_training_score', 'is_promoted'], digits=None)
        self.assertAlmostEqual(corr.loc['avg_training_score', 'avg_training_score'], 1.0)
        self.assertAlmostEqual(
            corr.loc['avg_training_score', 'is_promoted'],
            corr.loc['is_promoted', 'avg_training_score'],
        )

    def test_correlation_uses_complete_cases(self):
        corr = correlation_matrix(self.df)
        self.assertEqual(corr.shape, (6, 6))

    def test_numeric_summary(self):
        summary = numeric_summary(self.df)
        self.assertEqual(summary.loc['previous_year_rating', 'n_missing'], 1)
        self.assertEqual(summary.loc['age', 'min'], 25)
        self.assertEqual(summary.loc['age', 'max'], 52)


if __name__ == '__main__':
    unittest.main()
