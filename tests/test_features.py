# ========================
# tests/test_features.py
# ========================

import unittest
import sys
import os

import numpy as np
import pandas as pd

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from promotion_analysis.src.data.features import (
    AGE_GROUP_LEVELS,
    PERFORMANCE_LEVELS,
    add_derived_labels,
    age_group,
    performance_category,
    recoding_preview,
)
from promotion_analysis.src.data.preprocess import clean_data
from promotion_analysis.src.data.schema import EmployeeRecord
from promotion_analysis.src.exceptions import SchemaError


def _cleaned_frame():
    raw = pd.DataFrame({
        'department': ['HR', 'Technology', 'Finance', 'HR', 'Legal', 'Analytics'],
        'gender': ['f', 'm', 'm', 'f', 'm', 'f'],
        'education': ["Bachelor's", None, "Bachelor's", '', "Master's & above", "Bachelor's"],
        'age': [22, 30, 39, 40, 50, np.nan],
        'length_of_service': [1, 3, 8, 12, 20, 4],
        'no_of_trainings': [1, 1, 2, 1, 3, 1],
        'avg_training_score': [50.0, 61.0, 77.0, 83.0, 58.0, 90.0],
        'previous_year_rating': [1, 2, 3, 4, 5, np.nan],
        'awards_won': [0, 0, 1, 0, 0, 1],
        'is_promoted': [0, 1, 0, 1, 0, np.nan],
    })
    return clean_data(raw)


class TestScalarRules(unittest.TestCase):

    def test_performance_category_bands(self):
        ratings = [1, 2, 3, 4, 5, None]
        expected = ['Low', 'Low', 'Average', 'High', 'High', None]
        self.assertEqual([performance_category(r) for r in ratings], expected)

    def test_performance_category_between_bands_is_missing(self):
        self.assertIsNone(performance_category(2.5))
        self.assertIsNone(performance_category(float('nan')))
        self.assertIsNone(performance_category('n/a'))

    def test_age_group_boundaries(self):
        self.assertEqual(age_group(29), 'Under 30')
        self.assertEqual(age_group(30), '30-39')
        self.assertEqual(age_group(49), '40-49')
        self.assertEqual(age_group(50), '50+')
        self.assertIsNone(age_group(None))


class TestFrameRecoding(unittest.TestCase):

    def setUp(self):
        self.df = _cleaned_frame()
        self.labelled = add_derived_labels(self.df)

    def test_performance_cat_column(self):
        cats = self.labelled['performance_cat']
        self.assertEqual(list(cats.cat.categories), PERFORMANCE_LEVELS)
        self.assertTrue(cats.cat.ordered)
        self.assertEqual(cats.iloc[:5].tolist(), ['Low', 'Low', 'Average', 'High', 'High'])
        self.assertTrue(pd.isna(cats.iloc[5]))

    def test_binary_labels(self):
        self.assertEqual(
            self.labelled['is_promoted_label'].iloc[:2].tolist(), ['Not Promoted', 'Promoted']
        )
        self.assertTrue(pd.isna(self.labelled['is_promoted_label'].iloc[5]))
        self.assertEqual(self.labelled['awards_won_label'].iloc[2], 'Award Won')
        self.assertEqual(
            list(self.labelled['awards_won_label'].cat.categories), ['No Award', 'Award Won']
        )

    def test_age_group_column(self):
        groups = self.labelled['age_group']
        self.assertEqual(list(groups.cat.categories), AGE_GROUP_LEVELS)
        self.assertEqual(groups.iloc[:5].tolist(), ['Under 30', '30-39', '30-39', '40-49', '50+'])
        self.assertTrue(pd.isna(groups.iloc[5]))

    def test_input_frame_is_not_modified(self):
        self.assertNotIn('performance_cat', self.df.columns)
        self.assertEqual(len(self.labelled), len(self.df))

    def test_frame_labels_match_record_labels(self):
        for _, row in self.labelled.iterrows():
            record = EmployeeRecord.from_mapping(row.to_dict())
            expected = row['performance_cat']
            self.assertEqual(record.performance_cat, None if pd.isna(expected) else expected)
            expected_age = row['age_group']
            self.assertEqual(record.age_group, None if pd.isna(expected_age) else expected_age)

    def test_missing_source_column_raises(self):
        with self.assertRaises(SchemaError):
            add_derived_labels(self.df.drop(columns=['previous_year_rating']))

    def test_recoding_preview(self):
        preview = recoding_preview(self.labelled, n=3)
        self.assertEqual(len(preview), 3)
        self.assertIn('performance_cat', preview.columns)


if __name__ == '__main__':
    unittest.main()
