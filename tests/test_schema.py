# ========================
# tests/test_schema.py
# ========================

import unittest
import sys
import os

import pandas as pd

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from promotion_analysis.src.data.schema import (
    REQUIRED_COLUMNS,
    EmployeeField,
    EmployeeRecord,
    records_from_frame,
    records_to_frame,
    require_columns,
    resolve_field,
    resolve_fields,
)
from promotion_analysis.src.exceptions import AnalysisError, SchemaError


def _row(**overrides):
    row = {
        'employee_id': 101,
        'department': 'Technology',
        'gender': 'f',
        'education': "Master's & above",
        'age': 34,
        'length_of_service': 6,
        'no_of_trainings': 1,
        'avg_training_score': 81.0,
        'previous_year_rating': 4,
        'awards_won': 0,
        'is_promoted': 1,
    }
    row.update(overrides)
    return row


class TestFieldResolution(unittest.TestCase):

    def test_enum_and_string_resolve_to_column_name(self):
        self.assertEqual(resolve_field(EmployeeField.DEPARTMENT), 'department')
        self.assertEqual(resolve_field('is_promoted'), 'is_promoted')
        self.assertEqual(str(EmployeeField.PERFORMANCE_CAT), 'performance_cat')

    def test_unknown_field_raises_schema_error(self):
        with self.assertRaises(SchemaError):
            resolve_field('salary')
        with self.assertRaises(SchemaError):
            resolve_fields(['department', 'bogus'])

    def test_resolve_fields_accepts_single_value(self):
        self.assertEqual(resolve_fields(EmployeeField.GENDER), ['gender'])

    def test_require_columns_lists_missing(self):
        df = pd.DataFrame({'department': ['HR']})
        with self.assertRaises(SchemaError) as ctx:
            require_columns(df, ['department', 'gender', 'age'])
        self.assertIn('gender', str(ctx.exception))
        self.assertIn('age', str(ctx.exception))

    def test_schema_error_is_value_error_and_analysis_error(self):
        self.assertTrue(issubclass(SchemaError, ValueError))
        self.assertTrue(issubclass(SchemaError, AnalysisError))


class TestEmployeeRecord(unittest.TestCase):

    def test_from_mapping_types_fields(self):
        record = EmployeeRecord.from_mapping(_row())
        self.assertEqual(record.department, 'Technology')
        self.assertEqual(record.age, 34)
        self.assertIs(record.awards_won, False)
        self.assertIs(record.is_promoted, True)
        self.assertAlmostEqual(record.avg_training_score, 81.0)

    def test_missing_values_become_none(self):
        record = EmployeeRecord.from_mapping(
            _row(education=float('nan'), previous_year_rating=pd.NA, gender='  ')
        )
        self.assertIsNone(record.education)
        self.assertIsNone(record.previous_year_rating)
        self.assertIsNone(record.gender)
        self.assertIsNone(record.performance_cat)

    def test_derived_labels(self):
        record = EmployeeRecord.from_mapping(_row())
        self.assertEqual(record.performance_cat, 'High')
        self.assertEqual(record.is_promoted_label, 'Promoted')
        self.assertEqual(record.awards_won_label, 'No Award')
        self.assertEqual(record.age_group, '30-39')

    def test_derived_label_is_stable(self):
        record = EmployeeRecord.from_mapping(_row(previous_year_rating=3))
        self.assertEqual(record.performance_cat, record.performance_cat)
        self.assertEqual(record.performance_cat, 'Average')

    def test_frame_conversion_keeps_missing_rating(self):
        df = pd.DataFrame([_row(), _row(employee_id=102, previous_year_rating=None)])
        records = records_from_frame(df)
        self.assertEqual(len(records), 2)
        self.assertIsNone(records[1].previous_year_rating)

        back = records_to_frame(records)
        self.assertEqual(list(back.columns), ['employee_id'] + REQUIRED_COLUMNS)
        self.assertEqual(str(back['previous_year_rating'].dtype), 'Int64')
        self.assertTrue(pd.isna(back.loc[1, 'previous_year_rating']))
        self.assertEqual(back.loc[0, 'is_promoted'], 1)

    def test_records_from_frame_requires_columns(self):
        with self.assertRaises(SchemaError):
            records_from_frame(pd.DataFrame({'department': ['HR']}))


if __name__ == '__main__':
    unittest.main()
