# ========================
# tests/test_pipeline.py
# ========================

import unittest
import sys
import os
import io
import json
import logging
import tempfile
import shutil
from contextlib import redirect_stdout
from pathlib import Path

import matplotlib

matplotlib.use('Agg')

import pandas as pd
from pandas.testing import assert_frame_equal

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from promotion_analysis import run_analysis
from promotion_analysis.src.data import check_data
from promotion_analysis.src.data.load import load_employee_data
from promotion_analysis.src.data.prepare import prepare_dataset
from promotion_analysis.src.data.synthetic import RAW_COLUMNS, generate_employee_data, write_synthetic_csv
from promotion_analysis.src.experiments import run_descriptives, run_inference


class TestSyntheticData(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def test_generation_is_reproducible(self):
        assert_frame_equal(generate_employee_data(200, seed=1), generate_employee_data(200, seed=1))

    def test_raw_file_passes_loader_and_keeps_quirks(self):
        path = write_synthetic_csv(Path(self.tmp_dir) / 'raw.csv', n_rows=300, seed=2)
        raw = load_employee_data(path)
        self.assertEqual(list(raw.columns), RAW_COLUMNS)
        self.assertTrue(raw['education'].isna().any())
        self.assertTrue(raw['previous_year_rating'].isna().any())

    def test_prepared_dataset_has_derived_labels(self):
        path = write_synthetic_csv(Path(self.tmp_dir) / 'raw.csv', n_rows=300, seed=2)
        df = prepare_dataset(path)
        for col in ['is_promoted_label', 'awards_won_label', 'performance_cat', 'age_group']:
            self.assertIn(col, df.columns)
        self.assertEqual(set(df['is_promoted'].dropna().unique()), {0, 1})


class TestRunners(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()
        self.data_path = write_synthetic_csv(Path(self.tmp_dir) / 'raw.csv', n_rows=600, seed=4)
        self.out_dir = Path(self.tmp_dir) / 'outputs'
        self.argv = [
            '--config', os.path.join(self.tmp_dir, 'no_config.yaml'),
            '--data-path', str(self.data_path),
            '--output-dir', str(self.out_dir),
        ]

    def tearDown(self):
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def test_check_data(self):
        with redirect_stdout(io.StringIO()) as out:
            self.assertEqual(check_data.main(['--data-path', str(self.data_path)]), 0)
        self.assertIn('Found dataset', out.getvalue())
        with redirect_stdout(io.StringIO()):
            self.assertEqual(check_data.main(['--data-path', os.path.join(self.tmp_dir, 'x.csv')]), 1)

    def test_descriptives_write_tables(self):
        with redirect_stdout(io.StringIO()):
            run_descriptives(self.argv)
        tables = self.out_dir / 'tables'
        self.assertTrue((tables / 'freq_department.csv').is_file())
        self.assertTrue((tables / 'xtab_gender_by_promotion.csv').is_file())
        summary = pd.read_csv(tables / 'summary_by_department.csv')
        self.assertEqual(int(summary['n'].sum()), 600)

    def test_inference_writes_json(self):
        with redirect_stdout(io.StringIO()):
            run_inference(self.argv)
        with open(self.out_dir / 'tables' / 'inference_results.json') as f:
            results = json.load(f)
        self.assertIn('chi_square_gender_promotion', results)
        self.assertIn('logistic_regression_promotion', results)
        self.assertTrue((self.out_dir / 'tables' / 'logistic_coefficients.csv').is_file())

    def test_missing_dataset_exits(self):
        argv = list(self.argv)
        argv[3] = os.path.join(self.tmp_dir, 'missing.csv')
        with self.assertRaises(SystemExit):
            run_descriptives(argv)


class TestLauncher(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()
        self.cwd = os.getcwd()

    def tearDown(self):
        os.chdir(self.cwd)
        root = logging.getLogger()
        for handler in list(root.handlers):
            if isinstance(handler, logging.FileHandler):
                root.removeHandler(handler)
                handler.close()
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def test_synthetic_end_to_end(self):
        out_dir = Path(self.tmp_dir) / 'outputs'
        with redirect_stdout(io.StringIO()):
            code = run_analysis.main(['--synthetic', '--synthetic-rows', '800', '--output-dir', str(out_dir)])
        self.assertEqual(code, 0)
        self.assertTrue((out_dir / 'data' / run_analysis.SYNTHETIC_FILENAME).is_file())
        self.assertTrue((out_dir / 'tables' / 'descriptive_by_department.csv').is_file())
        self.assertTrue((out_dir / 'tables' / 'inference_results.json').is_file())
        self.assertTrue((out_dir / 'figures' / 'promotions_by_department.png').is_file())
        self.assertTrue((out_dir / 'logs' / 'run_analysis.log').is_file())

    def test_missing_dataset_returns_error(self):
        code = run_analysis.main([
            '--data-path', os.path.join(self.tmp_dir, 'missing.csv'),
            '--output-dir', os.path.join(self.tmp_dir, 'outputs'),
        ])
        self.assertEqual(code, 1)

    def test_skips(self):
        out_dir = Path(self.tmp_dir) / 'outputs'
        with redirect_stdout(io.StringIO()):
            code = run_analysis.main([
                '--synthetic', '--synthetic-rows', '300', '--output-dir', str(out_dir),
                '--skip-inference', '--skip-plots',
            ])
        self.assertEqual(code, 0)
        self.assertFalse((out_dir / 'tables' / 'inference_results.json').exists())
        self.assertFalse((out_dir / 'figures' / 'promotions_by_department.png').exists())


if __name__ == '__main__':
    unittest.main()
