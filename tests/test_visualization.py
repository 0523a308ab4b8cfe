# ========================
# tests/test_visualization.py
# ========================

import unittest
import sys
import os
import tempfile
import shutil

import matplotlib

matplotlib.use('Agg')
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from promotion_analysis.src.analysis.inference import chi_square_test, logistic_regression, one_way_anova, t_test
from promotion_analysis.src.analysis.tables import correlation_matrix, cross_tabulation, frequency_table
from promotion_analysis.src.data.prepare import prepare_frame
from promotion_analysis.src.data.synthetic import generate_employee_data
from promotion_analysis.src.exceptions import InsufficientDataError
from promotion_analysis.src.visualization import (
    plot_correlation_heatmap,
    plot_promotion_rate_by_department,
    plot_promotions_by_department,
    plot_rating_distribution,
    plot_training_score_by_promotion,
    render_cross_tabulation,
    render_table,
    render_test_result,
)


class TestPlots(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.df = prepare_frame(generate_employee_data(n_rows=500, seed=3), report_missing=False)

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()

    def tearDown(self):
        plt.close('all')
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def test_each_plot_returns_a_figure_and_saves(self):
        plots = {
            'by_department.png': lambda p: plot_promotions_by_department(self.df, save_path=p),
            'rate.png': lambda p: plot_promotion_rate_by_department(self.df, save_path=p),
            'box.png': lambda p: plot_training_score_by_promotion(self.df, save_path=p),
            'rating.png': lambda p: plot_rating_distribution(self.df, include_missing=True, save_path=p),
            'corr.png': lambda p: plot_correlation_heatmap(correlation_matrix(self.df), save_path=p),
        }
        for name, draw in plots.items():
            path = os.path.join(self.tmp_dir, 'figures', name)
            fig = draw(path)
            self.assertIsInstance(fig, Figure)
            self.assertTrue(os.path.isfile(path), name)

    def test_departments_sorted_by_size(self):
        fig = plot_promotions_by_department(self.df)
        labels = [t.get_text() for t in fig.axes[0].get_xticklabels()]
        sizes = self.df['department'].value_counts()
        self.assertEqual(labels[0], sizes.index[0])

    def test_rating_bars_have_count_labels(self):
        fig = plot_rating_distribution(self.df)
        texts = [t.get_text() for t in fig.axes[0].texts]
        counts = self.df['previous_year_rating'].dropna().astype(int).value_counts().sort_index()
        self.assertEqual(texts, [str(int(n)) for n in counts.to_numpy()])

    def test_empty_dataset_raises(self):
        with self.assertRaises(InsufficientDataError):
            plot_promotions_by_department(self.df.iloc[0:0])
        with self.assertRaises(InsufficientDataError):
            plot_training_score_by_promotion(self.df.iloc[0:0])


class TestTextReport(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.df = prepare_frame(generate_employee_data(n_rows=800, seed=5), report_missing=False)

    def test_render_table_formats_percentages(self):
        text = render_table(frequency_table(self.df, 'gender', digits=1), 'Gender', percent_digits=1)
        self.assertTrue(text.startswith('Gender\n======'))
        self.assertIn('%', text)

    def test_render_empty_table(self):
        text = render_table(frequency_table(self.df, 'gender').iloc[0:0])
        self.assertEqual(text, '(empty table)')

    def test_render_cross_tabulation(self):
        text = render_cross_tabulation(cross_tabulation(self.df, 'gender', 'is_promoted_label'))
        self.assertIn('Total', text)
        self.assertIn('(row %)', text)

    def test_render_test_results(self):
        chi = render_test_result(chi_square_test(self.df, 'gender', 'is_promoted'))
        self.assertIn('X-squared', chi)
        self.assertIn('p-value', chi)

        tt = render_test_result(t_test(self.df))
        self.assertIn('Welch', tt)
        self.assertIn('confidence interval', tt)

        logit = render_test_result(logistic_regression(self.df))
        self.assertIn('(Intercept)', logit)
        self.assertIn('AIC', logit)

    def test_render_anova_with_posthoc(self):
        result = one_way_anova(self.df, 'avg_training_score', 'gender')
        text = render_test_result(result)
        self.assertIn('F =', text)
        if result.posthoc is not None:
            self.assertIn('Tukey HSD', text)


if __name__ == '__main__':
    unittest.main()
