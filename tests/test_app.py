from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
from streamlit.testing.v1 import AppTest  # noqa: E402

import arkham_calc  # noqa: E402
from app import STATUS_LABELS, plot_success_curve  # noqa: E402
from arkham_calc import StatusMode, success_table  # noqa: E402


class TestSuccessCurve:
    """Tests for the chart shown on the Streamlit page"""

    def test_one_bar_per_row(self):
        fig = plot_success_curve(success_table(5, StatusMode.NORMAL), needed=2)
        ax = fig.axes[0]
        assert len(ax.patches) == 6
        heights = [bar.get_height() for bar in ax.patches]
        assert heights[0] == 100.0
        assert heights == sorted(heights, reverse=True)
        plt.close(fig)

    def test_highlights_needed(self):
        fig = plot_success_curve(success_table(3, StatusMode.BLESSED), needed=2)
        bars = fig.axes[0].patches
        assert bars[2].get_facecolor() != bars[1].get_facecolor()
        plt.close(fig)

    def test_empty_table(self):
        assert plot_success_curve([]) is None

    def test_every_status_labelled(self):
        assert set(STATUS_LABELS) == set(StatusMode)


APP_PATH = str(Path(__file__).resolve().parent.parent / "app.py")


class TestCalculatorPage:
    """Runs the Streamlit page end to end"""

    def test_default_inputs(self):
        at = AppTest.from_file(APP_PATH, default_timeout=30).run()
        assert not at.exception
        assert at.metric[0].label == "Chance of Success"
        assert at.metric[0].value == "33.33%"
        assert at.caption[0].value == "Successes on: 5, 6"
        assert at.radio[0].options == ["Normal", "Cursed", "Blessed"]

    def test_recomputes_on_change(self):
        at = AppTest.from_file(APP_PATH, default_timeout=30).run()
        at.number_input[0].set_value(5).run()
        at.number_input[1].set_value(2).run()
        assert not at.exception
        assert at.metric[0].value == "53.91%"

    def test_sample_roll(self):
        at = AppTest.from_file(APP_PATH, default_timeout=30).run()
        at.button[0].click().run()
        assert not at.exception
        assert len(at.code) == 1
        assert len(at.success) + len(at.warning) == 1

    def test_invalid_input_shows_error(self, monkeypatch):
        def reject(**kwargs):
            raise ValueError("Unknown status: 'lucky'")

        monkeypatch.setattr(arkham_calc, "SuccessCheck", reject)
        at = AppTest.from_file(APP_PATH, default_timeout=30).run()
        assert not at.exception
        assert "Invalid input" in at.error[0].value
        assert len(at.metric) == 0
