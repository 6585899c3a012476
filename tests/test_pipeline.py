"""
End-to-end test of pipeline/run_analysis.py on synthetic pml-shaped files.

The script resolves its data and output paths against the working directory,
so every test runs from the pml_workdir fixture. Tree counts and the CV grid
are shrunk to keep the run fast.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

import pipeline.run_analysis as run_analysis


@pytest.fixture()
def small_run(pml_workdir: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setitem(run_analysis._cv, "n_trees", 10)
    monkeypatch.setitem(run_analysis._cv, "candidates", [2, 4])
    monkeypatch.setitem(run_analysis._forest, "n_trees", 20)
    monkeypatch.setitem(run_analysis._forest, "n_jobs", 1)
    yield pml_workdir

    # The run log handler points into tmp_path; detach it so later tests don't write there.
    for name in (run_analysis.__name__, "pml_report"):
        logger = logging.getLogger(name)
        for h in [h for h in logger.handlers if isinstance(h, logging.FileHandler)]:
            logger.removeHandler(h)
            h.close()


class TestImport:
    def test_import_creates_no_output_dir(self, pml_workdir: Path) -> None:
        # The run log is attached by main(), not at import.
        assert not any(isinstance(h, logging.FileHandler) for h in run_analysis.logger.handlers)
        assert not (pml_workdir / "reports").exists()


class TestMain:
    def test_writes_report_and_figures(self, small_run: Path) -> None:
        run_analysis.main()
        out = small_run / "reports"
        for name in ("report.md", "cv_error_curve.png", "variable_importance.png", "run.log"):
            assert (out / name).exists(), f"Missing output: {name}"

    def test_report_contents(self, small_run: Path) -> None:
        run_analysis.main()
        text = (small_run / "reports" / "report.md").read_text(encoding="utf-8")
        assert "200 rows x" in text
        assert "6 features + label" in text
        assert "Misclassification rate: **" in text
        assert "![CV error curve](cv_error_curve.png)" in text
        assert "![Variable importance](variable_importance.png)" in text

    def test_unlabeled_cases_scored(self, small_run: Path) -> None:
        run_analysis.main()
        text = (small_run / "reports" / "report.md").read_text(encoding="utf-8")
        assert "Predictions for the unlabeled cases" in text
        assert "problem_id" in text
        assert "Unlabeled scoring file not found" not in text

    def test_missing_scoring_file_noted(self, small_run: Path) -> None:
        (small_run / "data" / "pml-testing.csv").unlink()
        run_analysis.main()
        text = (small_run / "reports" / "report.md").read_text(encoding="utf-8")
        assert "Predictions for the unlabeled cases" not in text
        assert "Unlabeled scoring file not found" in text

    def test_importance_disabled_skips_chart(self, small_run: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setitem(run_analysis._forest, "compute_importance", False)
        run_analysis.main()
        assert not (small_run / "reports" / "variable_importance.png").exists()
        assert (small_run / "reports" / "report.md").exists()

    def test_missing_training_file_is_fatal(self, small_run: Path) -> None:
        (small_run / "data" / "pml-training.csv").unlink()
        with pytest.raises(FileNotFoundError):
            run_analysis.main()
