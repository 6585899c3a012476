"""
Human-readable output of the analysis: two figures and a Markdown report.

    plot_cv_curve(curve, selected, out_dir / "cv_error_curve.png")
    plot_importance(importance, out_dir / "variable_importance.png")
    write_report(out_dir / "report.md", summary)

Tables are rendered with DataFrame.to_string() inside fenced blocks so the
report reads the same in a terminal and in a Markdown viewer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import matplotlib

matplotlib.use("Agg")  # files only, no display

import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402

from pml_report.evaluate import EvaluationResult  # noqa: E402

logger = logging.getLogger(__name__)


@dataclass
class ReportSummary:
    """Everything the Markdown report needs, collected by the pipeline script."""

    source_file: str
    raw_shape: tuple[int, int]
    cleaned_shape: tuple[int, int]
    train_classes: pd.Series
    test_classes: pd.Series
    cv_curve: pd.DataFrame
    selected_features_per_split: int
    n_trees: int
    oob_error: float
    evaluation: EvaluationResult
    cv_plot: Path | None = None
    importance_plot: Path | None = None
    importance: pd.Series | None = None
    scoring_predictions: pd.DataFrame | None = None
    notes: list[str] = field(default_factory=list)


def plot_cv_curve(curve: pd.DataFrame, selected: int, path: Path | str) -> Path:
    """
    Plot CV error against features per split, with ±1 SE bars and the chosen value marked.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.errorbar(
        curve.index,
        curve["mean_error"],
        yerr=curve["se"],
        marker="o",
        capsize=3,
        label="CV error (±1 SE)",
    )
    ax.axvline(selected, color="tab:red", linestyle="--", label=f"selected = {selected}")
    ax.scatter([selected], [curve.loc[selected, "mean_error"]], color="tab:red", zorder=3, s=60)
    ax.set_title("Cross-validated error vs. features per split")
    ax.set_xlabel("Features tried at each split")
    ax.set_ylabel("Misclassification error")
    ax.grid(True, alpha=0.3)
    ax.legend()
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)

    logger.info("CV curve plot written to %s", path)
    return path


def plot_importance(importance: pd.Series, path: Path | str, top_n: int = 20) -> Path:
    """Horizontal bar chart of the top_n features by mean decrease in Gini."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    top = importance.sort_values(ascending=False).head(top_n)[::-1]
    fig, ax = plt.subplots(figsize=(8, max(3, 0.3 * len(top) + 1)))
    ax.barh(top.index, top.values)
    ax.set_title(f"Variable importance (top {len(top)})")
    ax.set_xlabel("Mean decrease in Gini")
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)

    logger.info("Importance plot written to %s", path)
    return path


def _block(obj: pd.DataFrame | pd.Series) -> str:
    return "```\n" + obj.to_string() + "\n```"


def render_report(summary: ReportSummary) -> str:
    """Build the report text."""
    ev = summary.evaluation
    class_table = pd.DataFrame({
        "train": summary.train_classes,
        "held_out": summary.test_classes,
    }).fillna(0).astype(int)
    class_table["train_share"] = (class_table["train"] / class_table["train"].sum()).round(4)
    class_table["held_out_share"] = (class_table["held_out"] / class_table["held_out"].sum()).round(4)

    lines = [
        "# Weight-lifting activity quality: random forest report",
        "",
        "## Data",
        "",
        f"Source: `{summary.source_file}`, "
        f"{summary.raw_shape[0]} rows x {summary.raw_shape[1]} columns.",
        "",
        f"After cleaning (incomplete and bookkeeping columns removed): "
        f"{summary.cleaned_shape[1] - 1} features + label.",
        "",
        "Class distribution of the seeded, stratified partition:",
        "",
        _block(class_table),
        "",
        "## Features per split",
        "",
        _block(summary.cv_curve.round(4)),
        "",
        f"Selected by the one-standard-error rule: **{summary.selected_features_per_split}**.",
        "",
    ]
    if summary.cv_plot is not None:
        lines += [f"![CV error curve]({summary.cv_plot.name})", ""]

    lines += [
        "## Final model",
        "",
        f"{summary.n_trees} trees, {summary.selected_features_per_split} features per split. "
        f"Out-of-bag error estimate: {summary.oob_error:.4f}.",
        "",
    ]
    if summary.importance is not None:
        lines += ["Top features by mean decrease in Gini:", "", _block(summary.importance.head(10).round(2)), ""]
    if summary.importance_plot is not None:
        lines += [f"![Variable importance]({summary.importance_plot.name})", ""]

    lines += [
        "## Held-out evaluation",
        "",
        _block(ev.confusion),
        "",
        _block(ev.per_class.round(4)),
        "",
        f"- Held-out rows: {ev.n_rows}",
        f"- Accuracy: {ev.accuracy:.4f}",
        f"- Kappa: {ev.kappa:.4f}",
        f"- Misclassification rate: **{ev.error_rate:.4f}**",
        "",
    ]
    if summary.scoring_predictions is not None:
        lines += ["## Predictions for the unlabeled cases", "", _block(summary.scoring_predictions), ""]
    if summary.notes:
        lines += ["## Notes", ""] + [f"- {n}" for n in summary.notes] + [""]

    return "\n".join(lines)


def write_report(path: Path | str, summary: ReportSummary) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_report(summary), encoding="utf-8")
    logger.info("Report written to %s", path)
    return path
