"""
Reporting for training-size sweeps.

- format_experiment / print_report: the human-readable console report
- markdown_table / ResultsDocumenter: export results as JSON, Markdown and
  CSV tables and a learning-curve plot
"""

import csv
import json
import os
from datetime import datetime
from typing import Callable, Dict, List, Optional, TextIO

import numpy as np
from loguru import logger

from evaluation.metrics import plot_learning_curve, print_confusion_matrix

from .runner import ExperimentResult

SEPARATOR = "-" * 35


def format_experiment(result: ExperimentResult) -> str:
    """
    Report block for one training size.

    Classification:
        Size: 100, Elapsed: 0.412 s
        Success rate for CYT: 12 / 30
        ...
        Overall success rate: 57 / 100 (0.5700)

    Regression:
        Size: 100, Elapsed: 0.031 s
        RMSE: 0.0412, MSE: 0.0017 (100 held-out rows)
    """
    evaluation = result.evaluation
    lines = [f"Size: {result.training_size}, Elapsed: {result.elapsed:.3f} s"
             f" ({result.iterations} iterations)"]

    if evaluation.metric == 'rmse':
        lines.append(f"RMSE: {evaluation.value:.4f}, MSE: {evaluation.mse:.4f}"
                     f" ({evaluation.n_samples} held-out rows)")
    else:
        for name, score in evaluation.per_class.items():
            lines.append(f"Success rate for {name}: {score.successes} / {score.total}")
        lines.append(f"Overall success rate: {evaluation.successes} / {evaluation.n_samples}"
                     f" ({evaluation.value:.4f})")

    unconverged = [name for name, reason in result.stop_reasons.items() if reason != 'tolerance']
    if unconverged:
        lines.append("Not converged: " + ", ".join(
            f"{name} ({result.stop_reasons[name]})" for name in unconverged))

    lines.append(SEPARATOR)
    return "\n".join(lines)


def print_report(results: List[ExperimentResult], show_confusion: bool = False):
    """Print every experiment, optionally with its confusion matrix."""
    for result in results:
        print(format_experiment(result))
        evaluation = result.evaluation
        if show_confusion and evaluation.confusion is not None:
            print(print_confusion_matrix(np.array(evaluation.confusion),
                                         evaluation.confusion_labels))
            print(SEPARATOR)


def summary_rows(results: List[ExperimentResult]) -> List[List]:
    """One table row per size: size, metric, value, iterations, train time, elapsed."""
    return [
        [r.training_size, r.evaluation.metric, f"{r.evaluation.value:.4f}",
         r.iterations, f"{r.train_time:.3f}", f"{r.elapsed:.3f}"]
        for r in results
    ]


SUMMARY_HEADERS = ["Size", "Metric", "Value", "Iterations", "Train (s)", "Elapsed (s)"]


def markdown_table(rows: List[List], headers: List[str],
                   title: Optional[str] = None, generated: Optional[str] = None) -> str:
    """Render rows as a Markdown table, optionally under a title line."""
    lines = []
    if title:
        lines += [f"# {title}", ""]
    if generated:
        lines += [f"Generated: {generated}", ""]
    lines.append("| " + " | ".join(headers) + " |")
    lines.append("|" + "|".join(" --- " for _ in headers) + "|")
    lines += ["| " + " | ".join(str(x) for x in row) + " |" for row in rows]
    return "\n".join(lines) + "\n"


class ResultsDocumenter:
    """
    Export sweep results to a directory.

    save_all writes results.json (every metric, plus the run config),
    summary.md and summary.csv (one row per size) and learning_curve.png.
    """

    def __init__(self, results_dir: str):
        """Initialize documenter and create the results directory."""
        self.results_dir = results_dir
        self.timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        os.makedirs(self.results_dir, exist_ok=True)

    def _write(self, filename: str, write: Callable[[TextIO], None], newline=None) -> str:
        path = os.path.join(self.results_dir, filename)
        with open(path, 'w', newline=newline, encoding='utf-8') as f:
            write(f)
        logger.info("Saved: {}", path)
        return path

    def save_all(self, results: List[ExperimentResult],
                 config: Optional[dict] = None,
                 plot: bool = True) -> Dict[str, str]:
        """
        Write every artifact.

        Returns:
            Mapping of artifact name ('json', 'markdown', 'csv', 'plot') to path
        """
        payload = {
            'generated': self.timestamp,
            'config': config,
            'experiments': [r.to_dict() for r in results],
        }
        rows = summary_rows(results)

        paths = {
            'json': self._write(
                "results.json", lambda f: json.dump(payload, f, indent=2, default=str)),
            'markdown': self._write(
                "summary.md", lambda f: f.write(markdown_table(
                    rows, SUMMARY_HEADERS, "Training-Size Sweep", self.timestamp))),
            'csv': self._write(
                "summary.csv", lambda f: csv.writer(f).writerows([SUMMARY_HEADERS] + rows),
                newline=''),
        }

        if plot and results:
            metric = results[0].evaluation.metric
            paths['plot'] = os.path.join(self.results_dir, "learning_curve.png")
            plot_learning_curve(
                [r.training_size for r in results],
                [r.evaluation.value for r in results],
                elapsed=[r.elapsed for r in results],
                metric_name="RMSE" if metric == 'rmse' else "Accuracy",
                save_path=paths['plot'],
            )
            logger.info("Saved: {}", paths['plot'])

        return paths
