"""
Experiments module.

Runs the training-size sweep and reports it:
- ExperimentRunner: expand once, then train and evaluate per size
- ExperimentResult: structured metrics for one size
- print_report / ResultsDocumenter: console report and file exports
"""

from .runner import ExperimentRunner, ExperimentResult, PreparedData
from .report import ResultsDocumenter, format_experiment, print_report

__all__ = [
    'ExperimentRunner',
    'ExperimentResult',
    'PreparedData',
    'ResultsDocumenter',
    'format_experiment',
    'print_report',
]
