#!/usr/bin/env python3
"""
Gradient Descent Trainer - Main Entry Point

Trains regression or classification models by batch gradient descent on a
CSV file and reports timing and accuracy for several training-set sizes.

Usage:
    python main.py data.csv --problem regression --sizes 10 100 1000
    python main.py yeast.csv --problem multiclass-classification --expand cube
    python main.py --config run.json
    python main.py data.csv --results-dir results   # also export JSON/MD/CSV/PNG
"""

import argparse
import sys
from typing import List, Optional

from loguru import logger

from config import RunConfig, get_default_config, load_config
from experiments import ExperimentRunner, ResultsDocumenter, print_report
from gradient_descent.exceptions import GradientDescentError
from gradient_descent.hypothesis import ProblemType
from utils.logger import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Batch gradient descent trainer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python main.py data.csv --header --alpha 0.01 --lambda 100
    python main.py yeast.csv --problem multiclass-classification --ignore-columns 0 \\
        --labels CYT NUC MIT ME3 ME2 ME1 EXC VAC POX ERL --expand cube --init random
        """
    )

    parser.add_argument('data', nargs='?', help='Input CSV file')
    parser.add_argument('--config', help='JSON configuration file (flags override it)')

    data = parser.add_argument_group('data')
    data.add_argument('--delimiter', help='Field separator')
    data.add_argument('--header', action='store_true', default=None,
                      help='Skip the first line as a header')
    data.add_argument('--label-column', type=int, help='Index of the label field')
    data.add_argument('--ignore-columns', type=int, nargs='+', help='Fields to drop')
    data.add_argument('--labels', nargs='+', help='Known class labels (multi-class)')
    data.add_argument('--positive-label', help='Positive label (binary)')
    data.add_argument('--negative-label', help='Negative label (binary)')
    data.add_argument('--fallback-label',
                      help='Category name reported for unrecognized labels (multi-class)')
    data.add_argument('--strict-labels', action='store_true', default=None,
                      help='Fail on unrecognized labels instead of using the fallback')

    model = parser.add_argument_group('model')
    model.add_argument('--problem', choices=[p.value for p in ProblemType],
                       help='Problem type')
    model.add_argument('--expand', nargs='+',
                       help='none, square, cube, pairwise-interaction, normalize')
    model.add_argument('--centering', choices=['mean', 'midpoint'],
                       help='Normalization center')
    model.add_argument('--alpha', type=float, help='Learning rate')
    model.add_argument('--lambda', dest='regularization', type=float,
                       help='Regularization strength')
    model.add_argument('--tolerance', type=float, help='Convergence tolerance')
    model.add_argument('--max-iterations', type=int, help='Iteration cap')
    model.add_argument('--init', choices=['zero', 'random'], help='Initial theta')
    model.add_argument('--on-divergence', choices=['raise', 'warn'],
                       help='Abort or warn when the cost increases')

    experiment = parser.add_argument_group('experiment')
    experiment.add_argument('--sizes', type=int, nargs='+', help='Training-set sizes')
    experiment.add_argument('--test-samples', type=int, help='Held-out rows per size')
    experiment.add_argument('--seed', type=int, help='Random seed')
    experiment.add_argument('--holdout', choices=['after-cutoff', 'after-largest'],
                            help='Evaluation pool policy')
    experiment.add_argument('--min-confidence', type=float,
                            help='One-vs-rest baseline confidence')

    output = parser.add_argument_group('output')
    output.add_argument('--results-dir', help='Export results to this directory')
    output.add_argument('--confusion', action='store_true',
                        help='Print confusion matrices (multi-class)')
    output.add_argument('--log-level', help='DEBUG, INFO, WARNING, ...')
    output.add_argument('--log-dir', help='Also write log files here')

    return parser


# (argument name, config section, config attribute)
OVERRIDES = [
    ('data', 'data', 'path'),
    ('delimiter', 'data', 'delimiter'),
    ('header', 'data', 'has_header'),
    ('label_column', 'data', 'label_column'),
    ('ignore_columns', 'data', 'ignore_columns'),
    ('labels', 'data', 'class_labels'),
    ('positive_label', 'data', 'positive_label'),
    ('negative_label', 'data', 'negative_label'),
    ('fallback_label', 'data', 'fallback_label'),
    ('strict_labels', 'data', 'strict_labels'),
    ('problem', 'experiment', 'problem_type'),
    ('expand', 'features', 'expansion'),
    ('centering', 'features', 'centering'),
    ('alpha', 'optimizer', 'learning_rate'),
    ('regularization', 'optimizer', 'regularization'),
    ('tolerance', 'optimizer', 'tolerance'),
    ('max_iterations', 'optimizer', 'max_iterations'),
    ('init', 'optimizer', 'init'),
    ('on_divergence', 'optimizer', 'on_divergence'),
    ('sizes', 'experiment', 'training_sizes'),
    ('test_samples', 'experiment', 'test_sample_count'),
    ('seed', 'experiment', 'random_seed'),
    ('holdout', 'experiment', 'holdout'),
    ('min_confidence', 'experiment', 'min_confidence'),
    ('log_level', 'log', 'level'),
    ('log_dir', 'log', 'dir'),
]


def config_from_args(args: argparse.Namespace) -> RunConfig:
    """Defaults, then the JSON file, then command-line flags."""
    config = load_config(args.config) if args.config else get_default_config()
    for arg_name, section, attribute in OVERRIDES:
        value = getattr(args, arg_name)
        if value is not None:
            setattr(getattr(config, section), attribute, value)
    if args.results_dir is not None:
        config.results_dir = args.results_dir
    return config.validate()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
    except GradientDescentError as e:
        setup_logging()
        logger.error("Invalid configuration: {}", e)
        return 1

    setup_logging(config.log.level, config.log.dir,
                  config.log.rotation, config.log.retention)

    print("=" * 50)
    print("Gradient Descent Trainer")
    print(f"Problem: {config.experiment.problem_type}, "
          f"alpha={config.optimizer.learning_rate}, lambda={config.optimizer.regularization}")
    print("=" * 50)

    try:
        results = ExperimentRunner(config).run()
    except GradientDescentError as e:
        logger.error("Run failed: {}", e)
        return 1

    print_report(results, show_confusion=args.confusion)

    if config.results_dir:
        paths = ResultsDocumenter(config.results_dir).save_all(results, config.to_dict())
        print(f"\nResults saved to: {config.results_dir}/")
        for name, path in paths.items():
            print(f"  - {path} ({name})")

    return 0


if __name__ == "__main__":
    sys.exit(main())
