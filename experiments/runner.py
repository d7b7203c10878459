"""
Training-size sweep: train on growing row prefixes and evaluate each model.

The dataset is expanded once; every experiment takes the view X[:size],
trains a fresh model on it (one classifier per class for multi-class
problems), and scores held-out rows that are never part of that prefix.
Each experiment draws from its own random stream spawned from the
configured seed, so results do not depend on which other sizes run.
"""

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np
from loguru import logger

from config import RunConfig
from dataset.csv_loader import RawDataset, read_rows
from evaluation.evaluator import EvaluationResult, Evaluator
from gradient_descent.cost import cost_for
from gradient_descent.exceptions import ConfigurationError, MalformedRowError
from gradient_descent.features import FeatureExpander
from gradient_descent.hypothesis import ProblemType
from gradient_descent.labels import LabelMap
from gradient_descent.one_vs_rest import OneVsRestClassifier
from gradient_descent.optimizer import GradientDescentOptimizer


@dataclass
class PreparedData:
    """Expanded dataset shared read-only by every experiment."""
    X: np.ndarray
    y: np.ndarray
    feature_names: List[str]
    label_map: Optional[LabelMap] = None

    @property
    def n_rows(self) -> int:
        return self.X.shape[0]


@dataclass
class ExperimentResult:
    """Results from training and evaluating at one training-set size."""
    training_size: int
    elapsed: float      # Training + evaluation, seconds
    train_time: float   # Training only, seconds
    iterations: int     # Summed over classifiers for one-vs-rest
    evaluation: EvaluationResult
    final_costs: Dict[str, float] = field(default_factory=dict)
    stop_reasons: Dict[str, str] = field(default_factory=dict)
    thetas: Dict[str, List[float]] = field(default_factory=dict, repr=False)

    def to_dict(self) -> dict:
        return {
            'training_size': self.training_size,
            'elapsed': self.elapsed,
            'train_time': self.train_time,
            'iterations': self.iterations,
            'final_costs': self.final_costs,
            'stop_reasons': self.stop_reasons,
            'thetas': self.thetas,
            'evaluation': self.evaluation.to_dict(),
        }


class ExperimentRunner:
    """
    Run the configured training-size sweep.

    Usage:
        runner = ExperimentRunner(config)
        results = runner.run()                # reads config.data.path
        results = runner.run(dataset=rows)    # in-memory RawDataset
    """

    def __init__(self, config: RunConfig):
        self.config = config.validate()
        self.problem = config.experiment.problem
        self.data: Optional[PreparedData] = None

    # =========================================================================
    # Data preparation
    # =========================================================================

    def load(self) -> RawDataset:
        """Read the configured input file."""
        data_cfg = self.config.data
        if not data_cfg.path:
            raise ConfigurationError("No input file configured (data.path)")
        return read_rows(data_cfg.path, delimiter=data_cfg.delimiter,
                         has_header=data_cfg.has_header)

    def build_label_map(self, dataset: RawDataset) -> Optional[LabelMap]:
        """Label policy for the problem type; None for regression."""
        data_cfg = self.config.data
        if self.problem is ProblemType.REGRESSION:
            return None
        if self.problem is ProblemType.BINARY:
            return LabelMap.binary(data_cfg.positive_label, data_cfg.negative_label,
                                   strict=data_cfg.strict_labels)
        if data_cfg.class_labels:
            return LabelMap(data_cfg.class_labels, fallback_name=data_cfg.fallback_label,
                            strict=data_cfg.strict_labels)

        n_fields = dataset.n_fields
        label_index = data_cfg.label_column + n_fields if data_cfg.label_column < 0 \
            else data_cfg.label_column
        if not 0 <= label_index < n_fields:
            raise ConfigurationError(
                f"label_column {data_cfg.label_column} out of range for {n_fields} fields")
        labels = [row[label_index] for row in dataset.rows if len(row) > label_index]
        label_map = LabelMap.infer(labels, fallback_name=data_cfg.fallback_label)
        logger.info("Inferred {} classes: {}", len(label_map), label_map.categories)
        return label_map

    def prepare(self, dataset: RawDataset) -> PreparedData:
        """Expand the whole dataset once."""
        data_cfg = self.config.data
        label_map = self.build_label_map(dataset)
        expander = FeatureExpander(
            policy=self.config.features.policy(),
            label_column=data_cfg.label_column,
            ignore_columns=data_cfg.ignore_columns,
            label_map=label_map,
        )

        input_names = None
        if dataset.header is not None:
            _, feature_indices = expander.resolve_columns(len(dataset.header))
            input_names = [dataset.header[i] for i in feature_indices]

        try:
            X, y = expander.fit_transform(dataset.rows, input_names)
        except MalformedRowError as e:
            if e.line is None and e.row is not None and e.row < len(dataset.line_numbers):
                raise MalformedRowError(e.detail, row=e.row,
                                        line=dataset.line_numbers[e.row]) from e
            raise
        if label_map is not None and label_map.unrecognized_count:
            logger.warning("{} rows mapped to fallback category {!r}",
                           label_map.unrecognized_count, label_map.fallback_name)
        logger.info("Feature matrix: {} rows x {} columns ({})",
                    X.shape[0], X.shape[1], ', '.join(expander.policy.names))

        self.data = PreparedData(X=X, y=y, feature_names=expander.feature_names,
                                 label_map=label_map)
        return self.data

    # =========================================================================
    # Experiments
    # =========================================================================

    def _pool_start(self, size: int, sizes: Sequence[int]) -> int:
        if self.config.experiment.holdout == 'after-largest':
            return max(sizes)
        return size

    def check_sizes(self, n_rows: int, sizes: Sequence[int]):
        """Fail before any training if a size or its evaluation pool is impossible."""
        if not sizes:
            raise ConfigurationError("training_sizes must not be empty")
        for size in sizes:
            if size < 1:
                raise ConfigurationError(f"training_sizes must be positive, got {list(sizes)}")
            if size > n_rows:
                raise ConfigurationError(
                    f"Training size {size} exceeds the {n_rows} rows in the dataset")
            if self._pool_start(size, sizes) >= n_rows:
                raise ConfigurationError(
                    f"Training size {size} leaves no held-out rows to evaluate on")

    def make_optimizer(self, rng: np.random.Generator) -> GradientDescentOptimizer:
        opt_cfg = self.config.optimizer
        return GradientDescentOptimizer(
            cost=cost_for(self.problem, opt_cfg.regularization),
            learning_rate=opt_cfg.learning_rate,
            tolerance=opt_cfg.tolerance,
            max_iterations=opt_cfg.max_iterations,
            init=opt_cfg.init,
            on_divergence=opt_cfg.on_divergence,
            rng=rng,
        )

    def run_experiment(self, size: int, data: PreparedData,
                       rng: np.random.Generator,
                       pool_start: Optional[int] = None) -> ExperimentResult:
        """
        Train on the first `size` rows and evaluate on held-out rows.

        `pool_start` is the first row of the evaluation pool (default: per
        the configured holdout policy and training sizes).
        """
        if pool_start is None:
            pool_start = self._pool_start(size, self.config.experiment.training_sizes)
        exp_cfg = self.config.experiment
        start_time = time.time()

        X_train = data.X[:size]
        y_train = data.y[:size]

        if self.problem is ProblemType.MULTICLASS:
            model = OneVsRestClassifier(lambda: self.make_optimizer(rng),
                                        class_codes=data.label_map.codes,
                                        min_confidence=exp_cfg.min_confidence)
            model.fit(X_train, y_train)
            results = {data.label_map.name(code): r for code, r in model.results.items()}
        else:
            model = self.make_optimizer(rng).fit(X_train, y_train)
            results = {'model': model}

        train_time = time.time() - start_time

        evaluator = Evaluator(exp_cfg.test_sample_count, threshold=exp_cfg.threshold, rng=rng)
        indices = evaluator.holdout_indices(pool_start, data.n_rows)
        if self.problem is ProblemType.REGRESSION:
            evaluation = evaluator.evaluate_regression(model.theta, data.X, data.y, indices)
        elif self.problem is ProblemType.BINARY:
            evaluation = evaluator.evaluate_binary(model.theta, data.X, data.y, indices,
                                                   data.label_map)
        else:
            evaluation = evaluator.evaluate_one_vs_rest(model, data.X, data.y, indices,
                                                        data.label_map)

        elapsed = time.time() - start_time

        logger.info("Size {}: {} = {:.4f}, {} iterations, {:.3f}s",
                    size, evaluation.metric, evaluation.value,
                    sum(r.iterations for r in results.values()), elapsed)

        return ExperimentResult(
            training_size=size,
            elapsed=elapsed,
            train_time=train_time,
            iterations=sum(r.iterations for r in results.values()),
            evaluation=evaluation,
            final_costs={name: r.final_cost for name, r in results.items()},
            stop_reasons={name: r.stop_reason.value for name, r in results.items()},
            thetas={name: r.theta.tolist() for name, r in results.items()},
        )

    def run(self, dataset: Optional[RawDataset] = None,
            sizes: Optional[Sequence[int]] = None) -> List[ExperimentResult]:
        """
        Run every training size in order.

        Args:
            dataset: Rows to use instead of reading config.data.path
            sizes: Sizes for this call only (default: config.experiment.training_sizes)

        Returns:
            One ExperimentResult per size
        """
        if sizes is None:
            sizes = self.config.experiment.training_sizes
        sizes = [int(s) for s in sizes]
        if dataset is None:
            dataset = self.load()

        data = self.prepare(dataset)
        self.check_sizes(data.n_rows, sizes)

        seeds = np.random.SeedSequence(self.config.experiment.random_seed).spawn(len(sizes))

        return [
            self.run_experiment(size, data, np.random.default_rng(seed),
                                pool_start=self._pool_start(size, sizes))
            for size, seed in zip(sizes, seeds)
        ]
