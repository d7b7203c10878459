"""
Gradient Descent Trainer - Global Configuration

This module contains the default constants and the dataclass sections that
make up a run configuration. A configuration can be loaded from a JSON file
whose top-level keys are the section names:

    {
        "data": {"path": "Data.csv", "has_header": true},
        "optimizer": {"learning_rate": 0.01, "regularization": 100},
        "experiment": {"problem_type": "regression", "training_sizes": [10, 100, 1000]}
    }
"""

import json
from dataclasses import dataclass, field, asdict, fields
from typing import List, Optional

from gradient_descent.exceptions import ConfigurationError
from gradient_descent.features import ExpansionPolicy
from gradient_descent.hypothesis import ProblemType

# =============================================================================
# DATA SETTINGS
# =============================================================================
DELIMITER = ','
HAS_HEADER = False
LABEL_COLUMN = -1  # Last field holds the label
FALLBACK_LABEL = 'other'  # Multi-class category for unrecognized labels
POSITIVE_LABEL = '1'  # Binary classification
NEGATIVE_LABEL = '0'

# =============================================================================
# FEATURE EXPANSION
# =============================================================================
EXPANSION = ['none']  # any of: none, square, cube, pairwise-interaction, normalize
CENTERING = 'mean'  # 'mean' or 'midpoint'

# =============================================================================
# OPTIMIZER
# =============================================================================
LEARNING_RATE = 0.1  # α
REGULARIZATION = 0.0  # λ (0 disables regularization)
TOLERANCE = 1e-4  # Minimum cost decrease per iteration
MAX_ITERATIONS = 100_000
THETA_INIT = 'zero'  # 'zero' or 'random'
ON_DIVERGENCE = 'raise'  # 'raise' or 'warn'

# =============================================================================
# EXPERIMENTS
# =============================================================================
TRAINING_SIZES = [10, 100, 500, 1000]
TEST_SAMPLE_COUNT = 100
PROBLEM_TYPE = ProblemType.REGRESSION.value
RANDOM_SEED = 42
HOLDOUT_POLICY = 'after-cutoff'  # 'after-cutoff' or 'after-largest'
MIN_CONFIDENCE = 0.0  # One-vs-rest baseline confidence
THRESHOLD = 0.5  # Binary decision threshold

# =============================================================================
# LOGGING AND OUTPUT
# =============================================================================
LOG_LEVEL = 'INFO'
LOG_ROTATION = '1 day'
LOG_RETENTION = '30 days'
RESULTS_DIR = 'results'

HOLDOUT_POLICIES = ('after-cutoff', 'after-largest')

# =============================================================================
# DATACLASSES FOR CONFIGURATION
# =============================================================================

@dataclass
class DataConfig:
    """Input file configuration."""
    path: Optional[str] = None
    delimiter: str = DELIMITER
    has_header: bool = HAS_HEADER
    label_column: int = LABEL_COLUMN
    ignore_columns: List[int] = field(default_factory=list)
    class_labels: Optional[List[str]] = None  # None: infer for multi-class
    fallback_label: str = FALLBACK_LABEL
    positive_label: str = POSITIVE_LABEL
    negative_label: str = NEGATIVE_LABEL
    strict_labels: bool = False


@dataclass
class FeatureConfig:
    """Feature expansion configuration."""
    expansion: List[str] = field(default_factory=lambda: list(EXPANSION))
    centering: str = CENTERING

    def policy(self) -> ExpansionPolicy:
        return ExpansionPolicy.from_names(self.expansion, centering=self.centering)


@dataclass
class OptimizerConfig:
    """Gradient descent configuration."""
    learning_rate: float = LEARNING_RATE
    regularization: float = REGULARIZATION
    tolerance: float = TOLERANCE
    max_iterations: int = MAX_ITERATIONS
    init: str = THETA_INIT
    on_divergence: str = ON_DIVERGENCE


@dataclass
class ExperimentConfig:
    """Training-size sweep and evaluation configuration."""
    problem_type: str = PROBLEM_TYPE
    training_sizes: List[int] = field(default_factory=lambda: list(TRAINING_SIZES))
    test_sample_count: int = TEST_SAMPLE_COUNT
    random_seed: Optional[int] = RANDOM_SEED
    holdout: str = HOLDOUT_POLICY
    min_confidence: float = MIN_CONFIDENCE
    threshold: float = THRESHOLD

    @property
    def problem(self) -> ProblemType:
        return ProblemType(self.problem_type)


@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = LOG_LEVEL
    dir: Optional[str] = None  # None: console only
    rotation: str = LOG_ROTATION
    retention: str = LOG_RETENTION


@dataclass
class RunConfig:
    """Complete configuration of one run."""
    data: DataConfig = field(default_factory=DataConfig)
    features: FeatureConfig = field(default_factory=FeatureConfig)
    optimizer: OptimizerConfig = field(default_factory=OptimizerConfig)
    experiment: ExperimentConfig = field(default_factory=ExperimentConfig)
    log: LogConfig = field(default_factory=LogConfig)
    results_dir: Optional[str] = None

    def validate(self) -> 'RunConfig':
        """
        Check ranges and enum values.

        Raises:
            ConfigurationError: first invalid value found
        """
        opt = self.optimizer
        exp = self.experiment

        if opt.learning_rate <= 0:
            raise ConfigurationError(f"learning_rate must be > 0, got {opt.learning_rate}")
        if opt.regularization < 0:
            raise ConfigurationError(f"regularization must be >= 0, got {opt.regularization}")
        if opt.tolerance < 0:
            raise ConfigurationError(f"tolerance must be >= 0, got {opt.tolerance}")
        if opt.max_iterations < 1:
            raise ConfigurationError(f"max_iterations must be >= 1, got {opt.max_iterations}")
        if opt.init not in ('zero', 'random'):
            raise ConfigurationError(f"init must be 'zero' or 'random', got {opt.init!r}")
        if opt.on_divergence not in ('raise', 'warn'):
            raise ConfigurationError(
                f"on_divergence must be 'raise' or 'warn', got {opt.on_divergence!r}")

        try:
            exp.problem
        except ValueError:
            choices = [p.value for p in ProblemType]
            raise ConfigurationError(
                f"problem_type must be one of {choices}, got {exp.problem_type!r}") from None
        if not exp.training_sizes:
            raise ConfigurationError("training_sizes must not be empty")
        if any(int(size) < 1 for size in exp.training_sizes):
            raise ConfigurationError(f"training_sizes must be positive, got {exp.training_sizes}")
        if exp.test_sample_count < 1:
            raise ConfigurationError(
                f"test_sample_count must be >= 1, got {exp.test_sample_count}")
        if exp.holdout not in HOLDOUT_POLICIES:
            raise ConfigurationError(
                f"holdout must be one of {HOLDOUT_POLICIES}, got {exp.holdout!r}")
        if not 0.0 < exp.threshold < 1.0:
            raise ConfigurationError(f"threshold must be in (0, 1), got {exp.threshold}")

        # Raises ConfigurationError for unknown names or centering
        self.features.policy()
        return self

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, values: dict) -> 'RunConfig':
        sections = {
            'data': DataConfig,
            'features': FeatureConfig,
            'optimizer': OptimizerConfig,
            'experiment': ExperimentConfig,
            'log': LogConfig,
        }
        unknown = set(values) - set(sections) - {'results_dir'}
        if unknown:
            raise ConfigurationError(f"Unknown configuration sections: {sorted(unknown)}")

        kwargs = {'results_dir': values.get('results_dir')}
        for name, section_cls in sections.items():
            kwargs[name] = _build_section(section_cls, values.get(name, {}), name)
        return cls(**kwargs)


def _build_section(section_cls, values: dict, name: str):
    if not isinstance(values, dict):
        raise ConfigurationError(f"Section '{name}' must be an object, got {type(values).__name__}")
    known = {f.name for f in fields(section_cls)}
    unknown = set(values) - known
    if unknown:
        raise ConfigurationError(f"Unknown keys in '{name}': {sorted(unknown)}")
    return section_cls(**values)


def load_config(path: str) -> RunConfig:
    """Load and validate a JSON configuration file."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            values = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read configuration {path}: {e}") from e
    if not isinstance(values, dict):
        raise ConfigurationError(f"Configuration {path} must hold a JSON object")
    return RunConfig.from_dict(values).validate()


def get_default_config() -> RunConfig:
    """Get default configuration objects."""
    return RunConfig()
