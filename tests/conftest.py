# tests/conftest.py
import numpy as np
import pytest
from loguru import logger

from dataset.synthetic import make_blob_rows, make_linear_rows


@pytest.fixture(autouse=True)
def disable_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


@pytest.fixture
def linear_rows():
    """y = 2*x1 + 3*x2, no noise, standard normal features."""
    return make_linear_rows(n_samples=600, coefficients=(2.0, 3.0), seed=7)


@pytest.fixture
def blob_rows():
    """Three linearly separable clusters labelled A, B, C."""
    return make_blob_rows(n_samples=600, seed=11)


@pytest.fixture
def write_csv(tmp_path):
    """Write text to a CSV file under tmp_path and return its path."""
    def _write(text: str, name: str = "data.csv") -> str:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)
    return _write
