# tests/conftest.py

import numpy as np
import pandas as pd
import pytest
from loguru import logger

from pyagree.config import reset_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    """Make every test read settings from the (possibly patched) environment."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]))
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def worked_table() -> np.ndarray:
    """Three subjects, two raters each: agree on A, agree on B, split."""
    return np.array([[2, 0], [0, 2], [1, 1]])


@pytest.fixture
def mixed_raters_table() -> np.ndarray:
    """Unequal rater counts, including one subject rated only once."""
    return np.array([[3, 0], [0, 2], [1, 1], [1, 0]])


@pytest.fixture
def unanimous_table() -> np.ndarray:
    """Every subject receives the same category from all of its raters."""
    return np.array([[3, 0, 0], [0, 3, 0], [3, 0, 0], [0, 0, 3]])


@pytest.fixture
def ordinal_frame() -> pd.DataFrame:
    """Ten subjects rated by four raters on a five-point scale."""
    counts = [
        [4, 0, 0, 0, 0],
        [0, 3, 1, 0, 0],
        [0, 0, 4, 0, 0],
        [0, 1, 2, 1, 0],
        [0, 0, 0, 3, 1],
        [1, 3, 0, 0, 0],
        [0, 0, 1, 3, 0],
        [0, 0, 0, 0, 4],
        [2, 2, 0, 0, 0],
        [0, 0, 0, 1, 3],
    ]
    return pd.DataFrame(counts, columns=["1", "2", "3", "4", "5"])
