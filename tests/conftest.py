import jax.numpy as jnp
import pytest

from astroframes.config import set_dtype


@pytest.fixture(autouse=True)
def _ensure_float64():
    """Set float64 precision before every test.

    With pytest-xdist, each worker process starts fresh; tests that narrow
    the dtype (test_config.py) restore it themselves, but this fixture
    guarantees every other test sees float64.
    """
    set_dtype(jnp.float64)
