import numpy as np
import pytest

from envs import CounterEnv, DummyVecEnv


@pytest.fixture
def rng():
    return np.random.default_rng(0)


@pytest.fixture
def make_counter_vec_env():
    def _make(n_envs=2, max_steps=5):
        return DummyVecEnv([CounterEnv(max_steps=max_steps) for _ in range(n_envs)])
    return _make
