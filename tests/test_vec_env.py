import pytest

from envs import ArityMismatchError, CounterEnv, DummyVecEnv, EnvironmentFailure, Step
from envs.base_env import BaseEnv


class FailingEnv(BaseEnv):
    def reset(self):
        return 0.0

    def step(self, action):
        raise EnvironmentFailure("simulation diverged")


def test_reset_returns_one_obs_per_slot(make_counter_vec_env):
    venv = make_counter_vec_env(n_envs=3)
    assert venv.reset() == [0.0, 0.0, 0.0]
    assert len(venv) == 3


def test_auto_reset_after_five_steps():
    venv = DummyVecEnv([CounterEnv(max_steps=5)])
    venv.reset()
    for t in range(1, 5):
        (result,) = venv.step([0])
        assert not result.done
        assert result.obs == float(t)
        assert result.reward == 1.0
        assert result.terminal_obs is None

    (result,) = venv.step([0])
    assert result.done
    assert result.reward == 1.0
    # 返回的是重置后的观测
    assert result.obs == venv.reset()[0]
    assert result.terminal_obs == 5.0
    assert result.info['terminal_observation'] == 5.0


def test_auto_reset_only_affects_finished_slot():
    venv = DummyVecEnv([CounterEnv(max_steps=2), CounterEnv(max_steps=3)])
    venv.reset()
    venv.step([0, 0])
    results = venv.step([0, 0])
    assert [r.done for r in results] == [True, False]
    assert [r.obs for r in results] == [0.0, 2.0]

    results = venv.step([0, 0])
    assert [r.done for r in results] == [False, True]
    assert [r.obs for r in results] == [1.0, 0.0]


def test_step_arity_mismatch(make_counter_vec_env):
    venv = make_counter_vec_env(n_envs=2)
    venv.reset()
    with pytest.raises(ArityMismatchError):
        venv.step([0])
    with pytest.raises(ValueError):
        venv.step([0, 0, 0])


def test_environment_failure_propagates():
    venv = DummyVecEnv([CounterEnv(), FailingEnv()])
    venv.reset()
    with pytest.raises(EnvironmentFailure):
        venv.step([0, 0])


def test_step_unpacks_like_tuple():
    env = CounterEnv(max_steps=1)
    env.reset()
    obs, reward, done, info = env.step(0)
    assert (obs, reward, done, info) == (1.0, 1.0, True, None)
    assert isinstance(env.step(0), Step)


def test_from_fns_and_empty():
    venv = DummyVecEnv.from_fns([lambda: CounterEnv(max_steps=4)] * 2)
    assert venv.n_envs == 2
    assert venv.envs[0] is not venv.envs[1]
    with pytest.raises(ValueError):
        DummyVecEnv([])
