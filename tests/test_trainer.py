import numpy as np
import pytest

from dqn import DQNPolicy, TrainConfig, Trainer, build_collector
from dqn.collector import Collector
from dqn.replay_buffer import ReplayBuffer
from envs import CartPoleEnv, DummyVecEnv
import train


def test_integration_cartpole_dqn():
    env = DummyVecEnv([CartPoleEnv(max_steps=500)])
    policy = DQNPolicy(obs_dim=4, n_actions=2, gamma=0.99, epsilon=0.5)
    collector = Collector(env, policy, ReplayBuffer(1000))

    trainer = Trainer(collector, max_epochs=2, step_per_epoch=20, batch_size=16,
                      progress=False)
    history = trainer.train()

    assert [s.epoch for s in history] == [1, 2]
    assert all(s.steps == 20 for s in history)
    # 预热 10 步 + 第一个 epoch 20 步 >= 16，所以每个 epoch 都会学习
    assert [s.updates for s in history] == [1, 1]
    assert policy.update_count == 2
    assert collector.buffer_len() == 50


def test_trainer_skips_updates_during_warmup(make_counter_vec_env):
    policy = DQNPolicy(obs_dim=1, n_actions=2)
    collector = Collector(make_counter_vec_env(n_envs=2, max_steps=5), policy, ReplayBuffer(100))
    seen = []
    trainer = Trainer(collector, max_epochs=3, step_per_epoch=4, batch_size=10,
                      warmup_steps=0, progress=False, epoch_callback=seen.append)
    history = trainer.train()

    assert [s.updates for s in history] == [0, 0, 1]
    assert [s.n_episodes for s in history] == [0, 0, 2]
    assert history[2].mean_return == 5.0
    assert history[0].mean_return is None
    assert seen == history


def test_from_config_builds_everything():
    config = TrainConfig(n_envs=2, max_episode_steps=50, replay_capacity=200, batch_size=8,
                         step_per_epoch=16, max_epochs=2, target_update_freq=1, seed=7)
    trainer = Trainer.from_config(config, progress=False)
    policy = trainer.collector.policy
    assert isinstance(policy, DQNPolicy)
    assert policy.obs_dim == 4
    assert policy.n_actions == 2
    assert len(trainer.collector.env) == 2

    history = trainer.train()
    assert len(history) == 2
    assert policy.update_count == 2


def test_build_collector_counter_env():
    config = TrainConfig(env_name='Counter', max_episode_steps=5, batch_size=4)
    collector = build_collector(config)
    assert collector.policy.obs_dim == 1
    assert collector.collect(5) == [5.0]


@pytest.mark.parametrize("kwargs", [
    {"gamma": -0.1},
    {"epsilon": 1.1},
    {"target_update_freq": 0},
    {"replay_capacity": 0},
    {"batch_size": 0},
    {"warmup_steps": -1},
    {"grad_clip": 0.0},
])
def test_config_validation(kwargs):
    with pytest.raises(ValueError):
        TrainConfig(**kwargs)


def test_config_is_frozen():
    config = TrainConfig()
    with pytest.raises(AttributeError):
        config.gamma = 0.5


def test_cli_args_map_to_config():
    args = train.parse_args(['--n_envs', '4', '--lr', '0.01', '--epsilon', '0.2',
                             '--env', 'Counter', '--seed', '3'])
    config = train.config_from_args(args)
    assert config.n_envs == 4
    assert config.learning_rate == 0.01
    assert config.epsilon == 0.2
    assert config.env_name == 'Counter'
    assert config.seed == 3


def test_build_collector_gym_env_limits_and_seeds():
    config = TrainConfig(env_name='gym:CartPole-v1', n_envs=2, max_episode_steps=3, seed=5)
    collector = build_collector(config)
    first = collector.env.reset()
    # 每个槽位的种子不同
    assert not np.array_equal(first[0], first[1])

    dones = [[r.done for r in collector.env.step([0, 0])] for _ in range(3)]
    assert dones[-1] == [True, True]
    assert dones[0] == [False, False]

    again = build_collector(config).env.reset()
    assert all(np.array_equal(a, b) for a, b in zip(first, again))


def test_epoch_loss_only_reported_after_update(make_counter_vec_env):
    policy = DQNPolicy(obs_dim=1, n_actions=2)
    collector = Collector(make_counter_vec_env(n_envs=2, max_steps=5), policy, ReplayBuffer(100))
    collector.collect(10)
    collector.train_step(4)
    assert policy.last_loss is not None

    trainer = Trainer(collector, max_epochs=1, step_per_epoch=2, batch_size=4,
                      warmup_steps=0, update_per_epoch=0, progress=False)
    (stats,) = trainer.train()
    assert stats.updates == 0
    assert stats.loss is None
